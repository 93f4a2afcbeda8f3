"""Shared base classes for settings modules."""

from typing import Dict

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DispatchSettings(BaseSettings):
    """Base class for every settings class in the package.

    Ensures consistent configuration behavior (env file loading, case
    sensitivity) and lets tests pass values by field name instead of alias.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
        populate_by_name=True,
    )


class ChannelSettings(DispatchSettings):
    """Provider selection for one channel.

    This is the configuration a channel service receives: which provider to
    resolve, whether the channel is enabled, and free-form provider settings.
    Channel subclasses bind these fields to prefixed environment variables.
    """

    provider: str = Field(default="mock", description="Registered provider name")
    enabled: bool = Field(default=True, description="Enable the channel")
    settings: Dict[str, str] = Field(
        default_factory=dict,
        description="Free-form provider settings (JSON object in the environment)",
    )
