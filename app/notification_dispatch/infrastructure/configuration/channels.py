"""Per-channel provider settings."""

from typing import Dict

from pydantic import Field

from notification_dispatch.infrastructure.configuration.base import ChannelSettings

DEFAULT_SENDER = "noreply@notification-service.local"


class EmailProviderSettings(ChannelSettings):
    """Email channel configuration.

    Environment Variables:
        EMAIL_PROVIDER: Provider name (default: mock)
        EMAIL_ENABLED: Enable the email channel (default: True)
        EMAIL_SETTINGS: JSON object of provider settings, e.g.
            ``{"default_sender": "alerts@example.com"}``

    Example:
        ```python
        from notification_dispatch.infrastructure.configuration import get_settings

        sender = get_settings().email.default_sender
        ```
    """

    provider: str = Field(default="mock", alias="EMAIL_PROVIDER")
    enabled: bool = Field(default=True, alias="EMAIL_ENABLED")
    settings: Dict[str, str] = Field(default_factory=dict, alias="EMAIL_SETTINGS")

    @property
    def default_sender(self) -> str:
        return self.settings.get("default_sender") or DEFAULT_SENDER


class SMSProviderSettings(ChannelSettings):
    """SMS channel configuration.

    Environment Variables:
        SMS_PROVIDER: Provider name (default: mock)
        SMS_ENABLED: Enable the SMS channel (default: True)
        SMS_SETTINGS: JSON object of provider settings
    """

    provider: str = Field(default="mock", alias="SMS_PROVIDER")
    enabled: bool = Field(default=True, alias="SMS_ENABLED")
    settings: Dict[str, str] = Field(default_factory=dict, alias="SMS_SETTINGS")


class PushProviderSettings(ChannelSettings):
    """Push channel configuration.

    Environment Variables:
        PUSH_PROVIDER: Provider name (default: mock)
        PUSH_ENABLED: Enable the push channel (default: True)
        PUSH_SETTINGS: JSON object of provider settings
    """

    provider: str = Field(default="mock", alias="PUSH_PROVIDER")
    enabled: bool = Field(default=True, alias="PUSH_ENABLED")
    settings: Dict[str, str] = Field(default_factory=dict, alias="PUSH_SETTINGS")
