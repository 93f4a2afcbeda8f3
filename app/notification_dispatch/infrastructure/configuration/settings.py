"""Notification dispatch configuration settings - main aggregator."""

from functools import lru_cache

from pydantic import Field

from notification_dispatch.infrastructure.configuration.base import DispatchSettings
from notification_dispatch.infrastructure.configuration.channels import (
    EmailProviderSettings,
    PushProviderSettings,
    SMSProviderSettings,
)


class Settings(DispatchSettings):
    """Notification dispatch settings - main aggregator.

    Environment Variables:
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        ENVIRONMENT: Deployment environment name (default: development)
        SERVICE_NAME: Name reported in logs

    Example:
        ```python
        from notification_dispatch.infrastructure.configuration import get_settings

        settings = get_settings()

        if settings.sms.enabled:
            service = SMSService(settings.sms)
        ```
    """

    LOG_LEVEL: str = Field(default="INFO", alias="LOG_LEVEL")
    ENVIRONMENT: str = Field(default="development", alias="ENVIRONMENT")
    SERVICE_NAME: str = Field(default="notification-dispatch", alias="SERVICE_NAME")

    email: EmailProviderSettings
    sms: SMSProviderSettings
    push: PushProviderSettings

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            "email": EmailProviderSettings,
            "sms": SMSProviderSettings,
            "push": PushProviderSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings singleton."""
    return Settings()
