"""Configuration public API.

Exports:
    get_settings: Cached Settings instance (main configuration object)
    Settings: Main settings class (for testing/overrides)
    ChannelSettings: Provider selection handed to a channel service

Example:
    ```python
    from notification_dispatch.infrastructure.configuration import get_settings

    settings = get_settings()
    email_provider = settings.email.provider
    ```
"""

from notification_dispatch.infrastructure.configuration.base import (
    ChannelSettings,
    DispatchSettings,
)
from notification_dispatch.infrastructure.configuration.channels import (
    DEFAULT_SENDER,
    EmailProviderSettings,
    PushProviderSettings,
    SMSProviderSettings,
)
from notification_dispatch.infrastructure.configuration.settings import (
    Settings,
    get_settings,
)

__all__ = [
    "ChannelSettings",
    "DispatchSettings",
    "DEFAULT_SENDER",
    "EmailProviderSettings",
    "PushProviderSettings",
    "SMSProviderSettings",
    "Settings",
    "get_settings",
]
