"""Provider registry and helpers for notification providers.

Providers register under a ``(channel, name)`` key with the
``register_provider`` decorator. Services resolve the configured provider
through ``create_provider``; provider modules in this package are imported on
first use so their decorators run.

Example:
    @register_provider(NotificationType.SMS, "mock")
    class MockSMSProvider(SMSProvider):
        ...

    provider = create_provider(NotificationType.SMS, settings.sms)
"""

from __future__ import annotations

import importlib
import pkgutil
from typing import TYPE_CHECKING, Dict, Optional, Tuple, Type

from notification_dispatch.errors import ErrorCode, NotificationError
from notification_dispatch.infrastructure.logging import get_module_logger
from notification_dispatch.models import NotificationType
from notification_dispatch.providers.base import NotificationProvider

if TYPE_CHECKING:
    from notification_dispatch.infrastructure.configuration import ChannelSettings

logger = get_module_logger()

_registry: Dict[Tuple[NotificationType, str], Type[NotificationProvider]] = {}
_discovered = False


def register_provider(channel: NotificationType, name: str):
    """Register a provider class for ``channel`` under ``name``.

    Args:
        channel: Channel the provider serves.
        name: Provider name as used in configuration (e.g. "mock").

    Returns:
        Decorator function

    Raises:
        TypeError: If applied to something other than a provider class.
        RuntimeError: If the key is already registered.
    """

    def decorator(obj):
        if not isinstance(obj, type):
            raise TypeError("register_provider decorator must be applied to a class")

        if not issubclass(obj, NotificationProvider):
            raise TypeError(
                f"Provider must subclass NotificationProvider: {name}, got {obj}"
            )

        key = (NotificationType(channel), name)
        if key in _registry:
            raise RuntimeError(
                f"Provider already registered for {key[0].value}: {name}"
            )

        _registry[key] = obj
        logger.debug(
            "provider_registered",
            channel=key[0].value,
            provider=name,
            class_name=obj.__name__,
        )
        return obj

    return decorator


def load_providers() -> None:
    """Import every public module of this package so registrations run."""
    global _discovered
    for module_info in pkgutil.iter_modules(__path__):
        if module_info.name.startswith("_"):
            continue
        importlib.import_module(f"{__name__}.{module_info.name}")
    _discovered = True


def get_provider_class(
    channel: NotificationType, name: str
) -> Type[NotificationProvider]:
    """Look up a registered provider class.

    Raises:
        NotificationError: PROVIDER_NOT_FOUND if nothing is registered.
    """
    if not _discovered:
        load_providers()
    provider_class = _registry.get((NotificationType(channel), name))
    if provider_class is None:
        channel_label = "SMS" if channel == NotificationType.SMS else channel.value
        raise NotificationError(
            ErrorCode.PROVIDER_NOT_FOUND,
            f"unsupported {channel_label} provider: {name}",
            metadata={"provider": name, "channel": NotificationType(channel).value},
        )
    return provider_class


def create_provider(
    channel: NotificationType,
    config: "ChannelSettings",
    **kwargs,
) -> NotificationProvider:
    """Instantiate the provider named by ``config.provider``.

    Extra keyword arguments (e.g. ``rng``) are passed to the constructor.
    """
    provider_class = get_provider_class(channel, config.provider)
    provider = provider_class(config, **kwargs)
    logger.info(
        "provider_created",
        channel=NotificationType(channel).value,
        provider=config.provider,
        enabled=config.enabled,
    )
    return provider


def registered_providers(
    channel: Optional[NotificationType] = None,
) -> Dict[Tuple[NotificationType, str], Type[NotificationProvider]]:
    if not _discovered:
        load_providers()
    return {
        key: cls
        for key, cls in _registry.items()
        if channel is None or key[0] == channel
    }


def unregister_provider(channel: NotificationType, name: str) -> None:
    """Remove a registration (test support)."""
    _registry.pop((NotificationType(channel), name), None)


__all__ = [
    "register_provider",
    "load_providers",
    "get_provider_class",
    "create_provider",
    "registered_providers",
    "unregister_provider",
]
