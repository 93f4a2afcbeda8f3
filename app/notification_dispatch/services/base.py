"""Shared behavior of the channel services.

A channel service owns one provider, resolved from its ``ChannelSettings``
through the provider registry unless one is injected. Services validate
requests, render templates and hand a fully built ``Notification`` to the
provider; provider errors propagate unchanged.
"""

from typing import Generic, Mapping, Optional, TypeVar

from structlog.stdlib import BoundLogger

from notification_dispatch.cancellation import CancelToken
from notification_dispatch.errors import ErrorCode, NotificationError
from notification_dispatch.infrastructure.configuration import ChannelSettings
from notification_dispatch.infrastructure.logging import get_module_logger
from notification_dispatch.models import (
    NotificationPriority,
    NotificationResponse,
    NotificationStatus,
    ProviderStatus,
    Template,
    new_id,
    utc_now,
)
from notification_dispatch.providers import create_provider
from notification_dispatch.providers.base import NotificationProvider
from notification_dispatch.providers.capabilities import TemplateRenderer

_default_logger = get_module_logger()

P = TypeVar("P", bound=NotificationProvider)


class ChannelService(Generic[P]):
    """Base class for the email, SMS and push services.

    Args:
        config: Channel settings naming the provider to use.
        logger: Optional structured logger; defaults to the module logger
            bound with the channel name.
        provider: Optional provider instance, bypassing the registry.
        **provider_kwargs: Passed to the provider constructor (e.g. ``rng``).

    Raises:
        NotificationError: PROVIDER_NOT_FOUND when ``config.provider`` is not
            registered for the channel.
    """

    channel = None

    def __init__(
        self,
        config: ChannelSettings,
        logger: Optional[BoundLogger] = None,
        provider: Optional[P] = None,
        **provider_kwargs,
    ):
        self._config = config
        self._logger = (logger or _default_logger).bind(channel=self.channel.value)
        self._provider: P = provider or create_provider(
            self.channel, config, **provider_kwargs
        )
        self._logger.info(
            "service_initialized",
            provider=self._provider.name,
            enabled=config.enabled,
        )

    @property
    def provider(self) -> P:
        return self._provider

    @property
    def config(self) -> ChannelSettings:
        return self._config

    def health_check(self, cancel: Optional[CancelToken] = None) -> None:
        """Check provider health; raises the provider's error unchanged."""
        self._provider.check_health(cancel)

    def get_provider_status(
        self, cancel: Optional[CancelToken] = None
    ) -> ProviderStatus:
        """Summarize provider health without raising."""
        healthy, error = True, ""
        try:
            self._provider.check_health(cancel)
        except NotificationError as err:
            healthy, error = False, str(err)
        return ProviderStatus(
            name=self._provider.name,
            type=self.channel.value,
            healthy=healthy,
            error=error,
        )

    def _render(self, template_id: str, data: Mapping[str, str]) -> Template:
        """Render a provider template.

        Raises:
            NotificationError: PROVIDER_NOT_FOUND if the provider has no
                templates, TEMPLATE_NOT_FOUND for an unknown id.
        """
        if not isinstance(self._provider, TemplateRenderer):
            raise NotificationError(
                ErrorCode.PROVIDER_NOT_FOUND,
                "template rendering not supported by this provider",
                metadata={"provider": self._provider.name},
            )
        rendered = self._provider.render_template(template_id, data)
        self._logger.debug("template_rendered", template_id=template_id)
        return rendered

    def _failed_response(
        self, error: NotificationError, message: str
    ) -> NotificationResponse:
        return NotificationResponse(
            id=new_id(),
            status=NotificationStatus.FAILED,
            message=message,
            sent_at=utc_now(),
            error=str(error),
        )


def parse_priority(value) -> NotificationPriority:
    """Parse a priority name; empty means ``normal``."""
    if isinstance(value, NotificationPriority):
        return value
    if not value:
        return NotificationPriority.NORMAL
    try:
        return NotificationPriority(str(value).lower())
    except ValueError as err:
        raise NotificationError.validation(
            "priority", f"invalid priority: {value}"
        ) from err


def has_content(value: str) -> bool:
    """True unless ``value`` is empty or whitespace only."""
    return bool(value) and not value.isspace()


def require_content(field: str, value: str, message: str) -> None:
    """Raise VALIDATION_FAILED on ``field`` when ``value`` is blank."""
    if not has_content(value):
        raise NotificationError.validation(field, message)
