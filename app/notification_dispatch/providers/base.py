"""Provider abstract classes.

``NotificationProvider`` is the capability set every provider satisfies:
send a generic notification, report its channel type, check health and
describe its configuration. ``EmailProvider``, ``SMSProvider`` and
``PushProvider`` add the channel-specific send and validation operations.

Optional extras (template rendering, device registration, delivery reports...)
are protocols in ``capabilities.py``, not methods here.

Key separation of concerns:
  - contracts.py: Pure data structures (ProviderConfig, PlatformConfig)
  - capabilities.py: Optional capability protocols
  - base.py: Abstract classes and the shared health/latency behavior
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Dict, List, Optional

from notification_dispatch.cancellation import CancelToken, wait_or_cancel
from notification_dispatch.errors import ErrorCode, NotificationError
from notification_dispatch.infrastructure.logging import get_module_logger
from notification_dispatch.models import (
    EmailTemplateInfo,
    Notification,
    NotificationResponse,
    NotificationType,
)
from notification_dispatch.providers.contracts import PlatformConfig, ProviderConfig

if TYPE_CHECKING:
    from notification_dispatch.infrastructure.configuration import ChannelSettings

logger = get_module_logger()


class NotificationProvider(ABC):
    """Abstract base class for notification providers.

    Subclasses set ``name`` (used in error details and audit metadata) and
    ``HEALTH_CHECK_DELAY`` (seconds of simulated latency per health check).

    A provider starts healthy. While unhealthy, every send and health check
    fails immediately with PROVIDER_UNAVAILABLE, without waiting.
    """

    name: str = "provider"
    HEALTH_CHECK_DELAY: float = 0.0

    def __init__(self, config: Optional["ChannelSettings"] = None):
        self._config = config
        self._healthy = True
        self._logger = logger.bind(provider=self.name)

    @property
    @abstractmethod
    def notification_type(self) -> NotificationType:
        """Channel served by this provider."""

    @abstractmethod
    def send(
        self, notification: Notification, cancel: Optional[CancelToken] = None
    ) -> NotificationResponse:
        """Send a generic notification of this provider's channel.

        Args:
            notification: Notification whose ``type`` matches the provider.
            cancel: Optional cancellation signal for the simulated latency.

        Returns:
            NotificationResponse with status SENT.

        Raises:
            NotificationError: on validation, availability or timeout failures.
        """

    @abstractmethod
    def get_config(self) -> ProviderConfig:
        """Describe the provider configuration."""

    @property
    def healthy(self) -> bool:
        return self._healthy

    @property
    def settings(self) -> Dict[str, str]:
        if self._config is None:
            return {}
        return dict(self._config.settings)

    @property
    def enabled(self) -> bool:
        return self._config.enabled if self._config is not None else True

    def set_healthy(self, healthy: bool) -> None:
        """Toggle health, for failure-injection in tests."""
        self._healthy = healthy
        self._logger.info("provider_health_changed", healthy=healthy)

    def check_health(self, cancel: Optional[CancelToken] = None) -> None:
        """Check provider health.

        Raises:
            NotificationError: PROVIDER_UNAVAILABLE when marked unhealthy,
                TIMEOUT when cancelled during the check.
        """
        self._ensure_healthy("provider is marked as unhealthy")
        self._simulate_latency(
            self.HEALTH_CHECK_DELAY, cancel, "health check timed out"
        )

    def _ensure_healthy(self, message: str = "provider is unhealthy") -> None:
        if not self._healthy:
            raise NotificationError.provider(
                self.name, ErrorCode.PROVIDER_UNAVAILABLE, message
            )

    def _simulate_latency(
        self, seconds: float, cancel: Optional[CancelToken], timeout_message: str
    ) -> None:
        """Wait out simulated network latency, honoring cancellation."""
        if wait_or_cancel(seconds, cancel):
            self._logger.warning("provider_operation_cancelled", reason=timeout_message)
            raise NotificationError.timeout(timeout_message)

    def _require_type(self, notification: Notification) -> None:
        if notification.type != self.notification_type:
            raise NotificationError.validation(
                "type",
                f"expected {self.notification_type.value} notification, "
                f"got {notification.type.value}",
            )


class EmailProvider(NotificationProvider):
    """Provider capable of delivering email."""

    @property
    def notification_type(self) -> NotificationType:
        return NotificationType.EMAIL

    @abstractmethod
    def send_email(
        self, notification: Notification, cancel: Optional[CancelToken] = None
    ) -> NotificationResponse:
        """Send an email notification (payload channel ``email``)."""

    @abstractmethod
    def validate_email_address(self, email: str) -> None:
        """Raise VALIDATION_FAILED if ``email`` is not a valid address."""

    @abstractmethod
    def get_email_templates(self) -> List[EmailTemplateInfo]:
        """List the templates this provider can render."""


class SMSProvider(NotificationProvider):
    """Provider capable of delivering SMS."""

    @property
    def notification_type(self) -> NotificationType:
        return NotificationType.SMS

    @abstractmethod
    def send_sms(
        self, notification: Notification, cancel: Optional[CancelToken] = None
    ) -> NotificationResponse:
        """Send an SMS notification (payload channel ``sms``)."""

    @abstractmethod
    def validate_phone_number(self, phone_number: str, country_code: str = "") -> None:
        """Raise VALIDATION_FAILED if the number is not valid for the country."""

    @abstractmethod
    def get_sms_cost(self, country_code: str) -> float:
        """Per-segment cost for ``country_code``."""


class PushProvider(NotificationProvider):
    """Provider capable of delivering push notifications."""

    @property
    def notification_type(self) -> NotificationType:
        return NotificationType.PUSH

    @abstractmethod
    def send_push(
        self, notification: Notification, cancel: Optional[CancelToken] = None
    ) -> NotificationResponse:
        """Send a push notification (payload channel ``push``)."""

    @abstractmethod
    def validate_device_token(self, token: str, platform: str) -> None:
        """Raise VALIDATION_FAILED if ``token`` is not valid for ``platform``."""

    @abstractmethod
    def get_platform_config(self, platform: str) -> PlatformConfig:
        """Limits and features of ``platform``."""
