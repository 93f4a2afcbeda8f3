"""Push notification channel service.

Platform limits live in the provider, so this service only checks the shape
of the request (channel, body, device token, platform) and the estimated
payload size before dispatch. Title and body truncation happen in the
provider.
"""

from typing import List, Mapping, Optional, Sequence, Tuple

from notification_dispatch.cancellation import CancelToken
from notification_dispatch.errors import BulkSendError, ErrorCode, NotificationError
from notification_dispatch.infrastructure.logging import bind_request_context
from notification_dispatch.models import (
    DeliveryStatus,
    DeviceInfo,
    Notification,
    NotificationRequest,
    NotificationResponse,
    NotificationStatus,
    NotificationType,
    PushData,
    PushPayload,
    PushPlatform,
    PushTemplate,
    new_id,
)
from notification_dispatch.providers.base import PushProvider
from notification_dispatch.providers.capabilities import (
    DeliveryReporter,
    DeviceRegistry,
    PlatformCatalog,
)
from notification_dispatch.providers.contracts import PlatformConfig
from notification_dispatch.services.base import (
    ChannelService,
    has_content,
    parse_priority,
    require_content,
)

DEFAULT_PLATFORMS = tuple(platform.value for platform in PushPlatform)

# Bytes reserved for the transport envelope around the content
PAYLOAD_ENVELOPE_BYTES = 200

DEFAULT_MAX_RETRIES = 3


def estimate_payload_size(push: PushData, title: str, body: str) -> int:
    """Rough wire size of a push: content fields, data map and envelope."""
    fields = (title, body, push.icon, push.sound, push.image_url, push.click_action)
    size = sum(len(value.encode("utf-8")) for value in fields)
    size += sum(
        len(key.encode("utf-8")) + len(value.encode("utf-8"))
        for key, value in push.data.items()
    )
    return size + PAYLOAD_ENVELOPE_BYTES


class PushService(ChannelService[PushProvider]):
    """Sends push notifications and manages device registrations.

    Example:
        service = PushService(get_settings().push)
        service.register_device(token, "ios")
        service.send_push_notification(
            NotificationRequest(
                type="push",
                recipient=token,
                body="Your order shipped",
                push_data=PushData(device_token=token, platform="ios", title="Orders"),
            )
        )
    """

    channel = NotificationType.PUSH

    def send_push_notification(
        self,
        request: Optional[NotificationRequest],
        cancel: Optional[CancelToken] = None,
    ) -> NotificationResponse:
        """Validate, render and send one push notification.

        Raises:
            NotificationError: VALIDATION_FAILED for a malformed request or an
                oversized payload, TEMPLATE_NOT_FOUND for an unknown template,
                or the provider's error unchanged.
        """
        log = self._logger
        try:
            self._validate_request(request)
        except NotificationError as err:
            log.warning("push_validation_failed", error=str(err))
            raise

        push = request.push_data
        platform = push.platform.lower()
        log = log.bind(platform=platform, template_id=push.template_id)

        self._provider.check_health(cancel)

        title = push.title or request.subject
        body = request.body
        if push.template_id:
            rendered: PushTemplate = self._render(push.template_id, push.template_data)
            title = rendered.title
            body = rendered.body
            require_content(
                "body", body, f"template {push.template_id} rendered an empty body"
            )

        platform_config = self.get_platform_config(platform)
        size = estimate_payload_size(push, title, body)
        if size > platform_config.max_payload:
            log.warning(
                "push_payload_too_large",
                size=size,
                max_payload=platform_config.max_payload,
            )
            raise NotificationError.validation(
                "payload",
                f"payload too large: {size} bytes (max {platform_config.max_payload})",
            )

        notification = Notification(
            type=NotificationType.PUSH,
            priority=parse_priority(request.priority),
            recipient=request.recipient or push.device_token,
            subject=title,
            body=body,
            metadata=dict(request.metadata),
            scheduled_at=request.scheduled_at,
            max_retries=(
                request.max_retries
                if request.max_retries is not None
                else DEFAULT_MAX_RETRIES
            ),
            payload=PushPayload(
                device_token=push.device_token,
                platform=platform,
                title=title,
                message=body,
                icon=push.icon,
                badge=push.badge,
                sound=push.sound,
                data=dict(push.data),
                image_url=push.image_url,
                click_action=push.click_action,
            ),
        )

        log.debug("push_dispatching", notification_id=notification.id)
        response = self._provider.send_push(notification, cancel)
        log.info("push_sent", notification_id=notification.id)
        return response

    def send_bulk_push_notifications(
        self,
        requests: Sequence[NotificationRequest],
        cancel: Optional[CancelToken] = None,
    ) -> List[NotificationResponse]:
        """Send each request in order.

        Every request gets a response; failed ones are FAILED responses in
        their position. Unlike bulk email and SMS, any failure is then raised
        as a ``BulkSendError`` carrying all responses and the 1-based indexes
        of the failed requests.

        Raises:
            BulkSendError: if at least one request failed.
        """
        if not requests:
            raise NotificationError.validation(
                "requests", "at least one notification request is required"
            )

        responses: List[NotificationResponse] = []
        failures: List[Tuple[int, NotificationError]] = []
        with bind_request_context(batch_id=new_id(), channel=self.channel.value):
            self._logger.info("bulk_push_started", total=len(requests))
            for index, request in enumerate(requests, start=1):
                try:
                    responses.append(self.send_push_notification(request, cancel))
                except NotificationError as err:
                    self._logger.warning(
                        "bulk_push_notification_failed", index=index, error=str(err)
                    )
                    failures.append((index, err))
                    responses.append(
                        self._failed_response(err, "Failed to send push notification")
                    )

            self._logger.info(
                "bulk_push_completed", total=len(responses), failed=len(failures)
            )

        if failures:
            raise BulkSendError(responses, failures)
        return responses

    def validate_device_token(self, token: str, platform: str) -> None:
        self._provider.validate_device_token(token, platform)

    def get_platform_config(self, platform: str) -> PlatformConfig:
        return self._provider.get_platform_config(platform)

    def get_supported_platforms(self) -> List[str]:
        if isinstance(self._provider, PlatformCatalog):
            return self._provider.get_supported_platforms()
        return list(DEFAULT_PLATFORMS)

    def register_device(
        self,
        token: str,
        platform: str,
        metadata: Optional[Mapping[str, str]] = None,
    ) -> DeviceInfo:
        """Register a device token with the provider.

        Raises:
            NotificationError: PROVIDER_NOT_FOUND if the provider keeps no
                device registry, VALIDATION_FAILED for a bad token.
        """
        registry = self._device_registry()
        device = registry.register_device(token, platform, metadata)
        self._logger.info("device_registered", platform=device.platform)
        return device

    def unregister_device(self, token: str) -> None:
        self._device_registry().unregister_device(token)
        self._logger.info("device_unregistered")

    def get_device_info(self, token: str) -> DeviceInfo:
        return self._device_registry().get_device_info(token)

    def get_delivery_report(self, notification_id: str) -> DeliveryStatus:
        """Delivery state of a sent notification.

        Providers without delivery reports get a placeholder SENT status.
        """
        if isinstance(self._provider, DeliveryReporter):
            return self._provider.get_delivery_report(notification_id)
        return DeliveryStatus(
            notification_id=notification_id,
            status=NotificationStatus.SENT,
            status_details="Provider does not support delivery reports",
        )

    def render_template(
        self, template_id: str, data: Mapping[str, str]
    ) -> PushTemplate:
        return self._render(template_id, data)

    def _device_registry(self) -> DeviceRegistry:
        if not isinstance(self._provider, DeviceRegistry):
            raise NotificationError(
                ErrorCode.PROVIDER_NOT_FOUND,
                "device registration not supported by this provider",
                metadata={"provider": self._provider.name},
            )
        return self._provider

    def _validate_request(self, request: Optional[NotificationRequest]) -> None:
        if request is None:
            raise NotificationError.validation(
                "request", "notification request is required"
            )
        if request.type.lower() != NotificationType.PUSH.value:
            raise NotificationError.validation(
                "type", "notification type must be push"
            )

        push = request.push_data
        has_template = push is not None and bool(push.template_id)
        if not has_content(request.body) and not has_template:
            raise NotificationError.validation("body", "notification body is required")
        if push is None:
            raise NotificationError.validation(
                "push_data", "push data is required for push notifications"
            )
        if not push.device_token:
            raise NotificationError.validation(
                "device_token", "device token is required"
            )
        if not push.platform:
            raise NotificationError.validation("platform", "platform is required")

        supported = self.get_supported_platforms()
        if push.platform.lower() not in supported:
            raise NotificationError.validation(
                "platform",
                f"unsupported platform: {push.platform}. Supported: {supported}",
            )
