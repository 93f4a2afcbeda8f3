"""In-memory push notification provider.

Simulates APNs/FCM/Web Push behind one provider. Content is first adapted to
the target platform (truncation, default icon and sound, badge support) and
only then validated, so over-long titles and bodies are shortened rather than
rejected. Keeps a registry of devices and a delivery report per sent message.
"""

import random
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

from notification_dispatch.cancellation import CancelToken
from notification_dispatch.errors import NotificationError
from notification_dispatch.models import (
    DeliveryStatus,
    DeviceInfo,
    Notification,
    NotificationResponse,
    NotificationStatus,
    NotificationType,
    PushPayload,
    PushTemplate,
    SentPush,
    utc_now,
)
from notification_dispatch.providers import register_provider
from notification_dispatch.providers.base import PushProvider
from notification_dispatch.providers.contracts import (
    PlatformConfig,
    ProviderConfig,
    RateLimitConfig,
)
from notification_dispatch.providers.delivery import DeliverySimulator
from notification_dispatch.providers.templates import (
    TemplateCatalog,
    TemplateProviderMixin,
)
from notification_dispatch.validation import (
    ANDROID_TOKEN_PATTERN,
    IOS_TOKEN_PATTERN,
    truncate_string,
)

PLATFORM_CONFIGS: Mapping[str, PlatformConfig] = MappingProxyType(
    {
        "ios": PlatformConfig(
            platform="ios",
            max_payload=4096,
            max_title_length=50,
            max_body_length=200,
            supports_badge=True,
            supports_sound=True,
            supports_image=True,
            supports_actions=True,
            default_sound="default",
            settings={"service": "apns", "environment": "development"},
        ),
        "android": PlatformConfig(
            platform="android",
            max_payload=4000,
            max_title_length=65,
            max_body_length=240,
            supports_badge=False,
            supports_sound=True,
            supports_image=True,
            supports_actions=True,
            default_sound="default",
            settings={"service": "fcm", "priority": "high"},
        ),
        "web": PlatformConfig(
            platform="web",
            max_payload=3072,
            max_title_length=50,
            max_body_length=120,
            supports_badge=True,
            supports_sound=False,
            supports_image=True,
            supports_actions=True,
            default_sound="",
            settings={"service": "web-push", "ttl": "2419200"},
        ),
    }
)

DEFAULT_ICONS: Mapping[str, str] = MappingProxyType(
    {"android": "ic_notification", "web": "/icon-192x192.png"}
)

# seconds of simulated transport latency
PLATFORM_DELAYS: Mapping[str, float] = MappingProxyType(
    {"ios": 0.2, "android": 0.25, "web": 0.3}
)
DEFAULT_PLATFORM_DELAY = 0.2

DEFAULT_PUSH_TEMPLATES = (
    {
        "id": "welcome_push",
        "name": "Welcome Push Notification",
        "title": "Welcome to {{app_name}}!",
        "body": "Hi {{user_name}}, thanks for installing {{app_name}}. Tap to get started!",
        "icon": "ic_welcome",
        "sound": "default",
        "variables": ["app_name", "user_name"],
        "category": "onboarding",
    },
    {
        "id": "news_alert",
        "name": "News Alert",
        "title": "Breaking: {{headline}}",
        "body": "{{summary}} Tap to read more.",
        "icon": "ic_news",
        "sound": "news_alert",
        "variables": ["headline", "summary"],
        "category": "news",
        "actions": [
            {"id": "read", "title": "Read Now", "icon": "ic_read"},
            {"id": "save", "title": "Save", "icon": "ic_save"},
        ],
    },
    {
        "id": "promotion",
        "name": "Promotional Notification",
        "title": "\U0001f389 Special Offer!",
        "body": "{{offer_text}} Use code {{promo_code}}. Valid until {{expiry_date}}.",
        "icon": "ic_promotion",
        "sound": "promotion",
        "variables": ["offer_text", "promo_code", "expiry_date"],
        "category": "marketing",
        "actions": [
            {"id": "shop", "title": "Shop Now", "icon": "ic_shop"},
            {"id": "dismiss", "title": "Dismiss", "icon": "ic_close"},
        ],
    },
    {
        "id": "reminder",
        "name": "Reminder Notification",
        "title": "Reminder: {{event_title}}",
        "body": "{{event_description}} Scheduled for {{event_time}}.",
        "icon": "ic_reminder",
        "sound": "gentle",
        "variables": ["event_title", "event_description", "event_time"],
        "category": "productivity",
        "actions": [
            {"id": "view", "title": "View", "icon": "ic_view"},
            {"id": "snooze", "title": "Snooze", "icon": "ic_snooze"},
        ],
    },
)


@register_provider(NotificationType.PUSH, "mock")
class MockPushProvider(TemplateProviderMixin, PushProvider):
    """Push provider that records notifications instead of sending them.

    Args:
        config: Channel settings.
        rng: Random source for the delivery simulation.
    """

    name = "mock-push"
    HEALTH_CHECK_DELAY = 0.1
    DELIVERY_SUCCESS_RATE = 0.85

    def __init__(self, config=None, rng: Optional[random.Random] = None):
        super().__init__(config)
        self._templates = TemplateCatalog(PushTemplate, DEFAULT_PUSH_TEMPLATES)
        self._delivery = DeliverySimulator(
            self.DELIVERY_SUCCESS_RATE, 500, 2500, rng=rng
        )
        self._sent_pushes: List[SentPush] = []
        self._devices: Dict[str, DeviceInfo] = {}

    def send(
        self, notification: Notification, cancel: Optional[CancelToken] = None
    ) -> NotificationResponse:
        self._ensure_healthy()
        self._require_type(notification)
        if not isinstance(notification.payload, PushPayload):
            metadata = notification.metadata
            notification = notification.model_copy(
                update={
                    "payload": PushPayload(
                        device_token=metadata.get("device_token")
                        or notification.recipient,
                        platform=metadata.get("platform", "android"),
                        title=notification.subject,
                        message=notification.body,
                        sound="default",
                        data=dict(metadata),
                    )
                }
            )
        return self.send_push(notification, cancel)

    def send_push(
        self, notification: Notification, cancel: Optional[CancelToken] = None
    ) -> NotificationResponse:
        self._ensure_healthy()
        push = notification.payload
        if not isinstance(push, PushPayload):
            raise NotificationError.validation("payload", "push payload is required")

        formatted = self.format_for_platform(push)
        self.validate_push_notification(formatted)

        platform = formatted.platform.lower()
        delay = PLATFORM_DELAYS.get(platform, DEFAULT_PLATFORM_DELAY)
        self._simulate_latency(delay, cancel, "push notification sending timed out")

        message_id = f"push-{notification.id}"
        now = utc_now()
        record = SentPush(
            id=notification.id,
            device_token=formatted.device_token,
            platform=platform,
            title=formatted.title,
            body=formatted.message,
            icon=formatted.icon,
            badge=formatted.badge,
            sound=formatted.sound,
            data=dict(formatted.data),
            image_url=formatted.image_url,
            click_action=formatted.click_action,
            sent_at=now,
            provider_data={
                "provider": self.name,
                "message_id": message_id,
                "platform": platform,
                "queue_time": f"{int(delay * 1000)}ms",
                "retry_count": "0",
            },
        )

        delivery_delay = self._delivery.simulate()
        if delivery_delay is not None:
            record.delivered_at = now + delivery_delay
            record.status = NotificationStatus.DELIVERED.value
            record.provider_data["delivery_time"] = record.delivered_at.isoformat(
                timespec="seconds"
            )
            record.provider_data["delivery_delay"] = (
                f"{int(delivery_delay.total_seconds() * 1000)}ms"
            )

        self._sent_pushes.append(record)
        self._touch_device(formatted.device_token)
        self._logger.info(
            "push_sent",
            notification_id=notification.id,
            platform=platform,
            device_token=formatted.device_token,
            delivered=delivery_delay is not None,
        )
        return NotificationResponse(
            id=notification.id,
            status=NotificationStatus.SENT,
            message=f"Push notification sent to {platform} device",
            provider_id=message_id,
            sent_at=now,
        )

    def format_for_platform(self, push: PushPayload) -> PushPayload:
        """Adapt content to the platform's limits; returns a new payload.

        Titles and bodies longer than the platform limit are cut and end in
        ``...``. Missing sound and icon get platform defaults; badges and
        sounds are dropped where the platform does not support them.
        """
        platform = push.platform.lower()
        config = PLATFORM_CONFIGS.get(platform)
        if config is None:
            return push

        updates = {
            "title": truncate_string(push.title, config.max_title_length),
            "message": truncate_string(push.message, config.max_body_length),
        }
        if config.supports_sound:
            if not push.sound:
                updates["sound"] = config.default_sound
        else:
            updates["sound"] = ""
        if not config.supports_badge:
            updates["badge"] = 0
        if not push.icon and platform in DEFAULT_ICONS:
            updates["icon"] = DEFAULT_ICONS[platform]
        return push.model_copy(update=updates, deep=True)

    def validate_push_notification(self, push: PushPayload) -> None:
        """Validate token, platform, content presence and length limits."""
        self.validate_device_token(push.device_token, push.platform)

        platform = push.platform.lower()
        if platform not in self.get_supported_platforms():
            raise NotificationError.validation(
                "platform", f"unsupported platform: {push.platform}"
            )
        if not push.title and not push.message:
            raise NotificationError.validation(
                "content", "push notification must have either title or message"
            )

        config = PLATFORM_CONFIGS[platform]
        if len(push.title) > config.max_title_length:
            raise NotificationError.validation(
                "title", f"title too long (max {config.max_title_length} characters)"
            )
        if len(push.message) > config.max_body_length:
            raise NotificationError.validation(
                "message",
                f"message too long (max {config.max_body_length} characters)",
            )

    def validate_device_token(self, token: str, platform: str) -> None:
        """Validate a device token.

        Stricter than the shared validator for web tokens (50-500 characters).
        """
        if not token:
            raise NotificationError.validation(
                "device_token", "device token is required"
            )

        platform = platform.lower()
        if platform == "ios":
            if len(token) != 64:
                raise NotificationError.validation(
                    "device_token", "iOS device token must be 64 characters"
                )
            if not IOS_TOKEN_PATTERN.match(token):
                raise NotificationError.validation(
                    "device_token",
                    "iOS device token must contain only hexadecimal characters",
                )
        elif platform == "android":
            if not 140 <= len(token) <= 255:
                raise NotificationError.validation(
                    "device_token", "Android FCM token must be 140-255 characters"
                )
            if not ANDROID_TOKEN_PATTERN.match(token):
                raise NotificationError.validation(
                    "device_token", "Android FCM token contains invalid characters"
                )
        elif platform == "web":
            if not 50 <= len(token) <= 500:
                raise NotificationError.validation(
                    "device_token", "Web push token must be 50-500 characters"
                )
        else:
            raise NotificationError.validation(
                "platform", f"unsupported platform: {platform}"
            )

    def get_platform_config(self, platform: str) -> PlatformConfig:
        """Platform limits; unknown platforms get a permissive default."""
        config = PLATFORM_CONFIGS.get(platform.lower())
        if config is None:
            return PlatformConfig(platform=platform, max_payload=4096)
        return config

    def get_supported_platforms(self) -> List[str]:
        return list(PLATFORM_CONFIGS)

    def register_device(
        self,
        token: str,
        platform: str,
        metadata: Optional[Mapping[str, str]] = None,
    ) -> DeviceInfo:
        """Register (or re-register) a device after validating its token."""
        self.validate_device_token(token, platform)
        metadata = dict(metadata or {})
        now = utc_now()
        device = DeviceInfo(
            token=token,
            platform=platform.lower(),
            app_version=metadata.get("app_version", ""),
            os_version=metadata.get("os_version", ""),
            registered_at=now,
            last_seen=now,
            active=True,
            metadata=metadata,
        )
        self._devices[token] = device
        self._logger.info("device_registered", platform=device.platform)
        return device

    def unregister_device(self, token: str) -> None:
        if token not in self._devices:
            raise NotificationError.not_found("device token not found")
        del self._devices[token]
        self._logger.info("device_unregistered")

    def get_device_info(self, token: str) -> DeviceInfo:
        device = self._devices.get(token)
        if device is None:
            raise NotificationError.not_found("device token not found")
        return device

    def get_delivery_report(self, notification_id: str) -> DeliveryStatus:
        """Delivery state of a sent push, from the audit log.

        Raises:
            NotificationError: NOT_FOUND if no push with that id was sent.
        """
        for record in reversed(self._sent_pushes):
            if record.id == notification_id:
                delivered = record.delivered_at is not None
                return DeliveryStatus(
                    notification_id=notification_id,
                    status=(
                        NotificationStatus.DELIVERED
                        if delivered
                        else NotificationStatus.SENT
                    ),
                    status_details=(
                        f"Delivered to {record.platform} device"
                        if delivered
                        else "Awaiting delivery confirmation"
                    ),
                    updated_at=record.delivered_at or record.sent_at,
                    provider_data=dict(record.provider_data),
                )
        raise NotificationError.not_found(f"notification not found: {notification_id}")

    def get_config(self) -> ProviderConfig:
        return ProviderConfig(
            name="Mock Push Provider",
            type=NotificationType.PUSH.value,
            enabled=self.enabled,
            priority=3,
            max_retries=3,
            timeout=45,
            rate_limit=RateLimitConfig(
                enabled=True, requests_per_min=1000, burst_size=50
            ),
            settings={
                "provider_type": "mock",
                "version": "1.0.0",
                "features": "templates,validation,platform_specific,device_management",
                "supported_platforms": ",".join(PLATFORM_CONFIGS),
            },
        )

    def get_sent_pushes(self) -> List[SentPush]:
        return list(self._sent_pushes)

    def clear_sent_pushes(self) -> None:
        self._sent_pushes.clear()

    def _touch_device(self, token: str) -> None:
        device = self._devices.get(token)
        if device is not None:
            device.last_seen = utc_now()
            device.active = True
