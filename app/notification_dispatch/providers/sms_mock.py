"""In-memory SMS provider.

Simulates an SMS gateway: validates number and message, waits out a fixed
latency window, prices the message per segment from a country rate table and
records it. Roughly nine in ten messages are marked delivered shortly after
sending; the response status is always ``sent``.
"""

import random
from types import MappingProxyType
from typing import List, Mapping, Optional

from notification_dispatch.cancellation import CancelToken
from notification_dispatch.errors import ErrorCode, NotificationError
from notification_dispatch.models import (
    CountryInfo,
    Notification,
    NotificationResponse,
    NotificationStatus,
    NotificationType,
    SentSMS,
    SMSPayload,
    SMSTemplate,
    utc_now,
)
from notification_dispatch.providers import register_provider
from notification_dispatch.providers.base import SMSProvider
from notification_dispatch.providers.contracts import ProviderConfig, RateLimitConfig
from notification_dispatch.providers.delivery import DeliverySimulator
from notification_dispatch.providers.templates import (
    TemplateCatalog,
    TemplateProviderMixin,
)
from notification_dispatch.segments import calculate_segments, max_message_length
from notification_dispatch.validation import (
    SUPPORTED_COUNTRY_CODES,
    contains_unicode,
    validate_phone_number,
)

DEFAULT_COST_PER_SEGMENT = 0.01

# USD per segment
COUNTRY_COSTS: Mapping[str, float] = MappingProxyType(
    {
        "US": 0.0075,
        "UK": 0.0080,
        "CA": 0.0070,
        "AU": 0.0085,
        "DE": 0.0090,
        "FR": 0.0088,
        "IN": 0.0050,
        "BR": 0.0095,
        "MX": 0.0080,
        "JP": 0.0120,
        "KR": 0.0110,
        "SG": 0.0100,
        "HK": 0.0095,
        "TH": 0.0085,
        "MY": 0.0090,
        "PH": 0.0085,
    }
)

COUNTRY_NAMES: Mapping[str, str] = MappingProxyType(
    {
        "US": "United States",
        "UK": "United Kingdom",
        "CA": "Canada",
        "AU": "Australia",
        "DE": "Germany",
        "FR": "France",
        "IN": "India",
        "BR": "Brazil",
    }
)

DEFAULT_SMS_TEMPLATES = (
    {
        "id": "verification",
        "name": "Verification Code",
        "message": (
            "Your {{service_name}} verification code is: {{code}}. "
            "Valid for {{expiry_minutes}} minutes."
        ),
        "variables": ["service_name", "code", "expiry_minutes"],
        "category": "security",
    },
    {
        "id": "welcome_sms",
        "name": "Welcome SMS",
        "message": "Welcome to {{service_name}}, {{user_name}}! Thanks for joining us.",
        "variables": ["service_name", "user_name"],
        "category": "onboarding",
    },
    {
        "id": "alert",
        "name": "Alert Notification",
        "message": "ALERT: {{alert_message}} Time: {{timestamp}}",
        "variables": ["alert_message", "timestamp"],
        "category": "alerts",
    },
    {
        "id": "reminder",
        "name": "Reminder",
        "message": "Reminder: {{reminder_text}}. Reply STOP to opt out.",
        "variables": ["reminder_text"],
        "category": "general",
    },
)


@register_provider(NotificationType.SMS, "mock")
class MockSMSProvider(TemplateProviderMixin, SMSProvider):
    """SMS provider that records messages instead of sending them.

    Args:
        config: Channel settings.
        rng: Random source for the delivery simulation.
    """

    name = "mock-sms"
    SEND_DELAY = 0.15
    HEALTH_CHECK_DELAY = 0.075
    DELIVERY_SUCCESS_RATE = 0.9

    def __init__(self, config=None, rng: Optional[random.Random] = None):
        super().__init__(config)
        self._templates = TemplateCatalog(SMSTemplate, DEFAULT_SMS_TEMPLATES)
        self._delivery = DeliverySimulator(
            self.DELIVERY_SUCCESS_RATE, 100, 600, rng=rng
        )
        self._sent_sms: List[SentSMS] = []

    def send(
        self, notification: Notification, cancel: Optional[CancelToken] = None
    ) -> NotificationResponse:
        self._ensure_healthy()
        self._require_type(notification)
        if not isinstance(notification.payload, SMSPayload):
            notification = notification.model_copy(
                update={
                    "payload": SMSPayload(
                        phone_number=notification.recipient,
                        country_code=notification.metadata.get("country_code", ""),
                        message=notification.body,
                        unicode=contains_unicode(notification.body),
                    )
                }
            )
        return self.send_sms(notification, cancel)

    def send_sms(
        self, notification: Notification, cancel: Optional[CancelToken] = None
    ) -> NotificationResponse:
        self._ensure_healthy()
        sms = notification.payload
        if not isinstance(sms, SMSPayload):
            raise NotificationError.validation("payload", "SMS payload is required")
        self._validate_sms(sms)

        self._simulate_latency(self.SEND_DELAY, cancel, "SMS sending timed out")

        segments = calculate_segments(sms.message, sms.unicode)
        cost = self.calculate_cost(sms.country_code, segments)
        message_id = f"sms-{notification.id}"
        now = utc_now()
        record = SentSMS(
            id=notification.id,
            phone_number=sms.phone_number,
            country_code=sms.country_code,
            message=sms.message,
            unicode=sms.unicode,
            sent_at=now,
            cost=cost,
            segments=segments,
            provider_data={
                "provider": self.name,
                "message_id": message_id,
                "queue_time": f"{int(self.SEND_DELAY * 1000)}ms",
                "retry_count": "0",
                "country_code": sms.country_code,
            },
        )

        delay = self._delivery.simulate()
        if delay is not None:
            record.delivered_at = now + delay
            record.status = NotificationStatus.DELIVERED.value
            record.provider_data["delivery_time"] = record.delivered_at.isoformat(
                timespec="seconds"
            )

        self._sent_sms.append(record)
        self._logger.info(
            "sms_sent",
            notification_id=notification.id,
            phone_number=sms.phone_number,
            segments=segments,
            cost=cost,
            delivered=delay is not None,
        )
        return NotificationResponse(
            id=notification.id,
            status=NotificationStatus.SENT,
            message=(
                f"SMS sent to {sms.phone_number} ({segments} segments, ${cost:.4f})"
            ),
            provider_id=message_id,
            sent_at=now,
        )

    def validate_phone_number(self, phone_number: str, country_code: str = "") -> None:
        validate_phone_number(phone_number, country_code)

    def get_sms_cost(self, country_code: str) -> float:
        """Per-segment rate for a country.

        An empty country code gets the default rate.

        Raises:
            NotificationError: NOT_FOUND for a country without a rate.
        """
        if not country_code:
            return DEFAULT_COST_PER_SEGMENT
        code = country_code.upper()
        cost = COUNTRY_COSTS.get(code)
        if cost is None:
            raise NotificationError(
                ErrorCode.NOT_FOUND, f"country code not supported: {code}"
            )
        return cost

    def calculate_cost(self, country_code: str, segments: int) -> float:
        """Total cost; unknown or missing countries use the default rate."""
        rate = COUNTRY_COSTS.get(country_code.upper(), DEFAULT_COST_PER_SEGMENT)
        return rate * segments

    def get_supported_countries(self) -> List[CountryInfo]:
        return [
            CountryInfo(
                code=code,
                name=COUNTRY_NAMES[code],
                cost=COUNTRY_COSTS[code],
                max_length=160,
                supported=True,
            )
            for code in SUPPORTED_COUNTRY_CODES
        ]

    def get_config(self) -> ProviderConfig:
        return ProviderConfig(
            name="Mock SMS Provider",
            type=NotificationType.SMS.value,
            enabled=self.enabled,
            priority=2,
            max_retries=3,
            timeout=30,
            rate_limit=RateLimitConfig(enabled=True, requests_per_min=60, burst_size=5),
            settings={
                "provider_type": "mock",
                "version": "1.0.0",
                "features": "templates,validation,cost_calculation,delivery_tracking",
                "supported_countries": ",".join(SUPPORTED_COUNTRY_CODES),
            },
        )

    def get_sent_sms(self) -> List[SentSMS]:
        return list(self._sent_sms)

    def clear_sent_sms(self) -> None:
        self._sent_sms.clear()

    def _validate_sms(self, sms: SMSPayload) -> None:
        self.validate_phone_number(sms.phone_number, sms.country_code)
        if not sms.message:
            raise NotificationError.validation("message", "SMS message is required")
        limit = max_message_length(sms.unicode)
        if len(sms.message) > limit:
            raise NotificationError.validation(
                "message", f"message too long (max {limit} characters for 10 segments)"
            )
