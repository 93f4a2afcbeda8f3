"""Validation utilities shared by providers and services.

Pure functions: each validator returns ``None`` on success and raises a
``NotificationError`` (code VALIDATION_FAILED, ``metadata["field"]`` naming the
failing field) on the first problem found.

Usage:
    from notification_dispatch.validation import validate_email_address

    validate_email_address("user@example.com")
"""

import re
from datetime import datetime, timedelta
from typing import Optional

from notification_dispatch.errors import NotificationError
from notification_dispatch.models.notification import (
    EmailPayload,
    Notification,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    PushPayload,
    SMSPayload,
    utc_now,
)
from notification_dispatch.models.requests import NotificationRequest

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
PHONE_DIGITS_PATTERN = re.compile(r"^\d{7,15}$")
IOS_TOKEN_PATTERN = re.compile(r"^[a-fA-F0-9]{64}$")
ANDROID_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")

SUPPORTED_COUNTRY_CODES = ("US", "UK", "CA", "AU", "DE", "FR", "IN", "BR")

COUNTRY_CALLING_CODES = {
    "US": "1",
    "CA": "1",
    "UK": "44",
    "AU": "61",
    "DE": "49",
    "FR": "33",
    "IN": "91",
    "BR": "55",
}

# (min digits, max digits, message); countries without an entry only get the 7-15 rule
_COUNTRY_DIGIT_RULES = {
    "US": (10, 11, "US/CA numbers must be 10 or 11 digits"),
    "CA": (10, 11, "US/CA numbers must be 10 or 11 digits"),
    "UK": (10, 11, "UK numbers must be 10-11 digits"),
    "AU": (9, 10, "Australian numbers must be 9-10 digits"),
    "DE": (10, 12, "German numbers must be 10-12 digits"),
    "IN": (10, 10, "Indian numbers must be 10 digits"),
}

_PHONE_FORMATTING = str.maketrans("", "", " -()+.")

MAX_RETRY_DELAY = timedelta(hours=1)


def validate_email_address(email: str) -> None:
    """Validate a ``local@domain.tld`` address."""
    if not email:
        raise NotificationError.validation("email", "email address is required")
    if not EMAIL_PATTERN.match(email):
        raise NotificationError.validation("email", "invalid email address format")


def is_valid_email_address(email: str) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def clean_phone_number(phone_number: str) -> str:
    """Strip spaces, dashes, parentheses, dots and plus signs."""
    return phone_number.translate(_PHONE_FORMATTING)


def validate_country_code(country_code: str) -> None:
    if country_code.upper() not in SUPPORTED_COUNTRY_CODES:
        raise NotificationError.validation(
            "country_code", f"country code not supported: {country_code.upper()}"
        )


def validate_phone_number(phone_number: str, country_code: str = "") -> None:
    """Validate a phone number, optionally against country length rules.

    Args:
        phone_number: Number in any common formatting.
        country_code: Optional ISO-style code (``US``, ``UK``...). An
            unsupported code fails on field ``country_code``.
    """
    if not phone_number:
        raise NotificationError.validation("phone_number", "phone number is required")

    digits = clean_phone_number(phone_number)
    if not PHONE_DIGITS_PATTERN.match(digits):
        raise NotificationError.validation(
            "phone_number", "phone number must contain 7-15 digits"
        )

    if not country_code:
        return

    validate_country_code(country_code)
    rule = _COUNTRY_DIGIT_RULES.get(country_code.upper())
    if rule is not None:
        min_digits, max_digits, message = rule
        if not min_digits <= len(digits) <= max_digits:
            raise NotificationError.validation("phone_number", message)


def validate_device_token(token: str, platform: str) -> None:
    """Validate a push device token for ``platform``.

    This is the lenient shared check: web tokens only need 10 characters.
    Push providers apply their own, stricter rules at send time.
    """
    if not token:
        raise NotificationError.validation("device_token", "device token is required")

    platform = platform.lower()
    if platform == "ios":
        if len(token) != 64:
            raise NotificationError.validation(
                "device_token", "invalid iOS device token length"
            )
        if not IOS_TOKEN_PATTERN.match(token):
            raise NotificationError.validation(
                "device_token", "invalid iOS device token format"
            )
    elif platform == "android":
        if not 140 <= len(token) <= 255:
            raise NotificationError.validation(
                "device_token", "invalid Android device token length"
            )
        if not ANDROID_TOKEN_PATTERN.match(token):
            raise NotificationError.validation(
                "device_token", "invalid Android device token format"
            )
    elif platform == "web":
        if len(token) < 10:
            raise NotificationError.validation("device_token", "invalid web push token")
    else:
        raise NotificationError.validation("platform", "unsupported platform")


def validate_notification_request(request: Optional[NotificationRequest]) -> None:
    """Validate a generic request, then dispatch on its channel type."""
    if request is None:
        raise NotificationError.validation(
            "request", "notification request is required"
        )
    if not request.type:
        raise NotificationError.validation("type", "notification type is required")
    if not request.recipient:
        raise NotificationError.validation("recipient", "recipient is required")
    if not request.body or request.body.isspace():
        raise NotificationError.validation("body", "notification body is required")
    if not is_valid_priority(request.priority):
        raise NotificationError.validation("priority", "invalid priority level")

    if request.type == NotificationType.EMAIL:
        _validate_email_request(request)
    elif request.type == NotificationType.SMS:
        _validate_sms_request(request)
    elif request.type == NotificationType.PUSH:
        _validate_push_request(request)
    else:
        raise NotificationError.validation("type", "unsupported notification type")


def _validate_email_request(request: NotificationRequest) -> None:
    validate_email_address(request.recipient)
    data = request.email_data
    if data is None:
        return

    for field in ("to", "cc", "bcc"):
        for address in getattr(data, field):
            if not is_valid_email_address(address):
                raise NotificationError.validation(
                    field, f"invalid email in '{field}' field: {address}"
                )
    if data.from_address and not is_valid_email_address(data.from_address):
        raise NotificationError.validation("from", "invalid sender email address")
    if data.reply_to and not is_valid_email_address(data.reply_to):
        raise NotificationError.validation("reply_to", "invalid reply-to email address")


def _validate_sms_request(request: NotificationRequest) -> None:
    phone_number = request.recipient
    country_code = ""
    if request.sms_data is not None:
        phone_number = request.sms_data.phone_number or phone_number
        country_code = request.sms_data.country_code
    validate_phone_number(phone_number, country_code)


def _validate_push_request(request: NotificationRequest) -> None:
    data = request.push_data
    if data is None:
        raise NotificationError.validation(
            "push_data", "push notification data is required"
        )
    if not data.platform:
        raise NotificationError.validation(
            "platform", "platform is required for push notifications"
        )
    validate_device_token(data.device_token or request.recipient, data.platform)


def is_valid_priority(priority: str) -> bool:
    return priority in {p.value for p in NotificationPriority}


def is_valid_type(notification_type: str) -> bool:
    return notification_type in {t.value for t in NotificationType}


def is_valid_status(status: str) -> bool:
    return status in {s.value for s in NotificationStatus}


def contains_unicode(text: str) -> bool:
    """True if any character falls outside 7-bit ASCII."""
    return any(ord(char) > 127 for char in text)


def format_phone_number(phone_number: str, country_code: str = "") -> str:
    """Format a number as ``+<calling code><digits>``.

    ``country_code`` may be an ISO-style code (``US``) or a calling code
    (``44``); the calling code is only prefixed when not already present.

    Example:
        format_phone_number("(555) 123-4567", "US")  # "+15551234567"
    """
    digits = clean_phone_number(phone_number)
    calling_code = COUNTRY_CALLING_CODES.get(country_code.upper(), country_code)
    if calling_code and not digits.startswith(calling_code):
        digits = calling_code + digits
    return "+" + digits


def truncate_string(value: str, max_length: int) -> str:
    """Cut ``value`` to ``max_length`` characters, ending in ``...``."""
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


def sanitize_string(value: str) -> str:
    """Drop control characters (newline and tab survive) and trim whitespace."""
    return CONTROL_CHARS_PATTERN.sub("", value).strip()


def is_scheduled_notification(
    notification: Notification, now: Optional[datetime] = None
) -> bool:
    return notification.is_scheduled(now)


def should_retry_notification(notification: Notification) -> bool:
    return notification.should_retry()


def calculate_next_retry_time(
    retry_count: int,
    base_delay: timedelta = timedelta(seconds=60),
    now: Optional[datetime] = None,
) -> datetime:
    """Exponential backoff: ``base_delay * 2**retry_count``, capped at one hour."""
    delay = min(base_delay * (2**retry_count), MAX_RETRY_DELAY)
    return (now or utc_now()) + delay


def create_notification_from_request(request: NotificationRequest) -> Notification:
    """Build a pending ``Notification`` (with channel payload) from a request.

    The request is expected to have passed ``validate_notification_request``.
    """
    notification_type = NotificationType(request.type)
    payload = None
    if notification_type == NotificationType.EMAIL:
        data = request.email_data
        payload = EmailPayload(
            to=list(data.to) if data and data.to else [request.recipient],
            cc=list(data.cc) if data else [],
            bcc=list(data.bcc) if data else [],
            from_address=data.from_address if data else "",
            reply_to=data.reply_to if data else "",
            html_body=data.html_body if data else "",
            text_body=(data.text_body if data else "") or request.body,
            attachments=list(data.attachments) if data else [],
            headers=dict(data.headers) if data else {},
        )
    elif notification_type == NotificationType.SMS:
        data = request.sms_data
        payload = SMSPayload(
            phone_number=(data.phone_number if data else "") or request.recipient,
            country_code=data.country_code if data else "",
            message=request.body,
            unicode=data.unicode if data else contains_unicode(request.body),
        )
    elif notification_type == NotificationType.PUSH:
        data = request.push_data
        payload = PushPayload(
            device_token=(data.device_token if data else "") or request.recipient,
            platform=data.platform.lower() if data else "",
            title=(data.title if data else "") or request.subject,
            message=request.body,
            icon=data.icon if data else "",
            badge=data.badge if data else 0,
            sound=data.sound if data else "",
            data=dict(data.data) if data else {},
            image_url=data.image_url if data else "",
            click_action=data.click_action if data else "",
        )

    kwargs = {}
    if request.max_retries is not None:
        kwargs["max_retries"] = request.max_retries
    return Notification(
        type=notification_type,
        priority=NotificationPriority(request.priority),
        recipient=request.recipient,
        subject=request.subject,
        body=request.body,
        metadata=dict(request.metadata),
        scheduled_at=request.scheduled_at,
        payload=payload,
        **kwargs,
    )
