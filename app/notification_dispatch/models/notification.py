"""Notification entity and channel payloads.

A ``Notification`` is a common header (identity, lifecycle, priority, content)
plus an optional channel payload selected by the ``channel`` discriminator.
The header alone is enough for the generic ``provider.send()`` path; channel
services always attach the payload.

Lifecycle:
    pending -> sent -> delivered
    pending/sent -> failed -> retrying -> sent | failed

``delivered`` is terminal. ``failed`` is terminal unless a retry is still
available (``retry_count < max_retries``).
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from notification_dispatch.errors import ErrorCode, NotificationError


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class NotificationType(str, Enum):
    """Delivery channel."""

    EMAIL = "email"
    SMS = "sms"
    PUSH = "push"


class NotificationStatus(str, Enum):
    """Lifecycle status of a notification."""

    PENDING = "pending"
    SENT = "sent"
    DELIVERED = "delivered"
    FAILED = "failed"
    RETRYING = "retrying"


class NotificationPriority(str, Enum):
    """Notification priority levels."""

    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class PushPlatform(str, Enum):
    """Push platforms with a known configuration."""

    IOS = "ios"
    ANDROID = "android"
    WEB = "web"


class EmailAttachment(BaseModel):
    """File attached to an email.

    ``size`` is computed from ``content`` when not supplied.
    """

    filename: str
    content: bytes = b""
    content_type: str = "application/octet-stream"
    size: int = 0

    @model_validator(mode="after")
    def _fill_size(self) -> "EmailAttachment":
        if not self.size:
            self.size = len(self.content)
        return self


class EmailPayload(BaseModel):
    """Email-specific fields."""

    channel: Literal["email"] = "email"
    to: List[str] = Field(default_factory=list)
    cc: List[str] = Field(default_factory=list)
    bcc: List[str] = Field(default_factory=list)
    from_address: str = ""
    reply_to: str = ""
    html_body: str = ""
    text_body: str = ""
    attachments: List[EmailAttachment] = Field(default_factory=list)
    headers: Dict[str, str] = Field(default_factory=dict)


class SMSPayload(BaseModel):
    """SMS-specific fields."""

    channel: Literal["sms"] = "sms"
    phone_number: str = ""
    country_code: str = ""
    message: str = ""
    unicode: bool = False


class PushPayload(BaseModel):
    """Push-specific fields.

    ``platform`` stays a plain string so unsupported platforms reach the
    provider's validation instead of failing model construction.
    """

    channel: Literal["push"] = "push"
    device_token: str = ""
    platform: str = ""
    title: str = ""
    message: str = ""
    icon: str = ""
    badge: int = 0
    sound: str = ""
    data: Dict[str, str] = Field(default_factory=dict)
    image_url: str = ""
    click_action: str = ""


ChannelPayload = Annotated[
    Union[EmailPayload, SMSPayload, PushPayload], Field(discriminator="channel")
]

# Allowed lifecycle moves; FAILED -> RETRYING is further gated on retries left.
_TRANSITIONS: Dict[NotificationStatus, frozenset] = {
    NotificationStatus.PENDING: frozenset(
        {NotificationStatus.SENT, NotificationStatus.FAILED}
    ),
    NotificationStatus.SENT: frozenset(
        {NotificationStatus.DELIVERED, NotificationStatus.FAILED}
    ),
    NotificationStatus.RETRYING: frozenset(
        {NotificationStatus.SENT, NotificationStatus.FAILED}
    ),
    NotificationStatus.FAILED: frozenset({NotificationStatus.RETRYING}),
    NotificationStatus.DELIVERED: frozenset(),
}


class Notification(BaseModel):
    """Notification entity shared by every channel.

    Attributes:
        id: Opaque unique identifier.
        type: Channel the notification is delivered through.
        recipient: Email address, phone number or device token.
        body: Message content (required, non-empty).
        metadata: Free-form string metadata (e.g. ``country_code``).
        payload: Channel-specific fields; its ``channel`` must match ``type``.

    Example:
        notification = Notification(
            type=NotificationType.SMS,
            recipient="+15555551234",
            body="Your code is 1234",
            payload=SMSPayload(phone_number="+15555551234", message="Your code is 1234"),
        )
    """

    id: str = Field(default_factory=new_id)
    type: NotificationType
    status: NotificationStatus = NotificationStatus.PENDING
    priority: NotificationPriority = NotificationPriority.NORMAL
    recipient: str
    subject: str = ""
    body: str
    metadata: Dict[str, str] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    scheduled_at: Optional[datetime] = None
    sent_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    failed_at: Optional[datetime] = None
    error_message: Optional[str] = None
    retry_count: int = Field(default=0, ge=0)
    max_retries: int = Field(default=3, ge=0)
    payload: Optional[ChannelPayload] = None

    @field_validator("body")
    @classmethod
    def validate_body(cls, v: str) -> str:
        """Ensure body is not empty."""
        if not v or not v.strip():
            raise ValueError("Notification body cannot be empty")
        return v

    @model_validator(mode="after")
    def _check_invariants(self) -> "Notification":
        if self.retry_count > self.max_retries:
            raise ValueError(
                f"retry_count ({self.retry_count}) exceeds "
                f"max_retries ({self.max_retries})"
            )
        if self.payload is not None and self.payload.channel != self.type.value:
            raise ValueError(
                f"payload channel '{self.payload.channel}' "
                f"does not match type '{self.type.value}'"
            )
        return self

    @property
    def is_terminal(self) -> bool:
        if self.status == NotificationStatus.DELIVERED:
            return True
        return self.status == NotificationStatus.FAILED and not self.should_retry()

    def is_scheduled(self, now: Optional[datetime] = None) -> bool:
        """True if the notification is scheduled for the future."""
        if self.scheduled_at is None:
            return False
        return self.scheduled_at > (now or utc_now())

    def should_retry(self) -> bool:
        return (
            self.status == NotificationStatus.FAILED
            and self.retry_count < self.max_retries
        )

    def can_transition_to(self, status: NotificationStatus) -> bool:
        if status not in _TRANSITIONS[self.status]:
            return False
        if status == NotificationStatus.RETRYING:
            return self.retry_count < self.max_retries
        return True

    def transition_to(
        self, status: NotificationStatus, at: Optional[datetime] = None
    ) -> None:
        """Move to ``status``, stamping the matching timestamp.

        Raises:
            NotificationError: INVALID_NOTIFICATION for an illegal move.
        """
        if not self.can_transition_to(status):
            raise NotificationError(
                ErrorCode.INVALID_NOTIFICATION,
                f"invalid status transition: {self.status.value} -> {status.value}",
                metadata={"notification_id": self.id},
            )
        when = at or utc_now()
        if status == NotificationStatus.SENT:
            self.sent_at = when
        elif status == NotificationStatus.DELIVERED:
            self.delivered_at = when
        elif status == NotificationStatus.FAILED:
            self.failed_at = when
        elif status == NotificationStatus.RETRYING:
            self.retry_count += 1
            self.error_message = None
        self.status = status
        self.updated_at = when

    def mark_sent(self, at: Optional[datetime] = None) -> None:
        self.transition_to(NotificationStatus.SENT, at)

    def mark_delivered(self, at: Optional[datetime] = None) -> None:
        self.transition_to(NotificationStatus.DELIVERED, at)

    def mark_failed(self, error_message: str, at: Optional[datetime] = None) -> None:
        self.transition_to(NotificationStatus.FAILED, at)
        self.error_message = error_message
