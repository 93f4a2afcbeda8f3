"""Request and response DTOs exchanged between callers and channel services.

These are deliberately lenient: string fields default to empty and lists to
empty so that semantic checks happen in the services and validators, which
raise ``NotificationError`` with the failing field rather than a pydantic
``ValidationError``.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from notification_dispatch.models.notification import (
    EmailAttachment,
    NotificationPriority,
    NotificationStatus,
    utc_now,
)


class EmailData(BaseModel):
    to: List[str] = Field(default_factory=list)
    cc: List[str] = Field(default_factory=list)
    bcc: List[str] = Field(default_factory=list)
    from_address: str = ""
    reply_to: str = ""
    html_body: str = ""
    text_body: str = ""
    attachments: List[EmailAttachment] = Field(default_factory=list)
    headers: Dict[str, str] = Field(default_factory=dict)


class SMSData(BaseModel):
    phone_number: str = ""
    country_code: str = ""
    unicode: bool = False


class PushData(BaseModel):
    """Push fields of a generic request.

    ``template_id``/``template_data`` let the push service render a provider
    template into ``title`` and the notification body.
    """

    device_token: str = ""
    platform: str = ""
    title: str = ""
    icon: str = ""
    badge: int = 0
    sound: str = ""
    data: Dict[str, str] = Field(default_factory=dict)
    image_url: str = ""
    click_action: str = ""
    template_id: str = ""
    template_data: Dict[str, str] = Field(default_factory=dict)


class NotificationRequest(BaseModel):
    """Generic, channel-agnostic notification request.

    Attributes:
        type: Channel name (``email``, ``sms`` or ``push``).
        priority: Priority name, ``normal`` when omitted.
        recipient: Channel-dependent recipient.
        body: Message content.
        email_data/sms_data/push_data: The payload for ``type``.

    Example:
        request = NotificationRequest(
            type="push",
            recipient="device-token",
            body="Your order shipped",
            push_data=PushData(device_token=token, platform="ios", title="Order update"),
        )
    """

    type: str = ""
    priority: str = NotificationPriority.NORMAL.value
    recipient: str = ""
    subject: str = ""
    body: str = ""
    metadata: Dict[str, str] = Field(default_factory=dict)
    scheduled_at: Optional[datetime] = None
    max_retries: Optional[int] = None
    email_data: Optional[EmailData] = None
    sms_data: Optional[SMSData] = None
    push_data: Optional[PushData] = None


class NotificationResponse(BaseModel):
    """Normalized result of a send."""

    id: str
    status: NotificationStatus
    message: str = ""
    provider_id: str = ""
    sent_at: Optional[datetime] = None
    error: str = ""

    @property
    def is_success(self) -> bool:
        return self.status in (NotificationStatus.SENT, NotificationStatus.DELIVERED)


class DeliveryStatus(BaseModel):
    notification_id: str
    status: NotificationStatus
    status_details: str = ""
    updated_at: datetime = Field(default_factory=utc_now)
    provider_data: Dict[str, str] = Field(default_factory=dict)


class NotificationFilters(BaseModel):
    """Query filters for ``NotificationRepository.list``."""

    type: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    recipient: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    limit: int = Field(default=0, ge=0)
    offset: int = Field(default=0, ge=0)
    sort_by: str = "created_at"
    sort_order: str = "desc"


# Email service


class EmailRequest(BaseModel):
    to: List[str] = Field(default_factory=list)
    cc: List[str] = Field(default_factory=list)
    bcc: List[str] = Field(default_factory=list)
    from_address: str = ""
    reply_to: str = ""
    subject: str = ""
    html_body: str = ""
    text_body: str = ""
    attachments: List[EmailAttachment] = Field(default_factory=list)
    headers: Dict[str, str] = Field(default_factory=dict)
    template_id: str = ""
    template_data: Dict[str, str] = Field(default_factory=dict)
    priority: NotificationPriority = NotificationPriority.NORMAL
    metadata: Dict[str, str] = Field(default_factory=dict)


class BulkEmailRecipient(BaseModel):
    email: str
    data: Dict[str, str] = Field(default_factory=dict)


class BulkEmailRequest(BaseModel):
    recipients: List[BulkEmailRecipient] = Field(default_factory=list)
    subject: str = ""
    html_body: str = ""
    text_body: str = ""
    from_address: str = ""
    reply_to: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)
    template_id: str = ""
    template_data: Dict[str, str] = Field(default_factory=dict)
    priority: NotificationPriority = NotificationPriority.NORMAL
    metadata: Dict[str, str] = Field(default_factory=dict)


class RenderedTemplate(BaseModel):
    id: str
    subject: str
    html_body: str
    text_body: str


class EmailTemplateInfo(BaseModel):
    """Catalog entry for an email template; timestamps are RFC 3339 strings."""

    id: str
    name: str
    subject: str
    html_body: str
    text_body: str
    variables: List[str] = Field(default_factory=list)
    category: str = ""
    created_at: str = ""
    updated_at: str = ""


# SMS service


class SMSRequest(BaseModel):
    phone_number: str = ""
    country_code: str = ""
    message: str = ""
    unicode: bool = False
    template_id: str = ""
    template_data: Dict[str, str] = Field(default_factory=dict)
    priority: NotificationPriority = NotificationPriority.NORMAL
    metadata: Dict[str, str] = Field(default_factory=dict)


class BulkSMSRecipient(BaseModel):
    phone_number: str
    country_code: str = ""
    data: Dict[str, str] = Field(default_factory=dict)


class BulkSMSRequest(BaseModel):
    recipients: List[BulkSMSRecipient] = Field(default_factory=list)
    message: str = ""
    unicode: bool = False
    template_id: str = ""
    template_data: Dict[str, str] = Field(default_factory=dict)
    priority: NotificationPriority = NotificationPriority.NORMAL
    metadata: Dict[str, str] = Field(default_factory=dict)


class RenderedSMSTemplate(BaseModel):
    id: str
    message: str
    max_length: int
    unicode: bool
    segments: int


class CountryInfo(BaseModel):
    code: str
    name: str
    cost: float
    max_length: int = 160
    supported: bool = True


class SMSCostEstimate(BaseModel):
    segments: int
    cost_per_segment: float
    total_cost: float
    unicode: bool
    country_code: str
    message_length: int


# Shared


class ProviderStatus(BaseModel):
    """Health summary of the provider behind a service."""

    name: str
    type: str
    healthy: bool
    error: str = ""
