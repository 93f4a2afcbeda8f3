"""Audit records kept by mock providers.

One record is appended per successful send. Records are owned by the provider
instance that created them and only disappear through ``clear_sent_*()``.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from notification_dispatch.models.notification import EmailAttachment, utc_now


class SentEmail(BaseModel):
    id: str
    to: List[str]
    cc: List[str] = Field(default_factory=list)
    bcc: List[str] = Field(default_factory=list)
    from_address: str = ""
    reply_to: str = ""
    subject: str = ""
    html_body: str = ""
    text_body: str = ""
    attachments: List[EmailAttachment] = Field(default_factory=list)
    headers: Dict[str, str] = Field(default_factory=dict)
    sent_at: datetime = Field(default_factory=utc_now)
    status: str = "sent"
    provider_data: Dict[str, str] = Field(default_factory=dict)


class SentSMS(BaseModel):
    id: str
    phone_number: str
    country_code: str = ""
    message: str
    unicode: bool = False
    sent_at: datetime = Field(default_factory=utc_now)
    delivered_at: Optional[datetime] = None
    status: str = "sent"
    cost: float = 0.0
    segments: int = 1
    provider_data: Dict[str, str] = Field(default_factory=dict)


class SentPush(BaseModel):
    id: str
    device_token: str
    platform: str
    title: str = ""
    body: str = ""
    icon: str = ""
    badge: int = 0
    sound: str = ""
    data: Dict[str, str] = Field(default_factory=dict)
    image_url: str = ""
    click_action: str = ""
    sent_at: datetime = Field(default_factory=utc_now)
    delivered_at: Optional[datetime] = None
    status: str = "sent"
    provider_data: Dict[str, str] = Field(default_factory=dict)


class DeviceInfo(BaseModel):
    """Registered push device."""

    token: str
    platform: str
    app_version: str = ""
    os_version: str = ""
    registered_at: datetime = Field(default_factory=utc_now)
    last_seen: datetime = Field(default_factory=utc_now)
    active: bool = True
    metadata: Dict[str, str] = Field(default_factory=dict)
