"""Data model for the notification dispatch layer."""

from notification_dispatch.models.notification import (
    ChannelPayload,
    EmailAttachment,
    EmailPayload,
    Notification,
    NotificationPriority,
    NotificationStatus,
    NotificationType,
    PushPayload,
    PushPlatform,
    SMSPayload,
    new_id,
    utc_now,
)
from notification_dispatch.models.records import (
    DeviceInfo,
    SentEmail,
    SentPush,
    SentSMS,
)
from notification_dispatch.models.requests import (
    BulkEmailRecipient,
    BulkEmailRequest,
    BulkSMSRecipient,
    BulkSMSRequest,
    CountryInfo,
    DeliveryStatus,
    EmailData,
    EmailRequest,
    EmailTemplateInfo,
    NotificationFilters,
    NotificationRequest,
    NotificationResponse,
    ProviderStatus,
    PushData,
    RenderedSMSTemplate,
    RenderedTemplate,
    SMSCostEstimate,
    SMSData,
    SMSRequest,
)
from notification_dispatch.models.templates import (
    EmailTemplate,
    PushAction,
    PushTemplate,
    SMSTemplate,
    Template,
    replace_placeholders,
)

__all__ = [
    # Entity
    "ChannelPayload",
    "EmailAttachment",
    "EmailPayload",
    "Notification",
    "NotificationPriority",
    "NotificationStatus",
    "NotificationType",
    "PushPayload",
    "PushPlatform",
    "SMSPayload",
    "new_id",
    "utc_now",
    # Records
    "DeviceInfo",
    "SentEmail",
    "SentPush",
    "SentSMS",
    # DTOs
    "BulkEmailRecipient",
    "BulkEmailRequest",
    "BulkSMSRecipient",
    "BulkSMSRequest",
    "CountryInfo",
    "DeliveryStatus",
    "EmailData",
    "EmailRequest",
    "EmailTemplateInfo",
    "NotificationFilters",
    "NotificationRequest",
    "NotificationResponse",
    "ProviderStatus",
    "PushData",
    "RenderedSMSTemplate",
    "RenderedTemplate",
    "SMSCostEstimate",
    "SMSData",
    "SMSRequest",
    # Templates
    "EmailTemplate",
    "PushAction",
    "PushTemplate",
    "SMSTemplate",
    "Template",
    "replace_placeholders",
]
