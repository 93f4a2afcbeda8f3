"""Multi-channel notification dispatch.

Channel services validate requests, render templates and delegate to a
provider resolved from configuration:

    from notification_dispatch import SMSService, SMSRequest, get_settings

    service = SMSService(get_settings().sms)
    response = service.send_sms(
        SMSRequest(phone_number="1234567890", country_code="US", message="Hello")
    )
"""

from notification_dispatch.cancellation import CancelToken
from notification_dispatch.errors import BulkSendError, ErrorCode, NotificationError
from notification_dispatch.infrastructure.configuration import Settings, get_settings
from notification_dispatch.models import (
    BulkEmailRecipient,
    BulkEmailRequest,
    BulkSMSRecipient,
    BulkSMSRequest,
    EmailRequest,
    NotificationRequest,
    NotificationResponse,
    PushData,
    SMSRequest,
)
from notification_dispatch.services import EmailService, PushService, SMSService

__version__ = "1.0.0"

__all__ = [
    "BulkEmailRecipient",
    "BulkEmailRequest",
    "BulkSMSRecipient",
    "BulkSMSRequest",
    "BulkSendError",
    "CancelToken",
    "EmailRequest",
    "EmailService",
    "ErrorCode",
    "NotificationError",
    "NotificationRequest",
    "NotificationResponse",
    "PushData",
    "PushService",
    "SMSRequest",
    "SMSService",
    "Settings",
    "get_settings",
]
