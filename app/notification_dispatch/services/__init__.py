"""Channel services: the entry points callers use to send notifications."""

from notification_dispatch.services.base import ChannelService
from notification_dispatch.services.email import EmailService
from notification_dispatch.services.push import PushService
from notification_dispatch.services.sms import SMSService

__all__ = ["ChannelService", "EmailService", "PushService", "SMSService"]
