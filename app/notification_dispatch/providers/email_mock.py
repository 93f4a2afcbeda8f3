"""In-memory email provider.

Simulates an email gateway: validates the message, waits out a fixed latency
window and records every accepted email in an audit list instead of sending
it. Ships three seed templates (welcome, password_reset, notification).
"""

from typing import List, Optional

from notification_dispatch.cancellation import CancelToken
from notification_dispatch.errors import NotificationError
from notification_dispatch.infrastructure.configuration import DEFAULT_SENDER
from notification_dispatch.models import (
    EmailPayload,
    EmailTemplate,
    EmailTemplateInfo,
    Notification,
    NotificationResponse,
    NotificationStatus,
    NotificationType,
    SentEmail,
    utc_now,
)
from notification_dispatch.providers import register_provider
from notification_dispatch.providers.base import EmailProvider
from notification_dispatch.providers.contracts import ProviderConfig, RateLimitConfig
from notification_dispatch.providers.templates import (
    TemplateCatalog,
    TemplateProviderMixin,
)
from notification_dispatch.validation import (
    is_valid_email_address,
    validate_email_address,
)

DEFAULT_EMAIL_TEMPLATES = (
    {
        "id": "welcome",
        "name": "Welcome Email",
        "subject": "Welcome to {{service_name}}, {{user_name}}!",
        "html_body": (
            "<html>\n"
            "  <body>\n"
            "    <h1>Welcome {{user_name}}!</h1>\n"
            "    <p>Thank you for joining {{service_name}}. "
            "We're excited to have you on board!</p>\n"
            "    <p>Your account email: {{user_email}}</p>\n"
            "    <p>Best regards,<br>The {{service_name}} Team</p>\n"
            "  </body>\n"
            "</html>\n"
        ),
        "text_body": (
            "Welcome {{user_name}}!\n\n"
            "Thank you for joining {{service_name}}. "
            "We're excited to have you on board!\n\n"
            "Your account email: {{user_email}}\n\n"
            "Best regards,\n"
            "The {{service_name}} Team\n"
        ),
        "variables": ["user_name", "user_email", "service_name"],
        "category": "onboarding",
    },
    {
        "id": "password_reset",
        "name": "Password Reset",
        "subject": "Reset your {{service_name}} password",
        "html_body": (
            "<html>\n"
            "  <body>\n"
            "    <h1>Password Reset Request</h1>\n"
            "    <p>Hi {{user_name}},</p>\n"
            "    <p>You requested a password reset for your {{service_name}} account.</p>\n"
            '    <p><a href="{{reset_link}}">Reset Password</a></p>\n'
            "    <p>This link will expire in {{expiry_time}}.</p>\n"
            "    <p>If you didn't request this reset, please ignore this email.</p>\n"
            "  </body>\n"
            "</html>\n"
        ),
        "text_body": (
            "Password Reset Request\n\n"
            "Hi {{user_name}},\n\n"
            "You requested a password reset for your {{service_name}} account.\n\n"
            "Reset your password: {{reset_link}}\n\n"
            "This link will expire in {{expiry_time}}.\n\n"
            "If you didn't request this reset, please ignore this email.\n"
        ),
        "variables": ["user_name", "service_name", "reset_link", "expiry_time"],
        "category": "security",
    },
    {
        "id": "notification",
        "name": "General Notification",
        "subject": "{{notification_title}}",
        "html_body": (
            "<html>\n"
            "  <body>\n"
            "    <h2>{{notification_title}}</h2>\n"
            "    <p>{{notification_message}}</p>\n"
            "    <p><em>Sent at {{timestamp}}</em></p>\n"
            "  </body>\n"
            "</html>\n"
        ),
        "text_body": (
            "{{notification_title}}\n\n"
            "{{notification_message}}\n\n"
            "Sent at {{timestamp}}\n"
        ),
        "variables": ["notification_title", "notification_message", "timestamp"],
        "category": "general",
    },
)


@register_provider(NotificationType.EMAIL, "mock")
class MockEmailProvider(TemplateProviderMixin, EmailProvider):
    """Email provider that records messages instead of sending them."""

    name = "mock-email"
    SEND_DELAY = 0.1
    HEALTH_CHECK_DELAY = 0.05

    def __init__(self, config=None):
        super().__init__(config)
        self._templates = TemplateCatalog(EmailTemplate, DEFAULT_EMAIL_TEMPLATES)
        self._sent_emails: List[SentEmail] = []

    @property
    def default_sender(self) -> str:
        return self.settings.get("default_sender") or DEFAULT_SENDER

    def send(
        self, notification: Notification, cancel: Optional[CancelToken] = None
    ) -> NotificationResponse:
        self._ensure_healthy()
        self._require_type(notification)
        if not isinstance(notification.payload, EmailPayload):
            notification = notification.model_copy(
                update={
                    "payload": EmailPayload(
                        to=[notification.recipient],
                        from_address=self.default_sender,
                        html_body=notification.body,
                        text_body=notification.body,
                    )
                }
            )
        return self.send_email(notification, cancel)

    def send_email(
        self, notification: Notification, cancel: Optional[CancelToken] = None
    ) -> NotificationResponse:
        self._ensure_healthy()
        email = notification.payload
        if not isinstance(email, EmailPayload):
            raise NotificationError.validation("payload", "email payload is required")
        self._validate_email(notification, email)

        self._simulate_latency(self.SEND_DELAY, cancel, "email sending timed out")

        message_id = f"mock-{notification.id}"
        self._sent_emails.append(
            SentEmail(
                id=notification.id,
                to=list(email.to),
                cc=list(email.cc),
                bcc=list(email.bcc),
                from_address=email.from_address,
                reply_to=email.reply_to,
                subject=notification.subject,
                html_body=email.html_body,
                text_body=email.text_body,
                attachments=[a.model_copy(deep=True) for a in email.attachments],
                headers=dict(email.headers),
                provider_data={
                    "provider": self.name,
                    "message_id": message_id,
                    "queue_time": f"{int(self.SEND_DELAY * 1000)}ms",
                    "retry_count": "0",
                },
            )
        )
        self._logger.info(
            "email_sent",
            notification_id=notification.id,
            recipients=len(email.to),
            message_id=message_id,
        )
        return NotificationResponse(
            id=notification.id,
            status=NotificationStatus.SENT,
            message=f"Email successfully sent to {len(email.to)} recipients",
            provider_id=message_id,
            sent_at=utc_now(),
        )

    def validate_email_address(self, email: str) -> None:
        validate_email_address(email)

    def get_email_templates(self) -> List[EmailTemplateInfo]:
        return [
            EmailTemplateInfo(
                id=template.id,
                name=template.name,
                subject=template.subject,
                html_body=template.html_body,
                text_body=template.text_body,
                variables=list(template.variables),
                category=template.category,
                created_at=template.created_at.isoformat(timespec="seconds"),
                updated_at=template.updated_at.isoformat(timespec="seconds"),
            )
            for template in self._templates.list()
        ]

    def get_config(self) -> ProviderConfig:
        return ProviderConfig(
            name="Mock Email Provider",
            type=NotificationType.EMAIL.value,
            enabled=self.enabled,
            priority=1,
            max_retries=3,
            timeout=30,
            rate_limit=RateLimitConfig(
                enabled=True, requests_per_min=100, burst_size=10
            ),
            settings={
                "provider_type": "mock",
                "version": "1.0.0",
                "features": "templates,validation,tracking",
            },
        )

    def get_sent_emails(self) -> List[SentEmail]:
        return list(self._sent_emails)

    def clear_sent_emails(self) -> None:
        self._sent_emails.clear()

    def _validate_email(self, notification: Notification, email: EmailPayload) -> None:
        if not email.to:
            raise NotificationError.validation(
                "to", "at least one recipient is required"
            )

        for field in ("to", "cc", "bcc"):
            for address in getattr(email, field):
                if not is_valid_email_address(address):
                    raise NotificationError.validation(
                        field, f"invalid email address: {address}"
                    )

        if email.from_address and not is_valid_email_address(email.from_address):
            raise NotificationError.validation(
                "from_address", "invalid sender email address"
            )
        if email.reply_to and not is_valid_email_address(email.reply_to):
            raise NotificationError.validation(
                "reply_to", "invalid reply-to email address"
            )

        if not notification.subject:
            raise NotificationError.validation("subject", "email subject is required")
        if not email.html_body and not email.text_body:
            raise NotificationError.validation(
                "body", "email must have either HTML or text body"
            )
