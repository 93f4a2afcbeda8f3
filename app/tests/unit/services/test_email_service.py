"""Unit tests for EmailService."""

from unittest.mock import MagicMock

import pytest

from notification_dispatch.cancellation import CancelToken
from notification_dispatch.errors import ErrorCode, NotificationError
from notification_dispatch.models import (
    BulkEmailRecipient,
    BulkEmailRequest,
    EmailTemplate,
    NotificationPriority,
    NotificationStatus,
)
from notification_dispatch.providers.email_mock import MockEmailProvider
from notification_dispatch.services import EmailService


@pytest.mark.unit
class TestEmailServiceConstruction:
    """Test suite for provider resolution."""

    def test_resolves_mock_provider(self, email_service):
        """The mock provider is resolved from configuration."""
        assert isinstance(email_service.provider, MockEmailProvider)

    def test_unknown_provider(self, channel_settings):
        """Unknown provider names fail construction."""
        with pytest.raises(NotificationError) as excinfo:
            EmailService(channel_settings(provider="sendgrid"))

        assert excinfo.value.code == ErrorCode.PROVIDER_NOT_FOUND
        assert excinfo.value.message == "unsupported email provider: sendgrid"

    def test_injected_provider_and_logger(self, channel_settings):
        """An injected provider and logger are used as given."""
        provider = MockEmailProvider()
        logger = MagicMock()

        service = EmailService(channel_settings(), logger=logger, provider=provider)

        assert service.provider is provider
        logger.bind.assert_called_once_with(channel="email")
        logger.bind.return_value.info.assert_called_once()


@pytest.mark.unit
class TestSendEmail:
    """Test suite for send_email."""

    def test_sends_with_default_sender(self, email_service, email_request_factory):
        """A valid request is sent from the default sender."""
        response = email_service.send_email(email_request_factory())

        assert response.status == NotificationStatus.SENT
        sent = email_service.provider.get_sent_emails()[0]
        assert sent.from_address == "noreply@notification-service.local"
        assert sent.subject == "Hello"

    def test_configured_sender(self, channel_settings, email_request_factory):
        """default_sender comes from the channel settings."""
        config = channel_settings(settings={"default_sender": "ops@example.com"})
        service = EmailService(config)

        service.send_email(email_request_factory())

        assert service.provider.get_sent_emails()[0].from_address == "ops@example.com"

    def test_none_request(self, email_service):
        """A missing request fails validation."""
        with pytest.raises(NotificationError, match="email request is required"):
            email_service.send_email(None)

    @pytest.mark.parametrize(
        "overrides,field,message",
        [
            ({"to": []}, "to", "at least one recipient is required"),
            ({"to": ["nope"]}, "to", "invalid email address: nope"),
            ({"cc": ["nope"]}, "cc", "invalid email address: nope"),
            ({"bcc": ["nope"]}, "bcc", "invalid email address: nope"),
            ({"from_address": "nope"}, "from_address", "invalid sender email address"),
            ({"reply_to": "nope"}, "reply_to", "invalid reply-to email address"),
            (
                {"subject": ""},
                "subject",
                "email subject is required when not using a template",
            ),
            (
                {"subject": "   "},
                "subject",
                "email subject is required when not using a template",
            ),
            (
                {"text_body": ""},
                "body",
                "email must have either HTML body, text body, or template",
            ),
            (
                {"text_body": " \n\t"},
                "body",
                "email must have either HTML body, text body, or template",
            ),
        ],
    )
    def test_validation(
        self, email_service, email_request_factory, overrides, field, message
    ):
        """The first failing field is reported."""
        with pytest.raises(NotificationError) as excinfo:
            email_service.send_email(email_request_factory(**overrides))

        assert excinfo.value.field == field
        assert message in excinfo.value.message
        assert email_service.provider.get_sent_emails() == []

    def test_blank_content_fails_before_health_check(
        self, email_service, email_request_factory
    ):
        """Whitespace-only bodies are a validation error, not a provider error."""
        email_service.provider.set_healthy(False)

        with pytest.raises(NotificationError) as excinfo:
            email_service.send_email(email_request_factory(text_body="   "))

        assert excinfo.value.code == ErrorCode.VALIDATION_FAILED
        assert excinfo.value.field == "body"

    def test_blank_text_body_falls_back_to_html(
        self, email_service, email_request_factory
    ):
        """The HTML body is used when the text body is only whitespace."""
        request = email_request_factory(text_body="  ", html_body="<p>Hi</p>")

        response = email_service.send_email(request)

        assert response.status == NotificationStatus.SENT
        assert email_service.provider.get_sent_emails()[0].html_body == "<p>Hi</p>"

    def test_template_rendering_blank_body(self, email_service, email_request_factory):
        """A template that renders to whitespace is rejected."""
        email_service.provider.add_template(
            EmailTemplate(id="note", subject="Note", text_body="{{text}}")
        )
        request = email_request_factory(
            subject="", text_body="", template_id="note", template_data={"text": "  "}
        )

        with pytest.raises(NotificationError) as excinfo:
            email_service.send_email(request)

        assert excinfo.value.code == ErrorCode.VALIDATION_FAILED
        assert excinfo.value.field == "body"
        assert email_service.provider.get_sent_emails() == []

    def test_template_overrides_content(self, email_service, email_request_factory):
        """A template replaces subject and bodies."""
        request = email_request_factory(
            subject="",
            text_body="",
            template_id="welcome",
            template_data={"user_name": "Ada", "service_name": "Acme"},
        )

        email_service.send_email(request)

        sent = email_service.provider.get_sent_emails()[0]
        assert sent.subject == "Welcome to Acme, Ada!"
        assert "Ada" in sent.html_body

    def test_unknown_template(self, email_service, email_request_factory):
        """Unknown templates fail with TEMPLATE_NOT_FOUND."""
        with pytest.raises(NotificationError) as excinfo:
            email_service.send_email(email_request_factory(template_id="missing"))

        assert excinfo.value.code == ErrorCode.TEMPLATE_NOT_FOUND

    def test_provider_error_propagates(self, email_service, email_request_factory):
        """Provider health errors reach the caller unchanged."""
        email_service.provider.set_healthy(False)

        with pytest.raises(NotificationError) as excinfo:
            email_service.send_email(email_request_factory())

        assert excinfo.value.code == ErrorCode.PROVIDER_UNAVAILABLE

    def test_cancelled(self, email_service, email_request_factory):
        """A cancelled token times out and records nothing."""
        token = CancelToken()
        token.cancel()

        with pytest.raises(NotificationError) as excinfo:
            email_service.send_email(email_request_factory(), cancel=token)

        assert excinfo.value.code == ErrorCode.TIMEOUT
        assert email_service.provider.get_sent_emails() == []


@pytest.mark.unit
class TestSendBulkEmail:
    """Test suite for send_bulk_email."""

    def test_partial_failure_is_isolated(self, email_service):
        """A bad address becomes a FAILED entry; the batch continues."""
        request = BulkEmailRequest(
            recipients=[
                BulkEmailRecipient(email="a@example.com"),
                BulkEmailRecipient(email="not-an-email"),
                BulkEmailRecipient(email="c@example.com"),
            ],
            subject="Hi",
            text_body="Hello",
        )

        responses = email_service.send_bulk_email(request)

        assert len(responses) == 3
        assert [r.status for r in responses] == [
            NotificationStatus.SENT,
            NotificationStatus.FAILED,
            NotificationStatus.SENT,
        ]
        assert responses[1].error
        assert len(email_service.provider.get_sent_emails()) == 2

    def test_blank_rendered_body_is_isolated(self, email_service):
        """A recipient whose content renders blank fails alone."""
        email_service.provider.add_template(
            EmailTemplate(id="note", subject="Note", text_body="{{text}}")
        )
        request = BulkEmailRequest(
            recipients=[
                BulkEmailRecipient(email="a@example.com", data={"text": "Hello"}),
                BulkEmailRecipient(email="b@example.com", data={"text": " "}),
                BulkEmailRecipient(email="c@example.com", data={"text": "Bye"}),
            ],
            template_id="note",
        )

        responses = email_service.send_bulk_email(request)

        assert [r.status for r in responses] == [
            NotificationStatus.SENT,
            NotificationStatus.FAILED,
            NotificationStatus.SENT,
        ]
        assert "VALIDATION_FAILED" in responses[1].error
        sent = email_service.provider.get_sent_emails()
        assert [s.to for s in sent] == [["a@example.com"], ["c@example.com"]]

    def test_blank_body_fails_each_recipient(self, email_service):
        """Blank shared content yields one FAILED entry per recipient."""
        request = BulkEmailRequest(
            recipients=[
                BulkEmailRecipient(email="a@example.com"),
                BulkEmailRecipient(email="b@example.com"),
                BulkEmailRecipient(email="c@example.com"),
            ],
            subject="Hi",
            text_body=" ",
        )

        responses = email_service.send_bulk_email(request)

        assert [r.status for r in responses] == [NotificationStatus.FAILED] * 3
        assert email_service.provider.get_sent_emails() == []

    def test_recipient_data_overrides_global(self, email_service):
        """Per-recipient template data wins over the global data."""
        request = BulkEmailRequest(
            recipients=[
                BulkEmailRecipient(email="a@example.com", data={"user_name": "Ada"}),
                BulkEmailRecipient(email="b@example.com"),
            ],
            template_id="welcome",
            template_data={"user_name": "friend", "service_name": "Acme"},
            priority=NotificationPriority.HIGH,
        )

        email_service.send_bulk_email(request)

        subjects = [s.subject for s in email_service.provider.get_sent_emails()]
        assert subjects == ["Welcome to Acme, Ada!", "Welcome to Acme, friend!"]

    def test_empty_recipients(self, email_service):
        """Bulk sends need at least one recipient."""
        with pytest.raises(NotificationError) as excinfo:
            email_service.send_bulk_email(BulkEmailRequest(subject="x", text_body="y"))

        assert excinfo.value.field == "recipients"


@pytest.mark.unit
class TestEmailServiceQueries:
    """Test suite for templates, validation and status."""

    def test_render_template(self, email_service):
        """Rendering returns the rendered subject and bodies."""
        rendered = email_service.render_template(
            "password_reset", {"user_name": "Ada"}
        )

        assert rendered.id == "password_reset"
        assert "Ada" in rendered.text_body

    def test_get_email_templates(self, email_service):
        """Templates are listed from the provider."""
        assert len(email_service.get_email_templates()) == 3

    def test_validate_email_address(self, email_service):
        """Address validation delegates to the provider."""
        email_service.validate_email_address("user@domain.co.uk")
        with pytest.raises(NotificationError):
            email_service.validate_email_address("invalid-email")

    def test_provider_status(self, email_service):
        """Status reports health without raising."""
        assert email_service.get_provider_status().healthy is True

        email_service.provider.set_healthy(False)
        status = email_service.get_provider_status()

        assert status.healthy is False
        assert status.name == "mock-email"
        assert "PROVIDER_UNAVAILABLE" in status.error
