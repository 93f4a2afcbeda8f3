"""Unit tests for SMSService."""

import pytest

from notification_dispatch.errors import ErrorCode, NotificationError
from notification_dispatch.models import (
    BulkSMSRecipient,
    BulkSMSRequest,
    NotificationStatus,
    SMSTemplate,
)
from notification_dispatch.services import SMSService


@pytest.mark.unit
class TestSendSMS:
    """Test suite for send_sms."""

    def test_end_to_end(self, sms_service, sms_request_factory):
        """A US message is sent as one segment at $0.0075."""
        response = sms_service.send_sms(
            sms_request_factory(
                phone_number="1234567890", country_code="US", message="Hello world"
            )
        )

        assert response.status == NotificationStatus.SENT
        assert "SMS sent to 1234567890 (1 segments, $0.0075)" in response.message
        sent = sms_service.provider.get_sent_sms()
        assert len(sent) == 1
        assert sent[0].segments == 1
        assert sent[0].cost == 0.0075

    def test_unknown_provider(self, channel_settings):
        """Unknown providers fail with an SMS specific message."""
        with pytest.raises(NotificationError, match="unsupported SMS provider: twilio"):
            SMSService(channel_settings(provider="twilio"))

    @pytest.mark.parametrize(
        "overrides,match",
        [
            ({"phone_number": ""}, "phone number is required"),
            ({"phone_number": "123456789"}, "US/CA numbers must be 10 or 11 digits"),
            ({"country_code": "XX"}, "country code not supported: XX"),
            ({"message": ""}, "SMS message is required when not using a template"),
            ({"message": "a" * 1601}, "max 1600 characters"),
        ],
    )
    def test_validation(self, sms_service, sms_request_factory, overrides, match):
        """Invalid requests fail before reaching the provider."""
        with pytest.raises(NotificationError, match=match):
            sms_service.send_sms(sms_request_factory(**overrides))

        assert sms_service.provider.get_sent_sms() == []

    @pytest.mark.parametrize("message", ["   ", "\n\t"])
    def test_blank_message(self, sms_service, sms_request_factory, message):
        """Whitespace-only messages are rejected before the provider is called."""
        sms_service.provider.set_healthy(False)

        with pytest.raises(NotificationError) as excinfo:
            sms_service.send_sms(sms_request_factory(message=message))

        assert excinfo.value.code == ErrorCode.VALIDATION_FAILED
        assert excinfo.value.field == "message"

    def test_template_rendering_blank_message(self, sms_service, sms_request_factory):
        """A template that renders to whitespace is rejected."""
        sms_service.provider.add_template(SMSTemplate(id="raw", message="{{text}}"))
        request = sms_request_factory(
            message="", template_id="raw", template_data={"text": "   "}
        )

        with pytest.raises(NotificationError) as excinfo:
            sms_service.send_sms(request)

        assert excinfo.value.field == "message"
        assert sms_service.provider.get_sent_sms() == []

    def test_none_request(self, sms_service):
        """A missing request fails validation."""
        with pytest.raises(NotificationError, match="SMS request is required"):
            sms_service.send_sms(None)

    def test_template(self, sms_service, sms_request_factory):
        """A template supplies the message."""
        sms_service.send_sms(
            sms_request_factory(
                message="",
                template_id="welcome_sms",
                template_data={"service_name": "Acme", "user_name": "Ada"},
            )
        )

        assert sms_service.provider.get_sent_sms()[0].message == (
            "Welcome to Acme, Ada! Thanks for joining us."
        )

    def test_country_code_stored(self, sms_service, sms_request_factory):
        """The country code travels in the record."""
        sms_service.send_sms(sms_request_factory(country_code="CA"))

        record = sms_service.provider.get_sent_sms()[0]
        assert record.country_code == "CA"
        assert record.cost == 0.0070

    def test_unhealthy_provider(self, sms_service, sms_request_factory):
        """Health errors propagate unchanged."""
        sms_service.provider.set_healthy(False)

        with pytest.raises(NotificationError) as excinfo:
            sms_service.send_sms(sms_request_factory())

        assert excinfo.value.code == ErrorCode.PROVIDER_UNAVAILABLE


@pytest.mark.unit
class TestSendBulkSMS:
    """Test suite for send_bulk_sms."""

    def test_partial_failure_is_isolated(self, sms_service):
        """An invalid number yields a FAILED entry without aborting."""
        request = BulkSMSRequest(
            recipients=[
                BulkSMSRecipient(phone_number="1234567890", country_code="US"),
                BulkSMSRecipient(phone_number="12", country_code="US"),
                BulkSMSRecipient(phone_number="2345678901", country_code="US"),
            ],
            message="Hello world",
        )

        responses = sms_service.send_bulk_sms(request)

        assert [r.status for r in responses] == [
            NotificationStatus.SENT,
            NotificationStatus.FAILED,
            NotificationStatus.SENT,
        ]
        assert "7-15 digits" in responses[1].error
        assert responses[1].id not in (responses[0].id, responses[2].id)
        assert len(sms_service.provider.get_sent_sms()) == 2

    def test_blank_rendered_message_is_isolated(self, sms_service):
        """A recipient whose message renders blank fails alone."""
        sms_service.provider.add_template(SMSTemplate(id="raw", message="{{text}}"))
        request = BulkSMSRequest(
            recipients=[
                BulkSMSRecipient(phone_number="1234567890", data={"text": "Hi"}),
                BulkSMSRecipient(phone_number="2345678901", data={"text": "  "}),
                BulkSMSRecipient(phone_number="3456789012", data={"text": "Bye"}),
            ],
            template_id="raw",
        )

        responses = sms_service.send_bulk_sms(request)

        assert [r.status for r in responses] == [
            NotificationStatus.SENT,
            NotificationStatus.FAILED,
            NotificationStatus.SENT,
        ]
        assert "message" in responses[1].error
        assert [s.message for s in sms_service.provider.get_sent_sms()] == ["Hi", "Bye"]

    def test_blank_message_fails_each_recipient(self, sms_service):
        """Blank shared content yields one FAILED entry per recipient."""
        request = BulkSMSRequest(
            recipients=[
                BulkSMSRecipient(phone_number="1234567890", country_code="US"),
                BulkSMSRecipient(phone_number="2345678901", country_code="US"),
                BulkSMSRecipient(phone_number="3456789012", country_code="US"),
            ],
            message="  ",
        )

        responses = sms_service.send_bulk_sms(request)

        assert [r.status for r in responses] == [NotificationStatus.FAILED] * 3
        assert sms_service.provider.get_sent_sms() == []

    def test_recipient_data_overrides_global(self, sms_service):
        """Recipient data wins over the request data."""
        request = BulkSMSRequest(
            recipients=[
                BulkSMSRecipient(phone_number="1234567890", data={"code": "999"}),
                BulkSMSRecipient(phone_number="2345678901"),
            ],
            template_id="verification",
            template_data={
                "service_name": "Acme",
                "code": "111",
                "expiry_minutes": "5",
            },
        )

        sms_service.send_bulk_sms(request)

        messages = [s.message for s in sms_service.provider.get_sent_sms()]
        assert "999" in messages[0]
        assert "111" in messages[1]

    def test_empty_recipients(self, sms_service):
        """Bulk sends need at least one recipient."""
        with pytest.raises(NotificationError) as excinfo:
            sms_service.send_bulk_sms(BulkSMSRequest(message="x"))

        assert excinfo.value.field == "recipients"


@pytest.mark.unit
class TestSMSServiceQueries:
    """Test suite for cost, countries and templates."""

    def test_estimate_cost(self, sms_service):
        """Estimates multiply segments by the per-segment rate."""
        estimate = sms_service.estimate_cost("a" * 200, "US")

        assert estimate.segments == 2
        assert estimate.cost_per_segment == 0.0075
        assert estimate.total_cost == 2 * 0.0075
        assert estimate.message_length == 200

    def test_estimate_cost_default_rate(self, sms_service):
        """No country means the default rate."""
        estimate = sms_service.estimate_cost("é" * 71, unicode=True)

        assert estimate.segments == 2
        assert estimate.total_cost == 2 * 0.01

    def test_estimate_cost_unknown_country(self, sms_service):
        """Unknown countries fail."""
        with pytest.raises(NotificationError) as excinfo:
            sms_service.estimate_cost("hi", "ZZ")

        assert excinfo.value.code == ErrorCode.NOT_FOUND

    def test_get_sms_cost(self, sms_service):
        """Per-segment cost comes from the provider."""
        assert sms_service.get_sms_cost("IN") == 0.0050

    def test_supported_countries(self, sms_service):
        """Countries are listed through the provider catalog."""
        codes = [c.code for c in sms_service.get_supported_countries()]

        assert codes == ["US", "UK", "CA", "AU", "DE", "FR", "IN", "BR"]

    def test_render_template(self, sms_service):
        """Rendered SMS templates report their segment count."""
        rendered = sms_service.render_template("alert", {"alert_message": "Disk full"})

        assert rendered.message.startswith("ALERT: Disk full")
        assert rendered.segments == 1
        assert rendered.max_length == 160

    def test_validate_phone_number(self, sms_service):
        """Phone validation delegates to the provider."""
        sms_service.validate_phone_number("1234567890", "US")
        with pytest.raises(NotificationError):
            sms_service.validate_phone_number("1", "US")
