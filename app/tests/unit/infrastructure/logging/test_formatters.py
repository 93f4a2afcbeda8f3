"""Unit tests for infrastructure.logging.formatters module."""

import pytest

from notification_dispatch.infrastructure.logging.formatters import (
    SENSITIVE_PATTERNS,
    add_app_info,
    add_environment_info,
    mask_sensitive_data,
    truncate_large_values,
)


@pytest.mark.unit
class TestAddAppInfo:
    """Test suite for add_app_info processor factory."""

    def test_adds_name_and_version(self):
        """Processor adds app_name and app_version to event dict."""
        processor = add_app_info("notification-dispatch", "1.0.0")

        result = processor(None, "info", {"event": "sms_sent"})

        assert result["app_name"] == "notification-dispatch"
        assert result["app_version"] == "1.0.0"
        assert result["event"] == "sms_sent"

    def test_unknown_version(self):
        """Default version is 'unknown' if not provided."""
        result = add_app_info("app")(None, "info", {"event": "x"})

        assert result["app_version"] == "unknown"


@pytest.mark.unit
class TestMaskSensitiveData:
    """Test suite for mask_sensitive_data processor factory."""

    @pytest.mark.parametrize(
        "key", ["device_token", "SMTP_PASSWORD", "FCM_SERVER_KEY", "account_sid"]
    )
    def test_masks_sensitive_keys(self, key):
        """Keys containing a sensitive pattern are redacted."""
        result = mask_sensitive_data()(None, "info", {key: "value", "event": "x"})

        assert result[key] == "***REDACTED***"
        assert result["event"] == "x"

    def test_leaves_none_values(self):
        """None values are not replaced."""
        result = mask_sensitive_data()(None, "info", {"auth_header": None})

        assert result["auth_header"] is None

    def test_additional_patterns_and_custom_mask(self):
        """Extra patterns and mask value are honored."""
        processor = mask_sensitive_data("[hidden]", frozenset({"phone"}))

        result = processor(None, "info", {"phone_number": "1234567890"})

        assert result["phone_number"] == "[hidden]"

    def test_patterns_cover_provider_credentials(self):
        """Provider credential names are in the default patterns."""
        assert {"server_key", "account_sid", "token"} <= SENSITIVE_PATTERNS


@pytest.mark.unit
class TestTruncateLargeValues:
    """Test suite for truncate_large_values processor factory."""

    def test_truncates_long_strings(self):
        """Strings beyond the limit are cut with a total-length note."""
        result = truncate_large_values(10)(None, "info", {"html_body": "x" * 25})

        assert result["html_body"] == "x" * 10 + "...[truncated, 25 chars total]"

    def test_short_and_non_string_values_untouched(self):
        """Short strings and other types pass through."""
        result = truncate_large_values(10)(None, "info", {"a": "short", "n": 10**20})

        assert result == {"a": "short", "n": 10**20}


@pytest.mark.unit
def test_add_environment_info():
    """Processor adds the environment name."""
    result = add_environment_info("staging")(None, "info", {"event": "x"})

    assert result["environment"] == "staging"
