"""Shared fixtures for notification dispatch tests."""

import random
from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from notification_dispatch.infrastructure.configuration import ChannelSettings
from notification_dispatch.models import (
    EmailPayload,
    EmailRequest,
    Notification,
    NotificationRequest,
    NotificationType,
    PushData,
    PushPayload,
    SMSPayload,
    SMSRequest,
)

IOS_TOKEN = "a1b2c3d4" * 8
ANDROID_TOKEN = "fcm_" + "A1b2-C3d4_" * 15
WEB_TOKEN = "https://push.example.com/send/" + "x" * 40


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")


@pytest.fixture
def ios_token() -> str:
    return IOS_TOKEN


@pytest.fixture
def android_token() -> str:
    return ANDROID_TOKEN


@pytest.fixture
def web_token() -> str:
    return WEB_TOKEN


@pytest.fixture
def channel_settings():
    """Factory for ChannelSettings.

    Example:
        config = channel_settings(provider="unknown")
    """

    def _factory(
        provider: str = "mock",
        enabled: bool = True,
        settings: Optional[Dict[str, str]] = None,
    ) -> ChannelSettings:
        return ChannelSettings(
            provider=provider, enabled=enabled, settings=settings or {}
        )

    return _factory


@pytest.fixture
def delivered_rng():
    """Random source that always lands inside the delivery window."""
    rng = MagicMock(spec=random.Random)
    rng.random.return_value = 0.0
    rng.randint.return_value = 250
    return rng


@pytest.fixture
def undelivered_rng():
    """Random source that always misses the delivery window."""
    rng = MagicMock(spec=random.Random)
    rng.random.return_value = 0.99
    rng.randint.return_value = 250
    return rng


@pytest.fixture
def email_notification_factory():
    """Factory for email notifications with an attached payload."""

    def _factory(
        to: Optional[List[str]] = None,
        subject: str = "Hello",
        text_body: str = "Hello there",
        html_body: str = "",
        **payload_fields,
    ) -> Notification:
        to = ["user@example.com"] if to is None else to
        return Notification(
            type=NotificationType.EMAIL,
            recipient=to[0] if to else "nobody",
            subject=subject,
            body=text_body or html_body or "body",
            payload=EmailPayload(
                to=to,
                html_body=html_body,
                text_body=text_body,
                from_address=payload_fields.pop(
                    "from_address", "sender@example.com"
                ),
                **payload_fields,
            ),
        )

    return _factory


@pytest.fixture
def sms_notification_factory():
    """Factory for SMS notifications with an attached payload."""

    def _factory(
        phone_number: str = "1234567890",
        country_code: str = "US",
        message: str = "Hello world",
        unicode: bool = False,
    ) -> Notification:
        return Notification(
            type=NotificationType.SMS,
            recipient=phone_number or "nobody",
            body=message or "body",
            payload=SMSPayload(
                phone_number=phone_number,
                country_code=country_code,
                message=message,
                unicode=unicode,
            ),
        )

    return _factory


@pytest.fixture
def push_notification_factory():
    """Factory for push notifications with an attached payload."""

    def _factory(
        device_token: str = IOS_TOKEN,
        platform: str = "ios",
        title: str = "Title",
        message: str = "Message",
        **payload_fields,
    ) -> Notification:
        return Notification(
            type=NotificationType.PUSH,
            recipient=device_token or "nobody",
            subject=title,
            body=message or "body",
            payload=PushPayload(
                device_token=device_token,
                platform=platform,
                title=title,
                message=message,
                **payload_fields,
            ),
        )

    return _factory


@pytest.fixture
def email_request_factory():
    def _factory(**overrides) -> EmailRequest:
        fields = {
            "to": ["user@example.com"],
            "subject": "Hello",
            "text_body": "Hello there",
        }
        fields.update(overrides)
        return EmailRequest(**fields)

    return _factory


@pytest.fixture
def sms_request_factory():
    def _factory(**overrides) -> SMSRequest:
        fields = {
            "phone_number": "1234567890",
            "country_code": "US",
            "message": "Hello world",
        }
        fields.update(overrides)
        return SMSRequest(**fields)

    return _factory


@pytest.fixture
def push_request_factory():
    """Factory for generic push requests.

    Example:
        request = push_request_factory(platform="android", device_token=token)
    """

    def _factory(
        device_token: str = IOS_TOKEN,
        platform: str = "ios",
        title: str = "Title",
        body: str = "Message",
        **push_fields,
    ) -> NotificationRequest:
        return NotificationRequest(
            type="push",
            recipient=device_token,
            body=body,
            push_data=PushData(
                device_token=device_token,
                platform=platform,
                title=title,
                **push_fields,
            ),
        )

    return _factory
