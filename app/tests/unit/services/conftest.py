"""Fixtures for channel service tests."""

import pytest

from notification_dispatch.services import EmailService, PushService, SMSService


@pytest.fixture(autouse=True)
def instant_latency(monkeypatch):
    """Skip simulated latency while still honoring cancellation."""

    def _wait(seconds, cancel):
        return cancel is not None and cancel.cancelled

    monkeypatch.setattr("notification_dispatch.providers.base.wait_or_cancel", _wait)


@pytest.fixture
def email_service(channel_settings):
    return EmailService(channel_settings())


@pytest.fixture
def sms_service(channel_settings, delivered_rng):
    return SMSService(channel_settings(), rng=delivered_rng)


@pytest.fixture
def push_service(channel_settings, delivered_rng):
    return PushService(channel_settings(), rng=delivered_rng)
