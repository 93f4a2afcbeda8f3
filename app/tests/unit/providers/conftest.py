"""Fixtures for provider tests."""

import pytest

from notification_dispatch.providers.email_mock import MockEmailProvider
from notification_dispatch.providers.push_mock import MockPushProvider
from notification_dispatch.providers.sms_mock import MockSMSProvider


@pytest.fixture
def email_provider(channel_settings):
    return MockEmailProvider(channel_settings())


@pytest.fixture
def sms_provider(channel_settings, delivered_rng):
    return MockSMSProvider(channel_settings(), rng=delivered_rng)


@pytest.fixture
def push_provider(channel_settings, delivered_rng):
    return MockPushProvider(channel_settings(), rng=delivered_rng)
