"""Unit tests for CancelToken."""

import threading
import time

import pytest

from notification_dispatch.cancellation import CancelToken, wait_or_cancel


@pytest.mark.unit
class TestCancelToken:
    """Test suite for CancelToken."""

    def test_new_token_is_not_cancelled(self):
        """A fresh token without deadline is not cancelled."""
        token = CancelToken()

        assert token.cancelled is False
        assert token.remaining() is None

    def test_cancel_sets_flag(self):
        """cancel() marks the token cancelled."""
        token = CancelToken()

        token.cancel()

        assert token.cancelled is True

    def test_wait_returns_immediately_when_cancelled(self):
        """wait() on a cancelled token returns True without blocking."""
        token = CancelToken()
        token.cancel()

        start = time.monotonic()
        assert token.wait(5) is True
        assert time.monotonic() - start < 0.5

    def test_wait_completes_without_cancellation(self):
        """wait() returns False after the full wait."""
        assert CancelToken().wait(0.01) is False

    def test_deadline_interrupts_wait(self):
        """A deadline shorter than the wait reports cancellation."""
        token = CancelToken(timeout=0.01)

        start = time.monotonic()
        assert token.wait(5) is True
        assert time.monotonic() - start < 1

    def test_cancel_from_other_thread(self):
        """Cancelling from another thread wakes the waiter."""
        token = CancelToken()
        threading.Timer(0.01, token.cancel).start()

        assert token.wait(5) is True


@pytest.mark.unit
class TestWaitOrCancel:
    """Test suite for wait_or_cancel."""

    def test_without_token_sleeps(self):
        """No token means a plain sleep that is never cancelled."""
        assert wait_or_cancel(0.001, None) is False

    def test_with_cancelled_token(self):
        """A cancelled token is reported."""
        token = CancelToken()
        token.cancel()

        assert wait_or_cancel(1, token) is True
