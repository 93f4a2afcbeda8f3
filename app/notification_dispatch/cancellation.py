"""Cancellation signal for simulated provider latency.

Provider calls are synchronous. A caller that wants to abandon a send passes a
``CancelToken``; the provider waits on it instead of sleeping and raises a
TIMEOUT error when the token fires first.

Usage:
    token = CancelToken(timeout=0.05)
    service.send_sms(request, cancel=token)  # raises TIMEOUT after 50ms

    token = CancelToken()
    threading.Timer(0.01, token.cancel).start()
"""

import threading
import time
from typing import Optional


class CancelToken:
    """Cancellation flag with an optional deadline.

    Args:
        timeout: Seconds from construction after which the token counts as
            cancelled. ``None`` means no deadline.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._event = threading.Event()
        self._deadline: Optional[float] = (
            time.monotonic() + timeout if timeout is not None else None
        )

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without one."""
        if self._deadline is None:
            return None
        return max(self._deadline - time.monotonic(), 0.0)

    def wait(self, seconds: float) -> bool:
        """Block for ``seconds`` unless cancelled first.

        Returns:
            True if the token was cancelled (or its deadline passed) before
            ``seconds`` elapsed, False if the full wait completed.
        """
        if self.cancelled:
            return True
        remaining = self.remaining()
        if remaining is not None and remaining < seconds:
            self._event.wait(remaining)
            return True
        return self._event.wait(seconds)


def wait_or_cancel(seconds: float, cancel: Optional[CancelToken]) -> bool:
    """Sleep for ``seconds``; return True if ``cancel`` fired first."""
    if cancel is None:
        time.sleep(seconds)
        return False
    return cancel.wait(seconds)
