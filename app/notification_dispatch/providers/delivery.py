"""Simulated delivery outcome for mock providers.

Real gateways confirm delivery asynchronously. Mock providers roll the dice
once per send: with probability ``success_rate`` the message counts as
delivered after a random delay, otherwise it stays ``sent``. The random source
is injectable so tests can pin the outcome.
"""

import random
from datetime import timedelta
from typing import Optional


class DeliverySimulator:
    """Decide whether, and how late, a sent message is delivered.

    Args:
        success_rate: Probability in [0, 1] that a message is delivered.
        min_delay_ms: Shortest simulated delivery delay.
        max_delay_ms: Longest simulated delivery delay.
        rng: Random source, ``random.Random()`` when omitted.

    Example:
        simulator = DeliverySimulator(0.9, 100, 600, rng=random.Random(42))
        delay = simulator.simulate()  # timedelta or None
    """

    def __init__(
        self,
        success_rate: float,
        min_delay_ms: int,
        max_delay_ms: int,
        rng: Optional[random.Random] = None,
    ):
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError(f"success_rate must be within [0, 1], got {success_rate}")
        if min_delay_ms > max_delay_ms:
            raise ValueError("min_delay_ms must not exceed max_delay_ms")
        self.success_rate = success_rate
        self.min_delay_ms = min_delay_ms
        self.max_delay_ms = max_delay_ms
        self._rng = rng or random.Random()

    def simulate(self) -> Optional[timedelta]:
        """Return the delivery delay, or None if the message is not delivered."""
        if self._rng.random() >= self.success_rate:
            return None
        return timedelta(
            milliseconds=self._rng.randint(self.min_delay_ms, self.max_delay_ms)
        )
