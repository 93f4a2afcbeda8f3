"""Unit tests for DeliverySimulator."""

import random
from datetime import timedelta

import pytest

from notification_dispatch.providers.delivery import DeliverySimulator


@pytest.mark.unit
class TestDeliverySimulator:
    """Test suite for DeliverySimulator."""

    def test_delivered_within_delay_window(self, delivered_rng):
        """A roll under the success rate yields the drawn delay."""
        simulator = DeliverySimulator(0.9, 100, 600, rng=delivered_rng)

        assert simulator.simulate() == timedelta(milliseconds=250)
        delivered_rng.randint.assert_called_once_with(100, 600)

    def test_not_delivered(self, undelivered_rng):
        """A roll at or over the success rate yields None."""
        simulator = DeliverySimulator(0.9, 100, 600, rng=undelivered_rng)

        assert simulator.simulate() is None

    def test_success_rate_is_roughly_honored(self):
        """About success_rate of many rolls are delivered."""
        simulator = DeliverySimulator(0.85, 500, 2500, rng=random.Random(1234))

        delivered = sum(1 for _ in range(2000) if simulator.simulate() is not None)

        assert 0.80 < delivered / 2000 < 0.90

    def test_seeded_rng_is_reproducible(self):
        """The same seed gives the same outcomes."""
        first = DeliverySimulator(0.5, 1, 10, rng=random.Random(7))
        second = DeliverySimulator(0.5, 1, 10, rng=random.Random(7))

        assert [first.simulate() for _ in range(20)] == [
            second.simulate() for _ in range(20)
        ]

    @pytest.mark.parametrize(
        "rate,low,high", [(-0.1, 1, 2), (1.1, 1, 2), (0.5, 10, 1)]
    )
    def test_invalid_arguments(self, rate, low, high):
        """Out-of-range rates and inverted windows are rejected."""
        with pytest.raises(ValueError):
            DeliverySimulator(rate, low, high)
