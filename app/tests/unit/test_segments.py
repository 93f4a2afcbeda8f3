"""Unit tests for SMS segment math."""

import pytest

from notification_dispatch.segments import (
    calculate_segments,
    max_message_length,
    segment_length,
)


@pytest.mark.unit
class TestCalculateSegments:
    """Test suite for calculate_segments."""

    @pytest.mark.parametrize(
        "length,expected",
        [(1, 1), (160, 1), (161, 2), (306, 2), (307, 3), (1600, 11)],
    )
    def test_plain_text(self, length, expected):
        """Plain messages use 160 for one part and 153 per concatenated part."""
        assert calculate_segments("a" * length, unicode=False) == expected

    @pytest.mark.parametrize(
        "length,expected",
        [(70, 1), (71, 2), (134, 2), (135, 3)],
    )
    def test_unicode(self, length, expected):
        """Unicode messages use 70 for one part and 67 per concatenated part."""
        assert calculate_segments("é" * length, unicode=True) == expected

    def test_empty_message_is_one_segment(self):
        """An empty message still occupies one segment."""
        assert calculate_segments("", unicode=False) == 1


@pytest.mark.unit
class TestLimits:
    """Test suite for segment limits."""

    def test_segment_length(self):
        """Single segment holds 160 plain or 70 unicode characters."""
        assert segment_length(False) == 160
        assert segment_length(True) == 70

    def test_max_message_length(self):
        """Messages are capped at ten single-segment lengths."""
        assert max_message_length(False) == 1600
        assert max_message_length(True) == 700
