"""SMS segment math.

A message that fits a single segment (160 GSM-7 characters, 70 for unicode)
is sent as one part. Longer messages are split into concatenated parts whose
user data header costs 7 characters (3 for unicode), leaving 153 or 67
characters per part.
"""

import math

GSM_SEGMENT_LENGTH = 160
UNICODE_SEGMENT_LENGTH = 70
GSM_CONCAT_SEGMENT_LENGTH = 153
UNICODE_CONCAT_SEGMENT_LENGTH = 67
MAX_SEGMENTS = 10


def segment_length(unicode: bool) -> int:
    return UNICODE_SEGMENT_LENGTH if unicode else GSM_SEGMENT_LENGTH


def max_message_length(unicode: bool) -> int:
    """Longest accepted message: ten single-segment lengths."""
    return segment_length(unicode) * MAX_SEGMENTS


def calculate_segments(message: str, unicode: bool) -> int:
    """Number of segments needed to send ``message``.

    Example:
        calculate_segments("a" * 160, unicode=False)  # 1
        calculate_segments("a" * 161, unicode=False)  # 2
    """
    if len(message) <= segment_length(unicode):
        return 1
    per_segment = (
        UNICODE_CONCAT_SEGMENT_LENGTH if unicode else GSM_CONCAT_SEGMENT_LENGTH
    )
    return math.ceil(len(message) / per_segment)
