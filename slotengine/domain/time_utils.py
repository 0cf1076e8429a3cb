"""
Time-of-day arithmetic on "HH:MM" strings.

All interval comparisons in the engine happen on integer minutes since
midnight, so windows, slots and bookings share one representation.
"""

import re
from datetime import date

from .exceptions import ValidationError

MINUTES_PER_DAY = 24 * 60

# "24:00" is accepted as the end of a range that closes at midnight
_TIME_PATTERN = re.compile(r"^(?:([01]\d|2[0-3]):([0-5]\d)|(24):(00))$")


def to_minutes(value: str) -> int:
    """Convert "HH:MM" to minutes since midnight (00:00 to 24:00)."""
    match = _TIME_PATTERN.match(value) if isinstance(value, str) else None
    if match is None:
        raise ValidationError(f"Invalid time '{value}', expected HH:MM between 00:00 and 24:00")
    hours, minutes = match.group(1, 2) if match.group(1) else match.group(3, 4)
    return int(hours) * 60 + int(minutes)


def to_time_string(minutes: int) -> str:
    """Convert minutes since midnight back to a zero-padded "HH:MM"."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValidationError(f"Minutes must be within one day, got {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def day_of_week(value: date) -> int:
    """Return the weekday with 0=Sunday ... 6=Saturday."""
    return value.isoweekday() % 7


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """Half-open overlap test; touching intervals do not overlap."""
    return start_a < end_b and end_a > start_b
