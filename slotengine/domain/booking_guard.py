"""
Guards window mutations against orphaning existing bookings.

A booking belongs to a window implicitly: same weekday and a start time
inside the window's half-open range. Shrinking, moving or deleting the
window must not leave such a booking outside every range.
"""

from datetime import date
from typing import Iterable, List, Optional

import pendulum

from .models import AvailabilityWindow, Booking
from .time_utils import day_of_week as weekday_of, to_minutes


def _future_active(bookings: Iterable[Booking], today: Optional[date]) -> List[Booking]:
    cutoff = today or pendulum.today().date()
    return [b for b in bookings if b.is_active and b.date >= cutoff]


def find_conflicting_bookings(
    future_bookings: Iterable[Booking],
    day_of_week: int,
    start_time: str,
    end_time: str,
    today: Optional[date] = None,
) -> List[Booking]:
    """
    Return future pending/confirmed bookings starting inside [start, end) on the weekday.
    """
    start = to_minutes(start_time)
    end = to_minutes(end_time)

    return [
        booking
        for booking in _future_active(future_bookings, today)
        if weekday_of(booking.date) == day_of_week
        and start <= booking.start_minutes < end
    ]


def has_conflicting_bookings(
    future_bookings: Iterable[Booking],
    day_of_week: int,
    start_time: str,
    end_time: str,
    today: Optional[date] = None,
) -> bool:
    """Check if any future active booking lies in the given weekly range."""
    return bool(
        find_conflicting_bookings(future_bookings, day_of_week, start_time, end_time, today)
    )


def find_orphaned_bookings(
    future_bookings: Iterable[Booking],
    current: AvailabilityWindow,
    day_of_week: int,
    start_time: str,
    end_time: str,
    today: Optional[date] = None,
) -> List[Booking]:
    """
    Return bookings inside the current window that the new range would drop.

    Args:
        future_bookings: Bookings of the window's provider
        current: The window as it is persisted now
        day_of_week: Weekday of the proposed range
        start_time: Start of the proposed range
        end_time: End of the proposed range
        today: Reference day; bookings before it are ignored

    Returns:
        Bookings that would no longer fall inside any part of the window
    """
    held = find_conflicting_bookings(
        future_bookings, current.day_of_week, current.start_time, current.end_time, today
    )
    if not held:
        return []

    new_start = to_minutes(start_time)
    new_end = to_minutes(end_time)

    return [
        booking
        for booking in held
        if weekday_of(booking.date) != day_of_week
        or not new_start <= booking.start_minutes < new_end
    ]
