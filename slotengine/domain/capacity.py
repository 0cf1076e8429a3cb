"""
Direct capacity checks for a single date and time.

Counterpart to ``SlotGenerator`` for interactive "can I book this" queries
that should not enumerate a whole date range.
"""

from datetime import date
from typing import Iterable, Optional, Sequence

from .models import AvailabilityWindow, Booking
from .time_utils import day_of_week, to_minutes


class SingleSlotCapacityChecker:
    """Answers capacity questions for one exact slot."""

    def find_window(
        self,
        provider_id: str,
        slot_date: date,
        time: str,
        windows: Sequence[AvailabilityWindow],
    ) -> Optional[AvailabilityWindow]:
        """
        Find the active window containing the time on the date's weekday.

        Non-overlapping windows guarantee at most one match.
        """
        weekday = day_of_week(slot_date)
        minutes = to_minutes(time)

        for window in windows:
            if (
                window.provider_id == provider_id
                and window.active
                and window.day_of_week == weekday
                and window.contains(minutes)
            ):
                return window
        return None

    def is_available(
        self,
        provider_id: str,
        slot_date: date,
        time: str,
        duration_minutes: int,
        windows: Sequence[AvailabilityWindow],
        booking_count_for_exact_slot: int,
    ) -> bool:
        """
        Check if one more booking fits at the exact date and time.

        ``duration_minutes`` is accepted for call-site symmetry with slot
        generation; containment only considers the start time.
        """
        window = self.find_window(provider_id, slot_date, time, windows)
        if window is None:
            return False

        return booking_count_for_exact_slot < window.max_sessions_per_slot

    def remaining_capacity(
        self,
        provider_id: str,
        slot_date: date,
        time: str,
        windows: Sequence[AvailabilityWindow],
        booking_count_for_exact_slot: int,
    ) -> int:
        """Return free places at the slot, 0 when no window covers it."""
        window = self.find_window(provider_id, slot_date, time, windows)
        if window is None:
            return 0

        return max(0, window.max_sessions_per_slot - booking_count_for_exact_slot)

    @staticmethod
    def count_bookings_at(bookings: Iterable[Booking], slot_date: date, time: str) -> int:
        """Count active bookings placed at exactly this date and time."""
        return sum(
            1
            for booking in bookings
            if booking.is_active
            and booking.date == slot_date
            and booking.requested_time == time
        )
