"""
Core business logic for generating bookable slots.

This is the heart of the engine - pure domain logic without any
external dependencies (no store access, no I/O, no hidden state).
"""

import logging
from datetime import date
from typing import Iterator, List, Sequence

import pendulum

from .exceptions import ValidationError
from .models import AvailabilityWindow, Booking, Slot
from .time_utils import day_of_week, intervals_overlap, to_time_string

logger = logging.getLogger(__name__)


class SlotGenerator:
    """
    Generates bookable slots from weekly windows and existing bookings.

    Algorithm:
    1. Walk every calendar day in the range (inclusive)
    2. Pick the provider's active windows for that weekday
    3. Step through each window by duration + buffer
    4. Count active bookings overlapping each candidate
    5. Emit candidates that still have capacity left
    """

    def generate_slots(
        self,
        provider_id: str,
        start_date: date,
        end_date: date,
        duration_minutes: int,
        windows: Sequence[AvailabilityWindow],
        bookings: Sequence[Booking],
    ) -> Iterator[Slot]:
        """
        Lazily yield available slots.

        Each call returns a fresh iterator over the same result, so the
        sequence can be restarted or materialized with ``list()``.

        Args:
            provider_id: Provider whose windows are used
            start_date: First day of the range
            end_date: Last day of the range (inclusive)
            duration_minutes: Requested session length
            windows: Candidate windows (filtered by provider and active flag here)
            bookings: Bookings in the range

        Raises:
            ValidationError: If the duration is not positive or the range is inverted
        """
        self.validate_query(start_date, end_date, duration_minutes)

        provider_windows = [w for w in windows if w.provider_id == provider_id and w.active]
        if not provider_windows:
            return iter(())

        active_bookings = [b for b in bookings if b.provider_id == provider_id and b.is_active]

        return self._iter_slots(
            start_date=start_date,
            end_date=end_date,
            duration_minutes=duration_minutes,
            windows=provider_windows,
            bookings=active_bookings,
        )

    @staticmethod
    def validate_query(start_date: date, end_date: date, duration_minutes: int) -> None:
        """Reject a non-positive duration or an inverted date range."""
        if duration_minutes <= 0:
            raise ValidationError("duration_minutes must be greater than zero")
        if start_date > end_date:
            raise ValidationError(f"Start date {start_date} must not be after end date {end_date}")

    def _iter_slots(
        self,
        *,
        start_date: date,
        end_date: date,
        duration_minutes: int,
        windows: List[AvailabilityWindow],
        bookings: List[Booking],
    ) -> Iterator[Slot]:
        emitted = 0

        for current in self._iter_days(start_date, end_date):
            weekday = day_of_week(current)
            day_windows = sorted(
                (w for w in windows if w.day_of_week == weekday),
                key=lambda w: w.start_minutes,
            )
            if not day_windows:
                continue

            day_bookings = [b for b in bookings if b.date == current]

            for window in day_windows:
                for start in self._candidate_starts(window, duration_minutes):
                    booking_count = self._count_overlapping_bookings(
                        day_bookings, start, start + duration_minutes
                    )
                    available = window.max_sessions_per_slot - booking_count

                    if available > 0:
                        emitted += 1
                        yield Slot(
                            date=current,
                            time=to_time_string(start),
                            available_capacity=available,
                            max_capacity=window.max_sessions_per_slot,
                        )

        logger.debug(
            "Generated %d slot(s) between %s and %s", emitted, start_date, end_date
        )

    @staticmethod
    def _iter_days(start_date: date, end_date: date) -> Iterator[pendulum.Date]:
        """Yield one new immutable date per calendar day."""
        current = pendulum.Date(start_date.year, start_date.month, start_date.day)
        last = pendulum.Date(end_date.year, end_date.month, end_date.day)

        while current <= last:
            yield current
            current = current.add(days=1)

    @staticmethod
    def _candidate_starts(window: AvailabilityWindow, duration_minutes: int) -> Iterator[int]:
        """
        Yield slot start minutes inside the window.

        Example:
        Window: 09:00 - 17:00, duration 60, buffer 15
        Result: 09:00, 10:15, 11:30, 12:45, 14:00, 15:15
        """
        step = duration_minutes + window.buffer_minutes
        start = window.start_minutes

        while start + duration_minutes <= window.end_minutes:
            yield start
            start += step

    @staticmethod
    def _count_overlapping_bookings(bookings: List[Booking], start: int, end: int) -> int:
        return sum(
            1
            for booking in bookings
            if intervals_overlap(booking.start_minutes, booking.end_minutes, start, end)
        )
