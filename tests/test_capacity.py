"""
Tests for the single slot capacity checker.
"""

from datetime import date

from slotengine.domain.capacity import SingleSlotCapacityChecker
from slotengine.domain.models import AvailabilityWindow, Booking, BookingStatus

MONDAY = date(2024, 11, 25)

WINDOWS = [
    AvailabilityWindow(
        provider_id="coach-1", day_of_week=1, start_time="09:00", end_time="12:00", max_sessions_per_slot=2
    ),
    AvailabilityWindow(
        provider_id="coach-1", day_of_week=1, start_time="13:00", end_time="17:00", max_sessions_per_slot=3
    ),
]


class TestIsAvailable:
    """Tests for SingleSlotCapacityChecker.is_available."""

    checker = SingleSlotCapacityChecker()

    def test_available_below_capacity(self):
        assert self.checker.is_available("coach-1", MONDAY, "10:00", 60, WINDOWS, 1)

    def test_full_slot(self):
        assert not self.checker.is_available("coach-1", MONDAY, "10:00", 60, WINDOWS, 2)

    def test_uses_window_containing_the_time(self):
        """The afternoon window has its own capacity."""
        assert self.checker.is_available("coach-1", MONDAY, "14:00", 60, WINDOWS, 2)
        assert not self.checker.is_available("coach-1", MONDAY, "14:00", 60, WINDOWS, 3)

    def test_time_outside_windows(self):
        assert not self.checker.is_available("coach-1", MONDAY, "12:00", 60, WINDOWS, 0)
        assert not self.checker.is_available("coach-1", MONDAY, "17:00", 60, WINDOWS, 0)
        assert not self.checker.is_available("coach-1", MONDAY, "08:59", 60, WINDOWS, 0)

    def test_no_window_on_that_day(self):
        assert not self.checker.is_available("coach-1", date(2024, 11, 26), "10:00", 60, WINDOWS, 0)

    def test_other_provider(self):
        assert not self.checker.is_available("coach-2", MONDAY, "10:00", 60, WINDOWS, 0)


class TestRemainingCapacity:
    """Tests for SingleSlotCapacityChecker.remaining_capacity."""

    checker = SingleSlotCapacityChecker()

    def test_remaining_places(self):
        assert self.checker.remaining_capacity("coach-1", MONDAY, "10:00", WINDOWS, 1) == 1

    def test_no_window_means_zero(self):
        assert self.checker.remaining_capacity("coach-1", MONDAY, "12:30", WINDOWS, 0) == 0

    def test_never_negative(self):
        assert self.checker.remaining_capacity("coach-1", MONDAY, "10:00", WINDOWS, 5) == 0


def test_count_bookings_at_counts_exact_active_matches():
    bookings = [
        Booking(provider_id="coach-1", date=MONDAY, requested_time="10:00", status=BookingStatus.CONFIRMED),
        Booking(provider_id="coach-1", date=MONDAY, requested_time="10:00", status=BookingStatus.PENDING),
        Booking(provider_id="coach-1", date=MONDAY, requested_time="10:00", status=BookingStatus.CANCELLED),
        Booking(provider_id="coach-1", date=MONDAY, requested_time="10:30", status=BookingStatus.CONFIRMED),
        Booking(provider_id="coach-1", date=date(2024, 12, 2), requested_time="10:00"),
    ]

    assert SingleSlotCapacityChecker.count_bookings_at(bookings, MONDAY, "10:00") == 2
