"""
Domain layer - Pure scheduling logic without external dependencies.
"""

from .booking_guard import find_conflicting_bookings, find_orphaned_bookings, has_conflicting_bookings
from .capacity import SingleSlotCapacityChecker
from .exceptions import (
    BookingConflictError,
    ConflictError,
    NotFoundError,
    OverlapConflictError,
    SchedulingError,
    ValidationError,
)
from .models import ACTIVE_BOOKING_STATUSES, AvailabilityWindow, Booking, BookingStatus, Slot
from .overlap import find_overlapping_windows, has_overlap
from .slot_generator import SlotGenerator
from .time_utils import day_of_week, to_minutes, to_time_string

__all__ = [
    "ACTIVE_BOOKING_STATUSES",
    "AvailabilityWindow",
    "Booking",
    "BookingConflictError",
    "BookingStatus",
    "ConflictError",
    "NotFoundError",
    "OverlapConflictError",
    "SchedulingError",
    "SingleSlotCapacityChecker",
    "Slot",
    "SlotGenerator",
    "ValidationError",
    "day_of_week",
    "find_conflicting_bookings",
    "find_orphaned_bookings",
    "find_overlapping_windows",
    "has_conflicting_bookings",
    "has_overlap",
    "to_minutes",
    "to_time_string",
]
