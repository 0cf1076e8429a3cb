"""
Domain-specific exception hierarchy for the scheduling engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .models import AvailabilityWindow, Booking


class SchedulingError(Exception):
    """Base class for all engine-level errors."""


class ValidationError(SchedulingError, ValueError):
    """Raised for malformed times, inverted ranges or missing fields."""


class NotFoundError(SchedulingError):
    """Raised when an availability window id does not exist."""

    def __init__(self, window_id: str):
        super().__init__(f"Availability window not found: {window_id}")
        self.window_id = window_id


class ConflictError(SchedulingError):
    """Base class for mutations refused because of existing state."""


class OverlapConflictError(ConflictError):
    """Raised when a window overlaps an active window on the same day."""

    def __init__(self, message: str, conflicting_windows: Sequence["AvailabilityWindow"] = ()):
        super().__init__(message)
        self.conflicting_windows = list(conflicting_windows)


class BookingConflictError(ConflictError):
    """Raised when a mutation would orphan pending or confirmed bookings."""

    def __init__(self, message: str, bookings: Sequence["Booking"] = ()):
        self.bookings = list(bookings)
        if self.bookings:
            details = ", ".join(
                f"{booking.id or '?'} on {booking.date.isoformat()} at {booking.requested_time}"
                for booking in self.bookings
            )
            message = f"{message} ({details})"
        super().__init__(message)
