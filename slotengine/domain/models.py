"""
Domain models for availability windows, bookings and computed slots.
"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional

from .exceptions import ValidationError
from .time_utils import MINUTES_PER_DAY, to_minutes


WEEKDAY_NAMES = {
    0: "Sunday",
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
}


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


# Only these statuses hold capacity or block window changes
ACTIVE_BOOKING_STATUSES = frozenset({BookingStatus.PENDING, BookingStatus.CONFIRMED})


@dataclass(frozen=True)
class AvailabilityWindow:
    """
    A recurring weekly interval in which a provider accepts sessions.

    Invariant: start_time must be before end_time.
    """
    provider_id: str
    day_of_week: int  # 0=Sunday, 6=Saturday
    start_time: str
    end_time: str
    max_sessions_per_slot: int = 1
    buffer_minutes: int = 15
    active: bool = True
    id: Optional[str] = None

    def __post_init__(self):
        if self.day_of_week not in range(7):
            raise ValidationError(f"day_of_week must be between 0 and 6, got {self.day_of_week}")
        if self.start_minutes >= self.end_minutes:
            raise ValidationError(
                f"Start time {self.start_time} must be before end time {self.end_time}"
            )
        if self.max_sessions_per_slot < 1:
            raise ValidationError("max_sessions_per_slot must be at least 1")
        if self.buffer_minutes < 0:
            raise ValidationError("buffer_minutes must not be negative")

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.start_time)

    @property
    def end_minutes(self) -> int:
        return to_minutes(self.end_time)

    def contains(self, minutes: int) -> bool:
        """Check if a time (in minutes) lies inside [start, end)."""
        return self.start_minutes <= minutes < self.end_minutes

    def __str__(self) -> str:
        return f"{WEEKDAY_NAMES[self.day_of_week]} {self.start_time}-{self.end_time}"


@dataclass(frozen=True)
class Booking:
    """A session request placed by the booking subsystem (read-only here)."""
    provider_id: str
    date: date
    requested_time: str
    duration_minutes: int = 60
    status: BookingStatus = BookingStatus.PENDING
    id: Optional[str] = None

    def __post_init__(self):
        if self.duration_minutes <= 0:
            raise ValidationError("duration_minutes must be greater than zero")
        # Accept plain strings from fixtures and stores
        object.__setattr__(self, "status", BookingStatus(self.status))
        if to_minutes(self.requested_time) >= MINUTES_PER_DAY:
            raise ValidationError("requested_time must be before 24:00")

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_BOOKING_STATUSES

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.requested_time)

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + self.duration_minutes


@dataclass(frozen=True)
class Slot:
    """
    A computed bookable interval. Never persisted.
    """
    date: date
    time: str
    available_capacity: int
    max_capacity: int

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: Weekday, YYYY-MM-DD | HH:MM (free/max)
        """
        weekday = WEEKDAY_NAMES[self.date.isoweekday() % 7]
        return (
            f"{weekday}, {self.date.isoformat()} | {self.time} "
            f"({self.available_capacity}/{self.max_capacity} free)"
        )
