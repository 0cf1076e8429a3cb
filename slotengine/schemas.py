"""
Input schemas for window mutations and fixture records, using Pydantic.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .domain.models import AvailabilityWindow, Booking, BookingStatus
from .domain.time_utils import to_minutes


def _check_time(value: Optional[str]) -> Optional[str]:
    if value is not None:
        to_minutes(value)
    return value


class WindowCreate(BaseModel):
    """Payload for creating an availability window."""
    provider_id: str = Field(min_length=1)
    day_of_week: int = Field(ge=0, le=6)
    start_time: str
    end_time: str
    max_sessions_per_slot: int = Field(default=1, ge=1)
    buffer_minutes: int = Field(default=15, ge=0)
    active: bool = True

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        """Ensure times are well-formed HH:MM."""
        return _check_time(v)

    @model_validator(mode="after")
    def validate_range(self) -> "WindowCreate":
        """Ensure the window opens before it closes."""
        if to_minutes(self.start_time) >= to_minutes(self.end_time):
            raise ValueError("Start time must be before end time")
        return self

    def to_window(self) -> AvailabilityWindow:
        return AvailabilityWindow(**self.model_dump())


class WindowUpdate(BaseModel):
    """
    Partial update for an availability window.

    Only explicitly set fields are merged; the combined range is validated
    by the domain model.
    """
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    max_sessions_per_slot: Optional[int] = Field(default=None, ge=1)
    buffer_minutes: Optional[int] = Field(default=None, ge=0)
    active: Optional[bool] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: Optional[str]) -> Optional[str]:
        return _check_time(v)

    def changes(self) -> dict:
        """Return the fields the caller actually provided."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class WindowRecord(WindowCreate):
    """A persisted window as it appears in YAML fixtures."""
    id: Optional[str] = None


class BookingRecord(BaseModel):
    """A booking as it appears in YAML fixtures."""
    id: Optional[str] = None
    provider_id: str
    date: date
    requested_time: str
    duration_minutes: int = Field(default=60, gt=0)
    status: BookingStatus = BookingStatus.PENDING

    @field_validator("requested_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        return _check_time(v)

    def to_booking(self) -> Booking:
        return Booking(**self.model_dump())
