"""
Application service for managing availability windows and querying slots.

The service coordinates the window and booking stores and delegates every
decision to the pure domain functions (overlap validation, booking guard,
slot generation, capacity check). Stores are described by protocols so the
in-memory adapters can stand in for a database in tests.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import TYPE_CHECKING, Any, Callable, ContextManager, Iterable, List, Mapping, Optional, Protocol, Union

import pendulum
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from ..domain.booking_guard import find_conflicting_bookings, find_orphaned_bookings
from ..domain.capacity import SingleSlotCapacityChecker
from ..domain.exceptions import BookingConflictError, NotFoundError, OverlapConflictError, ValidationError
from ..domain.models import ACTIVE_BOOKING_STATUSES, AvailabilityWindow, Booking, BookingStatus, Slot
from ..domain.overlap import find_overlapping_windows
from ..domain.slot_generator import SlotGenerator
from ..schemas import WindowCreate, WindowUpdate

if TYPE_CHECKING:
    from ..config import AppConfig

logger = logging.getLogger(__name__)

DEFAULT_DURATION_MINUTES = 60
DEFAULT_BUFFER_MINUTES = 15
DEFAULT_MAX_SESSIONS_PER_SLOT = 1

_RANGE_FIELDS = ("day_of_week", "start_time", "end_time")


class WindowStoreProtocol(Protocol):
    """Protocol describing the window persistence needed by the service."""

    def list_active_windows(self, provider_id: str) -> List[AvailabilityWindow]:
        """Return all active windows of a provider."""

    def get(self, window_id: str) -> Optional[AvailabilityWindow]:
        """Return a window by id, or None."""

    def create(self, window: AvailabilityWindow) -> AvailabilityWindow:
        """Persist a new window and return it with its assigned id."""

    def update(self, window: AvailabilityWindow) -> Optional[AvailabilityWindow]:
        """Replace a window by id, or return None if it vanished."""

    def delete(self, window_id: str) -> bool:
        """Remove a window; False if it did not exist."""

    def transaction(self) -> ContextManager[Any]:
        """Consistent scope for read-validate-write sequences."""


class BookingStoreProtocol(Protocol):
    """Protocol describing the read-only booking access needed by the service."""

    def list_future_bookings(
        self,
        provider_id: str,
        statuses: Iterable[BookingStatus],
        today: date,
    ) -> List[Booking]:
        """Return bookings on or after ``today`` with the given statuses."""

    def list_bookings_for_date_range(
        self,
        provider_id: str,
        start_date: date,
        end_date: date,
        statuses: Iterable[BookingStatus],
    ) -> List[Booking]:
        """Return bookings within the inclusive date range."""


def _parse(schema: type[BaseModel], payload: Union[BaseModel, Mapping[str, Any]]) -> Any:
    if isinstance(payload, schema):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(str(exc)) from exc


class AvailabilityService:
    """
    Orchestrates the lifecycle of availability windows and slot queries.

    Window states: Proposed -> Active -> (Updated -> Active) -> Deleted.
    Every mutation validates first and writes last, inside the window
    store's transaction, so no partial state is ever visible.
    """

    def __init__(
        self,
        window_store: WindowStoreProtocol,
        booking_store: BookingStoreProtocol,
        slot_generator: Optional[SlotGenerator] = None,
        capacity_checker: Optional[SingleSlotCapacityChecker] = None,
        default_duration_minutes: int = DEFAULT_DURATION_MINUTES,
        default_buffer_minutes: int = DEFAULT_BUFFER_MINUTES,
        default_max_sessions_per_slot: int = DEFAULT_MAX_SESSIONS_PER_SLOT,
        today: Optional[Callable[[], date]] = None,
    ) -> None:
        self._windows = window_store
        self._bookings = booking_store
        self._slot_generator = slot_generator or SlotGenerator()
        self._capacity_checker = capacity_checker or SingleSlotCapacityChecker()
        self._default_duration = default_duration_minutes
        # Applied to new windows that leave these fields unset
        self._window_defaults = {
            "buffer_minutes": default_buffer_minutes,
            "max_sessions_per_slot": default_max_sessions_per_slot,
        }
        self._today = today or (lambda: pendulum.today().date())

    @classmethod
    def from_config(
        cls,
        config: "AppConfig",
        window_store: WindowStoreProtocol,
        booking_store: BookingStoreProtocol,
    ) -> "AvailabilityService":
        """Build a service using the configured defaults and timezone."""
        return cls(
            window_store=window_store,
            booking_store=booking_store,
            default_duration_minutes=config.defaults.duration_minutes,
            default_buffer_minutes=config.defaults.buffer_minutes,
            default_max_sessions_per_slot=config.defaults.max_sessions_per_slot,
            today=config.today,
        )

    # Queries

    def list_windows(self, provider_id: str) -> List[AvailabilityWindow]:
        """Return the provider's active windows ordered by weekday and start."""
        windows = self._windows.list_active_windows(provider_id)
        return sorted(windows, key=lambda w: (w.day_of_week, w.start_minutes))

    def get_window(self, window_id: str) -> AvailabilityWindow:
        window = self._windows.get(window_id)
        if window is None:
            raise NotFoundError(window_id)
        return window

    def get_slots(
        self,
        provider_id: str,
        start_date: date,
        end_date: date,
        duration_minutes: Optional[int] = None,
    ) -> List[Slot]:
        """
        Compute bookable slots for the provider in the inclusive date range.

        The result is a snapshot; booking attempts must re-check with
        ``check_slot`` at commit time.
        """
        duration = self._duration(duration_minutes)
        self._slot_generator.validate_query(start_date, end_date, duration)

        windows = self._windows.list_active_windows(provider_id)
        if not windows:
            return []

        bookings = self._bookings.list_bookings_for_date_range(
            provider_id, start_date, end_date, ACTIVE_BOOKING_STATUSES
        )

        return list(
            self._slot_generator.generate_slots(
                provider_id=provider_id,
                start_date=start_date,
                end_date=end_date,
                duration_minutes=duration,
                windows=windows,
                bookings=bookings,
            )
        )

    def check_slot(
        self,
        provider_id: str,
        slot_date: date,
        time: str,
        duration_minutes: Optional[int] = None,
    ) -> bool:
        """Check if one more booking fits at the exact date and time."""
        duration = self._duration(duration_minutes)
        if duration <= 0:
            raise ValidationError("duration_minutes must be greater than zero")
        windows, count = self._load_exact_slot(provider_id, slot_date, time)
        return self._capacity_checker.is_available(
            provider_id=provider_id,
            slot_date=slot_date,
            time=time,
            duration_minutes=duration,
            windows=windows,
            booking_count_for_exact_slot=count,
        )

    def slot_capacity(self, provider_id: str, slot_date: date, time: str) -> int:
        """Return the number of free places at the exact date and time."""
        windows, count = self._load_exact_slot(provider_id, slot_date, time)
        return self._capacity_checker.remaining_capacity(
            provider_id=provider_id,
            slot_date=slot_date,
            time=time,
            windows=windows,
            booking_count_for_exact_slot=count,
        )

    # Mutations

    def create_window(self, data: Union[WindowCreate, Mapping[str, Any]]) -> AvailabilityWindow:
        """
        Create a window after validating its range and checking for overlaps.

        Raises:
            ValidationError: If the input is malformed
            OverlapConflictError: If an active window on that day intersects it
        """
        payload = _parse(WindowCreate, data)
        defaults = {k: v for k, v in self._window_defaults.items() if k not in payload.model_fields_set}
        candidate = payload.model_copy(update=defaults).to_window()

        with self._windows.transaction():
            if candidate.active:
                self._ensure_no_overlap(candidate)
            created = self._windows.create(candidate)

        logger.info("Created availability window %s for %s (%s)", created.id, created.provider_id, created)
        return created

    def update_window(
        self,
        window_id: str,
        patch: Union[WindowUpdate, Mapping[str, Any]],
    ) -> AvailabilityWindow:
        """
        Merge a partial update into an existing window.

        Raises:
            NotFoundError: If the window does not exist
            ValidationError: If the merged range is invalid
            OverlapConflictError: If the new range intersects another window
            BookingConflictError: If existing bookings would fall outside the new range
        """
        changes = _parse(WindowUpdate, patch).changes()

        with self._windows.transaction():
            existing = self.get_window(window_id)
            merged = replace(existing, **changes)

            range_changed = any(getattr(merged, f) != getattr(existing, f) for f in _RANGE_FIELDS)
            reactivated = merged.active and not existing.active

            if merged.active and (range_changed or reactivated):
                self._ensure_no_overlap(merged, exclude_id=window_id)

            orphaned: List[Booking] = []
            if existing.active and not merged.active:
                # Deactivating behaves like a deletion
                orphaned = self._bookings_in(existing)
            elif existing.active and range_changed:
                orphaned = find_orphaned_bookings(
                    self._future_bookings(existing.provider_id),
                    existing,
                    merged.day_of_week,
                    merged.start_time,
                    merged.end_time,
                    today=self._today(),
                )

            if orphaned:
                logger.warning(
                    "Rejected update of window %s: %d booking(s) would be orphaned",
                    window_id,
                    len(orphaned),
                )
                raise BookingConflictError(
                    "Cannot update availability: existing bookings conflict with new times",
                    orphaned,
                )

            updated = self._windows.update(merged)
            if updated is None:
                raise NotFoundError(window_id)

        logger.info("Updated availability window %s (%s)", window_id, updated)
        return updated

    def delete_window(self, window_id: str, soft: bool = False) -> None:
        """
        Delete a window unless future pending/confirmed bookings rely on it.

        Args:
            window_id: Window to remove
            soft: Deactivate instead of removing the record

        Raises:
            NotFoundError: If the window does not exist
            BookingConflictError: If bookings exist inside the window's range
        """
        with self._windows.transaction():
            existing = self.get_window(window_id)

            conflicts = self._bookings_in(existing)
            if conflicts:
                logger.warning(
                    "Rejected deletion of window %s: %d booking(s) exist", window_id, len(conflicts)
                )
                raise BookingConflictError(
                    "Cannot delete availability: existing bookings exist for this slot",
                    conflicts,
                )

            if soft:
                self._windows.update(replace(existing, active=False))
            elif not self._windows.delete(window_id):
                raise NotFoundError(window_id)

        logger.info("%s availability window %s", "Deactivated" if soft else "Deleted", window_id)

    # Helpers

    def _ensure_no_overlap(self, candidate: AvailabilityWindow, exclude_id: Optional[str] = None) -> None:
        overlapping = find_overlapping_windows(
            self._windows.list_active_windows(candidate.provider_id),
            candidate,
            exclude_id=exclude_id,
        )
        if overlapping:
            logger.warning(
                "Rejected window %s for %s: overlaps %s",
                candidate,
                candidate.provider_id,
                ", ".join(str(w) for w in overlapping),
            )
            raise OverlapConflictError(
                "This availability slot overlaps with an existing slot",
                overlapping,
            )

    def _duration(self, duration_minutes: Optional[int]) -> int:
        return self._default_duration if duration_minutes is None else duration_minutes

    def _future_bookings(self, provider_id: str) -> List[Booking]:
        return self._bookings.list_future_bookings(provider_id, ACTIVE_BOOKING_STATUSES, self._today())

    def _bookings_in(self, window: AvailabilityWindow) -> List[Booking]:
        return find_conflicting_bookings(
            self._future_bookings(window.provider_id),
            window.day_of_week,
            window.start_time,
            window.end_time,
            today=self._today(),
        )

    def _load_exact_slot(self, provider_id: str, slot_date: date, time: str):
        windows = self._windows.list_active_windows(provider_id)
        bookings = self._bookings.list_bookings_for_date_range(
            provider_id, slot_date, slot_date, ACTIVE_BOOKING_STATUSES
        )
        return windows, self._capacity_checker.count_bookings_at(bookings, slot_date, time)
