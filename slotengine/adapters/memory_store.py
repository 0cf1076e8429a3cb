"""
In-memory window and booking stores.

These back the CLI and the test-suite without a database. Data can be
loaded from a YAML fixture file holding ``windows`` and ``bookings`` lists.
"""

import logging
import threading
import uuid
from contextlib import contextmanager
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import yaml
from pydantic import ValidationError as PydanticValidationError

from ..domain.exceptions import ValidationError
from ..domain.models import AvailabilityWindow, Booking, BookingStatus
from ..schemas import BookingRecord, WindowRecord

logger = logging.getLogger(__name__)


class InMemoryWindowStore:
    """
    Dict-backed window store.

    ``transaction()`` holds a re-entrant lock, so a read-validate-write
    sequence cannot interleave with another writer.
    """

    def __init__(self, windows: Iterable[AvailabilityWindow] = ()):
        self._windows: Dict[str, AvailabilityWindow] = {}
        self._lock = threading.RLock()
        for window in windows:
            self.create(window)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            yield

    def list_active_windows(self, provider_id: str) -> List[AvailabilityWindow]:
        with self._lock:
            return [
                w for w in self._windows.values()
                if w.provider_id == provider_id and w.active
            ]

    def list_all(self) -> List[AvailabilityWindow]:
        """Return every stored window, active or not, for inspection in tests."""
        with self._lock:
            return list(self._windows.values())

    def get(self, window_id: str) -> Optional[AvailabilityWindow]:
        with self._lock:
            return self._windows.get(window_id)

    def create(self, window: AvailabilityWindow) -> AvailabilityWindow:
        with self._lock:
            if window.id is None:
                window = replace(window, id=uuid.uuid4().hex)
            self._windows[window.id] = window
            return window

    def update(self, window: AvailabilityWindow) -> Optional[AvailabilityWindow]:
        with self._lock:
            if window.id not in self._windows:
                return None
            self._windows[window.id] = window
            return window

    def delete(self, window_id: str) -> bool:
        with self._lock:
            return self._windows.pop(window_id, None) is not None


class InMemoryBookingStore:
    """Read-mostly booking store; ``add`` stands in for the booking subsystem."""

    def __init__(self, bookings: Iterable[Booking] = ()):
        self._bookings: List[Booking] = []
        for booking in bookings:
            self.add(booking)

    def add(self, booking: Booking) -> Booking:
        if booking.id is None:
            booking = replace(booking, id=uuid.uuid4().hex)
        self._bookings.append(booking)
        return booking

    def list_future_bookings(
        self,
        provider_id: str,
        statuses: Iterable[BookingStatus],
        today: date,
    ) -> List[Booking]:
        wanted = set(statuses)
        return [
            b for b in self._bookings
            if b.provider_id == provider_id and b.status in wanted and b.date >= today
        ]

    def list_bookings_for_date_range(
        self,
        provider_id: str,
        start_date: date,
        end_date: date,
        statuses: Iterable[BookingStatus],
    ) -> List[Booking]:
        wanted = set(statuses)
        return [
            b for b in self._bookings
            if b.provider_id == provider_id
            and b.status in wanted
            and start_date <= b.date <= end_date
        ]


def load_fixture(data_path: Path) -> Tuple[InMemoryWindowStore, InMemoryBookingStore]:
    """
    Load windows and bookings from a YAML fixture.

    Args:
        data_path: Path to the YAML file

    Returns:
        Tuple of (window store, booking store)

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValidationError: If a record is invalid
    """
    if not data_path.exists():
        raise FileNotFoundError(f"Data file not found: {data_path}")

    try:
        with open(data_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ValidationError(f"Invalid YAML in {data_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValidationError("Data file must contain a mapping at the root level.")

    try:
        windows = [WindowRecord(**item).to_window() for item in data.get("windows") or []]
        bookings = [BookingRecord(**item).to_booking() for item in data.get("bookings") or []]
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid record in {data_path}: {exc}") from exc

    logger.debug("Loaded %d window(s) and %d booking(s) from %s", len(windows), len(bookings), data_path)

    return InMemoryWindowStore(windows), InMemoryBookingStore(bookings)
