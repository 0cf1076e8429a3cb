"""
Tests for the in-memory stores and the YAML fixture loader.
"""

from datetime import date

import pytest

from slotengine.adapters.memory_store import InMemoryBookingStore, InMemoryWindowStore, load_fixture
from slotengine.domain.exceptions import ValidationError
from slotengine.domain.models import ACTIVE_BOOKING_STATUSES, AvailabilityWindow, Booking, BookingStatus

FIXTURE = """
windows:
  - id: mon
    provider_id: coach-1
    day_of_week: 1
    start_time: "09:00"
    end_time: "12:00"
    max_sessions_per_slot: 2
  - provider_id: coach-1
    day_of_week: 3
    start_time: "10:00"
    end_time: "11:00"
    active: false
bookings:
  - id: b-1
    provider_id: coach-1
    date: 2024-11-25
    requested_time: "09:00"
    status: confirmed
  - provider_id: coach-1
    date: "2024-11-26"
    requested_time: "10:00"
    status: cancelled
"""


class TestInMemoryWindowStore:
    """Tests for InMemoryWindowStore."""

    def _window(self, **kwargs):
        defaults = dict(provider_id="coach-1", day_of_week=1, start_time="09:00", end_time="10:00")
        defaults.update(kwargs)
        return AvailabilityWindow(**defaults)

    def test_create_assigns_id(self):
        store = InMemoryWindowStore()

        created = store.create(self._window())

        assert created.id
        assert store.get(created.id) == created

    def test_list_active_windows_filters(self):
        store = InMemoryWindowStore([
            self._window(id="a"),
            self._window(id="b", active=False),
            self._window(id="c", provider_id="coach-2"),
        ])

        assert [w.id for w in store.list_active_windows("coach-1")] == ["a"]

    def test_update_and_delete_unknown(self):
        store = InMemoryWindowStore()

        assert store.update(self._window(id="missing")) is None
        assert store.delete("missing") is False

    def test_transaction_is_reentrant(self):
        store = InMemoryWindowStore()

        with store.transaction():
            with store.transaction():
                store.create(self._window(id="a"))

        assert store.get("a") is not None


class TestInMemoryBookingStore:
    """Tests for InMemoryBookingStore."""

    store = InMemoryBookingStore([
        Booking(id="past", provider_id="coach-1", date=date(2024, 11, 18), requested_time="10:00"),
        Booking(id="future", provider_id="coach-1", date=date(2024, 11, 25), requested_time="10:00",
                status=BookingStatus.CONFIRMED),
        Booking(id="cancelled", provider_id="coach-1", date=date(2024, 11, 25), requested_time="11:00",
                status=BookingStatus.CANCELLED),
        Booking(id="other", provider_id="coach-2", date=date(2024, 11, 25), requested_time="10:00"),
    ])

    def test_list_future_bookings(self):
        found = self.store.list_future_bookings("coach-1", ACTIVE_BOOKING_STATUSES, date(2024, 11, 20))

        assert [b.id for b in found] == ["future"]

    def test_list_bookings_for_date_range(self):
        found = self.store.list_bookings_for_date_range(
            "coach-1", date(2024, 11, 18), date(2024, 11, 25), ACTIVE_BOOKING_STATUSES
        )

        assert [b.id for b in found] == ["past", "future"]


class TestLoadFixture:
    """Tests for load_fixture."""

    def test_loads_windows_and_bookings(self, tmp_path):
        path = tmp_path / "schedule.yaml"
        path.write_text(FIXTURE, encoding="utf-8")

        window_store, booking_store = load_fixture(path)

        assert len(window_store.list_all()) == 2
        assert window_store.get("mon").max_sessions_per_slot == 2
        active = booking_store.list_bookings_for_date_range(
            "coach-1", date(2024, 11, 1), date(2024, 11, 30), ACTIVE_BOOKING_STATUSES
        )
        assert [b.id for b in active] == ["b-1"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_fixture(tmp_path / "missing.yaml")

    def test_invalid_record(self, tmp_path):
        path = tmp_path / "schedule.yaml"
        path.write_text(
            "windows:\n  - provider_id: coach-1\n    day_of_week: 1\n"
            "    start_time: '12:00'\n    end_time: '09:00'\n",
            encoding="utf-8",
        )

        with pytest.raises(ValidationError, match="Invalid record"):
            load_fixture(path)

    def test_non_mapping_root(self, tmp_path):
        path = tmp_path / "schedule.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ValidationError):
            load_fixture(path)
