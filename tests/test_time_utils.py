"""
Tests for time-of-day arithmetic.
"""

from datetime import date

import pytest

from slotengine.domain.exceptions import ValidationError
from slotengine.domain.time_utils import day_of_week, to_minutes, to_time_string


class TestToMinutes:
    """Tests for to_minutes."""

    def test_parses_hours_and_minutes(self):
        assert to_minutes("00:00") == 0
        assert to_minutes("09:30") == 570
        assert to_minutes("23:59") == 1439

    def test_midnight_end_of_day(self):
        """"24:00" closes a range at midnight."""
        assert to_minutes("24:00") == 1440

    @pytest.mark.parametrize("value", ["9:30", "24:01", "24:30", "12:60", "abc", "", "12:3"])
    def test_malformed_input_raises(self, value):
        """Malformed times are rejected as validation errors."""
        with pytest.raises(ValidationError, match="Invalid time"):
            to_minutes(value)

    def test_validation_error_is_value_error(self):
        with pytest.raises(ValueError):
            to_minutes("25:00")


class TestToTimeString:
    """Tests for to_time_string."""

    def test_zero_padded(self):
        assert to_time_string(0) == "00:00"
        assert to_time_string(570) == "09:30"
        assert to_time_string(615) == "10:15"

    def test_out_of_day_raises(self):
        with pytest.raises(ValidationError):
            to_time_string(1440)
        with pytest.raises(ValidationError):
            to_time_string(-1)


def test_day_of_week_starts_on_sunday():
    """0=Sunday ... 6=Saturday."""
    assert day_of_week(date(2024, 11, 24)) == 0  # Sunday
    assert day_of_week(date(2024, 11, 25)) == 1  # Monday
    assert day_of_week(date(2024, 11, 30)) == 6  # Saturday

