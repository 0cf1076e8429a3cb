"""
Tests for the Typer CLI.
"""

import pytest
from typer.testing import CliRunner

from slotengine import __version__
from slotengine.cli.app import app

runner = CliRunner()

SCHEDULE = """
windows:
  - id: mon
    provider_id: coach-1
    day_of_week: 1
    start_time: "09:00"
    end_time: "11:00"
    max_sessions_per_slot: 2
    buffer_minutes: 0
bookings:
  - provider_id: coach-1
    date: 2024-11-25
    requested_time: "10:00"
    status: confirmed
  - provider_id: coach-1
    date: 2024-11-25
    requested_time: "10:00"
    status: pending
"""


@pytest.fixture
def files(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("timezone: Europe/Berlin\ndata_file: schedule.yaml\n", encoding="utf-8")
    (tmp_path / "schedule.yaml").write_text(SCHEDULE, encoding="utf-8")
    return config


def test_slots_lists_available_slots(files):
    result = runner.invoke(
        app, ["slots", "coach-1", "--config", str(files), "--start", "2024-11-25", "--end", "2024-11-25"]
    )

    assert result.exit_code == 0, result.output
    assert "1 slot(s) available" in result.output
    assert "09:00 (2/2 free)" in result.output
    assert "10:00" not in result.output


def test_slots_without_results(files):
    result = runner.invoke(
        app, ["slots", "coach-1", "--config", str(files), "--start", "2024-11-26", "--end", "2024-11-26"]
    )

    assert result.exit_code == 0
    assert "No bookable slots found" in result.output


def test_slots_invalid_date(files):
    result = runner.invoke(app, ["slots", "coach-1", "--config", str(files), "--start", "25.11.2024"])

    assert result.exit_code == 1


def test_windows_table(files):
    result = runner.invoke(app, ["windows", "coach-1", "--config", str(files)])

    assert result.exit_code == 0
    assert "Monday" in result.output
    assert "09:00" in result.output


def test_windows_unknown_provider(files):
    result = runner.invoke(app, ["windows", "coach-9", "--config", str(files)])

    assert result.exit_code == 0
    assert "No active windows" in result.output


def test_check_available_and_full(files):
    available = runner.invoke(app, ["check", "coach-1", "2024-11-25", "09:00", "--config", str(files)])
    full = runner.invoke(app, ["check", "coach-1", "2024-11-25", "10:00", "--config", str(files)])

    assert available.exit_code == 0
    assert "is available" in available.output
    assert full.exit_code == 2
    assert "not available" in full.output


def test_missing_data_file(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("timezone: UTC\n", encoding="utf-8")

    result = runner.invoke(app, ["windows", "coach-1", "--config", str(config)])

    assert result.exit_code == 1
    assert "no data file" in result.output


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output
