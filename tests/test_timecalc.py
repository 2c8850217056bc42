"""Unit tests for time arithmetic."""

import pytest
from datetime import time
from facsched.errors import InvalidRange, InvalidTimeFormat, ParseError
from facsched.timecalc import (
    adjusted_duration, display_duration, duration, event_row_span, format_time,
    minutes_between, overlaps, parse_time, time_slots, time_to_grid_row, to_minutes
)


def test_parse_time():
    """Test parsing of valid HH:MM strings."""
    assert parse_time("00:00") == time(0, 0)
    assert parse_time("09:05") == time(9, 5)
    assert parse_time("23:59") == time(23, 59)


@pytest.mark.parametrize("value", ["9:00", "24:00", "12:60", "1200", "", "09:00 ", "ab:cd", None])
def test_parse_time_rejects_bad_format(value):
    """Test that anything but zero-padded 24-hour time is rejected."""
    with pytest.raises(InvalidTimeFormat):
        parse_time(value)


def test_invalid_time_format_is_parse_error():
    """Test the error hierarchy used by callers."""
    with pytest.raises(ParseError):
        parse_time("7pm")


def test_parse_time_granularity():
    """Test the optional minute granularity."""
    assert parse_time("09:30", granularity=30) == time(9, 30)
    with pytest.raises(InvalidTimeFormat):
        parse_time("09:15", granularity=30)
    assert parse_time("09:15", granularity=15) == time(9, 15)


def test_format_time():
    """Test formatting back to HH:MM."""
    assert format_time(time(7, 5)) == "07:05"
    assert format_time(parse_time("18:45")) == "18:45"


def test_minutes_between():
    """Test span lengths in minutes."""
    assert to_minutes("01:30") == 90
    assert minutes_between("09:00", "10:20") == 80


@pytest.mark.parametrize("start, end", [("10:00", "10:00"), ("10:00", "09:00")])
def test_minutes_between_rejects_empty_or_reversed(start, end):
    """Test end must be strictly after start."""
    with pytest.raises(InvalidRange):
        minutes_between(start, end)


def test_durations_are_exact():
    """Test that whole-hour spans come out exact."""
    assert duration("09:00", "10:00") == 1.0
    assert duration("09:00", "12:30") == 3.5
    assert display_duration("09:00", "10:20") == pytest.approx(80 / 60)


@pytest.mark.parametrize("start, end, expected", [
    ("09:00", "10:00", 1.0),
    ("09:00", "10:20", 1.5),
    ("09:00", "10:30", 1.5),
    ("09:00", "10:31", 2.0),
    ("09:00", "09:01", 0.5),
])
def test_teaching_rounds_up_to_half_hour(start, end, expected):
    """Test teaching durations are billed in half-hour increments."""
    assert adjusted_duration(start, end, "teaching") == expected


def test_teaching_increment_override():
    """Test a custom teaching increment."""
    assert adjusted_duration("09:00", "10:20", "teaching", increment_minutes=15) == 1.5
    assert adjusted_duration("09:00", "10:05", "teaching", increment_minutes=60) == 2.0


@pytest.mark.parametrize("hours_type", ["student", "campus"])
def test_other_types_are_not_rounded(hours_type):
    """Test student and campus hours are counted exactly."""
    assert adjusted_duration("09:00", "10:20", hours_type) == pytest.approx(80 / 60)
    assert adjusted_duration("09:00", "10:30", hours_type) == 1.5


def test_adjusted_duration_rejects_reversed_range():
    """Test the range check applies to every type."""
    with pytest.raises(InvalidRange):
        adjusted_duration("11:00", "10:00", "teaching")


def test_overlaps():
    """Test closed-open overlap."""
    assert overlaps("09:00", "10:00", "09:30", "10:30")
    assert overlaps("09:00", "12:00", "10:00", "11:00")
    assert overlaps("10:00", "11:00", "09:00", "12:00")
    assert not overlaps("09:00", "10:00", "10:00", "11:00")
    assert not overlaps("10:00", "11:00", "09:00", "10:00")
    assert not overlaps("08:00", "09:00", "13:00", "14:00")


def test_time_slots():
    """Test the half-hour grid labels."""
    slots = time_slots(start_hour=6, count=30)
    assert slots[0] == "06:00"
    assert slots[1] == "06:30"
    assert slots[-1] == "20:30"
    assert len(slots) == 30


def test_grid_rows():
    """Test grid placement of events."""
    assert time_to_grid_row("06:00", start_hour=6) == 2
    assert time_to_grid_row("09:00", start_hour=6) == 8
    assert time_to_grid_row("09:15", start_hour=6) == 8.5
    assert event_row_span("09:00", "10:30", start_hour=6) == 3
