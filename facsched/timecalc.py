"""
Time arithmetic for schedule events.

Times are local wall-clock "HH:MM" strings. All arithmetic is done in whole
minutes and converted to fractional hours at the end, so that durations such
as 09:00-10:00 come out as exactly 1.0.
"""

import math
import re
from datetime import time
from typing import List, Optional

from .config import settings
from .errors import InvalidRange, InvalidTimeFormat
from .models import TEACHING


TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def parse_time(value: str, granularity: Optional[int] = None) -> time:
    """Parse a zero-padded 24-hour "HH:MM" string.

    Args:
        value: Time string such as "09:30"
        granularity: Minutes must be a multiple of this. Defaults to the
                     configured FACSCHED_TIME_GRANULARITY (1 = any minute).

    Returns:
        datetime.time for the given wall-clock time

    Raises:
        InvalidTimeFormat: if the string does not match HH:MM or the minutes
                           are not on the granularity
    """
    if granularity is None:
        granularity = settings.time_granularity_minutes

    if not isinstance(value, str):
        raise InvalidTimeFormat(f"Time must be a string in HH:MM format, got {value!r}")

    match = TIME_PATTERN.match(value)
    if not match:
        raise InvalidTimeFormat(f"Invalid time {value!r}: expected HH:MM (24-hour, zero-padded)")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if granularity > 1 and minutes % granularity != 0:
        raise InvalidTimeFormat(
            f"Invalid time {value!r}: minutes must be a multiple of {granularity}"
        )
    return time(hours, minutes)


def format_time(t: time) -> str:
    """Convert time to HH:MM string."""
    return t.strftime("%H:%M")


def to_minutes(value: str) -> int:
    """Minutes since midnight for an "HH:MM" string."""
    t = parse_time(value, granularity=1)
    return t.hour * 60 + t.minute


def minutes_between(start: str, end: str) -> int:
    """Length of the span start-end in minutes.

    Raises:
        InvalidRange: if end is not strictly after start
    """
    start_minutes = to_minutes(start)
    end_minutes = to_minutes(end)
    if end_minutes <= start_minutes:
        raise InvalidRange(f"End time {end} must be after start time {start}")
    return end_minutes - start_minutes


def duration(start: str, end: str) -> float:
    """Raw duration in fractional hours."""
    return minutes_between(start, end) / 60


def display_duration(start: str, end: str) -> float:
    """Unrounded duration shown to the user. Never used for totals."""
    return duration(start, end)


def adjusted_duration(start: str, end: str, hours_type: str,
                      increment_minutes: Optional[int] = None) -> float:
    """Billed duration for an event of the given type.

    Teaching time is billed in half-hour increments, so its duration is
    rounded up to the next increment (09:00-10:20 -> 1.5). Student and campus
    hours are counted exactly.

    Args:
        start: Start time "HH:MM"
        end: End time "HH:MM"
        hours_type: "teaching", "student" or "campus"
        increment_minutes: Rounding increment for teaching. Defaults to the
                           configured FACSCHED_TEACHING_INCREMENT_MINUTES.

    Returns:
        Duration in fractional hours
    """
    minutes = minutes_between(start, end)
    if hours_type != TEACHING:
        return minutes / 60

    if increment_minutes is None:
        increment_minutes = settings.teaching_increment_minutes
    blocks = math.ceil(minutes / increment_minutes)
    return blocks * increment_minutes / 60


def overlaps(start_a: str, end_a: str, start_b: str, end_b: str) -> bool:
    """True if two spans overlap. Touching endpoints do not overlap."""
    return to_minutes(start_a) < to_minutes(end_b) and to_minutes(end_a) > to_minutes(start_b)


# Grid helpers for the weekly view and the PDF

def time_slots(start_hour: Optional[int] = None, count: Optional[int] = None) -> List[str]:
    """Half-hour labels for the schedule grid (06:00, 06:30, ... 20:30)."""
    if start_hour is None:
        start_hour = settings.grid_start_hour
    if count is None:
        count = settings.grid_slot_count
    slots = []
    for i in range(count):
        hour = i // 2 + start_hour
        minute = "00" if i % 2 == 0 else "30"
        slots.append(f"{hour:02d}:{minute}")
    return slots


def time_to_grid_row(value: str, start_hour: Optional[int] = None) -> float:
    """Row of the grid a time falls on.

    Row 1 is the day header, so the first time slot is row 2. Times between
    half hours land on fractional rows.
    """
    if start_hour is None:
        start_hour = settings.grid_start_hour
    minutes = to_minutes(value) - start_hour * 60
    return minutes / 30 + 2


def event_row_span(start: str, end: str, start_hour: Optional[int] = None) -> float:
    """Number of half-hour rows an event covers on the grid."""
    return time_to_grid_row(end, start_hour) - time_to_grid_row(start, start_hour)
