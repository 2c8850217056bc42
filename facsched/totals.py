"""
Hours totals for a schedule.

Two ways of getting totals are provided and must agree:

- `recompute` walks the whole schedule and builds totals from scratch.
- `apply_delta` adjusts existing totals by one signed amount.

Both use `bucket_for` to decide which bucket an event's hours go into.
"""

import math
from dataclasses import replace
from typing import List, Optional, Tuple

from .config import settings
from .models import CAMPUS, STUDENT, TEACHING, Schedule, ScheduleEvent, Totals


TEACHING_BUCKET = "teaching_hours"
STUDENT_BUCKET = "student_hours"
CAMPUS_BUCKET = "campus_hours"
OVERLOAD_BUCKET = "overload_hours"
TEMPORARY_TEACHING_BUCKET = "temporary_teaching_hours"

TYPE_BUCKETS = {
    TEACHING: TEACHING_BUCKET,
    STUDENT: STUDENT_BUCKET,
    CAMPUS: CAMPUS_BUCKET,
}


def bucket_for(hours_type: str, is_overload: bool = False, is_temporary: bool = False) -> str:
    """Name of the Totals field an event's hours are counted in.

    Temporary teaching hours have their own bucket. Temporary student and
    campus hours go into their regular bucket. Temporary wins over overload.
    Otherwise overload hours go into the overload bucket whatever their type.
    """
    if is_temporary:
        if hours_type == TEACHING:
            return TEMPORARY_TEACHING_BUCKET
        return TYPE_BUCKETS[hours_type]
    if is_overload:
        return OVERLOAD_BUCKET
    return TYPE_BUCKETS[hours_type]


def counted_hours_for(event: ScheduleEvent) -> float:
    """Hours an event contributes: counted hours if temporary, else duration."""
    if event.is_temporary:
        return event.counted_hours
    return event.duration


def recompute(schedule: Schedule) -> Totals:
    """Build totals from scratch, visiting every event exactly once."""
    sums = {
        TEACHING_BUCKET: 0.0,
        STUDENT_BUCKET: 0.0,
        CAMPUS_BUCKET: 0.0,
        OVERLOAD_BUCKET: 0.0,
        TEMPORARY_TEACHING_BUCKET: 0.0,
    }
    for _day, event in schedule.iter_events():
        bucket = bucket_for(event.type, event.is_overload, event.is_temporary)
        sums[bucket] += counted_hours_for(event)
    return Totals(**sums)


def apply_delta(totals: Totals, hours_type: str, delta_hours: float,
                is_overload: bool = False, is_temporary: bool = False,
                counted_hours: Optional[float] = None) -> Totals:
    """Adjust one bucket by a signed amount.

    The bucket is floored at zero: removing more hours than a bucket holds
    leaves it at 0.0 rather than going negative.

    Args:
        totals: Current totals
        hours_type: "teaching", "student" or "campus"
        delta_hours: Signed hours (negative to remove)
        is_overload: Event is marked overload
        is_temporary: Event is temporary; counted_hours is used instead of
                      delta_hours, with the sign of delta_hours
        counted_hours: Manual hours of a temporary event

    Returns:
        New totals
    """
    amount = delta_hours
    if is_temporary and counted_hours is not None:
        amount = math.copysign(counted_hours, delta_hours)

    bucket = bucket_for(hours_type, is_overload, is_temporary)
    current = getattr(totals, bucket)
    return replace(totals, **{bucket: max(0.0, current + amount)})


def add_event_totals(totals: Totals, event: ScheduleEvent) -> Totals:
    """Totals with one event's hours added."""
    return apply_delta(totals, event.type, event.duration, event.is_overload,
                       event.is_temporary, event.counted_hours)


def remove_event_totals(totals: Totals, event: ScheduleEvent) -> Totals:
    """Totals with one event's hours removed (floored at zero)."""
    return apply_delta(totals, event.type, -event.duration, event.is_overload,
                       event.is_temporary, event.counted_hours)


def replace_event_totals(totals: Totals, old: ScheduleEvent, new: ScheduleEvent) -> Totals:
    """Totals after an edit: the old contribution is removed before the new one is added."""
    return add_event_totals(remove_event_totals(totals, old), new)


def totals_match(a: Totals, b: Totals, tolerance: float = 1e-9) -> bool:
    """True if every bucket of a and b agrees within tolerance."""
    return all(
        math.isclose(getattr(a, name), getattr(b, name), abs_tol=tolerance)
        for name in (TEACHING_BUCKET, STUDENT_BUCKET, CAMPUS_BUCKET,
                     OVERLOAD_BUCKET, TEMPORARY_TEACHING_BUCKET)
    )


def summary_rows(totals: Totals) -> List[Tuple[str, float]]:
    """Label/hours rows for the hours summary, in display order."""
    return [
        ("Teaching Hours", totals.teaching_hours),
        ("Temporary Teaching Hours", totals.temporary_teaching_hours),
        ("Student Hours", totals.student_hours),
        ("Campus Hours", totals.campus_hours),
        ("Overload Hours", totals.overload_hours),
        ("Total Hours", totals.total_hours),
        ("Total Minus Overload", totals.total_minus_overload),
    ]


def student_hours_on_target(totals: Totals, target: Optional[float] = None) -> bool:
    """Whether student hours equal the weekly target (highlighted otherwise)."""
    if target is None:
        target = settings.student_hours_target
    return math.isclose(totals.student_hours, target, abs_tol=1e-9)
