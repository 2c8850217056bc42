"""
Schedule store: adding, editing and deleting events.

Every operation takes a Schedule and returns a new one; the input is never
modified. Validation happens before anything is built, so a rejected
operation has no effect at all.
"""

import math
import uuid
from dataclasses import dataclass, fields, replace
from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .conflicts import find_conflicts
from .errors import ConflictError, EventNotFound, ValidationError
from .models import (
    DAYS, EVENT_CLASSES, HOURS_TYPES, TEACHING,
    Schedule, ScheduleEvent, TemporaryHours
)
from .timecalc import adjusted_duration, display_duration, minutes_between, parse_time


@dataclass(frozen=True)
class EventDraft:
    """Raw values for an event as entered by the user.

    Nothing here is trusted yet; `validate_draft` checks it and
    `build_event` turns it into a ScheduleEvent.
    """
    type: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    description: str = ""
    class_name: Optional[str] = None
    class_location: Optional[str] = None
    is_overload: bool = False
    is_temporary: bool = False
    counted_hours: Optional[Union[str, float]] = None
    expected_end_date: Optional[date] = None


EDITABLE_FIELDS = frozenset(f.name for f in fields(EventDraft))


def new_event_id() -> str:
    """Stable identifier for a newly created event."""
    return uuid.uuid4().hex


def normalize_days(days: Iterable[str]) -> List[str]:
    """Lower-case day keys, duplicates removed, order kept.

    Raises:
        ValidationError: if no day is given or a day is not Monday-Saturday
    """
    result = []
    for day in days or []:
        key = str(day).strip().lower()
        if key not in DAYS:
            raise ValidationError(f"Unknown day {day!r}. Choose Monday through Saturday.")
        if key not in result:
            result.append(key)
    if not result:
        raise ValidationError("Please select at least one day.")
    return result


def parse_counted_hours(value: Any) -> float:
    """Parse the manually entered hours of a temporary event.

    Raises:
        ValidationError: if missing, not a number, not finite or negative
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError("Please provide the counted hours for temporary hours.")
    if isinstance(value, bool):
        raise ValidationError(f"Counted hours must be a number, got {value!r}.")
    try:
        hours = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Counted hours must be a number, got {value!r}.")
    if not math.isfinite(hours):
        raise ValidationError(f"Counted hours must be a finite number, got {value!r}.")
    if hours < 0:
        raise ValidationError("Counted hours cannot be negative.")
    return hours


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def validate_draft(draft: EventDraft, days: Optional[Iterable[str]] = None,
                   require_days: bool = True) -> List[str]:
    """Check a draft, failing on the first problem found.

    Checks run in this order: type, days, start/end present, teaching class
    fields (present and text), temporary counted hours, time format, time range.

    Args:
        draft: Values to check
        days: Days the event goes on (only checked when require_days)
        require_days: False when editing an event that already has a day

    Returns:
        Normalized day keys (empty when require_days is False)

    Raises:
        ValidationError: missing or invalid field, or end not after start
        InvalidTimeFormat: a time is not HH:MM
    """
    if _is_blank(draft.type):
        raise ValidationError("Please select the type of hours.")
    if draft.type not in HOURS_TYPES:
        raise ValidationError(f"Unknown type of hours {draft.type!r}.")

    day_keys = normalize_days(days) if require_days else []

    if _is_blank(draft.start_time) or _is_blank(draft.end_time):
        raise ValidationError("Please fill in all required fields.")

    if draft.type == TEACHING and (_is_blank(draft.class_name) or _is_blank(draft.class_location)):
        raise ValidationError("Please provide class name and location for teaching hours.")
    if draft.type == TEACHING and not (isinstance(draft.class_name, str)
                                      and isinstance(draft.class_location, str)):
        raise ValidationError("Class name and location must be text.")

    if draft.is_temporary:
        parse_counted_hours(draft.counted_hours)

    parse_time(draft.start_time)
    parse_time(draft.end_time)
    minutes_between(draft.start_time, draft.end_time)
    return day_keys


def build_event(draft: EventDraft, event_id: Optional[str] = None) -> ScheduleEvent:
    """Create the event variant for a validated draft.

    Teaching-only fields are dropped for other types and counted hours are
    dropped for non-temporary events.
    """
    validate_draft(draft, require_days=False)

    temporary = None
    if draft.is_temporary:
        temporary = TemporaryHours(
            counted_hours=parse_counted_hours(draft.counted_hours),
            expected_end_date=draft.expected_end_date
        )

    kwargs = {
        "id": event_id or new_event_id(),
        "start_time": draft.start_time,
        "end_time": draft.end_time,
        "duration": adjusted_duration(draft.start_time, draft.end_time, draft.type),
        "display_duration": display_duration(draft.start_time, draft.end_time),
        "description": (draft.description or "").strip(),
        "is_overload": bool(draft.is_overload),
        "temporary": temporary,
    }
    if draft.type == TEACHING:
        kwargs["class_name"] = draft.class_name.strip()
        kwargs["class_location"] = draft.class_location.strip()

    return EVENT_CLASSES[draft.type](**kwargs)


def draft_from_event(event: ScheduleEvent) -> EventDraft:
    """The draft that would rebuild this event (used as the base for edits)."""
    return EventDraft(
        type=event.type,
        start_time=event.start_time,
        end_time=event.end_time,
        description=event.description,
        class_name=getattr(event, "class_name", None),
        class_location=getattr(event, "class_location", None),
        is_overload=event.is_overload,
        is_temporary=event.is_temporary,
        counted_hours=event.counted_hours,
        expected_end_date=event.temporary.expected_end_date if event.temporary else None,
    )


def add_event(schedule: Schedule, days: Iterable[str],
              draft: EventDraft) -> Tuple[Schedule, List[ScheduleEvent]]:
    """Add an event to one or more days.

    Each day gets its own copy of the event with its own id; the copies are
    not linked afterwards.

    Args:
        schedule: Current schedule
        days: Day keys ("monday" ... "saturday", any case)
        draft: Event values

    Returns:
        (new schedule, created events in day order)

    Raises:
        ValidationError: invalid input, nothing added
        ConflictError: the span overlaps existing events; carries every conflict
    """
    day_keys = validate_draft(draft, days)

    conflicts = find_conflicts(schedule, day_keys, draft.start_time, draft.end_time)
    if conflicts:
        raise ConflictError(conflicts)

    template = build_event(draft)
    created = []
    new_schedule = schedule
    for day in day_keys:
        event = replace(template, id=new_event_id())
        new_schedule = new_schedule.with_day(day, new_schedule.events_for(day) + (event,))
        created.append(event)
    return new_schedule, created


def locate_event(schedule: Schedule, event_id: str) -> Tuple[str, int]:
    """Find the (day, index) of an event.

    Raises:
        EventNotFound: if no event has this id
    """
    for day in DAYS:
        for index, event in enumerate(schedule.events_for(day)):
            if event.id == event_id:
                return day, index
    raise EventNotFound(f"No event with id {event_id!r} in the schedule.")


def event_id_at(schedule: Schedule, day: str, index: int) -> str:
    """Id of the event shown at a grid position.

    Positions shift when an earlier event on the same day is deleted, so ids
    (not positions) should be kept between operations.
    """
    events = schedule.events_for(str(day).lower())
    if not 0 <= index < len(events):
        raise EventNotFound(f"No event at position {index} on {day}.")
    return events[index].id


def get_event(schedule: Schedule, event_id: str) -> ScheduleEvent:
    day, index = locate_event(schedule, event_id)
    return schedule.events_for(day)[index]


def edit_event(schedule: Schedule, event_id: str, changes: Dict[str, Any],
               check_conflicts: bool = False) -> Tuple[Schedule, ScheduleEvent]:
    """Replace an event with its values merged with `changes`.

    The event keeps its id, day and position. Duration is recomputed from
    the new times and type. Changing the type switches the event variant.

    Args:
        schedule: Current schedule
        event_id: Event to edit
        changes: EventDraft field names mapped to new values
        check_conflicts: Reject the edit if the new span overlaps another
                         event on the same day

    Returns:
        (new schedule, the rebuilt event)

    Raises:
        EventNotFound: unknown id
        ValidationError: unknown field or invalid merged values
        ConflictError: only when check_conflicts is set
    """
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValidationError(f"Cannot edit field(s): {', '.join(sorted(unknown))}.")

    day, index = locate_event(schedule, event_id)
    events = list(schedule.events_for(day))
    draft = replace(draft_from_event(events[index]), **changes)
    validate_draft(draft, require_days=False)

    if check_conflicts:
        conflicts = find_conflicts(schedule, [day], draft.start_time, draft.end_time,
                                   exclude_id=event_id)
        if conflicts:
            raise ConflictError(conflicts)

    updated = build_event(draft, event_id=event_id)
    events[index] = updated
    return schedule.with_day(day, events), updated


def delete_event(schedule: Schedule, event_id: str) -> Tuple[Schedule, ScheduleEvent]:
    """Remove an event. Later events on the same day move up one position.

    Raises:
        EventNotFound: unknown id
    """
    day, index = locate_event(schedule, event_id)
    events = list(schedule.events_for(day))
    removed = events.pop(index)
    return schedule.with_day(day, events), removed


def rebuild_durations(schedule: Schedule) -> Schedule:
    """Copy of a schedule with every duration recomputed from its times."""
    rebuilt = schedule
    for day in DAYS:
        events = [
            replace(event,
                    duration=adjusted_duration(event.start_time, event.end_time, event.type),
                    display_duration=display_duration(event.start_time, event.end_time))
            for event in schedule.events_for(day)
        ]
        rebuilt = rebuilt.with_day(day, events)
    return rebuilt


def find_duration_drift(schedule: Schedule) -> List[Tuple[str, ScheduleEvent, float]]:
    """Events whose stored duration differs from the recomputed one.

    A consistent schedule returns an empty list. Schedules built by this
    module are always consistent; drift can only come from a save file, and
    `rebuild_durations` repairs it.

    Returns:
        (day, event, recomputed duration) for each drifting event
    """
    drift = []
    for day, event in schedule.iter_events():
        expected = adjusted_duration(event.start_time, event.end_time, event.type)
        if not math.isclose(event.duration, expected, abs_tol=1e-9):
            drift.append((day, event, expected))
    return drift
