"""
Save and load schedules as .cccsched files.

A .cccsched file is JSON holding the faculty information, the schedule, the
totals and the free-text notes:

    {
      "facultyInfo": {"name": ..., "semester": ...},
      "schedule": {"monday": [...], ..., "saturday": [...]},
      "totals": {"teachingHours": ..., "studentHours": ..., ...},
      "notes": "..."
    }

Loading is lenient about event contents: optional fields that are missing
get defaults and a stored duration is kept as-is (the state controller
rebuilds durations from the times when a file is loaded). Only a file that is
not JSON, or an event that cannot be turned into one of the three event types
with a valid time span, is rejected.
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

from .errors import ParseError, ScheduleError
from .forms import parse_checkbox
from .logger import log
from .models import (
    DAYS, EVENT_CLASSES, TEACHING,
    AppState, FacultyInfo, Schedule, ScheduleEvent, TemporaryHours, Totals,
    deserialize_date, filename_part, serialize_date
)
from .schedule_store import new_event_id
from .timecalc import adjusted_duration, display_duration, minutes_between, parse_time


FILE_EXTENSION = ".cccsched"


def suggested_filename(faculty_info: FacultyInfo) -> str:
    """Default download name, e.g. "Jane_Doe_schedule.cccsched"."""
    return f"{filename_part(faculty_info.name)}_schedule{FILE_EXTENSION}"


# Serialization

def serialize_event(event: ScheduleEvent) -> Dict[str, Any]:
    """Serialize a ScheduleEvent to dict."""
    result = {
        "id": event.id,
        "type": event.type,
        "startTime": event.start_time,
        "endTime": event.end_time,
        "description": event.description,
        "isOverload": event.is_overload,
        "isTemporary": event.is_temporary,
        "duration": event.duration,
        "displayDuration": event.display_duration,
    }
    if event.type == TEACHING:
        result["className"] = event.class_name
        result["classLocation"] = event.class_location
    if event.temporary:
        result["countedHours"] = event.temporary.counted_hours
        result["expectedEndDate"] = (
            serialize_date(event.temporary.expected_end_date)
            if event.temporary.expected_end_date else None
        )
    return result


def serialize_totals(totals: Totals) -> Dict[str, float]:
    """Serialize Totals to dict."""
    return {
        "teachingHours": totals.teaching_hours,
        "studentHours": totals.student_hours,
        "campusHours": totals.campus_hours,
        "overloadHours": totals.overload_hours,
        "temporaryTeachingHours": totals.temporary_teaching_hours,
    }


def state_to_dict(state: AppState) -> Dict[str, Any]:
    """Serialize the whole application state to a JSON-ready dict."""
    return {
        "facultyInfo": {
            "name": state.faculty_info.name,
            "semester": state.faculty_info.semester,
        },
        "schedule": {
            day: [serialize_event(e) for e in state.schedule.events_for(day)]
            for day in DAYS
        },
        "totals": serialize_totals(state.totals),
        "notes": state.notes,
    }


def dumps_state(state: AppState) -> str:
    """JSON text of a .cccsched file."""
    return json.dumps(state_to_dict(state), indent=2)


def save_state(state: AppState, path: Union[str, Path]) -> Path:
    """Write state to a .cccsched file.

    Args:
        state: State to save
        path: Target file; the .cccsched extension is added if missing

    Returns:
        Path actually written
    """
    path = Path(path)
    if path.suffix != FILE_EXTENSION:
        path = path.with_name(path.name + FILE_EXTENSION)
    path.write_text(dumps_state(state), encoding="utf-8")
    log.info(f"Saved schedule with {state.schedule.event_count} event(s) to {path}")
    return path


# Deserialization

def _as_float(value: Any, default: float = 0.0) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def deserialize_event(data: Dict[str, Any]) -> ScheduleEvent:
    """Deserialize dict to ScheduleEvent.

    Raises:
        ParseError: if the event is not an object, its type is unknown or its
                    times are not HH:MM
    """
    if not isinstance(data, dict):
        raise ParseError(f"Event must be an object, got {type(data).__name__}")

    event_type = data.get("type")
    if event_type not in EVENT_CLASSES:
        raise ParseError(f"Unknown event type {event_type!r}")

    start_time = data.get("startTime")
    end_time = data.get("endTime")
    try:
        parse_time(start_time, granularity=1)
        parse_time(end_time, granularity=1)
        minutes_between(start_time, end_time)
    except ScheduleError as e:
        raise ParseError(f"Invalid event times: {e}")

    if "duration" in data:
        duration = _as_float(data["duration"])
    else:
        duration = None
    if "displayDuration" in data:
        shown = _as_float(data["displayDuration"])
    else:
        shown = None

    temporary = None
    if parse_checkbox(data.get("isTemporary")):
        expected_end = data.get("expectedEndDate")
        try:
            expected_end_date = deserialize_date(expected_end) if expected_end else None
        except (TypeError, ValueError):
            raise ParseError(f"Invalid expected end date {expected_end!r}")
        temporary = TemporaryHours(
            counted_hours=_as_float(data.get("countedHours")),
            expected_end_date=expected_end_date
        )

    kwargs = {
        "id": data.get("id") or new_event_id(),
        "start_time": start_time,
        "end_time": end_time,
        "duration": duration,
        "display_duration": shown,
        "description": str(data.get("description") or ""),
        "is_overload": parse_checkbox(data.get("isOverload")),
        "temporary": temporary,
    }
    if event_type == TEACHING:
        kwargs["class_name"] = str(data.get("className") or "")
        kwargs["class_location"] = str(data.get("classLocation") or "")

    # Older files carry no durations; fill them in from the times.
    if kwargs["duration"] is None:
        kwargs["duration"] = adjusted_duration(start_time, end_time, event_type)
    if kwargs["display_duration"] is None:
        kwargs["display_duration"] = display_duration(start_time, end_time)

    return EVENT_CLASSES[event_type](**kwargs)


def deserialize_totals(data: Dict[str, Any]) -> Totals:
    """Deserialize dict to Totals. Missing buckets default to zero."""
    return Totals(
        teaching_hours=_as_float(data.get("teachingHours")),
        student_hours=_as_float(data.get("studentHours")),
        campus_hours=_as_float(data.get("campusHours")),
        overload_hours=_as_float(data.get("overloadHours")),
        temporary_teaching_hours=_as_float(data.get("temporaryTeachingHours")),
    )


def state_from_dict(data: Any) -> AppState:
    """Build AppState from a parsed .cccsched document.

    Raises:
        ParseError: if the document or an event in it has the wrong shape
    """
    if not isinstance(data, dict):
        raise ParseError("Schedule file must contain a JSON object")

    info = data.get("facultyInfo") or {}
    schedule_data = data.get("schedule") or {}
    if not isinstance(info, dict) or not isinstance(schedule_data, dict):
        raise ParseError("Schedule file has an invalid facultyInfo or schedule section")

    days = {}
    for day in DAYS:
        events = schedule_data.get(day) or []
        if not isinstance(events, list):
            raise ParseError(f"Events for {day} must be a list")
        days[day] = tuple(deserialize_event(e) for e in events)

    totals_data = data.get("totals") or {}
    if not isinstance(totals_data, dict):
        raise ParseError("Schedule file has an invalid totals section")

    return AppState(
        faculty_info=FacultyInfo(
            name=str(info.get("name") or ""),
            semester=str(info.get("semester") or ""),
        ),
        schedule=Schedule(days=days),
        totals=deserialize_totals(totals_data),
        notes=str(data.get("notes") or ""),
    )


def loads_state(text: Union[str, bytes]) -> AppState:
    """Parse the JSON text of a .cccsched file.

    Raises:
        ParseError: malformed JSON or wrong document shape
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ParseError(f"Schedule file is not valid JSON: {e}")
    return state_from_dict(data)


def load_state(path: Union[str, Path]) -> AppState:
    """Read a .cccsched file from disk.

    Raises:
        ParseError: unreadable or malformed file
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"Could not read schedule file {path}: {e}")
    state = loads_state(text)
    log.info(f"Loaded schedule with {state.schedule.event_count} event(s) from {path}")
    return state
