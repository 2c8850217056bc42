"""
Normalizing raw form and JSON input into schedule store values.

Browsers and API clients send strings: times may come as "9:30 AM" rather
than "09:30", checkboxes as "on", numbers as text. This module turns them
into the values the schedule store expects. It does not validate required
fields; the store does that, in its own order.
"""

import re
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

import dateparser

from .errors import InvalidTimeFormat, ValidationError
from .schedule_store import EventDraft
from .timecalc import TIME_PATTERN

# Clock text dateparser may read: "9:30", "9:30 am", "2pm". A bare hour or a
# word like "tomorrow" is refused.
CLOCK_TEXT = re.compile(r"^\d{1,2}(?::\d{2}\s*(?:[ap]\.?m\.?)?|\s*[ap]\.?m\.?)$", re.IGNORECASE)


# JSON/form field name -> EventDraft field name
FIELD_NAMES = {
    "type": "type",
    "startTime": "start_time",
    "endTime": "end_time",
    "description": "description",
    "className": "class_name",
    "classLocation": "class_location",
    "isOverload": "is_overload",
    "isTemporary": "is_temporary",
    "countedHours": "counted_hours",
    "expectedEndDate": "expected_end_date",
}

BOOLEAN_FIELDS = {"is_overload", "is_temporary"}

TRUE_VALUES = {"1", "true", "yes", "on"}


def parse_checkbox(value: Any) -> bool:
    """Interpret a checkbox/switch value ("on", "true", True, 1...)."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUE_VALUES


def normalize_time_input(value: Any) -> Optional[str]:
    """Turn a user-entered time into "HH:MM".

    "09:30" is returned unchanged; anything else ("9:30", "9:30 am",
    "2pm") is read with dateparser. Dates, weekdays and a bare hour
    such as "9" are refused. Blank input returns None so that the
    store reports the missing field.

    Raises:
        InvalidTimeFormat: if the text cannot be read as a time of day
    """
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    if TIME_PATTERN.match(text):
        return text
    if not CLOCK_TEXT.match(text):
        raise InvalidTimeFormat(f"Could not understand time {text!r}; use HH:MM")

    parsed = dateparser.parse(text, languages=["en"])
    if parsed is None:
        raise InvalidTimeFormat(f"Could not understand time {text!r}; use HH:MM")
    return parsed.strftime("%H:%M")


def parse_date_input(value: Any) -> Optional[date]:
    """Turn a user-entered date ("2026-12-15", "Dec 15 2026") into a date.

    Raises:
        ValidationError: if the text cannot be read as a date
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    parsed = dateparser.parse(text, languages=["en"], settings={"DATE_ORDER": "MDY"})
    if parsed is None:
        raise ValidationError(f"Could not understand date {text!r}")
    return parsed.date()


def _convert(field_name: str, value: Any) -> Any:
    if field_name in BOOLEAN_FIELDS:
        return parse_checkbox(value)
    if field_name in ("start_time", "end_time"):
        return normalize_time_input(value)
    if field_name == "expected_end_date":
        return parse_date_input(value)
    if field_name == "type":
        return str(value).strip().lower() if value is not None else None
    if field_name == "description":
        return "" if value is None else str(value)
    if field_name == "counted_hours":
        if isinstance(value, str) and not value.strip():
            return None
        return value
    return value


def changes_from_payload(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """EventDraft field changes from a JSON or form payload.

    Only keys present in the payload are returned, so the result can be used
    for partial edits. camelCase and snake_case keys are both accepted;
    unknown keys are passed through for the store to reject.
    """
    changes = {}
    for key, value in payload.items():
        field_name = FIELD_NAMES.get(key, key)
        changes[field_name] = _convert(field_name, value)
    return changes


def draft_from_payload(payload: Mapping[str, Any]) -> EventDraft:
    """Build an EventDraft from a JSON or form payload (days excluded)."""
    changes = changes_from_payload({k: v for k, v in payload.items() if k != "days"})
    unknown = set(changes) - set(FIELD_NAMES.values())
    if unknown:
        raise ValidationError(f"Unknown field(s): {', '.join(sorted(unknown))}.")
    return EventDraft(**changes)


def days_from_payload(payload: Mapping[str, Any]) -> List[str]:
    """Days from a JSON list or a comma-separated string."""
    days = payload.get("days") or []
    if isinstance(days, str):
        days = [d for d in days.split(",") if d.strip()]
    if not isinstance(days, (list, tuple)):
        raise ValidationError("Days must be a list of day names.")
    return [str(d).strip() for d in days]


def add_request_from_form(form) -> Tuple[List[str], EventDraft]:
    """Days and draft from an HTML form (a werkzeug MultiDict).

    Checkboxes that are unticked are absent from the form, so they are read
    explicitly rather than from the payload keys.
    """
    payload = {key: form.get(key) for key in form.keys() if key != "days"}
    payload["isOverload"] = form.get("isOverload")
    payload["isTemporary"] = form.get("isTemporary")
    return form.getlist("days"), draft_from_payload(payload)


def edit_changes_from_form(form) -> Dict[str, Any]:
    """EventDraft changes from the edit form (a werkzeug MultiDict)."""
    payload = {key: form.get(key) for key in form.keys()}
    payload["isOverload"] = form.get("isOverload")
    payload["isTemporary"] = form.get("isTemporary")
    return changes_from_payload(payload)
