"""Unit tests for .cccsched save files."""

import json

import pytest
from datetime import date
from facsched.errors import ParseError
from facsched.models import AppState, FacultyInfo, Schedule, TeachingEvent
from facsched.savefile import (
    dumps_state, load_state, loads_state, save_state, state_to_dict, suggested_filename
)
from facsched.schedule_store import add_event
from facsched.totals import recompute


@pytest.fixture
def state(draft):
    """A state with one event of each kind."""
    schedule = Schedule.empty()
    schedule, _ = add_event(schedule, ["monday", "wednesday"], draft("teaching", "09:00", "10:20"))
    schedule, _ = add_event(schedule, ["tuesday"], draft("student", "13:00", "14:00",
                                                         description="Office hours"))
    schedule, _ = add_event(schedule, ["friday"], draft(
        "campus", "08:00", "09:00", is_overload=True, is_temporary=True, counted_hours="2",
        expected_end_date=date(2026, 12, 15)
    ))
    return AppState(
        faculty_info=FacultyInfo(name="Jane Doe", semester="Fall 2026"),
        schedule=schedule,
        totals=recompute(schedule),
        notes="Committee meets biweekly.\nSecond line."
    )


def test_state_to_dict(state):
    """Test the saved document layout."""
    data = state_to_dict(state)
    assert set(data) == {"facultyInfo", "schedule", "totals", "notes"}
    assert list(data["schedule"]) == ["monday", "tuesday", "wednesday",
                                      "thursday", "friday", "saturday"]
    assert data["facultyInfo"] == {"name": "Jane Doe", "semester": "Fall 2026"}
    assert data["totals"]["teachingHours"] == 3.0

    teaching = data["schedule"]["monday"][0]
    assert teaching["type"] == "teaching"
    assert teaching["startTime"] == "09:00"
    assert teaching["className"] == "CS 101"
    assert teaching["duration"] == 1.5
    assert "countedHours" not in teaching

    campus = data["schedule"]["friday"][0]
    assert "className" not in campus
    assert campus["isTemporary"] is True
    assert campus["countedHours"] == 2.0
    assert campus["expectedEndDate"] == "2026-12-15"


def test_save_and_load(tmp_path, state):
    """Test a saved file loads back to an equal state."""
    path = save_state(state, tmp_path / "schedule.cccsched")
    assert path.exists()
    assert load_state(path) == state


def test_save_adds_extension(tmp_path, state):
    """Test the .cccsched extension is added when missing."""
    path = save_state(state, tmp_path / "Jane_Doe_schedule")
    assert path.name == "Jane_Doe_schedule.cccsched"
    assert path.exists()


def test_loads_is_lenient(state):
    """Test optional fields may be missing."""
    data = {
        "facultyInfo": {"name": "Jane Doe"},
        "schedule": {
            "monday": [{
                "type": "teaching", "startTime": "09:00", "endTime": "10:20",
                "className": "CS 101"
            }],
        },
    }
    loaded = loads_state(json.dumps(data))

    assert loaded.notes == ""
    assert loaded.faculty_info.semester == ""
    event = loaded.schedule.events_for("monday")[0]
    assert isinstance(event, TeachingEvent)
    assert event.duration == 1.5
    assert event.class_location == ""
    assert event.id
    assert loaded.schedule.events_for("saturday") == ()


def test_loads_keeps_stored_duration():
    """Test the file reader keeps a stored duration as-is.

    The controller rebuilds it when the state is loaded.
    """
    data = {"schedule": {"monday": [{
        "type": "student", "startTime": "09:00", "endTime": "10:00", "duration": 5
    }]}}
    event = loads_state(json.dumps(data)).schedule.events_for("monday")[0]
    assert event.duration == 5.0
    assert event.display_duration == 1.0


def test_loads_accepts_bytes(state):
    """Test uploads can be parsed without decoding first."""
    assert loads_state(dumps_state(state).encode("utf-8")) == state


@pytest.mark.parametrize("text", [
    "not json",
    "[1, 2, 3]",
    '{"schedule": {"monday": [{"type": "research", "startTime": "09:00", "endTime": "10:00"}]}}',
    '{"schedule": {"monday": [{"type": "student", "startTime": "9am", "endTime": "10:00"}]}}',
    '{"schedule": {"monday": [{"type": "student", "startTime": "11:00", "endTime": "10:00"}]}}',
    ('{"schedule": {"monday": [{"type": "student", "startTime": "10:00", "endTime": "09:00", '
     '"duration": 1.0, "displayDuration": 1.0}]}}'),
    '{"schedule": {"monday": [{"type": "student", "startTime": "10:00", "endTime": "10:00", "duration": 0}]}}',
    '{"schedule": {"monday": "oops"}}',
])
def test_loads_rejects_malformed(text):
    """Test files that cannot be turned into a schedule raise ParseError."""
    with pytest.raises(ParseError):
        loads_state(text)


def test_load_missing_file(tmp_path):
    """Test reading a file that does not exist."""
    with pytest.raises(ParseError):
        load_state(tmp_path / "missing.cccsched")


def test_suggested_filename():
    """Test the download name."""
    assert suggested_filename(FacultyInfo(name="Jane Q Doe")) == "Jane_Q_Doe_schedule.cccsched"
    assert suggested_filename(FacultyInfo()) == "_schedule.cccsched"


def test_loads_reads_flags_as_checkboxes():
    """Test flags stored as text are read like checkbox values."""
    data = {"schedule": {"monday": [{
        "type": "student", "startTime": "09:00", "endTime": "10:00",
        "isOverload": "false", "isTemporary": "false", "countedHours": 3
    }, {
        "type": "campus", "startTime": "11:00", "endTime": "12:00",
        "isOverload": "true"
    }]}}
    first, second = loads_state(json.dumps(data)).schedule.events_for("monday")
    assert first.is_overload is False
    assert first.is_temporary is False
    assert second.is_overload is True


def test_loads_non_text_fields_become_text():
    """Test numbers in text fields are read as text."""
    data = {"facultyInfo": {"name": 42, "semester": 2026}, "schedule": {"monday": [{
        "type": "teaching", "startTime": "09:00", "endTime": "10:00",
        "className": 101, "classLocation": 204
    }]}}
    state = loads_state(json.dumps(data))
    event = state.schedule.events_for("monday")[0]
    assert state.faculty_info.name == "42"
    assert event.class_name == "101"
    assert event.class_location == "204"
