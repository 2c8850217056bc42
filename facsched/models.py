"""
Data models for the faculty schedule builder.

This module defines the data structures shared by the schedule store, the
totals aggregator, the save file codec and the exporters. All models are
frozen dataclasses: an operation that changes the schedule builds a new value
instead of modifying the old one, so a failed operation can never leave
half-applied state behind.

These models represent:
- Scheduled events, one class per category of hours (teaching, student, campus)
- Temporary hours overrides
- The weekly schedule (Monday to Saturday)
- Hours totals
- Faculty information
- The complete application state
"""

from dataclasses import dataclass, field
from datetime import date
from typing import ClassVar, Dict, Iterator, Optional, Tuple


TEACHING = "teaching"
STUDENT = "student"
CAMPUS = "campus"

HOURS_TYPES = (TEACHING, STUDENT, CAMPUS)

DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday")


def day_label(day: str) -> str:
    """Capitalized display name for a day key ("monday" -> "Monday")."""
    return day.capitalize()


@dataclass(frozen=True)
class TemporaryHours:
    """Manual hours override for a short-term or provisional assignment.

    When an event carries this, totals count `counted_hours` instead of the
    time span of the event.
    """
    counted_hours: float
    expected_end_date: Optional[date] = None


@dataclass(frozen=True)
class ScheduleEvent:
    """One scheduled block of time on a single day.

    Subclasses fix the category (`type`) and add the fields that only make
    sense for that category. `duration` is the billed (category-adjusted)
    length in hours; `display_duration` is the raw length used for display.
    """
    id: str
    start_time: str             # "HH:MM", 24-hour
    end_time: str               # "HH:MM", strictly after start_time
    duration: float             # adjusted hours, used for totals
    display_duration: float     # raw hours, display only
    description: str = ""
    is_overload: bool = False   # counts toward overload instead of its own category
    temporary: Optional[TemporaryHours] = None

    type: ClassVar[str] = ""

    @property
    def is_temporary(self) -> bool:
        return self.temporary is not None

    @property
    def counted_hours(self) -> Optional[float]:
        return self.temporary.counted_hours if self.temporary else None

    @property
    def label(self) -> str:
        """Short title shown on the schedule grid."""
        return "Hours"


@dataclass(frozen=True)
class TeachingEvent(ScheduleEvent):
    """A class taught by the faculty member."""
    class_name: str = ""
    class_location: str = ""

    type: ClassVar[str] = TEACHING

    @property
    def label(self) -> str:
        return self.class_name


@dataclass(frozen=True)
class StudentEvent(ScheduleEvent):
    """Student-facing hours (office hours, advising)."""
    type: ClassVar[str] = STUDENT

    @property
    def label(self) -> str:
        return "Student Hours"


@dataclass(frozen=True)
class CampusEvent(ScheduleEvent):
    """Other on-campus hours (committees, service)."""
    type: ClassVar[str] = CAMPUS

    @property
    def label(self) -> str:
        return "Campus Hours"


EVENT_CLASSES = {
    TEACHING: TeachingEvent,
    STUDENT: StudentEvent,
    CAMPUS: CampusEvent,
}


def _empty_days() -> Dict[str, Tuple[ScheduleEvent, ...]]:
    return {day: () for day in DAYS}


@dataclass(frozen=True)
class Schedule:
    """The week's events keyed by day.

    Each day holds an ordered tuple of events; order is insertion order and is
    only meaningful for display.
    """
    days: Dict[str, Tuple[ScheduleEvent, ...]] = field(default_factory=_empty_days)

    @classmethod
    def empty(cls) -> "Schedule":
        return cls()

    def events_for(self, day: str) -> Tuple[ScheduleEvent, ...]:
        return self.days.get(day, ())

    def with_day(self, day: str, events) -> "Schedule":
        """Return a copy of this schedule with one day's events replaced."""
        days = dict(self.days)
        days[day] = tuple(events)
        return Schedule(days=days)

    def iter_events(self) -> Iterator[Tuple[str, ScheduleEvent]]:
        """Yield (day, event) pairs, Monday to Saturday, in list order."""
        for day in DAYS:
            for event in self.events_for(day):
                yield day, event

    @property
    def event_count(self) -> int:
        return sum(len(self.events_for(day)) for day in DAYS)


@dataclass(frozen=True)
class Totals:
    """Hours accumulated per category bucket. Every bucket is >= 0."""
    teaching_hours: float = 0.0
    student_hours: float = 0.0
    campus_hours: float = 0.0
    overload_hours: float = 0.0
    temporary_teaching_hours: float = 0.0

    @property
    def total_hours(self) -> float:
        return (self.teaching_hours + self.student_hours + self.campus_hours
                + self.overload_hours + self.temporary_teaching_hours)

    @property
    def total_minus_overload(self) -> float:
        return self.total_hours - self.overload_hours


@dataclass(frozen=True)
class FacultyInfo:
    """Who the schedule belongs to. Used for display and file names only."""
    name: str = ""
    semester: str = ""


@dataclass(frozen=True)
class AppState:
    """Everything the user is working on: what gets saved, loaded and exported."""
    faculty_info: FacultyInfo = field(default_factory=FacultyInfo)
    schedule: Schedule = field(default_factory=Schedule)
    totals: Totals = field(default_factory=Totals)
    notes: str = ""


# Serialization helpers for JSON conversion

def serialize_date(d: date) -> str:
    """Convert date to ISO format string."""
    return d.isoformat()


def deserialize_date(s: str) -> date:
    """Convert ISO format string to date."""
    return date.fromisoformat(s)


def filename_part(text: str) -> str:
    """Replace runs of whitespace with underscores for use in file names."""
    return "_".join(text.split())
