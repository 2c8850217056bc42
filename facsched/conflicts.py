"""
Conflict detection for new and edited events.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .models import Schedule, ScheduleEvent, day_label
from .timecalc import overlaps


@dataclass(frozen=True)
class Conflict:
    """An existing event that overlaps a candidate time span."""
    day: str
    event: ScheduleEvent

    def describe(self) -> str:
        """One line for the user, e.g. "Monday: CS 101 09:00-10:00"."""
        return (f"{day_label(self.day)}: {self.event.label} "
                f"{self.event.start_time}-{self.event.end_time}")

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "eventId": self.event.id,
            "type": self.event.type,
            "label": self.event.label,
            "startTime": self.event.start_time,
            "endTime": self.event.end_time,
        }


def find_conflicts(schedule: Schedule, days: Iterable[str], start_time: str,
                   end_time: str, exclude_id: Optional[str] = None) -> List[Conflict]:
    """Find every existing event overlapping the candidate span.

    Spans are closed-open, so an event ending at 10:00 does not conflict with
    one starting at 10:00. Category and overload flags are ignored: any two
    overlapping events on the same day conflict.

    Args:
        schedule: Current schedule
        days: Day keys the candidate would be placed on
        start_time: Candidate start "HH:MM"
        end_time: Candidate end "HH:MM"
        exclude_id: Event to skip (the event being edited)

    Returns:
        All conflicts, ordered by the given days then by position in the day.
        Empty if there are none.
    """
    conflicts = []
    for day in days:
        for event in schedule.events_for(day):
            if exclude_id is not None and event.id == exclude_id:
                continue
            if overlaps(start_time, end_time, event.start_time, event.end_time):
                conflicts.append(Conflict(day=day, event=event))
    return conflicts
