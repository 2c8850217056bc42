"""
Application-specific exceptions.

Every error here is recoverable: the operation that raised it made no change
to the schedule, and the user can correct the input and retry.
"""

from typing import List


class ScheduleError(Exception):
    """Base class for all schedule builder errors."""
    pass


class ValidationError(ScheduleError):
    """Raised when required input is missing or a value is invalid."""
    pass


class InvalidRange(ValidationError):
    """Raised when an end time is not strictly after its start time."""
    pass


class EventNotFound(ValidationError):
    """Raised when an event id does not exist in the schedule."""
    pass


class ConflictError(ScheduleError):
    """Raised when a new event overlaps existing events.

    Attributes:
        conflicts: every overlapping (day, event) pair found
    """

    def __init__(self, conflicts: List["Conflict"]):
        self.conflicts = list(conflicts)
        lines = [c.describe() for c in self.conflicts]
        super().__init__("Time conflict with existing events: " + "; ".join(lines))


class ParseError(ScheduleError):
    """Raised when a time string or a save file cannot be parsed."""
    pass


class InvalidTimeFormat(ParseError):
    """Raised when a time is not a zero-padded 24-hour HH:MM string."""
    pass


class ExportError(ScheduleError):
    """Raised when a PDF or Excel export fails."""
    pass
