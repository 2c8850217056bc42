"""
Application state controller.

The controller owns the one copy of the state (faculty info, schedule, totals
and notes). Views never hold their own copy: they read `controller.state` and
subscribe to be told when it changes. Every schedule change goes through the
schedule store and is followed by a full recompute of the totals.
"""

from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, List, Optional

from .config import settings
from .logger import log
from .models import AppState, FacultyInfo, Schedule, ScheduleEvent
from .schedule_store import (
    EventDraft, add_event, delete_event, edit_event, find_duration_drift, rebuild_durations
)
from .totals import recompute, totals_match


Listener = Callable[[AppState], None]


class ScheduleController:
    """Single writer of the application state."""

    def __init__(self, state: Optional[AppState] = None,
                 check_edit_conflicts: Optional[bool] = None):
        """Initialize the controller.

        Args:
            state: Starting state. Defaults to an empty schedule.
            check_edit_conflicts: Re-run conflict detection on edits.
                                  Defaults to FACSCHED_CHECK_EDIT_CONFLICTS.
        """
        if check_edit_conflicts is None:
            check_edit_conflicts = settings.check_edit_conflicts
        self.check_edit_conflicts = check_edit_conflicts
        self._listeners: List[Listener] = []
        self._state = AppState()
        if state is not None:
            schedule = rebuild_durations(state.schedule)
            self._state = replace(state, schedule=schedule, totals=recompute(schedule))

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run after every successful change.

        Returns:
            Function that removes the callback again
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _commit(self, state: AppState):
        self._state = state
        for listener in list(self._listeners):
            listener(state)

    def _commit_schedule(self, schedule: Schedule):
        self._commit(replace(self._state, schedule=schedule, totals=recompute(schedule)))

    def add_hours(self, days: Iterable[str], draft: EventDraft) -> List[ScheduleEvent]:
        """Add hours on the given days.

        Raises:
            ValidationError: invalid input
            ConflictError: overlaps existing events
        """
        schedule, created = add_event(self._state.schedule, days, draft)
        self._commit_schedule(schedule)
        log.info(f"Added {len(created)} {draft.type} event(s) {draft.start_time}-{draft.end_time}")
        return created

    def edit_event(self, event_id: str, changes: Dict[str, Any]) -> ScheduleEvent:
        """Apply changes to one event.

        Raises:
            EventNotFound: unknown id
            ValidationError: invalid merged values
            ConflictError: new span overlaps another event (when enabled)
        """
        schedule, updated = edit_event(self._state.schedule, event_id, changes,
                                       check_conflicts=self.check_edit_conflicts)
        self._commit_schedule(schedule)
        log.info(f"Edited event {event_id}")
        return updated

    def delete_event(self, event_id: str) -> ScheduleEvent:
        """Delete one event.

        Raises:
            EventNotFound: unknown id
        """
        schedule, removed = delete_event(self._state.schedule, event_id)
        self._commit_schedule(schedule)
        log.info(f"Deleted {removed.type} event {event_id}")
        return removed

    def set_faculty_info(self, name: str, semester: str):
        info = FacultyInfo(name=(name or "").strip(), semester=(semester or "").strip())
        self._commit(replace(self._state, faculty_info=info))

    def set_notes(self, notes: str):
        self._commit(replace(self._state, notes=notes or ""))

    def replace_state(self, state: AppState):
        """Replace everything with a loaded state.

        Durations are rebuilt from each event's times and totals from the
        rebuilt schedule; values stored in the file are only compared, never
        trusted.

        Raises:
            ScheduleError: an event has times that cannot be used
        """
        for day, event, expected in find_duration_drift(state.schedule):
            log.warning(
                f"Loaded {event.type} event on {day} {event.start_time}-{event.end_time} "
                f"has duration {event.duration}, expected {expected}; using {expected}"
            )
        schedule = rebuild_durations(state.schedule)
        totals = recompute(schedule)
        if not totals_match(totals, state.totals):
            log.warning("Totals in loaded file do not match its schedule; using recomputed totals")
        self._commit(replace(state, schedule=schedule, totals=totals))
        log.info(f"Loaded schedule for {state.faculty_info.name or 'unnamed faculty'}")

    def reset(self):
        self._commit(AppState())
