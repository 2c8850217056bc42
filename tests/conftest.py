"""Shared fixtures for the schedule builder tests."""

import pytest

from facsched.schedule_store import EventDraft


def make_draft(hours_type="teaching", start="09:00", end="10:00", **kwargs) -> EventDraft:
    """EventDraft with sensible defaults for each type."""
    if hours_type == "teaching":
        kwargs.setdefault("class_name", "CS 101")
        kwargs.setdefault("class_location", "Room 204")
    return EventDraft(type=hours_type, start_time=start, end_time=end, **kwargs)


@pytest.fixture
def draft():
    """Factory for event drafts."""
    return make_draft


@pytest.fixture
def client():
    """Flask test client with a clean set of session controllers."""
    from facsched import app as app_module

    app_module.app.config["TESTING"] = True
    app_module._controllers.clear()
    with app_module.app.test_client() as test_client:
        yield test_client
    app_module._controllers.clear()
