"""Unit tests for configuration."""

import pytest
from pydantic import ValidationError
from facsched.config import Settings


def test_defaults(monkeypatch):
    """Test settings when nothing is set."""
    for name in ("FACSCHED_TIME_GRANULARITY", "FACSCHED_CHECK_EDIT_CONFLICTS",
                 "FACSCHED_STUDENT_HOURS_TARGET", "FACSCHED_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.time_granularity_minutes == 1
    assert settings.teaching_increment_minutes == 30
    assert settings.student_hours_target == 8.0
    assert settings.check_edit_conflicts is True
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch):
    """Test FACSCHED_* variables are read and converted."""
    monkeypatch.setenv("FACSCHED_TIME_GRANULARITY", "30")
    monkeypatch.setenv("FACSCHED_CHECK_EDIT_CONFLICTS", "false")
    monkeypatch.setenv("FACSCHED_STUDENT_HOURS_TARGET", "6.5")
    monkeypatch.setenv("FACSCHED_LOG_LEVEL", "debug")
    monkeypatch.setenv("SECRET_KEY", "s3cret")

    settings = Settings(_env_file=None)
    assert settings.time_granularity_minutes == 30
    assert settings.check_edit_conflicts is False
    assert settings.student_hours_target == 6.5
    assert settings.log_level == "DEBUG"
    assert settings.secret_key == "s3cret"


@pytest.mark.parametrize("name, value", [
    ("FACSCHED_CHECK_EDIT_CONFLICTS", "ture"),
    ("FACSCHED_TIME_GRANULARITY", "half"),
    ("FACSCHED_TIME_GRANULARITY", "0"),
    ("FACSCHED_MAX_UPLOAD_BYTES", "-1"),
])
def test_invalid_values_are_rejected(monkeypatch, name, value):
    """Test typos and out-of-range values fail loudly."""
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
