"""
Configuration for the faculty schedule builder.

Settings are read from environment variables (and a local .env file) once at
import time. Every setting has a default suitable for running the app locally,
so nothing needs to be exported for development.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    time_granularity_minutes: minutes in an entered time must be a multiple of
        this (1 accepts any minute, 30 accepts only :00 and :30).
    teaching_increment_minutes: teaching durations are rounded up to a multiple
        of this many minutes (30 → half-hour billing).
    student_hours_target: weekly student hours the summary expects; any other
        total is highlighted.
    check_edit_conflicts: whether the web controller re-runs conflict detection
        when an event is edited.
    max_sessions: browser sessions kept in memory before the oldest is dropped.
    """
    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    secret_key: str = Field("dev-secret-key-change-in-production", validation_alias="SECRET_KEY")
    time_granularity_minutes: int = Field(1, ge=1, le=60, validation_alias="FACSCHED_TIME_GRANULARITY")
    teaching_increment_minutes: int = Field(
        30, ge=1, validation_alias="FACSCHED_TEACHING_INCREMENT_MINUTES"
    )
    student_hours_target: float = Field(8.0, ge=0, validation_alias="FACSCHED_STUDENT_HOURS_TARGET")
    check_edit_conflicts: bool = Field(True, validation_alias="FACSCHED_CHECK_EDIT_CONFLICTS")
    max_upload_bytes: int = Field(1 * 1024 * 1024, gt=0, validation_alias="FACSCHED_MAX_UPLOAD_BYTES")  # 1MB
    max_sessions: int = Field(100, ge=1, validation_alias="FACSCHED_MAX_SESSIONS")
    log_level: str = Field("INFO", validation_alias="FACSCHED_LOG_LEVEL")
    grid_start_hour: int = Field(6, ge=0, le=23, validation_alias="FACSCHED_GRID_START_HOUR")
    grid_slot_count: int = Field(30, ge=1, le=48, validation_alias="FACSCHED_GRID_SLOT_COUNT")  # 06:00 to 20:30

    @field_validator("log_level")
    @classmethod
    def upper_log_level(cls, value: str) -> str:
        return value.strip().upper()


# Create a single, importable instance of the settings
settings = Settings()
