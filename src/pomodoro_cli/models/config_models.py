"""Configuration models for the Pomodoro CLI.

Durations are stored in seconds. ``validate_config`` is the single entry point
from raw (decoded JSON) input to a checked ``AppConfig``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pomodoro_cli.models.timer.state import Mode

DEFAULT_WORK_SECONDS = 25 * 60
DEFAULT_SHORT_BREAK_SECONDS = 5 * 60
DEFAULT_LONG_BREAK_SECONDS = 15 * 60
DEFAULT_SESSIONS_BEFORE_LONG_BREAK = 4


class TimerConfig(BaseModel):
    """Phase durations and long-break cadence."""

    model_config = ConfigDict(extra="forbid")

    work_seconds: int = Field(default=DEFAULT_WORK_SECONDS, gt=0)
    short_break_seconds: int = Field(default=DEFAULT_SHORT_BREAK_SECONDS, gt=0)
    long_break_seconds: int = Field(default=DEFAULT_LONG_BREAK_SECONDS, gt=0)
    sessions_before_long_break: int = Field(
        default=DEFAULT_SESSIONS_BEFORE_LONG_BREAK, ge=1
    )

    def duration_for(self, mode: Mode) -> int:
        """Get duration in seconds for a phase."""
        if mode is Mode.WORK:
            return self.work_seconds
        if mode is Mode.SHORT_BREAK:
            return self.short_break_seconds
        if mode is Mode.LONG_BREAK:
            return self.long_break_seconds
        return 0


class StorageConfig(BaseModel):
    """Where the session state is persisted."""

    model_config = ConfigDict(extra="forbid")

    state_file: str | None = Field(
        default=None, description="State file path (default: user data dir)"
    )


class DisplayConfig(BaseModel):
    """Terminal presentation settings."""

    model_config = ConfigDict(extra="forbid")

    icons: bool = Field(default=True)
    bell: bool = Field(default=True)


class AppConfig(BaseModel):
    """Main Pomodoro CLI configuration."""

    model_config = ConfigDict(extra="forbid")

    timer: TimerConfig = Field(default_factory=TimerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)


@dataclass(frozen=True)
class ConfigValidationResult:
    """Either a valid config or the list of problems found."""

    config: AppConfig | None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.config is not None


def validate_config(raw: Any) -> ConfigValidationResult:
    """Validate raw configuration input without side effects."""
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        return ConfigValidationResult(
            config=None,
            errors=[f"configuration must be an object, got {type(raw).__name__}"],
        )
    try:
        return ConfigValidationResult(config=AppConfig.model_validate(raw))
    except ValidationError as e:
        return ConfigValidationResult(config=None, errors=_format_errors(e))


def _format_errors(error: ValidationError) -> list[str]:
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        messages.append(f"{location}: {item['msg']}")
    return messages
