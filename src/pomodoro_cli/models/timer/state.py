"""Timer session state, status snapshots and transition events."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .exceptions import InvalidModeError


class Mode(str, Enum):
    """Phase of the Pomodoro cycle."""

    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"
    IDLE = "idle"

    @property
    def label(self) -> str:
        """Human-readable label, e.g. ``Short Break``."""
        return self.value.replace("_", " ").title()

    @property
    def is_break(self) -> bool:
        return self in (Mode.SHORT_BREAK, Mode.LONG_BREAK)

    @classmethod
    def parse(cls, value: Mode | str | None) -> Mode:
        """Parse a startable mode; ``None`` means work.

        Raises:
            InvalidModeError: If the value is idle or unknown.
        """
        if value is None:
            return cls.WORK
        if isinstance(value, cls):
            mode = value
        else:
            normalized = str(value).strip().lower().replace("-", "_")
            try:
                mode = cls(normalized)
            except ValueError:
                raise InvalidModeError(value) from None
        if mode not in STARTABLE_MODES:
            raise InvalidModeError(value)
        return mode


STARTABLE_MODES: tuple[Mode, ...] = (Mode.WORK, Mode.SHORT_BREAK, Mode.LONG_BREAK)


class RunState(str, Enum):
    """Whether a tick source is active for the current phase."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass
class SessionState:
    """The single mutable timer entity, owned by one state machine."""

    mode: Mode = Mode.IDLE
    remaining_seconds: int = 0
    run_state: RunState = RunState.IDLE
    completed_work_sessions: int = 0
    session_started_at: int | None = None  # epoch seconds
    paused_at: int | None = None  # epoch seconds

    @property
    def is_running(self) -> bool:
        return self.run_state is RunState.RUNNING

    @property
    def is_paused(self) -> bool:
        return self.run_state is RunState.PAUSED

    @property
    def is_idle(self) -> bool:
        return self.run_state is RunState.IDLE


@dataclass(frozen=True)
class StatusSnapshot:
    """Immutable copy of the session state exposed to UI and notifier code."""

    mode: Mode
    remaining_seconds: int
    is_running: bool
    is_paused: bool
    completed_work_sessions: int
    session_started_at: int | None = None
    paused_at: int | None = None

    @classmethod
    def from_state(cls, state: SessionState) -> StatusSnapshot:
        return cls(
            mode=state.mode,
            remaining_seconds=state.remaining_seconds,
            is_running=state.is_running,
            is_paused=state.is_paused,
            completed_work_sessions=state.completed_work_sessions,
            session_started_at=state.session_started_at,
            paused_at=state.paused_at,
        )

    @property
    def minutes(self) -> int:
        return self.remaining_seconds // 60

    @property
    def seconds(self) -> int:
        return self.remaining_seconds % 60

    @property
    def label(self) -> str:
        return self.mode.label

    @property
    def clock(self) -> str:
        """Remaining time formatted as ``MM:SS``."""
        return f"{self.minutes:02d}:{self.seconds:02d}"

    def to_dict(self) -> dict:
        """Convert to the public status dictionary."""
        return {
            "mode": self.mode.value,
            "label": self.label,
            "remainingSeconds": self.remaining_seconds,
            "minutes": self.minutes,
            "seconds": self.seconds,
            "isRunning": self.is_running,
            "isPaused": self.is_paused,
            "completedWorkSessions": self.completed_work_sessions,
        }


@dataclass(frozen=True)
class TransitionEvent:
    """Emitted once per phase completion."""

    completed_mode: Mode
    next_mode: Mode
    completed_work_sessions: int

    def to_dict(self) -> dict:
        return {
            "completedMode": self.completed_mode.value,
            "nextMode": self.next_mode.value,
            "completedWorkSessions": self.completed_work_sessions,
        }
