"""Session state persistence with wall-clock drift reconciliation."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    ValidationError,
    model_validator,
)

from .clock import Clock, SystemClock
from .state import Mode, RunState, SessionState

logger = logging.getLogger(__name__)

STATE_FILE_NAME = "current_session.json"


class FileStorage:
    """Byte-oriented storage of a single record at a fixed path."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def read(self) -> bytes | None:
        """Return the stored bytes, or ``None`` if nothing has been stored."""
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None

    def write(self, data: bytes) -> None:
        """Atomically replace the stored bytes."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile("wb", delete=False, dir=str(self.path.parent)) as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
            tmp_path = Path(handle.name)
        try:
            os.replace(tmp_path, self.path)
        except OSError:
            tmp_path.unlink(missing_ok=True)
            raise

        # Set secure permissions
        self.path.chmod(0o600)


class SessionRecord(BaseModel):
    """On-disk shape of a ``SessionState``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    mode: Mode
    remaining_seconds: NonNegativeInt = Field(alias="remainingSeconds")
    is_running: bool = Field(alias="isRunning")
    is_paused: bool = Field(alias="isPaused")
    completed_work_sessions: NonNegativeInt = Field(alias="completedWorkSessions")
    session_started_at: int | None = Field(default=None, alias="sessionStartedAt")
    paused_at: int | None = Field(default=None, alias="pausedAt")

    @model_validator(mode="after")
    def check_flags(self) -> SessionRecord:
        if self.is_running and self.is_paused:
            raise ValueError("record cannot be both running and paused")
        if self.mode is Mode.IDLE and (self.is_running or self.is_paused):
            raise ValueError("idle record cannot be running or paused")
        if self.mode is not Mode.IDLE and not (self.is_running or self.is_paused):
            raise ValueError("active mode record must be running or paused")
        return self

    @classmethod
    def from_state(cls, state: SessionState) -> SessionRecord:
        return cls(
            mode=state.mode,
            remaining_seconds=state.remaining_seconds,
            is_running=state.is_running,
            is_paused=state.is_paused,
            completed_work_sessions=state.completed_work_sessions,
            session_started_at=state.session_started_at,
            paused_at=state.paused_at,
        )

    def to_state(self) -> SessionState:
        if self.is_running:
            run_state = RunState.RUNNING
        elif self.is_paused:
            run_state = RunState.PAUSED
        else:
            run_state = RunState.IDLE
        return SessionState(
            mode=self.mode,
            remaining_seconds=self.remaining_seconds,
            run_state=run_state,
            completed_work_sessions=self.completed_work_sessions,
            session_started_at=self.session_started_at,
            paused_at=self.paused_at,
        )


class SessionPersistence:
    """Saves and restores ``SessionState``; never raises past its boundary."""

    def __init__(self, storage: FileStorage, clock: Clock | None = None):
        self.storage = storage
        self.clock = clock or SystemClock()

    @staticmethod
    def encode(state: SessionState) -> bytes:
        record = SessionRecord.from_state(state)
        return record.model_dump_json(by_alias=True, indent=2).encode("utf-8")

    @staticmethod
    def decode(data: bytes) -> SessionState:
        """Decode a stored record.

        Raises:
            ValidationError: If the bytes are not a valid record.
        """
        return SessionRecord.model_validate_json(data).to_state()

    def save(self, state: SessionState) -> bool:
        """Write the state through to storage. Returns False on failure."""
        try:
            self.storage.write(self.encode(state))
        except OSError as e:
            logger.error("failed to save session state to %s: %s", self._where(), e)
            return False
        return True

    def load(self) -> SessionState | None:
        """Read the stored state, reconciling time elapsed while running.

        Returns ``None`` when nothing usable is stored. A reconciled
        ``remaining_seconds`` of 0 on a running state means the phase ended
        while the process was down; the caller must evaluate the transition.
        """
        try:
            data = self.storage.read()
        except OSError as e:
            logger.error("failed to read session state from %s: %s", self._where(), e)
            return None

        if data is None:
            return None
        if not data.strip():
            logger.warning("session state at %s is empty, ignoring", self._where())
            return None

        try:
            state = self.decode(data)
        except ValidationError as e:
            logger.warning(
                "session state at %s is corrupt, ignoring: %s",
                self._where(),
                e.errors(include_url=False),
            )
            return None

        if state.is_running and state.session_started_at is not None:
            elapsed = max(0, self.clock.now() - state.session_started_at)
            state.remaining_seconds = max(0, state.remaining_seconds - elapsed)
            logger.info(
                "reconciled %ss of drift for %s (remaining=%ss)",
                elapsed,
                state.mode.value,
                state.remaining_seconds,
            )
        return state

    def _where(self) -> str:
        return str(getattr(self.storage, "path", self.storage))
