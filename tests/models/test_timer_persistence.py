"""Unit tests for pomodoro_cli.models.timer.persistence."""

from __future__ import annotations

import json
import logging
import os
import stat
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from pomodoro_cli.models.timer.persistence import (
    STATE_FILE_NAME,
    FileStorage,
    SessionPersistence,
    SessionRecord,
)
from pomodoro_cli.models.timer.state import Mode, RunState, SessionState


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _running(remaining=1500, started_at=1_700_000_000, count=0, mode=Mode.WORK):
    return SessionState(
        mode=mode,
        remaining_seconds=remaining,
        run_state=RunState.RUNNING,
        completed_work_sessions=count,
        session_started_at=started_at,
    )


def _record(**overrides) -> bytes:
    record = {
        "mode": "work",
        "remainingSeconds": 1200,
        "isRunning": False,
        "isPaused": True,
        "completedWorkSessions": 2,
        "sessionStartedAt": 1_700_000_000,
        "pausedAt": 1_700_000_300,
    }
    record.update(overrides)
    return json.dumps(record).encode()


# ---------------------------------------------------------------------------
# FileStorage
# ---------------------------------------------------------------------------


class TestFileStorage:
    def test_read_missing_file_returns_none(self, tmp_path):
        assert FileStorage(tmp_path / "nope.json").read() is None

    def test_write_creates_parent_dirs(self, tmp_path):
        path = tmp_path / "a" / "b" / STATE_FILE_NAME
        FileStorage(path).write(b"{}")
        assert path.read_bytes() == b"{}"

    def test_write_replaces_existing_content(self, tmp_path):
        storage = FileStorage(tmp_path / STATE_FILE_NAME)
        storage.write(b"first")
        storage.write(b"second")
        assert storage.read() == b"second"

    def test_write_leaves_no_temp_files(self, tmp_path):
        storage = FileStorage(tmp_path / STATE_FILE_NAME)
        storage.write(b"data")
        assert sorted(p.name for p in tmp_path.iterdir()) == [STATE_FILE_NAME]

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_write_sets_owner_only_permissions(self, tmp_path):
        path = tmp_path / STATE_FILE_NAME
        FileStorage(path).write(b"data")
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_failed_replace_keeps_old_content(self, tmp_path):
        storage = FileStorage(tmp_path / STATE_FILE_NAME)
        storage.write(b"original")

        with patch(
            "pomodoro_cli.models.timer.persistence.os.replace",
            side_effect=OSError("cross-device link"),
        ):
            with pytest.raises(OSError):
                storage.write(b"new")

        assert storage.read() == b"original"
        assert sorted(p.name for p in tmp_path.iterdir()) == [STATE_FILE_NAME]


# ---------------------------------------------------------------------------
# SessionRecord
# ---------------------------------------------------------------------------


class TestSessionRecord:
    def test_encode_uses_camel_case_keys(self):
        data = json.loads(SessionPersistence.encode(_running(count=3)))
        assert data == {
            "mode": "work",
            "remainingSeconds": 1500,
            "isRunning": True,
            "isPaused": False,
            "completedWorkSessions": 3,
            "sessionStartedAt": 1_700_000_000,
            "pausedAt": None,
        }

    def test_decode_paused_record(self):
        state = SessionPersistence.decode(_record())
        assert state.mode is Mode.WORK
        assert state.run_state is RunState.PAUSED
        assert state.remaining_seconds == 1200
        assert state.completed_work_sessions == 2
        assert state.paused_at == 1_700_000_300

    def test_decode_ignores_unknown_fields(self):
        state = SessionPersistence.decode(_record(taskTitle="legacy"))
        assert state.is_paused

    def test_decode_idle_record(self):
        data = _record(
            mode="idle",
            remainingSeconds=0,
            isPaused=False,
            sessionStartedAt=None,
            pausedAt=None,
        )
        state = SessionPersistence.decode(data)
        assert state.run_state is RunState.IDLE

    @pytest.mark.parametrize(
        "overrides",
        [
            {"isRunning": True, "isPaused": True},
            {"mode": "idle", "isPaused": True},
            {"mode": "work", "isPaused": False, "isRunning": False},
            {"mode": "nap"},
            {"remainingSeconds": -1},
            {"completedWorkSessions": "many"},
        ],
    )
    def test_inconsistent_records_rejected(self, overrides):
        with pytest.raises(ValidationError):
            SessionPersistence.decode(_record(**overrides))

    def test_record_accepts_field_names(self):
        record = SessionRecord(
            mode=Mode.SHORT_BREAK,
            remaining_seconds=10,
            is_running=True,
            is_paused=False,
            completed_work_sessions=1,
        )
        assert record.to_state().run_state is RunState.RUNNING


# ---------------------------------------------------------------------------
# SessionPersistence
# ---------------------------------------------------------------------------


class TestSessionPersistence:
    def test_load_nothing_stored(self, storage, clock):
        assert SessionPersistence(storage, clock).load() is None

    def test_save_then_load_round_trip(self, tmp_path, clock):
        persistence = SessionPersistence(FileStorage(tmp_path / STATE_FILE_NAME), clock)
        state = SessionState(
            mode=Mode.LONG_BREAK,
            remaining_seconds=321,
            run_state=RunState.PAUSED,
            completed_work_sessions=4,
            session_started_at=clock.now() - 100,
            paused_at=clock.now(),
        )

        assert persistence.save(state) is True
        assert persistence.load() == state

    def test_load_reconciles_running_drift(self, storage, clock):
        persistence = SessionPersistence(storage, clock)
        persistence.save(_running(remaining=1500, started_at=clock.now()))
        clock.advance(90)

        state = persistence.load()

        assert state.remaining_seconds == 1410
        assert state.is_running

    def test_load_clamps_remaining_at_zero(self, storage, clock):
        persistence = SessionPersistence(storage, clock)
        persistence.save(_running(remaining=60, started_at=clock.now()))
        clock.advance(1_000)

        assert persistence.load().remaining_seconds == 0

    def test_clock_going_backwards_does_not_add_time(self, storage, clock):
        persistence = SessionPersistence(storage, clock)
        persistence.save(_running(remaining=60, started_at=clock.now()))
        clock.advance(-500)

        assert persistence.load().remaining_seconds == 60

    def test_paused_record_has_no_drift(self, storage, clock):
        persistence = SessionPersistence(storage, clock)
        storage.data = _record(sessionStartedAt=clock.now() - 5000)

        assert persistence.load().remaining_seconds == 1200

    def test_running_record_without_start_time_has_no_drift(self, storage, clock):
        persistence = SessionPersistence(storage, clock)
        persistence.save(_running(remaining=100, started_at=None))
        clock.advance(50)

        assert persistence.load().remaining_seconds == 100

    @pytest.mark.parametrize("data", [b"", b"   \n", b"{", b"[]", b"null"])
    def test_unusable_content_loads_as_none(self, storage, clock, data, caplog):
        storage.data = data
        with caplog.at_level(logging.WARNING):
            assert SessionPersistence(storage, clock).load() is None
        assert "session state" in caplog.text

    def test_save_failure_returns_false(self, clock, caplog):
        class BrokenStorage:
            path = Path("/broken/state.json")

            def read(self):
                raise PermissionError("denied")

            def write(self, data):
                raise OSError("disk full")

        persistence = SessionPersistence(BrokenStorage(), clock)
        with caplog.at_level(logging.ERROR):
            assert persistence.save(_running()) is False
            assert persistence.load() is None
        assert "failed to save session state" in caplog.text
        assert "failed to read session state" in caplog.text
