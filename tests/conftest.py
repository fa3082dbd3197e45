"""Shared test fixtures and configuration.

Provides infrastructure to isolate tests from real filesystem state and from
wall-clock time.
"""

from __future__ import annotations

import logging
from unittest.mock import patch

import pytest

from pomodoro_cli.models.config_models import TimerConfig
from pomodoro_cli.models.timer.exceptions import SchedulerError


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, now: int = 1_700_000_000):
        self.current = now

    def now(self) -> int:
        return self.current

    def advance(self, seconds: int) -> None:
        self.current += seconds


class FakeScheduler:
    """Tick source that records arm/disarm calls instead of scheduling."""

    def __init__(self, callback, fail: bool = False):
        self.callback = callback
        self.fail = fail
        self.armed = False
        self.arm_calls = 0
        self.disarm_calls = 0

    def arm(self) -> None:
        self.arm_calls += 1
        if self.fail:
            raise SchedulerError("no event loop")
        self.armed = True

    def disarm(self) -> None:
        self.disarm_calls += 1
        self.armed = False

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            if not self.armed:
                return
            self.callback()


class MemoryStorage:
    """In-memory stand-in for ``FileStorage``."""

    def __init__(self, data: bytes | None = None):
        self.data = data
        self.path = "<memory>"
        self.writes = 0

    def read(self) -> bytes | None:
        return self.data

    def write(self, data: bytes) -> None:
        self.writes += 1
        self.data = data


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def isolate_logger(tmp_path):
    """Keep the application log file out of the real user log dir.

    The application logger stops propagation once configured; restore it so
    caplog keeps seeing records from later tests.
    """
    import pomodoro_cli.utils.logger as logger_mod

    logger_mod._logger = None
    with patch("pomodoro_cli.utils.logger.user_log_dir", return_value=str(tmp_path / "logs")):
        yield

    app_logger = logging.getLogger("pomodoro_cli")
    for handler in list(app_logger.handlers):
        handler.close()
        app_logger.removeHandler(handler)
    app_logger.propagate = True
    logger_mod._logger = None


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def timer_config():
    return TimerConfig()


@pytest.fixture()
def schedulers():
    """Collects every FakeScheduler handed out by ``scheduler_factory``."""
    return []


@pytest.fixture()
def scheduler_factory(schedulers):
    def factory(callback):
        scheduler = FakeScheduler(callback)
        schedulers.append(scheduler)
        return scheduler

    return factory


@pytest.fixture()
def tmp_config(tmp_path):
    """Provide a real ConfigService backed by a temporary directory.

    Patches platform dirs so config/data files land in *tmp_path* only.
    Also clears the lru_cache so each test gets a fresh service instance.
    """
    from pomodoro_cli.services.config_service import get_config_service

    config_dir = str(tmp_path / "config")
    data_dir = str(tmp_path / "data")
    get_config_service.cache_clear()
    with patch("pomodoro_cli.services.config_service.user_config_dir", return_value=config_dir):
        with patch("pomodoro_cli.services.config_service.user_data_dir", return_value=data_dir):
            yield get_config_service()
    get_config_service.cache_clear()


@pytest.fixture()
def storage():
    return MemoryStorage()


@pytest.fixture()
def make_machine(timer_config, clock, scheduler_factory, storage):
    """Build a state machine wired to fakes; keyword overrides pass through."""
    from pomodoro_cli.models.timer.machine import SessionStateMachine
    from pomodoro_cli.models.timer.persistence import SessionPersistence

    def _make(**kwargs):
        kwargs.setdefault("persistence", SessionPersistence(storage, clock))
        kwargs.setdefault("clock", clock)
        kwargs.setdefault("scheduler_factory", scheduler_factory)
        return SessionStateMachine(kwargs.pop("config", timer_config), **kwargs)

    return _make


@pytest.fixture()
def failing_scheduler_factory():
    def factory(callback):
        return FakeScheduler(callback, fail=True)

    return factory
