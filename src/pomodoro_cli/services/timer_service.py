"""Wiring between configuration, storage and the timer state machine."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path
from typing import TypeVar

from pomodoro_cli.models.config_models import AppConfig
from pomodoro_cli.models.timer.clock import Clock
from pomodoro_cli.models.timer.hooks import SessionHooks
from pomodoro_cli.models.timer.machine import SessionStateMachine
from pomodoro_cli.models.timer.persistence import FileStorage, SessionPersistence
from pomodoro_cli.models.timer.state import Mode

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoggingHooks(SessionHooks):
    """Default hooks for the CLI: record lifecycle events in the app log."""

    def on_start(self, mode: Mode) -> None:
        logger.info("hook on_start: %s", mode.value)

    def on_work_complete(self, next_mode: Mode) -> None:
        logger.info("hook on_work_complete: next=%s", next_mode.value)

    def on_break_complete(self) -> None:
        logger.info("hook on_break_complete")


def build_state_machine(
    config: AppConfig,
    state_file: Path,
    *,
    hooks: SessionHooks | None = None,
    clock: Clock | None = None,
) -> SessionStateMachine:
    """Create a state machine persisting to ``state_file``."""
    persistence = SessionPersistence(FileStorage(state_file), clock=clock)
    return SessionStateMachine(
        config.timer,
        persistence=persistence,
        hooks=hooks or LoggingHooks(),
        clock=clock,
    )


def run_timer_action(
    machine_factory: Callable[[], SessionStateMachine],
    action: Callable[[SessionStateMachine], T],
) -> T:
    """Run one operation against the persisted timer and release it.

    The machine is restored (reconciling drift), the action applied, and the
    tick source released without touching the stored state, all inside a
    short-lived event loop so that arming the scheduler has a loop to bind to.
    """

    async def _run() -> T:
        machine = machine_factory()
        try:
            machine.restore()
            return action(machine)
        finally:
            machine.close()

    return asyncio.run(_run())
