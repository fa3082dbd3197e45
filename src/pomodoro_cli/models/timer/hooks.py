"""Lifecycle hooks and the boundary that keeps their failures out of the timer."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from .state import Mode

logger = logging.getLogger(__name__)


class SessionHooks:
    """Lifecycle callbacks invoked by the state machine.

    Every method is a no-op; subclasses override the events they care about.
    """

    def on_start(self, mode: Mode) -> None:
        """Called whenever a phase begins, including auto-chained phases."""

    def on_work_complete(self, next_mode: Mode) -> None:
        """Called when a work phase finishes, before the break begins."""

    def on_break_complete(self) -> None:
        """Called when a short or long break finishes."""


class CallbackHooks(SessionHooks):
    """Adapt optional plain callables to the ``SessionHooks`` interface."""

    def __init__(
        self,
        on_start: Callable[[Mode], Any] | None = None,
        on_work_complete: Callable[[Mode], Any] | None = None,
        on_break_complete: Callable[[], Any] | None = None,
    ):
        self._on_start = on_start
        self._on_work_complete = on_work_complete
        self._on_break_complete = on_break_complete

    def on_start(self, mode: Mode) -> None:
        if self._on_start:
            self._on_start(mode)

    def on_work_complete(self, next_mode: Mode) -> None:
        if self._on_work_complete:
            self._on_work_complete(next_mode)

    def on_break_complete(self) -> None:
        if self._on_break_complete:
            self._on_break_complete()


@dataclass(frozen=True)
class HookResult:
    """Outcome of a single hook invocation."""

    name: str
    ok: bool
    error: Exception | None = None


def invoke_hook(name: str, func: Callable[..., Any], *args: Any) -> HookResult:
    """Call a collaborator callback, capturing and logging any failure."""
    try:
        func(*args)
    except Exception as e:
        logger.exception("hook %s failed with args=%r: %s", name, args, e)
        return HookResult(name=name, ok=False, error=e)
    return HookResult(name=name, ok=True)
