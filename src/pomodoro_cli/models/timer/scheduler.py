"""Repeating one-second tick source bound to an asyncio event loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from .exceptions import SchedulerError

logger = logging.getLogger(__name__)

TICK_INTERVAL_SECONDS = 1.0


class TickScheduler:
    """Cancellable fixed-cadence callback.

    Fire times are computed from the arm time (``armed_at + n * interval``)
    rather than from the previous fire, so a slow callback does not push the
    cadence back. ``disarm`` cancels the pending ``TimerHandle``; a cancelled
    handle never runs, so no tick is delivered after it returns.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        *,
        interval: float = TICK_INTERVAL_SECONDS,
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        if interval <= 0:
            raise ValueError("interval must be greater than zero")
        self._callback = callback
        self._interval = interval
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._active_loop: asyncio.AbstractEventLoop | None = None
        self._next_fire_at = 0.0

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def arm(self) -> None:
        """Start firing the callback every interval.

        Raises:
            SchedulerError: If there is no usable event loop.
        """
        self.disarm()
        try:
            loop = self._loop or asyncio.get_running_loop()
        except RuntimeError as e:
            raise SchedulerError("No running event loop to schedule ticks on") from e
        if loop.is_closed():
            raise SchedulerError("Event loop is closed")

        self._active_loop = loop
        self._next_fire_at = loop.time() + self._interval
        try:
            self._handle = loop.call_at(self._next_fire_at, self._fire)
        except RuntimeError as e:
            raise SchedulerError(f"Failed to schedule tick: {e}") from e
        logger.debug("tick scheduler armed (interval=%ss)", self._interval)

    def disarm(self) -> None:
        """Cancel the pending tick. Safe to call when already disarmed."""
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None
        logger.debug("tick scheduler disarmed")

    def _fire(self) -> None:
        # Schedule the next fire first so the callback may disarm it.
        self._next_fire_at += self._interval
        self._handle = self._active_loop.call_at(self._next_fire_at, self._fire)
        try:
            self._callback()
        except Exception:
            logger.exception("tick callback failed")
