"""Pomodoro session state machine."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

from .clock import Clock, SystemClock
from .hooks import SessionHooks, invoke_hook
from .persistence import SessionPersistence
from .scheduler import TickScheduler
from .state import Mode, RunState, SessionState, StatusSnapshot, TransitionEvent

if TYPE_CHECKING:
    from pomodoro_cli.models.config_models import TimerConfig

logger = logging.getLogger(__name__)

TransitionListener = Callable[[TransitionEvent], None]


class Ticker(Protocol):
    """What the state machine needs from a tick source."""

    @property
    def armed(self) -> bool: ...

    def arm(self) -> None: ...

    def disarm(self) -> None: ...


class SessionStateMachine:
    """Single source of truth for timer semantics.

    Every mutating operation validates its input and arms the tick source
    before touching ``SessionState``, so a failure leaves the state as it was.
    Mutations that change the run state, mode or counter are written through
    to persistence immediately; plain ticks are not.
    """

    def __init__(
        self,
        config: TimerConfig | None = None,
        *,
        persistence: SessionPersistence | None = None,
        hooks: SessionHooks | None = None,
        clock: Clock | None = None,
        scheduler_factory: Callable[[Callable[[], None]], Ticker] = TickScheduler,
        state: SessionState | None = None,
    ):
        if config is None:
            from pomodoro_cli.models.config_models import TimerConfig

            config = TimerConfig()
        self.config = config
        self._persistence = persistence
        self._hooks = hooks or SessionHooks()
        self._clock = clock or SystemClock()
        self._scheduler = scheduler_factory(self.tick)
        self._state = state or SessionState()
        self._listeners: list[TransitionListener] = []

    # ------------------------------------------------------------------
    # Read-only surface
    # ------------------------------------------------------------------

    @property
    def run_state(self) -> RunState:
        return self._state.run_state

    def status(self) -> StatusSnapshot:
        """Return an immutable snapshot of the current state."""
        return StatusSnapshot.from_state(self._state)

    status_snapshot = status

    def subscribe(self, listener: TransitionListener) -> Callable[[], None]:
        """Register a transition listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def start(self, mode: Mode | str | None = None) -> StatusSnapshot:
        """Start a phase (work by default). No-op while already running."""
        if self._state.is_running:
            logger.debug("start ignored: timer already running")
            return self.status()

        next_mode = Mode.parse(mode)
        self._scheduler.arm()
        self._begin_phase(next_mode)
        self._persist()
        return self.status()

    def pause(self) -> StatusSnapshot:
        if not self._state.is_running:
            return self.status()

        self._scheduler.disarm()
        self._state.run_state = RunState.PAUSED
        self._state.paused_at = self._clock.now()
        logger.info(
            "paused: mode=%s remaining=%ss",
            self._state.mode.value,
            self._state.remaining_seconds,
        )
        self._persist()
        return self.status()

    def resume(self) -> StatusSnapshot:
        if not self._state.is_paused:
            return self.status()

        self._scheduler.arm()
        self._state.run_state = RunState.RUNNING
        self._state.paused_at = None
        # The persisted remaining time is measured from this moment.
        self._state.session_started_at = self._clock.now()
        logger.info(
            "resumed: mode=%s remaining=%ss",
            self._state.mode.value,
            self._state.remaining_seconds,
        )
        self._persist()
        return self.status()

    def reset(self, clear_completed: bool = False) -> StatusSnapshot:
        """Return to idle. The completed-session count survives unless cleared."""
        self._scheduler.disarm()
        self._state.mode = Mode.IDLE
        self._state.remaining_seconds = 0
        self._state.run_state = RunState.IDLE
        self._state.session_started_at = None
        self._state.paused_at = None
        if clear_completed:
            self._state.completed_work_sessions = 0
        logger.info(
            "reset: completed_work_sessions=%s", self._state.completed_work_sessions
        )
        self._persist()
        return self.status()

    def stop(self) -> StatusSnapshot:
        """Stop the timer; same as ``reset()`` keeping the counter."""
        return self.reset()

    def skip(self) -> StatusSnapshot:
        """Complete the current phase now, whatever time remains."""
        logger.info(
            "skip: mode=%s remaining=%ss",
            self._state.mode.value,
            self._state.remaining_seconds,
        )
        self.evaluate_transition()
        return self.status()

    def tick(self) -> None:
        """Advance the countdown by one second; called by the scheduler."""
        if not self._state.is_running:
            return
        if self._state.remaining_seconds > 0:
            self._state.remaining_seconds -= 1
        if self._state.remaining_seconds == 0:
            self.evaluate_transition()

    def evaluate_transition(self) -> TransitionEvent | None:
        """Finish the current phase and auto-chain into the next one.

        Returns ``None`` without side effects while idle. A paused phase is
        re-armed first, so the next phase always starts with a live tick source.

        Raises:
            SchedulerError: If a paused phase cannot be re-armed; the state is
                then left untouched.
        """
        if self._state.is_idle:
            logger.debug("transition ignored: timer idle")
            return None
        if self._state.is_paused:
            self._scheduler.arm()

        completed = self._state.mode
        if completed is Mode.WORK:
            self._state.completed_work_sessions += 1
            count = self._state.completed_work_sessions
            if count % self.config.sessions_before_long_break == 0:
                next_mode = Mode.LONG_BREAK
            else:
                next_mode = Mode.SHORT_BREAK
            invoke_hook("on_work_complete", self._hooks.on_work_complete, next_mode)
        else:
            next_mode = Mode.WORK
            invoke_hook("on_break_complete", self._hooks.on_break_complete)

        self._begin_phase(next_mode)
        self._persist()

        event = TransitionEvent(
            completed_mode=completed,
            next_mode=next_mode,
            completed_work_sessions=self._state.completed_work_sessions,
        )
        logger.info(
            "transition: %s -> %s (completed_work_sessions=%s)",
            completed.value,
            next_mode.value,
            event.completed_work_sessions,
        )
        for listener in list(self._listeners):
            invoke_hook("transition_listener", listener, event)
        return event

    # ------------------------------------------------------------------
    # Process lifecycle
    # ------------------------------------------------------------------

    def restore(self) -> StatusSnapshot:
        """Adopt the persisted state, if any, reconciling elapsed time.

        Raises:
            SchedulerError: If a running state cannot be re-armed; the
                in-memory state is then left untouched.
        """
        if self._persistence is None:
            return self.status()

        loaded = self._persistence.load()
        if loaded is None:
            logger.info("no persisted session state, starting idle")
            return self.status()

        if loaded.is_running:
            self._scheduler.arm()
        else:
            self._scheduler.disarm()
        self._state = loaded
        logger.info(
            "restored: mode=%s run_state=%s remaining=%ss",
            loaded.mode.value,
            loaded.run_state.value,
            loaded.remaining_seconds,
        )

        if loaded.is_running and loaded.remaining_seconds == 0:
            self.evaluate_transition()
        return self.status()

    def close(self) -> None:
        """Release the tick source without changing or persisting state."""
        self._scheduler.disarm()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _begin_phase(self, mode: Mode) -> None:
        self._state.mode = mode
        self._state.remaining_seconds = self.config.duration_for(mode)
        self._state.run_state = RunState.RUNNING
        self._state.session_started_at = self._clock.now()
        self._state.paused_at = None
        logger.info(
            "started: mode=%s duration=%ss",
            mode.value,
            self._state.remaining_seconds,
        )
        invoke_hook("on_start", self._hooks.on_start, mode)

    def _persist(self) -> None:
        if self._persistence is not None:
            self._persistence.save(self._state)
