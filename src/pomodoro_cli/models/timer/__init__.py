"""Pomodoro timer core: state machine, persistence and tick scheduling."""

from .clock import Clock, SystemClock
from .exceptions import (
    ConfigValidationError,
    InvalidModeError,
    SchedulerError,
    TimerError,
)
from .hooks import CallbackHooks, HookResult, SessionHooks, invoke_hook
from .machine import SessionStateMachine
from .persistence import FileStorage, SessionPersistence
from .scheduler import TickScheduler
from .state import (
    STARTABLE_MODES,
    Mode,
    RunState,
    SessionState,
    StatusSnapshot,
    TransitionEvent,
)

__all__ = [
    "CallbackHooks",
    "Clock",
    "ConfigValidationError",
    "FileStorage",
    "HookResult",
    "InvalidModeError",
    "Mode",
    "RunState",
    "STARTABLE_MODES",
    "SchedulerError",
    "SessionHooks",
    "SessionPersistence",
    "SessionState",
    "SessionStateMachine",
    "StatusSnapshot",
    "SystemClock",
    "TickScheduler",
    "TimerError",
    "TransitionEvent",
    "invoke_hook",
]
