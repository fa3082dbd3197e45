"""Services module for Pomodoro CLI - wiring and configuration layer."""

from .config_service import ConfigService, get_config_service
from .timer_service import LoggingHooks, build_state_machine, run_timer_action

__all__ = [
    "ConfigService",
    "get_config_service",
    "LoggingHooks",
    "build_state_machine",
    "run_timer_action",
]
