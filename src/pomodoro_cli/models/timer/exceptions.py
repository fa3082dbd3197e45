"""Custom exceptions for the Pomodoro timer core."""


class TimerError(Exception):
    """Base exception for all timer errors."""


class InvalidModeError(TimerError, ValueError):
    """Raised when a session mode argument is not one of the startable modes."""

    def __init__(self, value: object):
        super().__init__(
            f"Invalid mode {value!r}. Must be: work, short_break, or long_break"
        )
        self.value = value


class ConfigValidationError(TimerError, ValueError):
    """Raised when configuration input fails validation."""

    def __init__(self, errors: list[str]):
        super().__init__("Invalid configuration: " + "; ".join(errors))
        self.errors = errors


class SchedulerError(TimerError):
    """Raised when the tick source cannot be armed."""
