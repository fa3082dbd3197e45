"""Decorators for command functions."""

import functools
import time
import traceback
from collections.abc import Callable

import typer

from pomodoro_cli.models.timer.exceptions import (
    ConfigValidationError,
    InvalidModeError,
    SchedulerError,
)
from pomodoro_cli.utils.exit_codes import (
    ERROR_GENERAL,
    ERROR_INVALID_ARGS,
)
from pomodoro_cli.utils.logger import get_logger
from pomodoro_cli.utils.ui.formatters import format_error


class AppError(Exception):
    """Custom application error with exit code."""

    def __init__(self, message: str, exit_code: int = ERROR_GENERAL):
        super().__init__(message)
        self.exit_code = exit_code


def _fail(logger, cmd: str, start: float, message: str, exit_code: int, error: Exception):
    elapsed = time.monotonic() - start
    logger.error("command failed: %s (%.3fs) - %s", cmd, elapsed, str(error))
    format_error(message)
    raise typer.Exit(code=exit_code) from error


def command_wrapper(func: Callable):
    """Wrap a command with timing logs and exit-code mapping for known errors."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = get_logger()
        cmd = func.__name__
        start = time.monotonic()
        logger.info("command started: %s", cmd)
        try:
            result = func(*args, **kwargs)
            elapsed = time.monotonic() - start
            logger.info("command completed: %s (%.3fs)", cmd, elapsed)
            return result

        except AppError as e:
            _fail(logger, cmd, start, str(e), e.exit_code, e)

        except ConfigValidationError as e:
            message = "Invalid configuration:\n  " + "\n  ".join(e.errors)
            _fail(logger, cmd, start, message, ERROR_INVALID_ARGS, e)

        except InvalidModeError as e:
            _fail(logger, cmd, start, str(e), ERROR_INVALID_ARGS, e)

        except SchedulerError as e:
            _fail(logger, cmd, start, f"Could not start the timer: {e}", ERROR_GENERAL, e)

        except typer.Exit:
            # Re-raise Typer's own exits (like --help or explicit Exit(0))
            raise

        except Exception as e:
            elapsed = time.monotonic() - start
            logger.error(
                "command failed: %s (%.3fs) - %s\n%s",
                cmd,
                elapsed,
                str(e),
                traceback.format_exc(),
            )
            # Generic fallback for unexpected crashes
            format_error(f"An unexpected error occurred: {str(e)}")
            raise typer.Exit(code=ERROR_GENERAL) from e

    return wrapper
