"""Tests for the application logger utility."""

from __future__ import annotations

import logging
import logging.handlers
from unittest.mock import patch

import pomodoro_cli.utils.logger as logger_mod
from pomodoro_cli.utils.logger import get_logger


def test_get_logger_creates_log_file(tmp_path):
    """Logger creates the log file inside user_log_dir."""
    with patch("pomodoro_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        logger = get_logger()

    assert (tmp_path / "pomodoro.log").exists()
    assert isinstance(logger, logging.Logger)
    assert logger.name == "pomodoro_cli"


def test_get_logger_returns_singleton():
    """Repeated calls return the same logger instance."""
    assert get_logger() is get_logger()


def test_module_loggers_share_the_file(tmp_path):
    """Messages from module loggers land in the application log file."""
    with patch("pomodoro_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        logger = get_logger()

    logging.getLogger("pomodoro_cli.models.timer.machine").info("hello from test")
    for handler in logger.handlers:
        handler.flush()

    content = (tmp_path / "pomodoro.log").read_text()
    assert "hello from test" in content
    assert "[pomodoro_cli.models.timer.machine]" in content


def test_get_logger_creates_parent_dirs(tmp_path):
    """Logger creates nested directories if they do not exist."""
    nested = tmp_path / "a" / "b" / "c"
    with patch("pomodoro_cli.utils.logger.user_log_dir", return_value=str(nested)):
        get_logger()

    assert nested.is_dir()


def test_handler_rotates(tmp_path):
    with patch("pomodoro_cli.utils.logger.user_log_dir", return_value=str(tmp_path)):
        logger = get_logger()

    handler = logger.handlers[0]
    assert isinstance(handler, logging.handlers.RotatingFileHandler)
    assert handler.maxBytes == logger_mod._MAX_BYTES
    assert handler.backupCount == logger_mod._BACKUP_COUNT
