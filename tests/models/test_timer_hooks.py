"""Tests for lifecycle hooks and failure isolation."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

from pomodoro_cli.models.timer.hooks import (
    CallbackHooks,
    HookResult,
    SessionHooks,
    invoke_hook,
)
from pomodoro_cli.models.timer.state import Mode


def test_base_hooks_are_noops():
    hooks = SessionHooks()
    assert hooks.on_start(Mode.WORK) is None
    assert hooks.on_work_complete(Mode.SHORT_BREAK) is None
    assert hooks.on_break_complete() is None


def test_callback_hooks_forward_arguments():
    on_start = MagicMock()
    on_work_complete = MagicMock()
    on_break_complete = MagicMock()
    hooks = CallbackHooks(on_start, on_work_complete, on_break_complete)

    hooks.on_start(Mode.WORK)
    hooks.on_work_complete(Mode.LONG_BREAK)
    hooks.on_break_complete()

    on_start.assert_called_once_with(Mode.WORK)
    on_work_complete.assert_called_once_with(Mode.LONG_BREAK)
    on_break_complete.assert_called_once_with()


def test_callback_hooks_skip_missing_callbacks():
    hooks = CallbackHooks()
    hooks.on_start(Mode.WORK)
    hooks.on_break_complete()


def test_invoke_hook_success():
    func = MagicMock()
    result = invoke_hook("on_start", func, Mode.WORK)
    assert result == HookResult(name="on_start", ok=True)
    func.assert_called_once_with(Mode.WORK)


def test_invoke_hook_captures_failure(caplog):
    error = RuntimeError("sound device busy")

    with caplog.at_level(logging.ERROR):
        result = invoke_hook("on_break_complete", MagicMock(side_effect=error))

    assert not result.ok
    assert result.error is error
    assert "hook on_break_complete failed" in caplog.text
    assert "sound device busy" in caplog.text
