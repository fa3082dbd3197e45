"""Non-blocking keyboard controls for the live timer display."""

from __future__ import annotations

import select
import sys
from typing import TextIO

try:
    import termios
    import tty
except ImportError:  # Windows
    termios = None
    tty = None

KEY_BINDINGS = {
    "w": "start",
    "p": "pause",
    "r": "resume",
    "s": "skip",
    "x": "reset",
    "q": "quit",
}


def action_for_key(key: str | None) -> str | None:
    """Map a keypress to a timer action name."""
    if not key:
        return None
    return KEY_BINDINGS.get(key.lower())


class KeyboardHandler:
    """Reads single keypresses from a terminal in cbreak mode."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream or sys.stdin
        self.old_settings = None
        self._setup()

    def _setup(self) -> None:
        """Setup terminal for non-blocking input."""
        if termios is None or not self.stream.isatty():
            return
        fd = self.stream.fileno()
        self.old_settings = termios.tcgetattr(fd)
        tty.setcbreak(fd)

    def get_key(self) -> str | None:
        """Get a single keypress without blocking, or None if none is waiting."""
        if not self.stream.isatty():
            return None
        ready, _, _ = select.select([self.stream], [], [], 0)
        if ready:
            return self.stream.read(1).lower()
        return None

    def stop(self) -> None:
        """Restore terminal settings."""
        if self.old_settings is not None:
            termios.tcsetattr(
                self.stream.fileno(), termios.TCSADRAIN, self.old_settings
            )
            self.old_settings = None
