"""Wall clock used for drift reconciliation."""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    def now(self) -> int:
        """Return the current wall-clock time in whole epoch seconds."""
        ...


class SystemClock:
    """Clock backed by ``time.time()``."""

    def now(self) -> int:
        return int(time.time())
