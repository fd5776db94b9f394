"""Clock collaborators supplying the current logical time.

Times are plain integers in clock units (seconds for SystemClock). The
registry samples ``now()`` once per operation.
"""

from __future__ import annotations

import threading
import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    def now(self) -> int:
        """Return the current logical time."""
        ...


class SystemClock:
    """Wall-clock time as whole seconds since the Unix epoch."""

    def now(self) -> int:
        return int(time.time())


class ManualClock:
    """Clock that only moves when told to. Used by tests and simulations.

    Usage:
        clock = ManualClock(1_700_000_000)
        clock.advance(86400)
    """

    def __init__(self, start: int = 0) -> None:
        self._now = start
        self._lock = threading.Lock()

    def now(self) -> int:
        with self._lock:
            return self._now

    def set(self, value: int) -> None:
        with self._lock:
            self._now = value

    def advance(self, delta: int) -> int:
        if delta < 0:
            raise ValueError("ManualClock cannot move backwards")
        with self._lock:
            self._now += delta
            return self._now
