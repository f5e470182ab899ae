"""Timestamp sources for request stamping."""

import time
from typing import Protocol


class Clock(Protocol):
    """Monotonically non-decreasing timestamp source (Unix seconds)."""

    def now(self) -> int:
        ...


class SystemClock:
    """Wall-clock seconds that never step backwards within a process."""

    def __init__(self):
        self._last = 0

    def now(self) -> int:
        current = int(time.time())
        if current < self._last:
            return self._last
        self._last = current
        return current


class FixedClock:
    """Clock pinned to a value; ``advance`` moves it forward."""

    def __init__(self, timestamp: int = 0):
        self.timestamp = timestamp

    def now(self) -> int:
        return self.timestamp

    def advance(self, seconds: int = 1) -> int:
        if seconds < 0:
            raise ValueError("FixedClock cannot move backwards")
        self.timestamp += seconds
        return self.timestamp
