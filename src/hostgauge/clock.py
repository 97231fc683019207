"""Time sources."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Supplies the current time in seconds."""

    @abstractmethod
    def now(self) -> float:
        ...


class SystemClock(Clock):
    def now(self) -> float:
        return time.monotonic()


class FakeClock(Clock):
    """Manually driven clock for tests. Time may be set backwards."""

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)

    def now(self) -> float:
        return self._now

    def set(self, value: float) -> None:
        self._now = float(value)

    def advance(self, seconds: float) -> None:
        self._now += float(seconds)
