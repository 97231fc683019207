"""Read-through cache gated by the sampling interval."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import TypeVar

from .clock import Clock

T = TypeVar("T")


class ReadingCache:
    """Serve a reading again until *interval* seconds have passed.

    An entry is refreshed once ``now - taken_at >= interval`` or when the
    clock reports a time earlier than the entry. ``interval <= 0`` turns the
    cache into a pass-through. Failed reads are never cached.
    """

    def __init__(self, clock: Clock, interval: float) -> None:
        self.clock = clock
        self.interval = float(interval)
        self._lock = threading.Lock()
        self._entries: dict[str, tuple[float, object]] = {}
        self._key_locks: dict[str, threading.Lock] = {}

    def get(self, key: str, read: Callable[[], T]) -> T:
        if self.interval <= 0:
            return read()

        with self._lock:
            key_lock = self._key_locks.setdefault(key, threading.Lock())

        # Concurrent misses on one key wait for a single read.
        with key_lock:
            now = self.clock.now()
            with self._lock:
                entry = self._entries.get(key)
            if entry is not None:
                taken_at, value = entry
                if 0 <= now - taken_at < self.interval:
                    return value  # type: ignore[return-value]

            value = read()
            with self._lock:
                self._entries[key] = (now, value)
            return value

    def invalidate(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._entries.clear()
            else:
                self._entries.pop(key, None)
