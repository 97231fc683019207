"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from hostgauge.errors import ProviderError, UnsupportedError
from hostgauge.providers import SystemProvider
from hostgauge.trackers import SystemTracker


class FakeProvider(SystemProvider):
    """Scripted provider that records every call it receives."""

    def __init__(self, *, load_average: bool = True, cpu: bool = True) -> None:
        self._load_average = load_average
        self._cpu = cpu
        self.calls: list[str] = []
        self.failing: set[str] = set()
        self.values: dict[str, float | int] = {
            "LoadAverage1m": 0.5,
            "LoadAverage5m": 0.75,
            "LoadAverage15m": 1.25,
            "cpu": 12.5,
            "free": 4 * 1024**3,
            "total": 16 * 1024**3,
            "disk_total": 500 * 1024**3,
            "disk_used": 120 * 1024**3,
        }
        self.volume = "/data"

    def _value(self, key: str) -> float | int:
        self.calls.append(key)
        if key in self.failing:
            raise ProviderError(f"{key} failed")
        return self.values[key]

    @property
    def supports_load_average(self) -> bool:
        return self._load_average

    @property
    def supports_cpu(self) -> bool:
        return self._cpu

    def load_average(self, tracker: SystemTracker) -> float:
        if not self._load_average:
            raise UnsupportedError("no load average")
        return self._value(tracker.value)

    def cpu_percent(self) -> float:
        if not self._cpu:
            raise UnsupportedError("no cpu")
        return self._value("cpu")

    def free_memory(self) -> int:
        return self._value("free")

    def total_memory(self) -> int:
        return self._value("total")

    def disk_total(self, path: str) -> int:
        return self._value("disk_total")

    def disk_used(self, path: str) -> int:
        return self._value("disk_used")

    def resolve_volume(self, path: str) -> str:
        self.calls.append("volume")
        return self.volume


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()
