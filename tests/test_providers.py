"""Tests for the psutil-backed providers."""

from __future__ import annotations

import os
from types import SimpleNamespace

import psutil
import pytest

from hostgauge.errors import ProviderError, UnsupportedError
from hostgauge.providers import PosixProvider, WindowsProvider, default_provider
from hostgauge.providers.psutil_provider import _find_mountpoint
from hostgauge.trackers import SystemTracker


def test_memory_readings(monkeypatch) -> None:
    monkeypatch.setattr(
        "psutil.virtual_memory",
        lambda: SimpleNamespace(available=1024 * 5, total=1024 * 8, free=1),
    )
    provider = PosixProvider()
    assert provider.free_memory() == 1024 * 5
    assert provider.total_memory() == 1024 * 8


def test_disk_readings(monkeypatch) -> None:
    monkeypatch.setattr(
        "psutil.disk_usage", lambda path: SimpleNamespace(total=100, used=40, free=60)
    )
    provider = PosixProvider()
    assert provider.disk_total(".") == 100
    assert provider.disk_used(".") == 40


def test_disk_missing_path_raises_provider_error(tmp_path) -> None:
    with pytest.raises(ProviderError):
        PosixProvider().disk_used(str(tmp_path / "does-not-exist"))


def test_psutil_errors_become_provider_errors(monkeypatch) -> None:
    def denied():
        raise psutil.AccessDenied()

    monkeypatch.setattr("psutil.virtual_memory", denied)
    with pytest.raises(ProviderError):
        PosixProvider().total_memory()


def test_cpu_counter_primed_and_first_reading_blocks(monkeypatch) -> None:
    intervals = []

    def fake_cpu_percent(interval=None):
        intervals.append(interval)
        return 33.0

    monkeypatch.setattr("psutil.cpu_percent", fake_cpu_percent)
    provider = WindowsProvider()
    assert intervals == [None]

    assert provider.cpu_percent() == 33.0
    assert provider.cpu_percent() == 33.0
    first, second = intervals[1:]
    assert first is not None and first > 0
    assert second is None


def test_cpu_priming_failure_is_tolerated(monkeypatch) -> None:
    def denied(interval=None):
        raise psutil.AccessDenied()

    monkeypatch.setattr("psutil.cpu_percent", denied)
    provider = PosixProvider()
    with pytest.raises(ProviderError):
        provider.cpu_percent()


def test_posix_load_average(monkeypatch) -> None:
    monkeypatch.setattr(os, "getloadavg", lambda: (1.0, 2.0, 3.0), raising=False)
    provider = PosixProvider()
    assert provider.supports_load_average
    assert provider.load_average(SystemTracker.LOAD_AVERAGE_1M) == 1.0
    assert provider.load_average(SystemTracker.LOAD_AVERAGE_5M) == 2.0
    assert provider.load_average(SystemTracker.LOAD_AVERAGE_15M) == 3.0


def test_posix_load_average_os_error(monkeypatch) -> None:
    def broken():
        raise OSError("unavailable")

    monkeypatch.setattr(os, "getloadavg", broken, raising=False)
    with pytest.raises(ProviderError):
        PosixProvider().load_average(SystemTracker.LOAD_AVERAGE_1M)


def test_load_average_rejects_other_trackers(monkeypatch) -> None:
    monkeypatch.setattr(os, "getloadavg", lambda: (1.0, 2.0, 3.0), raising=False)
    with pytest.raises(ProviderError):
        PosixProvider().load_average(SystemTracker.CPU)


def test_windows_has_no_load_average() -> None:
    provider = WindowsProvider()
    assert not provider.supports_load_average
    assert provider.supports_cpu
    with pytest.raises(UnsupportedError):
        provider.load_average(SystemTracker.LOAD_AVERAGE_1M)


def test_default_provider_matches_platform() -> None:
    expected = WindowsProvider if os.name == "nt" else PosixProvider
    assert isinstance(default_provider(), expected)


def test_find_mountpoint_prefers_longest_match(tmp_path) -> None:
    target = os.path.realpath(tmp_path)
    parent = os.path.dirname(target)
    mounts = [os.sep, parent, target + "-sibling"]
    assert _find_mountpoint(str(tmp_path), mounts) == parent
    assert _find_mountpoint(str(tmp_path), [target + "-sibling"]) is None


def test_resolve_volume_uses_partitions(monkeypatch, tmp_path) -> None:
    parent = os.path.dirname(os.path.realpath(tmp_path))
    monkeypatch.setattr(
        "psutil.disk_partitions",
        lambda all=False: [
            SimpleNamespace(mountpoint=os.sep, device="rootfs"),
            SimpleNamespace(mountpoint=parent, device="tmpfs"),
        ],
    )
    assert PosixProvider().resolve_volume(str(tmp_path)) == parent


def test_resolve_volume_falls_back_to_placeholder(monkeypatch) -> None:
    def broken(all=False):
        raise OSError("no mounts")

    monkeypatch.setattr("psutil.disk_partitions", broken)
    assert PosixProvider().resolve_volume(".") == "unknown"

    monkeypatch.setattr("psutil.disk_partitions", lambda all=False: [])
    assert PosixProvider().resolve_volume(".") == "unknown"
