"""psutil-backed providers for POSIX and Windows hosts."""

from __future__ import annotations

import contextlib
import logging
import os
import threading
from collections.abc import Iterator

import psutil

from ..errors import ProviderError, UnsupportedError
from ..trackers import SystemTracker
from .base import VOLUME_PLACEHOLDER, SystemProvider

log = logging.getLogger(__name__)

# The first cpu_percent() window after priming can be a few microseconds long
# and reads as 0.0 or 100.0, so the first real reading blocks this long.
_FIRST_CPU_INTERVAL = 0.05

_LOAD_AVERAGE_INDEX = {
    SystemTracker.LOAD_AVERAGE_1M: 0,
    SystemTracker.LOAD_AVERAGE_5M: 1,
    SystemTracker.LOAD_AVERAGE_15M: 2,
}


@contextlib.contextmanager
def _os_call(what: str) -> Iterator[None]:
    """Turn OS and psutil failures into ``ProviderError``."""
    try:
        yield
    except (OSError, psutil.Error) as e:
        raise ProviderError(f"{what} failed: {e}") from e


def _find_mountpoint(path: str, mountpoints: list[str]) -> str | None:
    """Return the longest mountpoint that contains *path*."""
    target = os.path.normcase(os.path.realpath(path))
    best: str | None = None
    for mountpoint in mountpoints:
        mp = os.path.normcase(mountpoint)
        prefix = mp.rstrip(os.sep) + os.sep
        if target == mp or target.startswith(prefix):
            if best is None or len(mp) > len(os.path.normcase(best)):
                best = mountpoint
    return best


class PsutilProvider(SystemProvider):
    """Readings shared by every platform psutil supports."""

    def __init__(self) -> None:
        self._cpu_lock = threading.Lock()
        self._cpu_warm = False
        # Prime psutil's system-wide CPU baseline; the result is meaningless.
        try:
            psutil.cpu_percent(interval=None)
        except (OSError, psutil.Error):
            log.debug("cpu_prime_failed", exc_info=True)

    @property
    def supports_load_average(self) -> bool:
        return False

    @property
    def supports_cpu(self) -> bool:
        return True

    def load_average(self, tracker: SystemTracker) -> float:
        raise UnsupportedError("Load average is not available on this platform")

    def cpu_percent(self) -> float:
        # After the first reading, interval=None compares against the previous
        # call and never blocks.
        with self._cpu_lock:
            first = not self._cpu_warm
            self._cpu_warm = True
        interval = _FIRST_CPU_INTERVAL if first else None
        with _os_call("cpu_percent"):
            return float(psutil.cpu_percent(interval=interval))

    def free_memory(self) -> int:
        with _os_call("virtual_memory"):
            return int(psutil.virtual_memory().available)

    def total_memory(self) -> int:
        with _os_call("virtual_memory"):
            return int(psutil.virtual_memory().total)

    def disk_total(self, path: str) -> int:
        with _os_call(f"disk_usage({path})"):
            return int(psutil.disk_usage(path).total)

    def disk_used(self, path: str) -> int:
        with _os_call(f"disk_usage({path})"):
            return int(psutil.disk_usage(path).used)

    def resolve_volume(self, path: str) -> str:
        try:
            partitions = psutil.disk_partitions(all=True)
        except (OSError, psutil.Error):
            log.debug("disk_partitions_failed", extra={"path": path}, exc_info=True)
            return VOLUME_PLACEHOLDER
        mountpoint = _find_mountpoint(path, [p.mountpoint for p in partitions if p.mountpoint])
        return mountpoint or VOLUME_PLACEHOLDER


class PosixProvider(PsutilProvider):
    """Linux, macOS and the BSDs: load average comes from ``getloadavg``."""

    @property
    def supports_load_average(self) -> bool:
        return hasattr(os, "getloadavg")

    def load_average(self, tracker: SystemTracker) -> float:
        try:
            index = _LOAD_AVERAGE_INDEX[tracker]
        except KeyError:
            raise ProviderError(f"{tracker.value} is not a load-average tracker") from None
        try:
            return float(os.getloadavg()[index])
        except AttributeError as e:
            raise UnsupportedError("os.getloadavg is not available") from e
        except OSError as e:
            raise ProviderError(f"getloadavg failed: {e}") from e


class WindowsProvider(PsutilProvider):
    """Windows has no load average; CPU utilization stands in for it."""
