"""Tracker enumeration, tag descriptors and the enablement map."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from enum import Enum

from .errors import ConfigError


class SystemTracker(Enum):
    """One independently measurable host quantity."""

    LOAD_AVERAGE_1M = "LoadAverage1m"
    LOAD_AVERAGE_5M = "LoadAverage5m"
    LOAD_AVERAGE_15M = "LoadAverage15m"
    CPU = "Cpu"
    FREE_MEM = "FreeMem"
    TOTAL_MEM = "TotalMem"
    DRIVE_TOTAL_BYTES = "DriveTotalBytes"
    DRIVE_USED_BYTES = "DriveUsedBytes"

    @classmethod
    def parse(cls, text: str) -> SystemTracker:
        """Look up a tracker by canonical value or member name, ignoring case."""
        wanted = text.strip().lower()
        for tracker in cls:
            if wanted in (tracker.value.lower(), tracker.name.lower()):
                return tracker
        raise ConfigError(f"Unknown tracker: {text!r}")


LOAD_AVERAGE_TRACKERS = frozenset(
    {
        SystemTracker.LOAD_AVERAGE_1M,
        SystemTracker.LOAD_AVERAGE_5M,
        SystemTracker.LOAD_AVERAGE_15M,
    }
)
CPU_TRACKERS = frozenset({SystemTracker.CPU})
MEMORY_TRACKERS = frozenset({SystemTracker.FREE_MEM, SystemTracker.TOTAL_MEM})
DISK_TRACKERS = frozenset({SystemTracker.DRIVE_TOTAL_BYTES, SystemTracker.DRIVE_USED_BYTES})


class TagDescriptor:
    """Ordered ``(tracker, tag value)`` pairs for one metric group.

    Iteration order is the order measurements are emitted in.
    """

    __slots__ = ("_pairs",)

    def __init__(
        self,
        pairs: Mapping[SystemTracker, str] | Iterable[tuple[SystemTracker, str]] = (),
    ) -> None:
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        seen: set[SystemTracker] = set()
        built: list[tuple[SystemTracker, str]] = []
        for tracker, tag_value in items:
            if not isinstance(tracker, SystemTracker):
                tracker = SystemTracker.parse(str(tracker))
            if tracker in seen:
                raise ConfigError(f"Tracker {tracker.value} appears twice in tag descriptor")
            seen.add(tracker)
            built.append((tracker, str(tag_value)))
        self._pairs: tuple[tuple[SystemTracker, str], ...] = tuple(built)

    def __iter__(self) -> Iterator[tuple[SystemTracker, str]]:
        return iter(self._pairs)

    def __len__(self) -> int:
        return len(self._pairs)

    def __repr__(self) -> str:
        inner = ", ".join(f"{t.value}={v!r}" for t, v in self._pairs)
        return f"TagDescriptor({inner})"

    @property
    def trackers(self) -> tuple[SystemTracker, ...]:
        return tuple(t for t, _ in self._pairs)

    def restricted_to(self, allowed: frozenset[SystemTracker]) -> tuple[TagDescriptor, list[SystemTracker]]:
        """Split into pairs whose tracker is in *allowed* and the rejected trackers."""
        kept = [(t, v) for t, v in self._pairs if t in allowed]
        rejected = [t for t, _ in self._pairs if t not in allowed]
        return TagDescriptor(kept), rejected


class EnablementMap:
    """Which trackers are switched on.

    Trackers missing from the map count as disabled.
    """

    __slots__ = ("_enabled",)

    def __init__(self, config: Mapping[SystemTracker, bool] | None = None) -> None:
        self._enabled: dict[SystemTracker, bool] = {}
        for tracker, flag in (config or {}).items():
            if not isinstance(tracker, SystemTracker):
                tracker = SystemTracker.parse(str(tracker))
            self._enabled[tracker] = bool(flag)

    @classmethod
    def all_enabled(cls) -> EnablementMap:
        return cls({t: True for t in SystemTracker})

    @classmethod
    def all_disabled(cls) -> EnablementMap:
        return cls({t: False for t in SystemTracker})

    def is_enabled(self, tracker: SystemTracker) -> bool:
        return self._enabled.get(tracker, False)

    def any_enabled(self, trackers: Iterable[SystemTracker]) -> bool:
        return any(self.is_enabled(t) for t in trackers)

    def as_dict(self) -> dict[SystemTracker, bool]:
        return {t: self.is_enabled(t) for t in SystemTracker}

    def __repr__(self) -> str:
        on = [t.value for t in SystemTracker if self.is_enabled(t)]
        return f"EnablementMap(enabled={on})"
