"""System metrics sampler.

Registers one observable gauge per metric group (load average, CPU, memory,
disk) on a ``MetricRegistry``. Gauges read the OS provider only when pulled,
and only for enabled trackers.
"""

from __future__ import annotations

import functools
import logging
import threading
from collections.abc import Callable, Iterable, Mapping
from datetime import timedelta
from enum import Enum

from .cache import ReadingCache
from .clock import Clock, SystemClock
from .errors import ConfigError, ProviderError, UnsupportedError
from .providers import VOLUME_PLACEHOLDER, SystemProvider, default_provider
from .registry import InstrumentKind, MetricRegistry, Observation, ObservableGauge, Tags
from .trackers import (
    CPU_TRACKERS,
    DISK_TRACKERS,
    LOAD_AVERAGE_TRACKERS,
    MEMORY_TRACKERS,
    EnablementMap,
    SystemTracker,
    TagDescriptor,
)

log = logging.getLogger(__name__)

DescriptorLike = TagDescriptor | Mapping[SystemTracker, str] | Iterable[tuple[SystemTracker, str]]

DEFAULT_LOAD_AVERAGE_TAGS = TagDescriptor(
    {
        SystemTracker.LOAD_AVERAGE_1M: "1m",
        SystemTracker.LOAD_AVERAGE_5M: "5m",
        SystemTracker.LOAD_AVERAGE_15M: "15m",
    }
)
DEFAULT_MEMORY_TAGS = TagDescriptor(
    {
        SystemTracker.FREE_MEM: "free",
        SystemTracker.TOTAL_MEM: "total",
    }
)
DEFAULT_DISK_TAGS = TagDescriptor(
    {
        SystemTracker.DRIVE_USED_BYTES: "used",
        SystemTracker.DRIVE_TOTAL_BYTES: "total",
    }
)


class FailurePolicy(Enum):
    """What a pull does when a provider reading fails."""

    OMIT = "omit"
    STALE = "stale"
    RAISE = "raise"

    @classmethod
    def parse(cls, text: str) -> FailurePolicy:
        try:
            return cls(text.strip().lower())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            raise ConfigError(f"Unknown failure policy: {text!r}. Available: {choices}") from None


class SystemMetrics:
    def __init__(
        self,
        registry: MetricRegistry,
        interval: float | timedelta,
        config: EnablementMap | Mapping[SystemTracker, bool],
        *,
        provider: SystemProvider | None = None,
        clock: Clock | None = None,
        failure_policy: FailurePolicy = FailurePolicy.OMIT,
        cache_all: bool = False,
    ) -> None:
        seconds = interval.total_seconds() if isinstance(interval, timedelta) else float(interval)
        if seconds < 0:
            raise ConfigError(f"Sampling interval must be >= 0, got {seconds}")

        self.registry = registry
        self.interval = seconds
        self.config = config if isinstance(config, EnablementMap) else EnablementMap(config)
        self.provider = provider if provider is not None else default_provider()
        self.clock = clock if clock is not None else SystemClock()
        self.failure_policy = failure_policy
        self.cache_all = cache_all

        self._cache = ReadingCache(self.clock, seconds)
        self._last_good: dict[str, float | int] = {}
        self._last_good_lock = threading.Lock()

    # ── registration ─────────────────────────────────────────────────

    def create_load_average_metric(
        self, name: str, tag_descriptor: DescriptorLike | None = None
    ) -> ObservableGauge:
        descriptor = self._descriptor(name, tag_descriptor, DEFAULT_LOAD_AVERAGE_TAGS, LOAD_AVERAGE_TRACKERS)

        def observe() -> list[Observation]:
            if not self.provider.supports_load_average:
                return []
            return self._observe_group(
                name,
                descriptor,
                self.provider.load_average,
                lambda tag_value: (("period", tag_value),),
            )

        return self.registry.create_observable_gauge(
            name, InstrumentKind.FLOAT64, observe, description="System load average"
        )

    def create_cpu_metric(self, name: str) -> ObservableGauge:
        def observe() -> list[Observation]:
            if not self.provider.supports_cpu:
                return []
            if not self.config.is_enabled(SystemTracker.CPU):
                return []
            value = self._read(name, SystemTracker.CPU, self.provider.cpu_percent, cached=True)
            if value is None:
                return []
            return [Observation(value)]

        self._log_registration(name, CPU_TRACKERS)
        return self.registry.create_observable_gauge(
            name, InstrumentKind.FLOAT32, observe, unit="percent", description="System CPU utilization"
        )

    def create_memory_metric(
        self, name: str, tag_descriptor: DescriptorLike | None = None
    ) -> ObservableGauge:
        instrument = f"{name}-bytes"
        descriptor = self._descriptor(instrument, tag_descriptor, DEFAULT_MEMORY_TAGS, MEMORY_TRACKERS)
        readers: dict[SystemTracker, Callable[[], int]] = {
            SystemTracker.FREE_MEM: self.provider.free_memory,
            SystemTracker.TOTAL_MEM: self.provider.total_memory,
        }

        def observe() -> list[Observation]:
            return self._observe_group(
                instrument,
                descriptor,
                lambda tracker: readers[tracker](),
                lambda tag_value: (("kind", tag_value),),
            )

        return self.registry.create_observable_gauge(
            instrument, InstrumentKind.INT64, observe, unit="bytes", description="System memory"
        )

    def create_disk_metric(
        self, name: str, path: str, tag_descriptor: DescriptorLike | None = None
    ) -> ObservableGauge:
        instrument = f"{name}-bytes"
        descriptor = self._descriptor(instrument, tag_descriptor, DEFAULT_DISK_TAGS, DISK_TRACKERS)
        readers: dict[SystemTracker, Callable[[str], int]] = {
            SystemTracker.DRIVE_TOTAL_BYTES: self.provider.disk_total,
            SystemTracker.DRIVE_USED_BYTES: self.provider.disk_used,
        }

        def observe() -> list[Observation]:
            if not self.config.any_enabled(descriptor.trackers):
                return []
            disk = self._volume(instrument, path)
            return self._observe_group(
                instrument,
                descriptor,
                lambda tracker: readers[tracker](path),
                lambda tag_value: (("kind", tag_value), ("disk", disk)),
            )

        return self.registry.create_observable_gauge(
            instrument, InstrumentKind.INT64, observe, unit="bytes", description=f"Disk usage of {path}"
        )

    # ── pull helpers ─────────────────────────────────────────────────

    def _observe_group(
        self,
        instrument: str,
        descriptor: TagDescriptor,
        read: Callable[[SystemTracker], float | int],
        tags: Callable[[str], Tags],
    ) -> list[Observation]:
        if not self.config.any_enabled(descriptor.trackers):
            return []

        observations: list[Observation] = []
        for tracker, tag_value in descriptor:
            if not self.config.is_enabled(tracker):
                continue
            value = self._read(instrument, tracker, functools.partial(read, tracker))
            if value is None:
                continue
            observations.append(Observation(value, tags(tag_value)))
        return observations

    def _read(
        self,
        instrument: str,
        tracker: SystemTracker,
        reader: Callable[[], float | int],
        *,
        cached: bool = False,
    ) -> float | int | None:
        key = f"{instrument}/{tracker.value}"
        extra = {"instrument": instrument, "tracker": tracker.value}
        try:
            if cached or self.cache_all:
                value = self._cache.get(key, reader)
            else:
                value = reader()
        except UnsupportedError:
            log.debug("reading_unsupported", extra=extra)
            return None
        except Exception as e:
            return self._on_failure(key, e, extra)

        if self.failure_policy is FailurePolicy.STALE:
            with self._last_good_lock:
                self._last_good[key] = value
        return value

    def _on_failure(self, key: str, error: Exception, extra: dict[str, str]) -> float | int | None:
        expected = isinstance(error, (ProviderError, OSError))
        if self.failure_policy is FailurePolicy.RAISE:
            if isinstance(error, ProviderError):
                raise error
            raise ProviderError(f"{key}: {error}") from error

        if expected:
            log.debug("reading_failed", extra={**extra, "policy": self.failure_policy.value})
        else:
            log.warning(
                "reading_failed",
                extra={**extra, "policy": self.failure_policy.value},
                exc_info=error,
            )

        if self.failure_policy is FailurePolicy.STALE:
            with self._last_good_lock:
                return self._last_good.get(key)
        return None

    def _volume(self, instrument: str, path: str) -> str:
        def resolve() -> str:
            return self.provider.resolve_volume(path) or VOLUME_PLACEHOLDER

        try:
            return self._cache.get(f"{instrument}/volume", resolve)
        except Exception:
            log.warning("volume_unresolved", extra={"instrument": instrument, "path": path}, exc_info=True)
            return VOLUME_PLACEHOLDER

    # ── registration helpers ─────────────────────────────────────────

    def _descriptor(
        self,
        instrument: str,
        tag_descriptor: DescriptorLike | None,
        default: TagDescriptor,
        group: frozenset[SystemTracker],
    ) -> TagDescriptor:
        if tag_descriptor is None:
            descriptor = default
        elif isinstance(tag_descriptor, TagDescriptor):
            descriptor = tag_descriptor
        else:
            descriptor = TagDescriptor(tag_descriptor)

        descriptor, rejected = descriptor.restricted_to(group)
        for tracker in rejected:
            log.warning("tracker_ignored", extra={"instrument": instrument, "tracker": tracker.value})
        self._log_registration(instrument, frozenset(descriptor.trackers))
        return descriptor

    def _log_registration(self, instrument: str, trackers: frozenset[SystemTracker]) -> None:
        enabled = sorted(t.value for t in trackers if self.config.is_enabled(t))
        log.info("metric_registered", extra={"instrument": instrument, "trackers": enabled})
