"""Default wiring of the system metric groups."""

from __future__ import annotations

from .clock import Clock
from .config import Settings, settings as default_settings
from .providers import SystemProvider
from .registry import Measurement, MetricRegistry
from .system_metrics import (
    DEFAULT_DISK_TAGS,
    DEFAULT_LOAD_AVERAGE_TAGS,
    DEFAULT_MEMORY_TAGS,
    FailurePolicy,
    SystemMetrics,
)
from .trackers import EnablementMap


def register_system_metrics(
    registry: MetricRegistry,
    settings: Settings | None = None,
    *,
    enablement: EnablementMap | None = None,
    provider: SystemProvider | None = None,
    clock: Clock | None = None,
) -> SystemMetrics:
    """Register the load average, CPU, memory and disk groups.

    Args:
        registry: Registry the gauges are created on
        settings: Names, interval, disk path and policy (default: from env)
        enablement: Overrides the tracker switches from *settings*
        provider: OS provider (default: chosen for this platform)
        clock: Time source for interval caching (default: monotonic)

    Returns:
        The sampler that owns the registered gauges
    """
    cfg = settings or default_settings
    sampler = SystemMetrics(
        registry,
        cfg.sampling_interval_seconds,
        enablement if enablement is not None else cfg.enablement(),
        provider=provider,
        clock=clock,
        failure_policy=FailurePolicy.parse(cfg.failure_policy),
    )
    prefix = cfg.metric_prefix
    sampler.create_load_average_metric(f"{prefix}-load-avg", DEFAULT_LOAD_AVERAGE_TAGS)
    sampler.create_cpu_metric(f"{prefix}-cpu")
    sampler.create_memory_metric(f"{prefix}-mem", DEFAULT_MEMORY_TAGS)
    sampler.create_disk_metric(f"{prefix}-disk", cfg.disk_path, DEFAULT_DISK_TAGS)
    return sampler


def collect_all(registry: MetricRegistry) -> dict[str, list[Measurement]]:
    """Pull every instrument on *registry* once."""
    return registry.collect()
