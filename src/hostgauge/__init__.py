"""
hostgauge

Pull-based host resource gauges: load average, CPU, memory and disk usage
published as tagged measurements on an explicit metric registry.
"""

from __future__ import annotations

from .clock import Clock, FakeClock, SystemClock
from .listener import MeasurementListener
from .registry import InstrumentKind, Measurement, MetricRegistry, ObservableGauge, Observation
from .system_metrics import FailurePolicy, SystemMetrics
from .trackers import EnablementMap, SystemTracker, TagDescriptor

__all__ = [
    "Clock",
    "EnablementMap",
    "FailurePolicy",
    "FakeClock",
    "InstrumentKind",
    "Measurement",
    "MeasurementListener",
    "MetricRegistry",
    "ObservableGauge",
    "Observation",
    "SystemClock",
    "SystemMetrics",
    "SystemTracker",
    "TagDescriptor",
    "__version__",
]

__version__ = "0.1.0"
