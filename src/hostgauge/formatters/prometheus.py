"""Prometheus text exposition formatter."""

from __future__ import annotations

import re

from ..registry import Measurement, MetricRegistry
from .base import BaseFormatter

_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_:]")


def metric_name(name: str) -> str:
    """Map an instrument name onto the Prometheus name charset."""
    sanitized = _INVALID_NAME_CHARS.sub("_", name)
    if sanitized and sanitized[0].isdigit():
        sanitized = f"_{sanitized}"
    return sanitized


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace('"', '\\"')


class PrometheusFormatter(BaseFormatter):
    """Format a pull as Prometheus gauges, labels in tag order."""

    def format(self, pull: dict[str, list[Measurement]], registry: MetricRegistry) -> str:
        lines: list[str] = []

        for name, measurements in pull.items():
            if not measurements:
                continue
            prom_name = metric_name(name)
            gauge = registry.get(name)
            if gauge is not None and gauge.description:
                lines.append(f"# HELP {prom_name} {gauge.description}")
            lines.append(f"# TYPE {prom_name} gauge")

            for m in measurements:
                if m.tags:
                    labels = ",".join(f'{metric_name(k)}="{_escape(v)}"' for k, v in m.tags)
                    lines.append(f"{prom_name}{{{labels}}} {m.value}")
                else:
                    lines.append(f"{prom_name} {m.value}")

        return "\n".join(lines)
