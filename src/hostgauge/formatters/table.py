"""Table formatter for human-readable output."""

from __future__ import annotations

from datetime import UTC, datetime

from ..registry import Measurement, MetricRegistry
from .base import BaseFormatter


def _bytes_to_human(n: float) -> str:
    value = float(n)
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if abs(value) < 1024.0:
            return f"{value:.2f} {unit}"
        value /= 1024.0
    return f"{value:.2f} PB"


class TableFormatter(BaseFormatter):
    """Format a pull as a human-readable table."""

    def format(self, pull: dict[str, list[Measurement]], registry: MetricRegistry) -> str:
        lines: list[str] = []

        ts = datetime.now(UTC).isoformat(timespec="seconds")
        lines.append(f"{'=' * 60}")
        lines.append(f"  {registry.name} - {ts}")
        lines.append(f"{'=' * 60}")

        for name, measurements in pull.items():
            gauge = registry.get(name)
            unit = gauge.unit if gauge else ""
            lines.append("")
            lines.append(f"  {name}")
            if not measurements:
                lines.append("    (no measurements)")
                continue
            for m in measurements:
                label = " ".join(f"{k}={v}" for k, v in m.tags) or "-"
                if unit == "bytes":
                    value = _bytes_to_human(m.value)
                elif unit == "percent":
                    value = f"{m.value:.1f}%"
                else:
                    value = f"{m.value:.2f}"
                lines.append(f"    {label:30} {value:>12}")

        lines.append("")
        lines.append(f"{'=' * 60}")

        return "\n".join(lines)
