"""JSON formatter."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from ..registry import Measurement, MetricRegistry
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Format a pull as JSON, one entry per instrument."""

    def format(self, pull: dict[str, list[Measurement]], registry: MetricRegistry) -> str:
        instruments: dict[str, Any] = {}
        for name, measurements in pull.items():
            gauge = registry.get(name)
            instruments[name] = {
                "kind": gauge.kind.value if gauge else None,
                "unit": gauge.unit if gauge else "",
                "measurements": [
                    {"value": m.value, "tags": dict(m.tags)} for m in measurements
                ],
            }
        payload = {
            "timestamp": datetime.now(UTC).isoformat(timespec="seconds"),
            "registry": registry.name,
            "instruments": instruments,
        }
        return json.dumps(payload, ensure_ascii=False, indent=2)
