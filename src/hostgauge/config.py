from __future__ import annotations

import os
from dataclasses import dataclass, field

from .errors import ConfigError
from .trackers import EnablementMap, SystemTracker


def _get_str(name: str, default: str) -> str:
    return os.getenv(name, default)


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_bool(raw: str) -> bool:
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    raise ConfigError(f"Not a boolean: {raw!r}")


def parse_trackers(text: str, *, default: bool = True) -> EnablementMap:
    """Build an enablement map from ``"Cpu=false,FreeMem=true"`` style text.

    Every tracker starts at *default*; entries in *text* override it. A bare
    name (``"Cpu"``) means enabled.
    """
    enabled = {t: default for t in SystemTracker}
    for chunk in text.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        name, sep, flag = chunk.partition("=")
        enabled[SystemTracker.parse(name)] = _parse_bool(flag) if sep else True
    return EnablementMap(enabled)


@dataclass(frozen=True, slots=True)
class Settings:
    service_name: str = field(default_factory=lambda: _get_str("HOSTGAUGE_SERVICE_NAME", "hostgauge"))
    metric_prefix: str = field(
        default_factory=lambda: _get_str("HOSTGAUGE_METRIC_PREFIX", "hostgauge-sys")
    )
    sampling_interval_seconds: float = field(
        default_factory=lambda: _get_float("HOSTGAUGE_SAMPLING_INTERVAL_SECONDS", 30.0)
    )
    disk_path: str = field(default_factory=lambda: _get_str("HOSTGAUGE_DISK_PATH", "."))
    failure_policy: str = field(default_factory=lambda: _get_str("HOSTGAUGE_FAILURE_POLICY", "omit"))

    # Comma separated overrides on top of "everything enabled", e.g. "Cpu=false"
    trackers: str = field(default_factory=lambda: _get_str("HOSTGAUGE_TRACKERS", ""))

    def enablement(self) -> EnablementMap:
        return parse_trackers(self.trackers)


settings = Settings()
