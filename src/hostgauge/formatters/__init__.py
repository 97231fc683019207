"""Renderers for one registry pull."""

from __future__ import annotations

from .base import BaseFormatter
from .json_fmt import JsonFormatter
from .prometheus import PrometheusFormatter
from .table import TableFormatter

__all__ = [
    "FORMATS",
    "BaseFormatter",
    "JsonFormatter",
    "PrometheusFormatter",
    "TableFormatter",
    "get_formatter",
]

_REGISTRY: dict[str, type[BaseFormatter]] = {
    "json": JsonFormatter,
    "table": TableFormatter,
    "prometheus": PrometheusFormatter,
}

# Names accepted by get_formatter and the CLI's --format flag.
FORMATS: tuple[str, ...] = tuple(_REGISTRY)


def get_formatter(fmt: str) -> BaseFormatter:
    """Return a fresh formatter for *fmt* (case-insensitive)."""
    key = fmt.strip().lower()
    try:
        cls = _REGISTRY[key]
    except KeyError:
        raise ValueError(f"Unknown format: {fmt!r}. Available: {', '.join(FORMATS)}") from None
    return cls()
