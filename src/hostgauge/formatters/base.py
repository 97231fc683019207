"""Base formatter interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..registry import Measurement, MetricRegistry


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def format(self, pull: dict[str, list[Measurement]], registry: MetricRegistry) -> str:
        """Format one pull of *registry* to a string."""
        ...
