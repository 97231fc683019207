"""Base provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..trackers import SystemTracker

# Tag value used when the volume holding a path cannot be identified.
VOLUME_PLACEHOLDER = "unknown"


class SystemProvider(ABC):
    """Raw host readings, one method per quantity.

    Implementations raise ``UnsupportedError`` for readings the platform has
    no facility for, and ``ProviderError`` when the OS call itself fails.
    """

    @property
    @abstractmethod
    def supports_load_average(self) -> bool:
        ...

    @property
    @abstractmethod
    def supports_cpu(self) -> bool:
        ...

    @abstractmethod
    def load_average(self, tracker: SystemTracker) -> float:
        """Load average for one of the three load-average trackers."""
        ...

    @abstractmethod
    def cpu_percent(self) -> float:
        """System-wide CPU utilization since the previous call, in percent."""
        ...

    @abstractmethod
    def free_memory(self) -> int:
        ...

    @abstractmethod
    def total_memory(self) -> int:
        ...

    @abstractmethod
    def disk_total(self, path: str) -> int:
        ...

    @abstractmethod
    def disk_used(self, path: str) -> int:
        ...

    @abstractmethod
    def resolve_volume(self, path: str) -> str:
        """Identifier of the volume holding *path*, never empty."""
        ...
