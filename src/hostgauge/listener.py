"""Synchronous measurement capture for one instrument kind."""

from __future__ import annotations

import threading
from types import TracebackType

from .errors import ListenerClosedError
from .registry import InstrumentKind, Measurement, MetricRegistry, ObservableGauge


class MeasurementListener:
    """Subscribes to a registry and captures one pull at a time.

    Usage::

        with MeasurementListener(registry, InstrumentKind.INT64) as listener:
            listener.observe()
            listener.retrieve_measurements("hostgauge-sys-mem-bytes")
    """

    def __init__(self, registry: MetricRegistry, kind: InstrumentKind) -> None:
        self.registry = registry
        self.kind = kind
        self._captured: dict[str, list[Measurement]] = {}
        self._pending: dict[str, list[Measurement]] = {}
        self._pulling_thread: int | None = None
        self._closed = False
        registry.subscribe(self)

    def on_measurements(self, instrument: ObservableGauge, measurements: list[Measurement]) -> None:
        # Broadcast pulls started by someone else are not ours to keep.
        if self._pulling_thread != threading.get_ident():
            return
        if instrument.kind is not self.kind:
            return
        self._pending.setdefault(instrument.name, []).extend(measurements)

    def observe(self) -> None:
        """Pull every instrument of this listener's kind exactly once."""
        if self._closed:
            raise ListenerClosedError()
        self._captured = {}
        self._pending = {}
        self._pulling_thread = threading.get_ident()
        try:
            self.registry.collect(self.kind, sink=self)
        finally:
            self._pulling_thread = None
        self._captured, self._pending = self._pending, {}

    def retrieve_measurements(self, name: str) -> list[Measurement]:
        return list(self._captured.get(name, ()))

    def close(self) -> None:
        if self._closed:
            return
        self.registry.unsubscribe(self)
        self._captured = {}
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> MeasurementListener:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
