"""Pull-based instrument registry.

A ``MetricRegistry`` holds observable gauges. Nothing is sampled until
someone pulls: ``collect()`` invokes each gauge's callback once and hands the
resulting measurements to the caller and to every subscribed sink.
"""

from __future__ import annotations

import logging
import struct
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .errors import DuplicateInstrumentError

log = logging.getLogger(__name__)

Tags = tuple[tuple[str, str], ...]


class InstrumentKind(Enum):
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    INT64 = "int64"

    def coerce(self, value: float | int) -> float | int:
        if self is InstrumentKind.INT64:
            return int(value)
        if self is InstrumentKind.FLOAT32:
            return struct.unpack("f", struct.pack("f", float(value)))[0]
        return float(value)


@dataclass(frozen=True, slots=True)
class Observation:
    """A raw reading yielded by a gauge callback."""

    value: float | int
    tags: Tags = ()


@dataclass(frozen=True, slots=True)
class Measurement:
    value: float | int
    tags: Tags = ()

    def tag(self, key: str) -> str | None:
        for k, v in self.tags:
            if k == key:
                return v
        return None


Callback = Callable[[], Iterable[Observation]]


class ObservableGauge:
    """A named, typed gauge that reports values only when pulled."""

    def __init__(
        self,
        name: str,
        kind: InstrumentKind,
        callback: Callback,
        *,
        unit: str = "",
        description: str = "",
    ) -> None:
        self.name = name
        self.kind = kind
        self.unit = unit
        self.description = description
        self._callback = callback

    def observe(self) -> list[Measurement]:
        return [
            Measurement(self.kind.coerce(obs.value), tuple(obs.tags))
            for obs in self._callback()
        ]

    def __repr__(self) -> str:
        return f"ObservableGauge(name={self.name!r}, kind={self.kind.value})"


class ObservationSink(Protocol):
    def on_measurements(self, instrument: ObservableGauge, measurements: list[Measurement]) -> None:
        ...


class MetricRegistry:
    """An explicit meter: instruments registered here are pulled together."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._lock = threading.Lock()
        self._instruments: dict[str, ObservableGauge] = {}
        self._sinks: list[ObservationSink] = []

    def create_observable_gauge(
        self,
        name: str,
        kind: InstrumentKind,
        callback: Callback,
        *,
        unit: str = "",
        description: str = "",
    ) -> ObservableGauge:
        gauge = ObservableGauge(name, kind, callback, unit=unit, description=description)
        with self._lock:
            if name in self._instruments:
                raise DuplicateInstrumentError(name)
            self._instruments[name] = gauge
        log.debug("instrument_registered", extra={"instrument": name})
        return gauge

    def get(self, name: str) -> ObservableGauge | None:
        with self._lock:
            return self._instruments.get(name)

    def instruments(self, kind: InstrumentKind | None = None) -> list[ObservableGauge]:
        with self._lock:
            gauges = list(self._instruments.values())
        if kind is None:
            return gauges
        return [g for g in gauges if g.kind is kind]

    def subscribe(self, sink: ObservationSink) -> None:
        with self._lock:
            if sink not in self._sinks:
                self._sinks.append(sink)

    def unsubscribe(self, sink: ObservationSink) -> None:
        with self._lock:
            if sink in self._sinks:
                self._sinks.remove(sink)

    def collect(
        self,
        kind: InstrumentKind | None = None,
        *,
        sink: ObservationSink | None = None,
    ) -> dict[str, list[Measurement]]:
        """Pull every registered gauge (of *kind*, if given) exactly once.

        Measurements go to every subscribed sink, or only to *sink* when one
        is passed. A sink that is not subscribed receives nothing.
        """
        results: dict[str, list[Measurement]] = {}
        for gauge in self.instruments(kind):
            measurements = gauge.observe()
            results[gauge.name] = measurements
            with self._lock:
                if sink is None:
                    targets = list(self._sinks)
                else:
                    targets = [sink] if sink in self._sinks else []
            for target in targets:
                target.on_measurements(gauge, measurements)
        return results
