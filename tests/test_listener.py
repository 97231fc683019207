"""Tests for the measurement listener."""

from __future__ import annotations

import threading

import pytest

from hostgauge.errors import ListenerClosedError
from hostgauge.listener import MeasurementListener
from hostgauge.registry import InstrumentKind, MetricRegistry, Observation


def _counting_registry():
    registry = MetricRegistry("r")
    counter = {"n": 0}

    def callback():
        counter["n"] += 1
        return [Observation(counter["n"], (("i", "a"),)), Observation(-counter["n"], (("i", "b"),))]

    registry.create_observable_gauge("longs", InstrumentKind.INT64, callback)
    registry.create_observable_gauge("doubles", InstrumentKind.FLOAT64, lambda: [Observation(1.5)])
    return registry, counter


def test_observe_pulls_exactly_once() -> None:
    registry, counter = _counting_registry()

    with MeasurementListener(registry, InstrumentKind.INT64) as listener:
        assert counter["n"] == 0
        listener.observe()
        assert counter["n"] == 1
        ms = listener.retrieve_measurements("longs")

    assert [(m.value, m.tags) for m in ms] == [(1, (("i", "a"),)), (-1, (("i", "b"),))]


def test_only_latest_observe_is_retained() -> None:
    registry, _ = _counting_registry()

    with MeasurementListener(registry, InstrumentKind.INT64) as listener:
        listener.observe()
        listener.observe()
        values = [m.value for m in listener.retrieve_measurements("longs")]

    assert values == [2, -2]


def test_listener_only_sees_its_kind() -> None:
    registry, counter = _counting_registry()

    with MeasurementListener(registry, InstrumentKind.FLOAT64) as listener:
        listener.observe()
        assert listener.retrieve_measurements("longs") == []
        assert [m.value for m in listener.retrieve_measurements("doubles")] == [1.5]

    assert counter["n"] == 0


def test_other_listener_pulls_do_not_leak_in() -> None:
    registry, _ = _counting_registry()
    a = MeasurementListener(registry, InstrumentKind.INT64)
    b = MeasurementListener(registry, InstrumentKind.INT64)

    a.observe()
    b.observe()

    assert [m.value for m in a.retrieve_measurements("longs")] == [1, -1]
    assert [m.value for m in b.retrieve_measurements("longs")] == [2, -2]
    a.close()
    b.close()


def test_close_releases_subscription() -> None:
    registry, _ = _counting_registry()
    listener = MeasurementListener(registry, InstrumentKind.INT64)
    listener.observe()
    listener.close()

    assert listener.closed
    assert listener.retrieve_measurements("longs") == []
    registry.collect()
    assert listener.retrieve_measurements("longs") == []
    with pytest.raises(ListenerClosedError):
        listener.observe()
    # closing twice is harmless
    listener.close()


def test_retrieve_unknown_name_is_empty() -> None:
    registry, _ = _counting_registry()
    with MeasurementListener(registry, InstrumentKind.INT64) as listener:
        listener.observe()
        assert listener.retrieve_measurements("nope") == []


def test_broadcast_pull_after_observe_is_not_captured() -> None:
    registry, counter = _counting_registry()

    with MeasurementListener(registry, InstrumentKind.INT64) as listener:
        listener.observe()
        registry.collect()
        ms = listener.retrieve_measurements("longs")

    assert counter["n"] == 2
    assert [m.value for m in ms] == [1, -1]


def test_pull_from_another_thread_is_not_captured() -> None:
    registry, _ = _counting_registry()
    listener = MeasurementListener(registry, InstrumentKind.INT64)
    listener.observe()

    worker = threading.Thread(target=registry.collect)
    worker.start()
    worker.join()

    assert [m.value for m in listener.retrieve_measurements("longs")] == [1, -1]
    listener.close()


def test_failed_observe_leaves_nothing_behind() -> None:
    registry = MetricRegistry("r")
    state = {"fail": False}

    def callback():
        if state["fail"]:
            raise RuntimeError("boom")
        return [Observation(1)]

    registry.create_observable_gauge("g", InstrumentKind.INT64, callback)
    with MeasurementListener(registry, InstrumentKind.INT64) as listener:
        listener.observe()
        state["fail"] = True
        with pytest.raises(RuntimeError):
            listener.observe()
        assert listener.retrieve_measurements("g") == []
