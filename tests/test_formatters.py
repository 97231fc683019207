"""Tests for output formatters."""

from __future__ import annotations

import json

import pytest

from hostgauge.formatters import FORMATS, PrometheusFormatter, TableFormatter, get_formatter
from hostgauge.formatters.prometheus import metric_name
from hostgauge.registry import InstrumentKind, MetricRegistry, Observation


@pytest.fixture
def registry() -> MetricRegistry:
    registry = MetricRegistry("svc")
    registry.create_observable_gauge(
        "svc-sys-disk-bytes",
        InstrumentKind.INT64,
        lambda: [
            Observation(10, (("kind", "used"), ("disk", '/mnt/"x"'))),
            Observation(2048, (("kind", "total"), ("disk", "/"))),
        ],
        unit="bytes",
        description="Disk usage",
    )
    registry.create_observable_gauge(
        "svc-sys-cpu", InstrumentKind.FLOAT32, lambda: [Observation(12.5)], unit="percent"
    )
    registry.create_observable_gauge("svc-sys-load-avg", InstrumentKind.FLOAT64, lambda: [])
    return registry


def test_get_formatter_unknown() -> None:
    with pytest.raises(ValueError):
        get_formatter("xml")


def test_get_formatter_ignores_case_and_whitespace() -> None:
    assert isinstance(get_formatter("Prometheus"), PrometheusFormatter)
    assert isinstance(get_formatter(" TABLE "), TableFormatter)
    assert FORMATS == ("json", "table", "prometheus")


def test_metric_name_sanitized() -> None:
    assert metric_name("svc-sys-mem-bytes") == "svc_sys_mem_bytes"
    assert metric_name("1m") == "_1m"


def test_prometheus_output(registry) -> None:
    text = PrometheusFormatter().format(registry.collect(), registry)
    lines = text.splitlines()

    assert "# HELP svc_sys_disk_bytes Disk usage" in lines
    assert "# TYPE svc_sys_disk_bytes gauge" in lines
    assert 'svc_sys_disk_bytes{kind="used",disk="/mnt/\\"x\\""} 10' in lines
    assert 'svc_sys_disk_bytes{kind="total",disk="/"} 2048' in lines
    assert "svc_sys_cpu 12.5" in lines
    assert "svc_sys_load_avg" not in text


def test_json_output(registry) -> None:
    payload = json.loads(get_formatter("json").format(registry.collect(), registry))

    disk = payload["instruments"]["svc-sys-disk-bytes"]
    assert payload["registry"] == "svc"
    assert disk["kind"] == "int64"
    assert disk["measurements"][1] == {"value": 2048, "tags": {"kind": "total", "disk": "/"}}
    assert payload["instruments"]["svc-sys-load-avg"]["measurements"] == []


def test_table_output(registry) -> None:
    text = TableFormatter().format(registry.collect(), registry)

    assert "svc-sys-disk-bytes" in text
    assert "2.00 KB" in text
    assert "12.5%" in text
    assert "(no measurements)" in text
