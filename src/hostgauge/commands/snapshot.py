"""Snapshot and watch command handlers."""

from __future__ import annotations

import argparse
import dataclasses
import os
import signal
import sys
import time
from typing import Any

from ..config import settings
from ..core import collect_all, register_system_metrics
from ..formatters import get_formatter
from ..registry import MetricRegistry
from ..trackers import EnablementMap, SystemTracker

# Graceful shutdown flag
_shutdown_requested = False


def _signal_handler(signum: int, frame: Any) -> None:
    global _shutdown_requested
    _shutdown_requested = True
    sys.stderr.write("\n[hostgauge] Shutdown requested, exiting gracefully...\n")


def _output(data: str, output_file: str | None = None) -> None:
    """Append *data* to *output_file*, or write it to stdout."""
    if output_file:
        mode = "a" if os.path.exists(output_file) else "w"
        with open(output_file, mode) as f:
            f.write(data + "\n")
    else:
        sys.stdout.write(data + "\n")
        sys.stdout.flush()


def build_registry(args: argparse.Namespace) -> MetricRegistry:
    """Create a registry with the system metric groups the CLI args ask for."""
    cfg = settings
    if getattr(args, "path", None):
        cfg = dataclasses.replace(cfg, disk_path=args.path)

    enabled = cfg.enablement().as_dict()
    for name in getattr(args, "disable", None) or []:
        enabled[SystemTracker.parse(name)] = False

    registry = MetricRegistry(cfg.service_name)
    register_system_metrics(registry, cfg, enablement=EnablementMap(enabled))
    return registry


def cmd_snapshot(args: argparse.Namespace) -> int:
    """Pull every instrument once."""
    registry = build_registry(args)
    formatter = get_formatter(args.format)
    _output(formatter.format(collect_all(registry), registry), args.output)
    return 0


def cmd_watch(args: argparse.Namespace) -> int:
    """Pull every instrument repeatedly."""
    global _shutdown_requested

    interval = float(args.interval)
    if interval <= 0:
        sys.stderr.write("Error: --interval must be > 0\n")
        return 2

    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    registry = build_registry(args)
    formatter = get_formatter(args.format)

    count = 0
    max_count = args.count if args.count > 0 else float("inf")

    while not _shutdown_requested and count < max_count:
        if args.format == "table" and not args.output:
            sys.stdout.write("\033[2J\033[H")

        _output(formatter.format(collect_all(registry), registry), args.output)

        count += 1

        if count < max_count and not _shutdown_requested:
            time.sleep(interval)

    return 0
