"""Tracker listing and version command handlers."""

from __future__ import annotations

import argparse
import json
import sys

from ..config import settings


def cmd_trackers(args: argparse.Namespace) -> int:
    """Show every tracker and whether the environment enables it."""
    enabled = settings.enablement().as_dict()
    if args.format == "json":
        payload = {tracker.value: flag for tracker, flag in enabled.items()}
        sys.stdout.write(json.dumps(payload, indent=2) + "\n")
    else:
        for tracker, flag in enabled.items():
            sys.stdout.write(f"{tracker.value:18} {'on' if flag else 'off'}\n")
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    """Show version."""
    from .. import __version__

    sys.stdout.write(f"hostgauge version {__version__}\n")
    return 0
