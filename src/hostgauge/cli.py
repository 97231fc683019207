"""CLI interface for hostgauge."""

from __future__ import annotations

import argparse
import logging
import sys

from .commands.info import cmd_trackers, cmd_version
from .commands.snapshot import cmd_snapshot, cmd_watch
from .config import settings
from .errors import HostGaugeError
from .formatters import FORMATS
from .logging import configure_logging
from .trackers import SystemTracker

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build argument parser."""
    parser = argparse.ArgumentParser(
        prog="hostgauge",
        description="Pull-based host resource gauges",
    )

    # Global options
    parser.add_argument(
        "--version",
        "-V",
        action="store_true",
        help="Show version and exit",
    )

    subparsers = parser.add_subparsers(dest="command")

    # Common arguments for pull commands
    def add_common_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--format",
            "-f",
            choices=FORMATS,
            default="json",
            help="Output format (default: json)",
        )
        p.add_argument(
            "--output",
            "-o",
            type=str,
            default=None,
            help="Output file (default: stdout)",
        )
        p.add_argument(
            "--path",
            "-p",
            type=str,
            default=None,
            help=f"Path whose volume the disk gauge reports (default: {settings.disk_path})",
        )
        p.add_argument(
            "--disable",
            "-d",
            action="append",
            default=[],
            metavar="TRACKER",
            help="Disable a tracker (repeatable). One of: "
            + ", ".join(t.value for t in SystemTracker),
        )

    # snapshot command
    p_snapshot = subparsers.add_parser(
        "snapshot",
        help="Pull every gauge once",
    )
    add_common_args(p_snapshot)
    p_snapshot.set_defaults(func=cmd_snapshot)

    # watch command
    p_watch = subparsers.add_parser(
        "watch",
        help="Pull every gauge periodically",
    )
    add_common_args(p_watch)
    p_watch.add_argument(
        "--interval",
        "-i",
        type=float,
        default=settings.sampling_interval_seconds,
        help=f"Seconds between pulls (default: {settings.sampling_interval_seconds:g})",
    )
    p_watch.add_argument(
        "--count",
        "-n",
        type=int,
        default=0,
        help="Number of pulls (default: unlimited)",
    )
    p_watch.set_defaults(func=cmd_watch)

    # trackers command
    p_trackers = subparsers.add_parser(
        "trackers",
        help="List trackers and whether they are enabled",
    )
    p_trackers.add_argument(
        "--format",
        "-f",
        choices=["json", "table"],
        default="table",
        help="Output format (default: table)",
    )
    p_trackers.set_defaults(func=cmd_trackers)

    # version command
    p_version = subparsers.add_parser(
        "version",
        help="Show version",
    )
    p_version.set_defaults(func=cmd_version)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    configure_logging(service=settings.service_name)
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        from . import __version__

        sys.stdout.write(f"hostgauge version {__version__}\n")
        raise SystemExit(0)

    if not args.command:
        parser.print_help()
        raise SystemExit(0)

    try:
        rc = int(args.func(args))
    except HostGaugeError as e:
        log.warning("handled_error", extra={"code": e.code})
        sys.stderr.write(f"Error: {e.message}\n")
        rc = 2
    raise SystemExit(rc)
