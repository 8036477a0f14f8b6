# rocketctl/app.py

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rocketctl.logging_config import setup_logging
from rocketctl.model.io import load_simulation_config, load_simulation_series
from rocketctl.record.flights import list_flight_logs
from rocketctl.util.equality import structural_equals
from rocketctl.util.names import is_invalid_name
from rocketctl.util.settings import Settings, load_settings

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2


# ---------------------------------------- #


def _cmd_diff(args: argparse.Namespace, settings: Settings) -> int:
    load = load_simulation_series if args.series else load_simulation_config
    a = load(args.a)
    b = load(args.b)

    if structural_equals(a, b):
        sys.stdout.write("identical\n")
        return EXIT_OK
    sys.stdout.write("different\n")
    return EXIT_DIFFERENT


def _cmd_flights(args: argparse.Namespace, settings: Settings) -> int:
    directory = Path(args.dir) if args.dir else settings.flight_dir
    for name in list_flight_logs(directory):
        sys.stdout.write(name + "\n")
    return EXIT_OK


def _cmd_check_name(args: argparse.Namespace, settings: Settings) -> int:
    if is_invalid_name(args.name):
        logger.warning(f"Invalid name: {args.name!r}")
        return EXIT_DIFFERENT
    return EXIT_OK


# ---------------------------------------- #


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rocketctl",
        description="Inspect rocket flight configs, simulated series and flight logs",
    )
    parser.add_argument(
        "--settings",
        default=None,
        help="Path to rocketctl.toml (default: rocketctl.toml at the repository root)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the log level from the settings file",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_diff = sub.add_parser("diff", help="Compare two JSON documents structurally")
    p_diff.add_argument("a")
    p_diff.add_argument("b")
    p_diff.add_argument(
        "--series",
        action="store_true",
        help="Compare simulation series instead of simulation configs",
    )
    p_diff.set_defaults(func=_cmd_diff)

    p_flights = sub.add_parser("flights", help="List recorded flights, newest first")
    p_flights.add_argument("dir", nargs="?", default=None)
    p_flights.set_defaults(func=_cmd_flights)

    p_name = sub.add_parser("check-name", help="Check that a name is URL-safe")
    p_name.add_argument("name")
    p_name.set_defaults(func=_cmd_check_name)

    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Command-line entry point.

    Returns 0 on success / identical, 1 on difference / invalid name and 2 on
    errors (unreadable or malformed input).
    """
    args = _build_parser().parse_args(argv)

    try:
        settings = load_settings(Path(args.settings) if args.settings else None)
    except ValueError as exc:
        setup_logging(stream=sys.stderr)
        logger.error(str(exc))
        return EXIT_ERROR

    level = args.log_level or settings.log_level
    # stdout carries command output
    setup_logging(getattr(logging, level), stream=sys.stderr)

    try:
        return args.func(args, settings)
    except (ValueError, OSError) as exc:
        logger.error(str(exc))
        return EXIT_ERROR


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
