"""Command-line flags overriding the environment configuration."""

import argparse
from collections.abc import Sequence
from typing import Any

__all__ = ["build_parser", "parse_args"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="command-repeater",
        description="Program to repeatedly send command to the given address.",
    )
    parser.add_argument(
        "-n", "--name", dest="caller_name", help="Name of the caller (default: caller)"
    )
    parser.add_argument(
        "-r",
        "--regex",
        dest="cmd_id_regex",
        help="Regex pattern to match the communication service names (default: .+)",
    )
    parser.add_argument("-c", "--cmd", dest="cmd", help="Command to run")
    parser.add_argument("-d", "--dst-url", dest="dst_url", help="Server to send command to")
    parser.add_argument(
        "-i",
        "--interval",
        dest="interval_ms",
        type=int,
        help="Send interval in milliseconds (default: 1000)",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        dest="request_timeout_sec",
        type=float,
        help="Timeout for a single send in seconds (default: 10)",
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> dict[str, Any]:
    """Parse flags into Settings overrides.

    Flags that were not given are left out so the environment (or the
    Settings default) applies.
    """
    namespace = build_parser().parse_args(argv)
    return {key: value for key, value in vars(namespace).items() if value is not None}
