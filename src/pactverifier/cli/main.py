"""
pactverifier command line.

Usage:
    pactverifier verify <pact> --states module:function [options]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from pactverifier import __version__
from pactverifier.cli.verify import handle_verify_command, register_verify_parser
from pactverifier.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pactverifier",
        description="Provider-side verification of message pacts",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for structured logs on stderr",
    )
    subparsers = parser.add_subparsers(dest="command")
    register_verify_parser(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(getattr(logging, args.log_level))

    if args.command == "verify":
        sys.exit(handle_verify_command(args))

    parser.print_help()
    sys.exit(2)


if __name__ == "__main__":
    main()
