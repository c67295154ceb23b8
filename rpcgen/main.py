"""Command-line entry point for rpcgen."""

from __future__ import annotations

import argparse
import sys

from . import __version__
from .cli import create_inspect_subparser
from .codegen.cli_integration import create_codegen_subparser
from .logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with the generate and inspect subcommands."""
    parser = argparse.ArgumentParser(
        prog="rpcgen",
        description="Generate RSocket RPC stubs from JSON service descriptors",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: WARNING)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Shortcut for --log-level INFO"
    )
    parser.add_argument("--log-file", help="Also write logs to this file")

    subparsers = parser.add_subparsers(dest="command")
    create_codegen_subparser(subparsers)
    create_inspect_subparser(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)

    level = "INFO" if args.verbose and args.log_level == "WARNING" else args.log_level
    configure_logging(level=level, log_file=args.log_file)
    logger.debug("Parsed arguments: %s", args)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
