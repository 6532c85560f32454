"""Main CLI entry point for tagwire."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import structlog

from .. import __version__
from ..cli.analyze import analyze_file
from ..cli.dump import format_raw
from ..exceptions import TagwireError


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the tagwire CLI.

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="tagwire: tagged-field binary codec",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tagwire --decode-raw person.bin        Show the fields of an encoded buffer
  tagwire --decode-raw dump.txt --hex    Same, reading hexadecimal text
  tagwire --analyze schemas.py           Show message schemas defined in a file
  tagwire --version                      Show version
        """,
    )

    parser.add_argument(
        "--decode-raw",
        metavar="FILE",
        type=str,
        help="Print the tags and payloads of an encoded buffer without a schema",
    )

    parser.add_argument(
        "--hex",
        action="store_true",
        help="Read FILE as hexadecimal text instead of raw bytes",
    )

    parser.add_argument(
        "--analyze",
        metavar="FILE",
        type=str,
        help="Analyze message schemas and show field numbers and wire types",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"tagwire {__version__}",
    )

    args = parser.parse_args(argv)

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if args.verbose else logging.WARNING
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )

    if args.decode_raw:
        file_path = Path(args.decode_raw)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            if args.hex:
                data = bytes.fromhex(file_path.read_text())
            else:
                data = file_path.read_bytes()
            for line in format_raw(data):
                print(line)
            return 0
        except (TagwireError, ValueError) as e:
            print(f"Error decoding {file_path}: {e}", file=sys.stderr)
            return 1

    if args.analyze:
        file_path = Path(args.analyze)
        if not file_path.exists():
            print(f"Error: File not found: {file_path}", file=sys.stderr)
            return 1

        try:
            analyze_file(file_path)
            return 0
        except Exception as e:
            print(f"Error analyzing file: {e}", file=sys.stderr)
            return 1

    # If no command specified, show help
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
