"""CLI entrypoint for dart-inspect."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, load_config
from .logging import configure_logging, get_logger
from .parser import ParserUnavailableError
from .render import write_banner, write_records
from .scanner import DartInspector

# sysexits.h
EX_USAGE = 64
EX_NOINPUT = 66
EX_UNAVAILABLE = 69
EX_IOERR = 74
EX_CONFIG = 78

_FILTER_FLAGS = (
    ("--private-only", "Show only private fields."),
    ("--no-primitives", "Ignore fields of primitive types (String, int, bool, ...)."),
    ("--final-only", "Show only final fields."),
    ("--no-final", "Ignore final fields."),
    ("--no-imports", "Do not show file imports."),
    ("--no-classes", "Do not show class fields."),
)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dart-inspect",
        description="Report the imports and instance fields of Dart source files.",
    )
    parser.add_argument(
        "directory",
        nargs="?",
        help="Directory to scan recursively for .dart files.",
    )
    for flag, help_text in _FILTER_FLAGS:
        parser.add_argument(flag, action="store_true", help=help_text)

    output = parser.add_mutually_exclusive_group()
    output.add_argument(
        "--markdown",
        dest="output_format",
        action="store_const",
        const="markdown",
        help="Markdown output.",
    )
    output.add_argument(
        "--simple",
        dest="output_format",
        action="store_const",
        const="simple",
        help="Simple text output (default).",
    )
    output.add_argument(
        "--json",
        dest="output_format",
        action="store_const",
        const="json",
        help="One JSON object per record and line.",
    )
    parser.add_argument(
        "--config",
        help="Path to a .dart_inspect.yml file (defaults to one inside the directory).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        help="Also write log records to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for dart-inspect."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.directory is None:
        parser.print_help()
        parser.exit(0)

    log_file = Path(args.log_file) if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)
    logger = get_logger("cli")

    if args.final_only and args.no_final:
        parser.exit(EX_USAGE, "** Options --final-only and --no-final cannot be used together.\n")

    root = Path(args.directory)
    if not root.is_dir():
        parser.exit(EX_NOINPUT, f"** Directory not found: {args.directory}\n")

    config_path = Path(args.config) if args.config else root
    if args.config and not config_path.is_file():
        parser.exit(EX_CONFIG, f"** Config file not found: {args.config}\n")

    try:
        config = load_config(config_path)
        policy = config.policy(
            output_format=args.output_format,
            private_only=args.private_only,
            no_primitives=args.no_primitives,
            final_only=args.final_only,
            no_final=args.no_final,
            no_imports=args.no_imports,
            no_classes=args.no_classes,
        )
    except ConfigError as exc:
        parser.exit(EX_CONFIG, f"** Invalid configuration: {exc}\n")

    output_format = args.output_format or config.output_format
    logger.debug("Scanning %s with %s (format: %s)", root, policy, output_format)

    try:
        inspector = DartInspector(policy, exclude_paths=config.exclude_paths)
    except ParserUnavailableError as exc:
        parser.exit(EX_UNAVAILABLE, f"** {exc}\n")

    write_banner(sys.stdout, args.directory, policy, output_format)
    try:
        count = write_records(sys.stdout, inspector.scan_directory(root), output_format)
    except (OSError, UnicodeDecodeError) as exc:
        parser.exit(EX_IOERR, f"** Failed to read sources: {exc}\n")
    logger.debug("Wrote %d records", count)


if __name__ == "__main__":
    main(sys.argv[1:])
