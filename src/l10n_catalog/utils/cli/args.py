"""
Command-line argument parsing for l10n-catalog.

This module builds the ``l10n-catalog`` argument parser: global options for
the configuration file and logging, plus one subcommand per catalog
operation.
"""

import argparse
import sys
from pathlib import Path
from typing import NamedTuple

from ..core.version import get_version


class PathValidationError(Exception):
    """Raised when a path validation fails."""

    pass


class ParsedArgs(NamedTuple):
    """Container for parsed command-line arguments."""

    command: str
    config_file: Path
    log_file: Path | None
    verbose: bool
    options: argparse.Namespace


class DefaultPaths:
    """Default paths for l10n-catalog."""

    CONFIG_FILE: Path = Path("l10n-catalog.yml")


def validate_file_path(path_str: str, description: str) -> Path:
    """
    Validate and resolve a file path.

    Args:
        path_str: String path to the file
        description: Name of the file (for error messages)

    Returns:
        Resolved Path object for the file

    Raises:
        PathValidationError: If the path is invalid or names a directory
    """
    try:
        # Expand tilde if present, then resolve
        path = Path(path_str).expanduser().resolve()
    except (OSError, ValueError) as e:
        raise PathValidationError(f"Invalid {description} path: {e}") from e

    if path.exists() and path.is_dir():
        raise PathValidationError(
            f"{description.capitalize()} path exists but is not a file: {path}"
        )

    return path


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for l10n-catalog.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="l10n-catalog",
        description="Maintain and query versioned translatable-string catalogs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  l10n-catalog sample-config l10n-catalog.yml
    Write a documented configuration file

  l10n-catalog merge new/app.en.po old/app.en.po -o merged/app.en.po
    Merge a freshly scanned catalog with the previous one

  l10n-catalog --config-file ~/app/l10n-catalog.yml reconcile --scan scan.po
    Regenerate the default-language catalog for the configured application

  l10n-catalog resolve Main.Title --lang fr --lang de --fallback "Welcome"
    Show which text a user preferring French, then German, would see
""",
    )

    _ = parser.add_argument(
        "--config-file",
        type=str,
        default=str(DefaultPaths.CONFIG_FILE),
        help="Path to the configuration file (default: %(default)s)",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "--log-file",
        type=str,
        default=None,
        help="Also write logs to this file, rotated by size",
        metavar="PATH",
    )
    _ = parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug messages",
    )
    _ = parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_version()}"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    merge = subparsers.add_parser(
        "merge", help="Merge a new catalog with an older one"
    )
    _ = merge.add_argument("new", type=Path, help="Newly generated catalog")
    _ = merge.add_argument("old", type=Path, help="Previous catalog")
    _ = merge.add_argument(
        "-o", "--output", type=Path, required=True, help="Where to write the result"
    )

    reconcile = subparsers.add_parser(
        "reconcile",
        help="Bring the generated default-language catalog up to the product version",
    )
    _ = reconcile.add_argument(
        "--scan",
        type=Path,
        default=None,
        help="Catalog produced by scanning the current code",
        metavar="FILE",
    )

    resolve = subparsers.add_parser("resolve", help="Resolve one string id")
    _ = resolve.add_argument("unit_id", metavar="ID", help="String id to resolve")
    _ = resolve.add_argument(
        "--lang",
        dest="languages",
        action="append",
        default=[],
        help="Preferred language (repeat for a fallback chain)",
        metavar="L",
    )
    _ = resolve.add_argument(
        "--fallback",
        default=None,
        help="Default-language text supplied by the caller",
        metavar="TEXT",
    )

    _ = subparsers.add_parser("languages", help="List available language tags")

    sample = subparsers.add_parser(
        "sample-config", help="Write a documented sample configuration file"
    )
    _ = sample.add_argument("path", type=Path, help="Where to write the sample")

    return parser


def parse_arguments(args: list[str] | None = None) -> ParsedArgs:
    """
    Parse command-line arguments.

    Args:
        args: List of arguments to parse (defaults to sys.argv[1:])

    Returns:
        ParsedArgs with validated global paths and the subcommand options

    Raises:
        SystemExit: If argument parsing fails, a path is invalid, or --help
            is requested
    """
    parser = create_argument_parser()
    parsed = parser.parse_args(args)

    command: str = getattr(parsed, "command", "")
    config_file_str: str = getattr(parsed, "config_file", "")
    log_file_str: str | None = getattr(parsed, "log_file", None)

    try:
        config_file = validate_file_path(config_file_str, "config file")
        log_file = (
            validate_file_path(log_file_str, "log file") if log_file_str else None
        )
    except PathValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    return ParsedArgs(
        command=command,
        config_file=config_file,
        log_file=log_file,
        verbose=bool(getattr(parsed, "verbose", False)),
        options=parsed,
    )
