"""
Main entry point for the l10n-catalog command-line tool.

This module sets up logging, loads the configuration, dispatches to the
subcommand handlers and maps handled errors to exit codes.
"""

import argparse
import logging
import logging.handlers
import sys
from collections.abc import Callable
from pathlib import Path

import yaml
from pydantic import ValidationError

from .catalog.codec import PoCatalogCodec
from .catalog.merger import merge_documents
from .catalog.model import Document
from .catalog.reconciler import ScanFunction
from .config.manager import ConfigManager
from .config.schema import L10nCatalogConfig
from .storage.layers import CatalogStore
from .utils.cli.args import ParsedArgs, parse_arguments
from .utils.core.exceptions import L10nCatalogError

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    """
    Configure the root logger for command-line use.

    Console output goes to stderr so that command results on stdout stay
    clean. When ``log_file`` is given, a size-rotated file handler records
    everything at DEBUG level.

    Args:
        verbose: Log DEBUG messages on the console
        log_file: Optional path of a rotating log file
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers
    root_logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
    )
    simple_formatter = logging.Formatter("%(levelname)s - %(message)s")

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(simple_formatter)
    root_logger.addHandler(console_handler)

    if log_file is not None:
        _ = log_file.parent.mkdir(parents=True, exist_ok=True)
        # File handler with rotation (1MB max, keep 3 backups)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(file_handler)


def _build_store(config: L10nCatalogConfig) -> CatalogStore:
    return CatalogStore(
        app_id=config.catalog.app_id,
        installed_dir=config.storage.installed_dir,
        generated_dir=config.storage.generated_dir,
        user_modified_dir=config.storage.user_modified_dir,
        file_name_template=config.storage.file_name_template,
        default_language=config.catalog.default_language,
    )


def _report_progress(done: int, total: int) -> None:
    logger.debug(f"Merged {done}/{total} units")


def run_merge(args: ParsedArgs) -> int:
    """Merge NEW with OLD and write the result to --output."""
    options: argparse.Namespace = args.options
    new_path: Path = options.new
    old_path: Path = options.old
    output_path: Path = options.output

    codec = PoCatalogCodec()
    new_document = codec.parse(new_path.read_bytes())
    old_document = codec.parse(old_path.read_bytes())

    merged = merge_documents(new_document, old_document, _report_progress)

    _ = output_path.parent.mkdir(parents=True, exist_ok=True)
    _ = output_path.write_bytes(codec.serialize(merged))
    print(f"Merged {len(merged)} units into {output_path}")
    return 0


def run_reconcile(args: ParsedArgs) -> int:
    """Reconcile the configured application's default-language catalog."""
    config = ConfigManager.load_config(args.config_file)
    store = _build_store(config)
    scan_path: Path | None = args.options.scan

    scan: ScanFunction | None = None
    if scan_path is not None:
        codec = store.codec
        source = scan_path

        def scan() -> Document:
            return codec.parse(source.read_bytes())

    result = store.reconcile_default(
        ConfigManager.product_version(config), scan, _report_progress
    )
    print(
        f"{result.action.value}: {store.generated_path(store.default_language)} "
        f"(version {result.document.product_version})"
    )
    return 0


def run_resolve(args: ParsedArgs) -> int:
    """Print the text and language a user would see for one id."""
    config = ConfigManager.load_config(args.config_file)
    store = _build_store(config)
    options: argparse.Namespace = args.options
    languages: list[str] = list(options.languages) or config.localization.fallback_chain

    with store.load_manager(
        config.catalog.app_name,
        ConfigManager.product_version(config),
        ui_language=config.localization.ui_language,
    ) as manager:
        resolved = manager.resolve(options.unit_id, languages, options.fallback)

    if resolved.text is None:
        logger.error(f"No text found for {options.unit_id!r}")
        return 1
    print(f"[{resolved.language}] {resolved.text}")
    return 0


def run_languages(args: ParsedArgs) -> int:
    """List the language tags with a catalog in any storage tier."""
    config = ConfigManager.load_config(args.config_file)
    store = _build_store(config)
    for language in store.available_languages():
        print(language)
    return 0


def run_sample_config(args: ParsedArgs) -> int:
    """Write a documented sample configuration file."""
    path: Path = args.options.path
    ConfigManager.create_sample_config(path)
    print(f"Sample configuration written to {path}")
    return 0


COMMANDS: dict[str, Callable[[ParsedArgs], int]] = {
    "merge": run_merge,
    "reconcile": run_reconcile,
    "resolve": run_resolve,
    "languages": run_languages,
    "sample-config": run_sample_config,
}


def main(argv: list[str] | None = None) -> int:
    """
    Run the command-line tool.

    Args:
        argv: Arguments to parse (defaults to sys.argv[1:])

    Returns:
        Process exit code: 0 on success, 1 on a handled error
    """
    args = parse_arguments(argv)
    setup_logging(args.verbose, args.log_file)

    handler = COMMANDS[args.command]
    logger.debug(f"Running {args.command} with config {args.config_file}")

    try:
        return handler(args)
    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
    except ValidationError as e:
        logger.error(f"Invalid configuration in {args.config_file}: {e}")
    except yaml.YAMLError as e:
        logger.error(f"Cannot read configuration: {e}")
    except L10nCatalogError as e:
        logger.error(f"{e.category.value} error: {e}")
    except OSError as e:
        logger.error(f"I/O error: {e}")
    except ValueError as e:
        logger.error(str(e))
    return 1
