"""
l10n-catalog - versioned translatable-string catalogs with merge, version
reconciliation and multi-language string resolution.
"""

import sys

from .main import main as cli_main


def main() -> None:
    """Console-script entry point; exits with the command's status code."""
    try:
        sys.exit(cli_main())
    except KeyboardInterrupt:
        import logging

        logger = logging.getLogger(__name__)
        logger.info("Interrupted by user")
        sys.exit(1)


__all__ = ["main"]
