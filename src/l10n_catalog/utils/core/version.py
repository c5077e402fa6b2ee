"""
Version utilities for l10n-catalog.

This module provides the project's own version (read from package metadata
with a pyproject.toml fallback) and the product-version comparison used when
deciding whether a generated catalog is out of date.
"""

import logging
import tomllib
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from packaging.version import InvalidVersion, Version

logger = logging.getLogger(__name__)

DISTRIBUTION_NAME = "l10n-catalog"


@lru_cache(maxsize=1)
def get_project_version() -> str:
    """
    Get the project version from installed metadata or pyproject.toml.

    Returns:
        Version string (e.g., "1.0.0")

    Raises:
        RuntimeError: If version cannot be determined from any source
    """
    try:
        return version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        # Package might not be installed, fallback to pyproject.toml
        logger.debug("importlib.metadata failed, falling back to pyproject.toml")

    return _read_version_from_pyproject()


def _read_version_from_pyproject() -> str:
    """Read version from the nearest pyproject.toml."""
    pyproject_path = Path("pyproject.toml")

    if not pyproject_path.exists():
        # Try relative to this file's location (src/l10n_catalog/utils/core)
        pyproject_path = Path(__file__).parents[4] / "pyproject.toml"

    if not pyproject_path.exists():
        raise RuntimeError("pyproject.toml not found")

    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)

        project_data = data.get("project")
        if not isinstance(project_data, dict):
            raise KeyError("project section not found or invalid")

        project_version = project_data.get("version")
        if not isinstance(project_version, str):
            raise KeyError("version field not found or not a string")

        return project_version
    except (KeyError, OSError, tomllib.TOMLDecodeError) as e:
        raise RuntimeError(f"Failed to read version from pyproject.toml: {e}") from e


def get_version() -> str:
    """Get the project version with error handling."""
    try:
        return get_project_version()
    except RuntimeError:
        logger.warning("Could not determine project version, using fallback")
        return "0.0.0"


def parse_version(text: str | None) -> Version | None:
    """
    Parse a product version string.

    Args:
        text: Version string such as "3.1.4" or "2.1.0-beta"

    Returns:
        The parsed version, or None when the string is empty or not a valid
        version
    """
    if text is None or not text.strip():
        return None

    try:
        return Version(text)
    except InvalidVersion:
        return None


def is_up_to_date(recorded: str | None, current: str) -> bool:
    """
    Check whether a recorded product version is at least the current one.

    Identical version strings are always up to date. Otherwise an unparsable
    recorded version counts as older than any current version, and an
    unparsable current version cannot be satisfied either.
    """
    if recorded is not None and recorded.strip() == current.strip():
        return True

    recorded_version = parse_version(recorded)
    if recorded_version is None:
        logger.warning(
            f"Unparsable recorded product version {recorded!r}, treating as outdated"
        )
        return False

    current_version = parse_version(current)
    if current_version is None:
        logger.warning(
            f"Unparsable current product version {current!r}, treating catalog as outdated"
        )
        return False

    return recorded_version >= current_version
