"""Configuration loading and validation for l10n-catalog."""

from .manager import ConfigManager
from .schema import L10nCatalogConfig

__all__ = ["ConfigManager", "L10nCatalogConfig"]
