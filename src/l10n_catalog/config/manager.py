"""Configuration manager for l10n-catalog.

This module provides functionality for loading, validating, and saving
YAML configuration files with Pydantic model validation.
"""

import logging
import tempfile
from pathlib import Path

import yaml

from ..utils.core.exceptions import ConfigurationError
from ..utils.core.version import get_version
from .schema import L10nCatalogConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """
    Configuration manager for handling YAML config files with Pydantic validation.

    Relative storage directories are resolved against the directory holding
    the configuration file.
    """

    @staticmethod
    def load_config(config_path: Path) -> L10nCatalogConfig:
        """
        Load and validate configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            L10nCatalogConfig: Validated configuration object

        Raises:
            FileNotFoundError: If the config file doesn't exist
            yaml.YAMLError: If the YAML syntax is invalid
            ConfigurationError: If the file is not a YAML mapping
            ValidationError: If the configuration fails Pydantic validation
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as f:
                raw_config_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if raw_config_data is None:
            config_data: dict[str, object] = {}
        elif isinstance(raw_config_data, dict):
            config_data = raw_config_data  # pyright: ignore[reportUnknownVariableType]
        else:
            raise ConfigurationError(
                f"Configuration file must contain a YAML dictionary, got {type(raw_config_data).__name__}",
                context=config_path,
            )

        config = L10nCatalogConfig.model_validate(config_data)
        return ConfigManager._resolve_paths(config, config_path.parent)

    @staticmethod
    def _resolve_paths(config: L10nCatalogConfig, base_dir: Path) -> L10nCatalogConfig:
        """Make relative storage directories relative to ``base_dir``."""
        storage = config.storage

        def resolve(path: Path) -> Path:
            path = path.expanduser()
            return path if path.is_absolute() else base_dir / path

        resolved = storage.model_copy(
            update={
                "installed_dir": resolve(storage.installed_dir),
                "generated_dir": resolve(storage.generated_dir),
                "user_modified_dir": (
                    resolve(storage.user_modified_dir)
                    if storage.user_modified_dir is not None
                    else None
                ),
            }
        )
        return config.model_copy(update={"storage": resolved})

    @staticmethod
    def save_config(config: L10nCatalogConfig, config_path: Path) -> None:
        """
        Save configuration to a YAML file with atomic operation.

        Args:
            config: Configuration object to save
            config_path: Path where to save the configuration

        Raises:
            OSError: If file operations fail
            yaml.YAMLError: If YAML serialization fails
        """
        config_dict = config.model_dump(mode="json")

        content_to_write = yaml.dump(
            config_dict,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
            indent=2,
        )

        # Atomic save operation using temporary file
        temp_file = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=config_path.parent,
                prefix=f".{config_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as temp_file:
                _ = temp_file.write(content_to_write)
                temp_file.flush()
                temp_path = Path(temp_file.name)

            # Atomic move
            _ = temp_path.replace(config_path)

        except Exception as e:
            # Clean up temporary file if it exists
            if temp_file and Path(temp_file.name).exists():
                Path(temp_file.name).unlink(missing_ok=True)
            raise OSError(f"Failed to save configuration to {config_path}: {e}") from e

    @staticmethod
    def product_version(config: L10nCatalogConfig) -> str:
        """Configured product version, or the installed package version."""
        return config.catalog.product_version or get_version()

    @staticmethod
    def create_sample_config(sample_path: Path) -> None:
        """
        Create a sample configuration file with all options and documentation.

        Args:
            sample_path: Path where to create the sample configuration file
        """
        _ = sample_path.parent.mkdir(parents=True, exist_ok=True)
        _ = sample_path.write_text(ConfigManager._generate_sample_content(), encoding="utf-8")
        logger.info(f"Wrote sample configuration to {sample_path}")

    @staticmethod
    def _generate_sample_content() -> str:
        """
        Generate sample configuration file content with documentation.

        Returns:
            str: Sample configuration file content
        """
        return """# l10n-catalog Configuration File
# Copy this file to config.yml and modify the values as needed.
# Relative directories are resolved against the directory of this file.

# ============================================================================
# Application Catalog
# ============================================================================

catalog:
  # Application identifier, used in catalog file names
  app_id: "myapp"
  # Human-readable application name
  app_name: "My Application"
  # Source language of the strings in the application's code
  default_language: en
  # Current product version (leave unset to use the installed package version)
  # product_version: "1.0.0"

# ============================================================================
# Storage Tiers
# ============================================================================

storage:
  # Read-only catalogs shipped with the application
  installed_dir: "localization"
  # Writable cache for the generated default-language catalog
  generated_dir: "localization/generated"
  # Translator overrides, preferred over everything else
  user_modified_dir: "localization/user"
  # Catalog file name template
  file_name_template: "{app_id}.{language}.po"

# ============================================================================
# Localization
# ============================================================================

localization:
  # Language used for the user interface
  ui_language: en
  # Ordered fallback chain; leave empty to use only the UI language
  preferred_languages: []
"""
