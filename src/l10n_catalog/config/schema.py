"""Configuration schema for l10n-catalog using nested Pydantic models."""

import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

LANGUAGE_TAG_PATTERN = re.compile(r"^[A-Za-z]{2,3}(-[A-Za-z0-9]+)*$")


def normalize_language_tag(value: str) -> str:
    """Validate a language tag and lower-case its primary subtag."""
    if not LANGUAGE_TAG_PATTERN.match(value):
        raise ValueError(f"Invalid language tag: {value!r}")
    primary, _, rest = value.partition("-")
    return f"{primary.lower()}-{rest}" if rest else primary.lower()


class CatalogConfig(BaseModel):
    """Application catalog identity."""

    app_id: str = Field(
        ...,
        description="Application identifier used in catalog file names",
        min_length=1,
    )
    app_name: str = Field(
        default="",
        description="Human-readable application name",
    )
    default_language: str = Field(
        default="en",
        description="Source language of the application's strings",
    )
    product_version: str | None = Field(
        default=None,
        description="Current product version; defaults to the installed package version",
    )

    @field_validator("app_id")
    @classmethod
    def validate_app_id(cls, v: str) -> str:
        """Reject ids that cannot be part of a file name."""
        if any(char in v for char in "/\\") or v.strip() != v:
            raise ValueError("app_id must not contain path separators or surrounding spaces")
        return v

    @field_validator("default_language")
    @classmethod
    def validate_default_language(cls, v: str) -> str:
        """Validate and normalize language code."""
        return normalize_language_tag(v)


class StorageConfig(BaseModel):
    """Catalog storage tiers."""

    installed_dir: Path = Field(
        ...,
        description="Directory of read-only catalogs shipped with the application",
    )
    generated_dir: Path = Field(
        ...,
        description="Writable directory for the generated default-language catalog",
    )
    user_modified_dir: Path | None = Field(
        default=None,
        description="Directory of translator-modified catalogs (highest priority)",
    )
    file_name_template: str = Field(
        default="{app_id}.{language}.po",
        description="Catalog file name template",
    )

    @field_validator("file_name_template")
    @classmethod
    def validate_file_name_template(cls, v: str) -> str:
        """Require both placeholders in the template."""
        if "{app_id}" not in v or "{language}" not in v:
            raise ValueError("file_name_template must contain {app_id} and {language}")
        return v


class LocalizationConfig(BaseModel):
    """Localization configuration."""

    ui_language: str = Field(
        default="en",
        description="Language code used for the user interface",
    )
    preferred_languages: list[str] = Field(
        default_factory=list,
        description="Ordered fallback chain of acceptable languages",
    )

    @field_validator("ui_language")
    @classmethod
    def validate_ui_language(cls, v: str) -> str:
        """Validate and normalize language code."""
        return normalize_language_tag(v)

    @field_validator("preferred_languages")
    @classmethod
    def validate_preferred_languages(cls, v: list[str]) -> list[str]:
        """Validate, normalize and de-duplicate the fallback chain."""
        normalized: list[str] = []
        for tag in v:
            language = normalize_language_tag(tag)
            if language not in normalized:
                normalized.append(language)
        return normalized

    @property
    def fallback_chain(self) -> list[str]:
        """Preferred languages, or just the UI language when none are set."""
        return list(self.preferred_languages) or [self.ui_language]


class L10nCatalogConfig(BaseModel):
    """Main configuration model for l10n-catalog."""

    catalog: CatalogConfig
    storage: StorageConfig
    localization: LocalizationConfig = Field(default_factory=LocalizationConfig)

    @model_validator(mode="after")
    def validate_tiers(self) -> "L10nCatalogConfig":
        """The installed tier is read-only and must not double as the generated one."""
        if self.storage.installed_dir == self.storage.generated_dir:
            raise ValueError("installed_dir and generated_dir must differ")
        return self
