"""
Catalog data model: variants, translation units and documents.

A Document holds the translatable units for one source language and an
optional target language. Units are keyed by id and keep insertion order,
which is the order they are written back out in.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from typing import override

from ..utils.core.exceptions import CatalogValidationError, DuplicateUnitError

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"


@dataclass
class Variant:
    """A piece of text in one language."""

    lang: str
    text: str = ""

    def __post_init__(self) -> None:
        if not self.lang:
            raise CatalogValidationError(
                "Variant must have a language tag", context=self.text
            )


@dataclass(eq=False)
class Unit:
    """
    One translatable entry.

    ``target`` is None until a translation exists; a target whose text is
    the empty string is a distinct, recorded state. The first note is by
    convention the identifying tag written by the scanner ("ID: <id>").
    """

    id: str = ""
    source: Variant | None = None
    target: Variant | None = None
    approved: bool = False
    dynamic: bool = False
    notes: list[str] = field(default_factory=list)
    priority: str | None = None
    group: str | None = None
    category: str | None = None

    def __post_init__(self) -> None:
        if self.is_empty:
            return
        if not self.id:
            raise CatalogValidationError(
                "Unit id must not be empty", context=self.notes
            )
        if self.source is None:
            raise CatalogValidationError(
                f"Unit {self.id!r} has no source variant", context=self.id
            )

    @classmethod
    def empty(cls) -> Unit:
        """The sentinel unit: no id, no notes, no source, no target."""
        return cls()

    @property
    def is_empty(self) -> bool:
        return (
            not self.id
            and not self.notes
            and self.source is None
            and self.target is None
        )

    @property
    def source_text(self) -> str:
        return self.source.text if self.source is not None else ""

    @property
    def target_text(self) -> str:
        return self.target.text if self.target is not None else ""

    @property
    def has_translation(self) -> bool:
        """True when a target exists and its text is not empty."""
        return self.target is not None and bool(self.target.text)

    def add_note(self, text: str) -> None:
        self.notes.append(text)

    def variant_for(self, lang: str) -> Variant | None:
        """Get the source or target variant recorded for ``lang``."""
        if self.source is not None and self.source.lang == lang:
            return self.source
        if self.target is not None and self.target.lang == lang:
            return self.target
        return None

    def set_variant(self, lang: str, text: str) -> None:
        """
        Add or replace the variant for ``lang``.

        The source language of the unit is fixed by its source variant; any
        other language replaces the target.
        """
        variant = Variant(lang, text)
        if self.source is None or self.source.lang == lang:
            self.source = variant
        else:
            self.target = variant

    def copy(self) -> Unit:
        """Deep copy; variants and the note list are not shared."""
        return replace(
            self,
            source=replace(self.source) if self.source is not None else None,
            target=replace(self.target) if self.target is not None else None,
            notes=list(self.notes),
        )

    @override
    def __str__(self) -> str:
        return "Empty" if self.is_empty else self.id


class Document:
    """
    A catalog for one (source language, optional target language) pair.

    Units are stored by id in body order. Adding a second unit with an id
    already present raises DuplicateUnitError; empty sentinel units are
    dropped.
    """

    def __init__(
        self,
        source_language: str = DEFAULT_LANGUAGE,
        target_language: str | None = None,
        product_version: str = "",
        hard_line_break_replacement: str | None = None,
        original: str = "",
        units: Iterable[Unit] = (),
    ) -> None:
        if not source_language:
            raise CatalogValidationError("Document must declare a source language")
        self.source_language: str = source_language
        self.target_language: str | None = target_language
        self.product_version: str = product_version
        self.hard_line_break_replacement: str | None = hard_line_break_replacement
        self.original: str = original
        self._units: dict[str, Unit] = {}
        for unit in units:
            _ = self.add_unit(unit)

    @property
    def language(self) -> str:
        """The language this document provides text for."""
        return self.target_language or self.source_language

    @property
    def units(self) -> list[Unit]:
        return list(self._units.values())

    @property
    def is_empty(self) -> bool:
        return not self._units

    def ids(self) -> list[str]:
        return list(self._units)

    def get_unit(self, unit_id: str) -> Unit | None:
        return self._units.get(unit_id)

    def add_unit(self, unit: Unit) -> bool:
        """
        Append a unit whose id is not yet present.

        Returns:
            True if the unit was added, False if it was the empty sentinel

        Raises:
            DuplicateUnitError: If a unit with the same id already exists
        """
        if unit.is_empty:
            logger.debug("Ignoring empty unit")
            return False
        if unit.id in self._units:
            raise DuplicateUnitError(unit.id, context=self.language)
        self._units[unit.id] = unit
        return True

    def add_or_replace(self, unit: Unit) -> bool:
        """
        Insert a unit, or overwrite the unit with the same id in place.

        Existing ids keep their body position; new ids are appended.
        """
        if unit.is_empty:
            logger.debug("Ignoring empty unit")
            return False
        self._units[unit.id] = unit
        return True

    def remove(self, unit_id: str) -> Unit | None:
        return self._units.pop(unit_id, None)

    def copy_metadata(self) -> Document:
        """A new, empty document with the same file-level metadata."""
        return Document(
            source_language=self.source_language,
            target_language=self.target_language,
            product_version=self.product_version,
            hard_line_break_replacement=self.hard_line_break_replacement,
            original=self.original,
        )

    def copy(self) -> Document:
        document = self.copy_metadata()
        for unit in self._units.values():
            _ = document.add_unit(unit.copy())
        return document

    def __contains__(self, unit_id: object) -> bool:
        return unit_id in self._units

    def __iter__(self) -> Iterator[Unit]:
        return iter(list(self._units.values()))

    def __len__(self) -> int:
        return len(self._units)

    @override
    def __repr__(self) -> str:
        return (
            f"Document(language={self.language!r}, "
            f"product_version={self.product_version!r}, units={len(self)})"
        )
