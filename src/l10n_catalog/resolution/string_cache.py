"""
Per-language string index for one application.

The cache owns one Document per known language and answers exact lookups
by (language, id). It is not synchronized; LocalizationManager serializes
access to it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from ..catalog.model import DEFAULT_LANGUAGE, Document, Unit, Variant
from .remapper import find_orphan_translation

logger = logging.getLogger(__name__)

REAL_NEWLINE = "\n"


def id_note(unit_id: str) -> str:
    return f"ID: {unit_id}"


class LocalizedStringCache:
    """Index of documents by language with newline and dynamic-id handling."""

    def __init__(
        self,
        documents: Mapping[str, Document] | Iterable[Document],
        default_language: str = DEFAULT_LANGUAGE,
    ) -> None:
        self.default_language: str = default_language
        self._documents: dict[str, Document] = {}
        self._modified: set[str] = set()
        self._revisions: dict[str, int] = {}

        items = documents.values() if isinstance(documents, Mapping) else documents
        for document in items:
            self._documents[document.language] = document

        if default_language not in self._documents:
            logger.debug(f"No {default_language} catalog loaded, starting empty")
            self._documents[default_language] = Document(source_language=default_language)

        logger.debug(
            f"String cache built for languages: {', '.join(self.languages)}"
        )

    @property
    def languages(self) -> list[str]:
        """Known language tags, default language first."""
        others = sorted(lang for lang in self._documents if lang != self.default_language)
        return [self.default_language, *others]

    @property
    def default_document(self) -> Document:
        return self._documents[self.default_language]

    def document(self, language: str) -> Document | None:
        return self._documents.get(language)

    def set_document(self, document: Document) -> None:
        self._documents[document.language] = document
        self._revisions[document.language] = self.revision(document.language) + 1
        self._modified.discard(document.language)

    @property
    def modified_languages(self) -> list[str]:
        return sorted(self._modified)

    def revision(self, language: str) -> int:
        """Counter bumped on every change to the language's document."""
        return self._revisions.get(language, 0)

    def _touch(self, language: str) -> None:
        self._modified.add(language)
        self._revisions[language] = self.revision(language) + 1

    def mark_saved(self, language: str, revision: int | None = None) -> bool:
        """
        Clear the unsaved flag of ``language``.

        When ``revision`` is given, the flag is only cleared if the document
        has not changed since that revision was taken.

        Returns:
            True if the language is no longer pending
        """
        if revision is not None and revision != self.revision(language):
            return False
        self._modified.discard(language)
        return True

    def _line_break_token(self, document: Document) -> str | None:
        return (
            document.hard_line_break_replacement
            or self.default_document.hard_line_break_replacement
        )

    def decode_newlines(self, document: Document, text: str) -> str:
        """Replace the document's line-break token with a real newline."""
        token = self._line_break_token(document)
        if not token:
            return text
        return text.replace(token, REAL_NEWLINE)

    def encode_newlines(self, document: Document, text: str) -> str:
        """Replace real newlines with the document's line-break token."""
        token = self._line_break_token(document)
        if not token:
            return text
        return text.replace("\r\n", REAL_NEWLINE).replace(REAL_NEWLINE, token)

    def get_default_text(self, unit_id: str) -> str | None:
        """Stored default-language source text for ``unit_id``."""
        unit = self.default_document.get_unit(unit_id)
        if unit is None or unit.source is None:
            return None
        return self.decode_newlines(self.default_document, unit.source.text)

    def get_translation(self, language: str, unit_id: str) -> str | None:
        """
        Exact lookup of a non-empty translation.

        Returns:
            The target text for ``unit_id`` in ``language``, or None when the
            language is unknown, the id is missing or the target is empty
        """
        document = self._documents.get(language)
        if document is None:
            return None
        unit = document.get_unit(unit_id)
        if unit is None or not unit.has_translation:
            return None
        return self.decode_newlines(document, unit.target_text)

    def get_value_for_exact_language(self, language: str, unit_id: str) -> str | None:
        """Raw stored value (line-break tokens intact) for one language."""
        document = self._documents.get(language)
        if document is None:
            return None
        unit = document.get_unit(unit_id)
        if unit is None:
            return None
        if language == self.default_language:
            return unit.source_text
        return unit.target_text if unit.target is not None else None

    def find_remapped_translation(
        self, language: str, unit_id: str, default_text: str | None
    ) -> str | None:
        """Recover a translation through a renamed (orphan) id."""
        if language == self.default_language:
            return None
        document = self._documents.get(language)
        if document is None:
            return None
        if default_text is None:
            default_text = self.get_default_text(unit_id)
        if default_text is None:
            return None

        translation = find_orphan_translation(
            unit_id,
            document,
            self.default_document,
            self.encode_newlines(self.default_document, default_text),
        )
        if translation is None:
            return None
        return self.decode_newlines(document, translation)

    def record_dynamic(
        self, unit_id: str, default_text: str, comment: str | None = None
    ) -> bool:
        """
        Record an id discovered at runtime in the default-language document.

        Unknown ids get a new dynamic unit. Known ids whose stored source
        differs from ``default_text`` have their source replaced; the target
        and notes are kept.

        Returns:
            True if the default-language document changed
        """
        document = self.default_document
        text = self.encode_newlines(document, default_text)
        unit = document.get_unit(unit_id)

        if unit is None:
            notes = [id_note(unit_id)]
            if comment:
                notes.append(comment)
            _ = document.add_unit(
                Unit(
                    id=unit_id,
                    source=Variant(self.default_language, text),
                    dynamic=True,
                    notes=notes,
                )
            )
            self._touch(self.default_language)
            logger.debug(f"Recorded dynamic id {unit_id!r}")
            return True

        if unit.source_text != text:
            unit.source = Variant(self.default_language, text)
            self._touch(self.default_language)
            logger.debug(f"Updated default text of {unit_id!r}")
            return True

        return False

    def update_text(self, unit_id: str, text: str, language: str) -> bool:
        """
        Store text for ``unit_id`` in ``language``.

        The default language updates the source text; other languages set
        the target, creating the language document and unit if needed.

        Returns:
            True if a document changed
        """
        if language == self.default_language:
            return self.record_dynamic(unit_id, text)

        document = self._documents.get(language)
        if document is None:
            default_document = self.default_document
            document = Document(
                source_language=self.default_language,
                target_language=language,
                product_version=default_document.product_version,
                original=default_document.original,
            )
            self._documents[language] = document
            logger.info(f"Created catalog for new language {language}")

        encoded = self.encode_newlines(document, text)
        unit = document.get_unit(unit_id)
        if unit is None:
            default_unit = self.default_document.get_unit(unit_id)
            unit = Unit(
                id=unit_id,
                source=Variant(
                    self.default_language,
                    default_unit.source_text if default_unit is not None else "",
                ),
                dynamic=default_unit.dynamic if default_unit is not None else True,
                notes=[id_note(unit_id)],
            )
            _ = document.add_unit(unit)
        elif unit.target is not None and unit.target.text == encoded:
            return False

        unit.target = Variant(language, encoded)
        self._touch(language)
        return True
