"""
Gettext PO codec for catalog documents.

Each unit becomes one PO entry: the unit id is the message context, the
source text the msgid and the translation the msgstr. Notes are written as
extracted comments, one note per line, and unit attributes as flags.
Blank notes have no comment line; an ``empty-notes`` flag lists their
positions.

Usage Examples:
    >>> from l10n_catalog.catalog.codec import parse, serialize
    >>> document = parse(path.read_bytes())
    >>> _ = path.write_bytes(serialize(document))
"""

from __future__ import annotations

import logging
from typing import Protocol

import polib

from ..utils.core.exceptions import CatalogParseError
from .model import DEFAULT_LANGUAGE, Document, Unit, Variant

logger = logging.getLogger(__name__)

SOURCE_LANGUAGE_HEADER = "X-Source-Language"
PRODUCT_VERSION_HEADER = "X-Product-Version"
LINE_BREAK_HEADER = "X-Hard-Line-Break-Replacement"
ORIGINAL_HEADER = "X-Original"

DYNAMIC_FLAG = "dynamic"
APPROVED_FLAG = "approved"
EMPTY_TARGET_FLAG = "empty-target"
EMPTY_NOTES_FLAG = "empty-notes"
VALUE_FLAGS = ("priority", "group", "category")


class DocumentCodec(Protocol):
    """Converts documents to and from their persisted bytes."""

    def parse(self, data: bytes) -> Document: ...

    def serialize(self, document: Document) -> bytes: ...


def _split_value_flags(flags: list[str]) -> dict[str, str]:
    values: dict[str, str] = {}
    for flag in flags:
        key, separator, value = flag.partition(":")
        if separator and key.strip() in VALUE_FLAGS:
            values[key.strip()] = value.strip()
    return values


def _empty_note_positions(flags: list[str]) -> list[int]:
    """Positions listed by an ``empty-notes: 1 3`` flag, ascending."""
    for flag in flags:
        key, separator, value = flag.partition(":")
        if not separator or key.strip() != EMPTY_NOTES_FLAG:
            continue
        positions: list[int] = []
        for part in value.split():
            try:
                positions.append(int(part))
            except ValueError:
                logger.warning(f"Ignoring invalid empty note position {part!r}")
        return sorted(position for position in positions if position >= 0)
    return []


def _entry_to_unit(entry: polib.POEntry, document: Document) -> Unit:
    flags: list[str] = [flag.strip() for flag in entry.flags]
    values = _split_value_flags(flags)

    target: Variant | None = None
    if document.target_language is not None and (
        entry.msgstr or EMPTY_TARGET_FLAG in flags
    ):
        target = Variant(document.target_language, entry.msgstr)

    notes = [note for note in entry.comment.split("\n") if note.strip()] if entry.comment else []
    for position in _empty_note_positions(flags):
        notes.insert(min(position, len(notes)), "")

    return Unit(
        id=entry.msgctxt or "",
        source=Variant(document.source_language, entry.msgid),
        target=target,
        approved=APPROVED_FLAG in flags,
        dynamic=DYNAMIC_FLAG in flags,
        notes=notes,
        priority=values.get("priority"),
        group=values.get("group"),
        category=values.get("category"),
    )


def _unit_to_entry(unit: Unit) -> polib.POEntry:
    flags: list[str] = []
    if unit.dynamic:
        flags.append(DYNAMIC_FLAG)
    if unit.approved:
        flags.append(APPROVED_FLAG)
    if unit.target is not None and not unit.target.text:
        flags.append(EMPTY_TARGET_FLAG)
    for key in VALUE_FLAGS:
        value: str | None = getattr(unit, key)
        if value:
            flags.append(f"{key}: {value}")

    # Notes are one per comment line; blank notes are kept as positions.
    notes = [note.replace("\r\n", " ").replace("\n", " ") for note in unit.notes]
    blank = [str(position) for position, note in enumerate(notes) if not note.strip()]
    if blank:
        flags.append(f"{EMPTY_NOTES_FLAG}: {' '.join(blank)}")

    return polib.POEntry(
        msgctxt=unit.id,
        msgid=unit.source_text,
        msgstr=unit.target_text,
        comment="\n".join(note for note in notes if note.strip()),
        flags=flags,
    )


def parse(data: bytes) -> Document:
    """
    Parse PO bytes into a Document.

    Args:
        data: UTF-8 encoded PO file content

    Returns:
        The decoded document

    Raises:
        CatalogParseError: If the data is empty or not a valid PO file
        CatalogValidationError: If an entry lacks an id or ids repeat
    """
    if not data.strip():
        raise CatalogParseError("Catalog data is empty")

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CatalogParseError(f"Catalog is not valid UTF-8: {e}") from e

    try:
        po = polib.pofile(text, encoding="utf-8", wrapwidth=0)
    except (OSError, ValueError) as e:
        raise CatalogParseError(f"Invalid PO catalog: {e}") from e

    metadata: dict[str, str] = po.metadata
    source_language = metadata.get(SOURCE_LANGUAGE_HEADER) or DEFAULT_LANGUAGE
    language = metadata.get("Language") or source_language

    document = Document(
        source_language=source_language,
        target_language=language if language != source_language else None,
        product_version=metadata.get(PRODUCT_VERSION_HEADER, ""),
        hard_line_break_replacement=metadata.get(LINE_BREAK_HEADER) or None,
        original=metadata.get(ORIGINAL_HEADER, ""),
    )

    for entry in po:
        if entry.obsolete:
            continue
        _ = document.add_unit(_entry_to_unit(entry, document))

    logger.debug(f"Parsed {len(document)} units for language {document.language}")
    return document


def serialize(document: Document) -> bytes:
    """
    Serialize a Document to UTF-8 PO bytes.

    Args:
        document: Document to write

    Returns:
        PO file content
    """
    po = polib.POFile(wrapwidth=0, encoding="utf-8")
    po.metadata = {
        "Project-Id-Version": document.original or "",
        "MIME-Version": "1.0",
        "Content-Type": "text/plain; charset=UTF-8",
        "Content-Transfer-Encoding": "8bit",
        "Language": document.language,
        SOURCE_LANGUAGE_HEADER: document.source_language,
        PRODUCT_VERSION_HEADER: document.product_version,
        ORIGINAL_HEADER: document.original,
    }
    if document.hard_line_break_replacement:
        po.metadata[LINE_BREAK_HEADER] = document.hard_line_break_replacement

    for unit in document:
        po.append(_unit_to_entry(unit))

    return str(po).encode("utf-8")


class PoCatalogCodec:
    """DocumentCodec implementation for gettext PO files."""

    extension: str = ".po"

    def parse(self, data: bytes) -> Document:
        return parse(data)

    def serialize(self, document: Document) -> bytes:
        return serialize(document)
