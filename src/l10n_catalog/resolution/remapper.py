"""
Identifier remapping for renamed ids.

When an id has no translation in a language, that language's document may
still hold the translation under an older id. Such an "orphan" is a unit
whose id is no longer in the default-language document but whose recorded
source text equals the current default text of the id being resolved.
"""

from __future__ import annotations

import logging

from ..catalog.model import Document, Unit

logger = logging.getLogger(__name__)


def find_orphans(
    language_doc: Document, default_doc: Document, default_text: str
) -> list[Unit]:
    """
    List translated orphans in ``language_doc`` whose source matches.

    Args:
        language_doc: Document for the language being resolved
        default_doc: Authoritative default-language document
        default_text: Current default-language text of the wanted id

    Returns:
        Orphan units with a non-empty translation, in body order
    """
    return [
        unit
        for unit in language_doc
        if unit.id not in default_doc
        and unit.source_text == default_text
        and unit.has_translation
    ]


def find_orphan_translation(
    unit_id: str,
    language_doc: Document,
    default_doc: Document,
    default_text: str | None,
) -> str | None:
    """
    Recover a translation for ``unit_id`` from a uniquely matching orphan.

    Returns:
        The orphan's target text, or None when there is no default text to
        match against, no orphan matches, or several do
    """
    if not default_text:
        return None

    orphans = find_orphans(language_doc, default_doc, default_text)
    if len(orphans) != 1:
        if orphans:
            logger.debug(
                f"Not remapping {unit_id!r}: {len(orphans)} orphans in "
                f"{language_doc.language} share its text"
            )
        return None

    orphan = orphans[0]
    logger.debug(
        f"Remapped {unit_id!r} to orphan {orphan.id!r} in {language_doc.language}"
    )
    return orphan.target_text
