"""
Merging of a freshly scanned catalog with a previously persisted one.

The merge keeps translator work (targets) from the old document, takes
source text and dynamic flags from the new document, and leaves notes that
explain what changed between the two product versions.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import override

from .model import Document, Unit

logger = logging.getLogger(__name__)

OLD_NOTE_PREFIX = "[OLD NOTE] "
OLD_TEXT_PREFIX = "OLD TEXT"

ProgressCallback = Callable[[int, int], None]


def missing_static_note(version: str) -> str:
    return f"Not found in static scan of compiled code (version {version})"


def missing_dynamic_note(version: str) -> str:
    return f"Not found when running compiled program (version {version})"


def now_static_note(version: str) -> str:
    return f"Not dynamic: found in static scan of compiled code (version {version})"


def old_text_note(version: str, old_text: str) -> str:
    return f"{OLD_TEXT_PREFIX} (before {version}): {old_text}"


class MergeSummary:
    """Counts of what a merge did, for logging and progress reporting."""

    def __init__(self) -> None:
        self.added: int = 0
        self.unchanged: int = 0
        self.source_changed: int = 0
        self.became_static: int = 0
        self.missing: int = 0

    @property
    def total(self) -> int:
        return self.added + self.unchanged + self.source_changed + self.missing

    @override
    def __str__(self) -> str:
        return (
            f"Merge Results: "
            f"{self.added} added, "
            f"{self.unchanged} unchanged, "
            f"{self.source_changed} source changed, "
            f"{self.became_static} no longer dynamic, "
            f"{self.missing} missing from scan"
        )


def _carry_old_notes(new_unit: Unit, old_unit: Unit) -> list[str]:
    """Notes of the new unit followed by the old unit's notes, marked as old."""
    notes = list(new_unit.notes)
    for note in old_unit.notes:
        if note in new_unit.notes:
            # Identifying "ID: ..." tags are already present in the new notes.
            continue
        if note.startswith((OLD_NOTE_PREFIX, OLD_TEXT_PREFIX)):
            notes.append(note)
        else:
            notes.append(f"{OLD_NOTE_PREFIX}{note}")
    return notes


def merge_unit(new_unit: Unit, old_unit: Unit, version: str) -> tuple[Unit, bool, bool]:
    """
    Merge one unit present in both documents.

    Args:
        new_unit: Unit from the fresh scan (authoritative source, flags, notes)
        old_unit: Unit from the persisted document (authoritative target)
        version: Product version of the new document

    Returns:
        Tuple of (merged unit, source text changed, became static)
    """
    merged = new_unit.copy()
    merged.target = old_unit.copy().target

    source_changed = new_unit.source_text != old_unit.source_text
    if source_changed:
        merged.notes = _carry_old_notes(new_unit, old_unit)
        merged.add_note(old_text_note(version, old_unit.source_text))
        logger.debug(f"Source text of {new_unit.id!r} changed since {version}")

    became_static = old_unit.dynamic and not new_unit.dynamic
    if became_static:
        merged.add_note(now_static_note(version))
        logger.debug(f"{new_unit.id!r} is now found by the static scan")

    return merged, source_changed, became_static


def merge_documents(
    new_doc: Document,
    old_doc: Document,
    report_progress: ProgressCallback | None = None,
) -> Document:
    """
    Combine a freshly scanned document with a persisted one.

    The merged document carries the new document's file-level metadata. Its
    body lists the new document's units in order, then units only found in
    the old document, in old order. Neither input is modified.

    Args:
        new_doc: Document produced by the current scan
        old_doc: Previously persisted document
        report_progress: Optional callback receiving (processed, total)

    Returns:
        The merged document
    """
    version = new_doc.product_version
    merged = new_doc.copy_metadata()
    summary = MergeSummary()

    old_only = [unit for unit in old_doc if unit.id not in new_doc]
    total = len(new_doc) + len(old_only)
    processed = 0

    for new_unit in new_doc:
        old_unit = old_doc.get_unit(new_unit.id)
        if old_unit is None:
            _ = merged.add_unit(new_unit.copy())
            summary.added += 1
        else:
            unit, source_changed, became_static = merge_unit(new_unit, old_unit, version)
            _ = merged.add_unit(unit)
            if source_changed:
                summary.source_changed += 1
            else:
                summary.unchanged += 1
            if became_static:
                summary.became_static += 1

        processed += 1
        if report_progress is not None:
            report_progress(processed, total)

    for old_unit in old_only:
        retained = old_unit.copy()
        if old_unit.dynamic:
            retained.add_note(missing_dynamic_note(version))
        else:
            retained.add_note(missing_static_note(version))
        _ = merged.add_unit(retained)
        summary.missing += 1
        logger.debug(f"{old_unit.id!r} not found in scan for version {version}")

        processed += 1
        if report_progress is not None:
            report_progress(processed, total)

    logger.info(str(summary))
    return merged
