"""
Version reconciliation for the default-language catalog.

At load time the generated (writable) default-language document is compared
with the running product version. Missing or empty generated documents are
replaced by a copy of the installed reference; outdated ones are re-merged
against a fresh scan and stamped with the current version.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import NamedTuple

from ..utils.core.version import is_up_to_date
from .merger import ProgressCallback, merge_documents
from .model import Document

logger = logging.getLogger(__name__)

ScanFunction = Callable[[], Document]


class ReconcileAction(Enum):
    """What the reconciler did to the generated document."""

    KEPT = "kept"
    COPIED_INSTALLED = "copied_installed"
    REGENERATED = "regenerated"
    SCANNED = "scanned"


class ReconcileResult(NamedTuple):
    """Outcome of reconciling the generated default-language document."""

    document: Document
    action: ReconcileAction

    @property
    def changed(self) -> bool:
        return self.action is not ReconcileAction.KEPT


def reconcile_default_document(
    installed: Document | None,
    generated: Document | None,
    current_version: str,
    scan: ScanFunction | None = None,
    report_progress: ProgressCallback | None = None,
) -> ReconcileResult:
    """
    Decide whether the generated default-language document must be rebuilt.

    Args:
        installed: Read-only reference document shipped with the application
        generated: Writable cached document, None if missing or unreadable
        current_version: Product version of the running application
        scan: Produces a fresh document from the application. When absent,
            the installed document stands in for the scan result.
        report_progress: Passed through to the merger

    Returns:
        ReconcileResult with the document to use and the action taken

    Raises:
        ValueError: If neither an installed document nor a scan is available
            and there is no generated document to fall back on
    """
    if generated is None or generated.is_empty:
        if installed is not None:
            logger.info("No usable generated catalog, copying installed catalog")
            return ReconcileResult(installed.copy(), ReconcileAction.COPIED_INSTALLED)
        if scan is None:
            raise ValueError("No installed or generated catalog and no scan available")
        logger.info("No installed or generated catalog, scanning application")
        scanned = scan()
        scanned.product_version = current_version
        return ReconcileResult(scanned, ReconcileAction.SCANNED)

    if is_up_to_date(generated.product_version, current_version):
        logger.debug(
            f"Generated catalog version {generated.product_version} is current "
            f"({current_version})"
        )
        return ReconcileResult(generated, ReconcileAction.KEPT)

    logger.info(
        f"Generated catalog version {generated.product_version!r} is older than "
        f"{current_version}, regenerating"
    )
    if scan is not None:
        new_doc = scan()
    elif installed is not None:
        new_doc = installed.copy()
    else:
        logger.warning("Cannot regenerate outdated catalog: no scan or installed catalog")
        return ReconcileResult(generated, ReconcileAction.KEPT)

    if not new_doc.product_version:
        new_doc.product_version = current_version
    merged = merge_documents(new_doc, generated, report_progress)
    merged.product_version = current_version
    return ReconcileResult(merged, ReconcileAction.REGENERATED)
