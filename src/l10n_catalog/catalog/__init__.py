"""
Catalog model, merge and version reconciliation.

This package contains the translation unit model, the merge of freshly
scanned catalogs with persisted ones, and the product-version check that
decides when the generated default-language catalog is rebuilt.
"""

from .merger import merge_documents
from .model import DEFAULT_LANGUAGE, Document, Unit, Variant
from .reconciler import ReconcileAction, ReconcileResult, reconcile_default_document

__all__ = [
    "DEFAULT_LANGUAGE",
    "Document",
    "ReconcileAction",
    "ReconcileResult",
    "Unit",
    "Variant",
    "merge_documents",
    "reconcile_default_document",
]
