"""Layered on-disk storage of catalog files."""

from .layers import CatalogStore

__all__ = ["CatalogStore"]
