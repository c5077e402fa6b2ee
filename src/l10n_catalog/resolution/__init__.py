"""
String resolution across languages.

Exports the per-application LocalizationManager and the ManagerRegistry that
owns manager lifetimes.
"""

from .manager import LocalizationManager, ResolvedString
from .registry import ManagerRegistry

__all__ = [
    "LocalizationManager",
    "ManagerRegistry",
    "ResolvedString",
]
