"""
Global test fixtures for l10n-catalog tests.

This module provides documents shaped like real application catalogs, a
LocalizationManager built from them, and temporary storage tiers on disk.
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

from l10n_catalog.catalog.model import Document
from l10n_catalog.resolution.manager import LocalizationManager
from l10n_catalog.storage.layers import CatalogStore
from tests.utils.test_helpers import make_document, make_unit


@pytest.fixture
def english_document() -> Document:
    """
    Default-language catalog with static and dynamic units.

    Returns:
        Document: English catalog at product version 1.0.0
    """
    return make_document(
        [
            make_unit("Main.Title", "Welcome"),
            make_unit("Main.Quit", "Quit"),
            make_unit("Menu.Open", "Open", dynamic=True),
            make_unit("Dialog.Body", "First line\\nSecond line"),
            make_unit("Status.Ready", "Ready"),
        ],
        hard_line_break_replacement="\\n",
    )


@pytest.fixture
def french_document() -> Document:
    """French catalog translating some of the English units."""
    return make_document(
        [
            make_unit("Main.Title", "Welcome", target="Bienvenue"),
            make_unit("Main.Quit", "Quit", target="Quitter"),
            make_unit("Dialog.Body", "First line\\nSecond line", target="Ligne un\\nLigne deux"),
            make_unit("Status.Ready", "Ready", target=""),
        ],
        target_language="fr",
    )


@pytest.fixture
def german_document() -> Document:
    """German catalog with one translation the French catalog lacks."""
    return make_document(
        [
            make_unit("Main.Title", "Welcome", target="Willkommen", target_language="de"),
            make_unit("Menu.Open", "Open", target="Öffnen", target_language="de", dynamic=True),
        ],
        target_language="de",
    )


@pytest.fixture
def manager(
    english_document: Document,
    french_document: Document,
    german_document: Document,
) -> Generator[LocalizationManager, None, None]:
    """
    LocalizationManager with English, French and German loaded.

    Yields:
        LocalizationManager: Manager for app id "test", disposed after the test
    """
    localization_manager = LocalizationManager(
        "test",
        "Test Application",
        "1.0.0",
        [english_document, french_document, german_document],
    )
    yield localization_manager
    localization_manager.dispose()


@pytest.fixture
def store(tmp_path: Path) -> CatalogStore:
    """CatalogStore with all three tiers under ``tmp_path``."""
    return CatalogStore(
        app_id="test",
        installed_dir=tmp_path / "installed",
        generated_dir=tmp_path / "generated",
        user_modified_dir=tmp_path / "user",
    )
