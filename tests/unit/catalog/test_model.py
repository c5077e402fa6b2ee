"""Tests for the catalog data model."""

from __future__ import annotations

import pytest

from l10n_catalog.catalog.model import Document, Unit, Variant
from l10n_catalog.utils.core.exceptions import (
    CatalogValidationError,
    DuplicateUnitError,
)
from tests.utils.test_helpers import make_document, make_unit


class TestVariant:
    """Test cases for Variant."""

    def test_variant_requires_language(self) -> None:
        """Test that a variant without a language tag is rejected."""
        with pytest.raises(CatalogValidationError):
            _ = Variant("", "text")

    def test_variant_text_may_be_empty(self) -> None:
        """Test that empty text is a valid variant."""
        variant = Variant("fr")
        assert variant.text == ""


class TestUnit:
    """Test cases for Unit construction and accessors."""

    def test_empty_sentinel_is_allowed(self) -> None:
        """Test that the empty sentinel unit can be built."""
        unit = Unit.empty()
        assert unit.is_empty
        assert str(unit) == "Empty"

    def test_unit_without_id_is_rejected(self) -> None:
        """Test that a non-empty unit must have an id."""
        with pytest.raises(CatalogValidationError):
            _ = Unit(source=Variant("en", "Hello"))

    def test_unit_without_source_is_rejected(self) -> None:
        """Test that a unit with an id must have a source variant."""
        with pytest.raises(CatalogValidationError):
            _ = Unit(id="Main.Title")

    def test_defaults(self) -> None:
        """Test default attribute values."""
        unit = Unit(id="Main.Title", source=Variant("en", "Welcome"))
        assert unit.target is None
        assert not unit.approved
        assert not unit.dynamic
        assert unit.notes == []
        assert unit.priority is None

    def test_empty_translation_is_not_a_translation(self) -> None:
        """Test that an empty target is recorded but does not count as translated."""
        unit = make_unit("Status.Ready", "Ready", target="")
        assert unit.target is not None
        assert not unit.has_translation

    def test_set_variant_routes_by_language(self) -> None:
        """Test that the source language replaces the source, others the target."""
        unit = make_unit("Main.Title", "Welcome")
        unit.set_variant("en", "Hello")
        unit.set_variant("fr", "Bonjour")

        assert unit.source_text == "Hello"
        assert unit.target_text == "Bonjour"
        assert unit.variant_for("fr") == Variant("fr", "Bonjour")
        assert unit.variant_for("de") is None

    def test_copy_is_deep(self) -> None:
        """Test that copies do not share notes or variants."""
        unit = make_unit("Main.Title", "Welcome", ["Title bar"], target="Bienvenue")
        duplicate = unit.copy()
        duplicate.add_note("extra")
        assert duplicate.target is not None
        duplicate.target.text = "Salut"

        assert unit.notes == ["ID: Main.Title", "Title bar"]
        assert unit.target_text == "Bienvenue"

    def test_units_compare_by_identity(self) -> None:
        """Test that two equal-looking units are distinct objects."""
        first = make_unit("Main.Title", "Welcome")
        second = make_unit("Main.Title", "Welcome")
        assert first != second


class TestDocument:
    """Test cases for Document body operations."""

    def test_duplicate_ids_are_rejected(self) -> None:
        """Test that adding a second unit with the same id raises."""
        document = make_document([make_unit("Main.Title", "Welcome")])

        with pytest.raises(DuplicateUnitError) as exc_info:
            _ = document.add_unit(make_unit("Main.Title", "Hello"))

        assert exc_info.value.unit_id == "Main.Title"
        assert document.get_unit("Main.Title") is not None
        assert document.get_unit("Main.Title").source_text == "Welcome"  # pyright: ignore[reportOptionalMemberAccess]

    def test_duplicate_ids_in_constructor_are_rejected(self) -> None:
        """Test that the uniqueness invariant holds at construction."""
        with pytest.raises(DuplicateUnitError):
            _ = make_document([make_unit("A", "a"), make_unit("A", "b")])

    def test_empty_units_are_dropped(self) -> None:
        """Test that empty sentinel units never enter the body."""
        document = Document()
        assert document.add_unit(Unit.empty()) is False
        assert document.add_or_replace(Unit.empty()) is False
        assert len(document) == 0

    def test_add_or_replace_preserves_position(self) -> None:
        """Test that replacing keeps body order and new ids append."""
        document = make_document(
            [make_unit("A", "a"), make_unit("B", "b"), make_unit("C", "c")]
        )

        _ = document.add_or_replace(make_unit("B", "bee"))
        _ = document.add_or_replace(make_unit("D", "d"))

        assert document.ids() == ["A", "B", "C", "D"]
        assert document.get_unit("B").source_text == "bee"  # pyright: ignore[reportOptionalMemberAccess]

    def test_remove(self) -> None:
        """Test removing units by id."""
        document = make_document([make_unit("A", "a"), make_unit("B", "b")])

        removed = document.remove("A")

        assert removed is not None and removed.id == "A"
        assert "A" not in document
        assert document.remove("missing") is None

    def test_language_prefers_target(self) -> None:
        """Test that the document language is the target, else the source."""
        assert make_document().language == "en"
        assert make_document(target_language="fr").language == "fr"

    def test_copy_keeps_metadata_and_units(self) -> None:
        """Test that copy duplicates metadata and units independently."""
        original = make_document(
            [make_unit("A", "a")],
            product_version="2.7.1",
            hard_line_break_replacement="\\n",
        )
        duplicate = original.copy()
        duplicate.get_unit("A").add_note("changed")  # pyright: ignore[reportOptionalMemberAccess]

        assert duplicate.product_version == "2.7.1"
        assert duplicate.hard_line_break_replacement == "\\n"
        assert duplicate.original == "Testing.dll"
        assert original.get_unit("A").notes == ["ID: A"]  # pyright: ignore[reportOptionalMemberAccess]

    def test_document_requires_source_language(self) -> None:
        """Test that a document must declare its source language."""
        with pytest.raises(CatalogValidationError):
            _ = Document(source_language="")
