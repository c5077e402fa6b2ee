"""
Tests for merging a freshly scanned catalog with a persisted one.

The main scenario mirrors a real refresh: the old catalog was written by
version 2.7.1, the new scan comes from version 3.1.4 and adds, removes and
changes units.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from l10n_catalog.catalog.merger import (
    MergeSummary,
    merge_documents,
    merge_unit,
    old_text_note,
)
from l10n_catalog.catalog.model import Document, Unit
from tests.utils.test_helpers import assert_notes_equal, make_document, make_unit


def _old_document() -> Document:
    return make_document(
        [
            make_unit("This.test", "This is a test.", ["This is only a test"]),
            make_unit(
                "That.test",
                "That was a test.",
                ["That is hard to explain, but a literal rendition is okay."],
            ),
            make_unit("What.test", "What is good test.", ["Whatever you say..."], dynamic=True),
            make_unit("What.this", "What is this nonsense?", dynamic=True),
            make_unit("How.now", "How now brown cow", dynamic=True),
        ],
        product_version="2.7.1",
    )


def _new_document() -> Document:
    document = _old_document()
    document.product_version = "3.1.4"

    _ = document.add_unit(
        make_unit("This.new1", "This is a new test.", ["This is still only a test"])
    )
    _ = document.add_unit(
        make_unit("That.new2", "That was an old test.", ["That should be easy to translate."])
    )
    _ = document.add_unit(make_unit("What.new3", "What's up, doc?", dynamic=True))

    # Found by the static scan now
    what_this = document.get_unit("What.this")
    assert what_this is not None
    what_this.dynamic = False
    what_this.notes = ["ID: What.this"]

    _ = document.remove("That.test")

    what_test = document.get_unit("What.test")
    assert what_test is not None
    what_test.set_variant("en", "What is a good test?")
    what_test.notes = ["ID: What.test"]

    _ = document.remove("How.now")
    return document


class TestMergeDocuments:
    """Test cases for merge_documents."""

    @pytest.fixture
    def merged(self) -> Document:
        return merge_documents(_new_document(), _old_document())

    def test_unit_counts(self, merged: Document) -> None:
        """Test that no unit is lost or duplicated."""
        assert len(_old_document()) == 5
        assert len(_new_document()) == 6
        assert len(merged) == 8

    def test_body_order(self, merged: Document) -> None:
        """Test new-document order first, then old-only units in old order."""
        assert merged.ids() == [
            "This.test",
            "What.test",
            "What.this",
            "This.new1",
            "That.new2",
            "What.new3",
            "That.test",
            "How.now",
        ]

    def test_unchanged_unit(self, merged: Document) -> None:
        """Test that an unchanged unit keeps its notes."""
        unit = merged.get_unit("This.test")
        assert_notes_equal(unit, ["ID: This.test", "This is only a test"])
        assert unit is not None and unit.source_text == "This is a test."
        assert not unit.dynamic

    def test_removed_static_unit(self, merged: Document) -> None:
        """Test that a unit missing from the static scan is kept with a note."""
        unit = merged.get_unit("That.test")
        assert_notes_equal(
            unit,
            [
                "ID: That.test",
                "That is hard to explain, but a literal rendition is okay.",
                "Not found in static scan of compiled code (version 3.1.4)",
            ],
        )
        assert unit is not None and not unit.dynamic

    def test_changed_source(self, merged: Document) -> None:
        """Test that a changed source keeps old notes and the old text."""
        unit = merged.get_unit("What.test")
        assert_notes_equal(
            unit,
            [
                "ID: What.test",
                "[OLD NOTE] Whatever you say...",
                "OLD TEXT (before 3.1.4): What is good test.",
            ],
        )
        assert unit is not None
        assert unit.source_text == "What is a good test?"
        assert unit.dynamic

    def test_dynamic_became_static(self, merged: Document) -> None:
        """Test the note added when a dynamic id is found by the static scan."""
        unit = merged.get_unit("What.this")
        assert_notes_equal(
            unit,
            [
                "ID: What.this",
                "Not dynamic: found in static scan of compiled code (version 3.1.4)",
            ],
        )
        assert unit is not None and not unit.dynamic

    @pytest.mark.parametrize(
        ("unit_id", "source", "notes", "dynamic"),
        [
            ("This.new1", "This is a new test.", ["ID: This.new1", "This is still only a test"], False),
            ("That.new2", "That was an old test.", ["ID: That.new2", "That should be easy to translate."], False),
            ("What.new3", "What's up, doc?", ["ID: What.new3"], True),
        ],
    )
    def test_new_units_copied_verbatim(
        self,
        merged: Document,
        unit_id: str,
        source: str,
        notes: list[str],
        dynamic: bool,
    ) -> None:
        """Test that units only in the new document are copied unchanged."""
        unit = merged.get_unit(unit_id)
        assert_notes_equal(unit, notes)
        assert unit is not None
        assert unit.source_text == source
        assert unit.dynamic is dynamic
        assert unit.source is not None and unit.source.lang == "en"

    def test_removed_dynamic_unit(self, merged: Document) -> None:
        """Test that a dynamic unit not seen at runtime is kept with a note."""
        unit = merged.get_unit("How.now")
        assert_notes_equal(
            unit,
            ["ID: How.now", "Not found when running compiled program (version 3.1.4)"],
        )
        assert unit is not None and unit.dynamic

    def test_merged_metadata_comes_from_new_document(self, merged: Document) -> None:
        """Test that the merged document carries the new product version."""
        assert merged.product_version == "3.1.4"
        assert merged.original == "Testing.dll"

    def test_inputs_are_not_modified(self) -> None:
        """Test that merging leaves both inputs untouched."""
        new_doc = _new_document()
        old_doc = _old_document()

        _ = merge_documents(new_doc, old_doc)

        assert len(new_doc) == 6
        assert len(old_doc) == 5
        assert_notes_equal(old_doc.get_unit("That.test"), [
            "ID: That.test",
            "That is hard to explain, but a literal rendition is okay.",
        ])
        assert_notes_equal(new_doc.get_unit("What.test"), ["ID: What.test"])

    def test_progress_is_reported(self) -> None:
        """Test that progress is reported once per merged unit."""
        progress = MagicMock()

        _ = merge_documents(_new_document(), _old_document(), progress)

        assert progress.call_count == 8
        progress.assert_called_with(8, 8)


class TestTranslationPreservation:
    """Test cases for carrying translations across merges."""

    def test_translation_survives_source_change(self) -> None:
        """Test that the old target is kept when the source text changes."""
        old_doc = make_document([make_unit("X", "A", target="trA")], product_version="1.0")
        new_doc = make_document([make_unit("X", "B")], product_version="2.0")

        merged = merge_documents(new_doc, old_doc)

        unit = merged.get_unit("X")
        assert unit is not None
        assert unit.source_text == "B"
        assert unit.target_text == "trA"
        assert unit.notes[-1] == "OLD TEXT (before 2.0): A"

    def test_translation_survives_unchanged_source(self) -> None:
        """Test that the merged unit is the new unit with the old target."""
        old_doc = make_document(
            [make_unit("X", "A", ["old comment"], target="trA")], product_version="1.0"
        )
        new_doc = make_document([make_unit("X", "A", ["new comment"])], product_version="2.0")

        merged = merge_documents(new_doc, old_doc)

        unit = merged.get_unit("X")
        assert_notes_equal(unit, ["ID: X", "new comment"])
        assert unit is not None and unit.target_text == "trA"

    def test_empty_translation_is_carried(self) -> None:
        """Test that an empty-string target is preserved as such."""
        old_doc = make_document([make_unit("X", "A", target="")])
        new_doc = make_document([make_unit("X", "A")], product_version="2.0")

        unit = merge_documents(new_doc, old_doc).get_unit("X")

        assert unit is not None
        assert unit.target is not None
        assert unit.target.text == ""

    def test_merged_target_is_a_copy(self) -> None:
        """Test that editing the merged target does not touch the old document."""
        old_doc = make_document([make_unit("X", "A", target="trA")])
        new_doc = make_document([make_unit("X", "A")], product_version="2.0")

        merged_unit = merge_documents(new_doc, old_doc).get_unit("X")
        assert merged_unit is not None and merged_unit.target is not None
        merged_unit.target.text = "changed"

        assert old_doc.get_unit("X").target_text == "trA"  # pyright: ignore[reportOptionalMemberAccess]


class TestMergeUnit:
    """Test cases for merge_unit edge cases."""

    def test_old_notes_are_not_prefixed_twice(self) -> None:
        """Test that notes from earlier merges keep their existing prefix."""
        old_unit = make_unit(
            "X",
            "B",
            ["[OLD NOTE] first comment", old_text_note("2.0", "A")],
        )
        new_unit = make_unit("X", "C")

        merged, source_changed, became_static = merge_unit(new_unit, old_unit, "3.0")

        assert source_changed
        assert not became_static
        assert_notes_equal(
            merged,
            [
                "ID: X",
                "[OLD NOTE] first comment",
                "OLD TEXT (before 2.0): A",
                "OLD TEXT (before 3.0): B",
            ],
        )

    def test_static_to_dynamic_adds_no_note(self) -> None:
        """Test that a static unit later seen only at runtime gets no note."""
        old_unit = make_unit("X", "A")
        new_unit = make_unit("X", "A", dynamic=True)

        merged, source_changed, became_static = merge_unit(new_unit, old_unit, "2.0")

        assert not source_changed
        assert not became_static
        assert merged.dynamic
        assert_notes_equal(merged, ["ID: X"])

    def test_source_change_and_became_static(self) -> None:
        """Test that both notes are added, old text first."""
        old_unit = make_unit("X", "A", dynamic=True)
        new_unit = make_unit("X", "B")

        merged, _, _ = merge_unit(new_unit, old_unit, "2.0")

        assert merged.notes == [
            "ID: X",
            "OLD TEXT (before 2.0): A",
            "Not dynamic: found in static scan of compiled code (version 2.0)",
        ]

    def test_merged_unit_is_independent_of_new_unit(self) -> None:
        """Test that merge_unit never mutates its inputs."""
        new_unit = make_unit("X", "B")
        old_unit = make_unit("X", "A", target="trA")

        merged, _, _ = merge_unit(new_unit, old_unit, "2.0")

        assert merged is not new_unit
        assert new_unit.notes == ["ID: X"]
        assert new_unit.target is None
        assert isinstance(merged, Unit)


class TestMergeSummary:
    """Test cases for MergeSummary."""

    def test_summary_text(self) -> None:
        """Test the logged summary line."""
        summary = MergeSummary()
        summary.added = 3
        summary.unchanged = 1
        summary.source_changed = 2
        summary.missing = 2
        summary.became_static = 1

        assert summary.total == 8
        assert str(summary) == (
            "Merge Results: 3 added, 1 unchanged, 2 source changed, "
            "1 no longer dynamic, 2 missing from scan"
        )
