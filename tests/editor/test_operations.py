"""
Tests for editor.operations

Test Coverage:
- Slot contents: assign, swap, cross-page move, transform update
- Grid shape: layout switch, span change, track resize
- Pages: add, remove, duplicate, reorder, current page
- Photos: add batch, remove, clear, auto-arrange toggle
"""
from dataclasses import replace

import pytest

from photoprint.core.models import IDENTITY, Document, SlotTransform
from photoprint.editor import operations as ops

from conftest import make_document, make_page, make_photo


@pytest.fixture
def manual_document():
    """Two pages, auto-arrange off so operations act only where asked."""
    return make_document(
        make_page("a", 4, ["P1", "P2", "P3"]),
        make_page("b", 4, ["P4"]),
        auto_arrange=False,
    )


class TestSlotContents:
    """Tests for operations on slot contents."""

    def test_assign_photo_when_slot_transformed_then_transform_reset(self, manual_document):
        # Arrange
        page = manual_document.pages[0]
        transformed = page.replace_slot(page.slots[3].with_transform(SlotTransform(scale=2)))
        doc = replace(manual_document, pages=(transformed, manual_document.pages[1]))

        # Act
        result = ops.assign_photo(doc, "a", "a-s3", "P4")

        # Assert
        slot = result.page("a").slot("a-s3")
        assert slot.photo_id == "P4"
        assert slot.transform == IDENTITY
        assert result.version == doc.version + 1

    def test_assign_photo_when_none_then_slot_cleared_only(self, manual_document):
        result = ops.assign_photo(manual_document, "a", "a-s1", None)

        assert result.page("a").photo_ids == ["P1", "P3"]
        assert result.page("b").photo_ids == ["P4"]

    def test_assign_photo_when_unknown_photo_then_unchanged(self, manual_document):
        assert ops.assign_photo(manual_document, "a", "a-s3", "nope") is manual_document

    def test_assign_photo_when_unknown_slot_then_unchanged(self, manual_document):
        assert ops.assign_photo(manual_document, "a", "zz", "P1") is manual_document

    def test_swap_slots_when_same_page_then_photos_exchanged_and_order_reconciled(self, manual_document):
        # Act
        result = ops.swap_slots(manual_document, "a", "a-s0", "a-s2")

        # Assert
        assert result.page("a").photo_ids == ["P3", "P2", "P1"]
        assert result.photo_ids == ["P3", "P2", "P1", "P4"]

    def test_swap_slots_when_one_empty_then_photo_moves(self, manual_document):
        result = ops.swap_slots(manual_document, "a", "a-s0", "a-s3")

        page = result.page("a")
        assert page.slot("a-s0").photo_id is None
        assert page.slot("a-s3").photo_id == "P1"

    def test_move_between_pages_when_target_occupied_then_swapped(self, manual_document):
        # Act
        result = ops.move_photo_between_pages(manual_document, "a", "a-s0", "b", "b-s0")

        # Assert
        assert result.page("a").slot("a-s0").photo_id == "P4"
        assert result.page("b").slot("b-s0").photo_id == "P1"
        assert result.photo_ids == ["P4", "P2", "P3", "P1"]

    def test_move_between_pages_when_same_page_then_swap(self, manual_document):
        result = ops.move_photo_between_pages(manual_document, "a", "a-s0", "a", "a-s1")
        assert result.page("a").photo_ids == ["P2", "P1", "P3"]

    def test_update_transform_when_called_then_stored_as_given(self, manual_document):
        # Act
        result = ops.update_transform(manual_document, "a", "a-s0", 12.0, -4.0, 1.5, 90)

        # Assert
        transform = result.page("a").slot("a-s0").transform
        assert transform == SlotTransform(offset_x=12.0, offset_y=-4.0, scale=1.5, rotation=90)
        assert result.page("a").slot("a-s0").photo_id == "P1"


class TestGridShape:
    """Tests for layout, span and track operations."""

    def test_set_page_layout_when_fewer_cells_then_trailing_photos_unassigned(self, manual_document):
        # Act
        result = ops.set_page_layout(manual_document, "a", 2)

        # Assert
        page = result.page("a")
        assert (page.rows, page.cols) == (2, 1)
        assert page.photo_ids == ["P1", "P2"]
        assert page.row_sizes == (0.5, 0.5)
        assert "P3" not in result.placed_photo_ids
        assert result.default_layout == 2
        assert page.is_partitioned()

    def test_set_page_layout_when_more_cells_then_photos_keep_order(self, manual_document):
        result = ops.set_page_layout(manual_document, "a", 6)

        page = result.page("a")
        assert len(page.slots) == 6
        assert page.photo_ids == ["P1", "P2", "P3"]
        assert page.is_partitioned()

    def test_set_page_layout_when_tracks_customised_then_reset(self, manual_document):
        page = replace(manual_document.pages[0], col_sizes=(0.8, 0.2))
        doc = replace(manual_document, pages=(page, manual_document.pages[1]))

        result = ops.set_page_layout(doc, "a", 4)

        assert result.page("a").col_sizes == (0.5, 0.5)

    def test_set_page_layout_when_unsupported_then_raises(self, manual_document):
        with pytest.raises(ValueError):
            ops.set_page_layout(manual_document, "a", 5)

    def test_set_page_layout_when_auto_arrange_on_then_rebalanced(self):
        doc = make_document(make_page("a", 4, ["P1", "P2", "P3", "P4"]))

        result = ops.set_page_layout(doc, "a", 1)

        assert [p.photo_ids for p in result.pages] == [["P1"], ["P2"], ["P3"], ["P4"]]
        assert all(p.is_partitioned() for p in result.pages)

    def test_set_slot_span_when_grown_then_redistributed(self, manual_document):
        result = ops.set_slot_span(manual_document, "a", "a-s0", 2, 2)

        assert [p.photo_ids for p in result.pages] == [["P1"], ["P2", "P3", "P4"]]

    def test_resize_track_when_dragged_then_fractions_updated(self, manual_document):
        # Act
        result = ops.resize_track(manual_document, "a", "col", 1, 40.0, 408.0)

        # Assert
        assert result.page("a").col_sizes == pytest.approx((0.6, 0.4))
        assert result.page("a").row_sizes == (0.5, 0.5)

    def test_resize_track_when_rows_then_row_fractions_updated(self, manual_document):
        result = ops.resize_track(manual_document, "a", "row", 1, -40.0, 408.0)
        assert result.page("a").row_sizes == pytest.approx((0.4, 0.6))

    def test_resize_track_when_not_measured_then_unchanged(self, manual_document):
        assert ops.resize_track(manual_document, "a", "col", 1, 40.0, 0.0) is manual_document

    def test_resize_track_when_bad_axis_then_raises(self, manual_document):
        with pytest.raises(ValueError, match="axis"):
            ops.resize_track(manual_document, "a", "diagonal", 1, 40.0, 400.0)


class TestPages:
    """Tests for page operations."""

    def test_add_page_when_called_then_appended_and_current(self, manual_document):
        result = ops.add_page(manual_document)

        assert len(result.pages) == 3
        assert result.pages[-1].layout == manual_document.default_layout
        assert result.current_page_index == 2

    def test_remove_page_when_last_page_then_refused(self):
        doc = make_document(make_page("a", 4, ["P1"]))
        assert ops.remove_page(doc, "a") is doc

    def test_remove_page_when_manual_then_photos_unassigned(self, manual_document):
        # Act
        result = ops.remove_page(manual_document, "b")

        # Assert
        assert [p.id for p in result.pages] == ["a"]
        assert [p.id for p in result.unassigned_photos] == ["P4"]
        assert result.current_page_index == 0
        assert result.pages[0].is_partitioned()

    def test_remove_page_when_auto_arrange_on_then_photos_reflowed(self):
        """Photos of the removed page queue up behind the ones still placed."""
        doc = make_document(make_page("a", 4, ["P1", "P2"]), make_page("b", 4, ["P3"]))

        result = ops.remove_page(doc, "a")

        assert [p.photo_ids for p in result.pages] == [["P3", "P1", "P2"]]
        assert result.pages[0].is_partitioned()

    def test_duplicate_page_when_called_then_copy_after_source_with_fresh_ids(self, manual_document):
        # Act
        result = ops.duplicate_page(manual_document, "a")

        # Assert
        copy = result.pages[1]
        assert [p.id for p in result.pages][0] == "a"
        assert copy.id != "a"
        assert copy.photo_ids == ["P1", "P2", "P3"]
        assert not {s.id for s in copy.slots} & {s.id for s in result.pages[0].slots}
        assert copy.is_partitioned()
        assert result.current_page_index == 1

    def test_reorder_pages_when_moved_then_current_follows_page(self, manual_document):
        # Arrange
        doc = replace(manual_document, current_page_index=0)

        # Act
        result = ops.reorder_pages(doc, 0, 1)

        # Assert
        assert [p.id for p in result.pages] == ["b", "a"]
        assert result.current_page_index == 1
        assert result.photo_ids == ["P4", "P1", "P2", "P3"]

    def test_reorder_pages_when_out_of_range_then_unchanged(self, manual_document):
        assert ops.reorder_pages(manual_document, 0, 9) is manual_document

    def test_set_current_page_when_out_of_range_then_clamped(self, manual_document):
        assert ops.set_current_page(manual_document, 10).current_page_index == 1
        assert ops.set_current_page(manual_document, -3) is manual_document


class TestPhotos:
    """Tests for photo collection operations."""

    def test_add_photos_when_auto_arrange_on_then_placed_once_per_batch(self):
        # Arrange
        doc = Document()
        photos = [make_photo(f"P{i}") for i in range(1, 6)]

        # Act
        result = ops.add_photos(doc, photos)

        # Assert
        assert [p.photo_ids for p in result.pages] == [["P1", "P2", "P3", "P4"], ["P5"]]
        assert all(p.is_partitioned() for p in result.pages)
        assert result.version == 2

    def test_add_photos_when_auto_arrange_off_then_unassigned_with_one_page(self):
        doc = Document(auto_arrange=False)

        result = ops.add_photos(doc, [make_photo("P1"), make_photo("P2")])

        assert len(result.pages) == 1
        assert result.pages[0].is_empty
        assert [p.id for p in ops.unassigned_photos(result)] == ["P1", "P2"]

    def test_add_photos_when_duplicate_ids_then_ignored(self, manual_document):
        result = ops.add_photos(manual_document, [make_photo("P1")])
        assert result is manual_document

    def test_remove_photo_when_manual_then_slot_cleared(self, manual_document):
        result = ops.remove_photo(manual_document, "P2")

        assert result.page("a").slot("a-s1").photo_id is None
        assert "P2" not in result.photo_ids

    def test_remove_photo_when_auto_arrange_on_then_gap_closed(self):
        doc = make_document(make_page("a", 4, ["P1", "P2", "P3"]))

        result = ops.remove_photo(doc, "P1")

        assert result.pages[0].photo_ids == ["P2", "P3"]

    def test_clear_photos_when_called_then_empty_document(self, manual_document):
        result = ops.clear_photos(manual_document)
        assert result.photos == () and result.pages == ()

    def test_set_auto_arrange_when_enabled_then_rebalanced(self, manual_document):
        # Arrange - leave a gap on page a
        doc = ops.assign_photo(manual_document, "a", "a-s0", None)

        # Act
        result = ops.set_auto_arrange(doc, True)

        # Assert
        assert result.auto_arrange
        assert [p.photo_ids for p in result.pages] == [["P2", "P3", "P4", "P1"], []]
        assert all(p.is_partitioned() for p in result.pages)

    def test_set_auto_arrange_when_disabled_then_layout_untouched(self):
        doc = make_document(make_page("a", 4, ["P1"]))

        result = ops.set_auto_arrange(doc, False)

        assert not result.auto_arrange
        assert result.pages == doc.pages

    def test_set_default_layout_when_unsupported_then_raises(self, manual_document):
        with pytest.raises(ValueError):
            ops.set_default_layout(manual_document, 7)
