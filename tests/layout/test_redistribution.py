"""
Tests for layout.redistribution

Test Coverage:
- redistribute_for_span(): growing/shrinking spans re-flows every placed photo
- Overflow page allocation and empty-page pruning
- Transform carry-over and serial order conservation
- Current page remapping
"""
from dataclasses import replace

import pytest

from photoprint.core.models import Slot, SlotTransform
from photoprint.layout.grid import slots_around
from photoprint.layout.redistribution import allocate_pages, redistribute_for_span

from conftest import make_document, make_page


def _spanned_page(page_id, layout, target, photo_ids):
    """Page laid out around target, remaining slots filled in order."""
    page = make_page(page_id, layout)
    slots = list(slots_around(target, page.rows, page.cols))
    queue = list(photo_ids)
    for index, slot in enumerate(slots):
        if slot.id != target.id and queue:
            slots[index] = slot.with_photo(queue.pop(0))
    return page.with_slots(tuple(slots))


class TestGrowSpan:
    """Growing a slot pushes photos onward."""

    def test_redistribute_when_first_slot_fills_page_then_rest_overflow(self, three_photo_document):
        """2x2 page with P1, P2, P3: a 2x2 span on P1 moves P2, P3 to a new page."""
        # Arrange
        doc = three_photo_document
        page = doc.pages[0]

        # Act
        result = redistribute_for_span(doc, page.id, page.slots[0].id, 2, 2)

        # Assert
        assert [p.photo_ids for p in result.pages] == [["P1"], ["P2", "P3"]]
        first = result.pages[0]
        assert len(first.slots) == 1
        assert (first.slots[0].col_span, first.slots[0].row_span) == (2, 2)
        assert first.slots[0].id == page.slots[0].id
        assert result.pages[1].layout == page.layout
        assert result.pages[1].photo_ids == ["P2", "P3"]
        assert result.version == doc.version + 1

    def test_redistribute_when_any_change_then_every_page_partitioned(self, three_photo_document):
        doc = three_photo_document
        page = doc.pages[0]

        result = redistribute_for_span(doc, page.id, page.slots[1].id, 1, 2)

        assert all(p.is_partitioned() for p in result.pages)

    def test_redistribute_when_span_too_large_then_clamped_to_grid(self, three_photo_document):
        # Arrange
        doc = three_photo_document
        page = doc.pages[0]

        # Act
        result = redistribute_for_span(doc, page.id, page.slots[1].id, 5, 5)

        # Assert - (1, 2) can only grow downward by one row
        target = result.pages[0].slot(page.slots[1].id)
        assert (target.col_span, target.row_span) == (1, 2)

    def test_redistribute_when_photos_move_then_serial_order_kept(self):
        """Photos keep their relative order across the re-flow."""
        # Arrange
        doc = make_document(
            make_page("a", 4, ["P1", "P2", "P3", "P4"]),
            make_page("b", 4, ["P5"]),
        )

        # Act
        result = redistribute_for_span(doc, "a", "a-s2", 2, 1)

        # Assert
        flattened = [pid for p in result.pages for pid in p.photo_ids]
        assert flattened == ["P1", "P2", "P3", "P4", "P5"]
        assert [p.id for p in result.photos] == flattened

    def test_redistribute_when_photos_carry_transforms_then_kept(self):
        """A photo keeps its pan/zoom/rotation wherever it lands."""
        # Arrange
        doc = make_document(make_page("a", 4, ["P1", "P2", "P3"]))
        page = doc.pages[0]
        zoomed = SlotTransform(offset_x=4, scale=2.0, rotation=90)
        page = page.replace_slot(page.slots[1].with_transform(zoomed))
        doc = replace(doc, pages=(page,))

        # Act
        result = redistribute_for_span(doc, "a", "a-s0", 2, 2)

        # Assert
        moved = next(s for s in result.pages[1].slots if s.photo_id == "P2")
        assert moved.transform == zoomed

    def test_redistribute_when_target_empty_then_placed_photos_flow_around(self):
        # Arrange
        doc = make_document(make_page("a", 4, [None, "P1", "P2"]))

        # Act
        result = redistribute_for_span(doc, "a", "a-s0", 2, 1)

        # Assert
        page = result.pages[0]
        assert page.slots[0].photo_id is None
        assert page.photo_ids == ["P1", "P2"]
        assert len(result.pages) == 1


class TestShrinkSpan:
    """Shrinking a slot pulls photos back and prunes emptied pages."""

    def test_redistribute_when_capacity_returns_then_empty_page_pruned(self):
        # Arrange
        target = Slot(id="a-s0", photo_id="P1", col_span=2)
        first = _spanned_page("a", 4, target, ["P2", "P3"])
        doc = make_document(first, make_page("b", 4, ["P4"]), current_page_index=1)

        # Act
        result = redistribute_for_span(doc, "a", "a-s0", 1, 1)

        # Assert
        assert len(result.pages) == 1
        assert result.pages[0].photo_ids == ["P1", "P2", "P3", "P4"]
        assert result.current_page_index == 0

    def test_redistribute_when_current_page_survives_then_followed_by_identity(self):
        # Arrange
        doc = make_document(
            make_page("a", 4, ["P1", "P2", "P3", "P4"]),
            make_page("b", 4, ["P5", "P6"]),
            current_page_index=1,
        )

        # Act
        result = redistribute_for_span(doc, "a", "a-s0", 2, 1)

        # Assert
        assert [p.id for p in result.pages][:2] == ["a", "b"]
        assert result.current_page_index == 1

    def test_redistribute_when_other_page_was_spanned_then_reset_to_uniform(self):
        # Arrange
        target = Slot(id="b-s0", photo_id="P5", row_span=2)
        doc = make_document(
            make_page("a", 4, ["P1", "P2", "P3", "P4"]),
            _spanned_page("b", 4, target, ["P6"]),
        )

        # Act
        result = redistribute_for_span(doc, "a", "a-s3", 1, 1)

        # Assert
        second = result.pages[1]
        assert all(s.is_unit for s in second.slots)
        assert second.photo_ids == ["P5", "P6"]


class TestUnchanged:
    """Requests that cannot apply."""

    def test_redistribute_when_unknown_slot_then_same_snapshot(self, three_photo_document):
        result = redistribute_for_span(three_photo_document, "page1", "nope", 2, 2)
        assert result is three_photo_document

    def test_redistribute_when_unknown_page_then_same_snapshot(self, three_photo_document):
        result = redistribute_for_span(three_photo_document, "nope", "page1-s0", 2, 2)
        assert result is three_photo_document

    def test_redistribute_when_photo_unassigned_then_stays_unassigned(self):
        doc = make_document(make_page("a", 4, ["P1", "P2"]), photo_ids=["P1", "P2", "X"])

        result = redistribute_for_span(doc, "a", "a-s0", 2, 1)

        assert "X" not in result.placed_photo_ids
        assert [p.id for p in result.photos] == ["P1", "P2", "X"]


@pytest.mark.parametrize("demand,layout,expected", [(0, 4, 0), (1, 4, 1), (4, 4, 1), (5, 4, 2), (13, 12, 2)])
def test_allocate_pages_when_demand_then_ceil_of_capacity(demand, layout, expected):
    pages = allocate_pages(demand, layout)
    assert len(pages) == expected
    assert all(p.layout == layout and p.is_empty for p in pages)
