"""
Module: editor.operations

Purpose:
    Mutation entry points of the document model. Every function is a pure
    transformation from one Document snapshot to the next (version + 1).
    Requests naming an unknown page/slot/photo are absorbed: the input
    snapshot is returned unchanged and the miss is logged at debug level.

Key Functions:
    - assign_photo(), swap_slots(), move_photo_between_pages()
    - update_transform()
    - set_page_layout(), set_slot_span(), resize_track()
    - add_page(), remove_page(), duplicate_page(), reorder_pages()
    - add_photos(), remove_photo(), clear_photos()
    - set_auto_arrange(), set_default_layout(), set_current_page()

Dependencies:
    - core.models: Document, Page, Slot, SlotTransform
    - layout: grid helpers, tracks, ordering, redistribution, arrange

Used By:
    - editor.store.DocumentStore
    - cli
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

from photoprint.core.grid_config import TRACK_GAP_PX, get_grid
from photoprint.core.models import Document, Page, Photo, Slot, SlotTransform, new_id
from photoprint.layout import (
    auto_arrange as _auto_arrange,
    new_page,
    reconcile_photo_order,
    redistribute_for_span,
    resize_tracks,
    uniform_fractions,
    uniform_slots,
)

logger = logging.getLogger(__name__)

AXES = ("col", "row")


# ─────────────────────────────────────────────────────────────────────────────
# Slot contents
# ─────────────────────────────────────────────────────────────────────────────

def assign_photo(
    document: Document,
    page_id: str,
    slot_id: str,
    photo_id: Optional[str],
) -> Document:
    """
    Put photo_id (or nothing) into one slot, resetting its transform.

    No other slot is touched. The serial order is reconciled afterwards.
    """
    found = _find_slot(document, page_id, slot_id)
    if found is None:
        return document
    page, slot = found
    if photo_id is not None and document.photo(photo_id) is None:
        logger.debug(f"Assign ignored: unknown photo {photo_id}")
        return document

    pages = _replace_page(document.pages, page.replace_slot(slot.with_photo(photo_id)))
    return _commit_placement(document, pages)


def swap_slots(document: Document, page_id: str, slot_a: str, slot_b: str) -> Document:
    """
    Exchange the photos of two slots on one page.

    Spans and positions stay where they are; both transforms reset.
    """
    page = document.page(page_id)
    first = page.slot(slot_a) if page else None
    second = page.slot(slot_b) if page else None
    if page is None or first is None or second is None:
        logger.debug(f"Swap ignored: {page_id} / {slot_a} / {slot_b}")
        return document
    if slot_a == slot_b:
        return document

    page = page.replace_slot(first.with_photo(second.photo_id))
    page = page.replace_slot(second.with_photo(first.photo_id))
    return _commit_placement(document, _replace_page(document.pages, page))


def move_photo_between_pages(
    document: Document,
    from_page_id: str,
    from_slot_id: str,
    to_page_id: str,
    to_slot_id: str,
) -> Document:
    """
    Drag a photo onto a slot of another page, swapping with its occupant.

    Both transforms reset. Same-page moves are plain swaps.
    """
    if from_page_id == to_page_id:
        return swap_slots(document, from_page_id, from_slot_id, to_slot_id)

    source = _find_slot(document, from_page_id, from_slot_id)
    dest = _find_slot(document, to_page_id, to_slot_id)
    if source is None or dest is None:
        return document
    from_page, from_slot = source
    to_page, to_slot = dest

    pages = _replace_page(document.pages, from_page.replace_slot(from_slot.with_photo(to_slot.photo_id)))
    pages = _replace_page(pages, to_page.replace_slot(to_slot.with_photo(from_slot.photo_id)))
    return _commit_placement(document, pages)


def update_transform(
    document: Document,
    page_id: str,
    slot_id: str,
    offset_x: float,
    offset_y: float,
    scale: float,
    rotation: int,
) -> Document:
    """
    Replace a slot's transform atomically.

    Values are stored as given; clamping scale into [0.3, 3.0] and
    snapping rotation are the caller's job (see SlotTransform helpers).
    """
    found = _find_slot(document, page_id, slot_id)
    if found is None:
        return document
    page, slot = found
    transform = SlotTransform(offset_x=offset_x, offset_y=offset_y, scale=scale, rotation=rotation)
    return document.bump(pages=_replace_page(document.pages, page.replace_slot(slot.with_transform(transform))))


# ─────────────────────────────────────────────────────────────────────────────
# Grid shape
# ─────────────────────────────────────────────────────────────────────────────

def set_page_layout(document: Document, page_id: str, layout: int) -> Document:
    """
    Switch a page to another layout.

    The page gets fresh 1x1 slots for the new grid. Its assigned photos
    are written into the new slots in their prior slot order,
    index-for-index; photos beyond the new capacity become unassigned.
    Transforms and track fractions reset. The layout also becomes the
    document default, and auto-arrangement runs when enabled.
    """
    grid = get_grid(layout)
    page = document.page(page_id)
    if page is None:
        logger.debug(f"Layout change ignored: unknown page {page_id}")
        return document

    slots = list(uniform_slots(grid.rows, grid.cols))
    for index, photo_id in enumerate(page.photo_ids[: len(slots)]):
        slots[index] = slots[index].with_photo(photo_id)

    dropped = max(0, page.photo_count - len(slots))
    if dropped:
        logger.info(f"Layout {layout} on page {page_id} unassigned {dropped} photos")

    relaid = replace(
        page,
        layout=layout,
        slots=tuple(slots),
        col_sizes=uniform_fractions(grid.cols),
        row_sizes=uniform_fractions(grid.rows),
    )
    pages = _replace_page(document.pages, relaid)
    result = document.bump(
        pages=pages,
        photos=reconcile_photo_order(pages, document.photos),
        default_layout=layout,
    )
    if result.auto_arrange:
        result = _auto_arrange(result)
    return result


def set_slot_span(
    document: Document,
    page_id: str,
    slot_id: str,
    col_span: int,
    row_span: int,
) -> Document:
    """Change a slot's span and re-flow every placed photo (see layout.redistribution)."""
    return redistribute_for_span(document, page_id, slot_id, col_span, row_span)


def resize_track(
    document: Document,
    page_id: str,
    axis: str,
    boundary: int,
    delta_px: float,
    container_size: float,
    gap: float = TRACK_GAP_PX,
) -> Document:
    """
    Apply a resize-handle drag to a page's column or row fractions.

    Args:
        axis: "col" or "row"
        boundary: Index of the track after the dragged boundary
        delta_px: Pointer delta along the axis
        container_size: Measured grid size along the axis (px)
        gap: Inter-track gap (px)

    Returns:
        New snapshot, or the input when the drag could not apply
    """
    if axis not in AXES:
        raise ValueError(f"axis must be one of {AXES}: {axis!r}")
    page = document.page(page_id)
    if page is None:
        logger.debug(f"Resize ignored: unknown page {page_id}")
        return document

    field_name = "col_sizes" if axis == "col" else "row_sizes"
    current = getattr(page, field_name)
    if len(current) != (page.cols if axis == "col" else page.rows):
        current = uniform_fractions(page.cols if axis == "col" else page.rows)

    sizes = resize_tracks(current, boundary, delta_px, container_size, gap=gap)
    if sizes == getattr(page, field_name):
        return document
    return document.bump(pages=_replace_page(document.pages, replace(page, **{field_name: sizes})))


# ─────────────────────────────────────────────────────────────────────────────
# Pages
# ─────────────────────────────────────────────────────────────────────────────

def add_page(document: Document, layout: Optional[int] = None) -> Document:
    """Append an empty page (default layout) and make it current."""
    page = new_page(layout if layout is not None else document.default_layout)
    pages = document.pages + (page,)
    return document.bump(pages=pages, current_page_index=len(pages) - 1)


def remove_page(document: Document, page_id: str) -> Document:
    """
    Delete a page. The last remaining page is never removed.

    Photos on the page become unassigned (or are re-flowed when
    auto-arrange is on).
    """
    if document.page(page_id) is None or len(document.pages) <= 1:
        logger.debug(f"Remove ignored for page {page_id}")
        return document

    pages = tuple(page for page in document.pages if page.id != page_id)
    result = document.bump(
        pages=pages,
        photos=reconcile_photo_order(pages, document.photos),
        current_page_index=min(document.current_page_index, len(pages) - 1),
    )
    if result.auto_arrange:
        result = _auto_arrange(result)
    return result


def duplicate_page(document: Document, page_id: str) -> Document:
    """Insert a copy (fresh page/slot ids) right after the page and show it."""
    index = document.page_index(page_id)
    if index < 0:
        return document
    source = document.pages[index]
    copy = replace(
        source,
        id=new_id(),
        slots=tuple(replace(slot, id=new_id()) for slot in source.slots),
    )
    pages = document.pages[: index + 1] + (copy,) + document.pages[index + 1:]
    return document.bump(
        pages=pages,
        photos=reconcile_photo_order(pages, document.photos),
        current_page_index=index + 1,
    )


def reorder_pages(document: Document, from_index: int, to_index: int) -> Document:
    """Move the page at from_index to to_index; the current page follows its identity."""
    count = len(document.pages)
    if not (0 <= from_index < count and 0 <= to_index < count) or from_index == to_index:
        return document

    current = document.current_page
    pages: List[Page] = list(document.pages)
    pages.insert(to_index, pages.pop(from_index))
    current_index = pages.index(current) if current is not None else 0
    return document.bump(
        pages=tuple(pages),
        photos=reconcile_photo_order(pages, document.photos),
        current_page_index=current_index,
    )


def set_current_page(document: Document, index: int) -> Document:
    """Show another page; the index is clamped into range."""
    clamped = max(0, min(index, len(document.pages) - 1))
    if clamped == document.current_page_index:
        return document
    return document.bump(current_page_index=clamped)


def set_default_layout(document: Document, layout: int) -> Document:
    get_grid(layout)
    return document.bump(default_layout=layout)


# ─────────────────────────────────────────────────────────────────────────────
# Photos
# ─────────────────────────────────────────────────────────────────────────────

def add_photos(document: Document, photos: Iterable[Photo]) -> Document:
    """
    Register an ingested batch.

    Auto-arrangement (when enabled) runs once for the whole batch. When
    disabled the photos stay unassigned, but a first page is created so
    the document is never page-less while it holds photos.
    """
    known = set(document.photo_ids)
    batch = tuple(photo for photo in photos if photo.id not in known)
    if not batch:
        return document

    pages = document.pages or (new_page(document.default_layout),)
    result = document.bump(photos=document.photos + batch, pages=pages)
    logger.info(f"Added {len(batch)} photos ({len(result.photos)} total)")
    if result.auto_arrange:
        result = _auto_arrange(result)
    return result


def remove_photo(document: Document, photo_id: str) -> Document:
    """Drop a photo and clear every slot reference to it."""
    if document.photo(photo_id) is None:
        return document

    pages = tuple(
        page.with_slots(tuple(
            slot.with_photo(None) if slot.photo_id == photo_id else slot
            for slot in page.slots
        ))
        for page in document.pages
    )
    result = document.bump(
        pages=pages,
        photos=tuple(photo for photo in document.photos if photo.id != photo_id),
    )
    if result.auto_arrange:
        result = _auto_arrange(result)
    return result


def clear_photos(document: Document) -> Document:
    """Remove every photo and every page."""
    return document.bump(photos=(), pages=(), current_page_index=0)


def auto_arrange(document: Document) -> Document:
    """Manual "arrange" action; same engine the toggle uses."""
    return _auto_arrange(document)


def set_auto_arrange(document: Document, enabled: bool) -> Document:
    """Flip the toggle; switching it on rebalances immediately."""
    result = document.bump(auto_arrange=enabled)
    if enabled:
        result = _auto_arrange(result)
    return result


def unassigned_photos(document: Document) -> List[Photo]:
    return document.unassigned_photos


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _find_slot(document: Document, page_id: str, slot_id: str) -> Optional[Tuple[Page, Slot]]:
    page = document.page(page_id)
    slot = page.slot(slot_id) if page is not None else None
    if page is None or slot is None:
        logger.debug(f"Unknown page/slot: {page_id} / {slot_id}")
        return None
    return page, slot


def _replace_page(pages: Tuple[Page, ...], page: Page) -> Tuple[Page, ...]:
    return tuple(page if p.id == page.id else p for p in pages)


def _commit_placement(document: Document, pages: Tuple[Page, ...]) -> Document:
    """New snapshot with changed slot contents and reconciled serial order."""
    return document.bump(pages=pages, photos=reconcile_photo_order(pages, document.photos))
