"""
Module: layout.redistribution

Purpose:
    Re-flow every placed photo across every page when one slot's span
    changes. The whole document is treated as one ordered photo stream and
    re-projected onto the new total capacity, so no cell is ever orphaned
    or covered twice.

Key Functions:
    - redistribute_for_span(): Main entry point
    - allocate_pages(): Finite overflow page allocation

Algorithm:
    1. Clamp the requested span to the grid from the slot's top-left cell
    2. Remember the last known transform of every placed photo
    3. Stream = placed photos in serial order, minus the target's photo
    4. Edited page = target slot + 1x1 slots; other pages = uniform 1x1
    5. Fill non-target slots from the stream, carrying transforms over
    6. Allocate overflow pages (edited page's layout) for what is left
    7. Drop pages without photos (at least one page survives)
    8. Remap the current page index by page identity

Dependencies:
    - core.models: Document, Page, Slot, SlotTransform
    - layout.grid: slot generation
    - layout.ordering: serial order reconciliation

Used By:
    - editor.operations.set_slot_span
"""

from __future__ import annotations

import logging
import math
from collections import deque
from dataclasses import replace
from typing import Deque, Dict, List, Tuple

from photoprint.core.grid_config import get_grid
from photoprint.core.models import IDENTITY, Document, Page, Slot, SlotTransform

from .grid import clamp_span, new_page, reset_to_uniform, slots_around
from .ordering import reconcile_photo_order

logger = logging.getLogger(__name__)


def redistribute_for_span(
    document: Document,
    page_id: str,
    slot_id: str,
    col_span: int,
    row_span: int,
) -> Document:
    """
    Change one slot's span and re-flow all placed photos.

    Args:
        document: Current snapshot
        page_id: Page holding the target slot
        slot_id: Target slot
        col_span: Requested column span (clamped into the grid)
        row_span: Requested row span (clamped into the grid)

    Returns:
        New snapshot (version + 1). The input is returned unchanged when
        the page or slot does not exist.

    Example:
        >>> # 2x2 page holding P1, P2, P3; grow slot (1,1) to 2x2
        >>> result = redistribute_for_span(doc, page.id, first_slot.id, 2, 2)
        >>> [p.photo_ids for p in result.pages]
        [['P1'], ['P2', 'P3']]
    """
    page_index = document.page_index(page_id)
    page = document.pages[page_index] if page_index >= 0 else None
    target = page.slot(slot_id) if page is not None else None
    if page is None or target is None:
        logger.debug(f"Span change ignored: unknown page {page_id} / slot {slot_id}")
        return document

    new_cols, new_rows = clamp_span(target, col_span, row_span, page.rows, page.cols)
    target = replace(target, col_span=new_cols, row_span=new_rows)

    transforms = _transform_map(document.pages)
    placed = document.placed_photo_ids
    stream: Deque[str] = deque(
        pid for pid in document.photo_ids
        if pid in placed and pid != target.photo_id
    )

    laid_out: List[Page] = []
    for index, existing in enumerate(document.pages):
        if index == page_index:
            laid_out.append(replace(existing, slots=slots_around(target, existing.rows, existing.cols)))
        else:
            laid_out.append(reset_to_uniform(existing))

    filled = [_fill_page(p, stream, transforms, keep_slot_id=target.id) for p in laid_out]

    if stream:
        overflow = allocate_pages(len(stream), page.layout)
        logger.info(f"Span change overflowed {len(stream)} photos onto {len(overflow)} new pages")
        filled.extend(_fill_page(p, stream, transforms) for p in overflow)

    pages = _prune_empty(filled, keep_id=page.id)
    current = _remap_current(document, pages, edited_page_id=page.id)

    logger.debug(
        f"Span of slot {slot_id} set to {new_cols}x{new_rows}; "
        f"{len(document.pages)} -> {len(pages)} pages"
    )

    return document.bump(
        pages=tuple(pages),
        photos=reconcile_photo_order(pages, document.photos),
        current_page_index=current,
    )


def allocate_pages(demand: int, layout: int) -> List[Page]:
    """
    Allocate empty pages until their capacity covers demand.

    Returns exactly ceil(demand / capacity) pages (none for demand <= 0).
    """
    if demand <= 0:
        return []
    capacity = get_grid(layout).capacity
    return [new_page(layout) for _ in range(math.ceil(demand / capacity))]


def _transform_map(pages: Tuple[Page, ...]) -> Dict[str, SlotTransform]:
    """Last known transform for each placed photo id."""
    transforms: Dict[str, SlotTransform] = {}
    for page in pages:
        for slot in page.occupied_slots():
            transforms[slot.photo_id] = slot.transform
    return transforms


def _fill_page(
    page: Page,
    stream: Deque[str],
    transforms: Dict[str, SlotTransform],
    keep_slot_id: str = "",
) -> Page:
    """Assign photos from the stream to the page's slots in array order."""
    slots: List[Slot] = []
    for slot in page.slots:
        if slot.id == keep_slot_id:
            slots.append(slot)
        elif stream:
            photo_id = stream.popleft()
            slots.append(replace(slot, photo_id=photo_id, transform=transforms.get(photo_id, IDENTITY)))
        else:
            slots.append(replace(slot, photo_id=None, transform=IDENTITY))
    return page.with_slots(tuple(slots))


def _prune_empty(pages: List[Page], keep_id: str) -> List[Page]:
    """Drop pages without photos; keep the edited page if all are empty."""
    kept = [page for page in pages if not page.is_empty]
    if kept:
        return kept
    fallback = [page for page in pages if page.id == keep_id]
    return fallback or pages[:1]


def _remap_current(document: Document, pages: List[Page], edited_page_id: str) -> int:
    """Follow the current page by identity, else the edited page, else clamp."""
    ids = [page.id for page in pages]
    current = document.current_page
    if current is not None and current.id in ids:
        return ids.index(current.id)
    if edited_page_id in ids:
        return ids.index(edited_page_id)
    return max(0, min(document.current_page_index, len(pages) - 1))
