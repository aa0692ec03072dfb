"""
Module: layout.grid

Purpose:
    Slot generation and span bookkeeping for a page's row x column grid.
    Every function here returns slot arrays that partition the grid.

Key Functions:
    - uniform_slots(): 1x1 slot per cell, row-major
    - clamp_span(): Fit a requested span inside the grid from its origin
    - slots_around(): A spanned slot plus 1x1 slots for every other cell
    - new_page(): Empty page with uniform slots and tracks

Dependencies:
    - core.models: Slot, Page
    - layout.tracks: uniform_fractions

Used By:
    - layout.redistribution
    - layout.arrange
    - editor.operations
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from photoprint.core.grid_config import get_grid
from photoprint.core.models import Page, Slot, new_id

from .tracks import uniform_fractions


def uniform_slots(
    rows: int,
    cols: int,
    ids: Optional[Sequence[str]] = None,
) -> Tuple[Slot, ...]:
    """
    One empty 1x1 slot per grid cell, in row-major order.

    Args:
        rows: Row count
        cols: Column count
        ids: Slot ids to reuse index-for-index; fresh ids fill the rest

    Example:
        >>> [s.origin for s in uniform_slots(2, 2)]
        [(1, 1), (1, 2), (2, 1), (2, 2)]
    """
    ids = list(ids or ())
    slots: List[Slot] = []
    for row in range(1, rows + 1):
        for col in range(1, cols + 1):
            index = len(slots)
            slot_id = ids[index] if index < len(ids) else new_id()
            slots.append(Slot(id=slot_id, col_start=col, row_start=row))
    return tuple(slots)


def clamp_span(
    slot: Slot,
    col_span: int,
    row_span: int,
    rows: int,
    cols: int,
) -> Tuple[int, int]:
    """
    Clamp a requested span so it fits the grid from the slot's origin.

    Never below 1x1; never past the last column/row. Silent, no error.

    Returns:
        (col_span, row_span)

    Example:
        >>> clamp_span(Slot(id="s", col_start=2), 5, 0, rows=2, cols=2)
        (1, 1)
    """
    max_cols = max(1, cols - slot.col_start + 1)
    max_rows = max(1, rows - slot.row_start + 1)
    return (
        max(1, min(col_span, max_cols)),
        max(1, min(row_span, max_rows)),
    )


def slots_around(target: Slot, rows: int, cols: int) -> Tuple[Slot, ...]:
    """
    Lay out a grid holding target plus 1x1 slots for every uncovered cell.

    Slots are emitted in row-major order of their top-left cell, so the
    target appears where its origin falls in reading order. The 1x1
    slots are empty with fresh ids; target is kept as given.
    """
    covered = target.cells()
    slots: List[Slot] = []
    for row in range(1, rows + 1):
        for col in range(1, cols + 1):
            if (row, col) == target.origin:
                slots.append(target)
            elif (row, col) not in covered:
                slots.append(Slot(id=new_id(), col_start=col, row_start=row))
    return tuple(slots)


def new_page(layout: int, page_id: Optional[str] = None) -> Page:
    """Empty page with one 1x1 slot per cell and uniform tracks."""
    grid = get_grid(layout)
    return Page(
        id=page_id or new_id(),
        layout=layout,
        slots=uniform_slots(grid.rows, grid.cols),
        col_sizes=uniform_fractions(grid.cols),
        row_sizes=uniform_fractions(grid.rows),
    )


def reset_to_uniform(page: Page) -> Page:
    """
    Re-lay a page as a uniform 1x1 grid of its layout.

    Existing slot ids are reused index-for-index; photos and transforms
    are dropped. Track fractions are kept.
    """
    grid = page.grid
    return replace(
        page,
        slots=uniform_slots(grid.rows, grid.cols, ids=[s.id for s in page.slots]),
    )
