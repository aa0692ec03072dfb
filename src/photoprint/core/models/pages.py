"""
Module: pages

Purpose:
    Provides the Page dataclass - one printable A4 sheet with a grid of
    slots and fractional column/row track sizes.

Key Functions:
    - Page.grid: GridSpec for the page's layout
    - Page.covered_cells(): Check the slot partition
    - Page.replace_slot(): Copy with one slot substituted

Dependencies:
    - dataclasses (std)
    - core.grid_config: layout lookup
    - .slots.Slot

Used By:
    - core.models.document.Document
    - layout.* engines
    - output.compositor / output.renderer
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Iterator, List, Optional, Tuple

from ..grid_config import GridSpec, get_grid
from .slots import Slot


@dataclass(frozen=True)
class Page:
    """
    A printable page (immutable).

    Attributes:
        id: Unique page identity
        layout: Layout identifier selecting the nominal rows/cols
        slots: Slots in array order (row-major by top-left cell when
            produced by the engines)
        col_sizes: Column track fractions, one per column, summing to 1.0
        row_sizes: Row track fractions, one per row, summing to 1.0

    Invariants:
        - The slots' spans partition the rows x cols grid exactly
        - sum(col_sizes) == sum(row_sizes) == 1.0 (within 1e-6)

    Track fractions only drive visual/print track widths. They are
    independent of span bookkeeping.
    """

    id: str
    layout: int
    slots: Tuple[Slot, ...]
    col_sizes: Tuple[float, ...]
    row_sizes: Tuple[float, ...]

    def __post_init__(self) -> None:
        """Validate the layout identifier on construction."""
        get_grid(self.layout)

    @property
    def grid(self) -> GridSpec:
        return get_grid(self.layout)

    @property
    def rows(self) -> int:
        return self.grid.rows

    @property
    def cols(self) -> int:
        return self.grid.cols

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def photo_ids(self) -> List[str]:
        """Assigned photo ids in slot-array order."""
        return [slot.photo_id for slot in self.slots if slot.photo_id is not None]

    @property
    def photo_count(self) -> int:
        return len(self.photo_ids)

    @property
    def is_empty(self) -> bool:
        """True when no slot holds a photo."""
        return self.photo_count == 0

    def occupied_slots(self) -> Iterator[Slot]:
        return (slot for slot in self.slots if slot.photo_id is not None)

    def slot(self, slot_id: str) -> Optional[Slot]:
        for slot in self.slots:
            if slot.id == slot_id:
                return slot
        return None

    def slot_index(self, slot_id: str) -> int:
        """Index of slot_id in the slot array, or -1."""
        for index, slot in enumerate(self.slots):
            if slot.id == slot_id:
                return index
        return -1

    def covered_cells(self) -> Dict[Tuple[int, int], int]:
        """Map each (row, col) cell to how many slots cover it."""
        counts: Dict[Tuple[int, int], int] = {}
        for slot in self.slots:
            for cell in slot.cells():
                counts[cell] = counts.get(cell, 0) + 1
        return counts

    def is_partitioned(self) -> bool:
        """True when the slots cover every grid cell exactly once."""
        counts = self.covered_cells()
        expected = {
            (row, col)
            for row in range(1, self.rows + 1)
            for col in range(1, self.cols + 1)
        }
        return set(counts) == expected and all(n == 1 for n in counts.values())

    # ─────────────────────────────────────────────────────────────────────────
    # Copies
    # ─────────────────────────────────────────────────────────────────────────

    def replace_slot(self, slot: Slot) -> "Page":
        """Copy with the slot of the same id replaced."""
        return replace(
            self,
            slots=tuple(slot if s.id == slot.id else s for s in self.slots),
        )

    def with_slots(self, slots: Tuple[Slot, ...]) -> "Page":
        return replace(self, slots=tuple(slots))
