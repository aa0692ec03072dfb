"""
Module: core.grid_config

Purpose:
    Maps a discrete layout identifier to a fixed row/column grid.
    Leaf module: no state, imported by the models and every engine.

Key Functions:
    - get_grid(): Layout identifier -> GridSpec

Key Classes:
    - GridSpec: Immutable rows/cols pair for a layout

Dependencies:
    - dataclasses (std)

Used By:
    - core.models.pages: Page.grid
    - layout.grid: slot generation
    - layout.redistribution / layout.arrange: page templates
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


# Interaction defaults shared by the engines
DEFAULT_LAYOUT = 4
MIN_FRACTION = 0.05
TRACK_GAP_PX = 8
MIN_SCALE = 0.3
MAX_SCALE = 3.0
ROTATION_STEP = 90


@dataclass(frozen=True)
class GridSpec:
    """
    Row/column grid for a layout identifier (immutable).

    Attributes:
        layout: Layout identifier (number of photos at 1x1 spans)
        rows: Number of row tracks
        cols: Number of column tracks
        label: Human readable name for pickers

    Example:
        >>> get_grid(6)
        GridSpec(layout=6, rows=3, cols=2, label='6 Photos')
    """

    layout: int
    rows: int
    cols: int
    label: str

    @property
    def capacity(self) -> int:
        """Number of 1x1 cells in the grid."""
        return self.rows * self.cols


LAYOUT_CONFIGS: Dict[int, GridSpec] = {
    1: GridSpec(1, rows=1, cols=1, label="1 Photo"),
    2: GridSpec(2, rows=2, cols=1, label="2 Photos"),
    3: GridSpec(3, rows=3, cols=1, label="3 Photos"),
    4: GridSpec(4, rows=2, cols=2, label="4 Photos"),
    6: GridSpec(6, rows=3, cols=2, label="6 Photos"),
    8: GridSpec(8, rows=4, cols=2, label="8 Photos"),
    12: GridSpec(12, rows=4, cols=3, label="12 Photos"),
}

SUPPORTED_LAYOUTS = tuple(LAYOUT_CONFIGS)


def get_grid(layout: int) -> GridSpec:
    """
    Look up the grid for a layout identifier.

    Args:
        layout: One of SUPPORTED_LAYOUTS

    Returns:
        GridSpec with rows * cols == layout

    Raises:
        ValueError: If the identifier is not a supported layout
    """
    try:
        return LAYOUT_CONFIGS[layout]
    except KeyError:
        raise ValueError(
            f"Unsupported layout {layout!r}; expected one of {SUPPORTED_LAYOUTS}"
        ) from None
