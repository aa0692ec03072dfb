"""
Module: layout

Purpose:
    Geometry engines operating on document snapshots.
    Converts grid-shape changes into new, valid page lists.

Key Functions:
    - resize_tracks(): Fractional track sizing for drag resize
    - redistribute_for_span(): Re-flow after a span change
    - auto_arrange(): Full rebalance in serial order
    - reconcile_photo_order(): Canonical serial order

Dependencies:
    - photoprint.core.models: Document, Page, Slot

Used By:
    - photoprint.editor.operations
    - photoprint.output.compositor (track_lengths)
"""

from .tracks import (
    available_space,
    boundary_positions,
    normalize_fractions,
    resize_tracks,
    track_lengths,
    uniform_fractions,
)
from .grid import clamp_span, new_page, reset_to_uniform, slots_around, uniform_slots
from .ordering import reconcile, reconcile_photo_order, visual_order
from .redistribution import allocate_pages, redistribute_for_span
from .arrange import auto_arrange

__all__ = [
    # Tracks
    "available_space",
    "boundary_positions",
    "normalize_fractions",
    "resize_tracks",
    "track_lengths",
    "uniform_fractions",
    # Grid
    "clamp_span",
    "new_page",
    "reset_to_uniform",
    "slots_around",
    "uniform_slots",
    # Ordering
    "reconcile",
    "reconcile_photo_order",
    "visual_order",
    # Engines
    "allocate_pages",
    "redistribute_for_span",
    "auto_arrange",
]
