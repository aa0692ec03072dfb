"""
Module: layout.ordering

Purpose:
    Global photo-order reconciliation. Recomputes the canonical serial
    order after any operation that changes which slot holds which photo,
    so manual rearrangement (drag-swap) and automatic rebalancing agree.

Algorithm:
    1. Scan pages in order, slots in array order, collecting each
       first-seen photo id
    2. Append photos held by no slot, keeping their previous relative order

Dependencies:
    - core.models: Document, Page, Photo

Used By:
    - editor.operations: After assign/swap/move/layout changes
    - layout.redistribution
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, List, Sequence, Tuple

from photoprint.core.models import Document, Page, Photo


def visual_order(pages: Sequence[Page]) -> List[str]:
    """Photo ids as first seen reading pages top-to-bottom, slot order."""
    seen: Dict[str, None] = {}
    for page in pages:
        for photo_id in page.photo_ids:
            seen.setdefault(photo_id, None)
    return list(seen)


def reconcile_photo_order(
    pages: Sequence[Page],
    photos: Sequence[Photo],
) -> Tuple[Photo, ...]:
    """
    Reorder photos into canonical serial order.

    Slot references to ids missing from photos are ignored.

    Example:
        >>> # page holds [p3, p1]; photos are (p1, p2, p3)
        >>> [p.id for p in reconcile_photo_order([page], photos)]
        ['p3', 'p1', 'p2']
    """
    by_id = {photo.id: photo for photo in photos}
    ordered = [by_id[pid] for pid in visual_order(pages) if pid in by_id]
    placed = {photo.id for photo in ordered}
    ordered.extend(photo for photo in photos if photo.id not in placed)
    return tuple(ordered)


def reconcile(document: Document) -> Document:
    """Copy of document with photos in canonical serial order (no version bump)."""
    return replace(document, photos=reconcile_photo_order(document.pages, document.photos))
