"""
Module: layout.arrange

Purpose:
    Full rebalance used after photo add/remove, clear, layout switch, or
    when auto-arrange is switched on. Earlier pages are filled first.

Key Functions:
    - auto_arrange(): Assign photo k to the k-th slot of the document

Algorithm:
    1. Reset every page to a uniform 1x1 grid of its layout
    2. Walk photos in serial order and slots in page order; photo k goes
       into slot k with an identity transform
    3. Leftover slots stay empty; overflow pages use the default layout

    Unlike layout.redistribution this neither keeps spans nor carries
    transforms over. Pages are never pruned here.

Dependencies:
    - core.models: Document, Page
    - layout.grid: reset_to_uniform
    - layout.redistribution: allocate_pages

Used By:
    - editor.operations: add/remove photos, layout switch, toggle
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List

from photoprint.core.models import Document, Page

from .grid import reset_to_uniform
from .redistribution import allocate_pages

logger = logging.getLogger(__name__)


def auto_arrange(document: Document) -> Document:
    """
    Rebalance all photos across all pages in serial order.

    Args:
        document: Current snapshot

    Returns:
        New snapshot (version + 1) where photo k sits in slot k

    Example:
        >>> # five photos, one 2x2 page
        >>> result = auto_arrange(doc)
        >>> [p.photo_count for p in result.pages]
        [4, 1]
    """
    queue: Deque[str] = deque(document.photo_ids)
    pages: List[Page] = [_fill(reset_to_uniform(page), queue) for page in document.pages]

    if queue:
        overflow = allocate_pages(len(queue), document.default_layout)
        pages.extend(_fill(page, queue) for page in overflow)

    logger.debug(f"Auto-arranged {len(document.photos)} photos onto {len(pages)} pages")

    current = document.current_page_index
    if pages:
        current = max(0, min(current, len(pages) - 1))
    else:
        current = 0
    return document.bump(pages=tuple(pages), current_page_index=current)


def _fill(page: Page, queue: Deque[str]) -> Page:
    slots = tuple(
        slot.with_photo(queue.popleft() if queue else None)
        for slot in page.slots
    )
    return page.with_slots(slots)
