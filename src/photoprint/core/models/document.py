"""
Module: document

Purpose:
    Provides the Document dataclass - the versioned, immutable snapshot
    that every mutation entry point consumes and replaces wholesale.

Key Functions:
    - Document.bump(): Copy with the next version number
    - Document.placed_photo_ids: Photos currently held by a slot
    - Document.unassigned_photos: Photos held by no slot

Dependencies:
    - dataclasses (std)
    - .pages.Page, .photos.Photo

Used By:
    - editor.operations: All mutations
    - editor.store.DocumentStore: Current snapshot
    - output.renderer / output.exporter: Export
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, List, Optional, Set, Tuple

from ..grid_config import DEFAULT_LAYOUT
from .pages import Page
from .photos import Photo


@dataclass(frozen=True)
class Document:
    """
    Versioned document snapshot (immutable).

    Attributes:
        pages: Ordered pages
        photos: Photo collection in canonical serial order
        current_page_index: Index of the page shown by the UI host
        default_layout: Layout used for implicitly created pages
        auto_arrange: Whether photo add/remove rebalances all pages
        version: Monotonic snapshot number, incremented by every mutation

    Invariants:
        - At least one page exists whenever photos are arranged
        - photos order is the serial order used by the engines
    """

    pages: Tuple[Page, ...] = ()
    photos: Tuple[Photo, ...] = ()
    current_page_index: int = 0
    default_layout: int = DEFAULT_LAYOUT
    auto_arrange: bool = True
    version: int = 0

    def bump(self, **changes: Any) -> "Document":
        """Copy with changes applied and the version incremented."""
        return replace(self, version=self.version + 1, **changes)

    # ─────────────────────────────────────────────────────────────────────────
    # Lookups
    # ─────────────────────────────────────────────────────────────────────────

    def page(self, page_id: str) -> Optional[Page]:
        for page in self.pages:
            if page.id == page_id:
                return page
        return None

    def page_index(self, page_id: str) -> int:
        """Index of page_id, or -1."""
        for index, page in enumerate(self.pages):
            if page.id == page_id:
                return index
        return -1

    def photo(self, photo_id: Optional[str]) -> Optional[Photo]:
        if photo_id is None:
            return None
        for photo in self.photos:
            if photo.id == photo_id:
                return photo
        return None

    @property
    def current_page(self) -> Optional[Page]:
        if 0 <= self.current_page_index < len(self.pages):
            return self.pages[self.current_page_index]
        return None

    @property
    def photo_ids(self) -> List[str]:
        """Photo ids in serial order."""
        return [photo.id for photo in self.photos]

    @property
    def placed_photo_ids(self) -> Set[str]:
        return {pid for page in self.pages for pid in page.photo_ids}

    @property
    def unassigned_photos(self) -> List[Photo]:
        placed = self.placed_photo_ids
        return [photo for photo in self.photos if photo.id not in placed]

    @property
    def has_content(self) -> bool:
        """True when any slot on any page holds a photo."""
        return any(not page.is_empty for page in self.pages)
