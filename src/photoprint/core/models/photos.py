"""
Module: photos

Purpose:
    Provides the Photo dataclass - an ingested source image with its
    intrinsic pixel size. Photos are owned by the document's photo
    collection and referenced by slots through their id.

Dependencies:
    - dataclasses (std)
    - uuid (std)

Used By:
    - core.models.document.Document
    - ingest.loader (creation)
    - output.compositor (aspect ratio, decoding)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Optional


def new_id() -> str:
    """Fresh identity for photos, slots and pages."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Photo:
    """
    Ingested photo (immutable).

    Attributes:
        id: Unique identity assigned on ingestion
        name: Display name (original file name)
        width: Intrinsic pixel width (after EXIF orientation)
        height: Intrinsic pixel height (after EXIF orientation)
        data: Raw encoded image bytes, the source handle used at export
        mime_type: MIME type reported by the ingestion source, if any

    Example:
        >>> photo = Photo(id="p1", name="beach.jpg", width=800, height=600)
        >>> photo.aspect_ratio
        1.3333333333333333
    """

    id: str
    name: str
    width: int
    height: int
    data: bytes = field(default=b"", repr=False, compare=False)
    mime_type: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate dimensions on construction."""
        if self.width < 0 or self.height < 0:
            raise ValueError(
                f"Photo dimensions must be non-negative: {self.width}x{self.height}"
            )

    @property
    def aspect_ratio(self) -> float:
        """Width / height, or 0.0 when the size is unknown."""
        if self.height == 0:
            return 0.0
        return self.width / self.height

    @property
    def has_size(self) -> bool:
        """True when both intrinsic dimensions are known."""
        return self.width > 0 and self.height > 0
