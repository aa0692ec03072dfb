"""
Module: slots

Purpose:
    Provides the Slot dataclass (a grid cell or merged group of cells that
    may hold one photo) and SlotTransform (the user's pan/zoom/rotation of
    the photo inside it).

Key Functions:
    - SlotTransform.clamp_scale(): Keep zoom inside the interactive range
    - SlotTransform.normalize_rotation(): Snap to {0, 90, 180, 270}
    - Slot.cells(): Grid cells covered by the slot's span
    - Slot.with_photo(): Assign a photo and reset the transform

Dependencies:
    - dataclasses (std)
    - core.grid_config: scale/rotation bounds

Used By:
    - core.models.pages.Page
    - layout.* engines
    - output.compositor
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import FrozenSet, Optional, Tuple

from ..grid_config import MAX_SCALE, MIN_SCALE, ROTATION_STEP


@dataclass(frozen=True)
class SlotTransform:
    """
    User transform of a photo inside its slot (immutable).

    Attributes:
        offset_x: Horizontal pan in on-screen pixels
        offset_y: Vertical pan in on-screen pixels
        scale: Zoom multiplier; 1.0 means the photo exactly fills the slot
        rotation: Clockwise rotation in degrees

    Scale and rotation are stored as given. Clamping belongs to the
    interaction boundary, see clamp_scale() and normalize_rotation().
    """

    offset_x: float = 0.0
    offset_y: float = 0.0
    scale: float = 1.0
    rotation: int = 0

    @property
    def is_identity(self) -> bool:
        return (
            self.offset_x == 0
            and self.offset_y == 0
            and self.scale == 1
            and self.rotation % 360 == 0
        )

    @staticmethod
    def clamp_scale(scale: float) -> float:
        """Clamp a zoom value into [MIN_SCALE, MAX_SCALE]."""
        return max(MIN_SCALE, min(MAX_SCALE, scale))

    @staticmethod
    def normalize_rotation(rotation: float) -> int:
        """
        Snap a rotation to the nearest quarter turn in {0, 90, 180, 270}.

        Example:
            >>> SlotTransform.normalize_rotation(-90)
            270
            >>> SlotTransform.normalize_rotation(440)
            90
        """
        quarter = round(rotation / ROTATION_STEP)
        return int((quarter * ROTATION_STEP) % 360)

    def rotated_clockwise(self) -> "SlotTransform":
        """Rotate a further quarter turn, as the rotate button does."""
        return replace(self, rotation=(self.rotation + ROTATION_STEP) % 360)

    def zoomed(self, factor: float) -> "SlotTransform":
        """Multiply the scale by factor, clamped to the interactive range."""
        return replace(self, scale=self.clamp_scale(self.scale * factor))

    def panned(self, dx: float, dy: float) -> "SlotTransform":
        return replace(self, offset_x=self.offset_x + dx, offset_y=self.offset_y + dy)


IDENTITY = SlotTransform()


@dataclass(frozen=True)
class Slot:
    """
    A rectangular region of a page's grid (immutable).

    Attributes:
        id: Unique slot identity
        photo_id: Id of the assigned photo, or None when empty
        col_start: First column covered (1-based)
        row_start: First row covered (1-based)
        col_span: Number of columns covered (>= 1)
        row_span: Number of rows covered (>= 1)
        transform: User pan/zoom/rotation

    Example:
        >>> slot = Slot(id="s1", photo_id=None, col_start=1, row_start=2, col_span=2)
        >>> sorted(slot.cells())
        [(2, 1), (2, 2)]
    """

    id: str
    photo_id: Optional[str] = None
    col_start: int = 1
    row_start: int = 1
    col_span: int = 1
    row_span: int = 1
    transform: SlotTransform = field(default=IDENTITY)

    def __post_init__(self) -> None:
        """Validate grid placement on construction."""
        if self.col_start < 1 or self.row_start < 1:
            raise ValueError(
                f"Slot start must be 1-based: col={self.col_start}, row={self.row_start}"
            )
        if self.col_span < 1 or self.row_span < 1:
            raise ValueError(
                f"Slot span must be >= 1: {self.col_span}x{self.row_span}"
            )

    # ─────────────────────────────────────────────────────────────────────────
    # Geometry
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def col_end(self) -> int:
        """Last column covered (inclusive)."""
        return self.col_start + self.col_span - 1

    @property
    def row_end(self) -> int:
        """Last row covered (inclusive)."""
        return self.row_start + self.row_span - 1

    @property
    def origin(self) -> Tuple[int, int]:
        """Top-left cell as (row, col)."""
        return (self.row_start, self.col_start)

    @property
    def is_unit(self) -> bool:
        return self.col_span == 1 and self.row_span == 1

    def cells(self) -> FrozenSet[Tuple[int, int]]:
        """All (row, col) cells covered by this slot's span."""
        return frozenset(
            (row, col)
            for row in range(self.row_start, self.row_end + 1)
            for col in range(self.col_start, self.col_end + 1)
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Copies
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_empty(self) -> bool:
        return self.photo_id is None

    def with_photo(self, photo_id: Optional[str]) -> "Slot":
        """Copy holding photo_id with the transform reset to identity."""
        return replace(self, photo_id=photo_id, transform=IDENTITY)

    def with_transform(self, transform: SlotTransform) -> "Slot":
        return replace(self, transform=transform)
