"""
Module: output.compositor

Purpose:
    Print geometry for one occupied slot: converts the slot's grid
    position, the page's track fractions, the user's pan/zoom/rotation
    and the photo's intrinsic size into an exact, non-cropping placement
    on the physical page, and rasterises the bitmap placed there.

Key Functions:
    - slot_rect(): Physical rectangle of a slot (margin-offset)
    - contain_size(): Aspect-preserving fit inside a rectangle
    - compute_placement(): Full placement for one slot
    - decode_photo(): Bytes -> oriented RGB image
    - render_slot_bitmap(): Rotated photo on a white canvas the size of
      the available rectangle

Algorithm (compute_placement):
    1. Track fractions -> physical column widths / row heights
    2. Slot rect = preceding tracks (+ margin), size = spanned tracks
    3. Available rect = slot rect minus padding on all four sides
    4. 90/270 rotation swaps the photo's effective width/height
    5. Base size = contain fit of the effective aspect ratio
    6. Final scale = min(user scale, largest scale that still fits),
       so the export never crops even when the preview does
    7. Centre, add the pan (on-screen px -> mm via the slot viewport),
       clamp so the image stays inside the available rect
    8. The bitmap is rotated before placement

Dependencies:
    - PIL: Decoding, rotation, resampling
    - layout.tracks: track_lengths
    - output.config: PrintConfig

Used By:
    - output.renderer: One call per occupied slot
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from photoprint.core.models import Page, Photo, Slot, SlotTransform
from photoprint.layout.tracks import track_lengths

from .config import PrintConfig

logger = logging.getLogger(__name__)

# Clockwise quarter turns expressed as PIL transposes (PIL turns counter-clockwise)
_CLOCKWISE = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}

Viewport = Tuple[float, float]


class PhotoDecodeError(Exception):
    """Photo bitmap could not be decoded for export."""
    pass


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle in millimetres, origin at the page's top-left.

    Example:
        >>> Rect(5, 5, 100, 50).right
        105
    """

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def inset(self, amount: float) -> "Rect":
        """Shrink by amount on all four sides."""
        return Rect(
            self.x + amount,
            self.y + amount,
            self.width - 2 * amount,
            self.height - 2 * amount,
        )

    def contains(self, other: "Rect", tolerance: float = 1e-9) -> bool:
        return (
            other.x >= self.x - tolerance
            and other.y >= self.y - tolerance
            and other.right <= self.right + tolerance
            and other.bottom <= self.bottom + tolerance
        )


@dataclass(frozen=True)
class Placement:
    """
    Physical placement of one photo (immutable).

    Attributes:
        slot: Slot rectangle on the page
        available: Slot rectangle minus padding; the writer's image box
        image: Where the (rotated) photo is drawn, inside available
        rotation: Clockwise rotation applied to the bitmap
        scale: Scale actually used (user scale capped to avoid cropping)
        requested_scale: The user's scale
    """

    slot: Rect
    available: Rect
    image: Rect
    rotation: int
    scale: float
    requested_scale: float

    @property
    def offset_in_available(self) -> Tuple[float, float]:
        """Image origin relative to the available rectangle (mm)."""
        return (self.image.x - self.available.x, self.image.y - self.available.y)


def slot_rect(page: Page, slot: Slot, config: PrintConfig) -> Rect:
    """Physical rectangle covered by the slot's span."""
    col_widths = track_lengths(page.col_sizes, page.cols, config.printable_width)
    row_heights = track_lengths(page.row_sizes, page.rows, config.printable_height)

    col = slot.col_start - 1
    row = slot.row_start - 1
    return Rect(
        x=config.margin_mm + sum(col_widths[:col]),
        y=config.margin_mm + sum(row_heights[:row]),
        width=sum(col_widths[col: col + slot.col_span]),
        height=sum(row_heights[row: row + slot.row_span]),
    )


def contain_size(aspect: float, width: float, height: float) -> Tuple[float, float]:
    """
    Largest (w, h) with w / h == aspect that fits inside width x height.

    Example:
        >>> contain_size(2.0, 100, 100)
        (100, 50.0)
    """
    if aspect > width / height:
        return width, width / aspect
    return height * aspect, height


def effective_size(photo: Photo, rotation: int) -> Tuple[int, int]:
    """Photo (width, height) after a quarter-turn rotation."""
    if rotation % 360 in (90, 270):
        return photo.height, photo.width
    return photo.width, photo.height


def compute_placement(
    page: Page,
    slot: Slot,
    photo: Photo,
    config: PrintConfig,
    viewport: Optional[Viewport] = None,
) -> Optional[Placement]:
    """
    Compute the physical placement of photo in slot.

    Args:
        page: Page holding the slot (for track fractions and grid)
        slot: Occupied slot
        photo: The slot's photo
        config: Print configuration
        viewport: On-screen (width_px, height_px) of the slot, used to
            convert the pan offset to millimetres. Without it the pan is
            ignored.

    Returns:
        Placement, or None for degenerate geometry (unknown photo size,
        padding larger than the slot, non-positive scale)
    """
    rect = slot_rect(page, slot, config)
    available = rect.inset(config.slot_padding_mm)
    if available.width <= 0 or available.height <= 0:
        logger.debug(f"Slot {slot.id} has no room inside its padding")
        return None
    if not photo.has_size:
        logger.debug(f"Photo {photo.id} has no intrinsic size")
        return None

    transform = slot.transform
    rotation = SlotTransform.normalize_rotation(transform.rotation)
    eff_w, eff_h = effective_size(photo, rotation)

    base_w, base_h = contain_size(eff_w / eff_h, available.width, available.height)

    max_scale = min(available.width / base_w, available.height / base_h)
    scale = min(transform.scale, max_scale)
    if scale <= 0:
        logger.debug(f"Slot {slot.id} has non-positive scale {transform.scale}")
        return None
    draw_w = base_w * scale
    draw_h = base_h * scale

    rel_x = (available.width - draw_w) / 2
    rel_y = (available.height - draw_h) / 2

    if viewport is not None and viewport[0] > 0 and viewport[1] > 0:
        rel_x += transform.offset_x * rect.width / viewport[0]
        rel_y += transform.offset_y * rect.height / viewport[1]

    rel_x = _clamp(rel_x, 0.0, max(0.0, available.width - draw_w))
    rel_y = _clamp(rel_y, 0.0, max(0.0, available.height - draw_h))

    return Placement(
        slot=rect,
        available=available,
        image=Rect(available.x + rel_x, available.y + rel_y, draw_w, draw_h),
        rotation=rotation,
        scale=scale,
        requested_scale=transform.scale,
    )


def decode_photo(photo: Photo) -> Image.Image:
    """
    Decode a photo's bytes into an RGB image with EXIF orientation applied.

    Raises:
        PhotoDecodeError: If the bytes cannot be decoded
    """
    try:
        with Image.open(io.BytesIO(photo.data)) as img:
            img.load()
            oriented = ImageOps.exif_transpose(img)
            return _flatten(oriented)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise PhotoDecodeError(f"Cannot decode {photo.name}: {e}") from e


def rotate_clockwise(image: Image.Image, rotation: int) -> Image.Image:
    """Rotate content clockwise by a quarter-turn multiple."""
    rotation %= 360
    if rotation == 0:
        return image
    transpose = _CLOCKWISE.get(rotation)
    if transpose is not None:
        return image.transpose(transpose)
    return image.rotate(-rotation, expand=True, fillcolor="white")


def render_slot_bitmap(image: Image.Image, placement: Placement, config: PrintConfig) -> Image.Image:
    """
    Rasterise the bitmap handed to the document writer for one slot.

    The canvas covers the available rectangle at config.dpi and is white
    wherever the photo does not reach; the rotated photo is resized to
    the final draw size and pasted at its (clamped) offset.
    """
    canvas_w = max(1, config.mm_to_px(placement.available.width))
    canvas_h = max(1, config.mm_to_px(placement.available.height))
    canvas = Image.new("RGB", (canvas_w, canvas_h), "white")

    draw_w = min(canvas_w, max(1, config.mm_to_px(placement.image.width)))
    draw_h = min(canvas_h, max(1, config.mm_to_px(placement.image.height)))
    rel_x, rel_y = placement.offset_in_available
    left = int(_clamp(config.mm_to_px(rel_x), 0, canvas_w - draw_w))
    top = int(_clamp(config.mm_to_px(rel_y), 0, canvas_h - draw_h))

    rotated = rotate_clockwise(image, placement.rotation)
    resized = rotated.resize((draw_w, draw_h), Image.Resampling.LANCZOS)
    canvas.paste(resized, (left, top))
    return canvas


def _flatten(image: Image.Image) -> Image.Image:
    """Composite transparency onto white and return an RGB image."""
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, "white")
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return image.convert("RGB")


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))
