"""
Module: output.renderer

Purpose:
    Render a Document to PDF using ReportLab.
    Each Page becomes one physical page; every occupied slot is
    composited into a bitmap and drawn at its available rectangle.

Key Functions:
    - render_to_pdf(): Main rendering function

Key Classes:
    - RenderStats: Counts reported back to the exporter

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
    - output.compositor: Placement and slot bitmaps

Used By:
    - output.exporter: Export entry point
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Callable, Mapping, Optional, Tuple, Union

from PIL import Image
from reportlab.lib.units import mm as MM_PT
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from photoprint.core.models import Document, Page

from .compositor import (
    PhotoDecodeError,
    Rect,
    compute_placement,
    decode_photo,
    render_slot_bitmap,
    slot_rect,
)
from .config import PrintConfig

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]
Viewports = Mapping[str, Tuple[float, float]]


@dataclass(frozen=True)
class RenderStats:
    """
    Summary of one render.

    Attributes:
        pages: Pages written
        placed: Photos drawn
        skipped: Occupied slots left blank (decode failure, degenerate geometry)
    """

    pages: int
    placed: int
    skipped: int


def render_to_pdf(
    document: Document,
    target: Union[Path, BinaryIO],
    config: Optional[PrintConfig] = None,
    *,
    viewports: Optional[Viewports] = None,
    progress: Optional[ProgressCallback] = None,
) -> RenderStats:
    """
    Render every page of the document to a PDF.

    Pages are processed one at a time, slots in slot order. A slot whose
    photo cannot be decoded is logged and left blank; the rest of the
    page is still written.

    Args:
        document: Document to render
        target: Output path or writable binary stream
        config: Print configuration (A4 defaults)
        viewports: Slot id -> on-screen (width_px, height_px), used to
            convert pan offsets; slots without an entry ignore their pan
        progress: Called with the percentage done after each page

    Returns:
        RenderStats for the written file

    Example:
        >>> render_to_pdf(document, Path("out/photos.pdf"))
    """
    config = config or PrintConfig()
    viewports = viewports or {}

    if isinstance(target, Path):
        target.parent.mkdir(parents=True, exist_ok=True)
        c = canvas.Canvas(str(target), pagesize=_page_size(config))
    else:
        c = canvas.Canvas(target, pagesize=_page_size(config))

    placed = 0
    skipped = 0
    total = len(document.pages)
    for index, page in enumerate(document.pages):
        page_placed, page_skipped = _render_page(c, document, page, config, viewports)
        placed += page_placed
        skipped += page_skipped
        c.showPage()
        if progress is not None:
            progress(round((index + 1) / total * 100))

    c.save()

    logger.info(f"Rendered {total} pages ({placed} photos, {skipped} skipped)")
    return RenderStats(pages=total, placed=placed, skipped=skipped)


def _render_page(
    c: canvas.Canvas,
    document: Document,
    page: Page,
    config: PrintConfig,
    viewports: Viewports,
) -> Tuple[int, int]:
    """Draw one page's photos, then its slot outlines. Returns (placed, skipped)."""
    placed = 0
    skipped = 0

    for slot in page.occupied_slots():
        photo = document.photo(slot.photo_id)
        if photo is None:
            logger.warning(f"Slot {slot.id} references unknown photo {slot.photo_id}")
            skipped += 1
            continue

        placement = compute_placement(page, slot, photo, config, viewports.get(slot.id))
        if placement is None:
            logger.warning(f"Skipping {photo.name}: degenerate slot geometry")
            skipped += 1
            continue

        try:
            image = decode_photo(photo)
        except PhotoDecodeError as e:
            logger.warning(f"Skipping slot {slot.id}: {e}")
            skipped += 1
            continue

        bitmap = render_slot_bitmap(image, placement, config)
        _draw_bitmap(c, bitmap, placement.available, config)
        placed += 1

    if config.draw_slot_borders:
        _draw_slot_borders(c, page, config)

    return placed, skipped


def _draw_bitmap(c: canvas.Canvas, bitmap: Image.Image, box: Rect, config: PrintConfig) -> None:
    """Draw bitmap stretched over box (top-down millimetres)."""
    c.drawImage(
        _pil_to_reader(bitmap, config.jpeg_quality),
        _mm_to_pt(box.x),
        _transform_y(_mm_to_pt(config.page_height_mm), box.y, box.height),
        width=_mm_to_pt(box.width),
        height=_mm_to_pt(box.height),
    )


def _draw_slot_borders(c: canvas.Canvas, page: Page, config: PrintConfig) -> None:
    """
    Outline each slot once, over its full span.

    Slots partition the grid, so outlining slots (not cells) never draws
    a line through a spanned slot.
    """
    page_height_pt = _mm_to_pt(config.page_height_mm)
    red, green, blue = (channel / 255.0 for channel in config.border_rgb)

    c.saveState()
    c.setStrokeColorRGB(red, green, blue)
    c.setLineWidth(_mm_to_pt(config.border_width_mm))
    for slot in page.slots:
        rect = slot_rect(page, slot, config)
        c.rect(
            _mm_to_pt(rect.x),
            _transform_y(page_height_pt, rect.y, rect.height),
            _mm_to_pt(rect.width),
            _mm_to_pt(rect.height),
            stroke=1,
            fill=0,
        )
    c.restoreState()


def _page_size(config: PrintConfig) -> Tuple[float, float]:
    return (_mm_to_pt(config.page_width_mm), _mm_to_pt(config.page_height_mm))


def _pil_to_reader(img: Image.Image, quality: int) -> ImageReader:
    """
    Convert PIL image to ReportLab ImageReader.

    Slot bitmaps are photographs, so they are embedded as JPEG.
    """
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=quality)
    buf.seek(0)
    return ImageReader(buf)


def _mm_to_pt(value: float) -> float:
    """Convert millimetres to PDF points (1/72 inch)."""
    return value * MM_PT


def _transform_y(page_height_pt: float, y_mm_top: float, height_mm: float) -> float:
    """
    Convert a top-down millimetre Y coordinate to bottom-up PDF Y.

    Args:
        page_height_pt: Page height in points
        y_mm_top: Y position from the top edge in millimetres
        height_mm: Height of the element in millimetres

    Returns:
        Y position of the element's bottom edge, in points from the bottom
    """
    return page_height_pt - _mm_to_pt(y_mm_top) - _mm_to_pt(height_mm)
