"""
Module: output.config

Purpose:
    Configuration for print geometry and PDF export.
    Defines the fixed A4 page, margin, slot padding and raster settings.

Key Classes:
    - PrintConfig: Immutable print configuration

Dependencies:
    - dataclasses (std)

Used By:
    - output.compositor: Physical placement
    - output.renderer: PDF page size and rasterising
    - output.exporter: Export entry point
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


# A4 portrait in millimetres
A4_WIDTH_MM = 210.0
A4_HEIGHT_MM = 297.0

# Fixed print margin on every side
PRINT_MARGIN_MM = 5.0

# Padding inside each slot so images don't touch the grid borders
SLOT_PADDING_MM = 2.0

# Raster resolution of the per-slot bitmaps
DEFAULT_DPI = 300

MM_PER_INCH = 25.4


@dataclass(frozen=True)
class PrintConfig:
    """
    Configuration for print export (immutable).

    Attributes:
        page_width_mm: Physical page width
        page_height_mm: Physical page height
        margin_mm: Margin on all four sides
        slot_padding_mm: Inner padding of every slot
        dpi: Resolution of the rasterised slot bitmaps
        jpeg_quality: JPEG quality of embedded bitmaps (1-95)
        draw_slot_borders: Whether to outline every slot
        border_rgb: Border colour, 0-255 per channel
        border_width_mm: Border line width

    Example:
        >>> config = PrintConfig()
        >>> config.printable_width
        200.0
    """

    page_width_mm: float = A4_WIDTH_MM
    page_height_mm: float = A4_HEIGHT_MM
    margin_mm: float = PRINT_MARGIN_MM
    slot_padding_mm: float = SLOT_PADDING_MM
    dpi: int = DEFAULT_DPI
    jpeg_quality: int = 95
    draw_slot_borders: bool = True
    border_rgb: Tuple[int, int, int] = (220, 220, 220)
    border_width_mm: float = 0.1

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width_mm <= 0 or self.page_height_mm <= 0:
            raise ValueError(
                f"Page size must be positive: {self.page_width_mm}x{self.page_height_mm}"
            )
        if self.margin_mm < 0:
            raise ValueError(f"margin_mm must be non-negative: {self.margin_mm}")
        if self.slot_padding_mm < 0:
            raise ValueError(f"slot_padding_mm must be non-negative: {self.slot_padding_mm}")
        if self.printable_width <= 0:
            raise ValueError("Margins exceed page width")
        if self.printable_height <= 0:
            raise ValueError("Margins exceed page height")
        if self.dpi <= 0:
            raise ValueError(f"dpi must be positive: {self.dpi}")
        if not 1 <= self.jpeg_quality <= 95:
            raise ValueError(f"jpeg_quality must be within 1-95: {self.jpeg_quality}")

    @property
    def printable_width(self) -> float:
        """Width available for the grid (excluding margins)."""
        return self.page_width_mm - 2 * self.margin_mm

    @property
    def printable_height(self) -> float:
        """Height available for the grid (excluding margins)."""
        return self.page_height_mm - 2 * self.margin_mm

    def mm_to_px(self, mm: float) -> int:
        """Millimetres to raster pixels at the configured DPI."""
        return round(mm * self.dpi / MM_PER_INCH)
