"""
Module: output

Purpose:
    Print geometry and PDF export.

Key Functions:
    - compute_placement(): Physical placement of one slot's photo
    - render_to_pdf(): Document -> PDF
    - export_document(): Validated, atomic export to a directory

Key Classes:
    - PrintConfig: Page, margin, padding and raster settings
    - Placement, Rect: Placement geometry in millimetres
    - ExportResult, RenderStats: Export outcomes
"""

from .compositor import (
    Placement,
    PhotoDecodeError,
    Rect,
    compute_placement,
    contain_size,
    decode_photo,
    render_slot_bitmap,
    slot_rect,
)
from .config import PrintConfig
from .exporter import ExportError, ExportResult, default_filename, export_document
from .renderer import RenderStats, render_to_pdf

__all__ = [
    "ExportError",
    "ExportResult",
    "Placement",
    "PhotoDecodeError",
    "PrintConfig",
    "Rect",
    "RenderStats",
    "compute_placement",
    "contain_size",
    "decode_photo",
    "default_filename",
    "export_document",
    "render_slot_bitmap",
    "render_to_pdf",
    "slot_rect",
]
