"""
PhotoPrint Core Package

Shared data model and grid configuration for every other subpackage.

1. **Immutable Data Models**
   - Frozen dataclasses, new instances created for any change
   - The document is replaced wholesale, never edited in place

2. **Grid Config**
   - Layout identifier -> fixed rows/cols (core.grid_config)
"""

from .grid_config import GridSpec, LAYOUT_CONFIGS, SUPPORTED_LAYOUTS, get_grid
from .models import IDENTITY, Document, Page, Photo, Slot, SlotTransform, new_id

__all__ = [
    "GridSpec",
    "LAYOUT_CONFIGS",
    "SUPPORTED_LAYOUTS",
    "get_grid",
    "IDENTITY",
    "Document",
    "Page",
    "Photo",
    "Slot",
    "SlotTransform",
    "new_id",
]
