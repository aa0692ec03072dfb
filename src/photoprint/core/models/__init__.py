"""
Core Models Package

Immutable, validated data models that serve as the single source of truth.

All models in this package are frozen dataclasses. Every mutation entry
point builds new instances, so a snapshot handed to the UI host or the
exporter never changes underneath it.
"""

from .photos import Photo, new_id
from .slots import IDENTITY, Slot, SlotTransform
from .pages import Page
from .document import Document

__all__ = [
    "Photo",
    "new_id",
    "IDENTITY",
    "Slot",
    "SlotTransform",
    "Page",
    "Document",
]
