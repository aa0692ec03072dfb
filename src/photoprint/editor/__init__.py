"""
Module: editor

Purpose:
    Editing surface of the layout engine: snapshot operations, the
    document store that publishes them and the persisted preferences.

Key Classes:
    - DocumentStore: Current snapshot + change signal
    - SettingsStore: JSON-backed preferences
"""

from . import operations
from .settings import SettingsStore
from .store import DocumentStore

__all__ = [
    "DocumentStore",
    "SettingsStore",
    "operations",
]
