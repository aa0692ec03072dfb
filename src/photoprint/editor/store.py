"""
Module: editor.store

Purpose:
    Owner of the current document snapshot. Every mutation runs one
    operation from editor.operations, swaps in the resulting snapshot
    atomically and notifies listeners, so a UI host re-renders from a
    consistent state and never sees a half-applied change.

Key Classes:
    - DocumentStore: QObject holding the snapshot, emits documentChanged

Dependencies:
    - PySide6.QtCore: QObject/Signal change notification
    - editor.operations: Snapshot transformations
    - editor.settings: Persisted auto-arrange / default layout
    - ingest: Photo decoding
    - output.exporter: PDF export

Used By:
    - UI hosts
    - cli
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional

from PySide6.QtCore import QObject, Signal

from photoprint.core.models import Document, Photo
from photoprint.ingest import PhotoSource, ingest_photos
from photoprint.output import ExportResult, PrintConfig, export_document

from . import operations as ops
from .settings import SettingsStore

logger = logging.getLogger(__name__)

Operation = Callable[..., Document]


class DocumentStore(QObject):
    """
    Single source of truth for the edited document.

    Signals are emitted on the caller's thread. Background work (photo
    decoding, export) produces values that are committed here from the
    host thread.

    Example:
        >>> store = DocumentStore()
        >>> store.documentChanged.connect(view.render)
        >>> store.import_sources([PhotoSource.from_path(p) for p in paths])
    """

    documentChanged = Signal(object)

    def __init__(
        self,
        settings: Optional[SettingsStore] = None,
        document: Optional[Document] = None,
    ) -> None:
        super().__init__()
        self._settings = settings
        if document is None:
            document = Document()
            if settings is not None:
                document = Document(
                    default_layout=settings.get_default_layout(),
                    auto_arrange=settings.get_auto_arrange(),
                )
        self._document = document

    @property
    def document(self) -> Document:
        return self._document

    @property
    def settings(self) -> Optional[SettingsStore]:
        return self._settings

    def dispatch(self, operation: Operation, *args: Any, **kwargs: Any) -> Document:
        """
        Apply an operation to the current snapshot and publish the result.

        No signal is emitted when the operation absorbed the request and
        returned the snapshot unchanged.
        """
        previous = self._document
        updated = operation(previous, *args, **kwargs)
        if updated is previous:
            return previous

        self._document = updated
        self._persist_preferences(previous, updated)
        self.documentChanged.emit(updated)
        return updated

    # ─────────────────────────────────────────────────────────────────────
    # Slot contents and grid shape
    # ─────────────────────────────────────────────────────────────────────

    def assign_photo(self, page_id: str, slot_id: str, photo_id: Optional[str]) -> Document:
        return self.dispatch(ops.assign_photo, page_id, slot_id, photo_id)

    def swap_slots(self, page_id: str, slot_a: str, slot_b: str) -> Document:
        return self.dispatch(ops.swap_slots, page_id, slot_a, slot_b)

    def move_photo_between_pages(
        self,
        from_page_id: str,
        from_slot_id: str,
        to_page_id: str,
        to_slot_id: str,
    ) -> Document:
        return self.dispatch(
            ops.move_photo_between_pages, from_page_id, from_slot_id, to_page_id, to_slot_id
        )

    def update_transform(
        self,
        page_id: str,
        slot_id: str,
        offset_x: float,
        offset_y: float,
        scale: float,
        rotation: int,
    ) -> Document:
        return self.dispatch(ops.update_transform, page_id, slot_id, offset_x, offset_y, scale, rotation)

    def set_page_layout(self, page_id: str, layout: int) -> Document:
        return self.dispatch(ops.set_page_layout, page_id, layout)

    def set_slot_span(self, page_id: str, slot_id: str, col_span: int, row_span: int) -> Document:
        return self.dispatch(ops.set_slot_span, page_id, slot_id, col_span, row_span)

    def resize_track(
        self,
        page_id: str,
        axis: str,
        boundary: int,
        delta_px: float,
        container_size: float,
    ) -> Document:
        return self.dispatch(ops.resize_track, page_id, axis, boundary, delta_px, container_size)

    # ─────────────────────────────────────────────────────────────────────
    # Pages
    # ─────────────────────────────────────────────────────────────────────

    def add_page(self, layout: Optional[int] = None) -> Document:
        return self.dispatch(ops.add_page, layout)

    def remove_page(self, page_id: str) -> Document:
        return self.dispatch(ops.remove_page, page_id)

    def duplicate_page(self, page_id: str) -> Document:
        return self.dispatch(ops.duplicate_page, page_id)

    def reorder_pages(self, from_index: int, to_index: int) -> Document:
        return self.dispatch(ops.reorder_pages, from_index, to_index)

    def set_current_page(self, index: int) -> Document:
        return self.dispatch(ops.set_current_page, index)

    def set_default_layout(self, layout: int) -> Document:
        return self.dispatch(ops.set_default_layout, layout)

    # ─────────────────────────────────────────────────────────────────────
    # Photos
    # ─────────────────────────────────────────────────────────────────────

    def add_photos(self, photos: Iterable[Photo]) -> Document:
        return self.dispatch(ops.add_photos, list(photos))

    def remove_photo(self, photo_id: str) -> Document:
        return self.dispatch(ops.remove_photo, photo_id)

    def clear_photos(self) -> Document:
        return self.dispatch(ops.clear_photos)

    def auto_arrange(self) -> Document:
        return self.dispatch(ops.auto_arrange)

    def set_auto_arrange(self, enabled: bool) -> Document:
        return self.dispatch(ops.set_auto_arrange, enabled)

    def import_sources(self, sources: Iterable[PhotoSource], *, max_workers: int = 4) -> List[Photo]:
        """
        Decode a batch and add it in one atomic commit.

        Returns:
            The photos that were decoded and added
        """
        photos = ingest_photos(sources, max_workers=max_workers)
        if photos:
            self.add_photos(photos)
        return photos

    def import_paths(self, paths: Iterable[Path], *, max_workers: int = 4) -> List[Photo]:
        """Read files from disk and import them (unreadable files are skipped)."""
        sources: List[PhotoSource] = []
        for path in paths:
            try:
                sources.append(PhotoSource.from_path(Path(path)))
            except OSError as e:
                logger.warning(f"Skipping {path}: {e}")
        return self.import_sources(sources, max_workers=max_workers)

    # ─────────────────────────────────────────────────────────────────────
    # Export
    # ─────────────────────────────────────────────────────────────────────

    def export(
        self,
        output_dir: Path,
        config: Optional[PrintConfig] = None,
        **kwargs: Any,
    ) -> ExportResult:
        """Export the current snapshot (see output.exporter.export_document)."""
        return export_document(self._document, output_dir, config, **kwargs)

    def _persist_preferences(self, previous: Document, updated: Document) -> None:
        if self._settings is None:
            return
        if updated.auto_arrange != previous.auto_arrange:
            self._settings.set_auto_arrange(updated.auto_arrange)
        if updated.default_layout != previous.default_layout:
            self._settings.set_default_layout(updated.default_layout)
