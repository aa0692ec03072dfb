"""
Module: output.exporter

Purpose:
    Export entry point: validates the document, picks a file name,
    renders to a temporary file and moves it into place, so a failed
    export never leaves a partial PDF behind.

Key Functions:
    - export_document(): Document -> PDF on disk
    - default_filename(): photo-layout-YYYY-MM-DD.pdf
    - unique_path(): Collision-free path in a directory

Key Classes:
    - ExportResult: Path and counts of a finished export
    - ExportError: Export refused or failed

Dependencies:
    - output.renderer: render_to_pdf
    - tempfile (std): Atomic write

Used By:
    - editor.store.DocumentStore.export
    - cli
"""

from __future__ import annotations

import logging
import tempfile
import time
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

from photoprint.core.models import Document

from .config import PrintConfig
from .renderer import ProgressCallback, Viewports, render_to_pdf

logger = logging.getLogger(__name__)

FILENAME_PREFIX = "photo-layout"


class ExportError(Exception):
    """Error during PDF export."""
    pass


@dataclass(frozen=True)
class ExportResult:
    """
    Finished export (immutable).

    Attributes:
        path: Written PDF
        pages: Pages in the PDF
        placed: Photos drawn
        skipped: Occupied slots left blank
        duration_seconds: Wall time of the render
    """

    path: Path
    pages: int
    placed: int
    skipped: int
    duration_seconds: float


def default_filename(on: Optional[date] = None) -> str:
    """
    File name for an export made on the given day.

    Example:
        >>> default_filename(date(2024, 3, 9))
        'photo-layout-2024-03-09.pdf'
    """
    on = on or date.today()
    return f"{FILENAME_PREFIX}-{on.isoformat()}.pdf"


def unique_path(directory: Path, filename: str) -> Path:
    """First of name.pdf, name (1).pdf, name (2).pdf, ... that does not exist."""
    candidate = directory / filename
    stem = candidate.stem
    suffix = candidate.suffix
    counter = 1
    while candidate.exists():
        candidate = directory / f"{stem} ({counter}){suffix}"
        counter += 1
    return candidate


def export_document(
    document: Document,
    output_dir: Path,
    config: Optional[PrintConfig] = None,
    *,
    viewports: Optional[Viewports] = None,
    progress: Optional[ProgressCallback] = None,
    filename: Optional[str] = None,
    on: Optional[date] = None,
) -> ExportResult:
    """
    Export the document to a PDF in output_dir.

    Args:
        document: Document to export
        output_dir: Directory for the PDF (created if missing)
        config: Print configuration (A4 defaults)
        viewports: Slot id -> on-screen (width_px, height_px) for pan conversion
        progress: Percentage callback; always receives 0 when the export ends
        filename: Explicit file name (default photo-layout-<date>.pdf)
        on: Date used for the default file name (default today)

    Returns:
        ExportResult with the final path

    Raises:
        ExportError: If the document has no placed photo or writing fails

    Example:
        >>> result = export_document(document, Path("exports"))
        >>> result.path.name
        'photo-layout-2024-03-09.pdf'
    """
    if not document.has_content:
        raise ExportError("Nothing to export: no page holds a photo")

    config = config or PrintConfig()
    output_dir = Path(output_dir)
    start_time = time.perf_counter()

    temp_path: Optional[Path] = None
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        path = unique_path(output_dir, filename or default_filename(on))

        with tempfile.NamedTemporaryFile(
            mode="wb",
            suffix=".pdf",
            dir=output_dir,
            delete=False,
        ) as f:
            temp_path = Path(f.name)
            stats = render_to_pdf(
                document,
                f,
                config,
                viewports=viewports,
                progress=progress,
            )

        # Use replace() instead of rename() for Windows compatibility
        temp_path.replace(path)
        temp_path = None
    except ExportError:
        raise
    except Exception as e:
        raise ExportError(f"Failed to export PDF: {e}") from e
    finally:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        if progress is not None:
            progress(0)

    duration = time.perf_counter() - start_time
    logger.info(f"Exported {stats.pages} pages to {path} in {duration:.2f}s")
    if stats.skipped:
        logger.warning(f"{stats.skipped} slots could not be rendered and were left blank")

    return ExportResult(
        path=path,
        pages=stats.pages,
        placed=stats.placed,
        skipped=stats.skipped,
        duration_seconds=duration,
    )
