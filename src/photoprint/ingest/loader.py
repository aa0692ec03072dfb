"""
Module: ingest.loader

Purpose:
    Turn raw image bytes + file names into Photo records.
    Decodes intrinsic dimensions concurrently; each photo enters the
    collection only once its size is known.

Key Functions:
    - is_supported(): JPEG/PNG/WebP filter (by MIME type or extension)
    - read_dimensions(): Pixel size after EXIF orientation
    - ingest_photos(): Decode a batch on a thread pool, input order kept
    - ingest_photos_async(): Same, returning a Future

Key Classes:
    - PhotoSource: Raw bytes + name supplied by the host
    - IngestError: Undecodable image data

Dependencies:
    - PIL: Image decoding
    - concurrent.futures: Thread pool execution

Used By:
    - editor.store.DocumentStore.import_sources
    - cli
"""

from __future__ import annotations

import io
import logging
import mimetypes
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

from photoprint.core.models import Photo, new_id

logger = logging.getLogger(__name__)

SUPPORTED_MIME_TYPES = frozenset({"image/jpeg", "image/png", "image/webp"})
SUPPORTED_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".webp"})
DEFAULT_MAX_WORKERS = 4


class IngestError(Exception):
    """Image data could not be decoded."""
    pass


@dataclass(frozen=True)
class PhotoSource:
    """
    Raw photo handed over by the ingestion source (immutable).

    Attributes:
        name: Original file name
        data: Encoded image bytes
        mime_type: MIME type if the source knows it

    Example:
        >>> source = PhotoSource.from_path(Path("holiday/beach.jpg"))
        >>> source.mime_type
        'image/jpeg'
    """

    name: str
    data: bytes = field(repr=False)
    mime_type: Optional[str] = None

    @classmethod
    def from_path(cls, path: Path) -> "PhotoSource":
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(name=path.name, data=path.read_bytes(), mime_type=mime_type)


def is_supported(source: PhotoSource) -> bool:
    """True for JPEG/PNG/WebP; the MIME type wins over the extension."""
    if source.mime_type:
        return source.mime_type.lower() in SUPPORTED_MIME_TYPES
    return Path(source.name).suffix.lower() in SUPPORTED_EXTENSIONS


def read_dimensions(data: bytes) -> Tuple[int, int]:
    """
    Intrinsic (width, height) as displayed, i.e. after EXIF orientation.

    Raises:
        IngestError: If the bytes are not a decodable image
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            oriented = ImageOps.exif_transpose(img)
            return oriented.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise IngestError(f"Cannot decode image: {e}") from e


def ingest_photo(source: PhotoSource) -> Photo:
    """
    Decode one source into a Photo with a fresh identity.

    Raises:
        IngestError: If the image cannot be decoded
    """
    width, height = read_dimensions(source.data)
    return Photo(
        id=new_id(),
        name=source.name,
        width=width,
        height=height,
        data=source.data,
        mime_type=source.mime_type,
    )


def ingest_photos(
    sources: Iterable[PhotoSource],
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> List[Photo]:
    """
    Decode a batch of sources concurrently.

    Unsupported types are filtered out silently (debug log). Files that
    fail to decode are dropped with a warning. The result keeps the
    order of the accepted sources.

    Args:
        sources: Sources from the host (file picker, drop, CLI)
        max_workers: Thread pool size

    Returns:
        Photos ready to add to a document
    """
    accepted: List[PhotoSource] = []
    for source in sources:
        if is_supported(source):
            accepted.append(source)
        else:
            logger.debug(f"Skipping unsupported file: {source.name}")

    if not accepted:
        return []

    photos: List[Photo] = []
    with ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(accepted)))) as pool:
        futures = [pool.submit(ingest_photo, source) for source in accepted]
        for source, future in zip(accepted, futures):
            try:
                photos.append(future.result())
            except IngestError as e:
                logger.warning(f"Skipping {source.name}: {e}")

    logger.info(f"Ingested {len(photos)} of {len(accepted)} photos")
    return photos


def ingest_photos_async(
    sources: Sequence[PhotoSource],
    executor: ThreadPoolExecutor,
    *,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> "Future[List[Photo]]":
    """
    Run ingest_photos() on executor so the host thread is not blocked.

    The caller commits the result (one batch) when the future completes.
    """
    return executor.submit(ingest_photos, list(sources), max_workers=max_workers)
