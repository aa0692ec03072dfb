"""
Module: ingest

Purpose:
    Photo ingestion: filter supported files and decode their intrinsic
    size before they enter a document.

Key Functions:
    - ingest_photos(): Decode a batch concurrently
    - ingest_photos_async(): Non-blocking variant

Key Classes:
    - PhotoSource: Raw bytes + file name
    - IngestError: Undecodable data
"""

from .loader import (
    IngestError,
    PhotoSource,
    SUPPORTED_EXTENSIONS,
    SUPPORTED_MIME_TYPES,
    ingest_photo,
    ingest_photos,
    ingest_photos_async,
    is_supported,
    read_dimensions,
)

__all__ = [
    "IngestError",
    "PhotoSource",
    "SUPPORTED_EXTENSIONS",
    "SUPPORTED_MIME_TYPES",
    "ingest_photo",
    "ingest_photos",
    "ingest_photos_async",
    "is_supported",
    "read_dimensions",
]
