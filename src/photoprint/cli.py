"""
Command-line export: arrange image files onto A4 pages and write a PDF.

    photoprint holiday/*.jpg --layout 6 --output-dir prints/
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from photoprint import __version__
from photoprint.core.grid_config import DEFAULT_LAYOUT, LAYOUT_CONFIGS, SUPPORTED_LAYOUTS
from photoprint.core.models import Document
from photoprint.editor import DocumentStore
from photoprint.output import ExportError, PrintConfig

logger = logging.getLogger("photoprint")


def build_parser() -> argparse.ArgumentParser:
    layouts = ", ".join(f"{n} ({grid.label})" for n, grid in LAYOUT_CONFIGS.items())
    parser = argparse.ArgumentParser(
        prog="photoprint",
        description="Arrange photos on A4 pages and export a print-ready PDF.",
    )
    parser.add_argument("files", nargs="+", type=Path, help="JPEG, PNG or WebP files")
    parser.add_argument(
        "-l", "--layout",
        type=int,
        choices=SUPPORTED_LAYOUTS,
        default=DEFAULT_LAYOUT,
        help=f"Photos per page: {layouts}",
    )
    parser.add_argument("-o", "--output-dir", type=Path, default=Path.cwd(), help="Directory for the PDF")
    parser.add_argument("--name", help="PDF file name (default photo-layout-<date>.pdf)")
    parser.add_argument("--dpi", type=int, default=PrintConfig().dpi, help="Raster resolution of placed photos")
    parser.add_argument("--no-borders", action="store_true", help="Do not outline slots")
    parser.add_argument("--workers", type=int, default=4, help="Decoder threads")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = PrintConfig(dpi=args.dpi, draw_slot_borders=not args.no_borders)
    except ValueError as e:
        logger.error(f"Invalid print settings: {e}")
        return 2

    store = DocumentStore(document=Document(default_layout=args.layout))
    photos = store.import_paths(_expand(args.files), max_workers=args.workers)
    if not photos:
        logger.error("No supported photos could be read")
        return 1

    try:
        result = store.export(args.output_dir, config, filename=args.name)
    except ExportError as e:
        logger.error(str(e))
        return 1

    print(result.path)
    return 0


def _expand(paths: Sequence[Path]) -> List[Path]:
    """Directories contribute their files in name order."""
    files: List[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(p for p in path.iterdir() if p.is_file()))
        else:
            files.append(path)
    return files


if __name__ == "__main__":
    raise SystemExit(main())
