import io
import sys
from pathlib import Path
from typing import Optional, Sequence

import pytest
from PIL import Image

# Add src to sys.path so we can import photoprint
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from photoprint.core.models import Document, Page, Photo  # noqa: E402
from photoprint.layout import uniform_fractions, uniform_slots  # noqa: E402
from photoprint.core.grid_config import get_grid  # noqa: E402


def encode_image(
    size=(80, 60),
    color="red",
    fmt: str = "JPEG",
    mode: str = "RGB",
) -> bytes:
    """Encode a solid-colour test image."""
    img = Image.new(mode, size, color=color)
    buf = io.BytesIO()
    img.save(buf, format=fmt)
    return buf.getvalue()


def make_photo(
    photo_id: str,
    width: int = 800,
    height: int = 600,
    data: Optional[bytes] = None,
) -> Photo:
    """Photo with real JPEG bytes of the same aspect ratio."""
    if data is None:
        data = encode_image((max(1, width // 10), max(1, height // 10)))
    return Photo(id=photo_id, name=f"{photo_id}.jpg", width=width, height=height, data=data)


def make_page(
    page_id: str,
    layout: int = 4,
    photo_ids: Sequence[Optional[str]] = (),
) -> Page:
    """Uniform page with slot ids '<page>-s<i>' and photos assigned in slot order."""
    grid = get_grid(layout)
    ids = [f"{page_id}-s{i}" for i in range(grid.capacity)]
    slots = list(uniform_slots(grid.rows, grid.cols, ids=ids))
    for index, photo_id in enumerate(photo_ids):
        slots[index] = slots[index].with_photo(photo_id)
    return Page(
        id=page_id,
        layout=layout,
        slots=tuple(slots),
        col_sizes=uniform_fractions(grid.cols),
        row_sizes=uniform_fractions(grid.rows),
    )


def make_document(*pages: Page, photo_ids: Sequence[str] = (), **kwargs) -> Document:
    """Document whose photos are photo_ids (default: everything placed, in page order)."""
    if not photo_ids:
        photo_ids = [pid for page in pages for pid in page.photo_ids]
    photos = tuple(make_photo(pid) for pid in photo_ids)
    return Document(pages=tuple(pages), photos=photos, **kwargs)


# Common test fixtures
@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


@pytest.fixture
def jpeg_bytes() -> bytes:
    return encode_image((80, 60))


@pytest.fixture
def three_photo_document() -> Document:
    """One 2x2 page holding P1, P2, P3 (fourth slot empty)."""
    return make_document(make_page("page1", 4, ["P1", "P2", "P3"]))
