import dataclasses
import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path
from typing import Iterator, List, Optional, Protocol, Tuple, Union

from pdf2image import convert_from_bytes
from PyPDF2 import PdfReader

from lecture_summarizer.config import Config
from lecture_summarizer.imaging import create_fallback_image, encode_page
from lecture_summarizer.models.page_models import (
    BYTES_PER_PIXEL,
    EncodedImage,
    NormalizedPageBuffer,
    PageGeometry,
    RawPageBuffer,
)

config = Config()
log = logging.getLogger(__name__)

ORIENTATIONS = ("portrait", "landscape")

# (size) is either a bounding box edge or an exact (width, height)
RenderSize = Union[int, Tuple[int, int]]


class PageRenderer(Protocol):
    def page_count(self) -> int: ...

    def render(self, page_index: int, size: RenderSize) -> Tuple[bytes, int, int]:
        """Return (BGRA bytes, width, height) for a zero-based page index."""
        ...


def count_pages(pdf_bytes: bytes) -> int:
    """Quick count of pages using PDF metadata"""
    try:
        pdf = PdfReader(BytesIO(pdf_bytes))
        return len(pdf.pages)
    except Exception as e:
        log.error(f"❌ Error reading PDF metadata: {e}")
        raise RuntimeError("Failed to read PDF metadata") from e


def extract_text(pdf_bytes: bytes, page_limit: Optional[int] = None) -> str:
    """Plain text of every page, one page per paragraph."""
    try:
        pdf = PdfReader(BytesIO(pdf_bytes))
        pages = pdf.pages if page_limit is None else pdf.pages[:page_limit]
        texts = [(page.extract_text() or "").strip() for page in pages]
    except Exception as e:
        log.error(f"❌ Error extracting PDF text: {e}")
        raise RuntimeError("Failed to extract text from PDF") from e
    return "\n\n".join(text for text in texts if text)


class Pdf2ImageRenderer:
    """Renders pages of an in-memory PDF through poppler."""

    def __init__(self, pdf_bytes: bytes, dpi: Optional[int] = None) -> None:
        self.pdf_bytes = pdf_bytes
        self.dpi = config.RENDER_DPI if dpi is None else dpi

    def page_count(self) -> int:
        return count_pages(self.pdf_bytes)

    def render(self, page_index: int, size: RenderSize) -> Tuple[bytes, int, int]:
        pages = convert_from_bytes(
            self.pdf_bytes,
            dpi=self.dpi,
            first_page=page_index + 1,
            last_page=page_index + 1,
            size=size,
        )
        if not pages:
            return b"", 0, 0

        img = pages[0].convert("RGBA")
        return img.tobytes("raw", "BGRA"), img.width, img.height


def probe_geometry(
    renderer: PageRenderer, max_dimension: Optional[int] = None
) -> PageGeometry:
    """Render page 0 inside a square box and keep its (short, long) edges."""
    if max_dimension is None:
        max_dimension = config.PROBE_MAX_DIMENSION
    _, width, height = renderer.render(0, max_dimension)
    if width <= 0 or height <= 0:
        raise ValueError(f"Probe render returned empty page ({width}x{height})")
    return PageGeometry.from_probe(width, height)


def normalize_stride(raw: RawPageBuffer) -> NormalizedPageBuffer:
    """Drop per-row padding so the buffer is exactly width * height * 4 bytes."""
    width, height = raw.geometry.size
    row_bytes = width * BYTES_PER_PIXEL
    stride = raw.stride

    if stride < row_bytes:
        raise ValueError(
            f"Page {raw.page_num}: stride {stride} is shorter than a {width}px row"
        )

    if stride == row_bytes and len(raw.data) == row_bytes * height:
        data = raw.data
    else:
        log.debug(
            f"Page {raw.page_num}: removing {stride - row_bytes} bytes of row padding"
        )
        compacted = bytearray(row_bytes * height)
        for y in range(height):
            src = y * stride
            compacted[y * row_bytes : (y + 1) * row_bytes] = raw.data[
                src : src + row_bytes
            ]
        data = bytes(compacted)

    return NormalizedPageBuffer(raw.page_num, data, raw.geometry, "BGRA")


def iter_raw_pages(
    renderer: PageRenderer, geometry: PageGeometry, page_limit: int
) -> Iterator[RawPageBuffer]:
    """Render pages in order, stopping at the page limit."""
    page_count = renderer.page_count()
    if page_count > page_limit:
        log.info(f"Document has {page_count} pages, rendering first {page_limit}")

    for page_index in range(min(page_count, page_limit)):
        data, width, height = renderer.render(page_index, geometry.size)
        if not data:
            log.warning(f"Page {page_index + 1}: no data, skipping")
            continue
        if (width, height) != geometry.size:
            log.warning(
                f"Page {page_index + 1}: rendered {width}x{height}, expected "
                f"{geometry.width}x{geometry.height}, skipping"
            )
            continue
        yield RawPageBuffer(page_index + 1, data, geometry)


@dataclass
class RenderedPages:
    pages: List[NormalizedPageBuffer]
    geometry: PageGeometry


@dataclass
class RenderFailed:
    """Rendering raised; ``pages`` holds what was rendered before the error."""

    error: Exception
    pages: List[NormalizedPageBuffer] = field(default_factory=list)


RasterizeOutcome = Union[RenderedPages, RenderFailed]


def rasterize_document(
    pdf_bytes: bytes,
    orientation: str = "portrait",
    page_limit: Optional[int] = None,
    renderer: Optional[PageRenderer] = None,
) -> RasterizeOutcome:
    """Render up to ``page_limit`` pages at one shared geometry.

    ``orientation`` is advisory and does not change the rendered geometry.
    """
    if page_limit is None:
        page_limit = config.PAGE_LIMIT
    renderer = renderer or Pdf2ImageRenderer(pdf_bytes)
    if orientation not in ORIENTATIONS:
        log.warning(f"Unknown orientation hint '{orientation}', ignoring")

    pages: List[NormalizedPageBuffer] = []
    try:
        geometry = probe_geometry(renderer)
        log.debug(
            f"Document geometry {geometry.width}x{geometry.height} "
            f"(orientation hint: {orientation})"
        )
        for raw in iter_raw_pages(renderer, geometry, page_limit):
            pages.append(normalize_stride(raw))
    except Exception as e:
        log.error(f"❌ Error rendering PDF: {e}", exc_info=True)
        return RenderFailed(e, pages)

    return RenderedPages(pages, geometry)


def pages_to_images(
    pdf_bytes: bytes,
    orientation: str = "portrait",
    page_limit: Optional[int] = None,
    renderer: Optional[PageRenderer] = None,
    output_dir: Optional[Path] = None,
) -> List[EncodedImage]:
    """Render and JPEG-encode pages, substituting a placeholder on failure."""
    outcome = rasterize_document(pdf_bytes, orientation, page_limit, renderer)

    result: List[EncodedImage] = []
    for page in outcome.pages:
        try:
            result.append(encode_page(page))
        except Exception as e:
            log.error(f"❌ Error encoding page {page.page_num}, skipping: {e}")

    if isinstance(outcome, RenderFailed):
        log.warning("Rendering failed, substituting placeholder image")
        fallback = create_fallback_image()
        if fallback is not None:
            result.append(dataclasses.replace(fallback, page_num=len(result) + 1))

    if output_dir:
        save_debug_images(result, output_dir)

    log.info(f"Total images generated: {len(result)}")
    return result


def save_debug_images(images: List[EncodedImage], output_dir: Path) -> None:
    """Best-effort dump of encoded pages for inspection."""
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        for image in images:
            img_path = output_dir / config.DEBUG_IMAGE_PATTERN.format(image.page_num)
            with open(img_path, "wb") as f:
                f.write(image.image_bytes)
            log.debug(f"Saved {img_path} ({len(image.image_bytes)} bytes)")
    except OSError as e:
        log.warning(f"Failed to save debug images to {output_dir}: {e}")
