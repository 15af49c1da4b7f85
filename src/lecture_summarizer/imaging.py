import logging
from io import BytesIO
from typing import Optional

from PIL import Image, ImageDraw

from lecture_summarizer.config import Config
from lecture_summarizer.models.page_models import (
    BYTES_PER_PIXEL,
    EncodedImage,
    NormalizedPageBuffer,
    PageGeometry,
)

config = Config()
log = logging.getLogger(__name__)

SUPPORTED_PIXEL_ORDERS = ("BGRA", "RGBA")


def to_pil_image(page: NormalizedPageBuffer) -> Image.Image:
    """Wrap a packed 4-channel buffer as an RGBA PIL image."""
    if page.pixel_order not in SUPPORTED_PIXEL_ORDERS:
        raise ValueError(f"Unsupported pixel order: {page.pixel_order}")

    width, height = page.geometry.size
    expected = width * height * BYTES_PER_PIXEL
    if len(page.data) != expected:
        raise ValueError(
            f"Page {page.page_num}: expected {expected} bytes, got {len(page.data)}"
        )
    return Image.frombytes("RGBA", (width, height), page.data, "raw", page.pixel_order)


def encode_page(
    page: NormalizedPageBuffer, quality: Optional[int] = None
) -> EncodedImage:
    img = to_pil_image(page).convert("RGB")

    buffer = BytesIO()
    if quality is None:
        quality = config.JPEG_QUALITY
    img.save(buffer, format="JPEG", quality=quality)
    buffer.seek(0)

    return EncodedImage(page.page_num, buffer.read(), (img.width, img.height))


def create_fallback_page(
    width: Optional[int] = None,
    height: Optional[int] = None,
    border: Optional[int] = None,
) -> NormalizedPageBuffer:
    """Placeholder page: white interior inside a light gray border band."""
    width = config.FALLBACK_WIDTH if width is None else width
    height = config.FALLBACK_HEIGHT if height is None else height
    border = config.FALLBACK_BORDER if border is None else border

    img = Image.new("RGBA", (width, height), tuple(config.FALLBACK_BORDER_COLOR))
    if width - 2 * border >= 0 and height - 2 * border >= 0:
        # rectangle bounds are inclusive
        ImageDraw.Draw(img).rectangle(
            [border, border, width - border, height - border],
            fill=tuple(config.FALLBACK_BACKGROUND),
        )

    return NormalizedPageBuffer(
        page_num=1,
        data=img.tobytes(),
        geometry=PageGeometry(width, height),
        pixel_order="RGBA",
    )


def create_fallback_image() -> Optional[EncodedImage]:
    """Encode the placeholder page, or return None if that fails."""
    try:
        return encode_page(create_fallback_page())
    except Exception as e:
        log.error(f"❌ Error creating fallback image: {e}")
        return None
