"""Data models for page rendering and image encoding."""

from dataclasses import dataclass
from typing import Tuple

BYTES_PER_PIXEL = 4


@dataclass(frozen=True)
class PageGeometry:
    """Pixel dimensions shared by every rendered page of one document."""

    width: int
    height: int

    @classmethod
    def from_probe(cls, width: int, height: int) -> "PageGeometry":
        """Short edge as width, long edge as height."""
        return cls(min(width, height), max(width, height))

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class RawPageBuffer:
    """One rendered page as BGRA bytes, rows possibly padded past width * 4."""

    page_num: int
    data: bytes
    geometry: PageGeometry

    @property
    def stride(self) -> int:
        if self.geometry.height == 0:
            return 0
        return len(self.data) // self.geometry.height


@dataclass(frozen=True)
class NormalizedPageBuffer:
    """Tightly packed pixel rows, exactly width * height * 4 bytes."""

    page_num: int
    data: bytes
    geometry: PageGeometry
    pixel_order: str = "BGRA"


@dataclass(frozen=True)
class EncodedImage:
    """Represents a single JPEG-encoded page image."""

    page_num: int
    image_bytes: bytes
    dimensions: Tuple[int, int]  # (width, height)
