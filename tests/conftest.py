"""Shared fixtures: synthetic renderers, a stub Bedrock client and tiny PDFs."""

import json
from io import BytesIO
from typing import Dict, List, Optional, Set, Tuple

import pytest
from PIL import Image


class FakeRenderer:
    """Renders solid-colour pages; each page's blue channel is its index."""

    def __init__(
        self,
        natural_size: Tuple[int, int] = (120, 90),
        pages: int = 3,
        padding: int = 0,
        empty_pages: Optional[Set[int]] = None,
        fail_at: Optional[int] = None,
    ) -> None:
        self.natural_size = natural_size
        self.pages = pages
        self.padding = padding
        self.empty_pages = empty_pages or set()
        self.fail_at = fail_at
        self.calls: List[Tuple[int, object]] = []

    def page_count(self) -> int:
        return self.pages

    def render(self, page_index, size):
        self.calls.append((page_index, size))
        if page_index == self.fail_at:
            raise RuntimeError(f"cannot render page {page_index}")

        if isinstance(size, int):
            # fit inside a size x size box, keeping aspect ratio
            w, h = self.natural_size
            scale = size / max(w, h)
            width, height = round(w * scale), round(h * scale)
        else:
            width, height = size

        if page_index in self.empty_pages:
            return b"", width, height

        pixel = bytes([page_index % 256, 0, 0, 255])
        row = pixel * width + b"\xee" * self.padding
        return row * height, width, height

    @property
    def page_renders(self):
        return [call for call in self.calls if not isinstance(call[1], int)]


class StubStreamingBody:
    def __init__(self, data: bytes) -> None:
        self._data = data

    def read(self) -> bytes:
        return self._data


class StubBedrockClient:
    """Records ``invoke_model`` calls and returns a canned body or error."""

    def __init__(self, body=None, error: Optional[Exception] = None) -> None:
        if isinstance(body, dict):
            body = json.dumps(body)
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.body = body if body is not None else b'{"content": [{"text": "ok"}]}'
        self.error = error
        self.calls: List[Dict] = []

    def invoke_model(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return {"body": StubStreamingBody(self.body), "contentType": "application/json"}

    @property
    def last_request(self) -> Dict:
        return json.loads(self.calls[-1]["body"])


def make_pdf(pages: int = 3, size: Tuple[int, int] = (200, 300)) -> bytes:
    """Image-only PDF written by Pillow."""
    images = [Image.new("RGB", size, (255, 255, 255)) for _ in range(pages)]
    buffer = BytesIO()
    images[0].save(buffer, format="PDF", save_all=True, append_images=images[1:])
    return buffer.getvalue()


@pytest.fixture
def fake_renderer():
    return FakeRenderer()


@pytest.fixture
def stub_client():
    return StubBedrockClient()


@pytest.fixture
def pdf_bytes():
    return make_pdf()
