import base64
import json

import pytest

from lecture_summarizer.models.api_schemas import ImageBlock, TextBlock
from lecture_summarizer.models.page_models import EncodedImage
from lecture_summarizer.processing import (
    SummaryRequestBuilder,
    build_image_content,
    extract_summary,
)

FALLBACK = "Unable to generate summary."


def _images(count):
    return [
        EncodedImage(i, f"jpeg-{i}".encode(), (10, 20)) for i in range(1, count + 1)
    ]


class TestSummaryRequestBuilder:
    def test_image_request_puts_prompt_before_pages_in_order(self):
        payload = SummaryRequestBuilder().build_image_request(_images(3))

        blocks = payload.content
        assert isinstance(blocks[0], TextBlock)
        assert all(isinstance(block, ImageBlock) for block in blocks[1:])
        decoded = [base64.b64decode(block.source.data) for block in blocks[1:]]
        assert decoded == [b"jpeg-1", b"jpeg-2", b"jpeg-3"]
        assert payload.max_tokens == 2000

    def test_image_prompt_has_no_document_text(self):
        payload = SummaryRequestBuilder().build_image_request(_images(1))

        prompt = payload.content[0].text
        assert "lecture slides" in prompt
        assert "Lecture content:" not in prompt
        assert "bullet points" in prompt

    def test_text_request_is_a_single_block(self):
        payload = SummaryRequestBuilder().build_text_request("Entropy always increases.")

        assert len(payload.content) == 1
        text = payload.content[0].text
        assert "Main topics and key concepts" in text
        assert text.index("Entropy always increases.") < text.index("bullet points")
        assert payload.max_tokens == 1000

    def test_injected_settings_are_used(self):
        builder = SummaryRequestBuilder(
            anthropic_version="test-version", text_max_tokens=10, image_max_tokens=20
        )

        assert builder.build("notes").anthropic_version == "test-version"
        assert builder.build("notes").max_tokens == 10
        assert builder.build(_images(1)).max_tokens == 20

    def test_image_request_needs_images(self):
        with pytest.raises(ValueError):
            SummaryRequestBuilder().build_image_request([])

    def test_wire_format(self):
        payload = SummaryRequestBuilder(anthropic_version="bedrock-2023-05-31")
        wire = json.loads(payload.build_image_request(_images(2)).to_wire())

        assert wire["anthropic_version"] == "bedrock-2023-05-31"
        assert wire["max_tokens"] == 2000
        assert len(wire["messages"]) == 1
        message = wire["messages"][0]
        assert message["role"] == "user"
        assert message["content"][0]["type"] == "text"
        assert message["content"][1] == {
            "type": "image",
            "source": {
                "type": "base64",
                "media_type": "image/jpeg",
                "data": base64.b64encode(b"jpeg-1").decode(),
            },
        }


def test_build_image_content_uses_media_type():
    blocks = build_image_content(_images(2), media_type="image/png")

    assert [block.source.media_type for block in blocks] == ["image/png", "image/png"]


class TestExtractSummary:
    def test_returns_first_text(self):
        body = json.dumps({"content": [{"type": "text", "text": "Summary A"}, {"text": "B"}]})

        assert extract_summary(body) == "Summary A"

    def test_accepts_bytes(self):
        assert extract_summary(b'{"content": [{"text": "Summary A"}]}') == "Summary A"

    @pytest.mark.parametrize(
        "body",
        [
            "{}",
            '{"id": "msg_1"}',
            '{"content": []}',
            '{"content": [{"type": "text"}]}',
            '{"content": [{"text": null}]}',
            '{"content": "oops"}',
            "[]",
            "null",
        ],
    )
    def test_missing_text_yields_fallback(self, body):
        assert extract_summary(body) == FALLBACK

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError):
            extract_summary("<html>502 Bad Gateway</html>")


def test_later_malformed_items_do_not_hide_first_text():
    body = json.dumps({"content": [{"text": "Summary A"}, "x", 42]})

    assert extract_summary(body) == "Summary A"


def test_malformed_first_item_yields_fallback():
    assert extract_summary('{"content": ["x", {"text": "late"}]}') == FALLBACK


def test_zero_token_budget_is_not_replaced_by_default():
    builder = SummaryRequestBuilder(text_max_tokens=0, image_max_tokens=0)

    assert builder.text_max_tokens == 0
    assert builder.image_max_tokens == 0
