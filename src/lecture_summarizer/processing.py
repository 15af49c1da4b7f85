import base64
import json
import logging
from typing import List, Optional, Sequence, Union

from pydantic import ValidationError

from lecture_summarizer.config import Config
from lecture_summarizer.models.api_schemas import (
    ContentBlock,
    ImageBlock,
    ImageSource,
    Message,
    ModelResponse,
    ResponseContent,
    SummaryRequestPayload,
    TextBlock,
)
from lecture_summarizer.models.page_models import EncodedImage

config = Config()
log = logging.getLogger(__name__)


def build_image_content(
    images: Sequence[EncodedImage], media_type: Optional[str] = None
) -> List[ImageBlock]:
    media_type = media_type or config.IMAGE_MEDIA_TYPE
    image_content = []
    for page_image in images:
        base64_image = base64.b64encode(page_image.image_bytes).decode("utf-8")
        log.debug(
            f"Encoded page {page_image.page_num} image to base64: {len(base64_image)} chars"
        )
        image_content.append(
            ImageBlock(source=ImageSource(media_type=media_type, data=base64_image))
        )
    return image_content


class SummaryRequestBuilder:
    """Builds text-mode and image-mode request payloads.

    The version tag and token budgets are passed in explicitly so a deployment
    or a test can swap them; ``Config`` only supplies the defaults.
    """

    def __init__(
        self,
        anthropic_version: Optional[str] = None,
        text_max_tokens: Optional[int] = None,
        image_max_tokens: Optional[int] = None,
        text_prompt: Optional[str] = None,
        image_prompt: Optional[str] = None,
    ) -> None:
        self.anthropic_version = anthropic_version or config.ANTHROPIC_VERSION
        self.text_max_tokens = (
            config.TEXT_MAX_TOKENS if text_max_tokens is None else text_max_tokens
        )
        self.image_max_tokens = (
            config.IMAGE_MAX_TOKENS if image_max_tokens is None else image_max_tokens
        )
        self.text_prompt = text_prompt or config.SUMMARY_PROMPT_TEXT
        self.image_prompt = image_prompt or config.SUMMARY_PROMPT_IMAGES

    def _payload(
        self, content: List[ContentBlock], max_tokens: int
    ) -> SummaryRequestPayload:
        return SummaryRequestPayload(
            anthropic_version=self.anthropic_version,
            max_tokens=max_tokens,
            messages=[Message(role="user", content=content)],
        )

    def build_text_request(self, lecture_text: str) -> SummaryRequestPayload:
        prompt = (
            f"{self.text_prompt}\n\n"
            f"{config.LECTURE_CONTENT_HEADER}\n{lecture_text}\n\n"
            f"{config.OUTPUT_FORMAT_INSTRUCTIONS}"
        )
        return self._payload([TextBlock(text=prompt)], self.text_max_tokens)

    def build_image_request(
        self, images: Sequence[EncodedImage]
    ) -> SummaryRequestPayload:
        if not images:
            raise ValueError("At least one page image is required")

        prompt = f"{self.image_prompt}\n\n{config.OUTPUT_FORMAT_INSTRUCTIONS}"
        content: List[ContentBlock] = [TextBlock(text=prompt)]
        content.extend(build_image_content(images))
        return self._payload(content, self.image_max_tokens)

    def build(
        self, document: Union[str, Sequence[EncodedImage]]
    ) -> SummaryRequestPayload:
        if isinstance(document, str):
            return self.build_text_request(document)
        return self.build_image_request(document)


def extract_summary(response_body: Union[str, bytes]) -> str:
    """Return ``content[0].text`` from a model response.

    A body that is not JSON raises ``ValueError``; a JSON body without the
    text field yields the fixed fallback summary.
    """
    try:
        data = json.loads(response_body)
    except (TypeError, ValueError) as e:
        raise ValueError("Model response is not valid JSON") from e

    try:
        response = ModelResponse.model_validate(data)
        first = ResponseContent.model_validate(response.content[0])
    except IndexError:
        log.warning("Model response has no content items")
        return config.FALLBACK_SUMMARY
    except ValidationError as e:
        log.warning(f"Unexpected model response shape: {e}")
        return config.FALLBACK_SUMMARY

    if first.text is None:
        log.warning("Model response has no summary text")
        return config.FALLBACK_SUMMARY

    return first.text
