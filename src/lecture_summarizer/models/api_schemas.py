"""Wire schemas for the Anthropic Messages API on Bedrock."""

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class TextBlock(BaseModel):
    """Plain text segment of a user message"""

    type: Literal["text"] = "text"
    text: str


class ImageSource(BaseModel):
    """Inline base64 image payload"""

    type: Literal["base64"] = "base64"
    media_type: str = Field(
        default="image/jpeg",
        description="MIME type of the decoded image bytes, e.g. image/jpeg",
    )
    data: str = Field(description="Base64-encoded image bytes")


class ImageBlock(BaseModel):
    """Image segment of a user message"""

    type: Literal["image"] = "image"
    source: ImageSource


ContentBlock = Annotated[Union[TextBlock, ImageBlock], Field(discriminator="type")]


class Message(BaseModel):
    role: Literal["user", "assistant"] = "user"
    content: List[ContentBlock]


class SummaryRequestPayload(BaseModel):
    """Request body sent to ``invoke_model``.

    The prompt text block always comes first in ``messages[0].content``,
    followed by image blocks in page order.
    """

    anthropic_version: str
    max_tokens: int = Field(gt=0)
    messages: List[Message]

    @property
    def content(self) -> List[ContentBlock]:
        return self.messages[0].content

    def to_wire(self) -> str:
        return self.model_dump_json()


class ResponseContent(BaseModel):
    type: Optional[str] = None
    text: Optional[str] = None


class ModelResponse(BaseModel):
    """Response envelope; items past ``content[0]`` are not inspected."""

    content: List[Any] = Field(default_factory=list)
