"""SummaryJob model for one lecture summarization call."""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

from lecture_summarizer.bedrock_client import BedrockInvoker
from lecture_summarizer.config import Config
from lecture_summarizer.models.api_schemas import SummaryRequestPayload
from lecture_summarizer.models.page_models import EncodedImage
from lecture_summarizer.models.summary_result import SummaryResult
from lecture_summarizer.pdf_handler import PageRenderer, extract_text, pages_to_images
from lecture_summarizer.processing import SummaryRequestBuilder, extract_summary

config = Config()
log = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
MODES = ("images", "text")


class SummaryValidationError(Exception):
    """Input problem reported to the caller as-is, not a system fault."""


class SummaryJob:
    """Encapsulates all state and processing logic for a single summary call."""

    def __init__(
        self,
        pdf_bytes: Optional[bytes],
        file_name: str = "",
        content_type: str = PDF_CONTENT_TYPE,
        orientation: str = "portrait",
        mode: str = "images",
        invoker: Optional[BedrockInvoker] = None,
        builder: Optional[SummaryRequestBuilder] = None,
        renderer: Optional[PageRenderer] = None,
        page_limit: Optional[int] = None,
        debug_dir: Optional[Path] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        if mode not in MODES:
            raise ValueError(f"Unknown mode '{mode}', expected one of {MODES}")
        self.pdf_bytes = pdf_bytes or b""
        self.file_name = file_name
        self.content_type = content_type or ""
        self.orientation = orientation
        self.mode = mode
        self.invoker = invoker or BedrockInvoker()
        self.builder = builder or SummaryRequestBuilder()
        self.renderer = renderer
        self.page_limit = config.PAGE_LIMIT if page_limit is None else page_limit
        if debug_dir is None and config.DEBUG_DIR:
            debug_dir = Path(config.DEBUG_DIR)
        self.debug_dir = debug_dir
        self.log = logger or log
        self.page_images: Optional[List[EncodedImage]] = None

    def validate(self) -> None:
        if not self.pdf_bytes:
            raise SummaryValidationError(config.MESSAGE_NO_FILE)
        if self.content_type.lower() != PDF_CONTENT_TYPE:
            raise SummaryValidationError(config.MESSAGE_NOT_PDF)

    def _render_images(self) -> List[EncodedImage]:
        return pages_to_images(
            self.pdf_bytes,
            orientation=self.orientation,
            page_limit=self.page_limit,
            renderer=self.renderer,
            output_dir=self.debug_dir,
        )

    async def build_request(self) -> SummaryRequestPayload:
        """Turn the PDF into a text-mode or image-mode payload."""
        if self.mode == "text":
            text = await asyncio.to_thread(extract_text, self.pdf_bytes)
            if not text.strip():
                raise SummaryValidationError(config.MESSAGE_NO_TEXT)
            self.log.info(f"{self.file_name}: extracted {len(text)} characters")
            return self.builder.build_text_request(text)

        self.page_images = await asyncio.to_thread(self._render_images)
        if not self.page_images:
            raise SummaryValidationError(config.MESSAGE_NO_IMAGES)
        self.log.info(f"{self.file_name}: {len(self.page_images)} page images")
        return self.builder.build_image_request(self.page_images)

    async def run(self) -> SummaryResult:
        """Validate → build request → invoke model → extract summary."""
        try:
            self.validate()
            payload = await self.build_request()
            response_body = await self.invoker.invoke_async(payload)
            summary = extract_summary(response_body)
            return SummaryResult.ok(summary, self.file_name)
        except SummaryValidationError as e:
            self.log.warning(f"{self.file_name or '<no file>'}: {e}")
            return SummaryResult.failed(str(e), self.file_name)
        except Exception:
            self.log.exception("Error processing lecture summary request")
            return SummaryResult.failed(config.MESSAGE_INTERNAL_ERROR, self.file_name)


async def summarize_lecture(
    pdf_bytes: Optional[bytes],
    file_name: str = "",
    content_type: str = PDF_CONTENT_TYPE,
    orientation: str = "portrait",
    mode: str = "images",
    **kwargs,
) -> SummaryResult:
    job = SummaryJob(
        pdf_bytes,
        file_name=file_name,
        content_type=content_type,
        orientation=orientation,
        mode=mode,
        **kwargs,
    )
    return await job.run()
