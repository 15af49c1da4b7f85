"""PDF lecture summarization through a Bedrock-hosted multimodal model."""

from lecture_summarizer.models.summary_job import (
    SummaryJob,
    SummaryValidationError,
    summarize_lecture,
)
from lecture_summarizer.models.summary_result import SummaryResult

__all__ = ["SummaryJob", "SummaryResult", "SummaryValidationError", "summarize_lecture"]
