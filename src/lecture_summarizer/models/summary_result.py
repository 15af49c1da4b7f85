"""Result record returned by a summarization call."""

from dataclasses import dataclass


@dataclass
class SummaryResult:
    """Uniform outcome of one summarization call.

    ``summary`` is meaningful when ``success`` is true, ``error_message``
    otherwise.
    """

    success: bool
    summary: str = ""
    error_message: str = ""
    file_name: str = ""

    @classmethod
    def ok(cls, summary: str, file_name: str) -> "SummaryResult":
        return cls(success=True, summary=summary, file_name=file_name)

    @classmethod
    def failed(cls, error_message: str, file_name: str = "") -> "SummaryResult":
        return cls(success=False, error_message=error_message, file_name=file_name)
