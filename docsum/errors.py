"""Error taxonomy for the document summary pipeline.

Every failure that leaves ``process_document`` is a ``PipelineError``. The
``kind`` tag and ``status_code`` let outer layers (HTTP, CLI) report it without
inspecting the message.
"""

from __future__ import annotations


class PipelineError(RuntimeError):
    """Base class for failures surfaced by the summary pipeline."""

    kind = "processing"
    status_code = 500
    default_message = "An error occurred while processing the file"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_response(self) -> dict[str, str]:
        return {"error": self.message}


class UnsupportedFormatError(PipelineError):
    """Raised when the upload's extension is not a PDF or a supported image."""

    kind = "unsupported_format"
    status_code = 400
    default_message = "Unsupported file format"


class EmptyTextError(PipelineError):
    """Raised when extraction succeeded but produced no usable text."""

    kind = "empty_text"
    status_code = 400
    default_message = "No text could be extracted from the document"


class UploadTooLargeError(PipelineError):
    """Raised by the upload layer when a file exceeds the size ceiling."""

    kind = "upload_too_large"
    status_code = 400
    default_message = "File is too large. Maximum size is 50MB."


class ExtractionError(PipelineError):
    """Raised when PDF parsing or OCR throws."""

    kind = "extraction"
    default_message = "Failed to extract text from document"


class SummarizationError(PipelineError):
    """Raised when the generative-text service call fails or returns nothing."""

    kind = "summarization"
    default_message = "Failed to generate summary"


class ProcessingError(PipelineError):
    """Catch-all for anything unanticipated inside the pipeline."""

    kind = "processing"
