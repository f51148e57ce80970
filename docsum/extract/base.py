from __future__ import annotations

from abc import ABC, abstractmethod

from docsum.extract.models import ExtractionResult


class Extractor(ABC):
    """Common interface for text extraction (PDF text layer, image OCR)."""

    @abstractmethod
    def extract(self, file_path: str) -> ExtractionResult:
        """Extract text from the file at file_path. Raises ExtractionError on failure."""
        raise NotImplementedError
