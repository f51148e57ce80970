from __future__ import annotations

from docsum.extract.base import Extractor
from docsum.extract.classifier import DocumentFormat, classify, file_extension
from docsum.extract.models import ExtractionResult
from docsum.extract.pymupdf_extractor import PyMuPDFExtractor
from docsum.extract.tesseract_extractor import TesseractExtractor
from docsum.settings import Settings


def default_extractors(settings: Settings | None = None) -> dict[DocumentFormat, Extractor]:
    """One extractor per readable format; UNSUPPORTED has none."""
    settings = settings or Settings()
    return {
        DocumentFormat.PDF: PyMuPDFExtractor(),
        DocumentFormat.IMAGE: TesseractExtractor(lang=settings.ocr_language, timeout=settings.ocr_timeout),
    }


__all__ = [
    "DocumentFormat",
    "ExtractionResult",
    "Extractor",
    "PyMuPDFExtractor",
    "TesseractExtractor",
    "classify",
    "default_extractors",
    "file_extension",
]
