from __future__ import annotations

import logging
from pathlib import Path

import fitz

from docsum.errors import ExtractionError
from docsum.extract.base import Extractor
from docsum.extract.models import ExtractionResult

log = logging.getLogger(__name__)


def _read_pdf_text(raw: bytes) -> tuple[list[str], int]:
    """Open PDF bytes and return (page texts, number of text blocks)."""
    doc = fitz.open(stream=raw, filetype="pdf")
    try:
        if doc.needs_pass:
            raise ValueError("document is password protected")
        page_texts = []
        block_count = 0
        for page_index in range(len(doc)):
            page = doc[page_index]
            page_texts.append(page.get_text())
            block_count += sum(1 for b in page.get_text("blocks") if (b[4] or "").strip())
    finally:
        doc.close()
    return page_texts, block_count


class PyMuPDFExtractor(Extractor):
    """Byte-level extraction via PyMuPDF. Recovers the embedded text layer only."""

    def extract(self, file_path: str) -> ExtractionResult:
        try:
            raw = Path(file_path).read_bytes()
            page_texts, block_count = _read_pdf_text(raw)
        except Exception as e:
            raise ExtractionError(f"Failed to extract text from PDF: {e}") from e

        text = "\n".join(page_texts)
        log.debug("PyMuPDF: %s pages, %s text blocks from %s", len(page_texts), block_count, file_path)
        return ExtractionResult(
            run_type="byte_extraction",
            sub_mechanism="pymupdf",
            source_path=file_path,
            text=text,
            num_pages=len(page_texts),
            extra={"text_blocks": block_count, "byte_size": len(raw)},
        )
