"""Map a file name to the extraction strategy that can read it."""

from __future__ import annotations

import os
from enum import Enum

PDF_EXTENSIONS = frozenset({".pdf"})
IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg"})
SUPPORTED_EXTENSIONS = PDF_EXTENSIONS | IMAGE_EXTENSIONS


class DocumentFormat(str, Enum):
    PDF = "pdf"
    IMAGE = "image"
    UNSUPPORTED = "unsupported"


def file_extension(file_name: str) -> str:
    """Lower-cased extension including the dot, or "" when there is none."""
    return os.path.splitext(file_name or "")[1].lower()


def classify(file_name: str) -> DocumentFormat:
    ext = file_extension(file_name)
    if ext in PDF_EXTENSIONS:
        return DocumentFormat.PDF
    if ext in IMAGE_EXTENSIONS:
        return DocumentFormat.IMAGE
    return DocumentFormat.UNSUPPORTED
