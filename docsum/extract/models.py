from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ExtractionResult(BaseModel):
    """Raw text recovered by one extractor, plus what it saw along the way."""

    run_type: str
    sub_mechanism: str
    source_path: str
    text: str = ""
    num_pages: int = 0
    extra: dict[str, Any] = Field(default_factory=dict)
