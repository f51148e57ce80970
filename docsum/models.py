"""Pydantic models for uploaded documents and summary results."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LengthSelector(str, Enum):
    """Target size of the generated summary."""

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"

    @classmethod
    def parse(cls, value: str | LengthSelector | None) -> LengthSelector:
        """Resolve a caller-supplied value; absent or unknown values become MEDIUM."""
        if isinstance(value, LengthSelector):
            return value
        normalized = (value or "").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            return cls.MEDIUM


class UploadedDocument(BaseModel):
    """A file stored by the upload collaborator; the pipeline owns and deletes it."""

    file_path: str
    original_name: str
    declared_mime_type: str = ""
    byte_size: int = Field(default=0, ge=0)


class DocumentMetadata(BaseModel):
    """Descriptive metadata returned alongside the summary."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    file_name: str
    file_size: int
    file_type: str
    text_length: int
    summary_length: LengthSelector
    processed_at: str = Field(default_factory=lambda: utc_timestamp())
    truncated: bool = False


class SummaryResult(BaseModel):
    """Summary text, raw key points text and metadata for one processed document."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    summary: str
    key_points: str
    meta: DocumentMetadata

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
