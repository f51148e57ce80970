"""Runtime configuration read from the environment (and an optional .env file)."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

DEFAULT_MODEL = "gpt-4o-mini"
MAX_UPLOAD_BYTES = 50 * 1024 * 1024


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> list[str]:
    raw = os.environ.get(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseModel):
    """Pipeline and service settings. Field names mirror the DOCSUM_* variables."""

    openai_api_key: str = ""
    model: str = DEFAULT_MODEL
    request_timeout: float = Field(default=60.0, gt=0)
    max_text_chars: int = Field(default=100_000, ge=0)
    concurrent_summaries: bool = False
    ocr_language: str = "eng"
    ocr_timeout: float = Field(default=0, ge=0)
    upload_dir: str = "uploads"
    max_upload_bytes: int = Field(default=MAX_UPLOAD_BYTES, gt=0)
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"]
    )
    log_path: str = "logs/docsum.log"
    log_level: str = "INFO"


def settings_from_env() -> Settings:
    """Build Settings from the current environment without caching."""
    return Settings(
        openai_api_key=os.environ.get("OPENAI_API_KEY", "").strip(),
        model=os.environ.get("DOCSUM_MODEL", DEFAULT_MODEL),
        request_timeout=float(os.environ.get("DOCSUM_REQUEST_TIMEOUT", "60")),
        max_text_chars=int(os.environ.get("DOCSUM_MAX_TEXT_CHARS", "100000")),
        concurrent_summaries=_env_bool("DOCSUM_CONCURRENT_SUMMARIES"),
        ocr_language=os.environ.get("DOCSUM_OCR_LANG", "eng"),
        ocr_timeout=float(os.environ.get("DOCSUM_OCR_TIMEOUT", "0")),
        upload_dir=os.environ.get("DOCSUM_UPLOAD_DIR", "uploads"),
        max_upload_bytes=int(os.environ.get("DOCSUM_MAX_UPLOAD_BYTES", str(MAX_UPLOAD_BYTES))),
        cors_origins=_env_list("DOCSUM_CORS_ORIGINS", "http://localhost:5173,http://localhost:3000"),
        log_path=os.environ.get("DOCSUM_LOG_PATH", "logs/docsum.log"),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache()
def get_settings() -> Settings:
    """Load .env from the project root once and return the cached Settings."""
    load_dotenv(_PROJECT_ROOT / ".env")
    return settings_from_env()
