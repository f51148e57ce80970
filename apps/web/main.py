"""FastAPI upload service for the document summary assistant."""

from __future__ import annotations

import logging
import time
import uuid
from pathlib import Path
from typing import Any

from fastapi import FastAPI, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from docsum.errors import PipelineError, UploadTooLargeError
from docsum.extract import file_extension
from docsum.logging_utils import configure_service_logging
from docsum.models import UploadedDocument
from docsum.settings import get_settings
from pipeline.graph import process_document

settings = get_settings()
logger = configure_service_logging(settings.log_path, settings.log_level)
log = logging.getLogger("docsum.api")

CHUNK_SIZE = 1024 * 1024

app = FastAPI(title="Document Summary Assistant", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def _format_size(num_bytes: int) -> str:
    mib = 1024 * 1024
    if num_bytes % mib == 0:
        return f"{num_bytes // mib}MB"
    return f"{num_bytes} bytes"


def _unique_upload_path(upload_dir: Path, filename: str) -> Path:
    """file-<ms timestamp>-<uuid><ext>, unique per request."""
    suffix = f"{int(time.time() * 1000)}-{uuid.uuid4().hex}"
    return upload_dir / f"file-{suffix}{file_extension(filename)}"


async def _store_upload(upload: UploadFile, dest: Path, max_bytes: int) -> int:
    """Stream upload to dest; remove the partial file and raise if it exceeds max_bytes."""
    written = 0
    try:
        with dest.open("wb") as fp:
            while chunk := await upload.read(CHUNK_SIZE):
                written += len(chunk)
                if written > max_bytes:
                    raise UploadTooLargeError(f"File is too large. Maximum size is {_format_size(max_bytes)}.")
                fp.write(chunk)
    except BaseException:
        dest.unlink(missing_ok=True)
        raise
    return written


@app.get("/", response_class=PlainTextResponse)
def home() -> str:
    return "Welcome to Document Summary Assistant API"


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/upload")
async def upload(
    file: UploadFile | None = File(None),
    summary_length: str | None = Form(None, alias="summaryLength"),
) -> Any:
    """Store the upload, run the pipeline in a worker thread and return summary + key points."""
    if file is None or not (file.filename or "").strip():
        return _error(400, "No file uploaded")

    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    dest = _unique_upload_path(upload_dir, file.filename)
    try:
        size = await _store_upload(file, dest, settings.max_upload_bytes)
    except UploadTooLargeError as exc:
        log.warning("Rejected upload %s: %s", file.filename, exc.message)
        return _error(exc.status_code, exc.message)
    log.info("Stored upload %s as %s (%d bytes)", file.filename, dest.name, size)

    document = UploadedDocument(
        file_path=str(dest),
        original_name=file.filename,
        declared_mime_type=file.content_type or "",
        byte_size=size,
    )
    try:
        result = await run_in_threadpool(process_document, document, summary_length, settings=settings)
    except PipelineError as exc:
        if exc.status_code >= 500:
            log.exception("Error processing file %s", file.filename)
        return _error(exc.status_code, exc.message)

    return {"success": True, "data": result.to_response()}
