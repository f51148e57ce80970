"""CLI: summarize a local PDF or image with the document summary pipeline."""

from __future__ import annotations

import json
import shutil
import tempfile
from pathlib import Path

import typer

from docsum.errors import PipelineError
from docsum.logging_utils import configure_cli_logging
from docsum.models import LengthSelector, UploadedDocument
from docsum.settings import get_settings
from pipeline.graph import process_document

app = typer.Typer(add_completion=False)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable DEBUG logging"),
) -> None:
    """Document summary assistant: extract text from a PDF or image and summarize it."""
    configure_cli_logging(verbose)


@app.command()
def summarize(
    file: str = typer.Argument(..., help="Path to a PDF, PNG, JPG or JPEG file"),
    length: LengthSelector = typer.Option(LengthSelector.MEDIUM, "--length", "-l", help="Summary length: short | medium | long"),
    model: str | None = typer.Option(None, "--model", "-m", help="OpenAI chat model (default: DOCSUM_MODEL or gpt-4o-mini)"),
    as_json: bool = typer.Option(False, "--json", help="Print the full JSON response instead of plain text"),
) -> None:
    """Summarize FILE. The input is copied first; only the copy is consumed by the pipeline."""
    source = Path(file)
    if not source.is_file():
        typer.echo(f"Not a file: {source}", err=True)
        raise typer.Exit(1)

    settings = get_settings()
    if model:
        settings = settings.model_copy(update={"model": model})

    with tempfile.TemporaryDirectory(prefix="docsum-") as tmp:
        work_copy = Path(tmp) / source.name
        shutil.copy2(source, work_copy)
        document = UploadedDocument(
            file_path=str(work_copy),
            original_name=source.name,
            byte_size=source.stat().st_size,
        )
        try:
            result = process_document(document, length, settings=settings)
        except PipelineError as e:
            typer.echo(f"Summary failed: {e.message}", err=True)
            raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps({"success": True, "data": result.to_response()}, indent=2))
        return

    meta = result.meta
    typer.echo(f"{meta.file_name} ({meta.file_type}, {meta.file_size} bytes, {meta.text_length} chars extracted)")
    if meta.truncated:
        typer.echo("  note: extracted text was truncated before summarization")
    typer.echo("")
    typer.echo(f"Summary ({meta.summary_length.value}):")
    typer.echo(result.summary)
    typer.echo("")
    typer.echo("Key points:")
    typer.echo(result.key_points)


if __name__ == "__main__":
    app()
