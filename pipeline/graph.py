"""LangGraph pipeline: classify, extract, validate and summarize one uploaded document."""

from __future__ import annotations

import logging
from typing import Any, Callable, Protocol, TypedDict

from langgraph.graph import END, StateGraph

from docsum.errors import EmptyTextError, PipelineError, ProcessingError, UnsupportedFormatError
from docsum.extract import DocumentFormat, Extractor, ExtractionResult, classify, default_extractors, file_extension
from docsum.models import DocumentMetadata, LengthSelector, SummaryResult, UploadedDocument, utc_timestamp
from docsum.settings import Settings, get_settings
from docsum.summarize import PromptPair, SummarizationClient, build_prompts
from docsum.uploads import TemporaryUpload

log = logging.getLogger(__name__)


class Summarizer(Protocol):
    def summarize(self, prompt: str) -> str: ...


class SummaryState(TypedDict, total=False):
    original_name: str
    file_path: str
    byte_size: int
    length: LengthSelector
    document_format: DocumentFormat
    extraction: ExtractionResult
    text: str
    truncated: bool
    prompts: PromptPair
    summary: str
    key_points: str
    result: SummaryResult


def classify_node(state: SummaryState) -> dict[str, Any]:
    """Pick the extraction strategy from the original file name."""
    document_format = classify(state["original_name"])
    log.info("Classified %s as %s", state["original_name"], document_format.value)
    if document_format is DocumentFormat.UNSUPPORTED:
        raise UnsupportedFormatError()
    return {"document_format": document_format}


def make_extract_node(extractors: dict[DocumentFormat, Extractor]) -> Callable[[SummaryState], dict[str, Any]]:
    def extract_node(state: SummaryState) -> dict[str, Any]:
        document_format = state["document_format"]
        if document_format is DocumentFormat.PDF:
            log.info("Processing PDF file...")
        else:
            log.info("Processing image file with OCR...")
        extraction = extractors[document_format].extract(state["file_path"])
        return {"extraction": extraction}

    return extract_node


def make_validate_node(max_text_chars: int) -> Callable[[SummaryState], dict[str, Any]]:
    def validate_node(state: SummaryState) -> dict[str, Any]:
        """Trim the extracted text, reject it if empty, cap it if configured."""
        text = (state["extraction"].text or "").strip()
        if not text:
            raise EmptyTextError()
        truncated = False
        if max_text_chars and len(text) > max_text_chars:
            log.warning("Extracted text has %s characters; truncating to %s", len(text), max_text_chars)
            text = text[:max_text_chars]
            truncated = True
        log.info("Extracted %s characters of text", len(text))
        return {"text": text, "truncated": truncated}

    return validate_node


def build_prompts_node(state: SummaryState) -> dict[str, Any]:
    return {"prompts": build_prompts(state["text"], state["length"])}


def make_summary_nodes(client: Summarizer) -> tuple[Callable, Callable]:
    def summary_node(state: SummaryState) -> dict[str, Any]:
        log.info("Generating %s summary...", state["length"].value)
        return {"summary": client.summarize(state["prompts"].summary_prompt)}

    def key_points_node(state: SummaryState) -> dict[str, Any]:
        log.info("Generating key points...")
        return {"key_points": client.summarize(state["prompts"].key_points_prompt)}

    return summary_node, key_points_node


def assemble_node(state: SummaryState) -> dict[str, Any]:
    meta = DocumentMetadata(
        file_name=state["original_name"],
        file_size=state["byte_size"],
        file_type=file_extension(state["original_name"]),
        text_length=len(state["text"]),
        summary_length=state["length"],
        processed_at=utc_timestamp(),
        truncated=state.get("truncated", False),
    )
    result = SummaryResult(summary=state["summary"], key_points=state["key_points"], meta=meta)
    return {"result": result}


def build_summary_graph(
    client: Summarizer,
    extractors: dict[DocumentFormat, Extractor],
    *,
    max_text_chars: int = 0,
    concurrent_summaries: bool = False,
):
    """Build and return the compiled LangGraph for one document.

    With concurrent_summaries the summary and key-point calls run in the same
    step and are joined before assembly; otherwise they run one after another.
    """
    summary_node, key_points_node = make_summary_nodes(client)
    workflow = StateGraph(SummaryState)

    workflow.add_node("classify", classify_node)
    workflow.add_node("extract", make_extract_node(extractors))
    workflow.add_node("validate", make_validate_node(max_text_chars))
    workflow.add_node("build_prompts", build_prompts_node)
    workflow.add_node("summarize", summary_node)
    workflow.add_node("extract_key_points", key_points_node)
    workflow.add_node("assemble", assemble_node)

    workflow.set_entry_point("classify")
    workflow.add_edge("classify", "extract")
    workflow.add_edge("extract", "validate")
    workflow.add_edge("validate", "build_prompts")
    if concurrent_summaries:
        workflow.add_edge("build_prompts", "summarize")
        workflow.add_edge("build_prompts", "extract_key_points")
        workflow.add_edge(["summarize", "extract_key_points"], "assemble")
    else:
        workflow.add_edge("build_prompts", "summarize")
        workflow.add_edge("summarize", "extract_key_points")
        workflow.add_edge("extract_key_points", "assemble")
    workflow.add_edge("assemble", END)

    return workflow.compile()


def process_document(
    document: UploadedDocument,
    length: LengthSelector | str | None = None,
    *,
    client: Summarizer | None = None,
    settings: Settings | None = None,
    extractors: dict[DocumentFormat, Extractor] | None = None,
) -> SummaryResult:
    """Run the pipeline for one upload and return its SummaryResult.

    The uploaded file is deleted exactly once before this returns or raises.
    Failures are raised as PipelineError subclasses; anything unexpected is
    wrapped in ProcessingError.
    """
    settings = settings or get_settings()
    selector = LengthSelector.parse(length)
    initial: SummaryState = {
        "original_name": document.original_name,
        "file_path": document.file_path,
        "byte_size": document.byte_size,
        "length": selector,
    }
    try:
        # The upload is released when this block exits, before any error propagates.
        with TemporaryUpload(document.file_path):
            graph = build_summary_graph(
                client or SummarizationClient.from_settings(settings),
                extractors or default_extractors(settings),
                max_text_chars=settings.max_text_chars,
                concurrent_summaries=settings.concurrent_summaries,
            )
            final = graph.invoke(initial)
    except PipelineError as e:
        log.warning("Processing %s failed (%s): %s", document.original_name, e.kind, e.message)
        raise
    except Exception as e:
        log.exception("Unexpected error processing %s", document.original_name)
        raise ProcessingError(str(e) or type(e).__name__) from e
    return final["result"]
