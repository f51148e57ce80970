from __future__ import annotations

import os
import sys
import tempfile
import threading
import types
import unittest
from pathlib import Path
from unittest.mock import patch

import fitz

from docsum.errors import (
    EmptyTextError,
    ExtractionError,
    ProcessingError,
    SummarizationError,
    UnsupportedFormatError,
)
from docsum.extract import DocumentFormat, Extractor, ExtractionResult, default_extractors
from docsum.models import LengthSelector, UploadedDocument
from docsum.settings import Settings
from pipeline.graph import process_document


class _StaticExtractor(Extractor):
    def __init__(self, text: str = "", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.calls: list[str] = []

    def extract(self, file_path: str) -> ExtractionResult:
        self.calls.append(file_path)
        if self.error is not None:
            raise self.error
        return ExtractionResult(run_type="test", sub_mechanism="static", source_path=file_path, text=self.text)


class _RecordingClient:
    def __init__(self, error: Exception | None = None) -> None:
        self.prompts: list[str] = []
        self.error = error
        self._lock = threading.Lock()

    def summarize(self, prompt: str) -> str:
        with self._lock:
            self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        if prompt.startswith("Extract 5-7 key points"):
            return "- first point\n- second point"
        return "This is the summary."


class ProcessDocumentTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.settings = Settings(max_text_chars=0)
        self._remove_patch = patch("docsum.uploads.os.remove", wraps=os.remove)
        self.remove = self._remove_patch.start()

    def tearDown(self) -> None:
        self._remove_patch.stop()
        self._tmp.cleanup()

    def _upload(self, name: str, payload: bytes = b"data") -> UploadedDocument:
        path = self.tmp / f"upload-{name}"
        path.write_bytes(payload)
        return UploadedDocument(file_path=str(path), original_name=name, byte_size=len(payload))

    def _static(self, text: str = "", error: Exception | None = None) -> dict[DocumentFormat, Extractor]:
        extractor = _StaticExtractor(text, error)
        return {DocumentFormat.PDF: extractor, DocumentFormat.IMAGE: extractor}

    def _assert_deleted_once(self, document: UploadedDocument) -> None:
        self.assertFalse(Path(document.file_path).exists())
        deletions = [c for c in self.remove.call_args_list if c.args[0] == document.file_path]
        self.assertEqual(len(deletions), 1)

    def test_scenario_a_three_page_pdf_short(self) -> None:
        path = self.tmp / "upload-report"
        doc = fitz.open()
        for title in ("Revenue rose sharply", "Costs held steady", "Outlook is positive"):
            page = doc.new_page()
            page.insert_text((72, 120), title)
        doc.save(path)
        doc.close()
        document = UploadedDocument(file_path=str(path), original_name="report.pdf", byte_size=path.stat().st_size)
        client = _RecordingClient()

        result = process_document(
            document, "short", client=client, settings=self.settings, extractors=default_extractors(self.settings)
        )

        self.assertEqual(len(client.prompts), 2)
        self.assertIn("3-4 lines", client.prompts[0])
        self.assertIn("Outlook is positive", client.prompts[0])
        response = result.to_response()
        self.assertEqual(response["meta"]["fileType"], ".pdf")
        self.assertEqual(response["meta"]["summaryLength"], "short")
        self.assertEqual(response["meta"]["fileName"], "report.pdf")
        self.assertEqual(response["summary"], "This is the summary.")
        self.assertEqual(response["keyPoints"], "- first point\n- second point")
        self._assert_deleted_once(document)

    def test_scenario_b_image_without_selector_defaults_to_medium(self) -> None:
        document = self._upload("scan.png")
        client = _RecordingClient()
        ocr_data = {
            "level": [5, 5, 5], "page_num": [1, 1, 1], "block_num": [1, 1, 1], "par_num": [1, 1, 1],
            "line_num": [1, 1, 1], "word_num": [1, 2, 3], "left": [0, 50, 100], "top": [0, 0, 0],
            "width": [40, 40, 40], "height": [10, 10, 10], "conf": [90, 88, 95],
            "text": ["Quarterly", "board", "minutes"],
        }
        with patch("docsum.extract.tesseract_extractor.pytesseract.image_to_data", return_value=ocr_data):
            result = process_document(document, None, client=client, settings=self.settings)

        self.assertIn("5-8 lines", client.prompts[0])
        self.assertIs(result.meta.summary_length, LengthSelector.MEDIUM)
        self.assertEqual(result.to_response()["meta"]["summaryLength"], "medium")
        self.assertEqual(result.meta.file_type, ".png")
        self.assertEqual(result.meta.text_length, len("Quarterly board minutes"))
        self._assert_deleted_once(document)

    def test_scenario_c_blank_image_is_empty_text(self) -> None:
        document = self._upload("photo.jpg")
        client = _RecordingClient()
        with self.assertRaises(EmptyTextError) as ctx:
            process_document(document, "long", client=client, settings=self.settings, extractors=self._static("  \n\t "))
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(client.prompts, [])
        self._assert_deleted_once(document)

    def test_scenario_d_unsupported_format_skips_extraction(self) -> None:
        document = self._upload("archive.zip")
        extractors = self._static("should not be read")
        client = _RecordingClient()
        with self.assertRaises(UnsupportedFormatError) as ctx:
            process_document(document, "short", client=client, settings=self.settings, extractors=extractors)
        self.assertEqual(ctx.exception.message, "Unsupported file format")
        self.assertEqual(extractors[DocumentFormat.PDF].calls, [])
        self.assertEqual(client.prompts, [])
        self._assert_deleted_once(document)

    def test_unsupported_extensions_never_call_the_service(self) -> None:
        for name in ("notes.txt", "letter.docx", "no_extension"):
            with self.subTest(name=name):
                self.remove.reset_mock()
                document = self._upload(name)
                client = _RecordingClient()
                with self.assertRaises(UnsupportedFormatError):
                    process_document(document, None, client=client, settings=self.settings, extractors=self._static("x"))
                self.assertEqual(client.prompts, [])
                self._assert_deleted_once(document)

    def test_scenario_e_service_failure_carries_provider_message(self) -> None:
        class _FailingCompletions:
            def create(self, **_: object) -> None:
                raise ConnectionError("simulated network failure")

        class _FailingOpenAI:
            def __init__(self, **_: object) -> None:
                self.chat = types.SimpleNamespace(completions=_FailingCompletions())

        fake_openai_module = types.ModuleType("openai")
        fake_openai_module.OpenAI = _FailingOpenAI
        document = self._upload("report.pdf")

        with patch.dict(sys.modules, {"openai": fake_openai_module}):
            with self.assertRaises(SummarizationError) as ctx:
                process_document(
                    document,
                    "medium",
                    settings=Settings(openai_api_key="dummy"),
                    extractors=self._static("Some extracted text"),
                )

        self.assertIn("simulated network failure", ctx.exception.message)
        self.assertEqual(ctx.exception.status_code, 500)
        self._assert_deleted_once(document)

    def test_extraction_error_propagates_and_cleans_up(self) -> None:
        document = self._upload("report.pdf")
        error = ExtractionError("Failed to extract text from PDF: broken xref")
        with self.assertRaises(ExtractionError) as ctx:
            process_document(document, "short", client=_RecordingClient(), settings=self.settings,
                             extractors=self._static(error=error))
        self.assertIs(ctx.exception, error)
        self._assert_deleted_once(document)

    def test_unexpected_error_becomes_processing_error(self) -> None:
        document = self._upload("report.pdf")
        with self.assertRaises(ProcessingError) as ctx:
            process_document(document, "short", client=_RecordingClient(), settings=self.settings,
                             extractors=self._static(error=RuntimeError("disk vanished")))
        self.assertEqual(ctx.exception.message, "disk vanished")
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)
        self._assert_deleted_once(document)

    def test_text_length_counts_trimmed_text_sent_in_prompts(self) -> None:
        document = self._upload("report.pdf")
        client = _RecordingClient()
        result = process_document(document, "long", client=client, settings=self.settings,
                                  extractors=self._static("\n\n  Body of the report.  \n"))
        self.assertEqual(result.meta.text_length, len("Body of the report."))
        self.assertTrue(client.prompts[0].endswith("\n\nBody of the report."))
        self.assertTrue(client.prompts[1].endswith("\n\nBody of the report."))
        self.assertFalse(result.meta.truncated)

    def test_text_over_cap_is_truncated(self) -> None:
        document = self._upload("report.pdf")
        client = _RecordingClient()
        result = process_document(document, "short", client=client, settings=Settings(max_text_chars=10),
                                  extractors=self._static("abcdefghijKLMNOP"))
        self.assertTrue(result.meta.truncated)
        self.assertEqual(result.meta.text_length, 10)
        self.assertTrue(client.prompts[0].endswith("\n\nabcdefghij"))

    def test_concurrent_summaries_still_make_two_calls(self) -> None:
        document = self._upload("report.pdf")
        client = _RecordingClient()
        result = process_document(document, "long", client=client,
                                  settings=Settings(concurrent_summaries=True, max_text_chars=0),
                                  extractors=self._static("Parallel text"))
        self.assertEqual(len(client.prompts), 2)
        self.assertEqual(sum(p.startswith("Extract 5-7 key points") for p in client.prompts), 1)
        self.assertEqual(result.summary, "This is the summary.")
        self.assertEqual(result.key_points, "- first point\n- second point")
        self._assert_deleted_once(document)

    def test_result_is_immutable(self) -> None:
        document = self._upload("report.pdf")
        result = process_document(document, "short", client=_RecordingClient(), settings=self.settings,
                                  extractors=self._static("text"))
        with self.assertRaises(Exception):
            result.summary = "changed"


if __name__ == "__main__":
    unittest.main()
