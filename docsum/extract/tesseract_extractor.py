from __future__ import annotations

import logging

import pytesseract
from pytesseract import Output

from docsum.errors import ExtractionError
from docsum.extract.base import Extractor
from docsum.extract.models import ExtractionResult

log = logging.getLogger(__name__)

# Tesseract level: 5=word, 4=line
LEVEL_WORD = 5


def _tesseract_image_to_lines_and_words(data: dict) -> tuple[list, list]:
    """Turn image_to_data output into lines (text + bbox) and words (text, bbox, confidence)."""
    n = len(data["text"])
    words_list = []
    for i in range(n):
        text = (data["text"][i] or "").strip()
        if not text:
            continue
        level = int(data["level"][i])
        if level != LEVEL_WORD:
            continue
        left = int(data["left"][i])
        top = int(data["top"][i])
        width = int(data["width"][i])
        height = int(data["height"][i])
        conf = float(data["conf"][i])
        words_list.append({
            "text": text,
            "bbox": {"left": left, "top": top, "width": width, "height": height},
            "conf": conf if conf >= 0 else None,
            "block_num": int(data["block_num"][i]),
            "par_num": int(data["par_num"][i]),
            "line_num": int(data["line_num"][i]),
        })

    # Build line-level entries from words (text + bbox as union of word bboxes)
    lines_map: dict[tuple[int, int, int], list[dict]] = {}
    for w in words_list:
        key = (w["block_num"], w["par_num"], w["line_num"])
        lines_map.setdefault(key, []).append(w)
    lines_list = []
    for key in sorted(lines_map.keys()):
        words_in_line = lines_map[key]
        boxes = [x["bbox"] for x in words_in_line]
        left = min(b["left"] for b in boxes)
        top = min(b["top"] for b in boxes)
        right = max(b["left"] + b["width"] for b in boxes)
        bottom = max(b["top"] + b["height"] for b in boxes)
        lines_list.append({
            "text": " ".join(x["text"] for x in words_in_line),
            "bbox": {"left": left, "top": top, "width": right - left, "height": bottom - top},
            "block_num": key[0],
        })
    return lines_list, words_list


class TesseractExtractor(Extractor):
    """OCR extraction via Tesseract on a raster image (PNG/JPEG)."""

    def __init__(self, lang: str = "eng", timeout: float = 0) -> None:
        self.lang = lang
        self.timeout = timeout

    def extract(self, file_path: str) -> ExtractionResult:
        log.info("Running OCR (%s) on %s", self.lang, file_path)
        try:
            data = pytesseract.image_to_data(
                file_path,
                lang=self.lang,
                output_type=Output.DICT,
                timeout=self.timeout,
            )
            lines, words = _tesseract_image_to_lines_and_words(data)
        except Exception as e:
            raise ExtractionError(f"Failed to extract text from image: {e}") from e

        # Separate blocks by a blank line, lines within a block by newline.
        parts: list[str] = []
        previous_block = None
        for line in lines:
            if previous_block is not None and line["block_num"] != previous_block:
                parts.append("")
            parts.append(line["text"])
            previous_block = line["block_num"]

        confidences = [w["conf"] for w in words if w["conf"] is not None]
        mean_conf = round(sum(confidences) / len(confidences), 2) if confidences else None
        return ExtractionResult(
            run_type="ocr",
            sub_mechanism="tesseract",
            source_path=file_path,
            text="\n".join(parts),
            num_pages=1,
            extra={"lang": self.lang, "lines": len(lines), "words": len(words), "mean_confidence": mean_conf},
        )
