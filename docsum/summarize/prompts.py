"""Prompts for the summary and key-point requests."""

from __future__ import annotations

from typing import NamedTuple

from docsum.models import LengthSelector

SUMMARY_INSTRUCTIONS: dict[LengthSelector, str] = {
    LengthSelector.SHORT: (
        "Please provide a concise summary of the following text in 3-4 lines, "
        "highlighting only the most critical points:"
    ),
    LengthSelector.MEDIUM: (
        "Please provide a comprehensive summary of the following text in 5-8 lines, "
        "covering the main ideas and key insights:"
    ),
    LengthSelector.LONG: (
        "Please provide a detailed summary of the following text in 3 well-structured paragraphs, "
        "covering all major points, insights, and conclusions:"
    ),
}

KEY_POINTS_INSTRUCTION = "Extract 5-7 key points or main ideas from the following text as a bullet list:"


class PromptPair(NamedTuple):
    summary_prompt: str
    key_points_prompt: str


def build_prompts(text: str, selector: LengthSelector | str | None = None) -> PromptPair:
    """Embed text verbatim under the summary and key-point instructions."""
    length = LengthSelector.parse(selector)
    return PromptPair(
        summary_prompt=f"{SUMMARY_INSTRUCTIONS[length]}\n\n{text}",
        key_points_prompt=f"{KEY_POINTS_INSTRUCTION}\n\n{text}",
    )
