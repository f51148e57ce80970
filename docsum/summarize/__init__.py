from docsum.summarize.openai_client import SummarizationClient
from docsum.summarize.prompts import KEY_POINTS_INSTRUCTION, SUMMARY_INSTRUCTIONS, PromptPair, build_prompts

__all__ = [
    "KEY_POINTS_INSTRUCTION",
    "PromptPair",
    "SUMMARY_INSTRUCTIONS",
    "SummarizationClient",
    "build_prompts",
]
