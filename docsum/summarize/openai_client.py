"""Summarization client: one OpenAI Chat Completions call per prompt."""

from __future__ import annotations

import logging
import threading
from typing import Any

from docsum.errors import SummarizationError
from docsum.settings import DEFAULT_MODEL, Settings

log = logging.getLogger(__name__)


class SummarizationClient:
    """Thin wrapper over the OpenAI SDK. No retries; each call has a timeout.

    The SDK client is created on the first call, so a missing credential is
    reported as a SummarizationError only when a summary is actually requested.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str = DEFAULT_MODEL,
        timeout: float = 60.0,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.timeout = timeout
        self._client: Any = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> SummarizationClient:
        return cls(settings.openai_api_key, model=settings.model, timeout=settings.request_timeout)

    def _get_client(self) -> Any:
        with self._lock:
            if self._client is None:
                try:
                    from openai import OpenAI
                except ImportError:
                    raise ImportError("Summarization requires openai: pip install openai") from None
                # None => env OPENAI_API_KEY
                self._client = OpenAI(api_key=self.api_key or None, timeout=self.timeout, max_retries=0)
            return self._client

    def summarize(self, prompt: str) -> str:
        """Send prompt as a single user message and return the generated text."""
        log.debug("Calling OpenAI %s with prompt of %s chars", self.model, len(prompt))
        try:
            response = self._get_client().chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except ImportError:
            raise
        except Exception as e:
            raise SummarizationError(f"Failed to generate summary: {e}") from e

        content = _first_choice_content(response)
        if not content or not content.strip():
            log.error("OpenAI returned empty content; response id=%s", getattr(response, "id", None))
            raise SummarizationError("Failed to generate summary: model returned empty content")
        return content.strip()


def _first_choice_content(response: Any) -> str | None:
    choices = getattr(response, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None) if message is not None else None
