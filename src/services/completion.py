"""Completion client — thin adapter over the Anthropic Messages API.

Returns the raw text of the first content block. One attempt per call: the
SDK's own retries are disabled and any transport/service failure surfaces as
CompletionUnavailable for the request boundary to report.
"""
from __future__ import annotations

import logging
from typing import Optional

import anthropic

from config.settings import settings
from src.services.errors import CompletionUnavailable

logger = logging.getLogger(__name__)

JSON_SYSTEM_PROMPT = (
    "You are a JSON API. Respond with a single JSON object and nothing else: "
    "no markdown, no code fences, no commentary."
)


class CompletionClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 4000,
        timeout: float = 60.0,
        client: Optional[anthropic.AsyncAnthropic] = None,
    ):
        if client is None and api_key:
            client = anthropic.AsyncAnthropic(api_key=api_key, timeout=timeout, max_retries=0)
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    async def complete(self, prompt: str, force_json: bool = False) -> str:
        """Send `prompt` and return the model's raw text.

        With `force_json` the reply is steered into a bare JSON object by a
        system instruction plus an assistant turn prefilled with ``{``.
        """
        if self.client is None:
            raise CompletionUnavailable(detail="ANTHROPIC_API_KEY is not configured")

        messages = [{"role": "user", "content": prompt}]
        kwargs: dict = {}
        if force_json:
            kwargs["system"] = JSON_SYSTEM_PROMPT
            messages.append({"role": "assistant", "content": "{"})

        try:
            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                messages=messages,
                **kwargs,
            )
        except anthropic.APIError as e:
            logger.error(f"Completion request failed: {e}")
            raise CompletionUnavailable(detail=str(e)) from e

        if not response.content:
            raise CompletionUnavailable(detail="Completion returned no content")

        text = getattr(response.content[0], "text", "") or ""
        if force_json:
            text = "{" + text
        return text


_client: Optional[CompletionClient] = None


def get_completion_client() -> CompletionClient:
    """FastAPI dependency — process-wide client built from settings."""
    global _client
    if _client is None:
        _client = CompletionClient(
            api_key=settings.ANTHROPIC_API_KEY,
            model=settings.AI_MODEL,
            max_tokens=settings.AI_MAX_TOKENS,
            timeout=settings.AI_TIMEOUT_SECONDS,
        )
    return _client
