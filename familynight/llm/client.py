"""Text-generation client.

A thin async wrapper around the Anthropic messages API. It knows nothing
about safety: callers hand it an :class:`AIRequest` built by the prompt
builder and must moderate whatever comes back.
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import AsyncGenerator

import anthropic

from familynight.config import DEFAULT_MODEL
from familynight.errors import GenerationError
from familynight.llm.prompt_builder import AIRequest

_NOT_CONFIGURED_MSG = "Anthropic API key not configured. Set ANTHROPIC_API_KEY."


# ---------------------------------------------------------------------------
# Response dataclass
# ---------------------------------------------------------------------------


@dataclass
class LLMResponse:
    """Raw, unmoderated output of one generation call."""

    content: str
    model: str = ""
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: int = 0


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class LLMClient:
    """Async client for the Anthropic messages API.

    Parameters
    ----------
    api_key : str | None
        Anthropic API key. Falls back to the ``ANTHROPIC_API_KEY``
        environment variable when *None*.
    client : anthropic.AsyncAnthropic | None
        Pre-built SDK client, mainly for tests.
    """

    def __init__(
        self,
        api_key: str | None = None,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY", "")
        if client is not None:
            self._client = client
        elif self.api_key:
            self._client = anthropic.AsyncAnthropic(api_key=self.api_key)
        else:
            self._client = None

    # -- properties ----------------------------------------------------------

    @property
    def configured(self) -> bool:
        """Return *True* if calls can be made."""
        return self._client is not None

    # -- helpers -------------------------------------------------------------

    def _require_client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            raise GenerationError(_NOT_CONFIGURED_MSG)
        return self._client

    @staticmethod
    def _kwargs(request: AIRequest) -> dict:
        kwargs: dict = {
            "model": request.model or DEFAULT_MODEL,
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
            "messages": request.conversation,
        }
        if request.system:
            kwargs["system"] = request.system
        return kwargs

    # -- completion ----------------------------------------------------------

    async def generate(self, request: AIRequest) -> LLMResponse:
        """Send *request* and return the model's text.

        Raises ``GenerationError`` when unconfigured or when the API call fails.
        """
        client = self._require_client()

        start = time.monotonic()
        try:
            response = await client.messages.create(**self._kwargs(request))
        except anthropic.APIError as exc:
            raise GenerationError(f"Claude API error: {exc}") from exc
        latency_ms = int((time.monotonic() - start) * 1000)

        content = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        return LLMResponse(
            content=content,
            model=response.model,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            latency_ms=latency_ms,
        )

    # -- streaming -----------------------------------------------------------

    async def stream(self, request: AIRequest) -> AsyncGenerator[str, None]:
        """Yield text chunks as they arrive."""
        client = self._require_client()
        try:
            async with client.messages.stream(**self._kwargs(request)) as stream:
                async for text in stream.text_stream:
                    yield text
        except anthropic.APIError as exc:
            raise GenerationError(f"Claude API error: {exc}") from exc
