"""Tests for the moderated generation service."""

import asyncio

import pytest

from familynight.errors import GenerationError, InvalidInputError, UnknownGameContextError
from familynight.games import FALLBACK_MESSAGES, RATE_LIMIT_FALLBACK, GameContext
from familynight.generation import GenerationService
from familynight.llm.client import LLMResponse
from familynight.llm.rate_limiter import RateLimiter
from familynight.moderation.moderator import AGE_INAPPROPRIATE_REASON, ContentModerator
from familynight.security.audit_log import SecurityEventType, SecurityLog
from familynight.storage import MemoryStore

_STORY = "My hero loves to help people"
_SAFE_OUTPUT = "Captain Maya soared over the city, helping everyone she met."


class _FakeClient:
    """Stands in for LLMClient; returns canned text and records requests."""

    def __init__(self, text: str = _SAFE_OUTPUT, error: Exception | None = None):
        self.text = text
        self.error = error
        self.requests = []

    async def generate(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return LLMResponse(content=self.text, model="fake")

    async def stream(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        for word in self.text.split(" "):
            yield word + " "


def _service(client=None, rate_limiter=None):
    log = SecurityLog(MemoryStore())
    service = GenerationService(
        client=client or _FakeClient(),
        moderator=ContentModerator(log=log),
        log=log,
        rate_limiter=rate_limiter,
    )
    return service, log


def test_successful_generation():
    client = _FakeClient()
    service, _ = _service(client)
    result = asyncio.run(service.generate(_STORY, "superhero-origin", {"child_name": "Maya"}))

    assert result.success
    assert result.content == _SAFE_OUTPUT
    assert result.display_text == _SAFE_OUTPUT
    assert "Maya" in client.requests[0].conversation[0]["content"]


def test_unsafe_output_replaced_by_fallback():
    service, log = _service(_FakeClient("The hero killed the villain"))
    result = asyncio.run(service.generate(_STORY, GameContext.SUPERHERO_ORIGIN))

    assert not result.success
    assert result.content is None
    assert result.error == AGE_INAPPROPRIATE_REASON
    assert result.fallback == FALLBACK_MESSAGES[GameContext.SUPERHERO_ORIGIN]
    assert result.display_text == result.fallback
    assert log.query(SecurityEventType.INAPPROPRIATE_CONTENT)


def test_generation_error_returns_fallback():
    client = _FakeClient(error=GenerationError("Claude API error: overloaded"))
    service, _ = _service(client)
    result = asyncio.run(service.generate("Tell me a pun", "dad-jokes"))

    assert not result.success
    assert result.error == "Claude API error: overloaded"
    assert result.fallback == FALLBACK_MESSAGES[GameContext.DAD_JOKES]


def test_bad_requests_raise():
    service, _ = _service()
    with pytest.raises(InvalidInputError):
        asyncio.run(service.generate("short", "superhero-origin"))
    with pytest.raises(UnknownGameContextError):
        asyncio.run(service.generate(_STORY, "space-race"))


def test_rate_limit():
    clock = lambda: 0.0  # noqa: E731
    client = _FakeClient()
    service, log = _service(client, rate_limiter=RateLimiter(1, 60, clock=clock))

    assert asyncio.run(service.generate(_STORY, "comic-maker")).success
    limited = asyncio.run(service.generate(_STORY, "comic-maker"))

    assert not limited.success
    assert limited.fallback == RATE_LIMIT_FALLBACK
    assert len(client.requests) == 1
    events = log.query(SecurityEventType.RATE_LIMIT_EXCEEDED)
    assert events[0].metadata["game_context"] == "comic-maker"


def test_rejected_input_does_not_use_quota():
    limiter = RateLimiter(1, 60, clock=lambda: 0.0)
    service, _ = _service(rate_limiter=limiter)

    with pytest.raises(InvalidInputError):
        asyncio.run(service.generate("short", "comic-maker"))
    with pytest.raises(InvalidInputError):
        asyncio.run(service.generate_streaming("short", "comic-maker", on_chunk=lambda c: None))

    assert limiter.seconds_until_next() == 0.0
    assert asyncio.run(service.generate(_STORY, "comic-maker")).success


# --- Safety mode ---


def test_safety_mode_reaches_prompt_and_moderation():
    client = _FakeClient("The hero had a big battle with the grumpy robot.")
    service, _ = _service(client)

    relaxed = asyncio.run(service.generate(_STORY, "superhero-origin"))
    assert relaxed.success
    assert "EXTRA SAFE MODE ENABLED" not in client.requests[0].system

    strict = asyncio.run(service.generate(_STORY, "superhero-origin", safety_mode=True))
    assert not strict.success
    assert strict.error == "Content too intense for Extra Safe mode"
    assert "EXTRA SAFE MODE ENABLED" in client.requests[1].system


# --- Streaming ---


def test_streaming_delivers_chunks_after_moderation():
    chunks = []
    service, _ = _service()
    result = asyncio.run(
        service.generate_streaming(_STORY, "superhero-origin", on_chunk=chunks.append)
    )

    assert result.success
    assert "".join(chunks) == result.content


def test_streaming_withholds_rejected_output():
    chunks = []
    service, _ = _service(_FakeClient("The hero killed the villain"))
    result = asyncio.run(
        service.generate_streaming(_STORY, "superhero-origin", on_chunk=chunks.append)
    )

    assert not result.success
    assert chunks == []


def test_streaming_error_returns_fallback():
    service, _ = _service(_FakeClient(error=GenerationError("connection reset")))
    result = asyncio.run(
        service.generate_streaming(_STORY, "noisy-storybook", on_chunk=lambda c: None)
    )
    assert result.fallback == FALLBACK_MESSAGES[GameContext.NOISY_STORYBOOK]
