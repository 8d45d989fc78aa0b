"""The one path that turns family input into text shown on screen.

``GenerationService`` chains the prompt builder, the rate limiter, the
generation client and strict moderation. Model output never leaves this
module without passing moderation; anything that fails is replaced by the
game's fallback message.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

from familynight.errors import GenerationError
from familynight.games import RATE_LIMIT_FALLBACK, GameContext, get_safe_fallback
from familynight.llm.client import LLMClient
from familynight.llm.prompt_builder import build_ai_request
from familynight.llm.rate_limiter import RateLimiter
from familynight.moderation.moderator import ContentModerator
from familynight.security.audit_log import SecurityEventType

if TYPE_CHECKING:
    from familynight.config import Settings
    from familynight.llm.prompt_builder import AIRequest
    from familynight.security.audit_log import SecurityLog

logger = logging.getLogger(__name__)

RATE_LIMIT_ERROR = "Rate limit exceeded"


@dataclass
class GenerationResult:
    """Outcome of one generation.

    On success ``content`` holds moderated text. Otherwise ``error`` says what
    went wrong (for logs) and ``fallback`` holds what to show instead.
    """

    success: bool
    content: Optional[str] = None
    error: str = ""
    fallback: str = ""

    @property
    def display_text(self) -> str:
        return self.content if self.success and self.content else self.fallback

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "content": self.content,
            "error": self.error,
            "fallback": self.fallback,
        }


class GenerationService:
    """Generate moderated text for a game.

    Parameters
    ----------
    client : LLMClient
        Raw text generation.
    moderator : ContentModerator
        Checks every response before it is returned.
    log : SecurityLog | None
        Receives rate-limit events; the moderator logs its own rejections.
    rate_limiter : RateLimiter | None
        Gates calls to the model. No limit when *None*.
    model : str | None
        Overrides the request's default model.
    """

    def __init__(
        self,
        client: LLMClient,
        moderator: ContentModerator,
        log: Optional[SecurityLog] = None,
        rate_limiter: Optional[RateLimiter] = None,
        model: Optional[str] = None,
    ) -> None:
        self.client = client
        self.moderator = moderator
        self.log = log
        self.rate_limiter = rate_limiter
        self.model = model

    @classmethod
    def from_settings(cls, settings: Settings, log: Optional[SecurityLog] = None) -> GenerationService:
        """Wire up the full pipeline from runtime settings."""
        return cls(
            client=LLMClient(api_key=settings.anthropic_api_key or None),
            moderator=ContentModerator.from_settings(settings, log=log),
            log=log,
            rate_limiter=RateLimiter(settings.rate_limit, float(settings.rate_window_seconds)),
            model=settings.model,
        )

    # -- helpers -------------------------------------------------------------

    def _failure(self, game: GameContext, error: str) -> GenerationResult:
        return GenerationResult(success=False, error=error, fallback=get_safe_fallback(game))

    def _check_rate_limit(self, game: GameContext) -> Optional[GenerationResult]:
        if self.rate_limiter is None or self.rate_limiter.allow():
            return None
        retry_after = self.rate_limiter.seconds_until_next()
        logger.warning("Rate limit hit for %s; retry in %.0fs", game.value, retry_after)
        if self.log is not None:
            self.log.record(
                SecurityEventType.RATE_LIMIT_EXCEEDED,
                game_context=game.value,
                retry_after=round(retry_after, 1),
            )
        return GenerationResult(success=False, error=RATE_LIMIT_ERROR, fallback=RATE_LIMIT_FALLBACK)

    def _request(
        self,
        user_input: str,
        game: GameContext,
        additional_data: Optional[Mapping[str, Any]],
        safety_mode: bool,
        max_tokens: int,
        temperature: float,
    ) -> AIRequest:
        kwargs: dict[str, Any] = {}
        if self.model:
            kwargs["model"] = self.model
        return build_ai_request(
            user_input,
            game,
            additional_data,
            max_tokens=max_tokens,
            temperature=temperature,
            safety_mode=safety_mode,
            log=self.log,
            **kwargs,
        )

    async def _moderated(self, text: str, game: GameContext, safety_mode: bool) -> GenerationResult:
        verdict = await self.moderator.moderate_strict(text, game, safety_mode=safety_mode)
        if not verdict.safe:
            return self._failure(game, verdict.reason)
        logger.debug("%s output passed moderation", game.value)
        return GenerationResult(success=True, content=verdict.content)

    # -- public API ----------------------------------------------------------

    async def generate(
        self,
        user_input: str,
        game_context: GameContext | str,
        additional_data: Optional[Mapping[str, Any]] = None,
        *,
        safety_mode: bool = False,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> GenerationResult:
        """Generate and moderate text for *game_context*.

        Raises ``UnknownGameContextError`` or ``InvalidInputError`` when the
        request itself is bad; every later failure becomes a fallback result.
        """
        game = GameContext.parse(game_context)
        request = self._request(user_input, game, additional_data, safety_mode, max_tokens, temperature)
        limited = self._check_rate_limit(game)
        if limited:
            return limited

        try:
            response = await self.client.generate(request)
        except GenerationError as exc:
            logger.error("Generation failed for %s: %s", game.value, exc)
            return self._failure(game, str(exc))

        logger.debug("Received %d chars for %s", len(response.content), game.value)
        return await self._moderated(response.content, game, safety_mode)

    async def generate_streaming(
        self,
        user_input: str,
        game_context: GameContext | str,
        additional_data: Optional[Mapping[str, Any]] = None,
        *,
        on_chunk: Callable[[str], None],
        safety_mode: bool = False,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> GenerationResult:
        """Like :meth:`generate`, delivering the text to *on_chunk* piece by piece.

        Chunks are buffered until the whole response has passed moderation,
        so *on_chunk* is never called for rejected output.
        """
        game = GameContext.parse(game_context)
        request = self._request(user_input, game, additional_data, safety_mode, max_tokens, temperature)
        limited = self._check_rate_limit(game)
        if limited:
            return limited

        chunks: list[str] = []
        try:
            async for chunk in self.client.stream(request):
                chunks.append(chunk)
        except GenerationError as exc:
            logger.error("Streaming failed for %s: %s", game.value, exc)
            return self._failure(game, str(exc))

        result = await self._moderated("".join(chunks), game, safety_mode)
        if result.success:
            for chunk in chunks:
                on_chunk(chunk)
        return result
