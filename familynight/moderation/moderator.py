"""Layered moderation of AI-generated text.

Every piece of model output passes these layers in order; the first one that
rejects ends the check:

1. profanity word list
2. generic category words (violence, bullying, sexual, hate speech, scary)
3. per-game forbidden words (the game's table overrides layer 2 for the
   words it names)
4. length bounds, which catch empty or runaway generations
5. the remote moderation service, for high-risk games when enabled

Moderation never rewrites content. A rejected verdict carries a reason meant
for logs; callers show the game's fallback message instead.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from familynight.errors import ModerationServiceError
from familynight.games import GameContext, get_safe_fallback
from familynight.moderation.models import ModerationStats, ModerationVerdict
from familynight.moderation.remote import RemoteModerationClient
from familynight.moderation.rules import (
    DEFAULT_CONTEXT,
    USER_INPUT_CATEGORIES,
    ModerationRules,
    find_word,
    load_rules,
)
from familynight.security.audit_log import SecurityEventType, preview

if TYPE_CHECKING:
    from familynight.config import Settings
    from familynight.security.audit_log import SecurityLog

logger = logging.getLogger(__name__)

INVALID_CONTENT = "Invalid content"
PROFANITY_REASON = "Content contained inappropriate language"
AGE_INAPPROPRIATE_REASON = "Content not age-appropriate for context"
TOO_LONG_REASON = "Content too long (generation error)"
TOO_SHORT_REASON = "Content too short (generation error)"
REMOTE_FLAGGED_REASON = "Content flagged by moderation service"
EXTRA_SAFE_REASON = "Content too intense for Extra Safe mode"

_MODERATION_EVENTS = (
    SecurityEventType.PROFANITY_DETECTED.value,
    SecurityEventType.INAPPROPRIATE_CONTENT.value,
    SecurityEventType.API_MODERATION_FLAGGED.value,
)


def _context_key(game_context: GameContext | str | None) -> str:
    if isinstance(game_context, GameContext):
        return game_context.value
    return game_context or DEFAULT_CONTEXT


class ContentModerator:
    """Runs the moderation layers and records every rejection.

    Parameters
    ----------
    rules : ModerationRules | None
        Word tables; the built-in defaults when *None*.
    log : SecurityLog | None
        Where rejections and remote errors are recorded.
    remote : RemoteModerationClient | None
        Client for layer 5.
    enable_remote : bool
        Feature flag for layer 5. Ignored when *remote* is *None*.
    """

    def __init__(
        self,
        rules: Optional[ModerationRules] = None,
        log: Optional[SecurityLog] = None,
        remote: Optional[RemoteModerationClient] = None,
        enable_remote: bool = False,
    ) -> None:
        self.rules = rules or ModerationRules()
        self.log = log
        self.remote = remote
        self.enable_remote = enable_remote and remote is not None

    @classmethod
    def from_settings(cls, settings: Settings, log: Optional[SecurityLog] = None) -> ContentModerator:
        """Build a moderator from runtime settings."""
        rules = load_rules(settings.rules_file) if settings.rules_file else ModerationRules()
        remote = None
        if settings.enable_api_moderation:
            remote = RemoteModerationClient(settings.moderation_api_key, url=settings.moderation_url)
        return cls(
            rules=rules,
            log=log,
            remote=remote,
            enable_remote=settings.enable_api_moderation,
        )

    # -- helpers -------------------------------------------------------------

    def _record(self, event_type: SecurityEventType, **metadata) -> None:
        if self.log is not None:
            self.log.record(event_type, **metadata)

    def _reject(
        self,
        content: object,
        game: str,
        reason: str,
        category: str,
        event_type: SecurityEventType = SecurityEventType.INAPPROPRIATE_CONTENT,
        **extra,
    ) -> ModerationVerdict:
        logger.warning("Moderation rejected %s output: %s", game, reason)
        self._record(
            event_type,
            game_context=game,
            category=category,
            reason=reason,
            content_preview=preview(content),
            **extra,
        )
        return ModerationVerdict.rejected(reason, category)

    # -- layers --------------------------------------------------------------

    def _check_profanity(self, text: str) -> Optional[str]:
        return find_word(text, self.rules.profanity)

    def _check_categories(self, text: str, game: str) -> Optional[tuple[str, str]]:
        exempt = self.rules.for_context(game).named_words
        return self.rules.find_category(text, exempt)

    def _check_context(self, text: str, game: str) -> Optional[str]:
        return find_word(text, self.rules.for_context(game).forbidden)

    def _check_length(self, text: str) -> Optional[str]:
        if len(text) > self.rules.max_length:
            return TOO_LONG_REASON
        if len(text) < self.rules.min_length:
            return TOO_SHORT_REASON
        return None

    # -- public API ----------------------------------------------------------

    async def moderate(
        self, content: object, game_context: GameContext | str = DEFAULT_CONTEXT
    ) -> ModerationVerdict:
        """Check generated *content* for *game_context* and return a verdict."""
        game = _context_key(game_context)

        if not content or not isinstance(content, str):
            return self._reject(content, game, INVALID_CONTENT, "invalid")

        # 1. Profanity
        word = self._check_profanity(content)
        if word:
            return self._reject(
                content, game, PROFANITY_REASON, "profanity",
                event_type=SecurityEventType.PROFANITY_DETECTED,
            )

        # 2. Generic categories
        match = self._check_categories(content, game)
        if match:
            category, word = match
            return self._reject(content, game, f"Content flagged: {category}", category)

        # 3. Game-specific forbidden words
        word = self._check_context(content, game)
        if word:
            return self._reject(content, game, AGE_INAPPROPRIATE_REASON, "age_inappropriate")

        # 4. Length bounds
        reason = self._check_length(content)
        if reason:
            return self._reject(content, game, reason, "generation_error")

        # 5. Remote service for high-risk games
        if self.enable_remote and game in self.rules.high_risk_games:
            try:
                result = await self.remote.check(content)
            except ModerationServiceError as exc:
                # Availability wins for this layer only; layers 1-4 already passed.
                logger.error("Remote moderation unavailable: %s", exc)
                self._record(
                    SecurityEventType.MODERATION_API_ERROR,
                    error=str(exc),
                    game_context=game,
                )
            else:
                if result.flagged:
                    return self._reject(
                        content, game, REMOTE_FLAGGED_REASON, "remote_flagged",
                        event_type=SecurityEventType.API_MODERATION_FLAGGED,
                        categories=result.categories,
                    )

        return ModerationVerdict.passed(content)

    async def moderate_strict(
        self,
        content: object,
        game_context: GameContext | str = DEFAULT_CONTEXT,
        *,
        safety_mode: bool,
    ) -> ModerationVerdict:
        """Standard moderation, then the Extra Safe word list when *safety_mode*."""
        verdict = await self.moderate(content, game_context)
        if not verdict.safe or not safety_mode:
            return verdict

        word = find_word(verdict.content, self.rules.strict_words)
        if word:
            return self._reject(
                content, _context_key(game_context), EXTRA_SAFE_REASON,
                "grandma_mode_strict", word=word,
            )
        return verdict

    def moderate_user_input(self, text: object) -> ModerationVerdict:
        """Lenient check for text a family member typed themselves.

        Only profanity and the most severe categories are blocked; the
        reasons here are friendly enough to show to the user.
        """
        if not text or not isinstance(text, str):
            return ModerationVerdict.passed(text if isinstance(text, str) else "")

        if self._check_profanity(text):
            return ModerationVerdict.rejected("Please keep it family-friendly!", "profanity")

        for category in sorted(USER_INPUT_CATEGORIES):
            if find_word(text, self.rules.categories.get(category, ())):
                return ModerationVerdict.rejected(
                    "That doesn't seem appropriate. Let's try something else!", category
                )
        return ModerationVerdict.passed(text)

    async def aclose(self) -> None:
        """Release the remote moderation client, if any."""
        if self.remote is not None:
            await self.remote.close()

    @staticmethod
    def fallback_for(game_context: GameContext | str) -> str:
        """Message to show instead of rejected or failed output."""
        return get_safe_fallback(game_context)


def moderation_stats(log: SecurityLog) -> ModerationStats:
    """Count moderation rejections in *log* by category and by game."""
    stats = ModerationStats()
    for event in log.query():
        if event.type not in _MODERATION_EVENTS:
            continue
        stats.total += 1
        category = str(event.metadata.get("category") or "unknown")
        game = str(event.metadata.get("game_context") or "unknown")
        stats.by_category[category] = stats.by_category.get(category, 0) + 1
        stats.by_game[game] = stats.by_game.get(game, 0) + 1
    return stats
