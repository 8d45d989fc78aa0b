"""Tests for layered output moderation."""

import asyncio

import httpx

from familynight.games import DEFAULT_FALLBACK, FALLBACK_MESSAGES, GameContext, get_safe_fallback
from familynight.moderation.moderator import (
    AGE_INAPPROPRIATE_REASON,
    EXTRA_SAFE_REASON,
    PROFANITY_REASON,
    REMOTE_FLAGGED_REASON,
    ContentModerator,
    moderation_stats,
)
from familynight.moderation.remote import RemoteModerationClient
from familynight.security.audit_log import SecurityEventType, SecurityLog
from familynight.storage import MemoryStore


def _moderator(**kwargs) -> tuple[ContentModerator, SecurityLog]:
    log = SecurityLog(MemoryStore())
    return ContentModerator(log=log, **kwargs), log


def _remote(handler) -> RemoteModerationClient:
    return RemoteModerationClient(
        "test-key",
        url="https://moderation.test/v1/moderations",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def _check(moderator, content, game="default"):
    return asyncio.run(moderator.moderate(content, game))


# --- Layers ---


def test_clean_content_passes_unchanged():
    moderator, log = _moderator()
    text = "The family built a giant pillow fort in the living room."
    verdict = _check(moderator, text)

    assert verdict.safe
    assert verdict.content == text
    assert log.query() == []


def test_invalid_content():
    moderator, _ = _moderator()
    for value in ("", None, 123):
        verdict = _check(moderator, value)
        assert not verdict.safe
        assert verdict.reason == "Invalid content"


def test_profanity_rejected():
    moderator, log = _moderator()
    verdict = _check(moderator, "You're stupid and ugly!", "roast-battle")

    assert not verdict.safe
    assert verdict.content is None
    assert verdict.reason == PROFANITY_REASON
    assert verdict.category == "profanity"

    events = log.query(SecurityEventType.PROFANITY_DETECTED)
    assert len(events) == 1
    assert events[0].metadata["game_context"] == "roast-battle"
    assert events[0].metadata["content_preview"] == "You're stupid and ugly!"


def test_profanity_matches_whole_words_only():
    moderator, _ = _moderator()
    assert _check(moderator, "Hello there, shell collectors of the beach!").safe


def test_generic_category_rejected():
    moderator, log = _moderator()
    verdict = _check(moderator, "The pirates decided to attack the island at dawn.", "comic-maker")

    assert not verdict.safe
    assert verdict.reason == "Content flagged: violence"
    assert verdict.category == "violence"
    assert log.query(SecurityEventType.INAPPROPRIATE_CONTENT)


def test_context_allows_superhero_action():
    moderator, _ = _moderator()
    assert _check(moderator, "The hero will fight to save the day", "superhero-origin").safe


def test_same_words_flagged_outside_superhero_context():
    moderator, _ = _moderator()
    verdict = _check(moderator, "The hero will fight to save the day", "comic-maker")
    assert verdict.category == "violence"


def test_context_forbidden_word_rejected():
    moderator, _ = _moderator()
    verdict = _check(moderator, "The hero killed the villain", GameContext.SUPERHERO_ORIGIN)

    assert not verdict.safe
    assert verdict.reason == AGE_INAPPROPRIATE_REASON
    assert verdict.category == "age_inappropriate"


def test_storybook_rejects_terrified():
    moderator, _ = _moderator()
    verdict = _check(moderator, "The scary monster terrified everyone!", "noisy-storybook")

    assert not verdict.safe
    assert verdict.category == "age_inappropriate"


def test_length_bounds():
    moderator, _ = _moderator()

    short = _check(moderator, "Hi there")
    assert short.reason == "Content too short (generation error)"

    long = _check(moderator, "la " * 4000)
    assert long.reason == "Content too long (generation error)"
    assert long.category == "generation_error"


def test_unknown_game_uses_default_rules():
    moderator, _ = _moderator()
    verdict = _check(moderator, "Everyone said the robot was a loser and slow", "space-race")
    assert verdict.category == "bullying"

    verdict = _check(moderator, "Everyone said the robot was ugly and slow", "space-race")
    assert verdict.category == "age_inappropriate"


# --- Remote layer ---


def test_remote_flag_rejects_high_risk_game():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.headers["Authorization"] == "Bearer test-key"
        return httpx.Response(200, json={"results": [{"flagged": True, "categories": {"harassment": True}}]})

    moderator, log = _moderator(remote=_remote(handler), enable_remote=True)
    verdict = _check(moderator, "Your room is so messy, your socks filed a complaint!", "roast-battle")

    assert not verdict.safe
    assert verdict.reason == REMOTE_FLAGGED_REASON
    events = log.query(SecurityEventType.API_MODERATION_FLAGGED)
    assert events[0].metadata["categories"] == {"harassment": True}


def test_remote_error_fails_open():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": "down"})

    moderator, log = _moderator(remote=_remote(handler), enable_remote=True)
    text = "Why did the pancake blush? It saw the syrup dressing!"
    verdict = _check(moderator, text, "dad-jokes")

    assert verdict.safe
    assert verdict.content == text
    assert len(log.query(SecurityEventType.MODERATION_API_ERROR)) == 1


def test_remote_malformed_response_fails_open():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"unexpected": []})

    moderator, log = _moderator(remote=_remote(handler), enable_remote=True)
    assert _check(moderator, "Why did the pancake blush? It saw the syrup!", "dad-jokes").safe
    assert log.query(SecurityEventType.MODERATION_API_ERROR)


def test_remote_skipped_for_other_games_and_when_disabled():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"results": [{"flagged": True}]})

    enabled, _ = _moderator(remote=_remote(handler), enable_remote=True)
    assert _check(enabled, "The family built a pillow fort together.", "superhero-origin").safe

    disabled, _ = _moderator(remote=_remote(handler), enable_remote=False)
    assert _check(disabled, "Your room is so messy, your socks filed a complaint!", "roast-battle").safe

    assert calls == []


def test_remote_without_key_fails_open():
    remote = RemoteModerationClient(
        None, client=httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    )
    moderator, log = _moderator(remote=remote, enable_remote=True)
    assert _check(moderator, "Why did the pancake blush? It saw the syrup!", "dad-jokes").safe
    assert "not configured" in log.query()[0].metadata["error"]


def test_closed_remote_client_fails_open():
    remote = _remote(lambda r: httpx.Response(200, json={"results": [{"flagged": True}]}))
    moderator, log = _moderator(remote=remote, enable_remote=True)
    asyncio.run(moderator.aclose())

    verdict = _check(moderator, "Why did the pancake blush? It saw the syrup!", "dad-jokes")
    assert verdict.safe
    events = log.query(SecurityEventType.MODERATION_API_ERROR)
    assert "closed" in events[0].metadata["error"]


# --- Strict mode ---


def test_strict_mode_rejects_intense_words():
    moderator, _ = _moderator()
    text = "The hero will fight to save the day"

    relaxed = asyncio.run(moderator.moderate_strict(text, "superhero-origin", safety_mode=False))
    assert relaxed.safe

    strict = asyncio.run(moderator.moderate_strict(text, "superhero-origin", safety_mode=True))
    assert not strict.safe
    assert strict.reason == EXTRA_SAFE_REASON
    assert strict.category == "grandma_mode_strict"


def test_strict_mode_keeps_standard_rejection():
    moderator, _ = _moderator()
    verdict = asyncio.run(
        moderator.moderate_strict("The hero killed the villain", "superhero-origin", safety_mode=True)
    )
    assert verdict.category == "age_inappropriate"


# --- User input ---


def test_user_input_is_lenient():
    moderator, log = _moderator()

    assert moderator.moderate_user_input("The dragon had a big fight with a knight").safe
    assert moderator.moderate_user_input("I hate broccoli").category == "profanity"
    assert moderator.moderate_user_input("that show was too sexual").category == "sexual"
    assert moderator.moderate_user_input("a fight scene with naked zombies").category == "sexual"
    assert moderator.moderate_user_input("").safe
    assert log.query() == []


# --- Fallbacks & stats ---


def test_every_game_has_a_fallback():
    for game in GameContext:
        assert FALLBACK_MESSAGES[game]
        assert get_safe_fallback(game.value) == FALLBACK_MESSAGES[game]
    assert get_safe_fallback("space-race") == DEFAULT_FALLBACK
    assert ContentModerator.fallback_for("roast-battle") == FALLBACK_MESSAGES[GameContext.ROAST_BATTLE]


def test_moderation_stats():
    moderator, log = _moderator()
    _check(moderator, "You're stupid and ugly!", "roast-battle")
    _check(moderator, "The hero killed the villain", "superhero-origin")
    _check(moderator, "The scary monster terrified everyone!", "noisy-storybook")
    log.record(SecurityEventType.XSS_ATTEMPT)

    stats = moderation_stats(log)
    assert stats.total == 3
    assert stats.by_category == {"profanity": 1, "age_inappropriate": 2}
    assert stats.by_game["noisy-storybook"] == 1
