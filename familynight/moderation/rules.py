"""Declarative rule tables for output moderation.

Word lists are plain data; matching patterns are compiled from them. Every
word matches as a whole word, case-insensitively, together with its common
inflections ("kill" also matches "kills", "killed", "killing").

Deployments can override any table with a YAML file::

    profanity: [darn, heck]
    categories:
      scary: [terrifying, nightmare]
    contexts:
      superhero-origin:
        allowed: [fight, battle]
        forbidden: [kill, blood]
    strict_words: [fight, yell]
    high_risk_games: [roast-battle]
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONTEXT = "default"

_INFLECTIONS = r"(?:s|es|d|ed|ing|er|ers)?"


@lru_cache(maxsize=None)
def word_pattern(word: str) -> re.Pattern[str]:
    """Compile a whole-word, case-insensitive pattern for *word*."""
    body = r"\s+".join(re.escape(part) for part in word.split())
    return re.compile(rf"\b{body}{_INFLECTIONS}\b", re.IGNORECASE)


def find_word(text: str, words: list[str] | tuple[str, ...] | frozenset[str]) -> str | None:
    """Return the first of *words* that occurs in *text*, if any."""
    for word in words:
        if word_pattern(word).search(text):
            return word
    return None


# ---------------------------------------------------------------------------
# Default tables
# ---------------------------------------------------------------------------

PROFANITY_WORDS: tuple[str, ...] = (
    "damn",
    "hell",
    "crap",
    "stupid",
    "idiot",
    "dumb",
    "shut up",
    "suck",
    "hate",
)

CATEGORY_WORDS: dict[str, tuple[str, ...]] = {
    "violence": (
        "kill", "murder", "die", "death", "blood", "gore",
        "shoot", "stab", "attack", "fight", "hit",
    ),
    "bullying": (
        "ugly", "fat", "skinny", "dumb", "stupid", "loser",
        "worthless", "useless", "pathetic",
    ),
    "sexual": ("sex", "sexual", "porn", "naked"),
    "hate_speech": ("hate", "racist", "discriminate", "discrimination"),
    "scary": (
        "terrifying", "terrified", "nightmare", "horrifying", "horrified",
    ),
}

# Categories severe enough to block user-authored text as well
USER_INPUT_CATEGORIES: frozenset[str] = frozenset({"sexual", "hate_speech"})


@dataclass(frozen=True)
class ContextRule:
    """Per-game word policy.

    ``allowed`` words are exempt from the generic category check for this
    game; ``forbidden`` words always reject. Both take precedence over the
    generic categories for the words they name.
    """

    allowed: tuple[str, ...] = ()
    forbidden: tuple[str, ...] = ()

    @property
    def named_words(self) -> frozenset[str]:
        return frozenset(w.lower() for w in self.allowed + self.forbidden)


CONTEXT_RULES: dict[str, ContextRule] = {
    "superhero-origin": ContextRule(
        allowed=("fight", "defeat", "battle", "save"),
        forbidden=("kill", "murder", "die", "blood"),
    ),
    "family-movie": ContextRule(
        allowed=("scary", "spooky", "creepy"),
        forbidden=("terrifying", "horrifying", "nightmare"),
    ),
    "roast-battle": ContextRule(
        allowed=("silly", "goofy", "messy", "stinky"),
        forbidden=("ugly", "fat", "stupid", "dumb"),
    ),
    "noisy-storybook": ContextRule(
        allowed=("spooky",),
        forbidden=("terrified", "terrifying", "nightmare", "scream"),
    ),
    DEFAULT_CONTEXT: ContextRule(
        forbidden=("kill", "murder", "die", "stupid", "ugly", "hate"),
    ),
}

# Extra words rejected when Grandma Mode is on
STRICT_WORDS: tuple[str, ...] = (
    "fight", "battle", "scary", "spooky", "creepy",
    "angry", "mad", "yell", "scream",
)

HIGH_RISK_GAMES: tuple[str, ...] = ("roast-battle", "dad-jokes")

MIN_CONTENT_LENGTH = 10
MAX_CONTENT_LENGTH = 10_000


# ---------------------------------------------------------------------------
# Rule set
# ---------------------------------------------------------------------------


@dataclass
class ModerationRules:
    """Every table the moderator consults."""

    profanity: tuple[str, ...] = PROFANITY_WORDS
    categories: dict[str, tuple[str, ...]] = field(default_factory=lambda: dict(CATEGORY_WORDS))
    contexts: dict[str, ContextRule] = field(default_factory=lambda: dict(CONTEXT_RULES))
    strict_words: tuple[str, ...] = STRICT_WORDS
    high_risk_games: tuple[str, ...] = HIGH_RISK_GAMES
    min_length: int = MIN_CONTENT_LENGTH
    max_length: int = MAX_CONTENT_LENGTH

    def for_context(self, game_context: str) -> ContextRule:
        """Return the rule for *game_context*, or the default rule."""
        return self.contexts.get(game_context) or self.contexts.get(DEFAULT_CONTEXT, ContextRule())

    def find_category(self, text: str, exempt: frozenset[str] = frozenset()) -> tuple[str, str] | None:
        """Return ``(category, word)`` for the first generic match not in *exempt*."""
        for category, words in self.categories.items():
            word = find_word(text, [w for w in words if w.lower() not in exempt])
            if word:
                return category, word
        return None


def _words(value: Any, name: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"'{name}' must be a list of strings")
    return tuple(value)


def load_rules(path: str | Path) -> ModerationRules:
    """Load a rule set from YAML; tables missing from the file keep their defaults."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Moderation rules in {path} must be a mapping")

    rules = ModerationRules()
    if "profanity" in data:
        rules.profanity = _words(data["profanity"], "profanity")
    for category, words in (data.get("categories") or {}).items():
        rules.categories[str(category)] = _words(words, f"categories.{category}")
    for context, rule in (data.get("contexts") or {}).items():
        rule = rule or {}
        rules.contexts[str(context)] = ContextRule(
            allowed=_words(rule.get("allowed", []), f"contexts.{context}.allowed"),
            forbidden=_words(rule.get("forbidden", []), f"contexts.{context}.forbidden"),
        )
    if "strict_words" in data:
        rules.strict_words = _words(data["strict_words"], "strict_words")
    if "high_risk_games" in data:
        rules.high_risk_games = _words(data["high_risk_games"], "high_risk_games")
    if "min_length" in data:
        rules.min_length = int(data["min_length"])
    if "max_length" in data:
        rules.max_length = int(data["max_length"])
    return rules
