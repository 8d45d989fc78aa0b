"""Injection-resistant prompt assembly.

User text never goes into the system prompt. It is validated, sanitised and
placed only inside the user message, while the system message carries the
safety rules and the game persona.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional

from familynight.config import DEFAULT_MODEL
from familynight.errors import InvalidInputError
from familynight.games import VALIDATION_CONTEXTS, GameContext
from familynight.llm import prompts
from familynight.security.sanitizer import sanitize
from familynight.security.validator import validate

if TYPE_CHECKING:
    from familynight.security.audit_log import SecurityLog

logger = logging.getLogger(__name__)

# Structured fields from game forms are shorter than free text
_FIELD_MAX_LENGTH = 100


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class PromptMessage:
    """One role-tagged block of a prompt."""

    role: str
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class AIRequest:
    """Everything the generation client needs for one call."""

    game_context: GameContext
    messages: list[PromptMessage]
    model: str = DEFAULT_MODEL
    max_tokens: int = 1000
    temperature: float = 0.7
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def system(self) -> str:
        return "\n".join(m.content for m in self.messages if m.role == "system")

    @property
    def conversation(self) -> list[dict[str, str]]:
        """Non-system messages in the shape the messages API expects."""
        return [m.to_dict() for m in self.messages if m.role != "system"]


# ---------------------------------------------------------------------------
# System prompts
# ---------------------------------------------------------------------------


def _family_movie_persona(safety_mode: bool) -> str:
    if safety_mode:
        return prompts.FAMILY_MOVIE_PROMPT.format(
            extra_safe_restrictions=prompts.FAMILY_MOVIE_EXTRA_SAFE,
            superhero_note=prompts.FAMILY_MOVIE_SUPERHERO_NOTE,
            extra_safe_forbidden=prompts.FAMILY_MOVIE_EXTRA_SAFE_FORBIDDEN,
        )
    return prompts.FAMILY_MOVIE_PROMPT.format(
        extra_safe_restrictions="",
        superhero_note="",
        extra_safe_forbidden="",
    )


def _roast_battle_persona(safety_mode: bool) -> str:
    return prompts.ROAST_BATTLE_PROMPT.format(
        mode_note=prompts.ROAST_BATTLE_COMPLIMENT_NOTE if safety_mode else "",
        roast_library=prompts.format_roast_library(),
    )


_PERSONAS: dict[GameContext, Callable[[bool], str]] = {
    GameContext.SUPERHERO_ORIGIN: lambda _: prompts.SUPERHERO_ORIGIN_PROMPT,
    GameContext.FAMILY_MOVIE: _family_movie_persona,
    GameContext.COMIC_MAKER: lambda _: prompts.COMIC_MAKER_PROMPT,
    GameContext.NOISY_STORYBOOK: lambda _: prompts.NOISY_STORYBOOK_PROMPT,
    GameContext.ROAST_BATTLE: _roast_battle_persona,
    GameContext.DAD_JOKES: lambda _: prompts.DAD_JOKES_PROMPT,
    GameContext.CHARACTER_QUIZ: lambda _: prompts.CHARACTER_QUIZ_PROMPT,
    GameContext.TREEHOUSE_DESIGNER: lambda _: prompts.TREEHOUSE_DESIGNER_PROMPT,
    GameContext.RESTAURANT_MENU: lambda _: prompts.RESTAURANT_MENU_PROMPT,
}


def get_system_prompt(game_context: GameContext | str, safety_mode: bool = False) -> str:
    """Return the full system prompt for a game.

    The roast battle carries its own Grandma Mode switch (a compliment battle)
    instead of the generic extra-safe block.
    """
    game = GameContext.parse(game_context)
    parts = [prompts.BASE_SAFETY_RULES]
    if safety_mode and game is not GameContext.ROAST_BATTLE:
        parts.append(prompts.EXTRA_SAFE_RULES)
    parts.append(_PERSONAS[game](safety_mode))
    return "\n".join(parts)


# ---------------------------------------------------------------------------
# User messages
# ---------------------------------------------------------------------------


def _clean(value: Any, log: Optional[SecurityLog]) -> Any:
    """Sanitise every string inside a form value, keeping its structure."""
    if isinstance(value, str):
        return sanitize(value, max_length=_FIELD_MAX_LENGTH, log=log)
    if isinstance(value, Mapping):
        return {_clean(str(k), log): _clean(v, log) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_clean(v, log) for v in value]
    if isinstance(value, (int, float, bool)) or value is None:
        return value
    return sanitize(str(value), max_length=_FIELD_MAX_LENGTH, log=log)


def _text(data: Mapping[str, Any], key: str, default: str) -> str:
    value = data.get(key)
    if value is None or value == "" or value == []:
        return default
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


def _traits(data: Mapping[str, Any]) -> str:
    traits = data.get("traits")
    if isinstance(traits, list) and traits:
        return ", ".join(str(t) for t in traits)
    if isinstance(traits, Mapping):
        chosen = [str(k) for k, v in traits.items() if v]
        if chosen:
            return ", ".join(chosen)
    return "brave, kind"


def _roast_battle_message(notes: str, data: Mapping[str, Any]) -> str:
    if "round" not in data and "player_name" not in data:
        return notes
    return prompts.ROAST_BATTLE_REQUEST.format(
        round=_text(data, "round", "1"),
        player_name=_text(data, "player_name", "Your opponent"),
        notes=notes,
    )


_USER_MESSAGES: dict[GameContext, Callable[[str, Mapping[str, Any]], str]] = {
    GameContext.SUPERHERO_ORIGIN: lambda notes, d: prompts.SUPERHERO_ORIGIN_REQUEST.format(
        child_name=_text(d, "child_name", "a child"),
        age=_text(d, "age", "8"),
        traits=_traits(d),
        color=_text(d, "color", "blue"),
        superpower=_text(d, "superpower", "flight"),
        notes=notes,
    ),
    GameContext.FAMILY_MOVIE: lambda notes, d: prompts.FAMILY_MOVIE_REQUEST.format(
        genre=_text(d, "genre", "adventure"),
        cast=json.dumps(d["cast"]) if d.get("cast") else "family members",
        setting=_text(d, "setting", "modern day"),
        notes=notes,
    ),
    GameContext.COMIC_MAKER: lambda notes, d: prompts.COMIC_MAKER_REQUEST.format(notes=notes),
    GameContext.NOISY_STORYBOOK: lambda notes, d: prompts.NOISY_STORYBOOK_REQUEST.format(
        theme=_text(d, "theme", "adventure"),
        notes=notes,
    ),
    GameContext.ROAST_BATTLE: _roast_battle_message,
    GameContext.DAD_JOKES: lambda notes, d: prompts.DAD_JOKES_REQUEST.format(
        topic=_text(d, "topic", notes),
    ),
    GameContext.CHARACTER_QUIZ: lambda notes, d: prompts.CHARACTER_QUIZ_REQUEST.format(
        answers=json.dumps(d.get("answers") or {}),
        notes=notes,
    ),
    GameContext.TREEHOUSE_DESIGNER: lambda notes, d: prompts.TREEHOUSE_DESIGNER_REQUEST.format(
        size=_text(d, "size", "medium"),
        style=_text(d, "style", "classic"),
        features=_text(d, "features", notes),
    ),
    GameContext.RESTAURANT_MENU: lambda notes, d: prompts.RESTAURANT_MENU_REQUEST.format(notes=notes),
}


def format_user_message(
    sanitized_input: str,
    game_context: GameContext | str,
    additional_data: Optional[Mapping[str, Any]] = None,
    log: Optional[SecurityLog] = None,
) -> str:
    """Fill the game's request template. *sanitized_input* must already be clean."""
    game = GameContext.parse(game_context)
    data = _clean(dict(additional_data or {}), log)
    return _USER_MESSAGES[game](sanitized_input, data)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_prompt(
    user_input: str,
    game_context: GameContext | str,
    additional_data: Optional[Mapping[str, Any]] = None,
    *,
    safety_mode: bool = False,
    log: Optional[SecurityLog] = None,
) -> list[PromptMessage]:
    """Validate *user_input* and return ``[system, user]`` messages.

    Raises ``UnknownGameContextError`` for an unsupported game and
    ``InvalidInputError`` when the input fails validation.
    """
    game = GameContext.parse(game_context)
    result = validate(user_input, VALIDATION_CONTEXTS[game], log=log)
    if not result.valid:
        raise InvalidInputError(result.error)

    logger.debug("Building %s prompt (safety_mode=%s)", game.value, safety_mode)
    return [
        PromptMessage(role="system", content=get_system_prompt(game, safety_mode)),
        PromptMessage(
            role="user",
            content=format_user_message(result.sanitized, game, additional_data, log=log),
        ),
    ]


def build_ai_request(
    user_input: str,
    game_context: GameContext | str,
    additional_data: Optional[Mapping[str, Any]] = None,
    *,
    model: str = DEFAULT_MODEL,
    max_tokens: int = 1000,
    temperature: float = 0.7,
    safety_mode: bool = False,
    log: Optional[SecurityLog] = None,
) -> AIRequest:
    """Build a complete generation request for a supported game."""
    game = GameContext.parse(game_context)
    messages = build_prompt(
        user_input,
        game,
        additional_data,
        safety_mode=safety_mode,
        log=log,
    )
    return AIRequest(
        game_context=game,
        messages=messages,
        model=model,
        max_tokens=max_tokens,
        temperature=temperature,
        metadata={"user_id": game.value},
    )
