"""The fixed set of games that can request generated content."""

from __future__ import annotations

from enum import Enum

from familynight.errors import UnknownGameContextError
from familynight.security.validator import ValidationContext


class GameContext(Enum):
    """A game that sends prompts to the text-generation model."""

    SUPERHERO_ORIGIN = "superhero-origin"
    FAMILY_MOVIE = "family-movie"
    COMIC_MAKER = "comic-maker"
    NOISY_STORYBOOK = "noisy-storybook"
    ROAST_BATTLE = "roast-battle"
    DAD_JOKES = "dad-jokes"
    CHARACTER_QUIZ = "character-quiz"
    TREEHOUSE_DESIGNER = "treehouse-designer"
    RESTAURANT_MENU = "restaurant-menu"

    @classmethod
    def parse(cls, value: GameContext | str) -> GameContext:
        """Return the member for *value* or raise ``UnknownGameContextError``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownGameContextError(value) from None


def is_valid_game_context(value: object) -> bool:
    """Return *True* if *value* names a supported game."""
    if isinstance(value, GameContext):
        return True
    return value in {g.value for g in GameContext}


# Which input policy applies to the free text each game collects
VALIDATION_CONTEXTS: dict[GameContext, ValidationContext] = {
    GameContext.SUPERHERO_ORIGIN: ValidationContext.STORY,
    GameContext.FAMILY_MOVIE: ValidationContext.STORY,
    GameContext.COMIC_MAKER: ValidationContext.STORY,
    GameContext.NOISY_STORYBOOK: ValidationContext.STORY,
    GameContext.ROAST_BATTLE: ValidationContext.CHAT,
    GameContext.DAD_JOKES: ValidationContext.CHAT,
    GameContext.CHARACTER_QUIZ: ValidationContext.GENERAL,
    GameContext.TREEHOUSE_DESIGNER: ValidationContext.STORY,
    GameContext.RESTAURANT_MENU: ValidationContext.STORY,
}

DEFAULT_FALLBACK = "Something went wrong. Let's try again!"
RATE_LIMIT_FALLBACK = "You're being creative too fast! Take a short break and try again."

# Shown instead of generated text whenever moderation or generation fails
FALLBACK_MESSAGES: dict[GameContext, str] = {
    GameContext.SUPERHERO_ORIGIN: "Oops! Let me try creating that superhero story again.",
    GameContext.FAMILY_MOVIE: "Sorry, I couldn't film that scene. Let's write a different story!",
    GameContext.COMIC_MAKER: "Something went wrong with that comic. Let's try different ideas!",
    GameContext.NOISY_STORYBOOK: "Hmm, that story didn't work out. Let's pick a new theme!",
    GameContext.ROAST_BATTLE: "Oops! My joke generator got stuck. Let's try again!",
    GameContext.DAD_JOKES: "Hmm, I couldn't think of a good joke. Ask me another!",
    GameContext.CHARACTER_QUIZ: "The quiz wizard needs a moment. Let's answer a few more questions!",
    GameContext.TREEHOUSE_DESIGNER: "The blueprint blew away! Let's sketch that treehouse again.",
    GameContext.RESTAURANT_MENU: "The kitchen got a little messy. Let's cook up a new menu item!",
}


def get_safe_fallback(game_context: GameContext | str) -> str:
    """Return the apology shown for *game_context*, or the generic one."""
    try:
        return FALLBACK_MESSAGES[GameContext.parse(game_context)]
    except UnknownGameContextError:
        return DEFAULT_FALLBACK
