"""Exception hierarchy shared by the pipeline stages."""

from __future__ import annotations


class FamilyNightError(Exception):
    """Base class for every error raised by the familynight package."""


class InvalidInputError(FamilyNightError):
    """User input was rejected by the validator.

    ``message`` is safe to show to the person who typed the input.
    """

    def __init__(self, message: str) -> None:
        super().__init__(f"Invalid input: {message}")
        self.message = message


class UnknownGameContextError(FamilyNightError):
    """A game context string did not name a supported game."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid game context: {value}")
        self.value = value


class ModerationServiceError(FamilyNightError):
    """The remote moderation endpoint could not be reached or answered badly."""


class GenerationError(FamilyNightError):
    """The text-generation call failed or is not configured."""


class StorageError(FamilyNightError):
    """The key/value store could not be read or written."""
