"""Data models for the content moderation system."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class ModerationVerdict:
    """Binary outcome of moderating one piece of generated text.

    A safe verdict carries the content unchanged; an unsafe one carries only
    a reason for logs and support, never for the end user.
    """

    safe: bool
    content: Optional[str] = None
    reason: str = ""
    category: str = ""  # "profanity" | "violence" | "age_inappropriate" | ... | ""

    @classmethod
    def passed(cls, content: str) -> ModerationVerdict:
        return cls(safe=True, content=content)

    @classmethod
    def rejected(cls, reason: str, category: str = "") -> ModerationVerdict:
        return cls(safe=False, content=None, reason=reason, category=category)


@dataclass
class RemoteModerationResult:
    """First result returned by the remote moderation endpoint."""

    flagged: bool
    categories: dict[str, Any] = field(default_factory=dict)


@dataclass
class ModerationStats:
    """Moderation events in the security log, grouped for review."""

    total: int = 0
    by_category: dict[str, int] = field(default_factory=dict)
    by_game: dict[str, int] = field(default_factory=dict)
