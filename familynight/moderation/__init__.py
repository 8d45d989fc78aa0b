"""Output moderation.

Layered, rule-based checks on generated text, an optional remote moderation
service for high-risk games, and the YAML-overridable rule tables behind them.
"""

from familynight.moderation.models import (
    ModerationStats,
    ModerationVerdict,
    RemoteModerationResult,
)
from familynight.moderation.moderator import ContentModerator, moderation_stats
from familynight.moderation.remote import RemoteModerationClient
from familynight.moderation.rules import ModerationRules, load_rules

__all__ = [
    "ContentModerator",
    "ModerationRules",
    "ModerationStats",
    "ModerationVerdict",
    "RemoteModerationClient",
    "RemoteModerationResult",
    "load_rules",
    "moderation_stats",
]
