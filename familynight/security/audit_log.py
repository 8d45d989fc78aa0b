"""Security event log for the content-safety pipeline.

Events are kept newest first in a single JSON array under the ``security-log``
key of a ``KeyValueStore``. The array is capped at 50 entries; older events
fall off the end. Entries are never edited, only prepended or cleared.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Callable, Optional

from familynight.errors import StorageError
from familynight.storage import KeyValueStore

logger = logging.getLogger(__name__)

SECURITY_LOG_KEY = "security-log"
MAX_ENTRIES = 50
PREVIEW_CHARS = 100

# Alert thresholds
_MAX_EVENTS_PER_DAY = 5
_MAX_INJECTION_ATTEMPTS = 3


class SecurityEventType(Enum):
    """Kinds of anomaly a pipeline stage can report."""

    PROMPT_INJECTION_ATTEMPT = "prompt_injection_attempt"
    PROFANITY_DETECTED = "profanity_detected"
    INAPPROPRIATE_CONTENT = "inappropriate_content"
    API_MODERATION_FLAGGED = "api_moderation_flagged"
    MODERATION_API_ERROR = "moderation_api_error"
    INPUT_VALIDATION_FAILED = "input_validation_failed"
    XSS_ATTEMPT = "xss_attempt"
    SUSPICIOUS_PATTERN = "suspicious_pattern"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    SETTINGS_CHANGED = "settings_changed"


# Events a deployment forwards to its backend for review
CRITICAL_EVENTS = frozenset(
    {
        SecurityEventType.PROMPT_INJECTION_ATTEMPT,
        SecurityEventType.INAPPROPRIATE_CONTENT,
        SecurityEventType.API_MODERATION_FLAGGED,
        SecurityEventType.XSS_ATTEMPT,
    }
)


def preview(text: object) -> str:
    """Return at most the first 100 characters of *text* for logging."""
    if not isinstance(text, str):
        return ""
    return text[:PREVIEW_CHARS]


def _parse_timestamp(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class SecurityEvent:
    """A single recorded anomaly."""

    type: str
    timestamp: str
    user_agent: str = ""
    url: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Flatten to the stored shape: fixed keys plus free-form metadata."""
        data = dict(self.metadata)
        data.update(
            {
                "type": self.type,
                "timestamp": self.timestamp,
                "userAgent": self.user_agent,
                "url": self.url,
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SecurityEvent:
        metadata = {
            k: v
            for k, v in data.items()
            if k not in ("type", "timestamp", "userAgent", "url")
        }
        return cls(
            type=str(data.get("type", "")),
            timestamp=str(data.get("timestamp", "")),
            user_agent=str(data.get("userAgent", "")),
            url=str(data.get("url", "")),
            metadata=metadata,
        )


@dataclass
class SecurityStats:
    """Aggregate counts over the current log."""

    total: int = 0
    by_type: dict[str, int] = field(default_factory=dict)
    last_24_hours: int = 0
    last_week: int = 0


@dataclass
class SecurityAlert:
    """Advisory alert; nothing is locked or throttled because of it."""

    alert: bool
    reason: str = ""


class SecurityLog:
    """Append-only, capped security event log over a key/value store.

    Parameters
    ----------
    store : KeyValueStore
        Where the JSON-encoded log lives.
    user_agent, url : str
        Stamped on every event so reviewers know where it came from.
    max_entries : int
        Cap on the stored sequence; the oldest events are evicted first.
    clock : callable
        Returns the current UTC time. Tests pass a fixed clock.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        user_agent: str = "",
        url: str = "",
        max_entries: int = MAX_ENTRIES,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._user_agent = user_agent
        self._url = url
        self._max_entries = max_entries
        self._clock = clock

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read_raw(self) -> list[dict[str, Any]]:
        raw = self._store.get(SECURITY_LOG_KEY)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.error("Security log is not valid JSON; treating it as empty")
            return []
        return [item for item in data if isinstance(item, dict)] if isinstance(data, list) else []

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def record(
        self, event_type: SecurityEventType | str, **metadata: Any
    ) -> SecurityEvent:
        """Prepend an event and trim the log. Storage failures are only logged."""
        type_value = event_type.value if isinstance(event_type, SecurityEventType) else str(event_type)
        event = SecurityEvent(
            type=type_value,
            timestamp=self._clock().isoformat(),
            user_agent=self._user_agent,
            url=self._url,
            metadata=metadata,
        )
        level = logging.WARNING if is_critical(type_value) else logging.INFO
        logger.log(level, "[SECURITY EVENT] %s %s", type_value, metadata)

        try:
            entries = self._read_raw()
            entries.insert(0, event.to_dict())
            self._store.set(SECURITY_LOG_KEY, json.dumps(entries[: self._max_entries]))
        except (StorageError, TypeError, ValueError) as exc:
            logger.error("Failed to log security event: %s", exc)
        return event

    def query(self, event_type: SecurityEventType | str | None = None) -> list[SecurityEvent]:
        """Return stored events newest first, optionally of a single type."""
        try:
            entries = self._read_raw()
        except StorageError as exc:
            logger.error("Failed to retrieve security log: %s", exc)
            return []

        events = [SecurityEvent.from_dict(e) for e in entries]
        if event_type:
            wanted = event_type.value if isinstance(event_type, SecurityEventType) else event_type
            events = [e for e in events if e.type == wanted]
        return events

    def clear(self) -> bool:
        """Remove every stored event. Returns *False* if the store failed."""
        try:
            self._store.delete(SECURITY_LOG_KEY)
        except StorageError as exc:
            logger.error("Failed to clear security log: %s", exc)
            return False
        return True

    def stats(self) -> SecurityStats:
        """Count events by type and over the last day and week."""
        now = self._clock()
        day_ago = now - timedelta(hours=24)
        week_ago = now - timedelta(days=7)

        stats = SecurityStats()
        for event in self.query():
            stats.total += 1
            stats.by_type[event.type] = stats.by_type.get(event.type, 0) + 1

            when = _parse_timestamp(event.timestamp)
            if when is None:
                continue
            if when > day_ago:
                stats.last_24_hours += 1
            if when > week_ago:
                stats.last_week += 1
        return stats

    def check_alerts(self) -> SecurityAlert:
        """Flag unusual activity for a human to look at."""
        stats = self.stats()

        if stats.last_24_hours > _MAX_EVENTS_PER_DAY:
            return SecurityAlert(
                alert=True,
                reason=f"{stats.last_24_hours} security events detected in last 24 hours",
            )

        attempts = stats.by_type.get(SecurityEventType.PROMPT_INJECTION_ATTEMPT.value, 0)
        if attempts > _MAX_INJECTION_ATTEMPTS:
            return SecurityAlert(
                alert=True,
                reason=f"{attempts} prompt injection attempts detected",
            )

        return SecurityAlert(alert=False)

    def export(self) -> str:
        """Return the log and its statistics as a JSON document."""
        stats = self.stats()
        document = {
            "exportDate": self._clock().isoformat(),
            "statistics": {
                "total": stats.total,
                "byType": stats.by_type,
                "last24Hours": stats.last_24_hours,
                "lastWeek": stats.last_week,
            },
            "events": [e.to_dict() for e in self.query()],
        }
        return json.dumps(document, indent=2)


def is_critical(event_type: SecurityEventType | str) -> bool:
    """Return *True* for events worth forwarding to a monitoring backend."""
    try:
        kind = event_type if isinstance(event_type, SecurityEventType) else SecurityEventType(event_type)
    except ValueError:
        return False
    return kind in CRITICAL_EVENTS
