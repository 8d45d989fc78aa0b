"""Persisted family settings.

Only Grandma Mode (the "Extra Safe" switch) lives here. It is read by the
caller and passed explicitly into the prompt builder and the moderator.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from familynight.errors import StorageError
from familynight.security.audit_log import SecurityEventType
from familynight.storage import KeyValueStore

if TYPE_CHECKING:
    from familynight.security.audit_log import SecurityLog

logger = logging.getLogger(__name__)

SAFETY_MODE_KEY = "grandma-mode"


class SafetyModeStore:
    """Reads and writes the Grandma Mode flag.

    Storage failures degrade to "off" on read and are logged on write.
    """

    def __init__(self, store: KeyValueStore, log: Optional[SecurityLog] = None) -> None:
        self._store = store
        self._log = log

    def get(self) -> bool:
        try:
            return self._store.get(SAFETY_MODE_KEY) == "true"
        except StorageError as exc:
            logger.error("Failed to read safety mode: %s", exc)
            return False

    def set(self, enabled: bool) -> bool:
        """Persist *enabled*. Returns *False* if the store failed."""
        try:
            self._store.set(SAFETY_MODE_KEY, "true" if enabled else "false")
        except StorageError as exc:
            logger.error("Failed to save safety mode: %s", exc)
            return False

        if self._log is not None:
            self._log.record(
                SecurityEventType.SETTINGS_CHANGED,
                setting=SAFETY_MODE_KEY,
                value=bool(enabled),
            )
        return True
