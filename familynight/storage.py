"""Synchronous key/value storage port.

The security log and the safety-mode flag persist through a ``KeyValueStore``.
Values are plain strings, mirroring browser local storage, so callers encode
structured data themselves.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

from familynight.errors import StorageError

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Minimal string store. Implementations raise ``StorageError`` on failure."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """In-process store, used by tests and short-lived processes."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore:
    """File-backed store keeping every key in one JSON object.

    Defaults to ``~/.familynight/store.json``. Writes go through a temporary
    file that replaces the store; an unreadable store is moved aside to
    ``<name>.corrupt`` and treated as empty.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path else Path.home() / ".familynight" / "store.json"

    @property
    def path(self) -> Path:
        return self._path

    # -- persistence ---------------------------------------------------------

    def _load_all(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            backup = self._path.with_name(self._path.name + ".corrupt")
            logger.error("Corrupt store %s (%s); moved to %s", self._path, exc, backup)
            try:
                self._path.replace(backup)
            except OSError as move_exc:
                raise StorageError(f"Cannot move aside {self._path}: {move_exc}") from move_exc
            return {}
        except OSError as exc:
            raise StorageError(f"Cannot read {self._path}: {exc}") from exc
        return data if isinstance(data, dict) else {}

    def _save_all(self, data: dict[str, str]) -> None:
        tmp = self._path.with_name(self._path.name + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2), encoding="utf-8")
            tmp.replace(self._path)
        except OSError as exc:
            raise StorageError(f"Cannot write {self._path}: {exc}") from exc

    # -- public API ----------------------------------------------------------

    def get(self, key: str) -> Optional[str]:
        value = self._load_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load_all()
        data[key] = value
        self._save_all(data)

    def delete(self, key: str) -> None:
        data = self._load_all()
        if key in data:
            del data[key]
            self._save_all(data)
