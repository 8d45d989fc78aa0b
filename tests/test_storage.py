"""Tests for the key/value stores and the safety-mode setting."""

import tempfile
from pathlib import Path

import pytest

from familynight.errors import StorageError
from familynight.security.audit_log import SecurityEventType, SecurityLog
from familynight.settings import SAFETY_MODE_KEY, SafetyModeStore
from familynight.storage import JsonFileStore, MemoryStore


class _BrokenStore:
    def get(self, key):
        raise StorageError("quota exceeded")

    def set(self, key, value):
        raise StorageError("quota exceeded")

    def delete(self, key):
        raise StorageError("quota exceeded")


# --- Stores ---


def test_memory_store():
    store = MemoryStore({"a": "1"})
    assert store.get("a") == "1"
    assert store.get("missing") is None

    store.set("b", "2")
    store.delete("a")
    store.delete("never-there")
    assert store.get("a") is None
    assert store.get("b") == "2"


def test_json_file_store_persists():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "nested" / "store.json"
        JsonFileStore(path).set("greeting", "hello")

        reopened = JsonFileStore(path)
        assert reopened.path == path
        assert reopened.get("greeting") == "hello"

        reopened.delete("greeting")
        assert JsonFileStore(path).get("greeting") is None


def test_json_file_store_missing_or_corrupt_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "store.json"
        assert JsonFileStore(path).get("anything") is None

        path.write_text("{broken", encoding="utf-8")
        store = JsonFileStore(path)
        assert store.get("anything") is None

        backup = Path(tmpdir) / "store.json.corrupt"
        assert backup.read_text(encoding="utf-8") == "{broken"

        store.set("k", "v")
        assert store.get("k") == "v"
        assert backup.exists()


def test_json_file_store_writes_through_temp_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "store.json"
        store = JsonFileStore(path)
        store.set("a", "1")
        store.set("b", "2")

        assert sorted(p.name for p in Path(tmpdir).iterdir()) == ["store.json"]
        assert JsonFileStore(path).get("a") == "1"


def test_json_file_store_write_failure():
    with tempfile.TemporaryDirectory() as tmpdir:
        blocker = Path(tmpdir) / "not-a-dir"
        blocker.write_text("file")
        store = JsonFileStore(blocker / "store.json")

        with pytest.raises(StorageError):
            store.set("k", "v")


# --- Safety mode ---


def test_safety_mode_defaults_off():
    assert SafetyModeStore(MemoryStore()).get() is False


def test_safety_mode_round_trip_and_event():
    store = MemoryStore()
    log = SecurityLog(store)
    settings = SafetyModeStore(store, log=log)

    assert settings.set(True)
    assert settings.get() is True
    assert store.get(SAFETY_MODE_KEY) == "true"

    events = log.query(SecurityEventType.SETTINGS_CHANGED)
    assert events[0].metadata == {"setting": "grandma-mode", "value": True}

    settings.set(False)
    assert settings.get() is False
    assert store.get(SAFETY_MODE_KEY) == "false"


def test_safety_mode_storage_failure_degrades():
    log = SecurityLog(MemoryStore())
    settings = SafetyModeStore(_BrokenStore(), log=log)

    assert settings.get() is False
    assert settings.set(True) is False
    assert log.query() == []
