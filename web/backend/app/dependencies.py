"""FastAPI dependencies for the shared pipeline objects.

Each getter builds its object once per process from ``Settings``. Tests
replace them through ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends

from familynight.config import Settings, get_settings
from familynight.generation import GenerationService
from familynight.moderation.moderator import ContentModerator
from familynight.security.audit_log import SecurityLog
from familynight.settings import SafetyModeStore
from familynight.storage import JsonFileStore, KeyValueStore

# Shared instances
_settings: Optional[Settings] = None
_store: Optional[KeyValueStore] = None
_log: Optional[SecurityLog] = None
_moderator: Optional[ContentModerator] = None
_service: Optional[GenerationService] = None


def get_app_settings() -> Settings:
    """Return the singleton Settings instance."""
    global _settings
    if _settings is None:
        _settings = get_settings()
    return _settings


def get_store(settings: Settings = Depends(get_app_settings)) -> KeyValueStore:
    """Return the singleton key/value store."""
    global _store
    if _store is None:
        _store = JsonFileStore(settings.store_path)
    return _store


def get_security_log(
    store: KeyValueStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> SecurityLog:
    """Return the singleton security log."""
    global _log
    if _log is None:
        _log = SecurityLog(store, user_agent=settings.user_agent, url="/api")
    return _log


def get_safety_mode_store(
    store: KeyValueStore = Depends(get_store),
    log: SecurityLog = Depends(get_security_log),
) -> SafetyModeStore:
    return SafetyModeStore(store, log=log)


def get_moderator(
    settings: Settings = Depends(get_app_settings),
    log: SecurityLog = Depends(get_security_log),
) -> ContentModerator:
    """Return the singleton moderator."""
    global _moderator
    if _moderator is None:
        _moderator = ContentModerator.from_settings(settings, log=log)
    return _moderator


def get_generation_service(
    settings: Settings = Depends(get_app_settings),
    log: SecurityLog = Depends(get_security_log),
) -> GenerationService:
    """Return the singleton generation service (its rate limiter is process-wide)."""
    global _service
    if _service is None:
        _service = GenerationService.from_settings(settings, log=log)
    return _service


async def close_shared_clients() -> None:
    """Close HTTP clients held by the shared objects and forget them."""
    global _moderator, _service
    if _moderator is not None:
        await _moderator.aclose()
    if _service is not None:
        await _service.moderator.aclose()
    _moderator = None
    _service = None
