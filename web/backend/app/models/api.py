"""Pydantic models for API request/response serialization.

These models mirror the familynight dataclasses and provide proper JSON
serialization for the FastAPI endpoints.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Generation models
# ---------------------------------------------------------------------------


class GenerateRequest(BaseModel):
    """Request body for POST /api/generate."""

    user_input: str
    game_context: str
    additional_data: dict[str, Any] = Field(default_factory=dict)
    safety_mode: Optional[bool] = None  # None means the saved setting
    max_tokens: int = Field(1000, ge=1, le=4096)
    temperature: float = Field(0.7, ge=0.0, le=1.0)


class GenerateResponse(BaseModel):
    """Mirrors familynight.generation.GenerationResult."""

    success: bool
    content: Optional[str] = None
    error: str = ""
    fallback: str = ""
    display_text: str = ""


# ---------------------------------------------------------------------------
# Moderation & validation models
# ---------------------------------------------------------------------------


class ModerateRequest(BaseModel):
    """Request body for POST /api/moderate."""

    content: Optional[str] = None
    game_context: str = "default"
    safety_mode: Optional[bool] = None
    user_input: bool = False


class ModerationVerdictResponse(BaseModel):
    """Mirrors familynight.moderation.models.ModerationVerdict."""

    safe: bool
    content: Optional[str] = None
    reason: str = ""
    category: str = ""
    fallback: str = ""


class ValidateRequest(BaseModel):
    """Request body for POST /api/validate."""

    text: Optional[str] = None
    context: str = "general"


class ValidateResponse(BaseModel):
    """Mirrors familynight.security.validator.ValidationResult."""

    valid: bool
    sanitized: str = ""
    error: str = ""


class ValidateManyRequest(BaseModel):
    """Request body for POST /api/validate/many."""

    inputs: dict[str, Optional[str]]
    contexts: dict[str, str] = Field(default_factory=dict)


class ValidateManyResponse(BaseModel):
    """Mirrors familynight.security.validator.MultiValidationResult."""

    valid: bool
    sanitized: dict[str, str] = Field(default_factory=dict)
    errors: dict[str, str] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Security log models
# ---------------------------------------------------------------------------


class SecurityEventResponse(BaseModel):
    """Mirrors familynight.security.audit_log.SecurityEvent."""

    type: str
    timestamp: str
    user_agent: str = ""
    url: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)


class ModerationStatsResponse(BaseModel):
    """Mirrors familynight.moderation.models.ModerationStats."""

    total: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)
    by_game: dict[str, int] = Field(default_factory=dict)


class SecurityStatsResponse(BaseModel):
    """Mirrors familynight.security.audit_log.SecurityStats plus moderation counts."""

    total: int = 0
    by_type: dict[str, int] = Field(default_factory=dict)
    last_24_hours: int = 0
    last_week: int = 0
    moderation: ModerationStatsResponse = Field(default_factory=ModerationStatsResponse)


class SecurityAlertResponse(BaseModel):
    """Mirrors familynight.security.audit_log.SecurityAlert."""

    alert: bool
    reason: str = ""


class ClearLogResponse(BaseModel):
    cleared: bool


# ---------------------------------------------------------------------------
# Settings models
# ---------------------------------------------------------------------------


class SafetyModeRequest(BaseModel):
    """Request body for PUT /api/settings/safety-mode."""

    enabled: bool


class SafetyModeResponse(BaseModel):
    enabled: bool
