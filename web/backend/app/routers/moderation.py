"""Moderation and input validation router.

Prefix: ``/api``
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from familynight.moderation.moderator import ContentModerator
from familynight.security.audit_log import SecurityLog
from familynight.security.validator import validate, validate_many
from familynight.settings import SafetyModeStore
from web.backend.app.dependencies import (
    get_moderator,
    get_safety_mode_store,
    get_security_log,
)
from web.backend.app.models.api import (
    ModerateRequest,
    ModerationVerdictResponse,
    ValidateManyRequest,
    ValidateManyResponse,
    ValidateRequest,
    ValidateResponse,
)

router = APIRouter(prefix="/api", tags=["moderation"])


@router.post("/moderate", response_model=ModerationVerdictResponse)
async def moderate(
    req: ModerateRequest,
    moderator: ContentModerator = Depends(get_moderator),
    safety: SafetyModeStore = Depends(get_safety_mode_store),
):
    """Moderate a piece of text.

    With ``user_input`` set, the lenient checks for family-authored text are
    used; otherwise the full output layers (plus Grandma Mode when on).
    """
    if req.user_input:
        verdict = moderator.moderate_user_input(req.content)
    else:
        safety_mode = safety.get() if req.safety_mode is None else req.safety_mode
        verdict = await moderator.moderate_strict(
            req.content, req.game_context, safety_mode=safety_mode
        )

    return ModerationVerdictResponse(
        safe=verdict.safe,
        content=verdict.content,
        reason=verdict.reason,
        category=verdict.category,
        fallback="" if verdict.safe else moderator.fallback_for(req.game_context),
    )


@router.post("/validate", response_model=ValidateResponse)
async def validate_input(
    req: ValidateRequest,
    log: SecurityLog = Depends(get_security_log),
):
    """Sanitise and validate one piece of user input."""
    result = validate(req.text, req.context, log=log)
    return ValidateResponse(valid=result.valid, sanitized=result.sanitized, error=result.error)


@router.post("/validate/many", response_model=ValidateManyResponse)
async def validate_form(
    req: ValidateManyRequest,
    log: SecurityLog = Depends(get_security_log),
):
    """Validate every field of a form at once."""
    result = validate_many(req.inputs, req.contexts, log=log)
    return ValidateManyResponse(valid=result.valid, sanitized=result.sanitized, errors=result.errors)
