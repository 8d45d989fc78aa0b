"""Content generation router.

Prefix: ``/api``
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from familynight.generation import GenerationService
from familynight.settings import SafetyModeStore
from web.backend.app.dependencies import get_generation_service, get_safety_mode_store
from web.backend.app.models.api import GenerateRequest, GenerateResponse

router = APIRouter(prefix="/api", tags=["generate"])


@router.post("/generate", response_model=GenerateResponse)
async def generate(
    req: GenerateRequest,
    service: GenerationService = Depends(get_generation_service),
    safety: SafetyModeStore = Depends(get_safety_mode_store),
):
    """Generate moderated content for a game.

    Bad input or an unknown game answers 400. Any later failure (rate limit,
    model error, moderation rejection) answers 200 with ``success: false``
    and the fallback message to show instead.
    """
    safety_mode = safety.get() if req.safety_mode is None else req.safety_mode
    result = await service.generate(
        req.user_input,
        req.game_context,
        req.additional_data,
        safety_mode=safety_mode,
        max_tokens=req.max_tokens,
        temperature=req.temperature,
    )
    return GenerateResponse(**result.to_dict(), display_text=result.display_text)
