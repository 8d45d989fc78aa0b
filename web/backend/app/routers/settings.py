"""Family settings router.

Prefix: ``/api/settings``
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from familynight.settings import SafetyModeStore
from web.backend.app.dependencies import get_safety_mode_store
from web.backend.app.models.api import SafetyModeRequest, SafetyModeResponse

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("/safety-mode", response_model=SafetyModeResponse)
async def get_safety_mode(store: SafetyModeStore = Depends(get_safety_mode_store)):
    """Return whether Grandma Mode is on."""
    return SafetyModeResponse(enabled=store.get())


@router.put("/safety-mode", response_model=SafetyModeResponse)
async def set_safety_mode(
    req: SafetyModeRequest,
    store: SafetyModeStore = Depends(get_safety_mode_store),
):
    """Turn Grandma Mode on or off."""
    if not store.set(req.enabled):
        raise HTTPException(status_code=500, detail="Failed to save setting")
    return SafetyModeResponse(enabled=store.get())
