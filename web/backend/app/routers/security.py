"""Security log router.

Prefix: ``/api/security``
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response

from familynight.moderation.moderator import moderation_stats
from familynight.security.audit_log import SecurityLog
from web.backend.app.dependencies import get_security_log
from web.backend.app.models.api import (
    ClearLogResponse,
    ModerationStatsResponse,
    SecurityAlertResponse,
    SecurityEventResponse,
    SecurityStatsResponse,
)

router = APIRouter(prefix="/api/security", tags=["security"])


@router.get("/log", response_model=list[SecurityEventResponse])
async def list_events(
    type: Optional[str] = Query(None, description="Only events of this type"),
    limit: int = Query(50, ge=1, le=50),
    log: SecurityLog = Depends(get_security_log),
):
    """List stored security events, newest first."""
    return [SecurityEventResponse(**asdict(e)) for e in log.query(type)[:limit]]


@router.delete("/log", response_model=ClearLogResponse)
async def clear_events(log: SecurityLog = Depends(get_security_log)):
    """Delete every stored security event."""
    if not log.clear():
        raise HTTPException(status_code=500, detail="Failed to clear security log")
    return ClearLogResponse(cleared=True)


@router.get("/stats", response_model=SecurityStatsResponse)
async def get_stats(log: SecurityLog = Depends(get_security_log)):
    """Event counts by type and age, plus moderation rejections."""
    stats = log.stats()
    return SecurityStatsResponse(
        **asdict(stats),
        moderation=ModerationStatsResponse(**asdict(moderation_stats(log))),
    )


@router.get("/alerts", response_model=SecurityAlertResponse)
async def get_alerts(log: SecurityLog = Depends(get_security_log)):
    """Advisory check for unusual activity."""
    return SecurityAlertResponse(**asdict(log.check_alerts()))


@router.get("/export")
async def export_events(log: SecurityLog = Depends(get_security_log)):
    """Download the log and its statistics as a JSON document."""
    return Response(
        content=log.export(),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="security-log.json"'},
    )
