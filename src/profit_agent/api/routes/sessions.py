"""Planned session API routes: listing, skip/unskip, refresh and compliance."""

from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_lifecycle_service, get_refresh_planner
from ..schemas import ComplianceResponse, SessionListResponse
from ...models.plans import SessionStatus
from ...services.lifecycle import SessionLifecycleService, WeekStats
from ...services.refresh import RefreshPlanner, RefreshResult


router = APIRouter()


@router.get("/{athlete_id}/sessions", response_model=SessionListResponse)
async def list_sessions(
    athlete_id: str,
    start: Optional[date] = Query(None, description="First date, inclusive"),
    end: Optional[date] = Query(None, description="Last date, inclusive"),
    status: Optional[SessionStatus] = Query(None),
    service: SessionLifecycleService = Depends(get_lifecycle_service),
) -> SessionListResponse:
    sessions = service.list_sessions(athlete_id, start=start, end=end, status=status)
    return SessionListResponse(sessions=[s.to_dict() for s in sessions], total=len(sessions))


@router.post("/{athlete_id}/sessions/{session_id}/skip")
async def skip_session(
    athlete_id: str,
    session_id: str,
    service: SessionLifecycleService = Depends(get_lifecycle_service),
) -> Dict[str, Any]:
    """Skip a planned session. 409 if it is not currently planned."""
    return service.skip_session(athlete_id, session_id).to_dict()


@router.post("/{athlete_id}/sessions/{session_id}/unskip")
async def unskip_session(
    athlete_id: str,
    session_id: str,
    service: SessionLifecycleService = Depends(get_lifecycle_service),
) -> Dict[str, Any]:
    """Put a skipped session back in the plan. 409 if it is not skipped."""
    return service.unskip_session(athlete_id, session_id).to_dict()


@router.post("/{athlete_id}/sessions/refresh", response_model=RefreshResult)
async def refresh_sessions(
    athlete_id: str,
    today: Optional[date] = Query(None),
    planner: RefreshPlanner = Depends(get_refresh_planner),
) -> RefreshResult:
    """Regenerate upcoming planned sessions, keeping history."""
    return planner.refresh(athlete_id, today)


@router.get("/{athlete_id}/sessions/compliance", response_model=ComplianceResponse)
async def get_compliance(
    athlete_id: str,
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    service: SessionLifecycleService = Depends(get_lifecycle_service),
) -> ComplianceResponse:
    return ComplianceResponse(
        athlete_id=athlete_id,
        start=start,
        end=end,
        compliance_percent=service.compliance_for(athlete_id, start, end),
    )


@router.get("/{athlete_id}/sessions/week", response_model=WeekStats)
async def get_week_stats(
    athlete_id: str,
    today: Optional[date] = Query(None),
    service: SessionLifecycleService = Depends(get_lifecycle_service),
) -> WeekStats:
    return service.week_stats(athlete_id, today)
