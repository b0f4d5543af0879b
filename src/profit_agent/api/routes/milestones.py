"""Milestone API routes."""

from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_milestone_service
from ...services.milestones import MilestoneService


router = APIRouter()


@router.get("/{athlete_id}/milestones")
async def list_milestones(
    athlete_id: str,
    today: Optional[date] = Query(None),
    service: MilestoneService = Depends(get_milestone_service),
) -> List[Dict[str, Any]]:
    """All milestones, after achieving any date-based ones that have come due."""
    service.evaluate_dates(athlete_id, today)
    return [m.to_dict() for m in service.list_milestones(athlete_id)]
