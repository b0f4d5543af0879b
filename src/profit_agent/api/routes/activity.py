"""Training log and body metrics API routes."""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Query

from ..deps import get_activity_service
from ..schemas import BodyMetricsRequest, LogTrainingRequest
from ...services.activity import ActivityService


router = APIRouter()


@router.post("/{athlete_id}/logs", status_code=201)
async def log_training(
    athlete_id: str,
    request: LogTrainingRequest,
    service: ActivityService = Depends(get_activity_service),
) -> Dict[str, Any]:
    """
    Record a training session.

    The response says which planned session (if any) it completed and
    which milestones it achieved.
    """
    outcome = service.log_training(
        athlete_id,
        sport=request.sport,
        duration=request.duration,
        distance=request.distance,
        type=request.type,
        rpe=request.rpe,
        notes=request.notes,
        on=request.date,
    )
    return outcome.to_dict()


@router.get("/{athlete_id}/logs")
async def list_logs(
    athlete_id: str,
    limit: int = Query(20, ge=1, le=200),
    service: ActivityService = Depends(get_activity_service),
) -> List[Dict[str, Any]]:
    return [log.to_dict() for log in service.recent_logs(athlete_id, limit)]


@router.post("/{athlete_id}/body-metrics", status_code=201)
async def log_body_metrics(
    athlete_id: str,
    request: BodyMetricsRequest,
    service: ActivityService = Depends(get_activity_service),
) -> Dict[str, Any]:
    entry = service.log_body_metrics(
        athlete_id,
        weight=request.weight,
        sleep=request.sleep,
        fatigue=request.fatigue,
        notes=request.notes,
        on=request.date,
    )
    return entry.to_dict()


@router.get("/{athlete_id}/body-metrics")
async def list_body_metrics(
    athlete_id: str,
    limit: int = Query(5, ge=1, le=100),
    service: ActivityService = Depends(get_activity_service),
) -> List[Dict[str, Any]]:
    return [e.to_dict() for e in service.recent_body_metrics(athlete_id, limit)]
