"""Training plan API routes."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..deps import get_onboarding_service
from ...services.onboarding import OnboardingService
from ...services.planning import FinishProjection, RealismCheck


router = APIRouter()


@router.get("/{athlete_id}/plan")
async def get_plan(
    athlete_id: str,
    service: OnboardingService = Depends(get_onboarding_service),
) -> Dict[str, Any]:
    plan = service.get_plan(athlete_id)
    return {**plan.to_dict(), "weekly_targets": plan.weekly_targets}


@router.get("/{athlete_id}/plan/projection", response_model=FinishProjection)
async def get_projection(
    athlete_id: str,
    service: OnboardingService = Depends(get_onboarding_service),
) -> FinishProjection:
    """Estimated finish time from the stored benchmarks."""
    return service.projection(athlete_id)


@router.get("/{athlete_id}/plan/realism", response_model=RealismCheck)
async def get_realism(
    athlete_id: str,
    service: OnboardingService = Depends(get_onboarding_service),
) -> RealismCheck:
    return service.realism(athlete_id)
