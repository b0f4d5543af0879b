"""Onboarding API routes."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..deps import get_onboarding_service
from ..schemas import OnboardingCompleteRequest, OnboardingStepRequest
from ...services.onboarding import OnboardingService


router = APIRouter()


@router.get("/{athlete_id}/onboarding")
async def get_onboarding(
    athlete_id: str,
    service: OnboardingService = Depends(get_onboarding_service),
) -> Dict[str, Any]:
    """Stored answers and step cursor (a blank step-1 profile for new athletes)."""
    return service.get_profile(athlete_id).to_dict()


@router.put("/{athlete_id}/onboarding")
async def save_onboarding_step(
    athlete_id: str,
    request: OnboardingStepRequest,
    service: OnboardingService = Depends(get_onboarding_service),
) -> Dict[str, Any]:
    """Save the answers of one wizard step."""
    profile = service.save_step(athlete_id, request.updates())
    return profile.to_dict()


@router.post("/{athlete_id}/onboarding/complete")
async def complete_onboarding(
    athlete_id: str,
    request: OnboardingCompleteRequest,
    service: OnboardingService = Depends(get_onboarding_service),
) -> Dict[str, Any]:
    """
    Finish onboarding.

    Replaces the plan, refreshes upcoming sessions (history is kept), seeds
    milestones and returns the finish projection and goal realism check.
    """
    updates = request.updates()
    updates.pop("today", None)
    result = service.complete(athlete_id, updates, today=request.today)
    return result.to_dict()
