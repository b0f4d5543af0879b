"""Coach API routes: chat, weekly summary and nutrition."""

from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query

from ..deps import get_coach_service
from ..schemas import CoachChatRequest
from ...coach.service import CoachReply, CoachService


router = APIRouter()


@router.post("/{athlete_id}/coach/chat", response_model=CoachReply)
async def coach_chat(
    athlete_id: str,
    request: CoachChatRequest,
    today: Optional[date] = Query(None),
    service: CoachService = Depends(get_coach_service),
) -> CoachReply:
    """
    Send a message to the coach.

    Advisory failures still return 200 with ``error: true`` and a
    conversational message; the plan is left unchanged.
    """
    return await service.chat(athlete_id, request.message, today)


@router.get("/{athlete_id}/coach/chat")
async def coach_history(
    athlete_id: str,
    service: CoachService = Depends(get_coach_service),
) -> List[Dict[str, Any]]:
    return [turn.to_dict() for turn in service.history(athlete_id)]


@router.post("/{athlete_id}/coach/summary", response_model=CoachReply)
async def coach_summary(
    athlete_id: str,
    today: Optional[date] = Query(None),
    service: CoachService = Depends(get_coach_service),
) -> CoachReply:
    return await service.summary(athlete_id, today)


@router.post("/{athlete_id}/coach/nutrition", response_model=CoachReply)
async def coach_nutrition(
    athlete_id: str,
    today: Optional[date] = Query(None),
    service: CoachService = Depends(get_coach_service),
) -> CoachReply:
    return await service.nutrition(athlete_id, today)
