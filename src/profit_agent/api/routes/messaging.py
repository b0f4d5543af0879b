"""Messaging channel API routes: pairing codes and the inbound message hook."""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from ..deps import get_message_dispatcher, get_pairing_service
from ..schemas import InboundMessageRequest, InboundMessageResponse
from ...messaging.dispatcher import MessageDispatcher
from ...messaging.pairing import PairingService


athletes_router = APIRouter()
router = APIRouter()


@athletes_router.post("/{athlete_id}/pairing-code", status_code=201)
async def create_pairing_code(
    athlete_id: str,
    service: PairingService = Depends(get_pairing_service),
) -> Dict[str, Any]:
    """Issue a fresh six-digit code; earlier unused codes stop working."""
    return service.issue_code(athlete_id).to_dict()


@router.post("/inbound", response_model=InboundMessageResponse)
async def inbound_message(
    request: InboundMessageRequest,
    dispatcher: MessageDispatcher = Depends(get_message_dispatcher),
) -> InboundMessageResponse:
    """Reply for one chat message, identical for every channel."""
    return InboundMessageResponse(
        reply=dispatcher.handle(request.channel, request.identifier, request.text)
    )
