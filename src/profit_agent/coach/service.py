"""
Coach service: chat, weekly summary and nutrition over the advisory client.

Plan state is only touched after the advisory call has returned and its
reply has been parsed. If the call fails, the athlete gets a conversational
error and the schedule stays exactly as it was.
"""

from datetime import date
from typing import Any, Dict, List, Optional
import logging

from pydantic import BaseModel, Field

from .advisory import AdvisoryClient, AdvisoryRequest, CoachMode
from .context import build_athlete_context
from .prompts import DEFAULT_CHAT_MESSAGE, NUTRITION_USER_MESSAGE, SUMMARY_USER_MESSAGE
from .protocol import ChangeReport, PlanChangeApplier, parse_reply
from ..db.store import TrainingStore
from ..exceptions import AdvisoryError
from ..models.messaging import ChatRole, ChatTurn
from ..services.base import BaseService
from ..services.lifecycle import SessionLifecycleService

CHAT_ERROR_REPLY = "Sorry, I couldn't connect right now. {reason}"
SUMMARY_ERROR_REPLY = "Could not generate summary: {reason}"
NUTRITION_ERROR_REPLY = "Could not generate meal plan. {reason}"


class CoachReply(BaseModel):
    """What the athlete sees, plus what happened to their plan."""

    mode: CoachMode
    message: str
    applied_changes: List[Dict[str, Any]] = Field(default_factory=list)
    failed_changes: List[Dict[str, Any]] = Field(default_factory=list)
    error: bool = False


class CoachService(BaseService):

    def __init__(
        self,
        store: TrainingStore,
        lifecycle: SessionLifecycleService,
        advisory: AdvisoryClient,
        applier: Optional[PlanChangeApplier] = None,
        history_window: int = 20,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(store, logger)
        self._lifecycle = lifecycle
        self._advisory = advisory
        self._applier = applier or PlanChangeApplier(store, locks=lifecycle.locks)
        self._history_window = history_window

    async def chat(self, athlete_id: str, message: str, today: Optional[date] = None) -> CoachReply:
        """
        One chat exchange.

        The user turn is recorded whatever happens; the assistant turn only
        when the coach actually answered.
        """
        text = message.strip() or DEFAULT_CHAT_MESSAGE
        history = [t.to_dict() for t in self._store.chat.recent(athlete_id, self._history_window)]
        self._store.chat.append(ChatTurn(athlete_id=athlete_id, role=ChatRole.USER, content=text))

        reply = await self._consult(
            athlete_id, "chat", text, today, history=history, error_template=CHAT_ERROR_REPLY
        )
        if not reply.error:
            self._store.chat.append(
                ChatTurn(athlete_id=athlete_id, role=ChatRole.ASSISTANT, content=reply.message)
            )
        return reply

    async def summary(self, athlete_id: str, today: Optional[date] = None) -> CoachReply:
        return await self._consult(
            athlete_id, "summary", SUMMARY_USER_MESSAGE, today, error_template=SUMMARY_ERROR_REPLY
        )

    async def nutrition(self, athlete_id: str, today: Optional[date] = None) -> CoachReply:
        """Meal plan advice. Never modifies the schedule."""
        return await self._consult(
            athlete_id,
            "nutrition",
            NUTRITION_USER_MESSAGE,
            today,
            error_template=NUTRITION_ERROR_REPLY,
            allow_changes=False,
        )

    def history(self, athlete_id: str) -> List[ChatTurn]:
        return self._store.chat.recent(athlete_id, self._history_window)

    async def _consult(
        self,
        athlete_id: str,
        mode: CoachMode,
        user_message: str,
        today: Optional[date],
        error_template: str,
        history: Optional[List[Dict[str, Any]]] = None,
        allow_changes: bool = True,
    ) -> CoachReply:
        context = build_athlete_context(self._store, self._lifecycle, athlete_id, today)
        context.can_modify_plan = allow_changes
        request = AdvisoryRequest(
            mode=mode,
            user_message=user_message,
            athlete_context=context,
            chat_history=history or [],
        )

        try:
            response = await self._advisory.advise(request)
        except AdvisoryError as e:
            self.logger.error(f"Coach {mode} failed for athlete {athlete_id}: {e.message}")
            return CoachReply(
                mode=mode,
                message=error_template.format(reason="Please try again.").strip(),
                error=True,
            )

        message, changes = parse_reply(response.message, response.plan_changes)
        report = ChangeReport()
        if changes and allow_changes:
            report = self._applier.apply(athlete_id, changes)
        elif changes:
            self.logger.warning(f"Ignoring {len(changes)} plan changes in {mode} reply")

        return CoachReply(
            mode=mode,
            message=message,
            applied_changes=report.applied,
            failed_changes=report.failed,
        )
