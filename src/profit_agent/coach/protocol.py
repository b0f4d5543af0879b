"""
Coach-driven plan mutation.

The advisory reply is prose that may embed a fenced block::

    [PLAN_CHANGES]
    [{"action": "cancel", "sessionId": "..."}]
    [/PLAN_CHANGES]

The block is stripped from the text shown to the athlete. Its JSON is
parsed into typed changes, which are then applied to the schedule in
order under the athlete's lock.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import json
import logging
import re

from .changes import (
    AddChange,
    CancelChange,
    PlanChange,
    RescheduleChange,
    SkipChange,
    parse_plan_changes,
)
from ..db.store import TrainingStore
from ..exceptions import ProFitAgentError
from ..models.plans import PlannedSession, SessionOrigin
from ..services import lifecycle
from ..services.base import BaseService
from ..services.locks import AthleteLockRegistry, get_lock_registry

logger = logging.getLogger(__name__)

PLAN_CHANGES_PATTERN = re.compile(
    r"\[PLAN_CHANGES\](.*?)\[/PLAN_CHANGES\]", re.DOTALL | re.IGNORECASE
)


def extract_plan_changes(text: str) -> Tuple[str, List[Any]]:
    """
    Split a coach reply into display text and raw change objects.

    Every fenced block is removed from the text. A block whose body is not
    a JSON array contributes nothing.
    """
    raw: List[Any] = []
    for match in PLAN_CHANGES_PATTERN.finditer(text or ""):
        body = match.group(1).strip()
        try:
            parsed = json.loads(body)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring malformed PLAN_CHANGES block: {e}")
            continue
        if isinstance(parsed, list):
            raw.extend(parsed)
        else:
            logger.warning("Ignoring PLAN_CHANGES block that is not a JSON array")

    message = PLAN_CHANGES_PATTERN.sub("", text or "")
    message = re.sub(r"\n{3,}", "\n\n", message).strip()
    return message, raw


def parse_reply(message: str, plan_changes: Optional[List[Any]] = None) -> Tuple[str, List[PlanChange]]:
    """
    Clean display text plus validated changes.

    A non-empty ``plan_changes`` field wins; the fenced block in the text is
    only read when the field is empty. The block is stripped either way.
    """
    clean, from_text = extract_plan_changes(message)
    raw = list(plan_changes) if plan_changes else from_text
    return clean, parse_plan_changes(raw)


@dataclass
class ChangeReport:
    """Outcome of applying a batch of coach changes."""
    applied: List[Dict[str, Any]] = field(default_factory=list)
    failed: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"applied": self.applied, "failed": self.failed}


class PlanChangeApplier(BaseService):
    """Applies validated coach changes to one athlete's schedule."""

    def __init__(
        self,
        store: TrainingStore,
        locks: Optional[AthleteLockRegistry] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(store, logger)
        self._locks = locks or get_lock_registry()

    def apply(self, athlete_id: str, changes: List[PlanChange]) -> ChangeReport:
        """
        Apply changes in order. A change that fails is logged and skipped;
        the rest still apply.
        """
        report = ChangeReport()
        if not changes:
            return report

        with self._locks.hold(athlete_id):
            for change in changes:
                try:
                    result = self._apply_one(athlete_id, change)
                except ProFitAgentError as e:
                    self.logger.warning(
                        f"Coach {change.action} change failed for athlete {athlete_id}: {e.message}"
                    )
                    report.failed.append({"action": change.action, "error": e.message})
                    continue
                report.applied.append(result)
                self.logger.info(f"Applied coach {change.action} for athlete {athlete_id}: {result}")
        return report

    def _apply_one(self, athlete_id: str, change: PlanChange) -> Dict[str, Any]:
        if isinstance(change, (CancelChange, SkipChange)):
            cancelled = lifecycle.cancel(self._require_session(athlete_id, change.session_id))
            self._store.sessions.save(cancelled)
            return {"action": change.action, "session_id": cancelled.id}

        if isinstance(change, RescheduleChange):
            original = lifecycle.cancel(self._require_session(athlete_id, change.session_id))
            clone = original.clone_to(change.new_date)
            self._store.sessions.save_many([original, clone])
            return {
                "action": change.action,
                "session_id": original.id,
                "new_session_id": clone.id,
                "new_date": change.new_date.isoformat(),
            }

        if isinstance(change, AddChange):
            session = PlannedSession(
                athlete_id=athlete_id,
                date=change.date,
                sport=change.sport,
                type=change.type,
                duration=change.duration,
                distance=change.distance,
                intensity=change.intensity,
                description=change.description,
                origin=SessionOrigin.COACH,
            )
            self._store.sessions.save(session)
            return {"action": change.action, "session_id": session.id, "date": session.date.isoformat()}

        raise ValueError(f"Unsupported plan change: {change!r}")
