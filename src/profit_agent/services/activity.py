"""
Activity logging.

Every training log, whichever channel it arrives from, goes through
``ActivityService.log_training`` so that plan auto-completion and
milestone evaluation happen the same way for the app and the chat bots.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional
import logging

from .base import BaseService
from .lifecycle import SessionLifecycleService
from .milestones import MilestoneService
from ..db.store import TrainingStore
from ..exceptions import ValidationError
from ..models.activity import BodyMetricsEntry, TrainingSessionLog
from ..models.milestones import Milestone
from ..models.plans import PlannedSession, Sport


@dataclass
class LogOutcome:
    """What a single training log triggered."""
    log: TrainingSessionLog
    completed_session: Optional[PlannedSession] = None
    achieved_milestones: List[Milestone] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "log": self.log.to_dict(),
            "completed_session": self.completed_session.to_dict() if self.completed_session else None,
            "achieved_milestones": [m.to_dict() for m in self.achieved_milestones],
        }


class ActivityService(BaseService):

    def __init__(
        self,
        store: TrainingStore,
        lifecycle: SessionLifecycleService,
        milestones: MilestoneService,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(store, logger)
        self._lifecycle = lifecycle
        self._milestones = milestones

    def log_training(
        self,
        athlete_id: str,
        sport: str,
        duration: int,
        distance: float = 0.0,
        type: str = "Z2",
        rpe: int = 5,
        notes: str = "",
        on: Optional[date] = None,
    ) -> LogOutcome:
        """
        Append a training log, then complete its planned session and evaluate milestones.

        Raises:
            ValidationError: On negative duration/distance or RPE outside 1-10
        """
        if duration < 0 or distance < 0:
            raise ValidationError("Duration and distance must not be negative")
        if not 1 <= rpe <= 10:
            raise ValidationError("RPE must be between 1 and 10", field="rpe")

        log = TrainingSessionLog(
            athlete_id=athlete_id,
            date=on or date.today(),
            sport=Sport.normalize(sport),
            duration=duration,
            distance=distance,
            type=type,
            rpe=rpe,
            notes=notes,
        )
        self._store.logs.add(log)
        self.logger.info(f"Logged {log.sport} {log.duration}min for athlete {athlete_id}")

        outcome = LogOutcome(log=log)
        outcome.completed_session = self._lifecycle.match_log(log)
        outcome.achieved_milestones = self._milestones.evaluate_log(athlete_id, log)
        return outcome

    def log_body_metrics(
        self,
        athlete_id: str,
        weight: Optional[float] = None,
        sleep: Optional[float] = None,
        fatigue: Optional[float] = None,
        notes: str = "",
        on: Optional[date] = None,
    ) -> BodyMetricsEntry:
        entry = BodyMetricsEntry(
            athlete_id=athlete_id,
            date=on or date.today(),
            weight=weight,
            sleep=sleep,
            fatigue=fatigue,
            notes=notes,
        )
        return self._store.body_metrics.add(entry)

    def recent_logs(self, athlete_id: str, limit: int = 20) -> List[TrainingSessionLog]:
        return self._store.logs.list_for_athlete(athlete_id, limit=limit)

    def recent_body_metrics(self, athlete_id: str, limit: int = 5) -> List[BodyMetricsEntry]:
        return self._store.body_metrics.recent(athlete_id, limit=limit)
