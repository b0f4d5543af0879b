"""Bundle of repositories sharing one database file."""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .repositories import (
    BodyMetricsRepository,
    ChatRepository,
    MilestoneRepository,
    PairingRepository,
    PlannedSessionRepository,
    PlanRepository,
    ProfileRepository,
    TrainingLogRepository,
)


@dataclass
class TrainingStore:
    profiles: ProfileRepository
    plans: PlanRepository
    sessions: PlannedSessionRepository
    logs: TrainingLogRepository
    body_metrics: BodyMetricsRepository
    milestones: MilestoneRepository
    chat: ChatRepository
    pairing: PairingRepository

    @classmethod
    def open(cls, db_path: Union[str, Path]) -> "TrainingStore":
        """Create every repository against ``db_path``, creating tables as needed."""
        return cls(
            profiles=ProfileRepository(db_path),
            plans=PlanRepository(db_path),
            sessions=PlannedSessionRepository(db_path),
            logs=TrainingLogRepository(db_path),
            body_metrics=BodyMetricsRepository(db_path),
            milestones=MilestoneRepository(db_path),
            chat=ChatRepository(db_path),
            pairing=PairingRepository(db_path),
        )
