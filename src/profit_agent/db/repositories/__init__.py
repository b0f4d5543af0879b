"""Repository pattern implementations for data access."""

from .base import SQLiteRepository
from .profile_repository import ProfileRepository, PlanRepository
from .session_repository import PlannedSessionRepository
from .activity_repository import TrainingLogRepository, BodyMetricsRepository
from .milestone_repository import MilestoneRepository
from .messaging_repository import ChatRepository, PairingRepository

__all__ = [
    "SQLiteRepository",
    "ProfileRepository",
    "PlanRepository",
    "PlannedSessionRepository",
    "TrainingLogRepository",
    "BodyMetricsRepository",
    "MilestoneRepository",
    "ChatRepository",
    "PairingRepository",
]
