"""Domain models for Pro Fit Agent."""

from .profile import AthleteProfile, ExperienceLevel, GoalType
from .plans import (
    TrainingPlan,
    PlannedSession,
    TrainingPhase,
    Sport,
    Intensity,
    SessionStatus,
    SessionOrigin,
)
from .activity import TrainingSessionLog, BodyMetricsEntry
from .milestones import (
    Milestone,
    AchievementRule,
    MilestoneRuleType,
    MilestoneStatus,
)
from .messaging import ChatTurn, ChatRole, PairingCode, ChannelLink

__all__ = [
    # Profile
    "AthleteProfile",
    "ExperienceLevel",
    "GoalType",
    # Plans
    "TrainingPlan",
    "PlannedSession",
    "TrainingPhase",
    "Sport",
    "Intensity",
    "SessionStatus",
    "SessionOrigin",
    # Activity
    "TrainingSessionLog",
    "BodyMetricsEntry",
    # Milestones
    "Milestone",
    "AchievementRule",
    "MilestoneRuleType",
    "MilestoneStatus",
    # Messaging
    "ChatTurn",
    "ChatRole",
    "PairingCode",
    "ChannelLink",
]
