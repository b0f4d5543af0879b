"""
Service layer for Pro Fit Agent.

Planning functions are pure; the service classes wrap a TrainingStore and
serialize schedule mutations per athlete.
"""

from .base import BaseService
from .locks import AthleteLockRegistry, get_lock_registry
from .planning import (
    FinishProjection,
    RealismCheck,
    check_goal_realism,
    generate_initial_plan,
    generate_sessions,
    phase_for_weeks,
    project_finish_time,
    weeks_to_race,
)
from .lifecycle import SessionLifecycleService, WeekStats, compliance
from .milestones import MilestoneService
from .activity import ActivityService, LogOutcome
from .onboarding import OnboardingResult, OnboardingService
from .refresh import RefreshPlanner, RefreshResult

__all__ = [
    # Base
    "BaseService",
    "AthleteLockRegistry",
    "get_lock_registry",
    # Planning
    "FinishProjection",
    "RealismCheck",
    "check_goal_realism",
    "generate_initial_plan",
    "generate_sessions",
    "phase_for_weeks",
    "project_finish_time",
    "weeks_to_race",
    # Lifecycle
    "SessionLifecycleService",
    "WeekStats",
    "compliance",
    # Milestones / activity
    "MilestoneService",
    "ActivityService",
    "LogOutcome",
    # Onboarding / refresh
    "OnboardingService",
    "OnboardingResult",
    "RefreshPlanner",
    "RefreshResult",
]
