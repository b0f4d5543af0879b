"""Dependency injection for API routes."""

from functools import lru_cache

from fastapi import Depends

from ..coach.advisory import AdvisoryClient, get_advisory_client
from ..coach.service import CoachService
from ..config import get_settings
from ..db.store import TrainingStore
from ..messaging.dispatcher import MessageDispatcher
from ..messaging.pairing import PairingService
from ..services.activity import ActivityService
from ..services.lifecycle import SessionLifecycleService
from ..services.milestones import MilestoneService
from ..services.onboarding import OnboardingService
from ..services.refresh import RefreshPlanner


@lru_cache
def get_store() -> TrainingStore:
    """Get the repository bundle for the configured database."""
    return TrainingStore.open(get_settings().database_path)


def get_advisory() -> AdvisoryClient:
    """Get the advisory client selected in settings."""
    return get_advisory_client(get_settings())


def get_lifecycle_service(store: TrainingStore = Depends(get_store)) -> SessionLifecycleService:
    return SessionLifecycleService(store)


def get_milestone_service(store: TrainingStore = Depends(get_store)) -> MilestoneService:
    return MilestoneService(store)


def get_activity_service(
    store: TrainingStore = Depends(get_store),
    lifecycle: SessionLifecycleService = Depends(get_lifecycle_service),
    milestones: MilestoneService = Depends(get_milestone_service),
) -> ActivityService:
    return ActivityService(store, lifecycle, milestones)


def get_refresh_planner(store: TrainingStore = Depends(get_store)) -> RefreshPlanner:
    return RefreshPlanner(store, horizon_days=get_settings().session_horizon_days)


def get_onboarding_service(
    store: TrainingStore = Depends(get_store),
    milestones: MilestoneService = Depends(get_milestone_service),
    refresher: RefreshPlanner = Depends(get_refresh_planner),
) -> OnboardingService:
    return OnboardingService(store, milestones, refresher=refresher)


def get_coach_service(
    store: TrainingStore = Depends(get_store),
    lifecycle: SessionLifecycleService = Depends(get_lifecycle_service),
    advisory: AdvisoryClient = Depends(get_advisory),
) -> CoachService:
    return CoachService(
        store,
        lifecycle,
        advisory,
        history_window=get_settings().chat_history_window,
    )


def get_pairing_service(store: TrainingStore = Depends(get_store)) -> PairingService:
    return PairingService(store, ttl_minutes=get_settings().pairing_code_ttl_minutes)


def get_message_dispatcher(
    store: TrainingStore = Depends(get_store),
    pairing: PairingService = Depends(get_pairing_service),
    activity: ActivityService = Depends(get_activity_service),
    lifecycle: SessionLifecycleService = Depends(get_lifecycle_service),
) -> MessageDispatcher:
    return MessageDispatcher(store, pairing, activity, lifecycle)
