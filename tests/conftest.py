"""Shared fixtures: a throwaway SQLite store and services wired to it."""

from datetime import date, timedelta
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from profit_agent.coach.advisory import AdvisoryClient, AdvisoryResponse
from profit_agent.db.store import TrainingStore
from profit_agent.models.plans import PlannedSession
from profit_agent.models.profile import AthleteProfile
from profit_agent.services.activity import ActivityService
from profit_agent.services.lifecycle import SessionLifecycleService
from profit_agent.services.locks import AthleteLockRegistry
from profit_agent.services.milestones import MilestoneService
from profit_agent.services.onboarding import OnboardingService


# Monday; the Sunday before is a rest day in the weekly template
TODAY = date(2026, 3, 2)
ATHLETE = "athlete-1"


@pytest.fixture
def store(tmp_path):
    """Repositories against a fresh database file."""
    return TrainingStore.open(tmp_path / "test.db")


@pytest.fixture
def locks():
    return AthleteLockRegistry()


@pytest.fixture
def lifecycle(store, locks):
    return SessionLifecycleService(store, locks=locks)


@pytest.fixture
def milestone_service(store):
    return MilestoneService(store)


@pytest.fixture
def activity(store, lifecycle, milestone_service):
    return ActivityService(store, lifecycle, milestone_service)


@pytest.fixture
def onboarding(store, milestone_service, locks):
    return OnboardingService(store, milestone_service, locks=locks)


@pytest.fixture
def profile():
    """Intermediate sub-5 athlete racing ten weeks from TODAY."""
    return AthleteProfile(
        athlete_id=ATHLETE,
        age=35,
        weight=72.0,
        experience="intermediate",
        goal_type="sub5",
        race_date=TODAY + timedelta(weeks=10),
        can_swim_1900m=True,
        five_k_time=1500,
        ftp=250,
        race_name="Lanzarote 70.3",
    )


@pytest.fixture
def make_session():
    """Factory for planned sessions with sensible defaults."""
    def _make(day=TODAY, sport="Run", **kwargs):
        kwargs.setdefault("type", "Z2")
        kwargs.setdefault("duration", 45)
        kwargs.setdefault("distance", 7)
        return PlannedSession(athlete_id=kwargs.pop("athlete_id", ATHLETE), date=day, sport=sport, **kwargs)
    return _make


@pytest.fixture
def advisory():
    """Advisory client mock; tests set ``advise.return_value`` or ``side_effect``."""
    client = AsyncMock(spec=AdvisoryClient)
    client.advise.return_value = AdvisoryResponse(message="Keep it up!")
    return client


@pytest.fixture
def api_client(store, advisory):
    """TestClient with the store and advisory client swapped for fixtures."""
    from profit_agent.api.deps import get_advisory, get_store
    from profit_agent.main import app

    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_advisory] = lambda: advisory
    yield TestClient(app)
    app.dependency_overrides.clear()
