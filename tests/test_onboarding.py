"""Tests for onboarding and plan retrieval."""

from datetime import timedelta

import pytest

from profit_agent.exceptions import PlanNotFoundError, ProfileNotFoundError
from profit_agent.models.plans import SessionStatus, TrainingPhase

from .conftest import ATHLETE, TODAY


class TestSaveStep:
    """Partial saves while walking through the wizard."""

    def test_new_athlete_gets_blank_profile(self, onboarding):
        profile = onboarding.get_profile(ATHLETE)
        assert profile.step == 1
        assert profile.completed is False

    def test_steps_accumulate(self, store, onboarding):
        onboarding.save_step(ATHLETE, {"step": 2, "age": 35, "weight": 72.0})
        onboarding.save_step(ATHLETE, {"step": 3, "goal_type": "sub5", "age": None})

        stored = store.profiles.get(ATHLETE)
        assert stored.step == 3
        assert stored.age == 35
        assert stored.goal_type.value == "sub5"
        assert stored.completed is False


class TestComplete:
    """Completing onboarding rebuilds the plan."""

    def test_creates_plan_sessions_and_milestones(self, store, onboarding):
        result = onboarding.complete(ATHLETE, {
            "experience": "intermediate",
            "goal_type": "sub5",
            "race_date": (TODAY + timedelta(weeks=10)).isoformat(),
            "can_swim_1900m": True,
            "ftp": 250,
            "five_k_time": 1500,
        }, today=TODAY)

        assert result.profile.completed is True
        assert result.plan.phase == TrainingPhase.PEAK
        assert result.sessions_created == 26
        assert result.projection.time == "5:00"
        assert result.realism.realistic is True
        assert store.plans.get(ATHLETE).weekly_bike_km == 70
        assert len(store.sessions.list_for_athlete(ATHLETE)) == 26
        assert len(store.milestones.list_for_athlete(ATHLETE)) == 8

    def test_without_goal_uses_baseline_volume(self, store, onboarding):
        result = onboarding.complete(
            ATHLETE, {"race_date": (TODAY + timedelta(weeks=10)).isoformat()}, today=TODAY
        )

        assert result.profile.completed is True
        assert result.plan.weekly_bike_km == 60
        assert result.plan.weekly_run_km == 25
        assert result.sessions_created == 26
        assert store.plans.get(ATHLETE) is not None

    def test_recompleting_keeps_history(self, store, onboarding, activity, make_session):
        yesterday = make_session(day=TODAY - timedelta(days=1), status=SessionStatus.COMPLETED)
        store.sessions.save(yesterday)
        onboarding.complete(ATHLETE, {"goal_type": "sub5"}, today=TODAY)
        activity.log_training(ATHLETE, "swim", 45, distance=1500, on=TODAY)
        swim = store.sessions.list_for_athlete(ATHLETE, start=TODAY, status=SessionStatus.COMPLETED)[0]

        result = onboarding.complete(ATHLETE, {"goal_type": "hybrid"}, today=TODAY)

        assert store.sessions.get(yesterday.id).status == SessionStatus.COMPLETED
        kept_swim = store.sessions.get(swim.id)
        assert kept_swim.status == SessionStatus.COMPLETED
        assert kept_swim.completed_session_id == swim.completed_session_id
        # the fresh Monday swim collides with the completed one
        assert result.sessions_created == 25
        assert len(store.sessions.list_for_athlete(ATHLETE, start=TODAY)) == 26
        assert store.plans.get(ATHLETE).weekly_strength_sessions == 3


class TestPlanQueries:

    def test_plan_missing(self, onboarding):
        with pytest.raises(PlanNotFoundError):
            onboarding.get_plan(ATHLETE)

    def test_projection_requires_profile(self, onboarding):
        with pytest.raises(ProfileNotFoundError):
            onboarding.projection(ATHLETE)

    def test_projection_and_realism(self, store, onboarding, profile):
        store.profiles.save(profile)
        assert onboarding.projection(ATHLETE).time == "5:00"
        assert onboarding.realism(ATHLETE).recommendation == "achievable"
