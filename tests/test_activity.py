"""Tests for training and body-metric logging."""

import pytest

from profit_agent.exceptions import ValidationError
from profit_agent.models.plans import SessionStatus

from .conftest import ATHLETE, TODAY


class TestLogTraining:
    """Tests for ActivityService.log_training."""

    def test_log_is_stored_and_normalized(self, store, activity):
        outcome = activity.log_training(ATHLETE, "run", 45, distance=7, rpe=6, notes="felt good", on=TODAY)

        stored = store.logs.get(outcome.log.id)
        assert stored.sport == "Run"
        assert stored.distance == 7
        assert stored.notes == "felt good"
        assert outcome.completed_session is None

    def test_log_completes_planned_session(self, store, activity, make_session):
        session = make_session(day=TODAY, sport="Run")
        store.sessions.save(session)

        outcome = activity.log_training(ATHLETE, "Run", 40, distance=6, on=TODAY)

        assert outcome.completed_session.id == session.id
        stored = store.sessions.get(session.id)
        assert stored.status == SessionStatus.COMPLETED
        assert stored.completed_session_id == outcome.log.id

    def test_second_log_same_slot_does_not_recomplete(self, store, activity, make_session):
        session = make_session(day=TODAY, sport="Run")
        store.sessions.save(session)

        first = activity.log_training(ATHLETE, "run", 40, on=TODAY)
        second = activity.log_training(ATHLETE, "run", 20, on=TODAY)

        assert second.completed_session is None
        assert store.sessions.get(session.id).completed_session_id == first.log.id

    @pytest.mark.parametrize("kwargs", [
        {"duration": -1},
        {"duration": 30, "distance": -5},
        {"duration": 30, "rpe": 0},
        {"duration": 30, "rpe": 11},
    ])
    def test_invalid_values_rejected(self, store, activity, kwargs):
        with pytest.raises(ValidationError):
            activity.log_training(ATHLETE, "run", on=TODAY, **kwargs)
        assert store.logs.list_for_athlete(ATHLETE) == []

    def test_recent_logs_newest_first(self, activity):
        from datetime import timedelta

        activity.log_training(ATHLETE, "run", 30, on=TODAY - timedelta(days=2))
        activity.log_training(ATHLETE, "bike", 60, on=TODAY)

        logs = activity.recent_logs(ATHLETE)
        assert [log.sport for log in logs] == ["Bike", "Run"]


class TestBodyMetrics:
    """Tests for body check-ins."""

    def test_partial_entry(self, store, activity):
        entry = activity.log_body_metrics(ATHLETE, sleep=7.5, on=TODAY)

        latest = store.body_metrics.latest(ATHLETE)
        assert latest.id == entry.id
        assert latest.sleep == 7.5
        assert latest.weight is None

    def test_recent_limit(self, activity):
        for _ in range(7):
            activity.log_body_metrics(ATHLETE, fatigue=5, on=TODAY)
        assert len(activity.recent_body_metrics(ATHLETE)) == 5
