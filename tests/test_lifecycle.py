"""Tests for the session lifecycle: transitions, log matching and compliance."""

from datetime import date, timedelta

import pytest

from profit_agent.exceptions import InvalidTransitionError, SessionNotFoundError
from profit_agent.models.activity import TrainingSessionLog
from profit_agent.models.plans import SessionStatus
from profit_agent.services import lifecycle as lc
from profit_agent.services.lifecycle import compliance, week_bounds

from .conftest import ATHLETE, TODAY


class TestTransitions:
    """Pure state machine functions."""

    def test_planned_to_completed_sets_back_reference(self, make_session):
        done = lc.complete(make_session(), "log-1")
        assert done.status == SessionStatus.COMPLETED
        assert done.completed_session_id == "log-1"

    def test_skip_and_unskip_round_trip(self, make_session):
        session = make_session()
        skipped = lc.skip(session)
        assert skipped.status == SessionStatus.SKIPPED
        assert lc.unskip(skipped).status == SessionStatus.PLANNED

    def test_transitions_return_copies(self, make_session):
        session = make_session()
        lc.skip(session)
        assert session.status == SessionStatus.PLANNED

    @pytest.mark.parametrize("status,transition", [
        (SessionStatus.COMPLETED, lc.skip),
        (SessionStatus.COMPLETED, lc.cancel),
        (SessionStatus.CANCELLED, lc.unskip),
        (SessionStatus.CANCELLED, lc.skip),
        (SessionStatus.SKIPPED, lc.cancel),
        (SessionStatus.PLANNED, lc.unskip),
    ])
    def test_illegal_transitions(self, make_session, status, transition):
        with pytest.raises(InvalidTransitionError) as exc_info:
            transition(make_session(status=status))
        assert exc_info.value.status_code == 409

    def test_completed_is_terminal(self, make_session):
        done = lc.complete(make_session(), "log-1")
        with pytest.raises(InvalidTransitionError):
            lc.complete(done, "log-2")


class TestCompliance:
    """Compliance is completed / non-cancelled, as a rounded percentage."""

    def test_no_sessions_is_zero(self):
        assert compliance([]) == 0

    def test_only_cancelled_is_zero(self, make_session):
        sessions = [make_session(status=SessionStatus.CANCELLED) for _ in range(3)]
        assert compliance(sessions) == 0

    def test_cancelled_excluded_from_denominator(self, make_session):
        sessions = [
            make_session(status=SessionStatus.COMPLETED),
            make_session(status=SessionStatus.COMPLETED),
            make_session(status=SessionStatus.SKIPPED),
            make_session(status=SessionStatus.PLANNED),
            make_session(status=SessionStatus.CANCELLED),
            make_session(status=SessionStatus.CANCELLED),
        ]
        assert compliance(sessions) == 50

    def test_rounds_to_integer(self, make_session):
        sessions = [
            make_session(status=SessionStatus.COMPLETED),
            make_session(status=SessionStatus.COMPLETED),
            make_session(status=SessionStatus.SKIPPED),
        ]
        assert compliance(sessions) == 67

    def test_window_filter(self, make_session):
        sessions = [
            make_session(day=TODAY, status=SessionStatus.COMPLETED),
            make_session(day=TODAY + timedelta(days=10), status=SessionStatus.SKIPPED),
        ]
        assert compliance(sessions, start=TODAY, end=TODAY + timedelta(days=6)) == 100
        assert compliance(sessions) == 50


class TestWeekBounds:
    """Weeks run Sunday to Saturday."""

    @pytest.mark.parametrize("day", [date(2026, 3, 1), date(2026, 3, 2), date(2026, 3, 7)])
    def test_same_week(self, day):
        assert week_bounds(day) == (date(2026, 3, 1), date(2026, 3, 7))

    def test_next_sunday_starts_new_week(self):
        assert week_bounds(date(2026, 3, 8))[0] == date(2026, 3, 8)


class TestMatchLog:
    """Auto-completion of a planned session by a training log."""

    def _log(self, day=TODAY, sport="Run"):
        return TrainingSessionLog(athlete_id=ATHLETE, date=day, sport=sport, duration=45, distance=7)

    def test_single_candidate_completed(self, store, lifecycle, make_session):
        session = make_session()
        store.sessions.save(session)
        log = self._log()

        matched = lifecycle.match_log(log)

        assert matched.id == session.id
        stored = store.sessions.get(session.id)
        assert stored.status == SessionStatus.COMPLETED
        assert stored.completed_session_id == log.id

    def test_sport_compared_case_insensitively(self, store, lifecycle, make_session):
        session = make_session(sport="Run")
        store.sessions.save(session)

        assert lifecycle.match_log(self._log(sport="RUN")) is not None

    def test_unrelated_log_leaves_session_untouched(self, store, lifecycle, make_session):
        session = make_session()
        store.sessions.save(session)

        assert lifecycle.match_log(self._log(sport="Bike")) is None
        assert lifecycle.match_log(self._log(day=TODAY + timedelta(days=1))) is None
        assert store.sessions.get(session.id).status == SessionStatus.PLANNED

    def test_ambiguous_match_changes_nothing(self, store, lifecycle, make_session):
        first, second = make_session(), make_session(type="Tempo")
        store.sessions.save_many([first, second])

        assert lifecycle.match_log(self._log()) is None
        assert store.sessions.get(first.id).status == SessionStatus.PLANNED
        assert store.sessions.get(second.id).status == SessionStatus.PLANNED

    def test_only_planned_sessions_match(self, store, lifecycle, make_session):
        store.sessions.save(make_session(status=SessionStatus.SKIPPED))
        assert lifecycle.match_log(self._log()) is None

    def test_other_athletes_sessions_ignored(self, store, lifecycle, make_session):
        store.sessions.save(make_session(athlete_id="someone-else"))
        assert lifecycle.match_log(self._log()) is None


class TestLifecycleService:
    """Stored skip/unskip and week statistics."""

    def test_skip_then_unskip(self, store, lifecycle, make_session):
        session = make_session()
        store.sessions.save(session)

        lifecycle.skip_session(ATHLETE, session.id)
        assert store.sessions.get(session.id).status == SessionStatus.SKIPPED

        lifecycle.unskip_session(ATHLETE, session.id)
        assert store.sessions.get(session.id).status == SessionStatus.PLANNED

    def test_skip_unknown_session(self, lifecycle):
        with pytest.raises(SessionNotFoundError):
            lifecycle.skip_session(ATHLETE, "missing")

    def test_skip_other_athletes_session(self, store, lifecycle, make_session):
        session = make_session(athlete_id="someone-else")
        store.sessions.save(session)
        with pytest.raises(SessionNotFoundError):
            lifecycle.skip_session(ATHLETE, session.id)

    def test_cannot_skip_completed(self, store, lifecycle, make_session):
        session = make_session(status=SessionStatus.COMPLETED, completed_session_id="log-1")
        store.sessions.save(session)
        with pytest.raises(InvalidTransitionError):
            lifecycle.skip_session(ATHLETE, session.id)

    def test_week_stats(self, store, lifecycle, activity, make_session):
        store.sessions.save_many([
            make_session(day=TODAY, sport="Swim", distance=1500),
            make_session(day=TODAY + timedelta(days=1), status=SessionStatus.SKIPPED),
            make_session(day=TODAY + timedelta(days=2), sport="Bike", status=SessionStatus.CANCELLED),
            make_session(day=TODAY + timedelta(days=3), sport="Bike"),
            make_session(day=TODAY + timedelta(days=8)),
        ])
        activity.log_training(ATHLETE, "swim", 45, distance=1500, on=TODAY)
        activity.log_training(ATHLETE, "bike", 90, distance=35, on=TODAY + timedelta(days=3))

        stats = lifecycle.week_stats(ATHLETE, TODAY)

        assert stats.week_start == date(2026, 3, 1)
        assert stats.completed == 2
        assert stats.skipped == 1
        assert stats.cancelled == 1
        assert stats.total == 3
        assert stats.compliance_percent == 67
        assert stats.swim_distance_m == 1500
        assert stats.bike_distance_km == 35
        assert stats.total_minutes == 135
