"""
Session lifecycle: the planned-session state machine, log-to-plan matching
and compliance.

Legal transitions:

    planned  -> completed | skipped | cancelled
    skipped  -> planned            (unskip)

``completed`` and ``cancelled`` are terminal. Only the coach path cancels.
"""

from dataclasses import replace
from datetime import date, timedelta
from typing import Dict, FrozenSet, Iterable, List, Optional
import logging

from pydantic import BaseModel

from .base import BaseService
from .locks import AthleteLockRegistry, get_lock_registry
from ..db.store import TrainingStore
from ..exceptions import InvalidTransitionError
from ..models.activity import TrainingSessionLog
from ..models.plans import PlannedSession, SessionStatus


ALLOWED_TRANSITIONS: Dict[SessionStatus, FrozenSet[SessionStatus]] = {
    SessionStatus.PLANNED: frozenset(
        {SessionStatus.COMPLETED, SessionStatus.SKIPPED, SessionStatus.CANCELLED}
    ),
    SessionStatus.SKIPPED: frozenset({SessionStatus.PLANNED}),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.CANCELLED: frozenset(),
}


def _transition(
    session: PlannedSession,
    target: SessionStatus,
    completed_session_id: Optional[str] = None,
) -> PlannedSession:
    if target not in ALLOWED_TRANSITIONS[session.status]:
        raise InvalidTransitionError(session.id, session.status.value, target.value)
    return replace(session, status=target, completed_session_id=completed_session_id)


def complete(session: PlannedSession, log_id: str) -> PlannedSession:
    """Mark as completed by the given training log."""
    return _transition(session, SessionStatus.COMPLETED, completed_session_id=log_id)


def skip(session: PlannedSession) -> PlannedSession:
    return _transition(session, SessionStatus.SKIPPED)


def unskip(session: PlannedSession) -> PlannedSession:
    return _transition(session, SessionStatus.PLANNED)


def cancel(session: PlannedSession) -> PlannedSession:
    return _transition(session, SessionStatus.CANCELLED)


def compliance(
    sessions: Iterable[PlannedSession],
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> int:
    """
    Percentage of non-cancelled sessions in [start, end] that were completed.

    Returns 0 when the window holds no non-cancelled sessions.
    """
    counted = [
        s for s in sessions
        if s.status != SessionStatus.CANCELLED
        and (start is None or s.date >= start)
        and (end is None or s.date <= end)
    ]
    if not counted:
        return 0
    completed = sum(1 for s in counted if s.status == SessionStatus.COMPLETED)
    return round(100 * completed / len(counted))


def week_bounds(today: date) -> tuple[date, date]:
    """Sunday-to-Saturday calendar week containing ``today``."""
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


class WeekStats(BaseModel):
    """Current calendar week at a glance."""

    week_start: date
    week_end: date
    completed: int = 0
    skipped: int = 0
    cancelled: int = 0
    total: int = 0
    compliance_percent: int = 0
    swim_distance_m: float = 0.0
    bike_distance_km: float = 0.0
    run_distance_km: float = 0.0
    total_minutes: int = 0


class SessionLifecycleService(BaseService):
    """Applies lifecycle transitions to stored sessions under the athlete lock."""

    def __init__(
        self,
        store: TrainingStore,
        locks: Optional[AthleteLockRegistry] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(store, logger)
        self._locks = locks or get_lock_registry()

    @property
    def locks(self) -> AthleteLockRegistry:
        return self._locks

    def match_log(self, log: TrainingSessionLog) -> Optional[PlannedSession]:
        """
        Complete the planned session this log satisfies, if it is unambiguous.

        A session matches on date and sport (case-insensitive) while still
        planned. Exactly one candidate is completed with a back-reference to
        the log; with none or several the schedule is left alone.
        """
        with self._locks.hold(log.athlete_id):
            candidates = self._store.sessions.find_matching(log.athlete_id, log.date, log.sport)
            if len(candidates) != 1:
                if candidates:
                    self.logger.info(
                        f"Log {log.id} matches {len(candidates)} planned {log.sport} sessions "
                        f"on {log.date}; leaving them planned"
                    )
                else:
                    self.logger.info(f"Log {log.id} has no planned {log.sport} session on {log.date}")
                return None

            updated = complete(candidates[0], log.id)
            self._store.sessions.save(updated)
            self.logger.info(f"Session {updated.id} completed by log {log.id}")
            return updated

    def skip_session(self, athlete_id: str, session_id: str) -> PlannedSession:
        """Athlete-initiated skip. Reversible with unskip_session."""
        with self._locks.hold(athlete_id):
            updated = skip(self._require_session(athlete_id, session_id))
            self._store.sessions.save(updated)
        self.logger.info(f"Session {session_id} skipped by athlete {athlete_id}")
        return updated

    def unskip_session(self, athlete_id: str, session_id: str) -> PlannedSession:
        with self._locks.hold(athlete_id):
            updated = unskip(self._require_session(athlete_id, session_id))
            self._store.sessions.save(updated)
        self.logger.info(f"Session {session_id} restored to planned for athlete {athlete_id}")
        return updated

    def list_sessions(
        self,
        athlete_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[SessionStatus] = None,
    ) -> List[PlannedSession]:
        return self._store.sessions.list_for_athlete(athlete_id, start=start, end=end, status=status)

    def compliance_for(
        self,
        athlete_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> int:
        return compliance(self._store.sessions.list_for_athlete(athlete_id, start=start, end=end))

    def week_stats(self, athlete_id: str, today: Optional[date] = None) -> WeekStats:
        """Session counts for this week plus volume from the athlete's own logs."""
        start, end = week_bounds(today or date.today())
        sessions = self._store.sessions.list_for_athlete(athlete_id, start=start, end=end)
        logs = self._store.logs.list_for_athlete(athlete_id, start=start, end=end)

        stats = WeekStats(week_start=start, week_end=end)
        for s in sessions:
            if s.status == SessionStatus.COMPLETED:
                stats.completed += 1
            elif s.status == SessionStatus.SKIPPED:
                stats.skipped += 1
            elif s.status == SessionStatus.CANCELLED:
                stats.cancelled += 1
        stats.total = len(sessions) - stats.cancelled
        stats.compliance_percent = compliance(sessions)

        for log in logs:
            sport = log.sport.lower()
            if sport == "swim":
                stats.swim_distance_m += log.distance
            elif sport == "bike":
                stats.bike_distance_km += log.distance
            elif sport == "run":
                stats.run_distance_km += log.distance
            stats.total_minutes += log.duration
        return stats
