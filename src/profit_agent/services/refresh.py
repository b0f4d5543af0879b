"""
Refresh planner: regenerate upcoming sessions without touching history.

Partition of the athlete's sessions for a given ``today``:

- kept: date before today, or status completed/skipped
- regenerated: date on or after today and status planned
- neither: future cancelled rows; left alone

Regenerated rows are deleted and replaced by a fresh template run,
minus any generated row whose (date, sport) slot is held by a kept row.
A cancelled slot is refilled, so its cancelled row stays as a record
beside the fresh planned one.
Coach-added future sessions are planned rows and are therefore replaced.
"""

from datetime import date
from typing import List, Optional, Set, Tuple
import logging

from pydantic import BaseModel

from .base import BaseService
from .locks import AthleteLockRegistry, get_lock_registry
from .planning import DEFAULT_HORIZON_DAYS, generate_sessions
from ..db.store import TrainingStore
from ..models.plans import PlannedSession, SessionStatus


PROTECTED_STATUSES = frozenset({SessionStatus.COMPLETED, SessionStatus.SKIPPED})


class RefreshResult(BaseModel):
    kept: int
    deleted: int
    inserted: int
    skipped_collisions: int


def partition(
    sessions: List[PlannedSession], today: date
) -> Tuple[List[PlannedSession], List[PlannedSession], List[PlannedSession]]:
    """Split into (kept, regenerate, untouched)."""
    kept, regenerate, untouched = [], [], []
    for s in sessions:
        if s.date < today or s.status in PROTECTED_STATUSES:
            kept.append(s)
        elif s.status == SessionStatus.PLANNED:
            regenerate.append(s)
        else:
            untouched.append(s)
    return kept, regenerate, untouched


class RefreshPlanner(BaseService):

    def __init__(
        self,
        store: TrainingStore,
        locks: Optional[AthleteLockRegistry] = None,
        horizon_days: int = DEFAULT_HORIZON_DAYS,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(store, logger)
        self._locks = locks or get_lock_registry()
        self._horizon_days = horizon_days

    def refresh(self, athlete_id: str, today: Optional[date] = None) -> RefreshResult:
        today = today or date.today()
        with self._locks.hold(athlete_id):
            sessions = self._store.sessions.list_for_athlete(athlete_id)
            kept, regenerate, untouched = partition(sessions, today)

            taken: Set[tuple] = {s.key for s in kept}
            generated = generate_sessions(athlete_id, start=today, horizon_days=self._horizon_days)
            fresh = [s for s in generated if s.key not in taken]

            deleted = self._store.sessions.delete_many(s.id for s in regenerate)
            inserted = self._store.sessions.save_many(fresh)

        result = RefreshResult(
            kept=len(kept),
            deleted=deleted,
            inserted=inserted,
            skipped_collisions=len(generated) - len(fresh),
        )
        self.logger.info(
            f"Refreshed plan for athlete {athlete_id}: kept {result.kept}, "
            f"replaced {result.deleted} with {result.inserted} "
            f"({result.skipped_collisions} slots held by history), {len(untouched)} cancelled left as is"
        )
        return result
