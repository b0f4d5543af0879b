"""SQLite-backed repository for planned sessions."""

from datetime import date
from typing import Iterable, List, Optional
import logging
import sqlite3

from .base import SQLiteRepository
from ...models.plans import PlannedSession, SessionStatus

logger = logging.getLogger(__name__)


class PlannedSessionRepository(SQLiteRepository[PlannedSession]):
    """
    Persistence for the athlete's schedule.

    Rows are only ever mutated through the lifecycle services; the
    repository itself does not enforce transition rules.
    """

    def _session_to_row(self, session: PlannedSession) -> tuple:
        return (
            session.id,
            session.athlete_id,
            session.date.isoformat(),
            session.sport,
            session.type,
            session.duration,
            session.distance,
            session.intensity.value,
            session.description,
            session.status.value,
            session.completed_session_id,
            session.origin.value,
            session.created_at.isoformat(),
        )

    def _row_to_session(self, row: sqlite3.Row) -> PlannedSession:
        return PlannedSession(**dict(row))

    def get(self, session_id: str) -> Optional[PlannedSession]:
        with self._get_connection("get_session") as conn:
            row = conn.execute(
                "SELECT * FROM planned_sessions WHERE id = ?", (session_id,)
            ).fetchone()
        return self._row_to_session(row) if row else None

    def save(self, session: PlannedSession) -> PlannedSession:
        """Insert or replace a single session."""
        self.save_many([session])
        return session

    def save_many(self, sessions: Iterable[PlannedSession]) -> int:
        rows = [self._session_to_row(s) for s in sessions]
        if not rows:
            return 0
        with self._get_connection("save_sessions") as conn:
            conn.executemany(
                """
                INSERT OR REPLACE INTO planned_sessions (
                    id, athlete_id, date, sport, type, duration, distance,
                    intensity, description, status, completed_session_id,
                    origin, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                rows,
            )
        return len(rows)

    def list_for_athlete(
        self,
        athlete_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[SessionStatus] = None,
        limit: Optional[int] = None,
    ) -> List[PlannedSession]:
        """Sessions ordered by date, optionally bounded (inclusive) and filtered."""
        query = "SELECT * FROM planned_sessions WHERE athlete_id = ?"
        params: list = [athlete_id]
        if start:
            query += " AND date >= ?"
            params.append(start.isoformat())
        if end:
            query += " AND date <= ?"
            params.append(end.isoformat())
        if status:
            query += " AND status = ?"
            params.append(status.value)
        query += " ORDER BY date ASC, created_at ASC"
        if limit:
            query += " LIMIT ?"
            params.append(limit)

        with self._get_connection("list_sessions") as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_session(r) for r in rows]

    def find_matching(self, athlete_id: str, on: date, sport: str) -> List[PlannedSession]:
        """Planned sessions on ``on`` for ``sport`` (case-insensitive)."""
        with self._get_connection("find_matching") as conn:
            rows = conn.execute(
                """
                SELECT * FROM planned_sessions
                WHERE athlete_id = ? AND date = ? AND LOWER(sport) = LOWER(?)
                  AND status = ?
                ORDER BY created_at ASC
                """,
                (athlete_id, on.isoformat(), sport, SessionStatus.PLANNED.value),
            ).fetchall()
        return [self._row_to_session(r) for r in rows]

    def delete_many(self, session_ids: Iterable[str]) -> int:
        ids = list(session_ids)
        if not ids:
            return 0
        with self._get_connection("delete_sessions") as conn:
            conn.executemany(
                "DELETE FROM planned_sessions WHERE id = ?", [(i,) for i in ids]
            )
        logger.debug(f"Deleted {len(ids)} planned sessions")
        return len(ids)
