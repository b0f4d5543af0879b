"""Append-only repositories for training logs and body metrics."""

from datetime import date
from typing import List, Optional

from .base import SQLiteRepository
from ...models.activity import BodyMetricsEntry, TrainingSessionLog


class TrainingLogRepository(SQLiteRepository[TrainingSessionLog]):
    """Training logs. Rows are never updated or deleted."""

    def add(self, log: TrainingSessionLog) -> TrainingSessionLog:
        with self._get_connection("add_training_log") as conn:
            conn.execute(
                """
                INSERT INTO training_logs (
                    id, athlete_id, date, sport, type, duration, distance,
                    rpe, notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    log.id,
                    log.athlete_id,
                    log.date.isoformat(),
                    log.sport,
                    log.type,
                    log.duration,
                    log.distance,
                    log.rpe,
                    log.notes,
                    log.created_at.isoformat(),
                ),
            )
        return log

    def get(self, log_id: str) -> Optional[TrainingSessionLog]:
        with self._get_connection("get_training_log") as conn:
            row = conn.execute(
                "SELECT * FROM training_logs WHERE id = ?", (log_id,)
            ).fetchone()
        return TrainingSessionLog(**dict(row)) if row else None

    def list_for_athlete(
        self,
        athlete_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> List[TrainingSessionLog]:
        """Most recent first."""
        query = "SELECT * FROM training_logs WHERE athlete_id = ?"
        params: list = [athlete_id]
        if start:
            query += " AND date >= ?"
            params.append(start.isoformat())
        if end:
            query += " AND date <= ?"
            params.append(end.isoformat())
        query += " ORDER BY date DESC, created_at DESC"
        if limit:
            query += " LIMIT ?"
            params.append(limit)
        with self._get_connection("list_training_logs") as conn:
            rows = conn.execute(query, params).fetchall()
        return [TrainingSessionLog(**dict(r)) for r in rows]


class BodyMetricsRepository(SQLiteRepository[BodyMetricsEntry]):
    """Daily check-ins. Several rows per day may exist; the newest wins."""

    def add(self, entry: BodyMetricsEntry) -> BodyMetricsEntry:
        with self._get_connection("add_body_metrics") as conn:
            conn.execute(
                """
                INSERT INTO body_metrics (
                    id, athlete_id, date, weight, sleep, fatigue, notes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    entry.id,
                    entry.athlete_id,
                    entry.date.isoformat(),
                    entry.weight,
                    entry.sleep,
                    entry.fatigue,
                    entry.notes,
                    entry.created_at.isoformat(),
                ),
            )
        return entry

    def recent(self, athlete_id: str, limit: int = 5) -> List[BodyMetricsEntry]:
        """Most recent entries first."""
        with self._get_connection("recent_body_metrics") as conn:
            rows = conn.execute(
                """
                SELECT * FROM body_metrics WHERE athlete_id = ?
                ORDER BY date DESC, created_at DESC LIMIT ?
                """,
                (athlete_id, limit),
            ).fetchall()
        return [BodyMetricsEntry(**dict(r)) for r in rows]

    def latest(self, athlete_id: str) -> Optional[BodyMetricsEntry]:
        entries = self.recent(athlete_id, limit=1)
        return entries[0] if entries else None
