"""SQLite-backed repository for milestones."""

from datetime import datetime
from typing import Iterable, List, Optional
import json
import sqlite3

from .base import SQLiteRepository
from ...models.milestones import Milestone, MilestoneRuleType, MilestoneStatus


class MilestoneRepository(SQLiteRepository[Milestone]):

    def _row_to_milestone(self, row: sqlite3.Row) -> Milestone:
        data = dict(row)
        rule_json = data.pop("rule_json")
        data["rule"] = json.loads(rule_json) if rule_json else None
        return Milestone(**data)

    def save_many(self, milestones: Iterable[Milestone]) -> int:
        rows = [
            (
                m.id,
                m.athlete_id,
                m.title,
                m.icon,
                m.rule_type.value,
                m.target_date.isoformat() if m.target_date else None,
                json.dumps(m.rule.to_dict()) if m.rule else None,
                m.status.value,
                m.achieved_at.isoformat() if m.achieved_at else None,
            )
            for m in milestones
        ]
        if not rows:
            return 0
        with self._get_connection("save_milestones") as conn:
            conn.executemany(
                """
                INSERT OR REPLACE INTO milestones (
                    id, athlete_id, title, icon, rule_type, target_date,
                    rule_json, status, achieved_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                rows,
            )
        return len(rows)

    def list_for_athlete(
        self,
        athlete_id: str,
        rule_type: Optional[MilestoneRuleType] = None,
        status: Optional[MilestoneStatus] = None,
    ) -> List[Milestone]:
        query = "SELECT * FROM milestones WHERE athlete_id = ?"
        params: list = [athlete_id]
        if rule_type:
            query += " AND rule_type = ?"
            params.append(rule_type.value)
        if status:
            query += " AND status = ?"
            params.append(status.value)
        query += " ORDER BY target_date IS NULL, target_date ASC, title ASC"
        with self._get_connection("list_milestones") as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._row_to_milestone(r) for r in rows]

    def mark_achieved(self, milestone_id: str, achieved_at: datetime) -> bool:
        """
        Flip an upcoming milestone to achieved.

        Returns False when the milestone was already achieved, in which case
        the stored timestamp is left as is.
        """
        with self._get_connection("mark_milestone_achieved") as conn:
            cursor = conn.execute(
                """
                UPDATE milestones SET status = ?, achieved_at = ?
                WHERE id = ? AND status = ?
                """,
                (
                    MilestoneStatus.ACHIEVED.value,
                    achieved_at.isoformat(),
                    milestone_id,
                    MilestoneStatus.UPCOMING.value,
                ),
            )
            return cursor.rowcount == 1

    def delete_all_for_athlete(self, athlete_id: str) -> int:
        with self._get_connection("delete_milestones") as conn:
            cursor = conn.execute(
                "DELETE FROM milestones WHERE athlete_id = ?", (athlete_id,)
            )
            return cursor.rowcount
