"""SQLite-backed repositories for athlete profiles and training plans."""

from datetime import datetime
from typing import Optional
import sqlite3

from .base import SQLiteRepository, as_bool
from ...models.profile import AthleteProfile
from ...models.plans import TrainingPlan


class ProfileRepository(SQLiteRepository[AthleteProfile]):
    """One profile row per athlete, saved with upsert semantics."""

    _COLUMNS = (
        "athlete_id", "step", "completed", "age", "weight", "height",
        "experience", "goal_type", "race_date", "priority", "hours_per_week",
        "pool_days_per_week", "gym_access", "can_swim_1900m", "five_k_time",
        "ftp", "race_name", "race_location", "travel_notes", "updated_at",
    )

    def get(self, athlete_id: str) -> Optional[AthleteProfile]:
        with self._get_connection("get_profile") as conn:
            row = conn.execute(
                "SELECT * FROM athlete_profiles WHERE athlete_id = ?",
                (athlete_id,),
            ).fetchone()
        return self._row_to_profile(row) if row else None

    def save(self, profile: AthleteProfile) -> AthleteProfile:
        """Insert or update the athlete's profile."""
        profile.updated_at = datetime.now()
        row = profile.to_dict()
        row["completed"] = int(profile.completed)
        row["gym_access"] = int(profile.gym_access)
        row["can_swim_1900m"] = int(profile.can_swim_1900m)

        placeholders = ", ".join("?" for _ in self._COLUMNS)
        updates = ", ".join(
            f"{col} = excluded.{col}" for col in self._COLUMNS if col != "athlete_id"
        )
        with self._get_connection("save_profile") as conn:
            conn.execute(
                f"""
                INSERT INTO athlete_profiles ({", ".join(self._COLUMNS)})
                VALUES ({placeholders})
                ON CONFLICT(athlete_id) DO UPDATE SET {updates}
                """,
                tuple(row[col] for col in self._COLUMNS),
            )
        return profile

    def _row_to_profile(self, row: sqlite3.Row) -> AthleteProfile:
        data = dict(row)
        data["completed"] = as_bool(data["completed"])
        data["gym_access"] = as_bool(data["gym_access"])
        data["can_swim_1900m"] = as_bool(data["can_swim_1900m"])
        return AthleteProfile.from_dict(data)


class PlanRepository(SQLiteRepository[TrainingPlan]):
    """The single active plan per athlete. Saving replaces it."""

    def get(self, athlete_id: str) -> Optional[TrainingPlan]:
        with self._get_connection("get_plan") as conn:
            row = conn.execute(
                "SELECT * FROM training_plans WHERE athlete_id = ?",
                (athlete_id,),
            ).fetchone()
        if not row:
            return None
        data = dict(row)
        data["auto_generated"] = as_bool(data["auto_generated"])
        return TrainingPlan(**data)

    def save(self, plan: TrainingPlan) -> TrainingPlan:
        with self._get_connection("save_plan") as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO training_plans (
                    athlete_id, phase, weekly_swim_sessions, weekly_bike_km,
                    weekly_run_km, weekly_strength_sessions, start_date,
                    end_date, auto_generated, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    plan.athlete_id,
                    plan.phase.value,
                    plan.weekly_swim_sessions,
                    plan.weekly_bike_km,
                    plan.weekly_run_km,
                    plan.weekly_strength_sessions,
                    plan.start_date.isoformat(),
                    plan.end_date.isoformat() if plan.end_date else None,
                    int(plan.auto_generated),
                    plan.created_at.isoformat(),
                ),
            )
        return plan
