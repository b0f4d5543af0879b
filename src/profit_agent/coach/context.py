"""
Athlete context assembly for the coach.

Everything is read from the repositories by athlete id at call time.
"""

from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..db.store import TrainingStore
from ..models.plans import SessionStatus
from ..services.lifecycle import SessionLifecycleService, WeekStats
from ..services.planning import weeks_to_race

RECENT_BODY_LIMIT = 5
RECENT_LOG_LIMIT = 7
UPCOMING_SESSION_LIMIT = 14
STRENGTH_LOOKBACK_DAYS = 14


class AthleteContext(BaseModel):
    """Snapshot sent to the advisory service as ``athleteContext``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    athlete_id: str
    today: date
    onboarding: Optional[Dict[str, Any]] = None
    plan: Optional[Dict[str, Any]] = None
    weeks_to_race: Optional[int] = None
    week_stats: WeekStats
    recent_body: List[Dict[str, Any]] = Field(default_factory=list)
    recent_sessions: List[Dict[str, Any]] = Field(default_factory=list)
    recent_strength_sessions: List[Dict[str, Any]] = Field(default_factory=list)
    planned_sessions_list: List[Dict[str, Any]] = Field(default_factory=list)
    can_modify_plan: bool = True


def build_athlete_context(
    store: TrainingStore,
    lifecycle: SessionLifecycleService,
    athlete_id: str,
    today: Optional[date] = None,
) -> AthleteContext:
    """Profile, plan, this week, recent check-ins and logs, and upcoming sessions with ids."""
    today = today or date.today()

    profile = store.profiles.get(athlete_id)
    plan = store.plans.get(athlete_id)
    recent_logs = store.logs.list_for_athlete(athlete_id, limit=RECENT_LOG_LIMIT)
    strength_logs = [
        log for log in store.logs.list_for_athlete(
            athlete_id, start=today - timedelta(days=STRENGTH_LOOKBACK_DAYS), end=today
        )
        if log.sport.lower() == "strength"
    ]
    upcoming = store.sessions.list_for_athlete(
        athlete_id, start=today, status=SessionStatus.PLANNED, limit=UPCOMING_SESSION_LIMIT
    )

    weeks_left = weeks_to_race(profile.race_date, today) if profile and profile.race_date else None

    return AthleteContext(
        athlete_id=athlete_id,
        today=today,
        onboarding=profile.to_dict() if profile else None,
        plan=plan.to_dict() if plan else None,
        weeks_to_race=weeks_left,
        week_stats=lifecycle.week_stats(athlete_id, today),
        recent_body=[e.to_dict() for e in store.body_metrics.recent(athlete_id, RECENT_BODY_LIMIT)],
        recent_sessions=[log.to_dict() for log in recent_logs],
        recent_strength_sessions=[log.to_dict() for log in strength_logs],
        planned_sessions_list=[s.to_dict() for s in upcoming],
    )
