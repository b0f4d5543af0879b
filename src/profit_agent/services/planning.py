"""
Planning engine: pure functions from an athlete profile to a plan.

Nothing here touches storage. Callers persist the returned plan and
sessions themselves.
"""

from datetime import date, timedelta
from typing import Dict, List, Optional
import math

from pydantic import BaseModel, Field

from ..models.plans import Intensity, PlannedSession, TrainingPhase, TrainingPlan
from ..models.profile import AthleteProfile, GoalType


# Weeks-to-race breakpoints, checked in order with strict ">"
PHASE_BREAKPOINTS = (
    (20, TrainingPhase.BASE),
    (12, TrainingPhase.BUILD),
    (3, TrainingPhase.PEAK),
)

# (swim sessions, bike km, run km, strength sessions)
BASELINE_VOLUME = (3, 60, 25, 2)
GOAL_VOLUME: Dict[GoalType, tuple] = {
    GoalType.SUB4_30: (4, 80, 35, 2),
    GoalType.SUB5: (3, 70, 30, 2),
    GoalType.HYBRID: (3, 50, 20, 3),
}
BEGINNER_VOLUME_FACTOR = 0.7

DEFAULT_HORIZON_DAYS = 30

# Day-of-week archetypes keyed by date.weekday() (Monday = 0). Sunday is rest.
WEEK_TEMPLATE: Dict[int, List[dict]] = {
    0: [dict(sport="Swim", type="Skills", duration=45, distance=1500,
             intensity=Intensity.EASY, description="Technique drills + easy swimming")],
    1: [dict(sport="Run", type="Z2", duration=40, distance=6,
             intensity=Intensity.EASY, description="Easy aerobic run")],
    2: [dict(sport="Bike", type="Z2", duration=60, distance=20,
             intensity=Intensity.EASY, description="Steady endurance ride")],
    3: [dict(sport="Swim", type="Threshold", duration=50, distance=2000,
             intensity=Intensity.MODERATE, description="6x200m @ threshold")],
    4: [dict(sport="Run", type="Tempo", duration=45, distance=7,
             intensity=Intensity.MODERATE, description="Tempo run")],
    5: [dict(sport="Bike", type="Long", duration=120, distance=40,
             intensity=Intensity.EASY, description="Long Z2 ride")],
    6: [],
}

TRANSITION_MINUTES = 10


class FinishProjection(BaseModel):
    """Estimated 70.3 finish time with per-leg splits."""

    time: str = Field(..., description="Total time as H:MM")
    swim: str
    bike: str
    run: str
    total_minutes: float


class RealismCheck(BaseModel):
    """Whether the chosen goal looks attainable from the benchmarks."""

    realistic: bool
    warnings: List[str] = Field(default_factory=list)
    recommendation: str


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def weeks_to_race(race_date: Optional[date], today: Optional[date] = None) -> int:
    """Whole weeks until race day, floored. No race date counts as zero."""
    if race_date is None:
        return 0
    today = today or date.today()
    return (race_date - today).days // 7


def phase_for_weeks(weeks: int) -> TrainingPhase:
    for breakpoint, phase in PHASE_BREAKPOINTS:
        if weeks > breakpoint:
            return phase
    return TrainingPhase.TAPER


def generate_initial_plan(profile: AthleteProfile, today: Optional[date] = None) -> TrainingPlan:
    """
    Derive phase and weekly volume targets from the profile.

    Args:
        profile: Athlete profile (race date, goal and experience are read)
        today: Reference date, defaults to today

    Returns:
        A new auto-generated TrainingPlan starting today
    """
    today = today or date.today()
    phase = phase_for_weeks(weeks_to_race(profile.race_date, today))

    swims, bike_km, run_km, strength = GOAL_VOLUME.get(profile.goal_type, BASELINE_VOLUME)
    bike_km, run_km = float(bike_km), float(run_km)
    if profile.is_beginner:
        swims = max(2, swims - 1)
        bike_km *= BEGINNER_VOLUME_FACTOR
        run_km *= BEGINNER_VOLUME_FACTOR

    return TrainingPlan(
        athlete_id=profile.athlete_id,
        phase=phase,
        weekly_swim_sessions=swims,
        weekly_bike_km=_round_half_up(bike_km),
        weekly_run_km=_round_half_up(run_km),
        weekly_strength_sessions=strength,
        start_date=today,
        end_date=profile.race_date,
        auto_generated=True,
    )


def generate_sessions(
    athlete_id: str,
    start: Optional[date] = None,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
) -> List[PlannedSession]:
    """
    Lay the weekly template over ``horizon_days`` consecutive days from ``start``.

    The output is not deduplicated against existing sessions; callers that
    need collision handling (refresh) filter it themselves.
    """
    start = start or date.today()
    sessions: List[PlannedSession] = []
    for offset in range(horizon_days):
        day = start + timedelta(days=offset)
        for archetype in WEEK_TEMPLATE[day.weekday()]:
            sessions.append(PlannedSession(athlete_id=athlete_id, date=day, **archetype))
    return sessions


def project_finish_time(profile: AthleteProfile) -> FinishProjection:
    """Rough finish estimate from swim ability, FTP and 5K time."""
    swim = 35 if profile.can_swim_1900m else 45
    bike = 150 + (250 - profile.ftp) * 0.5 if profile.ftp else 180
    run = profile.five_k_time / 60 * 4.2 if profile.five_k_time else 120
    total = swim + bike + run + TRANSITION_MINUTES

    hours, minutes = divmod(_round_half_up(total), 60)
    return FinishProjection(
        time=f"{hours}:{minutes:02d}",
        swim=f"{math.floor(swim)}min",
        bike=f"{math.floor(bike)}min",
        run=f"{math.floor(run)}min",
        total_minutes=round(total, 1),
    )


def check_goal_realism(profile: AthleteProfile) -> RealismCheck:
    """Only the sub-4:30 goal carries prerequisites."""
    warnings: List[str] = []
    if profile.goal_type == GoalType.SUB4_30:
        if not profile.can_swim_1900m:
            warnings.append("Sub-4:30 requires 1.9km swim endurance.")
        if profile.five_k_time and profile.five_k_time > 1500:
            warnings.append("Sub-4:30 requires faster 5K pace.")

    if len(warnings) > 2:
        recommendation = "conservative"
    elif warnings:
        recommendation = "stretch"
    else:
        recommendation = "achievable"
    return RealismCheck(realistic=not warnings, warnings=warnings, recommendation=recommendation)
