"""Training plan and planned session models."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional
import uuid


class TrainingPhase(str, Enum):
    """Macro-periodization stage derived from weeks-to-race."""
    BASE = "Base"
    BUILD = "Build"
    PEAK = "Peak"
    TAPER = "Taper"


class Sport(str, Enum):
    """Sports a session can be scheduled or logged for."""
    SWIM = "Swim"
    BIKE = "Bike"
    RUN = "Run"
    STRENGTH = "Strength"

    @classmethod
    def normalize(cls, value: str) -> str:
        """Canonical capitalisation ("run" -> "Run"); unknown sports pass through title-cased."""
        for sport in cls:
            if sport.value.lower() == value.strip().lower():
                return sport.value
        return value.strip().capitalize()


class Intensity(str, Enum):
    EASY = "Easy"
    MODERATE = "Moderate"
    HARD = "Hard"


class SessionStatus(str, Enum):
    """Lifecycle states of a planned session."""
    PLANNED = "planned"
    COMPLETED = "completed"
    SKIPPED = "skipped"      # athlete-initiated, reversible
    CANCELLED = "cancelled"  # coach-initiated, terminal


class SessionOrigin(str, Enum):
    SYSTEM = "system"
    COACH = "coach"


@dataclass
class TrainingPlan:
    """Active plan for an athlete. Regenerated wholesale, never versioned."""
    athlete_id: str
    phase: TrainingPhase
    weekly_swim_sessions: int
    weekly_bike_km: int
    weekly_run_km: int
    weekly_strength_sessions: int
    start_date: date
    end_date: Optional[date] = None
    auto_generated: bool = True
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if isinstance(self.phase, str):
            self.phase = TrainingPhase(self.phase)
        if isinstance(self.start_date, str):
            self.start_date = date.fromisoformat(self.start_date)
        if isinstance(self.end_date, str):
            self.end_date = date.fromisoformat(self.end_date)
        if isinstance(self.created_at, str):
            self.created_at = datetime.fromisoformat(self.created_at)

    @property
    def weekly_targets(self) -> Dict[str, int]:
        return {
            "swim": self.weekly_swim_sessions,
            "bike": self.weekly_bike_km,
            "run": self.weekly_run_km,
            "strength": self.weekly_strength_sessions,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "athlete_id": self.athlete_id,
            "phase": self.phase.value,
            "weekly_swim_sessions": self.weekly_swim_sessions,
            "weekly_bike_km": self.weekly_bike_km,
            "weekly_run_km": self.weekly_run_km,
            "weekly_strength_sessions": self.weekly_strength_sessions,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "auto_generated": self.auto_generated,
            "created_at": self.created_at.isoformat(),
        }


@dataclass
class PlannedSession:
    """
    A schedulable unit of training.

    ``completed_session_id`` points at the TrainingSessionLog that satisfied
    the session and is set exactly when ``status`` is completed.
    Distance is metres for swims and kilometres for everything else.
    """
    athlete_id: str
    date: date
    sport: str
    type: str
    duration: int
    distance: float = 0.0
    intensity: Intensity = Intensity.EASY
    description: str = ""
    status: SessionStatus = SessionStatus.PLANNED
    completed_session_id: Optional[str] = None
    origin: SessionOrigin = SessionOrigin.SYSTEM
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if isinstance(self.date, str):
            self.date = date.fromisoformat(self.date)
        if isinstance(self.intensity, str):
            self.intensity = Intensity(self.intensity)
        if isinstance(self.status, str):
            self.status = SessionStatus(self.status)
        if isinstance(self.origin, str):
            self.origin = SessionOrigin(self.origin)
        if isinstance(self.created_at, str):
            self.created_at = datetime.fromisoformat(self.created_at)

    @property
    def key(self) -> tuple[date, str]:
        """(date, sport) slot used for refresh collision checks."""
        return (self.date, self.sport.lower())

    def clone_to(self, new_date: date) -> "PlannedSession":
        """Fresh coach-origin planned copy of this session on ``new_date``."""
        return replace(
            self,
            date=new_date,
            status=SessionStatus.PLANNED,
            completed_session_id=None,
            origin=SessionOrigin.COACH,
            id=str(uuid.uuid4()),
            created_at=datetime.now(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "athlete_id": self.athlete_id,
            "date": self.date.isoformat(),
            "sport": self.sport,
            "type": self.type,
            "duration": self.duration,
            "distance": self.distance,
            "intensity": self.intensity.value,
            "description": self.description,
            "status": self.status.value,
            "completed_session_id": self.completed_session_id,
            "origin": self.origin.value,
            "created_at": self.created_at.isoformat(),
        }
