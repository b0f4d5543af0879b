"""Logged activity: training sessions and body metrics."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Optional
import uuid


@dataclass(frozen=True)
class TrainingSessionLog:
    """Append-only record of a training session the athlete actually did."""
    athlete_id: str
    date: date
    sport: str
    duration: int
    distance: float = 0.0
    type: str = "Z2"
    rpe: int = 5
    notes: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        # frozen dataclass: coerce through object.__setattr__
        if isinstance(self.date, str):
            object.__setattr__(self, "date", date.fromisoformat(self.date))
        if isinstance(self.created_at, str):
            object.__setattr__(self, "created_at", datetime.fromisoformat(self.created_at))

    @property
    def distance_unit(self) -> str:
        return "m" if self.sport.lower() == "swim" else "km"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "athlete_id": self.athlete_id,
            "date": self.date.isoformat(),
            "sport": self.sport,
            "type": self.type,
            "duration": self.duration,
            "distance": self.distance,
            "rpe": self.rpe,
            "notes": self.notes,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class BodyMetricsEntry:
    """Daily check-in. Logically one per athlete per day; latest entry wins."""
    athlete_id: str
    date: date
    weight: Optional[float] = None
    sleep: Optional[float] = None
    fatigue: Optional[float] = None
    notes: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if isinstance(self.date, str):
            object.__setattr__(self, "date", date.fromisoformat(self.date))
        if isinstance(self.created_at, str):
            object.__setattr__(self, "created_at", datetime.fromisoformat(self.created_at))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "athlete_id": self.athlete_id,
            "date": self.date.isoformat(),
            "weight": self.weight,
            "sleep": self.sleep,
            "fatigue": self.fatigue,
            "notes": self.notes,
            "created_at": self.created_at.isoformat(),
        }
