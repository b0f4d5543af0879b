"""Athlete profile collected during onboarding."""

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional


class ExperienceLevel(str, Enum):
    """Self-reported training background."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class GoalType(str, Enum):
    """Race goal tiers, slowest to fastest."""
    FINISH_STRONG = "finish_strong"  # First 70.3 - finish strong
    SUB5 = "sub5"                    # Sub 5:00
    SUB4_30 = "sub4_30"              # Sub 4:30
    HYBRID = "hybrid"                # Hybrid strength + endurance


@dataclass
class AthleteProfile:
    """
    Onboarding attributes for one athlete.

    One row per athlete with upsert semantics. While onboarding is in
    progress ``step`` tracks the wizard cursor and ``completed`` is False.
    """
    athlete_id: str
    step: int = 1
    completed: bool = False

    # Body
    age: Optional[int] = None
    weight: Optional[float] = None  # kg
    height: Optional[float] = None  # cm

    # Goal
    experience: Optional[ExperienceLevel] = None
    goal_type: Optional[GoalType] = None
    race_date: Optional[date] = None
    priority: Optional[str] = None

    # Availability
    hours_per_week: Optional[float] = None
    pool_days_per_week: Optional[int] = None
    gym_access: bool = False

    # Benchmarks
    can_swim_1900m: bool = False
    five_k_time: Optional[int] = None  # seconds
    ftp: Optional[int] = None          # watts

    # Race logistics
    race_name: Optional[str] = None
    race_location: Optional[str] = None
    travel_notes: Optional[str] = None

    updated_at: Optional[datetime] = None

    def __post_init__(self):
        if isinstance(self.experience, str):
            self.experience = ExperienceLevel(self.experience)
        if isinstance(self.goal_type, str):
            self.goal_type = GoalType(self.goal_type)
        if isinstance(self.race_date, str):
            self.race_date = date.fromisoformat(self.race_date)
        if isinstance(self.updated_at, str):
            self.updated_at = datetime.fromisoformat(self.updated_at)

    @property
    def is_beginner(self) -> bool:
        return self.experience == ExperienceLevel.BEGINNER

    def merge(self, updates: Dict[str, Any]) -> "AthleteProfile":
        """Return a copy with non-None ``updates`` applied (partial onboarding save)."""
        known = {f.name for f in fields(self)}
        data = self.to_dict()
        for key, value in updates.items():
            if key in known and key != "athlete_id" and value is not None:
                data[key] = value
        return AthleteProfile.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "athlete_id": self.athlete_id,
            "step": self.step,
            "completed": self.completed,
            "age": self.age,
            "weight": self.weight,
            "height": self.height,
            "experience": self.experience.value if self.experience else None,
            "goal_type": self.goal_type.value if self.goal_type else None,
            "race_date": self.race_date.isoformat() if self.race_date else None,
            "priority": self.priority,
            "hours_per_week": self.hours_per_week,
            "pool_days_per_week": self.pool_days_per_week,
            "gym_access": self.gym_access,
            "can_swim_1900m": self.can_swim_1900m,
            "five_k_time": self.five_k_time,
            "ftp": self.ftp,
            "race_name": self.race_name,
            "race_location": self.race_location,
            "travel_notes": self.travel_notes,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AthleteProfile":
        """Create from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})
