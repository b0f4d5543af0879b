"""Milestone models: calendar- and performance-triggered achievements."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional
import uuid


class MilestoneRuleType(str, Enum):
    DATE_BASED = "date_based"
    ACHIEVEMENT_BASED = "achievement_based"


class MilestoneStatus(str, Enum):
    UPCOMING = "upcoming"
    ACHIEVED = "achieved"


@dataclass(frozen=True)
class AchievementRule:
    """Performance threshold. Duration and distance are alternative triggers."""
    sport: str
    min_duration: Optional[int] = None     # minutes
    min_distance: Optional[float] = None   # m for swims, km otherwise

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"sport": self.sport}
        if self.min_duration is not None:
            data["min_duration"] = self.min_duration
        if self.min_distance is not None:
            data["min_distance"] = self.min_distance
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AchievementRule":
        return cls(
            sport=data["sport"],
            min_duration=data.get("min_duration"),
            min_distance=data.get("min_distance"),
        )


@dataclass
class Milestone:
    """A one-way achievement flag (upcoming -> achieved)."""
    athlete_id: str
    title: str
    rule_type: MilestoneRuleType
    icon: str = ""
    target_date: Optional[date] = None
    rule: Optional[AchievementRule] = None
    status: MilestoneStatus = MilestoneStatus.UPCOMING
    achieved_at: Optional[datetime] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if isinstance(self.rule_type, str):
            self.rule_type = MilestoneRuleType(self.rule_type)
        if isinstance(self.status, str):
            self.status = MilestoneStatus(self.status)
        if isinstance(self.target_date, str):
            self.target_date = date.fromisoformat(self.target_date)
        if isinstance(self.achieved_at, str):
            self.achieved_at = datetime.fromisoformat(self.achieved_at)
        if isinstance(self.rule, dict):
            self.rule = AchievementRule.from_dict(self.rule)

    @property
    def is_achieved(self) -> bool:
        return self.status == MilestoneStatus.ACHIEVED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "athlete_id": self.athlete_id,
            "title": self.title,
            "icon": self.icon,
            "rule_type": self.rule_type.value,
            "target_date": self.target_date.isoformat() if self.target_date else None,
            "rule": self.rule.to_dict() if self.rule else None,
            "status": self.status.value,
            "achieved_at": self.achieved_at.isoformat() if self.achieved_at else None,
        }
