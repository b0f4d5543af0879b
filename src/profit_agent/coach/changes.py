"""
Plan change grammar emitted by the coach.

The advisory reply may carry a JSON array of change objects. Each is
validated against a discriminated union on ``action``; items that are not
objects, carry an unknown action or fail validation are dropped here and
never reach the schedule.
"""

from datetime import date
from typing import Annotated, Any, Iterable, List, Literal, Union
import logging

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..models.plans import Intensity, Sport

logger = logging.getLogger(__name__)


class _Change(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class CancelChange(_Change):
    action: Literal["cancel"]
    session_id: str = Field(..., alias="sessionId", min_length=1)


class SkipChange(_Change):
    """Coach "skip" is treated exactly like cancel."""
    action: Literal["skip"]
    session_id: str = Field(..., alias="sessionId", min_length=1)


class RescheduleChange(_Change):
    action: Literal["reschedule"]
    session_id: str = Field(..., alias="sessionId", min_length=1)
    new_date: date = Field(..., alias="newDate")


class AddChange(_Change):
    action: Literal["add"]
    date: date
    sport: str = Field(..., min_length=1)
    type: str = "Z2"
    duration: int = Field(45, gt=0)
    distance: float = Field(0.0, ge=0)
    intensity: Intensity = Intensity.EASY
    description: str = ""

    @field_validator("type", "duration", "distance", "intensity", "description", mode="before")
    @classmethod
    def _missing_means_default(cls, value: Any, info: ValidationInfo) -> Any:
        # Explicit nulls, empty strings and zero fall back to the defaults
        if value is None or value == "" or value == 0:
            return cls.model_fields[info.field_name].default
        return value

    @field_validator("sport")
    @classmethod
    def _normalize_sport(cls, value: str) -> str:
        return Sport.normalize(value)

    @field_validator("intensity", mode="before")
    @classmethod
    def _normalize_intensity(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().capitalize()
        return value


PlanChange = Annotated[
    Union[CancelChange, SkipChange, RescheduleChange, AddChange],
    Field(discriminator="action"),
]

KNOWN_ACTIONS = frozenset({"cancel", "skip", "reschedule", "add"})

_adapter = TypeAdapter(PlanChange)


def parse_plan_changes(raw: Iterable[Any]) -> List[PlanChange]:
    """Validate raw change objects, keeping order and dropping anything invalid."""
    changes: List[PlanChange] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            logger.warning(f"Dropping plan change #{index}: not an object")
            continue
        action = item.get("action")
        if isinstance(action, str):
            action = action.strip().lower()
            item = {**item, "action": action}
        if action not in KNOWN_ACTIONS:
            logger.warning(f"Dropping plan change #{index}: unknown action {action!r}")
            continue
        try:
            changes.append(_adapter.validate_python(item))
        except PydanticValidationError as e:
            logger.warning(f"Dropping invalid {action} change #{index}: {e.error_count()} error(s)")
    return changes
