"""Request and response schemas for the HTTP API."""

from datetime import date
import datetime as dt
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..models.profile import ExperienceLevel, GoalType


class ProfileFields(BaseModel):
    """Onboarding answers. Every field is optional; omitted fields are left as stored."""

    age: Optional[int] = Field(None, ge=10, le=100)
    weight: Optional[float] = Field(None, gt=0, description="kg")
    height: Optional[float] = Field(None, gt=0, description="cm")
    experience: Optional[ExperienceLevel] = None
    goal_type: Optional[GoalType] = None
    race_date: Optional[date] = None
    priority: Optional[str] = None
    hours_per_week: Optional[float] = Field(None, ge=0, le=40)
    pool_days_per_week: Optional[int] = Field(None, ge=0, le=7)
    gym_access: Optional[bool] = None
    can_swim_1900m: Optional[bool] = None
    five_k_time: Optional[int] = Field(None, gt=0, description="seconds")
    ftp: Optional[int] = Field(None, gt=0, description="watts")
    race_name: Optional[str] = None
    race_location: Optional[str] = None
    travel_notes: Optional[str] = None

    def updates(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True, mode="json")


class OnboardingStepRequest(ProfileFields):
    step: int = Field(..., ge=1, description="Wizard step the athlete is on")


class OnboardingCompleteRequest(ProfileFields):
    today: Optional[date] = Field(None, description="Override the plan start date")


class LogTrainingRequest(BaseModel):
    sport: str = Field(..., min_length=1)
    duration: int = Field(..., ge=0, description="minutes")
    distance: float = Field(0.0, ge=0, description="m for swims, km otherwise")
    type: str = "Z2"
    rpe: int = Field(5, ge=1, le=10)
    notes: str = ""
    date: Optional[dt.date] = None


class BodyMetricsRequest(BaseModel):
    weight: Optional[float] = Field(None, gt=0)
    sleep: Optional[float] = Field(None, ge=0, le=24)
    fatigue: Optional[float] = Field(None, ge=0, le=10)
    notes: str = ""
    date: Optional[dt.date] = None


class CoachChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000)


class InboundMessageRequest(BaseModel):
    channel: str = Field(..., min_length=1, description="telegram, whatsapp, ...")
    identifier: str = Field(..., min_length=1, description="Chat id or phone number")
    text: str


class InboundMessageResponse(BaseModel):
    reply: str


class ComplianceResponse(BaseModel):
    athlete_id: str
    start: Optional[date] = None
    end: Optional[date] = None
    compliance_percent: int


class SessionListResponse(BaseModel):
    sessions: List[Dict[str, Any]]
    total: int
