"""
Onboarding and plan retrieval.

Handles:
- Partial saves while the athlete walks through the wizard
- Completion, which replaces the plan and refreshes the upcoming schedule
- Finish-time projection and goal realism for the stored profile
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional
import logging

from .base import BaseService
from .locks import AthleteLockRegistry, get_lock_registry
from .milestones import MilestoneService
from .planning import (
    DEFAULT_HORIZON_DAYS,
    FinishProjection,
    RealismCheck,
    check_goal_realism,
    generate_initial_plan,
    project_finish_time,
)
from .refresh import RefreshPlanner
from ..db.store import TrainingStore
from ..exceptions import PlanNotFoundError
from ..models.plans import TrainingPlan
from ..models.profile import AthleteProfile


@dataclass
class OnboardingResult:
    profile: AthleteProfile
    plan: TrainingPlan
    sessions_created: int
    projection: FinishProjection
    realism: RealismCheck

    def to_dict(self) -> Dict[str, Any]:
        return {
            "profile": self.profile.to_dict(),
            "plan": self.plan.to_dict(),
            "sessions_created": self.sessions_created,
            "projection": self.projection.model_dump(),
            "realism": self.realism.model_dump(),
        }


class OnboardingService(BaseService):

    def __init__(
        self,
        store: TrainingStore,
        milestones: MilestoneService,
        locks: Optional[AthleteLockRegistry] = None,
        horizon_days: int = DEFAULT_HORIZON_DAYS,
        refresher: Optional[RefreshPlanner] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(store, logger)
        self._milestones = milestones
        self._refresher = refresher or RefreshPlanner(
            store, locks=locks or get_lock_registry(), horizon_days=horizon_days
        )

    def get_profile(self, athlete_id: str) -> AthleteProfile:
        """Stored profile, or a fresh step-1 profile if the athlete has none yet."""
        return self._store.profiles.get(athlete_id) or AthleteProfile(athlete_id=athlete_id)

    def save_step(self, athlete_id: str, data: Dict[str, Any]) -> AthleteProfile:
        """Upsert the fields answered so far together with the step cursor."""
        profile = self.get_profile(athlete_id).merge(data)
        return self._store.profiles.save(profile)

    def complete(
        self,
        athlete_id: str,
        data: Optional[Dict[str, Any]] = None,
        today: Optional[date] = None,
    ) -> OnboardingResult:
        """
        Finish onboarding: replace the plan and rebuild upcoming sessions.

        Past, completed and skipped sessions are kept. A profile without a
        goal gets the baseline weekly volume.
        """
        today = today or date.today()
        profile = self.get_profile(athlete_id).merge(data or {})
        profile.completed = True
        self._store.profiles.save(profile)

        plan = generate_initial_plan(profile, today)
        self._store.plans.save(plan)

        refreshed = self._refresher.refresh(athlete_id, today)
        self._milestones.seed_milestones(athlete_id, profile, today)

        self.logger.info(
            f"Onboarding complete for athlete {athlete_id}: phase {plan.phase.value}, "
            f"{refreshed.inserted} sessions created, {refreshed.kept} kept"
        )
        return OnboardingResult(
            profile=profile,
            plan=plan,
            sessions_created=refreshed.inserted,
            projection=project_finish_time(profile),
            realism=check_goal_realism(profile),
        )

    def get_plan(self, athlete_id: str) -> TrainingPlan:
        plan = self._store.plans.get(athlete_id)
        if plan is None:
            raise PlanNotFoundError(athlete_id)
        return plan

    def projection(self, athlete_id: str) -> FinishProjection:
        return project_finish_time(self._require_profile(athlete_id))

    def realism(self, athlete_id: str) -> RealismCheck:
        return check_goal_realism(self._require_profile(athlete_id))
