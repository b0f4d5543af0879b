"""
Milestone engine.

Achievement milestones fire from logged sessions; date-based milestones
fire when their date arrives. Both are one-way: once achieved, the
``achieved_at`` timestamp is never rewritten.
"""

from datetime import date, datetime, timedelta
from typing import List, Optional

from .base import BaseService
from .planning import PHASE_BREAKPOINTS
from ..models.activity import TrainingSessionLog
from ..models.milestones import (
    AchievementRule,
    Milestone,
    MilestoneRuleType,
    MilestoneStatus,
)
from ..models.profile import AthleteProfile


# Default performance milestones seeded at onboarding
DEFAULT_ACHIEVEMENTS = (
    ("First 1.9km swim", "🏊", AchievementRule(sport="Swim", min_distance=1900)),
    ("First 90km ride", "🚴", AchievementRule(sport="Bike", min_distance=90)),
    ("First half marathon", "🏃", AchievementRule(sport="Run", min_distance=21.1)),
    ("2 hour ride", "⏱", AchievementRule(sport="Bike", min_duration=120)),
)

PHASE_START_ICONS = {"Build": "🧱", "Peak": "⛰", "Taper": "🎯"}


def rule_matches(rule: Optional[AchievementRule], log: TrainingSessionLog) -> bool:
    """
    True when the log satisfies the rule.

    Sport must match (case-insensitive). Duration and distance thresholds
    are alternatives: either one that is set and reached fires the rule.
    A rule with neither threshold never fires.
    """
    if rule is None or rule.sport.lower() != log.sport.lower():
        return False
    if rule.min_duration is not None and log.duration >= rule.min_duration:
        return True
    if rule.min_distance is not None and log.distance >= rule.min_distance:
        return True
    return False


class MilestoneService(BaseService):

    def evaluate_log(self, athlete_id: str, log: TrainingSessionLog) -> List[Milestone]:
        """Achieve every upcoming achievement milestone the log satisfies."""
        upcoming = self._store.milestones.list_for_athlete(
            athlete_id,
            rule_type=MilestoneRuleType.ACHIEVEMENT_BASED,
            status=MilestoneStatus.UPCOMING,
        )
        achieved: List[Milestone] = []
        now = datetime.now()
        for milestone in upcoming:
            if not rule_matches(milestone.rule, log):
                continue
            # Conditional update: a concurrent evaluation may have won already
            if self._store.milestones.mark_achieved(milestone.id, now):
                milestone.status = MilestoneStatus.ACHIEVED
                milestone.achieved_at = now
                achieved.append(milestone)
                self.logger.info(f"Milestone '{milestone.title}' achieved by athlete {athlete_id}")
        return achieved

    def evaluate_dates(self, athlete_id: str, today: Optional[date] = None) -> List[Milestone]:
        """Achieve upcoming date-based milestones whose date has arrived."""
        today = today or date.today()
        upcoming = self._store.milestones.list_for_athlete(
            athlete_id,
            rule_type=MilestoneRuleType.DATE_BASED,
            status=MilestoneStatus.UPCOMING,
        )
        achieved: List[Milestone] = []
        now = datetime.now()
        for milestone in upcoming:
            if milestone.target_date and milestone.target_date <= today:
                if self._store.milestones.mark_achieved(milestone.id, now):
                    milestone.status = MilestoneStatus.ACHIEVED
                    milestone.achieved_at = now
                    achieved.append(milestone)
        return achieved

    def seed_milestones(
        self,
        athlete_id: str,
        profile: AthleteProfile,
        today: Optional[date] = None,
    ) -> List[Milestone]:
        """
        Replace the athlete's milestones with the default set.

        Phase-start and race-day milestones are only created when a race
        date is known. Those already in the past start out achieved.
        """
        today = today or date.today()
        milestones: List[Milestone] = []

        if profile.race_date:
            for weeks, phase in PHASE_BREAKPOINTS:
                next_phase = _phase_after(phase.value)
                milestones.append(Milestone(
                    athlete_id=athlete_id,
                    title=f"{next_phase} phase begins",
                    icon=PHASE_START_ICONS[next_phase],
                    rule_type=MilestoneRuleType.DATE_BASED,
                    target_date=phase_start(profile.race_date, weeks),
                ))
            race_title = f"Race day: {profile.race_name}" if profile.race_name else "Race day"
            milestones.append(Milestone(
                athlete_id=athlete_id,
                title=race_title,
                icon="🏁",
                rule_type=MilestoneRuleType.DATE_BASED,
                target_date=profile.race_date,
            ))

        for title, icon, rule in DEFAULT_ACHIEVEMENTS:
            milestones.append(Milestone(
                athlete_id=athlete_id,
                title=title,
                icon=icon,
                rule_type=MilestoneRuleType.ACHIEVEMENT_BASED,
                rule=rule,
            ))

        now = datetime.now()
        for milestone in milestones:
            if milestone.target_date and milestone.target_date <= today:
                milestone.status = MilestoneStatus.ACHIEVED
                milestone.achieved_at = now

        self._store.milestones.delete_all_for_athlete(athlete_id)
        self._store.milestones.save_many(milestones)
        self.logger.info(f"Seeded {len(milestones)} milestones for athlete {athlete_id}")
        return milestones

    def list_milestones(self, athlete_id: str) -> List[Milestone]:
        return self._store.milestones.list_for_athlete(athlete_id)


def phase_start(race_date: date, weeks: int) -> date:
    """First day on which floor(days-to-race / 7) is no longer above ``weeks``."""
    return race_date - timedelta(days=7 * (weeks + 1) - 1)


def _phase_after(phase: str) -> str:
    order = ["Base", "Build", "Peak", "Taper"]
    return order[order.index(phase) + 1]
