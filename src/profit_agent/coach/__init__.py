"""
Coach channel: context assembly, advisory clients and the plan change protocol.
"""

from .advisory import (
    AdvisoryClient,
    AdvisoryRequest,
    AdvisoryResponse,
    HttpAdvisoryClient,
    LLMAdvisoryClient,
    get_advisory_client,
)
from .changes import AddChange, CancelChange, PlanChange, RescheduleChange, SkipChange, parse_plan_changes
from .context import AthleteContext, build_athlete_context
from .protocol import ChangeReport, PlanChangeApplier, extract_plan_changes, parse_reply
from .service import CoachReply, CoachService

__all__ = [
    "AdvisoryClient",
    "AdvisoryRequest",
    "AdvisoryResponse",
    "HttpAdvisoryClient",
    "LLMAdvisoryClient",
    "get_advisory_client",
    "AddChange",
    "CancelChange",
    "PlanChange",
    "RescheduleChange",
    "SkipChange",
    "parse_plan_changes",
    "AthleteContext",
    "build_athlete_context",
    "ChangeReport",
    "PlanChangeApplier",
    "extract_plan_changes",
    "parse_reply",
    "CoachReply",
    "CoachService",
]
