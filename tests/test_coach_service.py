"""Tests for the coach service and athlete context."""

import pytest

from profit_agent.coach.advisory import AdvisoryResponse
from profit_agent.coach.context import build_athlete_context
from profit_agent.coach.prompts import PLAN_CHANGES_INSTRUCTIONS, build_system_prompt
from profit_agent.coach.service import CoachService
from profit_agent.exceptions import AdvisoryTimeoutError, AdvisoryUnavailableError
from profit_agent.models.plans import SessionOrigin, SessionStatus

from .conftest import ATHLETE, TODAY


@pytest.fixture
def coach(store, lifecycle, advisory):
    return CoachService(store, lifecycle, advisory)


def _snapshot(store):
    return sorted((s.id, s.date, s.status) for s in store.sessions.list_for_athlete(ATHLETE))


class TestAthleteContext:
    """Context handed to the advisory service."""

    def test_includes_profile_plan_and_upcoming_ids(self, store, lifecycle, onboarding, activity):
        onboarding.complete(ATHLETE, {"goal_type": "sub5", "race_date": "2026-05-11"}, today=TODAY)
        activity.log_body_metrics(ATHLETE, sleep=7, fatigue=4, on=TODAY)

        ctx = build_athlete_context(store, lifecycle, ATHLETE, TODAY)

        assert ctx.onboarding["goal_type"] == "sub5"
        assert ctx.plan["phase"] == "Peak"
        assert ctx.weeks_to_race == 10
        assert len(ctx.planned_sessions_list) == 14
        assert all("id" in s for s in ctx.planned_sessions_list)
        assert ctx.recent_body[0]["sleep"] == 7

    def test_serializes_camel_case(self, store, lifecycle):
        ctx = build_athlete_context(store, lifecycle, ATHLETE, TODAY)
        data = ctx.model_dump(mode="json", by_alias=True)
        assert "plannedSessionsList" in data
        assert "weekStats" in data
        assert data["canModifyPlan"] is True

    def test_prompt_offers_changes_except_nutrition(self, store, lifecycle):
        ctx = build_athlete_context(store, lifecycle, ATHLETE, TODAY)
        assert PLAN_CHANGES_INSTRUCTIONS in build_system_prompt(ctx, "chat")
        assert PLAN_CHANGES_INSTRUCTIONS not in build_system_prompt(ctx, "nutrition")


class TestChat:
    """Tests for CoachService.chat."""

    @pytest.mark.asyncio
    async def test_applies_changes_after_reply(self, store, coach, advisory, make_session):
        session = make_session(day=TODAY)
        store.sessions.save(session)
        advisory.advise.return_value = AdvisoryResponse(
            message=(
                "Your fatigue is high, let's move today's run to Wednesday.\n"
                "[PLAN_CHANGES]\n"
                f'[{{"action": "reschedule", "sessionId": "{session.id}", "newDate": "2026-03-04"}}]\n'
                "[/PLAN_CHANGES]"
            )
        )

        reply = await coach.chat(ATHLETE, "I'm wrecked", today=TODAY)

        assert reply.error is False
        assert "PLAN_CHANGES" not in reply.message
        assert len(reply.applied_changes) == 1
        assert store.sessions.get(session.id).status == SessionStatus.CANCELLED
        moved = store.sessions.list_for_athlete(ATHLETE, status=SessionStatus.PLANNED)
        assert [(s.date.isoformat(), s.origin) for s in moved] == [("2026-03-04", SessionOrigin.COACH)]

    @pytest.mark.asyncio
    async def test_plan_changes_field_honoured(self, store, coach, advisory):
        advisory.advise.return_value = AdvisoryResponse(
            message="Added an easy swim.",
            plan_changes=[{"action": "add", "date": "2026-03-03", "sport": "Swim"}],
        )

        reply = await coach.chat(ATHLETE, "Add a swim", today=TODAY)

        assert len(reply.applied_changes) == 1
        assert len(store.sessions.list_for_athlete(ATHLETE)) == 1

    @pytest.mark.asyncio
    async def test_echoed_block_applied_once(self, store, coach, advisory):
        add = '{"action": "add", "date": "2026-03-03", "sport": "Swim"}'
        advisory.advise.return_value = AdvisoryResponse(
            message=f"Added an easy swim. [PLAN_CHANGES][{add}][/PLAN_CHANGES]",
            plan_changes=[{"action": "add", "date": "2026-03-03", "sport": "Swim"}],
        )

        reply = await coach.summary(ATHLETE, today=TODAY)

        assert reply.message == "Added an easy swim."
        assert len(reply.applied_changes) == 1
        assert len(store.sessions.list_for_athlete(ATHLETE)) == 1

    @pytest.mark.asyncio
    async def test_records_both_turns(self, store, coach, advisory):
        await coach.chat(ATHLETE, "How am I doing?", today=TODAY)

        turns = coach.history(ATHLETE)
        assert [(t.role.value, t.content) for t in turns] == [
            ("user", "How am I doing?"),
            ("assistant", "Keep it up!"),
        ]

    @pytest.mark.asyncio
    async def test_history_sent_with_request(self, coach, advisory):
        await coach.chat(ATHLETE, "first", today=TODAY)
        await coach.chat(ATHLETE, "second", today=TODAY)

        request = advisory.advise.await_args.args[0]
        assert request.mode == "chat"
        assert request.user_message == "second"
        assert [t["content"] for t in request.chat_history] == ["first", "Keep it up!"]

    @pytest.mark.asyncio
    async def test_blank_message_uses_default_question(self, coach, advisory):
        await coach.chat(ATHLETE, "   ", today=TODAY)
        assert advisory.advise.await_args.args[0].user_message == "How is my training going?"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        AdvisoryTimeoutError(60),
        AdvisoryUnavailableError("Could not reach coach service"),
    ])
    async def test_failure_mutates_nothing(self, store, coach, advisory, make_session, error):
        store.sessions.save(make_session(day=TODAY))
        before = _snapshot(store)
        advisory.advise.side_effect = error

        reply = await coach.chat(ATHLETE, "Cancel today", today=TODAY)

        assert reply.error is True
        assert reply.message == "Sorry, I couldn't connect right now. Please try again."
        assert reply.applied_changes == []
        assert _snapshot(store) == before
        assert [t.role.value for t in coach.history(ATHLETE)] == ["user"]


class TestSummaryAndNutrition:

    @pytest.mark.asyncio
    async def test_summary_can_change_plan(self, store, coach, advisory):
        advisory.advise.return_value = AdvisoryResponse(
            message="Solid week.",
            plan_changes=[{"action": "add", "date": "2026-03-05", "sport": "Strength"}],
        )

        reply = await coach.summary(ATHLETE, today=TODAY)

        assert reply.mode == "summary"
        assert len(reply.applied_changes) == 1
        assert coach.history(ATHLETE) == []

    @pytest.mark.asyncio
    async def test_nutrition_never_changes_plan(self, store, coach, advisory):
        advisory.advise.return_value = AdvisoryResponse(
            message="Breakfast: oats.",
            plan_changes=[{"action": "add", "date": "2026-03-05", "sport": "Run"}],
        )

        reply = await coach.nutrition(ATHLETE, today=TODAY)

        assert reply.applied_changes == []
        assert store.sessions.list_for_athlete(ATHLETE) == []
        request = advisory.advise.await_args.args[0]
        assert request.athlete_context.can_modify_plan is False

    @pytest.mark.asyncio
    async def test_summary_failure_message(self, coach, advisory):
        advisory.advise.side_effect = AdvisoryTimeoutError(60)
        reply = await coach.summary(ATHLETE, today=TODAY)
        assert reply.error is True
        assert reply.message.startswith("Could not generate summary")
