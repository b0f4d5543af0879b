"""Tests for the HTTP API."""

from datetime import timedelta

import pytest

from profit_agent.coach.advisory import AdvisoryResponse
from profit_agent.exceptions import AdvisoryTimeoutError

from .conftest import ATHLETE, TODAY

BASE = f"/api/v1/athletes/{ATHLETE}"


@pytest.fixture
def onboarded(api_client):
    response = api_client.post(f"{BASE}/onboarding/complete", json={
        "experience": "intermediate",
        "goal_type": "sub5",
        "race_date": (TODAY + timedelta(weeks=10)).isoformat(),
        "can_swim_1900m": True,
        "ftp": 250,
        "five_k_time": 1500,
        "today": TODAY.isoformat(),
    })
    assert response.status_code == 200
    return response.json()


class TestHealth:

    def test_root(self, api_client):
        response = api_client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_health(self, api_client):
        assert api_client.get("/health").json() == {"status": "healthy"}


class TestOnboardingEndpoints:

    def test_new_athlete(self, api_client):
        response = api_client.get(f"{BASE}/onboarding")
        assert response.status_code == 200
        assert response.json()["step"] == 1

    def test_save_step(self, api_client):
        response = api_client.put(f"{BASE}/onboarding", json={"step": 2, "age": 35, "weight": 70})
        assert response.status_code == 200
        assert api_client.get(f"{BASE}/onboarding").json()["age"] == 35

    def test_save_step_validation(self, api_client):
        response = api_client.put(f"{BASE}/onboarding", json={"step": 2, "age": 5})
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_complete(self, onboarded):
        assert onboarded["plan"]["phase"] == "Peak"
        assert onboarded["sessions_created"] == 26
        assert onboarded["projection"]["time"] == "5:00"

    def test_complete_without_goal(self, api_client):
        response = api_client.post(f"{BASE}/onboarding/complete", json={"age": 30})
        assert response.status_code == 200
        assert response.json()["plan"]["weekly_bike_km"] == 60


class TestPlanEndpoints:

    def test_plan(self, api_client, onboarded):
        data = api_client.get(f"{BASE}/plan").json()
        assert data["weekly_targets"] == {"swim": 3, "bike": 70, "run": 30, "strength": 2}

    def test_plan_missing(self, api_client):
        response = api_client.get(f"{BASE}/plan")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "PLAN_NOT_FOUND"

    def test_projection_and_realism(self, api_client, onboarded):
        assert api_client.get(f"{BASE}/plan/projection").json()["swim"] == "35min"
        assert api_client.get(f"{BASE}/plan/realism").json()["realistic"] is True


class TestSessionEndpoints:

    def test_list_and_filter(self, api_client, onboarded):
        data = api_client.get(f"{BASE}/sessions", params={
            "start": TODAY.isoformat(), "end": (TODAY + timedelta(days=6)).isoformat(),
        }).json()
        assert data["total"] == 6

        planned = api_client.get(f"{BASE}/sessions", params={"status": "completed"}).json()
        assert planned["total"] == 0

    def test_skip_unskip(self, api_client, onboarded):
        session_id = api_client.get(f"{BASE}/sessions").json()["sessions"][0]["id"]

        response = api_client.post(f"{BASE}/sessions/{session_id}/skip")
        assert response.status_code == 200
        assert response.json()["status"] == "skipped"

        again = api_client.post(f"{BASE}/sessions/{session_id}/skip")
        assert again.status_code == 409
        assert again.json()["error"]["code"] == "INVALID_TRANSITION"

        assert api_client.post(f"{BASE}/sessions/{session_id}/unskip").json()["status"] == "planned"

    def test_skip_unknown(self, api_client):
        response = api_client.post(f"{BASE}/sessions/nope/skip")
        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "SESSION_NOT_FOUND"
        assert error["details"] == {"resource_type": "Planned session", "resource_id": "nope"}

    def test_refresh(self, api_client, onboarded):
        response = api_client.post(
            f"{BASE}/sessions/refresh", params={"today": (TODAY + timedelta(days=3)).isoformat()}
        )
        assert response.status_code == 200
        assert response.json()["kept"] == 3

    def test_compliance(self, api_client, onboarded):
        api_client.post(f"{BASE}/logs", json={
            "sport": "swim", "duration": 45, "distance": 1500, "date": TODAY.isoformat(),
        })
        data = api_client.get(f"{BASE}/sessions/compliance", params={
            "start": TODAY.isoformat(), "end": (TODAY + timedelta(days=1)).isoformat(),
        }).json()
        assert data["compliance_percent"] == 50

    def test_week(self, api_client, onboarded):
        data = api_client.get(f"{BASE}/sessions/week", params={"today": TODAY.isoformat()}).json()
        assert data["week_start"] == "2026-03-01"
        assert data["total"] == 6


class TestActivityEndpoints:

    def test_log_completes_session(self, api_client, onboarded):
        response = api_client.post(f"{BASE}/logs", json={
            "sport": "Swim", "duration": 45, "distance": 2000, "rpe": 6, "date": TODAY.isoformat(),
        })
        assert response.status_code == 201
        data = response.json()
        assert data["completed_session"]["status"] == "completed"
        assert data["completed_session"]["completed_session_id"] == data["log"]["id"]
        assert [m["title"] for m in data["achieved_milestones"]] == ["First 1.9km swim"]

    def test_log_validation(self, api_client):
        response = api_client.post(f"{BASE}/logs", json={"sport": "Run", "duration": 30, "rpe": 11})
        assert response.status_code == 422

    def test_list_logs(self, api_client):
        api_client.post(f"{BASE}/logs", json={"sport": "Run", "duration": 30})
        logs = api_client.get(f"{BASE}/logs").json()
        assert len(logs) == 1

    def test_body_metrics(self, api_client):
        response = api_client.post(f"{BASE}/body-metrics", json={"sleep": 7.5, "fatigue": 4})
        assert response.status_code == 201
        assert api_client.get(f"{BASE}/body-metrics").json()[0]["sleep"] == 7.5


class TestMilestoneEndpoints:

    def test_list(self, api_client, onboarded):
        milestones = api_client.get(f"{BASE}/milestones", params={"today": TODAY.isoformat()}).json()
        assert len(milestones) == 8


class TestCoachEndpoints:

    def test_chat(self, api_client, advisory):
        response = api_client.post(f"{BASE}/coach/chat", json={"message": "How am I doing?"})
        assert response.status_code == 200
        assert response.json()["message"] == "Keep it up!"
        assert len(api_client.get(f"{BASE}/coach/chat").json()) == 2

    def test_chat_applies_changes(self, api_client, advisory, onboarded):
        advisory.advise.return_value = AdvisoryResponse(
            message="Added a recovery swim.",
            plan_changes=[{"action": "add", "date": TODAY.isoformat(), "sport": "Swim"}],
        )
        data = api_client.post(f"{BASE}/coach/chat", json={"message": "more swimming"}).json()
        assert len(data["applied_changes"]) == 1

    def test_chat_failure_is_conversational(self, api_client, advisory):
        advisory.advise.side_effect = AdvisoryTimeoutError(60)
        response = api_client.post(f"{BASE}/coach/chat", json={"message": "hi"})
        assert response.status_code == 200
        assert response.json()["error"] is True

    def test_empty_message_rejected(self, api_client):
        assert api_client.post(f"{BASE}/coach/chat", json={"message": ""}).status_code == 422

    def test_summary_and_nutrition(self, api_client):
        assert api_client.post(f"{BASE}/coach/summary").json()["mode"] == "summary"
        assert api_client.post(f"{BASE}/coach/nutrition").json()["mode"] == "nutrition"


class TestMessagingEndpoints:

    def test_pair_and_use(self, api_client):
        code = api_client.post(f"{BASE}/pairing-code").json()["code"]

        paired = api_client.post("/api/v1/messaging/inbound", json={
            "channel": "telegram", "identifier": "42", "text": code,
        })
        assert paired.json()["reply"].startswith("✅ Connected!")

        reply = api_client.post("/api/v1/messaging/inbound", json={
            "channel": "telegram", "identifier": "42", "text": "help",
        }).json()["reply"]
        assert "Pro Fit Agent Commands" in reply

    def test_unpaired(self, api_client):
        reply = api_client.post("/api/v1/messaging/inbound", json={
            "channel": "telegram", "identifier": "43", "text": "today",
        }).json()["reply"]
        assert reply.startswith("👋 Welcome")
