"""Tests for the advisory clients."""

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from openai import APIConnectionError

from profit_agent.coach.advisory import (
    AdvisoryRequest,
    HttpAdvisoryClient,
    LLMAdvisoryClient,
    get_advisory_client,
)
from profit_agent.coach.context import build_athlete_context
from profit_agent.config import Settings
from profit_agent.exceptions import AdvisoryError, AdvisoryTimeoutError, AdvisoryUnavailableError

from .conftest import ATHLETE, TODAY

ADVISORY_URL = "https://coach.example.test/advise"


@pytest.fixture
def request_(store, lifecycle):
    return AdvisoryRequest(
        mode="chat",
        user_message="Should I run today?",
        athlete_context=build_athlete_context(store, lifecycle, ATHLETE, TODAY),
        chat_history=[{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}],
    )


def _http_client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestHttpAdvisoryClient:
    """Tests for the external advisory endpoint client."""

    @pytest.mark.asyncio
    async def test_posts_camel_case_payload(self, request_):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={
                "message": "Yes, easy.",
                "planChanges": [{"action": "cancel", "sessionId": "x"}],
            })

        async with _http_client(handler) as client:
            response = await HttpAdvisoryClient(ADVISORY_URL, client=client).advise(request_)

        assert seen["body"]["mode"] == "chat"
        assert seen["body"]["userMessage"] == "Should I run today?"
        assert "plannedSessionsList" in seen["body"]["athleteContext"]
        assert len(seen["body"]["chatHistory"]) == 2
        assert response.message == "Yes, easy."
        assert response.plan_changes == [{"action": "cancel", "sessionId": "x"}]

    @pytest.mark.asyncio
    async def test_missing_plan_changes_defaults_empty(self, request_):
        async with _http_client(lambda r: httpx.Response(200, json={"message": "ok"})) as client:
            response = await HttpAdvisoryClient(ADVISORY_URL, client=client).advise(request_)
        assert response.plan_changes == []

    @pytest.mark.asyncio
    async def test_non_2xx_is_error(self, request_):
        async with _http_client(lambda r: httpx.Response(500, text="boom")) as client:
            with pytest.raises(AdvisoryError) as exc_info:
                await HttpAdvisoryClient(ADVISORY_URL, client=client).advise(request_)
        assert exc_info.value.details["status_code"] == 500

    @pytest.mark.asyncio
    async def test_timeout(self, request_):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with _http_client(handler) as client:
            with pytest.raises(AdvisoryTimeoutError):
                await HttpAdvisoryClient(ADVISORY_URL, timeout_seconds=1, client=client).advise(request_)

    @pytest.mark.asyncio
    async def test_connection_error(self, request_):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with _http_client(handler) as client:
            with pytest.raises(AdvisoryUnavailableError):
                await HttpAdvisoryClient(ADVISORY_URL, client=client).advise(request_)

    @pytest.mark.asyncio
    async def test_unreadable_body(self, request_):
        async with _http_client(lambda r: httpx.Response(200, text="not json")) as client:
            with pytest.raises(AdvisoryError):
                await HttpAdvisoryClient(ADVISORY_URL, client=client).advise(request_)

    def test_requires_url(self):
        with pytest.raises(AdvisoryUnavailableError):
            HttpAdvisoryClient("")


def _openai_mock(content="Easy day today."):
    completion = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=completion)
    return client


class TestLLMAdvisoryClient:
    """Tests for the direct OpenAI client."""

    @pytest.mark.asyncio
    async def test_builds_messages(self, request_):
        openai_client = _openai_mock()
        llm = LLMAdvisoryClient(api_key="", model="gpt-4o-mini", client=openai_client)

        response = await llm.advise(request_)

        assert response.message == "Easy day today."
        assert response.plan_changes == []
        kwargs = openai_client.chat.completions.create.await_args.kwargs
        roles = [m["role"] for m in kwargs["messages"]]
        assert roles == ["system", "user", "assistant", "user"]
        assert kwargs["messages"][-1]["content"] == "Should I run today?"
        assert "[PLAN_CHANGES]" in kwargs["messages"][0]["content"]
        assert kwargs["model"] == "gpt-4o-mini"

    @pytest.mark.asyncio
    async def test_timeout(self, request_):
        async def slow(**kwargs):
            await asyncio.sleep(1)

        openai_client = MagicMock()
        openai_client.chat.completions.create = slow
        llm = LLMAdvisoryClient(api_key="", client=openai_client, timeout_seconds=0.01)

        with pytest.raises(AdvisoryTimeoutError):
            await llm.advise(request_)

    @pytest.mark.asyncio
    async def test_connection_error(self, request_):
        openai_client = MagicMock()
        openai_client.chat.completions.create = AsyncMock(
            side_effect=APIConnectionError(request=httpx.Request("POST", "https://api.openai.com"))
        )
        llm = LLMAdvisoryClient(api_key="", client=openai_client)

        with pytest.raises(AdvisoryUnavailableError):
            await llm.advise(request_)

    @pytest.mark.asyncio
    async def test_empty_content(self, request_):
        llm = LLMAdvisoryClient(api_key="", client=_openai_mock(content=""))
        with pytest.raises(AdvisoryError):
            await llm.advise(request_)

    def test_requires_api_key(self):
        with pytest.raises(AdvisoryUnavailableError):
            LLMAdvisoryClient(api_key="")


class TestGetAdvisoryClient:

    def test_http_mode(self):
        settings = Settings(advisory_mode="http", advisory_url=ADVISORY_URL)
        assert isinstance(get_advisory_client(settings), HttpAdvisoryClient)

    def test_llm_mode(self):
        settings = Settings(advisory_mode="llm", openai_api_key="sk-test")
        assert isinstance(get_advisory_client(settings), LLMAdvisoryClient)
