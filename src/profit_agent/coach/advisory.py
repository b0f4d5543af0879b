"""
Advisory clients.

An advisory client takes an ``AdvisoryRequest`` and returns the raw
``AdvisoryResponse`` (prose plus any change objects). Parsing and applying
changes is the caller's job. Calls are bounded by a timeout and are never
retried: a failed call surfaces as an ``AdvisoryError``.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Literal, Optional
import asyncio
import logging

import httpx
from openai import APIConnectionError, APIError, APITimeoutError, AsyncOpenAI
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .context import AthleteContext
from .prompts import build_system_prompt
from ..config import Settings, get_settings
from ..exceptions import AdvisoryError, AdvisoryTimeoutError, AdvisoryUnavailableError

logger = logging.getLogger(__name__)

CoachMode = Literal["chat", "summary", "nutrition"]


class AdvisoryRequest(BaseModel):
    """Wire request: ``{mode, userMessage?, athleteContext, chatHistory?}``."""

    model_config = ConfigDict(populate_by_name=True)

    mode: CoachMode
    user_message: Optional[str] = Field(None, alias="userMessage")
    athlete_context: AthleteContext = Field(..., alias="athleteContext")
    chat_history: List[Dict[str, Any]] = Field(default_factory=list, alias="chatHistory")


class AdvisoryResponse(BaseModel):
    """Wire response: ``{message, planChanges}``. Change items stay unvalidated here."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = ""
    plan_changes: List[Any] = Field(default_factory=list, alias="planChanges")


class AdvisoryClient(ABC):

    @abstractmethod
    async def advise(self, request: AdvisoryRequest) -> AdvisoryResponse:
        """Send one request to the advisory service."""


class HttpAdvisoryClient(AdvisoryClient):
    """POSTs the request JSON to an external advisory endpoint."""

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not url:
            raise AdvisoryUnavailableError(
                message="Advisory URL not configured",
                details={"configuration_missing": "advisory_url"},
            )
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._client = client

    async def advise(self, request: AdvisoryRequest) -> AdvisoryResponse:
        payload = request.model_dump(mode="json", by_alias=True, exclude_none=True)
        try:
            if self._client is not None:
                response = await self._client.post(self.url, json=payload, timeout=self.timeout_seconds)
            else:
                async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                    response = await client.post(self.url, json=payload)
        except httpx.TimeoutException as e:
            logger.error(f"Advisory request timed out after {self.timeout_seconds}s: {e}")
            raise AdvisoryTimeoutError(self.timeout_seconds) from e
        except httpx.HTTPError as e:
            logger.error(f"Advisory request failed: {e}")
            raise AdvisoryUnavailableError(message=f"Could not reach coach service: {e}") from e

        if response.status_code >= 300:
            logger.error(f"Advisory service returned {response.status_code}: {response.text[:200]}")
            raise AdvisoryError(
                message=f"Coach service error ({response.status_code})",
                details={"status_code": response.status_code},
            )

        try:
            return AdvisoryResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            logger.error(f"Advisory response could not be parsed: {e}")
            raise AdvisoryError(message="Coach service returned an unreadable response") from e


class LLMAdvisoryClient(AdvisoryClient):
    """
    Talks to an OpenAI chat model directly.

    The change block comes back embedded in the model text; it is returned
    in ``message`` untouched and extracted by the coach service.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        max_tokens: int = 1024,
        temperature: float = 0.7,
        timeout_seconds: float = 60.0,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        if client is None and not api_key:
            raise AdvisoryUnavailableError(
                message="OPENAI_API_KEY not configured",
                details={"configuration_missing": "openai_api_key"},
            )
        self.client = client or AsyncOpenAI(api_key=api_key, max_retries=0)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.timeout_seconds = timeout_seconds

    def _build_messages(self, request: AdvisoryRequest) -> List[Dict[str, str]]:
        messages = [{"role": "system", "content": build_system_prompt(request.athlete_context, request.mode)}]
        for turn in request.chat_history:
            messages.append({"role": turn["role"], "content": turn["content"]})
        messages.append({"role": "user", "content": request.user_message or ""})
        return messages

    async def advise(self, request: AdvisoryRequest) -> AdvisoryResponse:
        try:
            response = await asyncio.wait_for(
                self.client.chat.completions.create(
                    model=self.model,
                    messages=self._build_messages(request),
                    max_tokens=self.max_tokens,
                    temperature=self.temperature,
                ),
                timeout=self.timeout_seconds,
            )
        except (asyncio.TimeoutError, APITimeoutError) as e:
            logger.error(f"LLM advisory timed out after {self.timeout_seconds}s")
            raise AdvisoryTimeoutError(self.timeout_seconds) from e
        except APIConnectionError as e:
            logger.error(f"LLM advisory connection error: {e}")
            raise AdvisoryUnavailableError(message=f"Connection to LLM service failed: {e}") from e
        except APIError as e:
            status = getattr(e, "status_code", None)
            logger.error(f"LLM advisory API error (status {status}): {e}")
            raise AdvisoryError(message=f"LLM API error: {e}", details={"status_code": status}) from e

        content = response.choices[0].message.content
        if not content:
            raise AdvisoryError(message="Empty response from LLM")
        return AdvisoryResponse(message=content)


def get_advisory_client(settings: Optional[Settings] = None) -> AdvisoryClient:
    """Build the advisory client selected by ``advisory_mode``."""
    settings = settings or get_settings()
    if settings.advisory_mode == "http":
        return HttpAdvisoryClient(
            url=settings.advisory_url,
            timeout_seconds=settings.advisory_timeout_seconds,
        )
    return LLMAdvisoryClient(
        api_key=settings.openai_api_key,
        model=settings.llm_model,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
        timeout_seconds=settings.advisory_timeout_seconds,
    )
