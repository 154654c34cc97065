"""OpenAI HTTP adapter — implements the LlmGateway port over raw HTTP.

Each call is one blocking ``POST`` with no retries.  Every stage of the round
trip (encode, build, send, read, decode) raises its own domain exception so
callers can tell where a call failed.
"""

from __future__ import annotations

import logging
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticSerializationError

from language_gateway.domain.entities import (
    ChatMessage,
    Completion,
    CompletionChoice,
    CompletionRequest,
    ModerationRequest,
    ModerationResult,
    Role,
    TokenUsage,
)
from language_gateway.domain.exceptions import (
    DeserializationError,
    EmptyResultsError,
    NetworkError,
    ProviderStatusError,
    RequestConstructionError,
    ResponseReadError,
    SerializationError,
)
from language_gateway.infrastructure.config import Settings
from language_gateway.infrastructure.openai_schemas import (
    CompletionsPayload,
    CompletionsResponse,
    ModerationsPayload,
    ModerationsResponse,
    ProviderErrorBody,
    WireMessage,
)

logger = logging.getLogger(__name__)

_MODERATIONS_PATH = "/moderations"
_CHAT_COMPLETIONS_PATH = "/chat/completions"

_ResponseT = TypeVar("_ResponseT", bound=BaseModel)


class OpenAIHttpAdapter:
    """Concrete ``LlmGateway`` backed by the OpenAI moderations and chat APIs."""

    def __init__(
        self,
        client: httpx.Client,
        base_url: str,
        *,
        owns_client: bool = False,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")
        self._owns_client = owns_client

    @classmethod
    def from_settings(cls, settings: Settings) -> OpenAIHttpAdapter:
        """Build an adapter with its own client, configured from *settings*."""
        client = httpx.Client(timeout=settings.request_timeout)
        return cls(client, settings.openai_base_url, owns_client=True)

    def moderate(self, request: ModerationRequest) -> ModerationResult:
        """POST /moderations → result of the **last** entry in ``results``."""
        payload = ModerationsPayload(input=request.input_text, model=request.model_name)
        raw = self._post(_MODERATIONS_PATH, payload, request.api_key)
        response = self._decode(raw, ModerationsResponse, "ModerationsResponse")

        if not response.results:
            raise EmptyResultsError("no results returned from moderations api")

        # The provider may return several entries; only the last one is consulted.
        last = response.results[-1]
        return ModerationResult(
            flagged=last.flagged,
            categories=dict(last.categories),
            category_scores=dict(last.category_scores),
            id=response.id,
            model=response.model,
        )

    def complete(self, request: CompletionRequest) -> Completion:
        """POST /chat/completions → decoded :class:`Completion`."""
        payload = CompletionsPayload(
            model=request.model_name,
            messages=[
                WireMessage(role=m.role.value, content=m.content)
                for m in request.messages
            ],
        )
        raw = self._post(_CHAT_COMPLETIONS_PATH, payload, request.api_key)
        response = self._decode(raw, CompletionsResponse, "CompletionsResponse")

        if not response.choices:
            raise EmptyResultsError("no choices returned from chat completions api")

        try:
            choices = tuple(
                CompletionChoice(
                    index=choice.index,
                    message=ChatMessage(
                        role=Role(choice.message.role),
                        content=choice.message.content or "",
                    ),
                    finish_reason=choice.finish_reason,
                )
                for choice in response.choices
            )
        except ValueError as exc:
            raise DeserializationError(
                f"error while decoding response body: unexpected message role: {exc}"
            ) from exc

        return Completion(
            id=response.id,
            model=response.model,
            created=response.created,
            choices=choices,
            usage=TokenUsage(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            ),
        )

    def close(self) -> None:
        """Release the HTTP client if this adapter created it."""
        if self._owns_client:
            self._client.close()

    # ── Round trip ──────────────────────────────────────────────────────

    def _post(self, path: str, payload: BaseModel, api_key: str) -> bytes:
        """Encode *payload*, POST it, and return the raw 2xx response body."""
        url = f"{self._base_url}{path}"

        try:
            body = payload.model_dump_json().encode("utf-8")
        except PydanticSerializationError as exc:
            raise SerializationError(f"error while encoding request body: {exc}") from exc

        try:
            http_request = self._client.build_request(
                "POST",
                url,
                content=body,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {api_key}",
                },
            )
        except (httpx.InvalidURL, ValueError) as exc:
            raise RequestConstructionError(f"error while creating request: {exc}") from exc

        logger.debug("POST %s (%d bytes)", url, len(body))

        try:
            response = self._client.send(http_request, stream=True)
        except httpx.TransportError as exc:
            raise NetworkError(f"error while making a request to {url}: {exc}") from exc

        try:
            raw = response.read()
        except (httpx.HTTPError, httpx.StreamError) as exc:
            raise ResponseReadError(f"error while reading response body: {exc}") from exc
        finally:
            response.close()

        if not response.is_success:
            detail = _provider_error_message(raw) or response.reason_phrase
            logger.warning("Provider returned HTTP %d for %s: %s", response.status_code, url, detail)
            raise ProviderStatusError(
                f"provider returned HTTP {response.status_code} for {url}: {detail}",
                status_code=response.status_code,
            )

        return raw

    @staticmethod
    def _decode(raw: bytes, model: type[_ResponseT], name: str) -> _ResponseT:
        try:
            return model.model_validate_json(raw)
        except ValidationError as exc:
            raise DeserializationError(
                f"error while decoding response body into {name}: {exc}"
            ) from exc


def _provider_error_message(raw: bytes) -> str:
    """Extract ``error.message`` from a provider error body, if there is one."""
    try:
        return ProviderErrorBody.model_validate_json(raw).error.message
    except ValidationError:
        return raw.decode("utf-8", errors="replace").strip()[:200]
