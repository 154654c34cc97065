"""Language-gateway use case — the two caller-facing pipelines.

Both pipelines are linear: build the request, invoke the provider, and (for
completions) decode the model's JSON reply.  A failure at any stage aborts the
rest of the pipeline and propagates to the caller unchanged.  The service
depends only on the :class:`LlmGateway` port; callers that do not want to
wire an adapter themselves use the module-level functions, which open and
close a fresh HTTP client per call.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from language_gateway.domain.entities import ModelResponse, SystemPrompt, UserMessage
from language_gateway.domain.exceptions import InvalidRequestError, ModelReplyDecodeError
from language_gateway.domain.ports.llm_gateway import LlmGateway
from language_gateway.infrastructure.config import get_settings
from language_gateway.infrastructure.openai_http_adapter import OpenAIHttpAdapter
from language_gateway.services.request_builder import (
    build_completions_request,
    build_moderations_request,
)

logger = logging.getLogger(__name__)


class LanguageGatewayService:
    """Runs moderation checks and model replies through an ``LlmGateway``."""

    def __init__(self, llm_gateway: LlmGateway) -> None:
        self._llm = llm_gateway

    def send_to_moderations(self, user_message: UserMessage, api_key: str) -> bool:
        """Return ``True`` when the provider flags the message."""
        log = _call_logger(user_message)

        request = build_moderations_request(
            user_message.text, user_message.model_name, api_key
        )
        result = self._llm.moderate(request)

        if result.flagged:
            flagged_categories = [name for name, hit in result.categories.items() if hit]
            log.info("Message flagged by moderation: %s", ", ".join(flagged_categories) or "-")
        else:
            log.debug("Message passed moderation")
        return result.flagged

    def send_to_model(
        self,
        user_message: UserMessage,
        system_prompt: SystemPrompt,
        api_key: str,
    ) -> ModelResponse:
        """Send the conversation to the model and decode its structured reply."""
        log = _call_logger(user_message)

        request = build_completions_request(
            user_message.model_name, system_prompt, user_message.text, api_key
        )
        completion = self._llm.complete(request)
        log.debug(
            "Completion %s used %d tokens",
            completion.id,
            completion.usage.total_tokens,
        )

        reply = parse_model_reply(completion.first_content)
        log.info("Model replied with a %r message", reply.message_type)
        return reply


# ── Reply decoding ──────────────────────────────────────────────────────────


def parse_model_reply(raw: str) -> ModelResponse:
    """Decode the model's reply text into a :class:`ModelResponse`.

    The model is instructed to answer with ``{"sender", "type", "content"}``.
    Markdown code fences around the object are tolerated; missing keys decode
    to empty strings.
    """
    text = raw.strip()

    if text.startswith("```"):
        text = text[3:]
        if text[:4].lower() == "json":
            text = text[4:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()

    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ModelReplyDecodeError(
            f"error while decoding model reply into ModelResponse: {exc}"
        ) from exc

    if not isinstance(data, dict):
        raise ModelReplyDecodeError(
            f"model reply is a JSON {type(data).__name__}, expected an object"
        )

    fields: dict[str, str] = {}
    for key in ("sender", "type", "content"):
        value = data.get(key, "")
        if not isinstance(value, str):
            raise ModelReplyDecodeError(
                f"model reply field {key!r} must be a string, got {type(value).__name__}"
            )
        fields[key] = value

    return ModelResponse(
        sender=fields["sender"],
        message_type=fields["type"],
        content=fields["content"],
    )


# ── One-shot entry points ───────────────────────────────────────────────────


def send_to_moderations(user_message: UserMessage, api_key: str | None = None) -> bool:
    """Check *user_message* against the moderation policy using a fresh client."""
    adapter = OpenAIHttpAdapter.from_settings(get_settings())
    try:
        return LanguageGatewayService(adapter).send_to_moderations(
            user_message, _resolve_api_key(api_key)
        )
    finally:
        adapter.close()


def send_to_model(
    user_message: UserMessage,
    system_prompt: SystemPrompt,
    api_key: str | None = None,
) -> ModelResponse:
    """Get a model-generated reply for *user_message* using a fresh client."""
    adapter = OpenAIHttpAdapter.from_settings(get_settings())
    try:
        return LanguageGatewayService(adapter).send_to_model(
            user_message, system_prompt, _resolve_api_key(api_key)
        )
    finally:
        adapter.close()


def _resolve_api_key(api_key: str | None) -> str:
    """Prefer the caller's key; fall back to ``OPENAI_API_KEY``."""
    if api_key:
        return api_key
    configured = get_settings().openai_api_key
    if configured is None:
        raise InvalidRequestError("no API key supplied and OPENAI_API_KEY is not set")
    return configured.get_secret_value()


class _CallLogger(logging.LoggerAdapter):  # type: ignore[type-arg]
    """Prefixes every record with the caller's uid and attaches it as ``extra``."""

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        kwargs["extra"] = {**(self.extra or {}), **kwargs.get("extra", {})}
        return f"[uid={kwargs['extra']['uid']}] {msg}", kwargs


def _call_logger(user_message: UserMessage) -> _CallLogger:
    return _CallLogger(logger, {"uid": user_message.uid})
