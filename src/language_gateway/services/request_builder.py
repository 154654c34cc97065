"""Request builder — turns caller-supplied fields into typed provider requests."""

from __future__ import annotations

from language_gateway.domain.entities import (
    ChatMessage,
    CompletionRequest,
    ModerationRequest,
    Role,
    SystemPrompt,
)
from language_gateway.domain.exceptions import InvalidRequestError

_MISSING_ARGUMENTS = "one or more argument values are missing, check input"


def build_moderations_request(
    text: str, model_name: str, api_key: str
) -> ModerationRequest:
    """Return a moderation request; every argument is required."""
    if not text or not model_name or not api_key:
        raise InvalidRequestError(_MISSING_ARGUMENTS)

    return ModerationRequest(api_key=api_key, model_name=model_name, input_text=text)


def build_completions_request(
    model_name: str,
    system_prompt: SystemPrompt,
    user_text: str,
    api_key: str,
) -> CompletionRequest:
    """Return a chat-completions request for a new or ongoing conversation.

    An empty *user_text* starts a conversation: only the system instruction is
    sent.  Otherwise the history and the new message follow it as two user
    messages.
    """
    if not model_name or not api_key:
        raise InvalidRequestError(_MISSING_ARGUMENTS)

    messages = [ChatMessage(role=Role.SYSTEM, content=system_prompt.instruction)]
    if user_text:
        messages.append(ChatMessage(role=Role.USER, content=system_prompt.history_message))
        messages.append(ChatMessage(role=Role.USER, content="New Message: " + user_text))

    return CompletionRequest(
        api_key=api_key,
        model_name=model_name,
        messages=tuple(messages),
    )
