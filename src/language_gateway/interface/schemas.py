"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from language_gateway.domain.entities import ModelResponse, SystemPrompt, UserMessage


class _UserMessageBody(BaseModel):
    uid: str = Field(min_length=1)
    model: str
    message: str

    def to_entity(self) -> UserMessage:
        return UserMessage(uid=self.uid, model_name=self.model, text=self.message)


class ModerationCheckRequest(_UserMessageBody):
    """Request body for ``POST /moderations``."""


class ModerationCheckResponse(BaseModel):
    """Successful response from ``POST /moderations``."""

    flagged: bool


class SystemPromptBody(BaseModel):
    mission_tone: str = ""
    user_type: str = ""
    role: str = ""
    role_flavor: str = ""
    level: str = ""
    history: str = ""

    def to_entity(self) -> SystemPrompt:
        return SystemPrompt(**self.model_dump())


class ReplyRequest(_UserMessageBody):
    """Request body for ``POST /reply``.

    An empty ``message`` starts a new conversation from the system prompt.
    """

    message: str = ""
    system_prompt: SystemPromptBody = Field(default_factory=SystemPromptBody)


class ReplyResponse(BaseModel):
    """Successful response from ``POST /reply``."""

    model_config = ConfigDict(populate_by_name=True)

    sender: str
    message_type: str = Field(alias="type")
    content: str

    @classmethod
    def from_entity(cls, reply: ModelResponse) -> ReplyResponse:
        return cls(sender=reply.sender, message_type=reply.message_type, content=reply.content)


class ErrorResponse(BaseModel):
    """Standard error envelope returned on all failure paths."""

    status: str = "error"
    message: str
