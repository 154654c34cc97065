"""Domain entities — pure data structures with no external dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    """Author of a chat message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True, slots=True)
class UserMessage:
    """A message submitted by a caller, addressed to a specific model."""

    uid: str
    model_name: str
    text: str


@dataclass(frozen=True, slots=True)
class SystemPrompt:
    """Instruction fragments that establish the model's persona.

    ``instruction`` concatenates ``mission_tone``, ``user_type``, ``role`` and
    ``role_flavor`` in that order with no separator; the provider-side prompt
    is written against this exact layout.  ``level`` travels with the prompt
    but is not part of the instruction.
    """

    mission_tone: str = ""
    user_type: str = ""
    role: str = ""
    role_flavor: str = ""
    level: str = ""
    history: str = ""

    @property
    def instruction(self) -> str:
        return self.mission_tone + self.user_type + self.role + self.role_flavor

    @property
    def history_message(self) -> str:
        return "History: " + self.history


@dataclass(frozen=True, slots=True)
class ChatMessage:
    """A single entry of a conversation."""

    role: Role
    content: str


@dataclass(frozen=True, slots=True)
class ModerationRequest:
    """Input for one call to the moderations endpoint."""

    api_key: str = field(repr=False)
    model_name: str
    input_text: str


@dataclass(frozen=True, slots=True)
class CompletionRequest:
    """Input for one call to the chat-completions endpoint."""

    api_key: str = field(repr=False)
    model_name: str
    messages: tuple[ChatMessage, ...]


@dataclass(frozen=True, slots=True)
class ModerationResult:
    """Outcome of a moderation call, taken from the last result entry."""

    flagged: bool
    categories: dict[str, bool] = field(default_factory=dict)
    category_scores: dict[str, float] = field(default_factory=dict)
    id: str = ""
    model: str = ""


@dataclass(frozen=True, slots=True)
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass(frozen=True, slots=True)
class CompletionChoice:
    index: int
    message: ChatMessage
    finish_reason: str | None = None


@dataclass(frozen=True, slots=True)
class Completion:
    """Decoded chat-completions response."""

    id: str
    model: str
    created: int
    choices: tuple[CompletionChoice, ...]
    usage: TokenUsage = field(default_factory=TokenUsage)

    @property
    def first_content(self) -> str:
        return self.choices[0].message.content


@dataclass(frozen=True, slots=True)
class ModelResponse:
    """Structured reply the model is instructed to return as JSON."""

    sender: str
    message_type: str
    content: str
