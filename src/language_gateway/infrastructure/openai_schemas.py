"""Pydantic models for the provider's JSON wire format."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


# ── Request payloads ────────────────────────────────────────────────────────


class WireMessage(_WireModel):
    role: str
    content: str


class ModerationsPayload(_WireModel):
    """Body of ``POST /moderations``."""

    input: str
    model: str


class CompletionsPayload(_WireModel):
    """Body of ``POST /chat/completions``."""

    model: str
    messages: list[WireMessage]


# ── Response bodies ─────────────────────────────────────────────────────────


class ModerationEntry(_WireModel):
    # Category names contain slashes and dashes ("hate/threatening",
    # "self-harm"), and the provider adds new ones over time.
    categories: dict[str, bool] = Field(default_factory=dict)
    category_scores: dict[str, float] = Field(default_factory=dict)
    flagged: bool


class ModerationsResponse(_WireModel):
    id: str = ""
    model: str = ""
    # null or absent decodes to None so the adapter reports it as empty.
    results: list[ModerationEntry] | None = None


class CompletionsMessage(_WireModel):
    role: str = "assistant"
    content: str | None = None


class CompletionsChoice(_WireModel):
    index: int = 0
    message: CompletionsMessage
    finish_reason: str | None = None


class CompletionsUsage(_WireModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class CompletionsResponse(_WireModel):
    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: list[CompletionsChoice] | None = None
    usage: CompletionsUsage = Field(default_factory=CompletionsUsage)


class ProviderErrorDetail(_WireModel):
    message: str = ""
    type: str | None = None
    code: str | None = None


class ProviderErrorBody(_WireModel):
    """Error envelope returned alongside non-2xx responses."""

    error: ProviderErrorDetail
