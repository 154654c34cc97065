"""Port: LLM gateway — defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from language_gateway.domain.entities import (
    Completion,
    CompletionRequest,
    ModerationRequest,
    ModerationResult,
)


class LlmGateway(Protocol):
    """Abstract contract for the two provider endpoints."""

    def moderate(self, request: ModerationRequest) -> ModerationResult:
        """Ask the provider whether ``request.input_text`` violates its policy."""
        ...

    def complete(self, request: CompletionRequest) -> Completion:
        """Send the conversation and return the decoded completion."""
        ...
