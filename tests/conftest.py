"""Shared fixtures: settings isolation, sample messages and mock-transport adapters."""

from __future__ import annotations

from typing import Any, Callable, Iterator

import httpx
import pytest
from helpers import BASE_URL

from language_gateway.domain.entities import SystemPrompt, UserMessage
from language_gateway.infrastructure.config import get_settings
from language_gateway.infrastructure.openai_http_adapter import OpenAIHttpAdapter

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> Iterator[None]:
    """Keep tests independent of the developer's environment and ``.env``."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("OPENAI_BASE_URL", BASE_URL)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def user_message() -> UserMessage:
    return UserMessage(uid="user-42", model_name="gpt-4o-mini", text="Hello there")


@pytest.fixture
def system_prompt() -> SystemPrompt:
    return SystemPrompt(
        mission_tone="Teach English kindly. ",
        user_type="The user is a beginner. ",
        role="You are a barista. ",
        role_flavor="You love latte art.",
        level="A1",
        history="user: hi\nassistant: hello",
    )


@pytest.fixture
def make_adapter() -> Iterator[Callable[[Handler], OpenAIHttpAdapter]]:
    """Build adapters whose HTTP client is served by *handler*."""
    clients: list[httpx.Client] = []

    def _make(handler: Handler) -> OpenAIHttpAdapter:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return OpenAIHttpAdapter(client, BASE_URL)

    yield _make
    for client in clients:
        client.close()
