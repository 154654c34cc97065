from __future__ import annotations

import json
from typing import Any, Callable, Iterator

import httpx
import pytest
from helpers import API_KEY, completion_body, moderation_body, reply_json
from fastapi.testclient import TestClient

from language_gateway.infrastructure.config import get_settings
from language_gateway.infrastructure.openai_http_adapter import OpenAIHttpAdapter
from language_gateway.interface.app import create_app
from language_gateway.interface.dependencies import get_service
from language_gateway.services.language_gateway import LanguageGatewayService

Handler = Callable[[httpx.Request], httpx.Response]

MODERATION_BODY = {"uid": "user-42", "model": "omni-moderation-latest", "message": "hi"}
REPLY_BODY = {
    "uid": "user-42",
    "model": "gpt-4o-mini",
    "message": "How much is a latte?",
    "system_prompt": {"mission_tone": "Be kind. ", "role": "You are a barista.", "history": ""},
}


@pytest.fixture
def provider() -> dict[str, Any]:
    """Mutable stand-in for the provider: set ``handler`` per test."""
    return {
        "handler": lambda request: httpx.Response(500),
        "requests": [],
    }


@pytest.fixture
def client(
    provider: dict[str, Any], make_adapter: Callable[[Handler], OpenAIHttpAdapter]
) -> Iterator[TestClient]:
    def handler(request: httpx.Request) -> httpx.Response:
        provider["requests"].append(request)
        return provider["handler"](request)

    app = create_app()
    service = LanguageGatewayService(make_adapter(handler))
    app.dependency_overrides[get_service] = lambda: service
    with TestClient(app) as test_client:
        yield test_client


def _auth(key: str = API_KEY) -> dict[str, str]:
    return {"Authorization": f"Bearer {key}"}


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


@pytest.mark.parametrize("path", ["/moderations", "/reply"])
def test_error_envelope_documented(client: TestClient, path: str) -> None:
    responses = client.get("/openapi.json").json()["paths"][path]["post"]["responses"]
    for code in ("401", "422", "502"):
        schema = responses[code]["content"]["application/json"]["schema"]
        assert schema == {"$ref": "#/components/schemas/ErrorResponse"}


class TestModerationsRoute:
    def test_flagged(self, client: TestClient, provider: dict[str, Any]) -> None:
        provider["handler"] = lambda _: httpx.Response(200, json=moderation_body(False, True))

        resp = client.post("/moderations", json=MODERATION_BODY, headers=_auth())

        assert resp.status_code == 200
        assert resp.json() == {"flagged": True}
        (outbound,) = provider["requests"]
        assert outbound.headers["Authorization"] == f"Bearer {API_KEY}"

    def test_missing_key_is_401(self, client: TestClient, provider: dict[str, Any]) -> None:
        resp = client.post("/moderations", json=MODERATION_BODY)

        assert resp.status_code == 401
        assert resp.json()["status"] == "error"
        assert provider["requests"] == []

    def test_configured_key_is_used(
        self,
        client: TestClient,
        provider: dict[str, Any],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "sk-configured")
        get_settings.cache_clear()
        provider["handler"] = lambda _: httpx.Response(200, json=moderation_body(False))

        resp = client.post("/moderations", json=MODERATION_BODY)

        assert resp.status_code == 200
        assert provider["requests"][0].headers["Authorization"] == "Bearer sk-configured"

    def test_empty_message_is_422(self, client: TestClient) -> None:
        resp = client.post("/moderations", json={**MODERATION_BODY, "message": ""}, headers=_auth())

        assert resp.status_code == 422
        assert "missing" in resp.json()["message"]

    def test_body_validation_is_422(self, client: TestClient) -> None:
        resp = client.post("/moderations", json={"uid": "u"}, headers=_auth())
        assert resp.status_code == 422
        assert resp.json()["status"] == "error"

    def test_empty_results_is_502(self, client: TestClient, provider: dict[str, Any]) -> None:
        provider["handler"] = lambda _: httpx.Response(200, json=moderation_body())

        resp = client.post("/moderations", json=MODERATION_BODY, headers=_auth())

        assert resp.status_code == 502
        assert resp.json() == {
            "status": "error",
            "message": "no results returned from moderations api",
        }

    def test_provider_rejects_key(self, client: TestClient, provider: dict[str, Any]) -> None:
        provider["handler"] = lambda _: httpx.Response(
            401, json={"error": {"message": "Incorrect API key provided"}}
        )

        resp = client.post("/moderations", json=MODERATION_BODY, headers=_auth("sk-wrong"))

        assert resp.status_code == 401
        assert "Incorrect API key provided" in resp.json()["message"]

    def test_provider_outage_is_502(self, client: TestClient, provider: dict[str, Any]) -> None:
        provider["handler"] = lambda _: httpx.Response(500, text="boom")

        resp = client.post("/moderations", json=MODERATION_BODY, headers=_auth())

        assert resp.status_code == 502


class TestReplyRoute:
    def test_reply(self, client: TestClient, provider: dict[str, Any]) -> None:
        provider["handler"] = lambda _: httpx.Response(
            200, json=completion_body(reply_json(content="Three euros."))
        )

        resp = client.post("/reply", json=REPLY_BODY, headers=_auth())

        assert resp.status_code == 200
        assert resp.json() == {"sender": "bot", "type": "text", "content": "Three euros."}

    def test_new_conversation_sends_system_prompt_only(
        self, client: TestClient, provider: dict[str, Any]
    ) -> None:
        provider["handler"] = lambda _: httpx.Response(200, json=completion_body(reply_json()))

        resp = client.post("/reply", json={**REPLY_BODY, "message": ""}, headers=_auth())

        assert resp.status_code == 200
        outbound = json.loads(provider["requests"][0].content)
        assert outbound["messages"] == [
            {"role": "system", "content": "Be kind. You are a barista."}
        ]

    def test_undecodable_reply_is_502(self, client: TestClient, provider: dict[str, Any]) -> None:
        provider["handler"] = lambda _: httpx.Response(
            200, json=completion_body("Sure! Here you go.")
        )

        resp = client.post("/reply", json=REPLY_BODY, headers=_auth())

        assert resp.status_code == 502
        assert "ModelResponse" in resp.json()["message"]

    def test_network_failure_is_502(self, client: TestClient, provider: dict[str, Any]) -> None:
        def unreachable(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        provider["handler"] = unreachable

        resp = client.post("/reply", json=REPLY_BODY, headers=_auth())

        assert resp.status_code == 502
        assert len(provider["requests"]) == 1
