"""FastAPI dependency injection wiring."""

from __future__ import annotations

import httpx
from fastapi import Header, HTTPException, status

from language_gateway.infrastructure.config import get_settings
from language_gateway.infrastructure.openai_http_adapter import OpenAIHttpAdapter
from language_gateway.services.language_gateway import LanguageGatewayService

_http_client: httpx.Client | None = None
_openai_adapter: OpenAIHttpAdapter | None = None


def startup() -> None:
    """Initialise shared resources — called from the lifespan context manager."""
    global _http_client, _openai_adapter  # noqa: PLW0603

    settings = get_settings()
    _http_client = httpx.Client(timeout=settings.request_timeout)
    _openai_adapter = OpenAIHttpAdapter(_http_client, settings.openai_base_url)


def shutdown() -> None:
    """Release shared resources."""
    global _http_client, _openai_adapter  # noqa: PLW0603

    _openai_adapter = None
    if _http_client:
        _http_client.close()
        _http_client = None


def get_service() -> LanguageGatewayService:
    """Build the use case around the shared adapter."""
    assert _openai_adapter is not None, "startup() was not called"
    return LanguageGatewayService(_openai_adapter)


def get_api_key(authorization: str | None = Header(default=None)) -> str:
    """Take the provider key from ``Authorization: Bearer``, else from settings."""
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()

    configured = get_settings().openai_api_key
    if configured is not None and configured.get_secret_value():
        return configured.get_secret_value()

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Missing API key. Send 'Authorization: Bearer <key>' or set OPENAI_API_KEY.",
    )
