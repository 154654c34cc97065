"""Global exception handlers — translate domain errors to HTTP responses.

Each domain exception maps to a specific HTTP status code and the
standard ``{"status": "error", "message": "..."}`` envelope.  Starlette picks
the handler registered for the most specific class in the exception's MRO.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from language_gateway.domain.exceptions import (
    InvalidRequestError,
    LanguageGatewayError,
    ProviderError,
    ProviderStatusError,
    RequestConstructionError,
    SerializationError,
)

logger = logging.getLogger(__name__)

_EXCEPTION_STATUS: list[tuple[type[LanguageGatewayError], int]] = [
    (InvalidRequestError, 422),
    (SerializationError, 500),
    (RequestConstructionError, 500),
    (ProviderError, 502),
]

# Provider statuses passed through as-is; everything else becomes 502.
_PASSTHROUGH_PROVIDER_STATUS = {401, 429}


def _error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    # ── Domain exceptions ───────────────────────────────────────────────

    for exc_type, code in _EXCEPTION_STATUS:

        def _make_handler(
            status_code: int,
        ):  # type: ignore[no-untyped-def]
            async def handler(request: Request, exc: Exception) -> JSONResponse:
                logger.warning("%s: %s", type(exc).__name__, exc)
                return _error_json(status_code, str(exc))

            return handler

        app.add_exception_handler(exc_type, _make_handler(code))

    @app.exception_handler(ProviderStatusError)
    async def provider_status_handler(
        request: Request, exc: ProviderStatusError
    ) -> JSONResponse:
        logger.warning("ProviderStatusError: %s", exc)
        code = exc.status_code if exc.status_code in _PASSTHROUGH_PROVIDER_STATUS else 502
        return _error_json(code, str(exc))

    # ── HTTP errors raised by dependencies ──────────────────────────────

    @app.exception_handler(HTTPException)
    async def http_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _error_json(exc.status_code, str(exc.detail))

    # ── Pydantic / FastAPI validation errors ────────────────────────────

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = []
        for err in exc.errors():
            loc = " → ".join(str(p) for p in err.get("loc", []))
            messages.append(f"{loc}: {err.get('msg', 'validation error')}")
        return _error_json(422, "; ".join(messages))

    # ── Catch-all for unexpected errors ─────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception")
        return _error_json(500, "An unexpected error occurred. Please try again later.")
