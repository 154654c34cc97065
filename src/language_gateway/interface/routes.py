"""API routes — thin controllers that delegate to the use case.

Handlers are plain ``def`` functions: the provider calls block, so FastAPI
runs them in its worker threadpool.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from language_gateway.interface.dependencies import get_api_key, get_service
from language_gateway.interface.schemas import (
    ErrorResponse,
    ModerationCheckRequest,
    ModerationCheckResponse,
    ReplyRequest,
    ReplyResponse,
)
from language_gateway.services.language_gateway import LanguageGatewayService

router = APIRouter()

_PROVIDER_ERRORS = {
    401: {"model": ErrorResponse, "description": "Missing or rejected API key"},
    422: {"model": ErrorResponse, "description": "Missing model name or message"},
    502: {"model": ErrorResponse, "description": "LLM provider error"},
}


@router.post(
    "/moderations",
    response_model=ModerationCheckResponse,
    responses=_PROVIDER_ERRORS,
)
def check_moderation(
    body: ModerationCheckRequest,
    api_key: str = Depends(get_api_key),
    service: LanguageGatewayService = Depends(get_service),
) -> ModerationCheckResponse:
    """Check a message against the provider's moderation policy."""
    flagged = service.send_to_moderations(body.to_entity(), api_key)
    return ModerationCheckResponse(flagged=flagged)


@router.post(
    "/reply",
    response_model=ReplyResponse,
    response_model_by_alias=True,
    responses=_PROVIDER_ERRORS,
)
def reply(
    body: ReplyRequest,
    api_key: str = Depends(get_api_key),
    service: LanguageGatewayService = Depends(get_service),
) -> ReplyResponse:
    """Get a model-generated reply for the conversation."""
    result = service.send_to_model(body.to_entity(), body.system_prompt.to_entity(), api_key)
    return ReplyResponse.from_entity(result)
