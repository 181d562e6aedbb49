"""Generation passthrough — POST /api/generate forwards a prompt to the text-generation API."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from backend import config
from backend.middleware.rate_limit import rate_limiter
from backend.models.generate import ErrorResponse, GenerateResponse
from backend.services.ai_provider import ai_provider
from engine.editor.types import GENERIC_FAILURE_MESSAGE, UpstreamError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generate"])


def _error(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=headers,
    )


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse}, 429: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def generate(request: Request) -> JSONResponse:
    """
    Generate code for a prompt.

    Body: {"prompt": str}. Responses:
    - 200 {"output": str}
    - 400 {"error": "Prompt is required"} for a missing or blank prompt
    - 429 {"error": ...} when the per-IP limit is exceeded
    - 500 {"error": ...} on missing server credential or upstream failure
    """
    try:
        body = await request.json()
    except ValueError:
        body = None

    prompt = body.get("prompt") if isinstance(body, dict) else None
    if not isinstance(prompt, str) or not prompt.strip():
        return _error(400, "Prompt is required")

    client_ip = request.client.host if request.client else "unknown"
    if not rate_limiter.check_rate_limit(
        f"generate:{client_ip}",
        max_requests=config.settings.GENERATE_RATE_LIMIT_PER_MINUTE,
        window_minutes=1,
    ):
        return _error(429, "Too many requests. Please wait a moment.", headers={"Retry-After": "60"})

    try:
        output = await ai_provider.generate(prompt)
    except UpstreamError as e:
        return _error(500, e.message)
    except Exception:
        logger.exception("generate: unexpected provider failure")
        return _error(500, GENERIC_FAILURE_MESSAGE)

    return JSONResponse(status_code=200, content=GenerateResponse(output=output).model_dump())
