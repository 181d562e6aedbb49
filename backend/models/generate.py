"""Generation endpoint models."""

from __future__ import annotations

from pydantic import BaseModel


class GenerateResponse(BaseModel):
    """200 body of POST /api/generate."""

    output: str


class ErrorResponse(BaseModel):
    """4xx/5xx body of POST /api/generate."""

    error: str
