"""User models for the user listing."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class UserRecord(BaseModel):
    """A row in the users table, as returned by GET /api/users."""

    id: UUID
    email: str
    name: str | None = None
    created_at: datetime
