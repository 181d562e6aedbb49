"""User listing — GET /api/users."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from backend.db import DatabaseNotConfigured
from backend.models.user import UserRecord
from backend.repos.user_repo import UserRepo

router = APIRouter(prefix="/api", tags=["users"])
user_repo = UserRepo()


@router.get("/users", status_code=200)
async def list_users() -> list[UserRecord]:
    """
    List all users.

    No filtering, auth-gating, or pagination.
    """
    try:
        return await user_repo.list_all()
    except DatabaseNotConfigured as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="User listing is not configured.",
        ) from e
