"""Repository for user operations."""

from __future__ import annotations

import asyncpg

from backend.db import system_conn
from backend.models.user import UserRecord


def _row_to_user(row: asyncpg.Record) -> UserRecord:
    """Convert a database row to a UserRecord model."""
    return UserRecord(
        id=row["id"],
        email=row["email"],
        name=row["name"],
        created_at=row["created_at"],
    )


class UserRepo:
    """All user-related database operations."""

    async def list_all(self) -> list[UserRecord]:
        """
        List every user. No filtering or pagination.

        Returns:
            All users, oldest first

        Raises:
            DatabaseNotConfigured: If DATABASE_URL is unset
        """
        async with system_conn() as conn:
            rows = await conn.fetch("SELECT id, email, name, created_at FROM users ORDER BY created_at")
            return [_row_to_user(row) for row in rows]

    async def upsert(self, email: str, name: str | None = None) -> UserRecord:
        """
        Record a user the first time they sign up.

        Args:
            email: Email address from the identity service
            name: Optional display name

        Returns:
            The stored user
        """
        async with system_conn() as conn:
            row = await conn.fetchrow(
                """
                INSERT INTO users (email, name)
                VALUES ($1, $2)
                ON CONFLICT (email) DO UPDATE SET email = EXCLUDED.email
                RETURNING id, email, name, created_at
                """,
                email,
                name,
            )
            return _row_to_user(row)
