"""
Database connection pool.

Only the user listing touches the database. All access goes through
system_conn(). Never use pool.acquire() directly outside this module.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import asyncpg

from backend import config

logger = logging.getLogger(__name__)

pool: asyncpg.Pool | None = None


class DatabaseNotConfigured(RuntimeError):
    """Raised when a query is attempted without an initialized pool."""


async def init_pool() -> None:
    """
    Initialize the connection pool.
    Called once at application startup. Skipped when DATABASE_URL is unset.
    """
    global pool
    if not config.settings.DATABASE_URL:
        logger.warning("DATABASE_URL not set; user listing disabled")
        return
    pool = await asyncpg.create_pool(
        dsn=config.settings.DATABASE_URL,
        min_size=1,
        max_size=10,
        command_timeout=60,
    )


async def close_pool() -> None:
    """
    Close the connection pool.
    Called at application shutdown.
    """
    global pool
    if pool is not None:
        await pool.close()
        pool = None


@asynccontextmanager
async def system_conn():
    """
    Acquire a database connection.

    Usage:
        async with system_conn() as conn:
            rows = await conn.fetch("SELECT * FROM users")

    Yields:
        asyncpg.Connection inside a transaction

    Raises:
        DatabaseNotConfigured: If the pool was never initialized
    """
    if pool is None:
        raise DatabaseNotConfigured("Database pool not initialized. Set DATABASE_URL.")

    async with pool.acquire() as conn:
        async with conn.transaction():
            yield conn
