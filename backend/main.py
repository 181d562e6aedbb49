"""
DevPilot FastAPI application.

Entry point for the API server.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from backend import db
from backend.middleware.rate_limit import rate_limiter
from backend.routes import auth_routes
from backend.routes import generate as generate_routes
from backend.routes import pages as pages_routes
from backend.routes import users as users_routes

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


# Background task for cleanup
async def cleanup_task():
    """
    Background task to drop stale rate limit entries.

    Runs every 60 seconds.
    """
    while True:
        rate_limiter.cleanup_old_entries(max_age_minutes=10)
        await asyncio.sleep(60)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    - Initialize database pool (skipped without DATABASE_URL)
    - Start background cleanup task
    - Close database pool on shutdown
    """
    await db.init_pool()

    cleanup_task_handle = asyncio.create_task(cleanup_task())
    logger.info("Background cleanup task started")

    yield

    cleanup_task_handle.cancel()
    try:
        await cleanup_task_handle
    except asyncio.CancelledError:
        logger.info("Background cleanup task stopped")

    await db.close_pool()


app = FastAPI(
    title="DevPilot",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)

# Register routes
app.include_router(auth_routes.router)
app.include_router(generate_routes.router)
app.include_router(users_routes.router)
app.include_router(pages_routes.router)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}
