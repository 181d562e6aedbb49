"""
Pytest configuration and fixtures for DevPilot backend tests.

No database and no network: repos and external services are patched per test.
"""

from __future__ import annotations

import os

# Set test environment variables before importing config
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.pop("DATABASE_URL", None)

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402

from backend.auth import create_jwt  # noqa: E402
from backend.main import app  # noqa: E402
from backend.middleware.rate_limit import rate_limiter  # noqa: E402
from engine.editor.types import Identity  # noqa: E402


@pytest.fixture(autouse=True)
def reset_rate_limiter():
    """Each test starts with an empty rate limit window."""
    rate_limiter.reset()
    yield
    rate_limiter.reset()


@pytest_asyncio.fixture
async def async_client():
    """Async HTTP client against the ASGI app."""
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


@pytest.fixture
def identity() -> Identity:
    return Identity(uid="firebase-uid-123", email="dev@example.com")


@pytest.fixture
def auth_headers(identity) -> dict[str, str]:
    """Bearer header carrying a valid session token."""
    return {"Authorization": f"Bearer {create_jwt(identity)}"}
