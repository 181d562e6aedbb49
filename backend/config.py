"""
DevPilot configuration — all environment variables in one place.

Read from environment at runtime. Never hardcode secrets. The generation
credential is server-only; there is no publicly exposed variant.
"""

from __future__ import annotations

import os


class Settings:
    """Application settings from environment variables."""

    # Database (user listing only; optional)
    DATABASE_URL: str = os.environ.get("DATABASE_URL", "")

    # Auth
    JWT_SECRET: str = os.environ.get("JWT_SECRET", "")
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRY_HOURS: int = 24

    # Identity service (Firebase Identity Toolkit)
    FIREBASE_API_KEY: str = os.environ.get("FIREBASE_API_KEY", "")
    IDENTITY_URL: str = os.environ.get("IDENTITY_URL", "https://identitytoolkit.googleapis.com/v1")

    # Text generation
    GENERATION_PROVIDER: str = os.environ.get("GENERATION_PROVIDER", "gemini")
    GEMINI_API_KEY: str = os.environ.get("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.environ.get("GEMINI_MODEL", "gemini-1.5-flash")
    GEMINI_URL: str = os.environ.get("GEMINI_URL", "https://generativelanguage.googleapis.com/v1beta")
    ANTHROPIC_API_KEY: str = os.environ.get("ANTHROPIC_API_KEY", "")
    ANTHROPIC_MODEL: str = os.environ.get("ANTHROPIC_MODEL", "claude-3-5-haiku-20241022")
    OPENAI_API_KEY: str = os.environ.get("OPENAI_API_KEY", "")
    OPENAI_MODEL: str = os.environ.get("OPENAI_MODEL", "gpt-4o-mini")
    GENERATION_TIMEOUT_SECONDS: float = 60.0
    GENERATION_MAX_TOKENS: int = 4096

    # Rate Limits
    GENERATE_RATE_LIMIT_PER_MINUTE: int = 20  # per IP

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")

    @property
    def SECURE_COOKIES(self) -> bool:
        return self.ENVIRONMENT != "development"


# Singleton instance
settings = Settings()

if not settings.JWT_SECRET:
    raise RuntimeError("JWT_SECRET environment variable is required")
