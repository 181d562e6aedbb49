"""
Pydantic models for DevPilot.

All data shapes defined here. No imports from db, repos, or routes.
"""

from backend.models.auth import (
    IdentityPublic,
    SignInRequest,
    SignOutResponse,
    SignUpRequest,
)
from backend.models.generate import ErrorResponse, GenerateResponse
from backend.models.user import UserRecord

__all__ = [
    # User models
    "UserRecord",
    # Auth models
    "SignInRequest",
    "SignUpRequest",
    "IdentityPublic",
    "SignOutResponse",
    # Generation models
    "GenerateResponse",
    "ErrorResponse",
]
