"""Authentication models for sign-in, sign-up and session management."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from engine.editor.types import Identity


class SignInRequest(BaseModel):
    """Email/password credentials forwarded to the identity service."""

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(..., min_length=1)


class SignUpRequest(SignInRequest):
    """Same shape as sign-in; password rules are the identity service's."""


class IdentityPublic(BaseModel):
    """What the API returns about the signed-in user."""

    uid: str
    email: str | None = None

    @classmethod
    def from_identity(cls, identity: Identity) -> IdentityPublic:
        """Convert the engine Identity to an API response."""
        return cls(uid=identity.uid, email=identity.email)


class SignOutResponse(BaseModel):
    """Response after sign-out."""

    message: str = "Signed out successfully"
