"""
Authentication for DevPilot.

JWT session issuance around the external identity service, and the
request-scoped IdentityContext the session gate consumes.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Annotated

import jwt
from fastapi import Cookie, Header, HTTPException, Response, status

from backend import config
from engine.editor.gate import IdentityContext
from engine.editor.types import Identity

SESSION_COOKIE = "session"


def create_jwt(identity: Identity) -> str:
    """
    Create a JWT for a user session.

    Args:
        identity: Identity returned by the identity service

    Returns:
        Signed JWT string
    """
    expires_at = datetime.now(UTC) + timedelta(hours=config.settings.JWT_EXPIRY_HOURS)
    payload = {
        "sub": identity.uid,
        "email": identity.email,
        "exp": expires_at,
        "iat": datetime.now(UTC),
    }
    return jwt.encode(payload, config.settings.JWT_SECRET, algorithm=config.settings.JWT_ALGORITHM)


def decode_jwt(token: str) -> dict:
    """
    Decode and verify a JWT.

    Args:
        token: JWT string to decode

    Returns:
        Decoded payload

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        payload = jwt.decode(token, config.settings.JWT_SECRET, algorithms=[config.settings.JWT_ALGORITHM])
        return payload
    except jwt.ExpiredSignatureError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Session expired. Please sign in again.",
        ) from e
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid session token. Please sign in again.",
        ) from e


def identity_from_token(token: str) -> Identity:
    """
    Turn a session JWT back into an Identity.

    Raises:
        HTTPException: If the token is invalid, expired, or has no subject
    """
    payload = decode_jwt(token)
    uid = payload.get("sub")
    if not uid:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid session token. Please sign in again.",
        )
    return Identity(uid=uid, email=payload.get("email"))


def set_session_cookie(response: Response, token: str) -> None:
    """Attach the HTTP-only session cookie."""
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=config.settings.SECURE_COOKIES,
        samesite="lax",
        max_age=config.settings.JWT_EXPIRY_HOURS * 3600,
        path="/",
    )


def clear_session_cookie(response: Response) -> None:
    """Expire the session cookie immediately."""
    response.set_cookie(
        key=SESSION_COOKIE,
        value="",
        httponly=True,
        secure=config.settings.SECURE_COOKIES,
        samesite="lax",
        max_age=0,
        path="/",
    )


async def get_current_identity(
    session: Annotated[str | None, Cookie()] = None,
    authorization: Annotated[str | None, Header()] = None,
) -> Identity:
    """
    FastAPI dependency to get the current authenticated identity.

    Tries Bearer token first (CLI), then session cookie (browser).

    Raises:
        HTTPException: If authentication fails
    """
    if authorization and authorization.startswith("Bearer "):
        return identity_from_token(authorization.removeprefix("Bearer "))

    if session:
        return identity_from_token(session)

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated. Please sign in.",
    )


async def get_identity_context(
    session: Annotated[str | None, Cookie()] = None,
    authorization: Annotated[str | None, Header()] = None,
) -> IdentityContext:
    """
    FastAPI dependency building a request-scoped IdentityContext.

    An invalid or expired session counts as signed out rather than an error,
    so gated pages can redirect to the sign-in view.
    """
    try:
        identity = await get_current_identity(session=session, authorization=authorization)
    except HTTPException:
        identity = None
    return IdentityContext(identity)
