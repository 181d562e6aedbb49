"""Authentication routes — sign up, sign in, sign out over the external identity service."""

from __future__ import annotations

import logging

import asyncpg
from fastapi import APIRouter, Depends, HTTPException, Response, status

from backend.auth import clear_session_cookie, create_jwt, get_current_identity, set_session_cookie
from backend.db import DatabaseNotConfigured
from backend.models.auth import IdentityPublic, SignInRequest, SignOutResponse, SignUpRequest
from backend.repos.user_repo import UserRepo
from backend.services.identity import IdentityUnavailable, identity_service
from engine.editor.types import AuthError, Identity

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])
user_repo = UserRepo()


def _unavailable(e: IdentityUnavailable) -> HTTPException:
    logger.warning("auth: identity service unavailable: %s", e)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=str(e),
    )


@router.post("/signup", status_code=200)
async def sign_up_endpoint(req: SignUpRequest, response: Response) -> IdentityPublic:
    """
    Create an account and start a session.

    Identity-service rejections (existing account, weak password) return 400
    with the service's message.
    """
    try:
        identity = await identity_service.sign_up(req.email, req.password)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except IdentityUnavailable as e:
        raise _unavailable(e) from e

    await _record_user(identity)
    set_session_cookie(response, create_jwt(identity))
    return IdentityPublic.from_identity(identity)


@router.post("/signin", status_code=200)
async def sign_in_endpoint(req: SignInRequest, response: Response) -> IdentityPublic:
    """
    Verify credentials and start a session.

    Bad credentials return 401 with the identity service's message.
    """
    try:
        identity = await identity_service.sign_in(req.email, req.password)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message) from e
    except IdentityUnavailable as e:
        raise _unavailable(e) from e

    set_session_cookie(response, create_jwt(identity))
    return IdentityPublic.from_identity(identity)


@router.get("/me", status_code=200)
async def get_current_identity_endpoint(
    identity: Identity = Depends(get_current_identity),
) -> IdentityPublic:
    """
    Get the current signed-in identity.

    Requires a valid session cookie or Bearer token.
    """
    return IdentityPublic.from_identity(identity)


@router.post("/signout", status_code=200)
async def sign_out_endpoint(response: Response) -> SignOutResponse:
    """
    Sign out.

    Clears the session cookie.
    """
    clear_session_cookie(response)
    return SignOutResponse()


async def _record_user(identity: Identity) -> None:
    """Add a new account to the user listing. Sign-up succeeds even if this fails."""
    if not identity.email:
        return
    try:
        await user_repo.upsert(identity.email)
    except DatabaseNotConfigured:
        logger.debug("auth: no database, not recording %s", identity.email)
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
        logger.warning("auth: failed to record user %s: %s", identity.email, e)
