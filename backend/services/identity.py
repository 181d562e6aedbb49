"""
Identity service client — email/password accounts on Firebase Auth.

Talks to the Identity Toolkit REST API. Rejections (bad credentials,
existing account, weak password) come back as AuthError carrying the
service's own message; the routes show it verbatim.
"""

from __future__ import annotations

import logging

import httpx

from backend.config import settings
from engine.editor.types import AuthError, Identity

logger = logging.getLogger(__name__)

# Identity Toolkit error codes -> user-facing text. Codes not listed pass through as-is.
_ERROR_MESSAGES: dict[str, str] = {
    "EMAIL_EXISTS": "An account with this email already exists.",
    "EMAIL_NOT_FOUND": "No account found with this email.",
    "INVALID_PASSWORD": "Incorrect password.",
    "INVALID_LOGIN_CREDENTIALS": "Invalid email or password.",
    "INVALID_EMAIL": "The email address is badly formatted.",
    "USER_DISABLED": "This account has been disabled.",
    "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts. Please try again later.",
}


class IdentityUnavailable(Exception):
    """The identity service is not configured or could not be reached."""


def auth_error_message(code: str) -> str:
    """
    Turn an Identity Toolkit error code into a message.

    Codes like "WEAK_PASSWORD : Password should be at least 6 characters"
    carry their own explanation after the colon; that part is returned.
    """
    base, _, detail = code.partition(" : ")
    if detail:
        return detail.strip()
    return _ERROR_MESSAGES.get(base.strip(), base.strip().replace("_", " ").capitalize())


class IdentityService:
    """Sign up and sign in against the external identity service."""

    def __init__(self, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.transport = transport

    async def sign_up(self, email: str, password: str) -> Identity:
        """
        Create an account.

        Raises:
            AuthError: If the identity service rejects the request
            IdentityUnavailable: If the service is not configured or unreachable
        """
        return await self._call("accounts:signUp", email, password)

    async def sign_in(self, email: str, password: str) -> Identity:
        """
        Verify credentials for an existing account.

        Raises:
            AuthError: If the identity service rejects the credentials
            IdentityUnavailable: If the service is not configured or unreachable
        """
        return await self._call("accounts:signInWithPassword", email, password)

    async def _call(self, method: str, email: str, password: str) -> Identity:
        if not settings.FIREBASE_API_KEY:
            raise IdentityUnavailable("Missing identity service API key in environment")

        url = f"{settings.IDENTITY_URL}/{method}"
        payload = {"email": email, "password": password, "returnSecureToken": True}

        try:
            async with httpx.AsyncClient(transport=self.transport, timeout=15.0) as client:
                response = await client.post(url, params={"key": settings.FIREBASE_API_KEY}, json=payload)
        except httpx.HTTPError as e:
            logger.warning("identity: %s request failed: %s", method, e)
            raise IdentityUnavailable("Could not reach the identity service.") from e

        try:
            data = response.json()
        except ValueError as e:
            raise IdentityUnavailable("The identity service returned an invalid response.") from e
        if not isinstance(data, dict):
            raise IdentityUnavailable("The identity service returned an invalid response.")

        if response.status_code >= 400:
            error = data.get("error")
            code = error.get("message") if isinstance(error, dict) else None
            if response.status_code >= 500 or not isinstance(code, str) or not code:
                logger.warning("identity: %s failed with %d", method, response.status_code)
                raise IdentityUnavailable("The identity service is unavailable.")
            raise AuthError(auth_error_message(code))

        uid = data.get("localId")
        if not uid:
            raise IdentityUnavailable("The identity service returned no user id.")
        return Identity(uid=uid, email=data.get("email", email))


# Singleton instance
identity_service = IdentityService()
