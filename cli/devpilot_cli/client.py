"""HTTP client for the DevPilot API."""

from __future__ import annotations

from typing import Any

import httpx

from engine.editor.types import GENERIC_FAILURE_MESSAGE, AuthError, UpstreamError

# Cookie the server sets on sign-in; its value doubles as the Bearer token
SESSION_COOKIE = "session"


class ApiClient:
    """HTTP client for the DevPilot API."""

    def __init__(
        self,
        api_url: str,
        token: str | None = None,
        transport: httpx.BaseTransport | None = None,
        async_transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.token = token
        self.client = httpx.Client(timeout=30.0, transport=transport)
        self._async_transport = async_transport

    def _headers(self) -> dict:
        """Build request headers."""
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def get(self, path: str) -> Any:
        """Make GET request."""
        res = self.client.get(f"{self.api_url}{path}", headers=self._headers())
        res.raise_for_status()
        return res.json()

    def sign_in(self, email: str, password: str) -> tuple[str, dict]:
        """
        Sign in with email and password.

        Returns:
            (session token, public identity)

        Raises:
            AuthError: With the server's message when credentials are rejected
        """
        return self._authenticate("/auth/signin", email, password)

    def sign_up(self, email: str, password: str) -> tuple[str, dict]:
        """Create an account. Same contract as sign_in."""
        return self._authenticate("/auth/signup", email, password)

    def _authenticate(self, path: str, email: str, password: str) -> tuple[str, dict]:
        res = self.client.post(
            f"{self.api_url}{path}",
            json={"email": email, "password": password},
            headers=self._headers(),
        )
        if res.status_code >= 400:
            raise AuthError(_detail(res) or f"Request failed ({res.status_code})")

        token = res.cookies.get(SESSION_COOKIE)
        if not token:
            raise AuthError("Server did not return a session.")
        self.token = token
        return token, res.json()

    def me(self) -> dict:
        """Current identity for the stored token."""
        return self.get("/auth/me")

    async def generate(self, prompt: str) -> str:
        """
        Ask the server to generate code for `prompt`.

        Matches the engine's generator contract: returns the text or raises
        UpstreamError with a message fit for the output panel.
        """
        try:
            async with httpx.AsyncClient(timeout=60.0, transport=self._async_transport) as client:
                res = await client.post(
                    f"{self.api_url}/api/generate",
                    json={"prompt": prompt},
                    headers=self._headers(),
                )
        except httpx.HTTPError as e:
            raise UpstreamError(GENERIC_FAILURE_MESSAGE) from e

        try:
            body = res.json()
        except ValueError as e:
            raise UpstreamError(GENERIC_FAILURE_MESSAGE) from e

        if res.status_code >= 400:
            error = body.get("error") if isinstance(body, dict) else None
            raise UpstreamError(error if isinstance(error, str) and error else GENERIC_FAILURE_MESSAGE)

        output = body.get("output") if isinstance(body, dict) else None
        if not isinstance(output, str):
            raise UpstreamError(GENERIC_FAILURE_MESSAGE)
        return output

    def close(self):
        """Close client."""
        self.client.close()


def _detail(res: httpx.Response) -> str | None:
    """Pull a human-readable message out of an error response."""
    try:
        body = res.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    detail = body.get("detail") or body.get("error")
    return detail if isinstance(detail, str) else None
