"""Tests for the CLI's HTTP client against httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from devpilot_cli.client import ApiClient
from engine.editor.types import GENERIC_FAILURE_MESSAGE, AuthError, UpstreamError


def async_client_with(handler, token: str | None = None) -> ApiClient:
    return ApiClient("http://api.test/", token=token, async_transport=httpx.MockTransport(handler))


def sync_client_with(handler) -> ApiClient:
    return ApiClient("http://api.test", transport=httpx.MockTransport(handler))


class TestGenerate:
    async def test_returns_output(self):
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"output": "<p>ok</p>"})

        client = async_client_with(handler, token="tok")
        assert await client.generate("a paragraph") == "<p>ok</p>"

        request = seen[0]
        assert str(request.url) == "http://api.test/api/generate"
        assert json.loads(request.content) == {"prompt": "a paragraph"}
        assert request.headers["Authorization"] == "Bearer tok"

    async def test_server_error_message(self):
        client = async_client_with(
            lambda request: httpx.Response(500, json={"error": "Missing Gemini API key in environment"})
        )
        with pytest.raises(UpstreamError) as exc_info:
            await client.generate("x")
        assert exc_info.value.message == "Missing Gemini API key in environment"

    async def test_rate_limited(self):
        client = async_client_with(lambda request: httpx.Response(429, json={"error": "Too many requests."}))
        with pytest.raises(UpstreamError, match="Too many requests"):
            await client.generate("x")

    async def test_non_json_is_generic(self):
        client = async_client_with(lambda request: httpx.Response(502, text="Bad Gateway"))
        with pytest.raises(UpstreamError) as exc_info:
            await client.generate("x")
        assert exc_info.value.message == GENERIC_FAILURE_MESSAGE

    async def test_network_failure_is_generic(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(UpstreamError) as exc_info:
            await async_client_with(handler).generate("x")
        assert exc_info.value.message == GENERIC_FAILURE_MESSAGE


class TestSignIn:
    def test_token_taken_from_session_cookie(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/auth/signin"
            return httpx.Response(
                200,
                json={"uid": "uid-1", "email": "dev@example.com"},
                headers={"Set-Cookie": "session=jwt-token; HttpOnly; Path=/; SameSite=lax"},
            )

        client = sync_client_with(handler)
        token, identity = client.sign_in("dev@example.com", "hunter22")

        assert token == "jwt-token"
        assert client.token == "jwt-token"
        assert identity == {"uid": "uid-1", "email": "dev@example.com"}

    def test_rejection_carries_detail(self):
        client = sync_client_with(
            lambda request: httpx.Response(401, json={"detail": "Invalid email or password."})
        )
        with pytest.raises(AuthError) as exc_info:
            client.sign_in("dev@example.com", "nope")
        assert exc_info.value.message == "Invalid email or password."

    def test_sign_up_path(self):
        paths: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            paths.append(request.url.path)
            return httpx.Response(200, json={"uid": "u"}, headers={"Set-Cookie": "session=t; Path=/"})

        sync_client_with(handler).sign_up("new@example.com", "hunter22")
        assert paths == ["/auth/signup"]

    def test_missing_cookie(self):
        client = sync_client_with(lambda request: httpx.Response(200, json={"uid": "u"}))
        with pytest.raises(AuthError, match="did not return a session"):
            client.sign_in("dev@example.com", "hunter22")
