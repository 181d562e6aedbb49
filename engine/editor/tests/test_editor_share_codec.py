"""Tests for the share-link codec."""

from __future__ import annotations

import base64

import pytest

from engine.editor import share_codec
from engine.editor.types import DecodeError, ValidationError


class TestRoundTrip:
    @pytest.mark.parametrize(
        "text",
        [
            "",
            "<h1>Hi</h1>",
            "<!-- Start coding here -->",
            "<p>emoji 🚀 and accents é ü</p>",
            "line one\nline two\r\n\ttabbed",
            "???>>>~~~",  # bytes that land on '+' and '/' in standard base64
        ],
    )
    def test_decode_inverts_encode(self, text):
        assert share_codec.decode(share_codec.encode(text)) == text

    def test_token_is_url_safe(self):
        token = share_codec.encode("???>>>~~~" * 10)
        assert "+" not in token
        assert "/" not in token


class TestMalformedTokens:
    @pytest.mark.parametrize(
        "token",
        [
            "not base64!",
            "PGgxPkhpPC9oMT4*",
            "SGk",  # truncated padding
            "é",
            base64.urlsafe_b64encode(b"\xff\xfe\xfd").decode(),  # not UTF-8
        ],
    )
    def test_raises_decode_error(self, token):
        with pytest.raises(DecodeError):
            share_codec.decode(token)

    def test_decode_error_is_a_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            share_codec.decode("%%%")
        assert "corrupted" in exc_info.value.message


class TestLegacyTokens:
    def test_standard_alphabet_token_accepted(self):
        text = "???>>>~~~"
        legacy = base64.b64encode(text.encode()).decode()
        assert "+" in legacy or "/" in legacy
        assert share_codec.decode(legacy) == text

    def test_plus_turned_into_space_is_restored(self):
        text = "???>>>~~~"
        legacy = base64.b64encode(text.encode()).decode().replace("+", " ")
        assert share_codec.decode(legacy) == text


class TestUrls:
    def test_build_share_url_replaces_query(self):
        url = share_codec.build_share_url("https://devpilot.dev/editor?code=old#top", "<h1>Hi</h1>")
        assert url.startswith("https://devpilot.dev/editor?code=")
        assert "#" not in url
        assert share_codec.decode(share_codec.token_from_url(url)) == "<h1>Hi</h1>"

    def test_token_from_url_without_code(self):
        assert share_codec.token_from_url("https://devpilot.dev/editor") is None
        assert share_codec.token_from_url("https://devpilot.dev/editor?code=") is None
