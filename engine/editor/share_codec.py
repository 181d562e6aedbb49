"""
Share-link codec — reversible encoding of buffer text into a URL query value.

Tokens are URL-safe base64 of the UTF-8 text, padding kept. Decoding is
all-or-nothing: any malformed token raises DecodeError and yields no text.
"""

from __future__ import annotations

import base64
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from engine.editor.types import DecodeError

SHARE_PARAM = "code"

# Standard-alphabet tokens are accepted too, mapped onto the URL-safe alphabet
_TO_URLSAFE = str.maketrans({"+": "-", "/": "_", " ": "-"})


def encode(text: str) -> str:
    """Encode buffer text into a share token."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")


def decode(token: str) -> str:
    """
    Decode a share token back into buffer text.

    Args:
        token: Value of the `code` query parameter

    Returns:
        The original buffer text

    Raises:
        DecodeError: On non-alphabet characters, bad padding, or a payload
            that is not UTF-8
    """
    # A "+" that went through form decoding arrives as a space
    normalized = token.translate(_TO_URLSAFE).strip()
    try:
        raw = base64.b64decode(normalized, altchars=b"-_", validate=True)
        return raw.decode("utf-8")
    # binascii.Error, UnicodeDecodeError and non-ASCII input are all ValueErrors
    except ValueError as e:
        raise DecodeError("Share link is corrupted and could not be opened.") from e


def build_share_url(base_url: str, text: str) -> str:
    """Return `base_url` with its query replaced by `?code=<token>`."""
    parts = urlsplit(base_url)
    query = urlencode({SHARE_PARAM: encode(text)})
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, ""))


def token_from_url(url: str) -> str | None:
    """Extract the share token from a URL, or None when it carries none."""
    values = parse_qs(urlsplit(url).query, keep_blank_values=True).get(SHARE_PARAM)
    if not values:
        return None
    return values[0] or None
