"""
DevPilot Editor — Shared Types

Constants, data classes and the error taxonomy shared by the preference
store, code buffer, share codec, suggestion session, preview renderer,
panel controller and session gate.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PLACEHOLDER_CODE = "<!-- Start coding here -->"

# Folded AI output is separated from existing code by one blank line
APPEND_SEPARATOR = "\n\n"

# Persisted preference keys
CODE_KEY = "code"
THEME_KEY = "theme"

THEMES: set[str] = {"dark", "light"}
DEFAULT_THEME = "light"

GENERIC_FAILURE_MESSAGE = "Failed to generate code. Please try again."
EMPTY_RESULT_MESSAGE = "The AI returned an empty response."

TUTORIALS: list[dict[str, str]] = [
    {
        "title": "Getting Started",
        "content": "Type some HTML, CSS, or JS code in the editor and see the preview live. Have fun coding!",
    },
    {
        "title": "AI Code Generation",
        "content": "Enter a prompt for AI code generation and append it to your code. Let's get those robots to help!",
    },
    {
        "title": "Export & Share",
        "content": "Export your code as an HTML file or share a magical link with your masterpiece embedded.",
    },
]


class Panel(str, Enum):
    """The four optional editor panels. Values are the persisted preference keys."""

    AI = "showAI"
    PREVIEW = "showPreview"
    OUTPUT = "showOutput"
    TUTORIALS = "showTutorials"


PANEL_DEFAULTS: dict[Panel, bool] = {
    Panel.AI: True,
    Panel.PREVIEW: True,
    Panel.OUTPUT: False,
    Panel.TUTORIALS: False,
}


class SuggestionStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass
class SuggestionRequest:
    """One AI generation attempt. An idle request carries no prompt."""

    prompt_text: str = ""
    status: SuggestionStatus = SuggestionStatus.IDLE
    result_text: str | None = None
    error_message: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status is SuggestionStatus.PENDING


@dataclass(frozen=True)
class Identity:
    """Authenticated user marker handed out by the external identity service."""

    uid: str
    email: str | None = None


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class EditorError(Exception):
    """Base class for editor errors. `message` is safe to show to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(EditorError):
    """Rejected input: blank prompt, blank fold, malformed share token."""


class DecodeError(ValidationError):
    """A share token could not be decoded back into buffer text."""


class UpstreamError(EditorError):
    """The text-generation service failed (network, non-2xx, missing credential)."""


class PersistenceError(EditorError):
    """Client-local storage is unavailable or full."""


class AuthError(EditorError):
    """The identity service rejected a sign-in or sign-up."""
