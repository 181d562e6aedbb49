"""
Code buffer — the single authoritative copy of the user's source text.

Every change replaces the whole text and is pushed synchronously to the
subscribers (persistence, live preview) in subscription order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from engine.editor import share_codec
from engine.editor.preferences import PreferenceStore
from engine.editor.types import APPEND_SEPARATOR, CODE_KEY, PLACEHOLDER_CODE, DecodeError

logger = logging.getLogger(__name__)

Listener = Callable[[str], None]


class CodeBuffer:
    """Owns the current source text."""

    def __init__(self) -> None:
        self._text: str | None = None
        self._listeners: list[Listener] = []

    @property
    def text(self) -> str:
        if self._text is None:
            raise RuntimeError("Code buffer not initialized. Call initialize() first.")
        return self._text

    @property
    def initialized(self) -> bool:
        return self._text is not None

    def initialize(self, store: PreferenceStore, share_token: str | None = None) -> str:
        """
        Resolve the starting text.

        Resolution order, first hit wins:
        1. The share token, if present and decodable
        2. The persisted "code" preference, if non-empty
        3. PLACEHOLDER_CODE

        Does not notify subscribers; the session wires them after mount.

        Args:
            store: Preference store to fall back on
            share_token: Token from an incoming `?code=` link, if any

        Returns:
            The resolved text
        """
        text: str | None = None

        if share_token:
            try:
                text = share_codec.decode(share_token)
            except DecodeError as e:
                logger.info("buffer: ignoring share token: %s", e.message)

        if text is None:
            stored = store.get(CODE_KEY, "")
            if isinstance(stored, str) and stored:
                text = stored

        self._text = PLACEHOLDER_CODE if text is None else text
        return self._text

    def set_text(self, new_text: str) -> None:
        """Replace the buffer and notify subscribers with the full text."""
        self._text = new_text
        for listener in list(self._listeners):
            listener(new_text)

    def append(self, suffix: str) -> None:
        """Append `suffix` after a blank line. Used by the AI fold."""
        self.set_text(self.text + APPEND_SEPARATOR + suffix)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
