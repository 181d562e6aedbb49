"""
Session gate — access control in front of the dashboard and editor views.

Identity is never read from a global. Whoever owns the auth state creates an
IdentityContext and hands it to the gate (and to anything else that needs
to know who is signed in).
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from engine.editor.types import Identity

logger = logging.getLogger(__name__)

IdentityListener = Callable[[Identity | None], None]

SIGN_IN_VIEW = "login"
ENTRY_VIEW = "dashboard"

PROTECTED_VIEWS: frozenset[str] = frozenset({"dashboard", "editor"})
PUBLIC_ONLY_VIEWS: frozenset[str] = frozenset({"login", "signup"})


class IdentityContext:
    """Holds the current identity and tells subscribers when it changes."""

    def __init__(self, identity: Identity | None = None):
        self._identity = identity
        self._listeners: list[IdentityListener] = []

    def current_identity(self) -> Identity | None:
        return self._identity

    def set_identity(self, identity: Identity | None) -> None:
        """Called by the auth adapter on sign-in and sign-out."""
        if identity == self._identity:
            return
        self._identity = identity
        for listener in list(self._listeners):
            listener(identity)

    def on_change(self, listener: IdentityListener) -> Callable[[], None]:
        """Subscribe to sign-in/sign-out events. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


class SessionGate:
    """
    Decides whether a view may render for the current identity.

    - No identity on a protected view: redirect to the sign-in view.
    - An identity on a public-only view: redirect to the entry view.

    The gate re-checks the current view whenever the identity changes and
    calls `navigate` with the redirect target.
    """

    def __init__(
        self,
        context: IdentityContext,
        navigate: Callable[[str], None] | None = None,
    ):
        self.context = context
        self.navigate = navigate
        self.current_view: str | None = None
        self.last_identity = context.current_identity()
        self._unsubscribe = context.on_change(self._on_identity_change)

    def resolve(self, view: str) -> str | None:
        """
        Return the view to redirect to, or None if `view` may render.

        Args:
            view: Name of the requested view

        Returns:
            Redirect target or None
        """
        identity = self.last_identity
        if view in PROTECTED_VIEWS and identity is None:
            return SIGN_IN_VIEW
        if view in PUBLIC_ONLY_VIEWS and identity is not None:
            return ENTRY_VIEW
        return None

    def enter(self, view: str) -> str:
        """
        Enter `view`, following at most one redirect.

        Returns:
            The view that actually renders
        """
        target = self.resolve(view)
        if target is not None:
            logger.debug("gate: %s -> %s", view, target)
            view = target
        self.current_view = view
        return view

    def _on_identity_change(self, identity: Identity | None) -> None:
        self.last_identity = identity
        if self.current_view is None:
            return
        target = self.resolve(self.current_view)
        if target is None:
            return
        self.current_view = target
        if self.navigate is not None:
            self.navigate(target)

    def close(self) -> None:
        """Stop listening to the identity context."""
        self._unsubscribe()
