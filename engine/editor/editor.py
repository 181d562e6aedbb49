"""
Editor session — wires the editor components into one mountable unit.

Mount sequence:
  1. Session gate authorizes the editor view (or redirects, rendering nothing)
  2. Code buffer resolves its text: share token, then stored code, then placeholder
  3. Theme and panel flags hydrate from the preference store
  4. Buffer changes start flowing to persistence and the live preview

After teardown the session ignores late AI results and stops persisting.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from engine.editor import share_codec
from engine.editor.buffer import CodeBuffer
from engine.editor.gate import IdentityContext, SessionGate
from engine.editor.panels import PanelVisibility
from engine.editor.preferences import PreferenceStore
from engine.editor.preview import MemorySurface, PreviewRenderer, PreviewSurface
from engine.editor.suggestion import Generator, Notifier, SuggestionSession
from engine.editor.types import (
    CODE_KEY,
    DEFAULT_THEME,
    THEME_KEY,
    THEMES,
    TUTORIALS,
    Panel,
    SuggestionStatus,
)

logger = logging.getLogger(__name__)

EDITOR_VIEW = "editor"
DEFAULT_EXPORT_NAME = "code.html"


class EditorSession:
    """One mounted editor: buffer, panels, theme, AI session and preview."""

    def __init__(
        self,
        store: PreferenceStore,
        generator: Generator,
        identity: IdentityContext,
        surface: PreviewSurface | None = None,
        notify: Notifier | None = None,
    ):
        self.store = store
        self.buffer = CodeBuffer()
        self.panels = PanelVisibility(store)
        self.suggestions = SuggestionSession(generator, notify=notify)
        self.preview = PreviewRenderer(surface or MemorySurface())
        self.gate = SessionGate(identity, navigate=self._on_navigate)
        self.prompt = ""
        self.theme = DEFAULT_THEME
        self.mounted = False
        self.redirect: str | None = None
        self._unsubscribers: list[Callable[[], None]] = []

    # ── lifecycle ────────────────────────────────────────────────────────────

    def mount(self, share_token: str | None = None) -> str:
        """
        Enter the editor view.

        Args:
            share_token: Token from an incoming `?code=` link, if any

        Returns:
            The view that renders: "editor", or the gate's redirect target
            (in which case nothing is hydrated)
        """
        view = self.gate.enter(EDITOR_VIEW)
        if view != EDITOR_VIEW:
            self.redirect = view
            return view

        stored = self.store.get(CODE_KEY, "")
        text = self.buffer.initialize(self.store, share_token)
        if text != stored:
            self.store.set(CODE_KEY, text)

        theme = self.store.get(THEME_KEY, DEFAULT_THEME)
        self.theme = theme if theme in THEMES else DEFAULT_THEME

        self.panels.hydrate()
        self.preview.visible = self.panels.get(Panel.PREVIEW)

        self._unsubscribers.append(self.buffer.subscribe(self._persist_code))
        self._unsubscribers.append(self.buffer.subscribe(self.preview.render))
        self._unsubscribers.append(self.panels.subscribe(self._on_panel_change))

        self.preview.render(text)
        self.mounted = True
        return EDITOR_VIEW

    def teardown(self) -> None:
        """Unmount: drop subscriptions and any in-flight AI result."""
        self.suggestions.dispose()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.gate.close()
        self.mounted = False

    # ── buffer ───────────────────────────────────────────────────────────────

    @property
    def code(self) -> str:
        return self.buffer.text

    def edit(self, text: str) -> None:
        self.buffer.set_text(text)

    def share_url(self, base_url: str) -> str:
        return share_codec.build_share_url(base_url, self.buffer.text)

    def export(self, path: Path | None = None) -> Path:
        """Write the buffer to an HTML file. Returns the path written."""
        target = path or Path(DEFAULT_EXPORT_NAME)
        target.write_text(self.buffer.text, encoding="utf-8")
        return target

    # ── AI ───────────────────────────────────────────────────────────────────

    async def submit_prompt(self, prompt: str | None = None) -> bool:
        """Submit `prompt` (or the stored prompt) to the suggestion session."""
        if prompt is not None:
            self.prompt = prompt
        return await self.suggestions.submit(self.prompt)

    def fold(self) -> bool:
        """Append the AI result to the buffer; clears the prompt on success."""
        folded = self.suggestions.fold(self.buffer)
        if folded:
            self.prompt = ""
        return folded

    def clear_suggestion(self) -> bool:
        cleared = self.suggestions.clear()
        if cleared:
            self.prompt = ""
        return cleared

    @property
    def ai_output(self) -> str:
        """Text for the output panel: the result, the error, or nothing."""
        request = self.suggestions.request
        if request.status is SuggestionStatus.SUCCEEDED:
            return request.result_text or ""
        if request.status is SuggestionStatus.FAILED:
            return request.error_message or ""
        return ""

    # ── panels & theme ───────────────────────────────────────────────────────

    def toggle_panel(self, panel: Panel) -> bool:
        return self.panels.toggle(panel)

    def toggle_theme(self) -> str:
        self.theme = "light" if self.theme == "dark" else "dark"
        self.store.set(THEME_KEY, self.theme)
        return self.theme

    def visible_tutorials(self) -> list[dict[str, str]]:
        return list(TUTORIALS) if self.panels.get(Panel.TUTORIALS) else []

    # ── internals ────────────────────────────────────────────────────────────

    def _persist_code(self, text: str) -> None:
        self.store.set(CODE_KEY, text)

    def _on_panel_change(self, panel: Panel, visible: bool) -> None:
        if panel is Panel.PREVIEW:
            self.preview.set_visible(visible)

    def _on_navigate(self, target: str) -> None:
        if target == EDITOR_VIEW:
            return
        logger.info("editor: identity changed, leaving editor for %s", target)
        self.redirect = target
        if self.mounted:
            self.teardown()
