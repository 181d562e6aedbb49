"""Panel visibility controller — four independent, persisted toggles."""

from __future__ import annotations

from collections.abc import Callable

from engine.editor.preferences import PreferenceStore
from engine.editor.types import PANEL_DEFAULTS, Panel

Listener = Callable[[Panel, bool], None]


class PanelVisibility:
    """
    Visibility flags for the AI, Preview, Output and Tutorials panels.

    Each flag is hydrated from the preference store on first access and
    persisted individually on every set. No combination is disallowed.
    """

    def __init__(self, store: PreferenceStore):
        self.store = store
        self._flags: dict[Panel, bool] = {}
        self._listeners: list[Listener] = []

    def hydrate(self) -> dict[Panel, bool]:
        """Read every flag once. Returns a snapshot of all four."""
        return {panel: self.get(panel) for panel in Panel}

    def get(self, panel: Panel) -> bool:
        if panel not in self._flags:
            value = self.store.get(panel.value, PANEL_DEFAULTS[panel])
            self._flags[panel] = bool(value)
        return self._flags[panel]

    def set(self, panel: Panel, value: bool) -> None:
        value = bool(value)
        self._flags[panel] = value
        self.store.set(panel.value, value)
        for listener in list(self._listeners):
            listener(panel, value)

    def toggle(self, panel: Panel) -> bool:
        """Flip one flag. Returns the new value."""
        value = not self.get(panel)
        self.set(panel, value)
        return value

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
