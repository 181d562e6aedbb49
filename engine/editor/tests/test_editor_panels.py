"""Tests for the panel visibility controller."""

from __future__ import annotations

import itertools

import pytest

from engine.editor.panels import PanelVisibility
from engine.editor.preferences import MemoryStorage, PreferenceStore
from engine.editor.types import Panel


def test_defaults(store):
    panels = PanelVisibility(store)
    assert panels.hydrate() == {
        Panel.AI: True,
        Panel.PREVIEW: True,
        Panel.OUTPUT: False,
        Panel.TUTORIALS: False,
    }


def test_hydrates_from_storage():
    store = PreferenceStore(MemoryStorage({"showAI": "false", "showTutorials": "true"}))
    panels = PanelVisibility(store)
    assert panels.get(Panel.AI) is False
    assert panels.get(Panel.TUTORIALS) is True
    assert panels.get(Panel.PREVIEW) is True


@pytest.mark.parametrize("panel", list(Panel))
def test_toggle_leaves_other_flags_alone(store, panel):
    panels = PanelVisibility(store)
    before = panels.hydrate()

    panels.toggle(panel)

    after = panels.hydrate()
    assert after[panel] is not before[panel]
    for other in Panel:
        if other is not panel:
            assert after[other] is before[other]


def test_set_persists_only_that_flag(store, storage):
    panels = PanelVisibility(store)
    panels.set(Panel.OUTPUT, True)
    assert storage.data == {"showOutput": "true"}


def test_persisted_value_matches_memory_after_toggle(storage):
    panels = PanelVisibility(PreferenceStore(storage))
    for panel in Panel:
        panels.toggle(panel)
        assert storage.data[panel.value] == ("true" if panels.get(panel) else "false")


@pytest.mark.parametrize("flags", list(itertools.product([True, False], repeat=4)))
def test_every_combination_allowed(store, flags):
    panels = PanelVisibility(store)
    for panel, value in zip(Panel, flags):
        panels.set(panel, value)
    assert tuple(panels.get(panel) for panel in Panel) == flags


def test_subscribers_hear_changes(store):
    panels = PanelVisibility(store)
    seen = []
    panels.subscribe(lambda panel, value: seen.append((panel, value)))

    panels.toggle(Panel.PREVIEW)

    assert seen == [(Panel.PREVIEW, False)]
