"""
DevPilot Editor — the client-side session core.

Components, leaves first:
  preferences   — lazy, failure-tolerant client-local settings
  buffer        — the single source text, with change subscribers
  share_codec   — buffer text <-> `?code=` URL token
  suggestion    — one-at-a-time AI generation state machine
  preview       — sandboxed full-document live preview
  panels        — four independent persisted panel toggles
  gate          — identity context and protected-view redirects
  editor        — EditorSession, the mount sequence tying them together
"""

from engine.editor.buffer import CodeBuffer
from engine.editor.editor import EditorSession
from engine.editor.gate import IdentityContext, SessionGate
from engine.editor.mock_generator import MockGenerator
from engine.editor.panels import PanelVisibility
from engine.editor.preferences import JsonFileStorage, MemoryStorage, PreferenceStore
from engine.editor.preview import FileSurface, MemorySurface, PreviewRenderer, sandboxed_document
from engine.editor.suggestion import SuggestionSession
from engine.editor.types import Identity, Panel, SuggestionStatus

__all__ = [
    "CodeBuffer",
    "EditorSession",
    "IdentityContext",
    "SessionGate",
    "MockGenerator",
    "PanelVisibility",
    "JsonFileStorage",
    "MemoryStorage",
    "PreferenceStore",
    "FileSurface",
    "MemorySurface",
    "PreviewRenderer",
    "sandboxed_document",
    "SuggestionSession",
    "Identity",
    "Panel",
    "SuggestionStatus",
]
