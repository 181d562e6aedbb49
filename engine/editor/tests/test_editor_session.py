"""
End-to-end tests for EditorSession: mount, edit, AI fold, panels, share, teardown.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from engine.editor import share_codec
from engine.editor.editor import EditorSession
from engine.editor.gate import IdentityContext
from engine.editor.mock_generator import MockGenerator
from engine.editor.preferences import MemoryStorage, PreferenceStore
from engine.editor.preview import MemorySurface
from engine.editor.types import PLACEHOLDER_CODE, Identity, Panel, SuggestionStatus, UpstreamError


def make_session(storage=None, generator=None, identity=None, surface=None, notices=None):
    context = IdentityContext(identity if identity is not None else Identity(uid="u1"))
    return EditorSession(
        store=PreferenceStore(storage if storage is not None else MemoryStorage()),
        generator=generator or MockGenerator(output="<button>Click</button>"),
        identity=context,
        surface=surface or MemorySurface(),
        notify=notices.append if notices is not None else None,
    )


class TestMount:
    def test_fresh_mount_uses_placeholder(self):
        session = make_session()
        assert session.mount() == "editor"
        assert session.code == PLACEHOLDER_CODE
        assert session.theme == "light"

    def test_share_link_opened_fresh(self):
        storage = MemoryStorage()
        session = make_session(storage=storage)
        url = share_codec.build_share_url("https://devpilot.dev/editor", "<h1>Hi</h1>")

        session.mount(share_token=share_codec.token_from_url(url))

        assert session.code == "<h1>Hi</h1>"
        assert storage.data["code"] == "<h1>Hi</h1>"

    def test_corrupt_share_link_keeps_stored_code(self):
        storage = MemoryStorage({"code": "<p>mine</p>"})
        session = make_session(storage=storage)

        session.mount(share_token="@@not-a-token@@")

        assert session.code == "<p>mine</p>"
        assert storage.data["code"] == "<p>mine</p>"

    def test_hydrates_theme_and_panels(self):
        storage = MemoryStorage({"theme": "dark", "showPreview": "false", "showOutput": "true"})
        session = make_session(storage=storage)
        session.mount()

        assert session.theme == "dark"
        assert session.panels.get(Panel.PREVIEW) is False
        assert session.panels.get(Panel.OUTPUT) is True
        assert session.preview.visible is False

    def test_unknown_theme_falls_back_to_light(self):
        session = make_session(storage=MemoryStorage({"theme": "neon"}))
        session.mount()
        assert session.theme == "light"

    def test_mount_renders_preview(self):
        surface = MemorySurface()
        session = make_session(surface=surface)
        session.mount()
        assert surface.render_count == 1

    def test_signed_out_mount_redirects_without_hydrating(self):
        storage = MemoryStorage({"code": "<p>secret</p>"})
        surface = MemorySurface()
        session = EditorSession(
            store=PreferenceStore(storage),
            generator=MockGenerator(),
            identity=IdentityContext(),
            surface=surface,
        )

        assert session.mount() == "login"
        assert session.redirect == "login"
        assert session.buffer.initialized is False
        assert surface.render_count == 0
        assert storage.reads == []


class TestEditing:
    def test_edit_persists_and_previews(self):
        storage = MemoryStorage()
        surface = MemorySurface()
        session = make_session(storage=storage, surface=surface)
        session.mount()

        session.edit("<p>one</p>")
        session.edit("<p>two</p>")

        assert storage.data["code"] == "<p>two</p>"
        assert "&lt;p&gt;two&lt;/p&gt;" in surface.document

    def test_hidden_preview_catches_up_when_shown(self):
        surface = MemorySurface()
        session = make_session(storage=MemoryStorage({"showPreview": "false"}), surface=surface)
        session.mount()
        session.edit("<p>while hidden</p>")
        assert surface.render_count == 0

        session.toggle_panel(Panel.PREVIEW)

        assert surface.render_count == 1
        assert "while hidden" in surface.document

    def test_toggle_theme_persists(self):
        storage = MemoryStorage()
        session = make_session(storage=storage)
        session.mount()

        assert session.toggle_theme() == "dark"
        assert storage.data["theme"] == "dark"
        assert session.toggle_theme() == "light"

    def test_share_url_round_trips(self):
        session = make_session()
        session.mount()
        session.edit("<p>é 🚀</p>")

        url = session.share_url("https://devpilot.dev/editor")

        assert share_codec.decode(share_codec.token_from_url(url)) == "<p>é 🚀</p>"

    def test_export_writes_html(self, tmp_path: Path):
        session = make_session()
        session.mount()
        session.edit("<p>export me</p>")

        path = session.export(tmp_path / "code.html")

        assert path.read_text() == "<p>export me</p>"

    def test_tutorials_follow_panel(self):
        session = make_session()
        session.mount()
        assert session.visible_tutorials() == []
        session.toggle_panel(Panel.TUTORIALS)
        assert len(session.visible_tutorials()) == 3


class TestAIFlow:
    @pytest.mark.asyncio
    async def test_generate_then_fold(self):
        session = make_session()
        session.mount()
        session.edit("<p>before</p>")

        assert await session.submit_prompt("write a button") is True
        assert session.suggestions.status is SuggestionStatus.SUCCEEDED
        assert session.ai_output == "<button>Click</button>"

        assert session.fold() is True
        assert session.code == "<p>before</p>\n\n<button>Click</button>"
        assert session.suggestions.status is SuggestionStatus.IDLE
        assert session.prompt == ""

    @pytest.mark.asyncio
    async def test_failed_generation_shows_error(self):
        async def generate(prompt: str) -> str:
            raise UpstreamError("Missing Gemini API key in environment")

        session = make_session(generator=generate)
        session.mount()

        await session.submit_prompt("write a button")

        assert session.suggestions.status is SuggestionStatus.FAILED
        assert session.ai_output == "Missing Gemini API key in environment"
        assert session.fold() is False
        assert session.code == PLACEHOLDER_CODE

    @pytest.mark.asyncio
    async def test_blank_prompt_makes_no_call(self):
        generator = MockGenerator()
        notices: list[str] = []
        session = make_session(generator=generator, notices=notices)
        session.mount()

        assert await session.submit_prompt("   ") is False
        assert generator.prompts == []
        assert session.suggestions.status is SuggestionStatus.IDLE
        assert notices == ["Please enter a prompt!"]

    @pytest.mark.asyncio
    async def test_clear_resets_prompt_and_output(self):
        session = make_session()
        session.mount()
        await session.submit_prompt("write a button")

        assert session.clear_suggestion() is True
        assert session.prompt == ""
        assert session.ai_output == ""


class TestTeardown:
    @pytest.mark.asyncio
    async def test_sign_out_mid_request_drops_result(self):
        release = asyncio.Event()

        async def generate(prompt: str) -> str:
            await release.wait()
            return "<p>late</p>"

        context = IdentityContext(Identity(uid="u1"))
        storage = MemoryStorage()
        session = EditorSession(
            store=PreferenceStore(storage),
            generator=generate,
            identity=context,
        )
        session.mount()
        task = asyncio.create_task(session.submit_prompt("write a button"))
        await asyncio.sleep(0)

        context.set_identity(None)
        release.set()
        await task

        assert session.redirect == "login"
        assert session.mounted is False
        assert session.suggestions.request.result_text is None
        assert session.fold() is False

    def test_no_persistence_after_teardown(self):
        storage = MemoryStorage()
        session = make_session(storage=storage)
        session.mount()
        session.teardown()

        session.edit("<p>after</p>")

        assert storage.data.get("code") != "<p>after</p>"
