"""Tests for the sandboxed live preview."""

from __future__ import annotations

from pathlib import Path

from engine.editor.preview import (
    FileSurface,
    MemorySurface,
    PreviewRenderer,
    sandboxed_document,
    sandboxed_frame,
)


class TestSandboxedDocument:
    def test_frame_allows_scripts_but_not_same_origin(self):
        doc = sandboxed_document("<script>localStorage.clear()</script>")
        assert 'sandbox="allow-scripts"' in doc
        assert "allow-same-origin" not in doc

    def test_user_html_is_escaped_into_srcdoc(self):
        doc = sandboxed_document('<h1 class="x">Hi & bye</h1>')
        assert "&lt;h1 class=&quot;x&quot;&gt;Hi &amp; bye&lt;/h1&gt;" in doc
        # The raw markup never lands in the host document
        assert '<h1 class="x">' not in doc

    def test_user_cannot_break_out_of_srcdoc(self):
        doc = sandboxed_document('"></iframe><script>alert(1)</script>')
        assert doc.count("<iframe") == 1
        assert "<script>" not in doc

    def test_is_full_document(self):
        doc = sandboxed_document("<p>x</p>")
        assert doc.startswith("<!DOCTYPE html>")
        assert "<title>Live Preview</title>" in doc

    def test_frame_only(self):
        frame = sandboxed_frame("<p>x</p>")
        assert frame.startswith("<iframe")
        assert 'sandbox="allow-scripts"' in frame


class TestPreviewRenderer:
    def test_full_replace_on_every_render(self):
        surface = MemorySurface()
        renderer = PreviewRenderer(surface)

        renderer.render("<p>one</p>")
        renderer.render("<p>two</p>")

        assert surface.render_count == 2
        assert "&lt;p&gt;two&lt;/p&gt;" in surface.document
        assert "one" not in surface.document

    def test_hidden_renderer_skips_surface(self):
        surface = MemorySurface()
        renderer = PreviewRenderer(surface, visible=False)

        renderer.render("<p>one</p>")

        assert surface.render_count == 0
        assert renderer.last_text == "<p>one</p>"

    def test_showing_renders_latest_text(self):
        surface = MemorySurface()
        renderer = PreviewRenderer(surface, visible=False)
        renderer.render("<p>one</p>")
        renderer.render("<p>latest</p>")

        renderer.set_visible(True)

        assert surface.render_count == 1
        assert "latest" in surface.document

    def test_file_surface_writes_document(self, tmp_path: Path):
        path = tmp_path / "preview" / "index.html"
        PreviewRenderer(FileSurface(path)).render("<p>on disk</p>")
        assert "&lt;p&gt;on disk&lt;/p&gt;" in path.read_text()
