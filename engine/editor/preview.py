"""
Live preview renderer — projects the code buffer into a sandboxed document.

Every render rebuilds the whole document from the full buffer text. The
user's HTML is embedded through an iframe `srcdoc` with
`sandbox="allow-scripts"` and no `allow-same-origin`, so scripts in the
preview run in an opaque origin: no access to the host page's storage,
cookies, or DOM.
"""

from __future__ import annotations

import html
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

SANDBOX_POLICY = "allow-scripts"

_HOST_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>html, body {{ margin: 0; height: 100%; }} iframe {{ border: 0; width: 100%; height: 100%; }}</style>
</head>
<body>
<iframe title="{title}" sandbox="{sandbox}" referrerpolicy="no-referrer" srcdoc="{srcdoc}"></iframe>
</body>
</html>
"""


def sandboxed_frame(text: str, title: str = "Live Preview") -> str:
    """Return just the sandboxed iframe element for embedding in another page."""
    return (
        f'<iframe title="{html.escape(title)}" sandbox="{SANDBOX_POLICY}" '
        f'referrerpolicy="no-referrer" srcdoc="{html.escape(text, quote=True)}"></iframe>'
    )


def sandboxed_document(text: str, title: str = "Live Preview") -> str:
    """
    Build a standalone host document that renders `text` in a sandboxed frame.

    Args:
        text: Raw buffer text (untrusted HTML)
        title: Title for the host page and the frame

    Returns:
        Complete HTML document as string
    """
    return _HOST_TEMPLATE.format(
        title=html.escape(title),
        sandbox=SANDBOX_POLICY,
        srcdoc=html.escape(text, quote=True),
    )


class PreviewSurface(Protocol):
    """Where rendered documents go."""

    def show(self, document: str) -> None: ...


class MemorySurface:
    """Keeps the last rendered document. Used in tests."""

    def __init__(self) -> None:
        self.document: str | None = None
        self.render_count = 0

    def show(self, document: str) -> None:
        self.document = document
        self.render_count += 1


class FileSurface:
    """Writes the host document to a file a browser can open."""

    def __init__(self, path: Path):
        self.path = path

    def show(self, document: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(document, encoding="utf-8")
        except OSError as e:
            logger.warning("preview: could not write %s: %s", self.path, e)


class PreviewRenderer:
    """Renders the buffer to a surface while the preview panel is visible."""

    def __init__(self, surface: PreviewSurface, visible: bool = True):
        self.surface = surface
        self.visible = visible
        self.last_text: str | None = None

    def render(self, text: str) -> None:
        """Full replace of the surface with `text`. Skipped while hidden."""
        self.last_text = text
        if not self.visible:
            return
        self.surface.show(sandboxed_document(text))

    def set_visible(self, visible: bool) -> None:
        """Show or hide the preview. Showing it renders the latest text at once."""
        self.visible = visible
        if visible and self.last_text is not None:
            self.surface.show(sandboxed_document(self.last_text))
