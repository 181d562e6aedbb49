"""REPL for DevPilot CLI — the editor in a terminal."""

from __future__ import annotations

import asyncio
import webbrowser
from pathlib import Path

import httpx

from devpilot_cli.client import ApiClient
from devpilot_cli.config import Config
from engine.editor import share_codec
from engine.editor.editor import EditorSession
from engine.editor.gate import IdentityContext
from engine.editor.mock_generator import MockGenerator
from engine.editor.preferences import JsonFileStorage, PreferenceStore
from engine.editor.preview import FileSurface
from engine.editor.types import DecodeError, Identity, Panel, SuggestionStatus

PANEL_NAMES = {
    "ai": Panel.AI,
    "preview": Panel.PREVIEW,
    "output": Panel.OUTPUT,
    "tutorials": Panel.TUTORIALS,
}


class Repl:
    """Interactive editor session over the DevPilot API."""

    def __init__(self, config: Config, offline: bool = False, client: ApiClient | None = None):
        self.config = config
        self.offline = offline
        self.client = client or ApiClient(config.api_url, config.token)
        self.identity = IdentityContext()
        generator = MockGenerator() if offline else self.client.generate
        self.session = EditorSession(
            PreferenceStore(JsonFileStorage(config.preferences_path)),
            generator,
            self.identity,
            surface=FileSurface(config.preview_path),
            notify=self._notice,
        )
        self.running = True

    def start(self, share_link: str | None = None):
        """Sign the session in, mount the editor and run the loop."""
        self.identity.set_identity(self._resolve_identity())

        token = share_codec.token_from_url(share_link) if share_link else None
        view = self.session.mount(share_token=token)
        if view != "editor":
            print("Not signed in. Run 'devpilot login' first.")
            self.client.close()
            return

        print(f"devpilot > editing ({len(self.session.code)} chars). /help for commands.")

        while self.running:
            try:
                line = input("devpilot > ").strip()
                if not line:
                    continue
                if line.startswith("/"):
                    self._handle_command(line)
                else:
                    self._ask(line)
            except (EOFError, KeyboardInterrupt):
                print()
                break

        self.session.teardown()
        self.client.close()

    def _resolve_identity(self) -> Identity | None:
        if self.offline:
            return Identity(uid="offline", email=self.config.email)
        if not self.config.is_authenticated:
            return None
        try:
            me = self.client.me()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 401:
                self.config.clear_environment()
                return None
            print(f"  Warning: {self.config.api_url} answered {e.response.status_code} to /auth/me")
            return Identity(uid=self.config.email or "unknown", email=self.config.email)
        except httpx.HTTPError as e:
            # Unreachable server: keep the stored session, generation will report the failure
            print(f"  Warning: could not reach {self.config.api_url} ({e})")
            return Identity(uid=self.config.email or "unknown", email=self.config.email)
        return Identity(uid=me["uid"], email=me.get("email"))

    def _notice(self, message: str):
        print(f"  {message}")

    def _handle_command(self, line: str):
        """Handle REPL commands."""
        parts = line.split(maxsplit=1)
        cmd = parts[0].lower()
        arg = parts[1] if len(parts) > 1 else None

        if cmd == "/quit":
            self.running = False
            print("Goodbye.")
        elif cmd == "/ai":
            self._ask(arg or "")
        elif cmd == "/fold":
            if self.session.fold():
                print(f"  Appended. Buffer is {len(self.session.code)} chars.")
        elif cmd == "/clear":
            if not self.session.clear_suggestion():
                print("  Wait for the current suggestion to finish.")
        elif cmd == "/show":
            print(self.session.code)
        elif cmd == "/edit":
            if arg:
                self._load_file(Path(arg).expanduser())
            else:
                print("Usage: /edit <file>")
        elif cmd == "/set":
            self.session.edit(arg or "")
        elif cmd == "/share":
            print(f"  {self.session.share_url(f'{self.config.api_url}/editor')}")
            print("  Copy the link above to share this code.")
        elif cmd == "/open":
            if arg:
                self._open_link(arg)
            else:
                print("Usage: /open <link>")
        elif cmd == "/toggle":
            self._toggle(arg)
        elif cmd == "/theme":
            print(f"  Theme: {self.session.toggle_theme()}")
        elif cmd == "/export":
            self._export(Path(arg).expanduser() if arg else None)
        elif cmd == "/preview":
            self._open_preview()
        elif cmd == "/tutorials":
            self._show_tutorials()
        elif cmd == "/help":
            self._show_help()
        else:
            print(f"Unknown command: {cmd}")
            print("Type /help for available commands.")

    def _ask(self, prompt: str):
        """Submit a prompt and report the outcome."""
        if not self.session.panels.get(Panel.AI):
            print("  AI panel is hidden. /toggle ai to show it.")
            return
        try:
            accepted = asyncio.run(self.session.submit_prompt(prompt))
        except KeyboardInterrupt:
            print()
            print("  (Interrupted)")
            return
        if not accepted:
            return

        request = self.session.suggestions.request
        if request.status is SuggestionStatus.FAILED:
            # Already reported through the notice callback
            return
        if self.session.panels.get(Panel.OUTPUT):
            print(f"  \033[32mai:\033[0m {self.session.ai_output}")
            print("  /fold to append it to your code, /clear to discard.")
        else:
            print("  Suggestion ready. /toggle output to see it, /fold to append it.")

    def _load_file(self, path: Path):
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"  Could not read {path}: {e}")
            return
        self.session.edit(text)
        print(f"  Loaded {path} ({len(text)} chars).")

    def _open_link(self, link: str):
        token = share_codec.token_from_url(link) if "?" in link else link
        if not token:
            print("  That link has no shared code in it.")
            return
        try:
            text = share_codec.decode(token)
        except DecodeError as e:
            print(f"  {e.message}")
            return
        self.session.edit(text)
        print(f"  Opened shared code ({len(text)} chars).")

    def _toggle(self, name: str | None):
        panel = PANEL_NAMES.get((name or "").lower())
        if panel is None:
            print(f"Usage: /toggle <{'|'.join(PANEL_NAMES)}>")
            return
        state = "shown" if self.session.toggle_panel(panel) else "hidden"
        print(f"  {name.lower()} panel {state}.")

    def _export(self, path: Path | None):
        try:
            written = self.session.export(path)
        except OSError as e:
            print(f"  Export failed: {e}")
            return
        print(f"  Exported to {written}")

    def _open_preview(self):
        if not self.session.panels.get(Panel.PREVIEW):
            print("  Preview panel is hidden. /toggle preview to show it.")
            return
        uri = self.config.preview_path.resolve().as_uri()
        print(f"  Opening {uri}")
        webbrowser.open(uri)

    def _show_tutorials(self):
        tutorials = self.session.visible_tutorials()
        if not tutorials:
            print("  Tutorials panel is hidden. /toggle tutorials to show it.")
            return
        for tutorial in tutorials:
            print(f"  \033[1m{tutorial['title']}\033[0m")
            print(f"    {tutorial['content']}")

    def _show_help(self):
        print("""
  REPL Commands:
    <text> | /ai <text> - Ask the AI for code
    /fold            - Append the AI output to your code
    /clear           - Discard the AI output
    /show            - Print the code buffer
    /edit <file>     - Replace the buffer with a file's contents
    /set <html>      - Replace the buffer with inline text
    /share           - Print a share link for the buffer (copy it from the terminal)
    /open <link>     - Load code from a share link
    /toggle <panel>  - Show or hide ai, preview, output, tutorials
    /theme           - Switch between light and dark
    /export [path]   - Save the buffer (default code.html)
    /preview         - Open the live preview in a browser
    /tutorials       - Show the tutorials
    /help            - Show this help
    /quit            - Exit REPL
""")
