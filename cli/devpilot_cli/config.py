"""
Configuration management for DevPilot CLI.

Multi-environment support:
  Sessions are stored per API URL, so you can be signed in to a local
  server and a deployed one at the same time.

  Config structure (~/.devpilot/config.json):
  {
    "environments": {
      "http://localhost:8000": {
        "token": "<session jwt>",
        "email": "dev@example.com"
      }
    },
    "default_url": "http://localhost:8000"
  }

  Editor preferences (code, theme, panel flags) live next to it in
  ~/.devpilot/preferences.json and the live preview in preview.html.

Environment resolution order:
  1. DEVPILOT_API_URL environment variable
  2. --api-url command line flag
  3. default_url from config file
  4. Fallback: http://localhost:8000
"""

from __future__ import annotations

import json
import os
from pathlib import Path

DEFAULT_API_URL = "http://localhost:8000"


class Config:
    """Config manager for DevPilot CLI with multi-environment support."""

    def __init__(self, api_url_override: str | None = None, config_dir: Path | None = None):
        """
        Initialize config.

        Args:
            api_url_override: Optional --api-url flag value
            config_dir: Directory to keep state in (default ~/.devpilot)
        """
        self.config_dir = config_dir or Path.home() / ".devpilot"
        self.config_file = self.config_dir / "config.json"
        self._data: dict = {}
        self._api_url_override = api_url_override
        self._load()

    def _load(self):
        """Load config from disk. An unreadable file counts as empty."""
        if self.config_file.exists():
            try:
                with open(self.config_file) as f:
                    self._data = json.load(f)
            except (OSError, ValueError):
                self._data = {}

        if not isinstance(self._data, dict):
            self._data = {}
        self._data.setdefault("environments", {})

    def _save(self):
        """Save config to disk with owner-only permissions."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, "w") as f:
            json.dump(self._data, f, indent=2)
        self.config_file.chmod(0o600)

    @property
    def api_url(self) -> str:
        env_url = os.environ.get("DEVPILOT_API_URL")
        if env_url:
            return env_url.rstrip("/")

        if self._api_url_override:
            return self._api_url_override.rstrip("/")

        return self._data.get("default_url", DEFAULT_API_URL).rstrip("/")

    @property
    def default_url(self) -> str:
        return self._data.get("default_url", DEFAULT_API_URL)

    @default_url.setter
    def default_url(self, value: str):
        self._data["default_url"] = value.rstrip("/")
        self._save()

    @property
    def preferences_path(self) -> Path:
        """JSON file backing the editor's preference store."""
        return self.config_dir / "preferences.json"

    @property
    def preview_path(self) -> Path:
        """HTML file the live preview is written to."""
        return self.config_dir / "preview.html"

    def _get_env(self) -> dict:
        return self._data["environments"].get(self.api_url, {})

    def _set_env(self, key: str, value):
        self._data["environments"].setdefault(self.api_url, {})[key] = value
        self._save()

    @property
    def token(self) -> str | None:
        """Session token for the current environment."""
        return self._get_env().get("token")

    @token.setter
    def token(self, value: str):
        self._set_env("token", value)

    @property
    def email(self) -> str | None:
        return self._get_env().get("email")

    @email.setter
    def email(self, value: str):
        self._set_env("email", value)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def clear_environment(self, url: str | None = None):
        """
        Forget the session for one environment.

        Args:
            url: Environment URL to clear. If None, clears current environment.
        """
        target_url = (url or self.api_url).rstrip("/")
        if target_url in self._data["environments"]:
            del self._data["environments"][target_url]
            self._save()

    def clear_all(self):
        """Forget every session. Editor preferences are kept."""
        self._data = {"environments": {}}
        if self.config_file.exists():
            self.config_file.unlink()

    def list_environments(self) -> list[dict]:
        """
        List all signed-in environments.

        Returns:
            List of dicts with url, email, is_current keys.
        """
        current = self.api_url
        return [
            {"url": url, "email": env.get("email"), "is_current": url == current}
            for url, env in self._data.get("environments", {}).items()
            if env.get("token")
        ]
