"""
Preference store — named client-local settings that survive reloads.

Values are read lazily, once per key, then served from memory. Writes go
straight through to the storage backend. Storage failures never reach the
caller: the store logs them, marks itself degraded and keeps working in
memory for the rest of the session.

Booleans are stored JSON-encoded ("true"/"false"), strings are stored raw.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from engine.editor.types import PersistenceError

logger = logging.getLogger(__name__)

_MISSING = object()


class StorageBackend(Protocol):
    """Key/value string storage. Implementations raise PersistenceError or OSError on failure."""

    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """In-memory backend for tests and non-persistent sessions."""

    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})
        self.reads: list[str] = []

    def read(self, key: str) -> str | None:
        self.reads.append(key)
        return self.data.get(key)

    def write(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStorage:
    """
    Backend that keeps all preferences in one JSON object on disk.

    The file is created with owner-only permissions on first write.
    """

    def __init__(self, path: Path):
        self.path = path

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Could not read preferences from {self.path}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"Preferences file {self.path} is not a JSON object")
        return data

    def read(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def write(self, key: str, value: str) -> None:
        try:
            data = self._load()
        except PersistenceError:
            # Start over rather than refuse to save
            data = {}
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(data, f, indent=2)
            self.path.chmod(0o600)
        except OSError as e:
            raise PersistenceError(f"Could not write preferences to {self.path}") from e


class PreferenceStore:
    """Lazy, failure-tolerant view over a StorageBackend."""

    def __init__(self, backend: StorageBackend):
        self.backend = backend
        self.degraded = False
        self._cache: dict[str, str | bool] = {}

    def get(self, key: str, default: str | bool) -> str | bool:
        """
        Return the value for `key`, reading the backend only the first time.

        Args:
            key: Preference name
            default: Value used when nothing (or nothing parseable) is stored.
                Its type decides how the stored string is decoded.

        Returns:
            The stored value, or `default`
        """
        cached = self._cache.get(key, _MISSING)
        if cached is not _MISSING:
            return cached  # type: ignore[return-value]

        raw: str | None = None
        try:
            raw = self.backend.read(key)
        except (PersistenceError, OSError) as e:
            self._degrade("read", key, e)

        value = _decode(raw, default)
        self._cache[key] = value
        return value

    def set(self, key: str, value: str | bool) -> None:
        """Remember `value` and write it through. Never raises on storage failure."""
        self._cache[key] = value
        encoded = json.dumps(value) if isinstance(value, bool) else value
        try:
            self.backend.write(key, encoded)
        except (PersistenceError, OSError) as e:
            self._degrade("write", key, e)

    def _degrade(self, op: str, key: str, error: Exception) -> None:
        if not self.degraded:
            logger.warning("preferences: %s of %r failed, continuing without persistence: %s", op, key, error)
        self.degraded = True


def _decode(raw: str | None, default: str | bool) -> str | bool:
    if raw is None:
        return default
    if isinstance(default, bool):
        try:
            parsed = json.loads(raw)
        except ValueError:
            return default
        return parsed if isinstance(parsed, bool) else default
    return raw
