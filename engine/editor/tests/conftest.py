"""
Editor core test fixtures.

Everything runs against MemoryStorage, MemorySurface and MockGenerator;
no network, no disk unless a test asks for tmp_path.
"""

from __future__ import annotations

import pytest

from engine.editor.gate import IdentityContext
from engine.editor.mock_generator import MockGenerator
from engine.editor.preferences import MemoryStorage, PreferenceStore
from engine.editor.preview import MemorySurface
from engine.editor.types import Identity


class FailingStorage:
    """Backend whose every read and write fails, like a full or blocked localStorage."""

    def __init__(self) -> None:
        self.attempts = 0

    def read(self, key: str) -> str | None:
        self.attempts += 1
        raise OSError("storage unavailable")

    def write(self, key: str, value: str) -> None:
        self.attempts += 1
        raise OSError("quota exceeded")


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage) -> PreferenceStore:
    return PreferenceStore(storage)


@pytest.fixture
def surface() -> MemorySurface:
    return MemorySurface()


@pytest.fixture
def generator() -> MockGenerator:
    return MockGenerator(output="<button>Click</button>")


@pytest.fixture
def signed_in() -> IdentityContext:
    return IdentityContext(Identity(uid="user-1", email="dev@example.com"))


@pytest.fixture
def signed_out() -> IdentityContext:
    return IdentityContext()


@pytest.fixture
def notices() -> list[str]:
    return []


@pytest.fixture
def failing_storage() -> FailingStorage:
    return FailingStorage()
