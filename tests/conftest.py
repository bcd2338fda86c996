"""Shared fixtures."""

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

from boardgame_shelf.config import get_settings

FIXTURES_DIR = Path(__file__).parent / "fixtures"

ENV_PREFIXES = ("BGG_", "FETCH_", "SHELF_", "LOG_")


def load_fixture(name: str) -> str:
    """Load a text fixture file."""
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


class SleepRecorder:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Run every test with default settings, no .env file and a scratch cwd."""
    for key in list(os.environ):
        if key.startswith(ENV_PREFIXES):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    """Recorder injected as the extractors' sleep function."""
    return SleepRecorder()


@pytest.fixture
def thing_xml() -> str:
    """Load /thing response fixture."""
    return load_fixture("thing_response.xml")


@pytest.fixture
def collection_xml() -> str:
    """Load /collection response fixture."""
    return load_fixture("collection_response.xml")


@pytest.fixture
def manifest_text() -> str:
    """Load manifest fixture."""
    return load_fixture("games.yaml")
