"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from locatedb.index.store import IndexStore


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point XDG config and state directories into the test's tmp_path."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "xdg-state"))


@pytest.fixture
def make_tree() -> Callable[[Path, list[str]], Path]:
    """Create a directory tree from relative paths.

    Entries ending in "/" become directories, everything else an empty file.
    """

    def _make(root: Path, entries: list[str]) -> Path:
        root.mkdir(parents=True, exist_ok=True)
        for entry in entries:
            target = root / entry
            if entry.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
            else:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text("")
        return root

    return _make


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Location of a fresh index database."""
    return tmp_path / "db" / "index.db"


@pytest.fixture
def index_store(db_path: Path) -> Iterator[IndexStore]:
    """An open IndexStore backed by a temporary database."""
    with IndexStore(db_path, timeout=0.1) as store:
        yield store
