"""Tests for full index rebuilds."""

import os
from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from locatedb.core.errors import MountEnumerationError
from locatedb.index.builder import run_update
from locatedb.index.exclusion import PathExclusionPolicy
from locatedb.index.models import MountEntry
from locatedb.index.mounts import MountCatalog
from locatedb.index.store import IndexStore
from locatedb.index.traversal import TraversalEngine
from locatedb.query.engine import run_query
from locatedb.query.models import CountResult, PathListResult

MakeTree = Callable[[Path, list[str]], Path]


def _catalog(*roots: Path) -> MountCatalog:
    mounts = [MountEntry(str(root), "ext4") for root in roots]
    return MountCatalog(enumerate_mounts=lambda: mounts)


def _engine(*excluded: str) -> TraversalEngine:
    return TraversalEngine(policy=PathExclusionPolicy(excluded))


class TestRunUpdate:
    """Tests for run_update."""

    def test_indexes_every_mount(
        self, tmp_path: Path, make_tree: MakeTree, index_store: IndexStore
    ) -> None:
        """All paths of all retained mounts end up in the index."""
        first = make_tree(tmp_path / "vol1", ["a/b.txt"])
        second = make_tree(tmp_path / "vol2", ["c.txt"])

        summary = run_update(index_store, catalog=_catalog(first, second), engine=_engine())

        stored = set(index_store.iter_paths())
        assert stored == {
            str(first),
            str(first / "a"),
            str(first / "a" / "b.txt"),
            str(second),
            str(second / "c.txt"),
        }
        assert summary.path_count == 5
        assert summary.mount_count == 2
        assert summary.mounts == (str(first), str(second))
        assert summary.skipped_entries == 0

    def test_summary_timing_fields(
        self, tmp_path: Path, make_tree: MakeTree, index_store: IndexStore
    ) -> None:
        """The summary records duration and a UTC completion time."""
        root = make_tree(tmp_path / "vol", ["f"])
        summary = run_update(index_store, catalog=_catalog(root), engine=_engine())
        assert summary.duration_seconds >= 0
        assert summary.finished_at.endswith("+00:00")

    def test_rebuild_is_idempotent(
        self, tmp_path: Path, make_tree: MakeTree, index_store: IndexStore
    ) -> None:
        """Updating an unchanged tree twice yields the same path set."""
        root = make_tree(tmp_path / "vol", ["x/", "x/y", "z"])
        catalog = _catalog(root)

        run_update(index_store, catalog=catalog, engine=_engine())
        first = set(index_store.iter_paths())
        run_update(index_store, catalog=catalog, engine=_engine())
        second = set(index_store.iter_paths())

        assert first == second
        assert index_store.count() == len(first)

    def test_removed_files_disappear(
        self, tmp_path: Path, make_tree: MakeTree, index_store: IndexStore
    ) -> None:
        """Files deleted between updates are no longer indexed."""
        root = make_tree(tmp_path / "vol", ["gone.txt", "stays.txt"])
        run_update(index_store, catalog=_catalog(root), engine=_engine())

        os.remove(root / "gone.txt")
        run_update(index_store, catalog=_catalog(root), engine=_engine())

        assert str(root / "gone.txt") not in set(index_store.iter_paths())
        assert str(root / "stays.txt") in set(index_store.iter_paths())

    def test_exclusion_boundary(
        self, tmp_path: Path, make_tree: MakeTree, index_store: IndexStore
    ) -> None:
        """An excluded root hides its subtree but not similarly named siblings."""
        root = make_tree(tmp_path / "vol", ["scratch/a", "scratchpad/b", "home/scratch/c"])

        run_update(
            index_store,
            catalog=_catalog(root),
            engine=_engine(str(root / "scratch")),
        )

        rel = {os.path.relpath(p, root) for p in index_store.iter_paths()}
        assert "scratch" not in rel
        assert "scratch/a" not in rel
        assert {"scratchpad/b", "home/scratch/c"} <= rel

    def test_mount_failure_keeps_previous_index(self, index_store: IndexStore) -> None:
        """If mounts cannot be enumerated the stored index is untouched."""
        index_store.replace_all(["/previous"])
        catalog = MagicMock(spec=MountCatalog)
        catalog.discover.side_effect = MountEnumerationError("mount table unavailable")

        with pytest.raises(MountEnumerationError):
            run_update(index_store, catalog=catalog, engine=_engine())

        assert list(index_store.iter_paths()) == ["/previous"]

    def test_no_mounts_writes_empty_index(self, index_store: IndexStore) -> None:
        """With no retained mounts the index is replaced by an empty one."""
        index_store.replace_all(["/previous"])
        catalog = MountCatalog(enumerate_mounts=list)

        summary = run_update(index_store, catalog=catalog, engine=_engine())

        assert summary.path_count == 0
        assert index_store.count() == 0

    def test_update_then_query(
        self, tmp_path: Path, make_tree: MakeTree, index_store: IndexStore
    ) -> None:
        """Paths indexed by an update can be found by literal and regex queries."""
        root = make_tree(tmp_path / "vol", ["data/report.txt", "data/notes.md", "REPORT.TXT"])
        run_update(index_store, catalog=_catalog(root), engine=_engine())

        count = run_query(index_store, "report.txt", is_regex=False, count_only=True)
        assert isinstance(count, CountResult)
        assert count.count == 1

        listed = run_query(index_store, r"\.md$", is_regex=True, count_only=False)
        assert isinstance(listed, PathListResult)
        assert listed.paths == (str(root / "data" / "notes.md"),)

        folded = run_query(
            index_store, "report.txt", is_regex=False, count_only=True, ignore_case=True
        )
        assert isinstance(folded, CountResult)
        assert folded.count == 2
