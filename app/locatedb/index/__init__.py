"""Index building and storage.

This module provides mount discovery, path exclusion rules, directory
traversal, and the SQLite store holding the path index.
"""

from locatedb.index.builder import run_update
from locatedb.index.exclusion import DEFAULT_EXCLUDED_ROOTS, PathExclusionPolicy, is_excluded_path
from locatedb.index.models import MountCandidate, MountEntry, RejectionReason, UpdateSummary
from locatedb.index.mounts import (
    DEFAULT_FILESYSTEM_TYPES,
    MountCatalog,
    dedupe_mounts,
    discover_mounts,
    is_strict_descendant,
)
from locatedb.index.store import IndexStore
from locatedb.index.traversal import TraversalEngine

__all__ = [
    "DEFAULT_EXCLUDED_ROOTS",
    "DEFAULT_FILESYSTEM_TYPES",
    "IndexStore",
    "MountCandidate",
    "MountCatalog",
    "MountEntry",
    "PathExclusionPolicy",
    "RejectionReason",
    "TraversalEngine",
    "UpdateSummary",
    "dedupe_mounts",
    "discover_mounts",
    "is_excluded_path",
    "is_strict_descendant",
    "run_update",
]
