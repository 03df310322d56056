"""Full index rebuilds.

An update discovers mounts, walks them, and replaces the stored index
in one transaction. Mount discovery happens before the store is
touched, so a failure there leaves the previous index in place.
"""

import logging
import time
from datetime import UTC, datetime

from locatedb.index.models import UpdateSummary
from locatedb.index.mounts import MountCatalog
from locatedb.index.store import IndexStore
from locatedb.index.traversal import TraversalEngine

logger = logging.getLogger(__name__)


def run_update(
    store: IndexStore,
    *,
    catalog: MountCatalog | None = None,
    engine: TraversalEngine | None = None,
) -> UpdateSummary:
    """Rebuild the index from scratch.

    Args:
        store: Open index store receiving the new index.
        catalog: Mount source. Defaults to the OS mount table.
        engine: Traversal engine. Defaults to the standard exclusions.

    Returns:
        Summary of the completed update.

    Raises:
        MountEnumerationError: If mounts cannot be enumerated.
        ConcurrentUpdateError: If another update holds the write lock.
        StorageError: If the new index cannot be committed.
    """
    catalog = catalog or MountCatalog()
    engine = engine or TraversalEngine()

    started = time.monotonic()

    mounts = catalog.discover()
    if not mounts:
        logger.warning("No indexable mounts found; the index will be empty")

    paths = engine.build_file_set(mounts)
    written = store.replace_all(paths)

    summary = UpdateSummary(
        path_count=written,
        mount_count=len(mounts),
        mounts=tuple(m.path for m in mounts),
        skipped_entries=engine.skipped_entries,
        duration_seconds=round(time.monotonic() - started, 3),
        finished_at=datetime.now(tz=UTC).isoformat(),
    )
    logger.info(
        "Indexed %d paths from %d mount(s) in %.1fs",
        summary.path_count,
        summary.mount_count,
        summary.duration_seconds,
    )
    return summary
