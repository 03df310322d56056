"""Directory traversal for index builds.

Walks each retained mount from its root and collects every path below
it, staying on the mount's own device and leaving out excluded roots.
Unreadable entries are skipped; a single bad node never aborts a build.
"""

import logging
import os
import threading
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor

from locatedb.core.errors import TraversalEntryError
from locatedb.index.exclusion import PathExclusionPolicy
from locatedb.index.models import MountEntry

logger = logging.getLogger(__name__)


class TraversalEngine:
    """Collects the paths of a set of mounts.

    Symbolic links are recorded but never followed, and a directory on
    a different device than the mount root (another filesystem mounted
    below it) is neither recorded nor entered.

    Args:
        policy: Exclusion rules. Defaults to the standard excluded roots.
        workers: Number of mounts walked concurrently.
        on_mount: Optional callback invoked before each mount is walked.
    """

    def __init__(
        self,
        *,
        policy: PathExclusionPolicy | None = None,
        workers: int = 1,
        on_mount: Callable[[MountEntry], None] | None = None,
    ) -> None:
        if workers < 1:
            msg = f"workers must be at least 1, got {workers}"
            raise ValueError(msg)
        self._policy = policy or PathExclusionPolicy()
        self._workers = workers
        self._on_mount = on_mount
        self._skipped = 0
        self._lock = threading.Lock()

    @property
    def skipped_entries(self) -> int:
        """Number of entries skipped because they could not be read."""
        return self._skipped

    def build_file_set(self, mounts: Iterable[MountEntry]) -> list[str]:
        """Walk every mount and collect the indexed paths.

        Args:
            mounts: Retained mounts (no mount nested below another).

        Returns:
            All visited, non-excluded paths. Paths of the first mount come
            first; the order within a mount is unspecified.
        """
        mounts = list(mounts)
        self._skipped = 0

        if self._workers == 1 or len(mounts) < 2:
            paths: list[str] = []
            for mount in mounts:
                paths.extend(self._walk_mount(mount))
            return paths

        with ThreadPoolExecutor(max_workers=min(self._workers, len(mounts))) as executor:
            results = list(executor.map(self._walk_mount, mounts))

        return [path for chunk in results for path in chunk]

    def _walk_mount(self, mount: MountEntry) -> list[str]:
        """Walk a single mount into a list."""
        if self._on_mount is not None:
            self._on_mount(mount)
        logger.debug("Indexing %s (%s)", mount.path, mount.filesystem_type)
        return list(self.walk(mount.path))

    def walk(self, root: str) -> Iterator[str]:
        """Yield the root and every entry below it on the same device.

        Args:
            root: Absolute directory to start from.

        Yields:
            Absolute paths of visited entries, root first.
        """
        if self._policy.should_skip(root):
            logger.debug("Mount root %s is excluded", root)
            return

        try:
            root_device = os.lstat(root).st_dev
        except OSError as e:
            logger.warning("Cannot read mount root %s: %s", root, e.strerror or e)
            return

        yield root

        pending = [root]
        while pending:
            directory = pending.pop()
            try:
                with os.scandir(directory) as it:
                    entries = list(it)
            except OSError as e:
                self._record_skip(directory, e)
                continue

            for entry in entries:
                path = entry.path
                if self._policy.should_skip(path):
                    continue

                try:
                    # Undecodable names carry surrogate escapes and cannot be stored as TEXT
                    path.encode("utf-8")
                    is_dir = entry.is_dir(follow_symlinks=False)
                    if is_dir and entry.stat(follow_symlinks=False).st_dev != root_device:
                        continue
                except (OSError, UnicodeEncodeError) as e:
                    self._record_skip(path, e)
                    continue

                yield path
                if is_dir:
                    pending.append(path)

    def _record_skip(self, path: str, cause: OSError | UnicodeError) -> None:
        """Count and log an entry that could not be read."""
        error = TraversalEntryError(path, cause)
        with self._lock:
            self._skipped += 1
        logger.debug("Skipping entry: %s", error)
