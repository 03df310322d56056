"""SQLite persistence for the path index.

The index is one table, ``FILES``, with a single text column ``PATH``.
Every update drops and recreates the table inside one write
transaction, so readers see either the previous index or the new one,
never a mixture.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterable, Iterator
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING

from locatedb.core.errors import ConcurrentUpdateError, IndexNotBuiltError, StorageError

if TYPE_CHECKING:
    from locatedb.query.models import QueryPattern

logger = logging.getLogger(__name__)

TABLE_NAME = "FILES"
COLUMN_NAME = "PATH"


def _is_lock_error(error: sqlite3.OperationalError) -> bool:
    """Check if an OperationalError means another connection holds a lock."""
    message = str(error).lower()
    return "locked" in message or "busy" in message


class IndexStore:
    """Owns the on-disk path index.

    The connection is opened explicitly (or by entering the store as a
    context manager) and closed when the caller is done.

    Example:
        >>> with IndexStore(Path("index.db")) as store:
        ...     store.replace_all(["/data", "/data/report.txt"])
        ...     store.count()
        2

    Args:
        path: Database file location.
        timeout: Seconds to wait for another writer before giving up.
        create: Create the database and its parent directories on open.
            When False, opening a missing database raises IndexNotBuiltError
            and nothing is written to disk.
    """

    def __init__(self, path: Path, *, timeout: float = 5.0, create: bool = True) -> None:
        self._path = path
        self._timeout = timeout
        self._create = create
        self._conn: sqlite3.Connection | None = None

    @property
    def path(self) -> Path:
        """Location of the database file."""
        return self._path

    def open(self) -> IndexStore:
        """Open the database connection.

        Returns:
            The store itself, for chaining.

        Raises:
            IndexNotBuiltError: If create is off and the database does not exist.
            StorageError: If the database cannot be created or opened.
        """
        if self._conn is not None:
            return self

        if self._create:
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise StorageError(f"Cannot create index directory {self._path.parent}: {e}") from e
            target = str(self._path)
        elif not self._path.exists():
            raise self._not_built()
        else:
            # mode=rw never creates the file
            target = f"{self._path.resolve().as_uri()}?mode=rw"

        try:
            # Autocommit mode: transactions are issued explicitly in replace_all
            conn = sqlite3.connect(
                target,
                timeout=self._timeout,
                isolation_level=None,
                uri=not self._create,
            )
            conn.execute("PRAGMA journal_mode=WAL")
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open index database {self._path}: {e}") from e

        self._conn = conn
        logger.debug("Opened index database %s", self._path)
        return self

    def close(self) -> None:
        """Close the database connection if open."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> IndexStore:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            msg = "Index store is not open"
            raise StorageError(msg)
        return self._conn

    def replace_all(self, paths: Iterable[str]) -> int:
        """Atomically replace the whole index.

        The old table is dropped, a new one created and filled, and the
        result committed as a single transaction. If anything fails before
        the commit (including an exception raised while ``paths`` is being
        consumed), the transaction is rolled back and the previous index
        is left exactly as it was.

        Args:
            paths: Paths to store, in the order they should be returned.

        Returns:
            Number of paths written.

        Raises:
            ConcurrentUpdateError: If another update holds the write lock.
            StorageError: If the transaction cannot be completed.
        """
        conn = self._connection

        try:
            conn.execute("BEGIN IMMEDIATE")
        except sqlite3.OperationalError as e:
            if _is_lock_error(e):
                raise ConcurrentUpdateError(
                    f"Another update is writing to {self._path}; try again later"
                ) from e
            raise StorageError(f"Cannot start index transaction: {e}") from e

        written = 0

        def rows() -> Iterator[tuple[str]]:
            nonlocal written
            for path in paths:
                written += 1
                yield (path,)

        try:
            conn.execute(f"DROP TABLE IF EXISTS {TABLE_NAME}")
            conn.execute(f"CREATE TABLE {TABLE_NAME}({COLUMN_NAME} TEXT)")
            conn.executemany(f"INSERT INTO {TABLE_NAME} ({COLUMN_NAME}) VALUES (?)", rows())
            conn.execute("COMMIT")
        except sqlite3.Error as e:
            self._rollback()
            raise StorageError(f"Failed to write index: {e}") from e
        except BaseException:
            self._rollback()
            raise

        logger.debug("Committed %d paths to %s", written, self._path)
        return written

    def _rollback(self) -> None:
        """Roll back the open transaction, if any."""
        conn = self._connection
        if conn.in_transaction:
            try:
                conn.execute("ROLLBACK")
            except sqlite3.Error as e:
                logger.warning("Rollback of index transaction failed: %s", e)

    def _not_built(self) -> IndexNotBuiltError:
        return IndexNotBuiltError(f"No index found in {self._path}; run 'locatedb update' first")

    def has_index(self) -> bool:
        """Check if an index table exists.

        Returns:
            True once at least one update has been committed.
        """
        try:
            row = self._connection.execute(
                "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
                (TABLE_NAME,),
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot read index database: {e}") from e
        return row is not None

    def iter_paths(self) -> Iterator[str]:
        """Yield every indexed path in insertion order.

        Raises:
            IndexNotBuiltError: If no index has been built yet.
            StorageError: If the database cannot be read.
        """
        if not self.has_index():
            raise self._not_built()

        try:
            cursor = self._connection.execute(
                f"SELECT {COLUMN_NAME} FROM {TABLE_NAME} ORDER BY rowid"
            )
            for (path,) in cursor:
                yield path
        except sqlite3.Error as e:
            raise StorageError(f"Cannot read index database: {e}") from e

    def scan(self, pattern: QueryPattern) -> list[str]:
        """Return every indexed path matched by a pattern.

        The pattern is compiled once by the caller and evaluated per row.

        Args:
            pattern: Compiled query pattern.

        Returns:
            Matching paths in insertion order.

        Raises:
            IndexNotBuiltError: If no index has been built yet.
            StorageError: If the database cannot be read.
        """
        return [path for path in self.iter_paths() if pattern.matches(path)]

    def count(self) -> int:
        """Count indexed paths.

        Returns:
            Number of rows, or 0 when no index has been built.
        """
        if not self.has_index():
            return 0
        try:
            (total,) = self._connection.execute(f"SELECT COUNT(*) FROM {TABLE_NAME}").fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Cannot read index database: {e}") from e
        return int(total)
