"""Query execution against the path index."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from locatedb.query.models import (
    CountResult,
    PathListResult,
    QueryMode,
    QueryOutcome,
)
from locatedb.query.pattern import compile_pattern

if TYPE_CHECKING:
    from locatedb.index.store import IndexStore

logger = logging.getLogger(__name__)


class QueryEngine:
    """Answers queries from an open IndexStore.

    The engine only reads the index and keeps no state between queries.

    Args:
        store: Open index store.
    """

    def __init__(self, store: IndexStore) -> None:
        self._store = store

    def query(
        self,
        text: str,
        is_regex: bool,
        mode: QueryMode,
        *,
        ignore_case: bool = False,
        limit: int | None = None,
    ) -> QueryOutcome:
        """Run a query.

        Args:
            text: Literal substring or regular expression.
            is_regex: Treat text as a regular expression.
            mode: Count matches or list them.
            ignore_case: Match without regard to case.
            limit: Maximum number of paths returned in list mode.

        Returns:
            CountResult in count mode, PathListResult in list mode.

        Raises:
            PatternError: If text is not a valid regular expression.
            IndexNotBuiltError: If no index has been built yet.
            StorageError: If the index cannot be read.
        """
        pattern = compile_pattern(text, is_regex, mode, ignore_case=ignore_case)
        logger.debug("Searching for %r using %r", text, pattern.expression)

        matches = self._store.scan(pattern)

        if pattern.mode == QueryMode.COUNT:
            return CountResult(count=len(matches), text=text, expression=pattern.expression)

        shown = matches[:limit] if limit is not None else matches
        return PathListResult(
            paths=tuple(shown),
            text=text,
            expression=pattern.expression,
            total=len(matches),
        )


def run_query(
    store: IndexStore,
    text: str,
    is_regex: bool,
    count_only: bool,
    *,
    ignore_case: bool = False,
    limit: int | None = None,
) -> QueryOutcome:
    """Query the index.

    Args:
        store: Open index store.
        text: Literal substring or regular expression.
        is_regex: Treat text as a regular expression.
        count_only: Return only the number of matches.
        ignore_case: Match without regard to case.
        limit: Maximum number of paths returned when listing.

    Returns:
        CountResult when count_only is set, PathListResult otherwise.
    """
    mode = QueryMode.COUNT if count_only else QueryMode.LIST
    return QueryEngine(store).query(text, is_regex, mode, ignore_case=ignore_case, limit=limit)
