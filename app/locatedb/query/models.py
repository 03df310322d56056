"""Query domain models.

This module defines the compiled query pattern and the two shapes a
query result can take: a match count or the list of matching paths.
"""

import re
from dataclasses import dataclass
from enum import Enum


class QueryMode(str, Enum):
    """What a query returns.

    Attributes:
        COUNT: Only the number of matching paths.
        LIST: The matching paths themselves.
    """

    COUNT = "count"
    LIST = "list"


@dataclass(frozen=True, slots=True)
class QueryPattern:
    """A user query compiled to a regular expression.

    Instances are built for one query and evaluated against every row
    of the index; they are never shared between queries.

    Attributes:
        regex: Compiled expression evaluated against each path.
        mode: Whether the query counts or lists matches.
        text: The query as typed by the user.
        is_regex: True if text was used verbatim as the expression.
    """

    regex: re.Pattern[str]
    mode: QueryMode
    text: str
    is_regex: bool

    @property
    def expression(self) -> str:
        """The effective regular expression source."""
        return self.regex.pattern

    def matches(self, path: str) -> bool:
        """Check if a path is matched by this pattern."""
        return self.regex.search(path) is not None


@dataclass(frozen=True, slots=True)
class CountResult:
    """Number of indexed paths matched by a query.

    Attributes:
        count: Number of matching paths.
        text: The query as typed by the user.
        expression: The effective regular expression.
    """

    count: int
    text: str
    expression: str


@dataclass(frozen=True, slots=True)
class PathListResult:
    """Indexed paths matched by a query, in index order.

    Attributes:
        paths: Matching paths.
        text: The query as typed by the user.
        expression: The effective regular expression.
        total: Number of matches before any display limit was applied.
    """

    paths: tuple[str, ...]
    text: str
    expression: str
    total: int

    @property
    def truncated(self) -> bool:
        """Check if a limit cut off some matches."""
        return self.total > len(self.paths)


QueryOutcome = CountResult | PathListResult
