"""Query compilation and evaluation against the path index."""

from locatedb.query.engine import QueryEngine, run_query
from locatedb.query.models import CountResult, PathListResult, QueryMode, QueryOutcome, QueryPattern
from locatedb.query.pattern import compile_pattern, literal_to_regex

__all__ = [
    "CountResult",
    "PathListResult",
    "QueryEngine",
    "QueryMode",
    "QueryOutcome",
    "QueryPattern",
    "compile_pattern",
    "literal_to_regex",
    "run_query",
]
