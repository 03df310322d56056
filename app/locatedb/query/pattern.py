"""Compile user queries into regular expressions.

Literal queries are escaped and wrapped so that a fully anchored
expression still matches the text anywhere in a path. Regex queries are
compiled verbatim.
"""

import re

from locatedb.core.errors import PatternError
from locatedb.query.models import QueryMode, QueryPattern


def literal_to_regex(text: str) -> str:
    """Build the expression matching a literal substring anywhere.

    Every regex metacharacter is escaped with ``re.escape``, so
    ``a.b[c]`` matches only the exact text ``a.b[c]``.

    Args:
        text: Literal query text.

    Returns:
        Expression of the form ``^.*<escaped>.*$``.
    """
    return f"^.*{re.escape(text)}.*$"


def compile_pattern(
    text: str,
    is_regex: bool,
    mode: QueryMode = QueryMode.LIST,
    *,
    ignore_case: bool = False,
) -> QueryPattern:
    """Compile a user query.

    Args:
        text: Query text.
        is_regex: Use text verbatim as a regular expression instead of
            a literal substring.
        mode: Whether the query counts or lists matches.
        ignore_case: Match without regard to case.

    Returns:
        QueryPattern holding the compiled expression.

    Raises:
        PatternError: If text is not a valid regular expression.
    """
    flags = re.IGNORECASE if ignore_case else 0

    if is_regex:
        source = text
    else:
        source = literal_to_regex(text)
        # Let ".*" span newlines, which are legal in file names
        flags |= re.DOTALL

    try:
        regex = re.compile(source, flags)
    except re.error as e:
        raise PatternError(text, str(e)) from e

    return QueryPattern(regex=regex, mode=mode, text=text, is_regex=is_regex)
