"""Locate command implementation.

Searches the path index for a literal substring or regular expression.
"""

from typing import Annotated

import typer

from locatedb.cli.types import OutputFormat, create_store, get_config, is_quiet
from locatedb.core.errors import LocateError
from locatedb.query.engine import run_query
from locatedb.query.models import CountResult, PathListResult
from locatedb.utils.formatting import console, err_console, print_error, print_path


def locate(
    ctx: typer.Context,
    pattern: Annotated[
        str,
        typer.Argument(help="Text to search for (or a regular expression with --regex)."),
    ],
    regex: Annotated[
        bool,
        typer.Option(
            "--regex",
            "-r",
            help="Interpret PATTERN as a regular expression.",
        ),
    ] = False,
    count_only: Annotated[
        bool,
        typer.Option(
            "--count",
            "-c",
            help="Only print the number of matching paths.",
        ),
    ] = False,
    ignore_case: Annotated[
        bool,
        typer.Option(
            "--ignore-case",
            "-i",
            help="Match without regard to case.",
        ),
    ] = False,
    limit: Annotated[
        int | None,
        typer.Option(
            "--limit",
            "-n",
            min=1,
            help="Print at most this many paths.",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: plain or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.PLAIN,
    null: Annotated[
        bool,
        typer.Option(
            "--null",
            "-0",
            help="Separate paths with NUL instead of newline.",
        ),
    ] = False,
) -> None:
    """Search the index for paths containing PATTERN.

    Matching is case-sensitive unless --ignore-case is given. Exits with
    status 1 when no path matches.

    Examples:
        locatedb locate report.txt          # Paths containing "report.txt"
        locatedb locate -r '\\.py$'          # Paths ending in .py
        locatedb locate -c -i readme        # Count paths containing "readme"
        locatedb locate -0 .log | xargs -0 ls -l
    """
    config = get_config(ctx)
    store = create_store(ctx, config, create=False)

    try:
        with store:
            outcome = run_query(
                store,
                pattern,
                regex,
                count_only,
                ignore_case=ignore_case,
                limit=limit,
            )
    except LocateError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    if isinstance(outcome, CountResult):
        _print_count(outcome, output_format)
        return

    _print_paths(outcome, output_format, null=null, quiet=is_quiet(ctx))

    if outcome.total == 0:
        raise typer.Exit(code=1)


# === Private helper functions ===


def _print_count(outcome: CountResult, output_format: OutputFormat) -> None:
    """Display a match count."""
    if output_format == OutputFormat.JSON:
        console.print_json(
            data={
                "text": outcome.text,
                "expression": outcome.expression,
                "count": outcome.count,
            }
        )
        return
    console.print(str(outcome.count), highlight=False)


def _print_paths(
    outcome: PathListResult,
    output_format: OutputFormat,
    *,
    null: bool,
    quiet: bool,
) -> None:
    """Display matching paths."""
    if output_format == OutputFormat.JSON:
        console.print_json(
            data={
                "text": outcome.text,
                "expression": outcome.expression,
                "total": outcome.total,
                "paths": list(outcome.paths),
            }
        )
        return

    end = "\0" if null else "\n"
    for path in outcome.paths:
        print_path(path, end=end)

    if outcome.truncated and not quiet:
        err_console.print(
            f"[dim](showing {len(outcome.paths)} of {outcome.total} matches)[/dim]",
        )
