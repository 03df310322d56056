"""Update command implementation.

Rebuilds the path index from every local filesystem.
"""

from contextlib import nullcontext
from typing import Annotated

import typer
from rich.markup import escape

from locatedb.cli.types import create_store, get_config, is_quiet
from locatedb.core.errors import LocateError
from locatedb.core.state import record_update
from locatedb.index.builder import run_update
from locatedb.index.exclusion import PathExclusionPolicy
from locatedb.index.models import MountEntry
from locatedb.index.mounts import MountCatalog
from locatedb.index.traversal import TraversalEngine
from locatedb.utils.formatting import console, print_error, print_info, print_success, print_warning


def update(
    ctx: typer.Context,
    workers: Annotated[
        int | None,
        typer.Option(
            "--workers",
            "-w",
            min=1,
            max=64,
            help="Number of mounts indexed in parallel (overrides config).",
        ),
    ] = None,
) -> None:
    """Rebuild the index of all local filesystems.

    Every update is a full rebuild. The previous index stays usable until
    the new one is committed.

    Examples:
        locatedb update                  # Index all local filesystems
        locatedb update --workers 4      # Walk up to 4 mounts at once
    """
    config = get_config(ctx)
    quiet = is_quiet(ctx)
    store = create_store(ctx, config)

    status = console.status("Discovering mounts...", spinner="dots")

    def on_mount(mount: MountEntry) -> None:
        status.update(f"Indexing [mount]{escape(mount.path)}[/mount]...")

    catalog = MountCatalog(filesystem_types=config.filesystem_types)
    engine = TraversalEngine(
        policy=PathExclusionPolicy(config.excluded_roots),
        workers=workers or config.workers,
        on_mount=on_mount,
    )

    try:
        with nullcontext() if quiet else status, store:
            summary = run_update(store, catalog=catalog, engine=engine)
    except LocateError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    try:
        record_update(summary, store.path)
    except OSError as e:
        print_warning(f"Could not record update summary: {e}")

    if quiet:
        return

    print_success(
        f"Indexed {summary.path_count:,} paths from {summary.mount_count} mount(s) "
        f"in {summary.duration_seconds:.1f}s."
    )
    if summary.skipped_entries:
        print_info(f"{summary.skipped_entries:,} unreadable entries were skipped.")
