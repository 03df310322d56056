"""Mounts command implementation.

Shows which mounted filesystems an update would index.
"""

from typing import Annotated

import typer
from rich.markup import escape

from locatedb.cli.types import get_config
from locatedb.core.errors import MountEnumerationError
from locatedb.index.models import MountCandidate
from locatedb.index.mounts import MountCatalog
from locatedb.utils.formatting import console, create_table, print_error, print_info

_REASON_LABELS = {
    "virtual": "virtual filesystem",
    "filesystem_type": "type not indexed",
    "nested": "inside another mount",
    "duplicate": "duplicate mount point",
}


def mounts(
    ctx: typer.Context,
    show_all: Annotated[
        bool,
        typer.Option(
            "--all",
            "-a",
            help="Also list mounts that are skipped, with the reason.",
        ),
    ] = False,
) -> None:
    """List the mounted filesystems included in the index."""
    config = get_config(ctx)
    catalog = MountCatalog(filesystem_types=config.filesystem_types)

    try:
        candidates = catalog.candidates()
    except MountEnumerationError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    shown = candidates if show_all else [c for c in candidates if c.retained]
    if not shown:
        print_info("No indexable mounts found.")
        return

    _print_table(shown, show_all=show_all)

    retained = sum(1 for c in candidates if c.retained)
    console.print(f"\n[dim]{retained} of {len(candidates)} mount(s) indexed[/dim]")


def _print_table(candidates: list[MountCandidate], *, show_all: bool) -> None:
    """Display mounts as a Rich table."""
    table = create_table("Mounted Filesystems" if show_all else "Indexed Mounts")
    table.add_column("Mount Point", no_wrap=True)
    table.add_column("Type", style="muted")
    if show_all:
        table.add_column("Status")

    for candidate in candidates:
        mount = candidate.mount
        row = [f"[mount]{escape(mount.path)}[/mount]", escape(mount.filesystem_type or "-")]
        if show_all:
            if candidate.rejection is None:
                row.append("[success]indexed[/success]")
            else:
                label = _REASON_LABELS.get(candidate.rejection.value, candidate.rejection.value)
                row.append(f"[muted]skipped: {label}[/muted]")
        table.add_row(*row)

    console.print(table)
