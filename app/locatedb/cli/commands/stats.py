"""Stats command implementation.

Reports the location, size and age of the path index.
"""

import typer
from rich.markup import escape

from locatedb.cli.types import create_store, get_config
from locatedb.core.errors import LocateError
from locatedb.core.state import load_last_update
from locatedb.utils.formatting import console, create_table, print_error, print_info


def stats(ctx: typer.Context) -> None:
    """Show statistics about the index."""
    config = get_config(ctx)
    store = create_store(ctx, config, create=False)

    if not store.path.exists():
        print_info(f"No index at {store.path}. Run 'locatedb update' to build it.")
        return

    try:
        with store:
            total = store.count()
    except LocateError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    summary = load_last_update(store.path)

    table = create_table("Index Statistics")
    table.add_column("Property", style="muted")
    table.add_column("Value")

    table.add_row("Database", escape(str(store.path)))
    table.add_row("Indexed paths", f"{total:,}")

    if summary is not None:
        table.add_row("Last update", summary.finished_at)
        table.add_row("Duration", f"{summary.duration_seconds:.1f}s")
        table.add_row("Skipped entries", f"{summary.skipped_entries:,}")
        mounts = "\n".join(f"[mount]{escape(m)}[/mount]" for m in summary.mounts) or "-"
        table.add_row(f"Mounts ({summary.mount_count})", mounts)
    else:
        table.add_row("Last update", "[muted]unknown[/muted]")

    console.print(table)
