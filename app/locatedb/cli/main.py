"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.logging import RichHandler

from locatedb import __version__
from locatedb.cli.commands import config, locate, mounts, stats, update
from locatedb.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="locatedb",
    help="Find files by name using a prebuilt index of local filesystems.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"locatedb version {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool, quiet: bool) -> None:
    """Route log records to the error console."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False, show_time=verbose)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
    database: Annotated[
        Path | None,
        typer.Option(
            "--database",
            "-d",
            help="Index database to use instead of the configured one.",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            help="Configuration file to use instead of ~/.config/locatedb/config.toml.",
        ),
    ] = None,
) -> None:
    """locatedb - find files by name using a prebuilt index.

    Run [bold]locatedb update[/bold] to index all local filesystems, then
    [bold]locatedb locate PATTERN[/bold] to search the index.
    """
    _configure_logging(verbose, quiet)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["database"] = database
    ctx.obj["config_path"] = config_path


# Register commands
app.command(name="update")(update.update)
app.command(name="locate")(locate.locate)
app.command(name="mounts")(mounts.mounts)
app.command(name="stats")(stats.stats)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
