"""Configuration commands.

Provides commands to inspect the effective configuration and to create
a configuration file populated with the defaults.
"""

from pathlib import Path
from typing import Annotated

import tomli_w
import typer

from locatedb.cli.types import get_config, get_database_path
from locatedb.core.config import LocateConfig, config_to_dict, save_config
from locatedb.core.errors import ConfigError
from locatedb.core.paths import get_config_path
from locatedb.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Inspect or create the configuration file.",
    no_args_is_help=True,
)


def _selected_path(ctx: typer.Context) -> Path:
    """Configuration file chosen by --config or the XDG default."""
    ctx.ensure_object(dict)
    override = ctx.obj.get("config_path")
    return override if isinstance(override, Path) else get_config_path()


@app.command()
def show(ctx: typer.Context) -> None:
    """Print the effective configuration as TOML."""
    config = get_config(ctx)
    data = config_to_dict(config)
    data["database_path"] = str(get_database_path(ctx, config))

    console.print(tomli_w.dumps(data), markup=False, highlight=False, soft_wrap=True, end="")


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing configuration file."),
    ] = False,
) -> None:
    """Write a configuration file containing the defaults."""
    path = _selected_path(ctx)

    if path.exists() and not force:
        print_info(f"Configuration already exists: {path} (use --force to overwrite)")
        raise typer.Exit(code=1)

    try:
        saved = save_config(LocateConfig(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None

    print_success(f"Configuration written to {saved}")


@app.command()
def path(ctx: typer.Context) -> None:
    """Print the configuration file location."""
    console.print(str(_selected_path(ctx)), markup=False, highlight=False, soft_wrap=True)
