"""CLI package for locatedb.

This package contains the Typer application and all subcommands.
"""

from locatedb.cli.main import app

__all__ = ["app"]
