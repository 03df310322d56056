"""CLI commands for locatedb.

This package contains all subcommand implementations.
"""

from locatedb.cli.commands import config, locate, mounts, stats, update

__all__ = ["config", "locate", "mounts", "stats", "update"]
