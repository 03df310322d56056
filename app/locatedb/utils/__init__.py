"""Utility modules for locatedb.

This module exports commonly used utility functions.
"""

from locatedb.utils.formatting import (
    console,
    create_table,
    err_console,
    print_error,
    print_info,
    print_path,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "create_table",
    "err_console",
    "print_error",
    "print_info",
    "print_path",
    "print_success",
    "print_warning",
]
