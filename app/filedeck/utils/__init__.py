"""Utility modules for filedeck.

This module exports commonly used utility functions.
"""

from filedeck.utils.formatting import (
    console,
    create_entry_table,
    err_console,
    format_entry_row,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "create_entry_table",
    "err_console",
    "format_entry_row",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
