"""Utility modules for dirwalk.

This module exports commonly used formatting helpers.
"""

from dirwalk.utils.formatting import (
    console,
    err_console,
    format_mode,
    format_mtime,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)

__all__ = [
    "console",
    "err_console",
    "format_mode",
    "format_mtime",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
