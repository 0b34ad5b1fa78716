"""Utility modules for persistctl.

This module exports commonly used utility functions.
"""

from persistctl.utils.formatting import (
    console,
    create_plan_table,
    create_results_table,
    err_console,
    print_error,
    print_info,
    print_success,
)

__all__ = [
    "console",
    "create_plan_table",
    "create_results_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
]
