"""CLI commands for persistctl.

This package contains all subcommand implementations.
"""

from persistctl.cli.commands import apply, check, create_dir, init, plan

__all__ = ["apply", "check", "create_dir", "init", "plan"]
