"""Command-line interface for persistctl."""
