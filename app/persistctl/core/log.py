"""Logging setup for the persistctl CLI.

Log records go to stderr through Rich so that tracing output never
mixes with command output on stdout.
"""

import logging
from logging.config import dictConfig

from persistctl.utils.formatting import err_console


def log_level(verbose: bool = False, debug: bool = False) -> int:
    """Pick the root log level for the given CLI flags."""
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def configure_logging(verbose: bool = False, debug: bool = False) -> None:
    """Install a Rich handler on the persistctl logger.

    Args:
        verbose: Log informational messages.
        debug: Trace every planning and materialization step.
    """
    level = log_level(verbose, debug)
    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {"format": "%(name)s: %(message)s"},
            },
            "handlers": {
                "rich": {
                    "()": "rich.logging.RichHandler",
                    "console": err_console,
                    "show_time": debug,
                    "show_path": False,
                    "formatter": "default",
                    "level": level,
                },
            },
            "loggers": {
                "persistctl": {
                    "level": level,
                    "handlers": ["rich"],
                    "propagate": False,
                },
            },
        }
    )
