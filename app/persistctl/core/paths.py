"""XDG-compliant path management for persistctl.

This module provides the locations persistctl reads its own
configuration from, following the XDG Base Directory Specification.

XDG defaults:
- Config: ~/.config/persistctl/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "persistctl"

# Environment variable overriding the persistence configuration file
CONFIG_ENV_VAR = "PERSISTCTL_CONFIG"

CONFIG_FILENAME = "persistence.toml"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/persistctl/ (or XDG_CONFIG_HOME/persistctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_config_path() -> Path:
    """Get the persistence configuration file path.

    The PERSISTCTL_CONFIG environment variable takes precedence, which
    lets activation scripts point at a system-wide file.

    Returns:
        Path to ~/.config/persistctl/persistence.toml or $PERSISTCTL_CONFIG.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return get_config_dir() / CONFIG_FILENAME


def get_user_theme_path() -> Path:
    """Get the user theme configuration path.

    Returns:
        Path to ~/.config/persistctl/theme.toml.
    """
    return get_config_dir() / "theme.toml"
