"""Console colours for persistctl.

Defaults live on :class:`ThemeColors`. Any subset of them may be
overridden in a ``[colors]`` table in ``~/.config/persistctl/theme.toml``.
"""

import logging
import re
import tomllib
from functools import cache
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from persistctl.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")

# Rendered bold on top of their colour
_BOLD_STYLES = frozenset({"error", "explicit"})


class ThemeColors(BaseModel):
    """Colours used by the plan and results tables and status lines."""

    model_config = ConfigDict(extra="forbid")

    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    # Spec kinds
    explicit: str = "#c1ff62"
    implicit: str = "#226666"

    # Materializer actions
    created: str = "#c1ff62"
    synced: str = "#0e8ac8"
    skipped: str = "#b2bec3"

    @field_validator("*")
    @classmethod
    def validate_hex_color(cls, v: str) -> str:
        if not _HEX_COLOR.match(v):
            raise ValueError(f"invalid hex color '{v}', expected #RGB or #RRGGBB")
        return v


def load_colors(path: Path | None = None) -> ThemeColors:
    """Load colour overrides, falling back to the defaults when unusable.

    Args:
        path: Theme file to read. Defaults to the user theme path.

    Returns:
        Validated colours.
    """
    theme_path = path or get_user_theme_path()
    try:
        with open(theme_path, "rb") as f:
            overrides = tomllib.load(f).get("colors", {})
        return ThemeColors.model_validate(overrides)
    except FileNotFoundError:
        return ThemeColors()
    except (OSError, tomllib.TOMLDecodeError, ValidationError) as e:
        logger.warning("Ignoring theme file %s: %s", theme_path, e)
        return ThemeColors()


def build_theme(colors: ThemeColors) -> Theme:
    """Convert colours into the named Rich styles used for output."""
    styles = {
        name: f"bold {value}" if name in _BOLD_STYLES else value
        for name, value in colors.model_dump().items()
    }
    styles["bold_header"] = f"bold {colors.header}"
    return Theme(styles)


@cache
def get_theme() -> Theme:
    """Get the Rich theme, loading it on first use."""
    return build_theme(load_colors())
