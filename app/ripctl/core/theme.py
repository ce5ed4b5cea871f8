"""Colour theme for ripctl output.

Colours come from the bundled data/theme.toml, overlaid by whatever
subset the user puts in ~/.config/ripctl/theme.toml.
"""

import logging
import sys
import tomllib
from importlib import resources
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from ripctl.core.paths import get_config_dir

logger = logging.getLogger(__name__)

THEME_FILENAME = "theme.toml"

# Styles that are another style plus bold
_BOLD_STYLES = ("error", "purged")


class ThemeColors(BaseModel):
    """Hex colours for every style ripctl prints with.

    General-purpose styles come first, then one per burial state.
    """

    model_config = ConfigDict(extra="forbid")

    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    buried: str = "#a29bfe"
    exhumed: str = "#c1ff62"
    purged: str = "#f53263"
    grave: str = "#8395a7"

    @field_validator("*", mode="before")
    @classmethod
    def validate_hex_color(cls, v: object, info: Any) -> str:
        """Accept only #RGB or #RRGGBB strings."""
        name = info.field_name
        if not isinstance(v, str):
            msg = f"{name}: color must be a string"
            raise ValueError(msg)

        color = v.strip()
        if not color.startswith("#"):
            msg = f"{name}: color must start with '#'"
            raise ValueError(msg)
        digits = color[1:]
        if len(digits) not in (3, 6):
            msg = f"{name}: color must be #RGB or #RRGGBB format"
            raise ValueError(msg)
        try:
            int(digits, 16)
        except ValueError:
            msg = f"{name}: invalid hex color '{color}'"
            raise ValueError(msg) from None
        return color


def get_user_theme_path() -> Path:
    """Path of the optional user override, next to config.toml."""
    return get_config_dir() / THEME_FILENAME


def get_bundled_theme_path() -> Path:
    """Path of the default theme shipped inside the package."""
    return resources.files("ripctl") / "data" / THEME_FILENAME  # type: ignore[return-value]


def _load_toml_colors(path: Path) -> dict[str, str] | None:
    """Read the [colors] table of a theme file.

    Args:
        path: Theme file to read.

    Returns:
        Colour names mapped to their string values (non-strings are
        dropped), or None if the file is missing, unreadable or invalid.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return None
    except tomllib.TOMLDecodeError as e:
        logger.warning("Failed to parse theme file %s: %s", path, e)
        print(f"Warning: Failed to parse {path}: {e}", file=sys.stderr)
        return None
    except OSError as e:
        logger.warning("Failed to read theme file %s: %s", path, e)
        return None

    table: object = data.get("colors", {})
    if not isinstance(table, dict):
        logger.warning("Ignoring %s: 'colors' is not a table", path)
        return None

    colors: dict[str, str] = {}
    for key, value in cast(dict[str, object], table).items():
        if isinstance(value, str):
            colors[key] = value
    return colors


def load_theme() -> ThemeColors:
    """Build the effective colours.

    User values override bundled ones key by key. If the merged result
    does not validate, the built-in defaults are used instead.

    Returns:
        Validated ThemeColors.
    """
    merged = _load_toml_colors(Path(get_bundled_theme_path()))
    if merged is None:
        logger.error("Bundled theme is missing or broken, using built-in colors")
        merged = {}

    user_path = get_user_theme_path()
    overrides = _load_toml_colors(user_path)
    if overrides:
        logger.debug("Applying %d theme overrides from %s", len(overrides), user_path)
        merged.update(overrides)

    try:
        return ThemeColors(**merged)
    except ValidationError as e:
        logger.warning("Invalid theme, using defaults: %s", e)
        print(f"Warning: Invalid theme configuration: {e}", file=sys.stderr)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Turn colours into a Rich Theme.

    Every ThemeColors field becomes a style of the same name. A few
    derived styles (bold_header, dim) are added for table headers and
    secondary text.

    Args:
        colors: Colours to use. Default: load_theme().

    Returns:
        Rich Theme.
    """
    if colors is None:
        colors = load_theme()

    styles: dict[str, str] = {}
    for name, value in colors.model_dump().items():
        styles[name] = f"bold {value}" if name in _BOLD_STYLES else value
    styles["bold_header"] = f"bold {colors.header}"
    styles["dim"] = colors.muted
    return Theme(styles)


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Rich theme for the shared consoles, built once per process."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = get_rich_theme()
    return _cached_theme
