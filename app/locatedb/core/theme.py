"""Console colours for locatedb output.

The bundled palette in ``data/theme.toml`` can be partially overridden by
``theme.toml`` in the config directory. Colours accept anything Rich can
parse: hex codes, ``rgb(...)`` or named colours.
"""

import logging
import tomllib
from functools import lru_cache
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.color import Color, ColorParseError
from rich.theme import Theme

from locatedb.core.paths import get_config_dir

logger = logging.getLogger(__name__)


class ThemeColors(BaseModel):
    """Palette for the styles locatedb renders."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"
    mount: str = "#0e8ac8"

    @field_validator("*")
    @classmethod
    def validate_color(cls, v: str) -> str:
        color = v.strip()
        try:
            Color.parse(color)
        except ColorParseError as e:
            msg = f"not a colour: {v!r}"
            raise ValueError(msg) from e
        return color

    def to_rich_theme(self) -> Theme:
        """Map the palette onto the style names used by the CLI."""
        return Theme(
            {
                "dim": self.muted,
                "muted": self.muted,
                "bold_header": f"bold {self.header}",
                "border": self.border,
                "success": self.success,
                "warning": self.warning,
                "error": f"bold {self.error}",
                "info": self.info,
                "mount": f"bold {self.mount}",
            }
        )


def get_user_theme_path() -> Path:
    """Path to ~/.config/locatedb/theme.toml."""
    return get_config_dir() / "theme.toml"


def _read_colors(text: str) -> dict[str, str]:
    data = tomllib.loads(text)
    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        msg = "'colors' must be a table"
        raise ValueError(msg)
    return colors


def load_theme(user_path: Path | None = None) -> ThemeColors:
    """Load the bundled palette with user overrides applied.

    A missing user file is not an error. An unreadable or invalid one is
    logged and the bundled palette is used instead.

    Args:
        user_path: Override file; defaults to the config directory's theme.toml.

    Returns:
        Validated palette.
    """
    bundled_text = resources.files("locatedb.data").joinpath("theme.toml").read_text()
    bundled = _read_colors(bundled_text)

    path = user_path if user_path is not None else get_user_theme_path()
    try:
        overrides = _read_colors(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        overrides = {}
    except (OSError, tomllib.TOMLDecodeError, ValueError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        overrides = {}
    else:
        logger.debug("Loaded theme overrides from %s", path)

    try:
        return ThemeColors(**{**bundled, **overrides})
    except ValidationError as e:
        logger.warning("Invalid theme in %s, using bundled colours: %s", path, e)
        return ThemeColors(**bundled)


@lru_cache(maxsize=1)
def get_theme() -> Theme:
    """Rich theme for the shared consoles, loaded once per process."""
    return load_theme().to_rich_theme()
