"""
widgetboard UI Configuration.

Handles persistence of UI preferences: the theme and font stamped onto
newly placed widgets, and whether palette drags insert on hover.
Config is stored in ~/.config/widgetboard/ui_config.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, TypedDict

from widgetboard.exceptions import ConfigurationError

from .constants import UI_CONFIG_FILENAME
from .settings import get_config_dir

THEMES = ("light", "dark", "custom")
FONTS = ("font-inter", "font-roboto", "font-lato", "font-montserrat")


class InstanceDefaults(TypedDict):
    """Appearance copied onto every widget instance dropped from the palette."""

    font: str
    theme: str


DEFAULT_CONFIG: dict[str, Any] = {
    "theme": "light",
    "font": "font-inter",
    "insert_on_hover": False,
}


def get_ui_config_path() -> Path:
    """
    Get path to UI config file.

    Returns:
        Path to ~/.config/widgetboard/ui_config.json
    """
    return get_config_dir() / UI_CONFIG_FILENAME


def load_ui_config() -> dict[str, Any]:
    """
    Load UI configuration from file.

    Returns:
        Config dict, or defaults if file doesn't exist or is invalid
    """
    path = get_ui_config_path()
    if path.exists():
        try:
            config = json.loads(path.read_text())
            if not isinstance(config, dict):
                return DEFAULT_CONFIG.copy()
            # Merge with defaults to handle missing keys
            return {**DEFAULT_CONFIG, **config}
        except (json.JSONDecodeError, OSError):
            return DEFAULT_CONFIG.copy()
    return DEFAULT_CONFIG.copy()


def save_ui_config(config: dict[str, Any]) -> None:
    """
    Save UI configuration to file.

    Args:
        config: Configuration dict to save
    """
    path = get_ui_config_path()
    try:
        path.write_text(json.dumps(config, indent=2) + "\n")
    except OSError:
        # Silently fail - config is non-critical
        pass


def get_theme() -> str:
    """Get current theme name from config."""
    theme = str(load_ui_config().get("theme", "light"))
    return theme if theme in THEMES else "light"


def set_theme(theme_name: str) -> None:
    """
    Set and persist theme preference.

    Args:
        theme_name: One of THEMES

    Raises:
        ConfigurationError: If the theme is not known
    """
    if theme_name not in THEMES:
        raise ConfigurationError(
            f"Unknown theme '{theme_name}'. Choose from: {', '.join(THEMES)}", setting="theme"
        )
    config = load_ui_config()
    config["theme"] = theme_name
    save_ui_config(config)


def get_font() -> str:
    """Get current font class from config."""
    font = str(load_ui_config().get("font", "font-inter"))
    return font if font in FONTS else "font-inter"


def set_font(font: str) -> None:
    """Set and persist font preference.

    Raises:
        ConfigurationError: If the font is not known
    """
    if font not in FONTS:
        raise ConfigurationError(
            f"Unknown font '{font}'. Choose from: {', '.join(FONTS)}", setting="font"
        )
    config = load_ui_config()
    config["font"] = font
    save_ui_config(config)


def get_insert_on_hover() -> bool:
    """Whether palette drags insert as soon as they enter the canvas."""
    return bool(load_ui_config().get("insert_on_hover", False))


def get_instance_defaults() -> InstanceDefaults:
    """Appearance overrides applied to newly placed widget instances."""
    return {"font": get_font(), "theme": get_theme()}
