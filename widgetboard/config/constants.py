"""
Centralized constants for widgetboard.

Grid geometry, default layout values and storage keys live here so the
layout engine, the TUI and the command line agree on them.
"""

from typing import Any, Dict

# =============================================================================
# GRID GEOMETRY (in grid cells)
# =============================================================================

GRID_COLUMNS = 4  # Fixed column count of the canvas flow grid
MAX_ROW_SPAN = 8  # Tallest widget the interactive resize allows
MIN_WIDGET_SPAN = 1  # Smallest valid width/height

# Footprint used when a registry entry has no explicit size
DEFAULT_WIDGET_WIDTH = 2
DEFAULT_WIDGET_HEIGHT = 2

# Terminal rows per grid row in the TUI canvas
CANVAS_ROW_HEIGHT = 4

# =============================================================================
# PAGES
# =============================================================================

DEFAULT_PAGE_ID = "home"
DEFAULT_PAGE_NAME = "Dashboard"
DEFAULT_PAGE_ICON = "LayoutDashboard"

NEW_PAGE_ICON = "File"  # Pages created with "add page"
TEMPLATE_PAGE_ICON = "LayoutTemplate"  # Pages created from a template

UNCATEGORIZED = "Uncategorized"

# =============================================================================
# STORAGE
# =============================================================================

APP_STATE_KEY = "app-state"  # Key of the layout snapshot in local storage
STORAGE_FILENAME = "local_storage.json"
UI_CONFIG_FILENAME = "ui_config.json"
LOG_FILENAME = "widgetboard.log"

# =============================================================================
# ENVIRONMENT
# =============================================================================

ENV_VAR_DEFINITIONS: Dict[str, Dict[str, Any]] = {
    "WIDGETBOARD_CONFIG_DIR": {
        "description": "Directory for configuration, storage and logs",
        "default": None,
        "valid_values": None,
    },
    "WIDGETBOARD_STORAGE_PATH": {
        "description": "Path of the local storage file holding the layout",
        "default": None,
        "valid_values": None,
    },
    "WIDGETBOARD_LOG_LEVEL": {
        "description": "Log level for widgetboard loggers",
        "default": "INFO",
        "valid_values": ["DEBUG", "INFO", "WARNING", "ERROR"],
    },
}
