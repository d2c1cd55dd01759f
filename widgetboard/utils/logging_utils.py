"""Logging utilities for widgetboard.

Modules use the standard pattern:

    import logging
    logger = logging.getLogger(__name__)

and configuration is handled once at the application level. The TUI
writes to a rotating file instead of the console so log output never
corrupts the screen.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from widgetboard.config.constants import LOG_FILENAME
from widgetboard.config.settings import get_config_dir, get_env_var

# Max log file size: 5MB, keep 2 backups
_MAX_LOG_BYTES = 5 * 1024 * 1024
_BACKUP_COUNT = 2

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_log_path() -> Path:
    """Path of the rotating widgetboard log file."""
    return get_config_dir() / LOG_FILENAME


def _resolve_level(level: Optional[str]) -> int:
    name = (level or get_env_var("WIDGETBOARD_LOG_LEVEL", validate=False) or "INFO").upper()
    return getattr(logging, name, logging.INFO)


def setup_file_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Route widgetboard.* loggers to the rotating log file.

    The root logger is left alone so third-party libraries stay quiet.
    Calling this more than once does not add duplicate handlers.

    Returns:
        The configured "widgetboard" logger
    """
    app_logger = logging.getLogger("widgetboard")
    app_logger.setLevel(_resolve_level(level))

    try:
        log_file = get_log_path()
        if not any(
            isinstance(h, RotatingFileHandler) and Path(h.baseFilename) == log_file
            for h in app_logger.handlers
        ):
            handler = RotatingFileHandler(
                log_file, maxBytes=_MAX_LOG_BYTES, backupCount=_BACKUP_COUNT
            )
            handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
            app_logger.addHandler(handler)
    except OSError as e:
        # We can't log this failure since logging is what's failing
        print(f"Warning: log file setup failed: {e}", file=sys.stderr)

    return app_logger


def setup_cli_logging(verbose: bool = False) -> None:
    """Send widgetboard.* warnings (or everything, when verbose) to stderr."""
    app_logger = logging.getLogger("widgetboard")
    app_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    if not any(getattr(h, "_widgetboard_cli", False) for h in app_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        handler._widgetboard_cli = True  # type: ignore[attr-defined]
        app_logger.addHandler(handler)
