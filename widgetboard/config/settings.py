"""Configuration utilities for widgetboard."""

import os
from pathlib import Path
from typing import List, Optional, Tuple

from .constants import ENV_VAR_DEFINITIONS, STORAGE_FILENAME


def get_config_dir() -> Path:
    """Get the configuration directory, creating it if needed.

    Respects WIDGETBOARD_CONFIG_DIR, otherwise ~/.config/widgetboard.
    """
    override = os.environ.get("WIDGETBOARD_CONFIG_DIR")
    config_dir = Path(override) if override else Path.home() / ".config" / "widgetboard"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_storage_path() -> Path:
    """Get the local storage path, respecting WIDGETBOARD_STORAGE_PATH.

    When running tests, set WIDGETBOARD_STORAGE_PATH to a temp file path to
    prevent tests from overwriting the real layout.
    """
    override = os.environ.get("WIDGETBOARD_STORAGE_PATH")
    if override:
        return Path(override)
    return get_config_dir() / STORAGE_FILENAME


def validate_env_var(name: str, value: Optional[str]) -> Tuple[bool, Optional[str]]:
    """Validate a single environment variable value.

    Args:
        name: The environment variable name.
        value: The current value (or None if not set).

    Returns:
        Tuple of (is_valid, error_message).
    """
    if name not in ENV_VAR_DEFINITIONS:
        return True, None  # Unknown vars are always valid

    valid_values = ENV_VAR_DEFINITIONS[name].get("valid_values")

    if value is None or valid_values is None:
        return True, None

    if value.lower() not in [v.lower() for v in valid_values]:
        return False, f"Invalid value '{value}' for {name}. Valid values: {valid_values}"

    return True, None


def validate_all_env_vars() -> List[str]:
    """Validate all widgetboard environment variables.

    Returns:
        List of error messages (empty if all valid).
    """
    errors = []
    for name in ENV_VAR_DEFINITIONS:
        is_valid, error = validate_env_var(name, os.environ.get(name))
        if not is_valid and error:
            errors.append(error)
    return errors


def get_env_var(name: str, validate: bool = True) -> Optional[str]:
    """Get an environment variable with optional validation.

    Args:
        name: The environment variable name.
        validate: Whether to validate the value against known definitions.

    Returns:
        The environment variable value, or its default if not set.

    Raises:
        ValueError: If validate=True and the value is invalid.
    """
    value = os.environ.get(name)

    if validate and value is not None:
        is_valid, error = validate_env_var(name, value)
        if not is_valid:
            raise ValueError(error)

    if value is None and name in ENV_VAR_DEFINITIONS:
        return ENV_VAR_DEFINITIONS[name].get("default")

    return value
