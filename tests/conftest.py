"""Shared pytest fixtures for widgetboard tests."""

import logging

import pytest

from widgetboard.layout import LayoutStore, WidgetRegistry, register_builtin_widgets


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point config and storage at a temp dir so tests never touch the real layout."""
    config_dir = tmp_path / "config"
    monkeypatch.setenv("WIDGETBOARD_CONFIG_DIR", str(config_dir))
    monkeypatch.setenv("WIDGETBOARD_STORAGE_PATH", str(tmp_path / "local_storage.json"))
    monkeypatch.delenv("WIDGETBOARD_LOG_LEVEL", raising=False)
    yield config_dir

    # CLI and GUI entry points attach handlers to the package logger
    app_logger = logging.getLogger("widgetboard")
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()
    app_logger.setLevel(logging.NOTSET)


@pytest.fixture
def registry():
    """A small registry with known default sizes."""
    reg = WidgetRegistry()
    reg.register("ToDoList", "To-Do List", category="Productivity", default_width=1, default_height=5)
    reg.register("Clock", "Clock", category="Organization", default_width=1, default_height=1)
    reg.register("Notes", "Notes", category="Productivity")
    return reg


@pytest.fixture
def builtin_registry():
    """A fresh registry holding the built-in catalogue."""
    return register_builtin_widgets(WidgetRegistry())


@pytest.fixture
def store(registry):
    """A store on the default workspace."""
    return LayoutStore(registry=registry)


@pytest.fixture
def storage_path(tmp_path):
    return tmp_path / "local_storage.json"
