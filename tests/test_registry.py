"""Tests for the widget registry and built-in catalogue."""

import logging

import pytest

from widgetboard.config.constants import UNCATEGORIZED
from widgetboard.exceptions import UnknownWidgetTypeError
from widgetboard.layout import WidgetRegistry, register_builtin_widgets
from widgetboard.layout.registry import BUILTIN_WIDGETS_FILE, load_widget_catalog


class TestWidgetRegistry:
    """Test registration and lookups."""

    def test_register_and_get(self, registry):
        registration = registry.get("ToDoList")
        assert registration.display_name == "To-Do List"
        assert registration.default_size == (1, 5)
        assert "ToDoList" in registry
        assert registry.has("Clock")

    def test_missing_size_falls_back_to_2x2(self, registry):
        assert registry.default_size("Notes") == (2, 2)

    def test_display_name_defaults_to_type(self):
        registry = WidgetRegistry()
        assert registry.register("Clock").display_name == "Clock"

    def test_require_unknown_raises(self, registry):
        with pytest.raises(UnknownWidgetTypeError) as exc_info:
            registry.require("Nope")
        assert exc_info.value.context["widget_type"] == "Nope"

    def test_lookup_is_total(self, registry, caplog):
        with caplog.at_level(logging.WARNING, logger="widgetboard.layout.registry"):
            registration = registry.lookup("Nope")
        assert registration.default_size == (2, 2)
        assert "Nope" not in registry
        assert "not registered" in caplog.text

    def test_invalid_size_rejected(self):
        with pytest.raises(ValueError):
            WidgetRegistry().register("Bad", default_width=-1)

    def test_overwrite_warns(self, registry, caplog):
        with caplog.at_level(logging.WARNING, logger="widgetboard.layout.registry"):
            registry.register("Clock", "Big Clock", default_width=4, default_height=2)
        assert registry.default_size("Clock") == (4, 2)
        assert "Overwriting" in caplog.text

    def test_unregister(self, registry):
        assert registry.unregister("Clock") is True
        assert registry.unregister("Clock") is False
        assert len(registry) == 2

    def test_list_types_sorted(self, registry):
        assert registry.list_types() == ["Clock", "Notes", "ToDoList"]

    def test_by_category_keeps_registration_order(self, registry):
        registry.register("Loose")
        grouped = registry.by_category()
        assert list(grouped) == ["Productivity", "Organization", UNCATEGORIZED]
        assert [r.widget_type for r in grouped["Productivity"]] == ["ToDoList", "Notes"]
        assert registry.categories() == list(grouped)

    def test_decorator_stores_renderer(self):
        registry = WidgetRegistry()

        @registry.decorator("Weather", "Weather", category="Organization", default_width=2, default_height=3)
        class WeatherCard:
            pass

        registration = registry.require("Weather")
        assert registration.renderer is WeatherCard
        assert registration.default_size == (2, 3)


class TestBuiltinCatalogue:
    """Test the packaged widget catalogue."""

    def test_catalogue_entries(self):
        entries = load_widget_catalog(BUILTIN_WIDGETS_FILE)
        assert len(entries) == 63
        assert len({entry["widget_type"] for entry in entries}) == 63

    def test_categories_use_display_names(self, builtin_registry):
        assert builtin_registry.categories() == [
            "Productivity",
            "Organization",
            "Analytics",
            "Smart Tools",
            "Wellness",
            "Games",
        ]

    def test_known_sizes(self, builtin_registry):
        assert builtin_registry.default_size("ToDoList") == (1, 5)
        assert builtin_registry.default_size("CalendarCard") == (4, 7)
        assert builtin_registry.default_size("GoalPlanner") == (2, 2)

    def test_registration_is_idempotent(self, builtin_registry):
        count = len(builtin_registry)
        register_builtin_widgets(builtin_registry)
        assert len(builtin_registry) == count

    def test_existing_registrations_are_kept(self):
        registry = WidgetRegistry()
        registry.register("ToDoList", "My List", default_width=4, default_height=4)
        register_builtin_widgets(registry)
        assert registry.require("ToDoList").display_name == "My List"

    def test_malformed_catalogue(self, tmp_path):
        path = tmp_path / "widgets.yaml"
        path.write_text("categories: {}\n")
        with pytest.raises(ValueError):
            load_widget_catalog(path)
