"""
Widget registry for the layout engine.

Widgets register themselves with a type name that layout snapshots and
palette entries refer to. The layout engine only ever reads a widget's
identity, category and default footprint from here; the rendering
handle is opaque and belongs to whatever UI draws the widget.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TypeVar

import yaml

from widgetboard.config.constants import (
    DEFAULT_WIDGET_HEIGHT,
    DEFAULT_WIDGET_WIDTH,
    UNCATEGORIZED,
)
from widgetboard.exceptions import UnknownWidgetTypeError

logger = logging.getLogger(__name__)

# Built-in catalogue (in package)
BUILTIN_WIDGETS_FILE = Path(__file__).parent / "builtin" / "widgets.yaml"

T = TypeVar("T")


@dataclass
class WidgetRegistration:
    """Registration information for a widget type.

    Attributes:
        widget_type: Unique type name for this widget
        display_name: Name shown in the palette
        category: Palette category
        default_width: Column span of a freshly placed instance
        default_height: Row span of a freshly placed instance
        description: Human-readable description
        renderer: Opaque rendering handle, never called by the engine
        metadata: Additional metadata (icon, author, etc.)
    """

    widget_type: str
    display_name: str
    category: str = UNCATEGORIZED
    default_width: int = DEFAULT_WIDGET_WIDTH
    default_height: int = DEFAULT_WIDGET_HEIGHT
    description: str = ""
    renderer: Optional[Any] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.default_width < 1 or self.default_height < 1:
            raise ValueError(
                f"Widget '{self.widget_type}' must have a positive default size"
            )

    @property
    def default_size(self) -> tuple:
        return self.default_width, self.default_height


class WidgetRegistry:
    """Registry for widget types.

    Usage:
        # Register a widget
        widget_registry.register("ToDoList", "To-Do List", category="Productivity",
                                 default_width=1, default_height=5)

        # Total lookup: unknown types fall back to a 2x2 entry
        registration = widget_registry.lookup("ToDoList")
    """

    def __init__(self) -> None:
        self._widgets: Dict[str, WidgetRegistration] = {}

    def register(
        self,
        widget_type: str,
        display_name: Optional[str] = None,
        *,
        category: str = UNCATEGORIZED,
        default_width: Optional[int] = None,
        default_height: Optional[int] = None,
        description: str = "",
        renderer: Optional[Any] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> WidgetRegistration:
        """Register a widget type.

        Args:
            widget_type: Unique type name for this widget
            display_name: Palette name (defaults to the type name)
            category: Palette category
            default_width: Default column span (falls back to 2)
            default_height: Default row span (falls back to 2)
            description: Human-readable description
            renderer: Opaque rendering handle
            metadata: Additional metadata

        Returns:
            The stored registration
        """
        if widget_type in self._widgets:
            logger.warning(f"Overwriting existing widget registration: {widget_type}")

        registration = WidgetRegistration(
            widget_type=widget_type,
            display_name=display_name or widget_type,
            category=category or UNCATEGORIZED,
            default_width=default_width or DEFAULT_WIDGET_WIDTH,
            default_height=default_height or DEFAULT_WIDGET_HEIGHT,
            description=description,
            renderer=renderer,
            metadata=metadata or {},
        )
        self._widgets[widget_type] = registration
        logger.debug(f"Registered widget type: {widget_type}")
        return registration

    def unregister(self, widget_type: str) -> bool:
        """Unregister a widget type.

        Returns:
            True if the widget was unregistered, False if not found
        """
        if widget_type in self._widgets:
            del self._widgets[widget_type]
            return True
        return False

    def get(self, widget_type: str) -> Optional[WidgetRegistration]:
        """Get registration info for a widget type, or None."""
        return self._widgets.get(widget_type)

    def require(self, widget_type: str) -> WidgetRegistration:
        """Get registration info for a widget type.

        Raises:
            UnknownWidgetTypeError: If the type is not registered
        """
        registration = self._widgets.get(widget_type)
        if registration is None:
            raise UnknownWidgetTypeError(widget_type=widget_type)
        return registration

    def lookup(self, widget_type: str) -> WidgetRegistration:
        """Total lookup used by the layout store.

        Unknown types never fail: they get a placeholder registration with
        the fallback 2x2 footprint.
        """
        registration = self._widgets.get(widget_type)
        if registration is None:
            logger.warning(f"Widget type '{widget_type}' is not registered, using 2x2 default")
            return WidgetRegistration(widget_type=widget_type, display_name=widget_type)
        return registration

    def default_size(self, widget_type: str) -> tuple:
        """Default (width, height) for a widget type."""
        return self.lookup(widget_type).default_size

    def has(self, widget_type: str) -> bool:
        return widget_type in self._widgets

    def list_types(self) -> List[str]:
        """Sorted list of registered widget type names."""
        return sorted(self._widgets.keys())

    def list_registrations(self) -> List[WidgetRegistration]:
        """All registrations in registration order."""
        return list(self._widgets.values())

    def categories(self) -> List[str]:
        """Known categories in the order they were first seen."""
        return list(self.by_category().keys())

    def by_category(self) -> Dict[str, List[WidgetRegistration]]:
        """Group registrations by category for the palette.

        Categories and the widgets within them keep registration order.
        """
        grouped: Dict[str, List[WidgetRegistration]] = {}
        for registration in self._widgets.values():
            grouped.setdefault(registration.category or UNCATEGORIZED, []).append(registration)
        return grouped

    def decorator(
        self,
        widget_type: str,
        display_name: Optional[str] = None,
        *,
        category: str = UNCATEGORIZED,
        default_width: Optional[int] = None,
        default_height: Optional[int] = None,
        description: str = "",
    ) -> Callable[[T], T]:
        """Decorator that registers the decorated object as the renderer.

        Usage:
            @widget_registry.decorator("Clock", "Clock", category="Organization")
            class ClockWidget(Static):
                ...
        """

        def wrapper(renderer: T) -> T:
            self.register(
                widget_type,
                display_name,
                category=category,
                default_width=default_width,
                default_height=default_height,
                description=description,
                renderer=renderer,
            )
            return renderer

        return wrapper

    def __len__(self) -> int:
        return len(self._widgets)

    def __contains__(self, widget_type: object) -> bool:
        return widget_type in self._widgets


def load_widget_catalog(path: Path) -> List[Dict[str, Any]]:
    """Load widget definitions from a catalogue YAML file.

    Category keys in the widget entries are resolved through the
    file's ``categories`` mapping to their display names.

    Returns:
        List of keyword dicts suitable for WidgetRegistry.register

    Raises:
        ValueError: If the file is empty or malformed
    """
    with open(path) as f:
        data = yaml.safe_load(f)

    if not data or not isinstance(data.get("widgets"), list):
        raise ValueError(f"Widget catalogue has no widgets: {path}")

    categories = data.get("categories") or {}
    entries = []
    for raw in data["widgets"]:
        if "id" not in raw:
            raise ValueError(f"Widget entry without id in {path}: {raw}")
        category_key = raw.get("category", UNCATEGORIZED)
        entries.append(
            {
                "widget_type": raw["id"],
                "display_name": raw.get("name", raw["id"]),
                "category": categories.get(category_key, category_key),
                "default_width": raw.get("width"),
                "default_height": raw.get("height"),
                "description": raw.get("description", ""),
            }
        )
    return entries


def register_builtin_widgets(
    registry: Optional[WidgetRegistry] = None, path: Optional[Path] = None
) -> WidgetRegistry:
    """Register the built-in widget catalogue.

    Called during application startup; safe to call repeatedly.
    """
    registry = registry if registry is not None else widget_registry
    for entry in load_widget_catalog(path or BUILTIN_WIDGETS_FILE):
        widget_type = entry.pop("widget_type")
        if registry.has(widget_type):
            continue
        registry.register(widget_type, **entry)
    logger.debug(f"Registered {len(registry)} built-in widget types")
    return registry


# Global widget registry instance
widget_registry = WidgetRegistry()
