"""
Layout engine for widgetboard.

Provides:
- An immutable data model of pages and widget instances
- A registry of widget types with default sizes and categories
- A store that applies layout operations and notifies subscribers
- A drag session state machine that turns gestures into store operations
- Persistence of the layout snapshot in local storage

Example usage:
    from widgetboard.layout import DragSession, PaletteItem, DropTarget, open_store

    store, persistence = open_store()
    session = DragSession(store)
    session.start(PaletteItem("ToDoList"))
    session.move(DropTarget.empty_canvas())
    session.drop()
"""

from .drag import (
    CanvasItem,
    DragSession,
    DragState,
    DragSubject,
    DropTarget,
    PageTab,
    PaletteItem,
    TargetKind,
)
from .models import Page, WidgetInstance, Workspace
from .persistence import LayoutPersistence, LocalStorage, open_store
from .registry import (
    WidgetRegistration,
    WidgetRegistry,
    register_builtin_widgets,
    widget_registry,
)
from .store import LayoutStore
from .templates import Template, TemplateItem, get_template, load_templates

__all__ = [
    # Data model
    "Page",
    "WidgetInstance",
    "Workspace",
    # Registry
    "WidgetRegistration",
    "WidgetRegistry",
    "register_builtin_widgets",
    "widget_registry",
    # Templates
    "Template",
    "TemplateItem",
    "get_template",
    "load_templates",
    # Store
    "LayoutStore",
    # Drag session
    "CanvasItem",
    "DragSession",
    "DragState",
    "DragSubject",
    "DropTarget",
    "PageTab",
    "PaletteItem",
    "TargetKind",
    # Persistence
    "LayoutPersistence",
    "LocalStorage",
    "open_store",
]
