"""Widget palette: every registered widget type, grouped by category."""

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.widgets import Label, Static

from widgetboard.layout import PaletteItem, WidgetRegistration, WidgetRegistry

from .drag_source import DragSource


class PaletteEntry(DragSource, Static):
    """One widget type. Drag it onto the canvas, or click to append it."""

    DEFAULT_CSS = """
    PaletteEntry {
        height: 1;
        padding: 0 1;
    }

    PaletteEntry:hover {
        background: $boost;
    }

    PaletteEntry.-dragging {
        background: $accent 30%;
    }
    """

    def __init__(self, registration: WidgetRegistration) -> None:
        size = f" {registration.default_width}×{registration.default_height}"
        super().__init__(Text.assemble(registration.display_name, (size, "dim")))
        self.registration = registration

    @property
    def widget_type(self) -> str:
        return self.registration.widget_type

    def drag_subject(self) -> PaletteItem:
        return PaletteItem(self.widget_type)

    def activate(self) -> None:
        self.app.place_widget(self.widget_type)


class Palette(VerticalScroll):
    """Scrollable list of palette entries under category headings."""

    DEFAULT_CSS = """
    Palette {
        width: 32;
        border-right: solid $primary-darken-2;
    }

    Palette .palette-category {
        margin-top: 1;
        padding: 0 1;
        text-style: bold;
        color: $text-muted;
    }
    """

    def __init__(self, registry: WidgetRegistry, **kwargs) -> None:
        super().__init__(**kwargs)
        self.registry = registry

    def compose(self) -> ComposeResult:
        for category, registrations in self.registry.by_category().items():
            yield Label(category, classes="palette-category")
            for registration in registrations:
                yield PaletteEntry(registration)
