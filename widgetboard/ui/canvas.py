"""The grid canvas that shows the active page's widget instances."""

from typing import Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import ScrollableContainer
from textual.widgets import Static

from widgetboard.config.constants import CANVAS_ROW_HEIGHT, GRID_COLUMNS
from widgetboard.layout import CanvasItem, DropTarget, LayoutStore, WidgetInstance, WidgetRegistration

from .drag_source import DragSource


class WidgetCard(DragSource, Static):
    """A placed widget instance spanning width×height grid cells."""

    DEFAULT_CSS = """
    WidgetCard {
        width: 100%;
        height: 100%;
        padding: 0 1;
        border: round $primary-darken-1;
        background: $surface;
    }

    WidgetCard.-selected {
        border: round $accent;
    }

    WidgetCard.-unknown {
        border: dashed $error;
    }

    WidgetCard.-drop-target {
        background: $accent 20%;
    }

    WidgetCard.-dragging {
        opacity: 60%;
    }
    """

    def __init__(self, instance: WidgetInstance, registration: Optional[WidgetRegistration]) -> None:
        if registration is not None:
            title = instance.name or registration.display_name
            subtitle = f"{registration.display_name} · {instance.width}×{instance.height}"
        else:
            title = instance.name or "Unknown widget"
            subtitle = f"{instance.widget_type} is not installed"
        super().__init__(
            Text.assemble((title, "bold"), "\n", (subtitle, "dim")),
            classes=None if registration is not None else "-unknown",
        )
        self.instance = instance
        self.styles.column_span = min(instance.width, GRID_COLUMNS)
        self.styles.row_span = instance.height

    @property
    def instance_id(self) -> str:
        return self.instance.id

    def drag_subject(self) -> CanvasItem:
        return CanvasItem(self.instance.id)

    def drop_target(self) -> DropTarget:
        return DropTarget.canvas_item(self.instance.id)

    def activate(self) -> None:
        self.app.select_instance(self.instance.id)


class Canvas(ScrollableContainer):
    """Four-column grid of cards for the active page.

    Anywhere on the canvas that is not a card is the empty-canvas drop zone.
    """

    DEFAULT_CSS = f"""
    Canvas {{
        layout: grid;
        grid-size: {GRID_COLUMNS};
        grid-rows: {CANVAS_ROW_HEIGHT};
        grid-gutter: 1 2;
        padding: 1 2;
    }}

    Canvas.-drop-target {{
        background: $accent 10%;
    }}

    Canvas .canvas-hint {{
        column-span: {GRID_COLUMNS};
        content-align: center middle;
        color: $text-muted;
    }}
    """

    def __init__(self, store: LayoutStore, **kwargs) -> None:
        super().__init__(**kwargs)
        self.store = store
        self.selected_id: Optional[str] = None

    def compose(self) -> ComposeResult:
        page = self.store.active_page
        if not page.items:
            yield Static("Drag widgets here from the palette", classes="canvas-hint")
            return

        registry = self.store.registry
        for item in page.items:
            card = WidgetCard(item, registry.get(item.widget_type))
            card.set_class(item.id == self.selected_id, "-selected")
            yield card

    def drop_target(self) -> DropTarget:
        return DropTarget.empty_canvas()

    def cards(self) -> list:
        return list(self.query(WidgetCard))

    def select(self, instance_id: Optional[str]) -> None:
        """Mark one card as selected."""
        self.selected_id = instance_id
        for card in self.query(WidgetCard):
            card.set_class(card.instance_id == instance_id, "-selected")
