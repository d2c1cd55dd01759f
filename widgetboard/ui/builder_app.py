"""
Dashboard builder TUI.

Layout:
    page tabs
    palette | canvas
    status line
    footer

Every committed store change rebuilds the tabs and the canvas. The drag
session only drives hover highlighting; committing is left to the store.
"""

import logging
from typing import Callable, List, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, Static

from widgetboard.config.constants import GRID_COLUMNS, MAX_ROW_SPAN
from widgetboard.layout import (
    CanvasItem,
    DragSession,
    DragState,
    LayoutStore,
    PageTab,
    PaletteItem,
    Template,
    TargetKind,
    Workspace,
    get_template,
    load_templates,
)

from .canvas import Canvas
from .page_tabs import PageTabs
from .palette import Palette, PaletteEntry
from .template_picker import TemplatePickerScreen

logger = logging.getLogger(__name__)

TEXTUAL_THEMES = {
    "light": "textual-light",
    "dark": "textual-dark",
    "custom": "nord",
}


class BuilderApp(App[None]):
    """Drag-and-drop dashboard builder."""

    # Mouse presses start drags, not text selection.
    ALLOW_SELECT = False

    CSS = """
    #builder-body {
        height: 1fr;
        margin-top: 1;
    }

    #canvas {
        width: 1fr;
    }

    #builder-status {
        height: 1;
        padding: 0 1;
        background: $boost;
        color: $text-muted;
    }
    """

    BINDINGS = [
        Binding("n", "add_page", "New page"),
        Binding("x", "delete_page", "Delete page"),
        Binding("t", "pick_template", "Template"),
        Binding("comma", "previous_page", "Prev page", show=False),
        Binding("full_stop", "next_page", "Next page", show=False),
        Binding("delete", "remove_card", "Remove"),
        Binding("left_square_bracket", "resize(-1, 0)", "Narrower", show=False),
        Binding("right_square_bracket", "resize(1, 0)", "Wider", show=False),
        Binding("minus", "resize(0, -1)", "Shorter", show=False),
        Binding("equals_sign", "resize(0, 1)", "Taller", show=False),
        Binding("escape", "cancel_drag", "Cancel drag", show=False),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        store: LayoutStore,
        session: Optional[DragSession] = None,
        *,
        templates: Optional[List[Template]] = None,
        theme_name: Optional[str] = None,
    ):
        super().__init__()
        self.store = store
        self.session = session or DragSession(store)
        self.templates = templates if templates is not None else load_templates()
        self.theme_name = theme_name
        self.selected_instance_id: Optional[str] = None
        self._unsubscribers: List[Callable[[], None]] = []

    def compose(self) -> ComposeResult:
        # Held directly so result callbacks can reach them under a modal.
        self.page_tabs = PageTabs(self.store, id="page-tabs")
        self.palette = Palette(self.store.registry, id="palette")
        self.canvas = Canvas(self.store, id="canvas")
        self.status = Static("", id="builder-status")

        yield self.page_tabs
        with Horizontal(id="builder-body"):
            yield self.palette
            yield self.canvas
        yield self.status
        yield Footer()

    def on_mount(self) -> None:
        self.title = "widgetboard"
        if self.theme_name:
            self.theme = TEXTUAL_THEMES.get(self.theme_name, "textual-light")
        self._unsubscribers = [
            self.store.subscribe(self._on_workspace_changed),
            self.session.subscribe(self._on_drag_changed),
        ]
        self._update_status()
        logger.info(f"Builder started with {len(self.store.pages)} page(s)")

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self.session.cancel()

    # ------------------------------------------------------------------
    # Store and session listeners
    # ------------------------------------------------------------------

    def _on_workspace_changed(self, workspace: Workspace) -> None:
        if self.selected_instance_id:
            found = workspace.find_instance(self.selected_instance_id)
            if found is None or found[0].id != workspace.active_page_id:
                self.selected_instance_id = None

        self.canvas.selected_id = self.selected_instance_id
        self.page_tabs.call_later(self.page_tabs.recompose)
        self.canvas.call_later(self.canvas.recompose)
        self._update_status()

    def _on_drag_changed(self, session: DragSession) -> None:
        self.canvas.remove_class("-drop-target")
        for region in (self.page_tabs, self.palette, self.canvas):
            region.query(".-drop-target").remove_class("-drop-target")
            region.query(".-dragging").remove_class("-dragging")

        if session.is_active:
            self._mark_drag_source(session)
            self._mark_hover_target(session)
        self._update_status()

    def _mark_drag_source(self, session: DragSession) -> None:
        subject = session.subject
        if isinstance(subject, PaletteItem):
            sources = [e for e in self.palette.query(PaletteEntry) if e.widget_type == subject.widget_type]
        elif isinstance(subject, CanvasItem):
            sources = [c for c in self.canvas.cards() if c.instance_id == subject.instance_id]
        elif isinstance(subject, PageTab):
            sources = [t for t in self.page_tabs.tabs() if t.page.id == subject.page_id]
        else:
            sources = []
        for source in sources:
            source.add_class("-dragging")

    def _mark_hover_target(self, session: DragSession) -> None:
        target = session.hover_target
        if target is None:
            return
        if target.kind is TargetKind.EMPTY_CANVAS and session.state is DragState.DRAGGING_PALETTE_ITEM:
            self.canvas.add_class("-drop-target")
        elif target.kind is TargetKind.CANVAS_ITEM and session.state is not DragState.DRAGGING_PAGE:
            for card in self.canvas.cards():
                if card.instance_id == target.target_id:
                    card.add_class("-drop-target")
        elif target.kind is TargetKind.PAGE_TAB and session.state is DragState.DRAGGING_PAGE:
            for tab in self.page_tabs.tabs():
                if tab.page.id == target.target_id:
                    tab.add_class("-drop-target")

    def _update_status(self) -> None:
        workspace = self.store.workspace
        page = workspace.active_page
        self.sub_title = page.name

        parts = [
            f"Page {workspace.active_index + 1}/{len(workspace.pages)}",
            page.name,
            f"{len(page.items)} widget(s)",
        ]
        subject = self.session.subject
        if isinstance(subject, PaletteItem):
            parts.append(f"dragging {subject.widget_type}")
        elif isinstance(subject, CanvasItem):
            parts.append("moving widget")
        elif isinstance(subject, PageTab):
            parts.append("moving page")
        elif self.selected_instance_id:
            parts.append(f"selected {self.selected_instance_id}")
        self.status.update(" · ".join(parts))

    # ------------------------------------------------------------------
    # Operations used by the widgets
    # ------------------------------------------------------------------

    def place_widget(self, widget_type: str) -> None:
        """Append a widget to the active page."""
        instance = self.store.add_widget_instance(self.store.active_page_id, widget_type)
        if instance is not None:
            self.select_instance(instance.id)

    def select_instance(self, instance_id: Optional[str]) -> None:
        """Select a card on the active page (None clears the selection)."""
        if instance_id is not None and self.store.active_page.index_of(instance_id) < 0:
            return
        self.selected_instance_id = instance_id
        self.canvas.select(instance_id)
        self._update_status()

    def _selected(self):
        if not self.selected_instance_id:
            return None
        return self.store.active_page.get_item(self.selected_instance_id)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_add_page(self) -> None:
        page = self.store.add_page()
        self.notify(f"Added {page.name}")

    def action_delete_page(self) -> None:
        page = self.store.active_page
        if self.store.delete_page(page.id):
            self.notify(f"Deleted {page.name}")

    def action_pick_template(self) -> None:
        if not self.templates:
            self.notify("No templates available", severity="warning")
            return
        self.push_screen(TemplatePickerScreen(self.templates), self._on_template_chosen)

    def _on_template_chosen(self, template_id: Optional[str]) -> None:
        if template_id is None:
            return
        template = get_template(template_id, self.templates)
        page = self.store.use_template(template)
        self.notify(f"Created {page.name} from template")

    def _select_relative_page(self, step: int) -> None:
        workspace = self.store.workspace
        index = workspace.active_index + step
        if 0 <= index < len(workspace.pages):
            self.store.select_page(workspace.pages[index].id)

    def action_previous_page(self) -> None:
        self._select_relative_page(-1)

    def action_next_page(self) -> None:
        self._select_relative_page(1)

    def action_remove_card(self) -> None:
        item = self._selected()
        if item is None:
            self.notify("Select a widget first", severity="warning")
            return
        self.store.remove_widget_instance(self.store.active_page_id, item.id)

    def action_resize(self, delta_width: int, delta_height: int) -> None:
        item = self._selected()
        if item is None:
            self.notify("Select a widget first", severity="warning")
            return
        width = max(1, min(GRID_COLUMNS, item.width + delta_width))
        height = max(1, min(MAX_ROW_SPAN, item.height + delta_height))
        self.store.resize_widget_instance(self.store.active_page_id, item.id, width, height)

    def action_cancel_drag(self) -> None:
        if self.session.is_active:
            self.session.cancel()
            self.notify("Drag cancelled")
