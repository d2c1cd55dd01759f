"""Page tab strip."""

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.widgets import Static

from widgetboard.layout import DropTarget, LayoutStore, Page, PageTab

from .drag_source import DragSource


class PageTabLabel(DragSource, Static):
    """A page tab. Click selects the page; drag onto another tab reorders."""

    DEFAULT_CSS = """
    PageTabLabel {
        width: auto;
        height: 1;
        padding: 0 2;
        margin-right: 1;
        background: $panel;
    }

    PageTabLabel.-active {
        background: $primary;
        text-style: bold;
    }

    PageTabLabel.-drop-target {
        background: $accent;
    }
    """

    def __init__(self, page: Page, active: bool = False) -> None:
        super().__init__(Text(page.name), classes="-active" if active else None)
        self.page = page

    def drag_subject(self) -> PageTab:
        return PageTab(self.page.id)

    def drop_target(self) -> DropTarget:
        return DropTarget.page_tab(self.page.id)

    def activate(self) -> None:
        self.app.store.select_page(self.page.id)


class PageTabs(Horizontal):
    """Tabs for every page, rebuilt whenever the workspace changes."""

    DEFAULT_CSS = """
    PageTabs {
        height: 1;
        margin: 1 1 0 1;
    }
    """

    def __init__(self, store: LayoutStore, **kwargs) -> None:
        super().__init__(**kwargs)
        self.store = store

    def compose(self) -> ComposeResult:
        workspace = self.store.workspace
        for index, page in enumerate(workspace.pages):
            yield PageTabLabel(page, active=index == workspace.active_index)

    def tabs(self) -> list:
        return list(self.query(PageTabLabel))
