"""
Layout store.

The LayoutStore owns the single live Workspace value. Every operation
builds a new Workspace and, when it actually changes something, commits
it and notifies subscribers. Operations addressed to a page or instance
that does not exist (or to an out-of-range index) are silent no-ops: a
drag gesture can race against a deletion, so stale references are
expected rather than exceptional. No-ops never notify subscribers, which
means they never trigger a persistence write either.

Subscribers form the UI event surface: the rendering layer and the
persistence adapter both listen here.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Callable, Dict, List, Mapping, Optional

from widgetboard.config.constants import NEW_PAGE_ICON, TEMPLATE_PAGE_ICON

from .models import (
    Page,
    WidgetInstance,
    Workspace,
    new_instance_id,
    new_page_id,
)
from .registry import WidgetRegistry, widget_registry
from .templates import Template

logger = logging.getLogger(__name__)

WorkspaceListener = Callable[[Workspace], None]


def move_item(items: List[Any], from_index: int, to_index: int) -> List[Any]:
    """Move one entry of a list, shifting the others.

    Returns a new list; the input is left untouched.
    """
    result = list(items)
    result.insert(to_index, result.pop(from_index))
    return result


def _valid_index(index: int, length: int) -> bool:
    return 0 <= index < length


class LayoutStore:
    """Holds the canonical Workspace and applies layout operations.

    Usage:
        store = LayoutStore()
        store.subscribe(lambda workspace: render(workspace))
        instance = store.add_widget_instance("home", "ToDoList")
    """

    def __init__(
        self,
        workspace: Optional[Workspace] = None,
        *,
        registry: Optional[WidgetRegistry] = None,
        instance_defaults: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Initialize the store.

        Args:
            workspace: Starting state (defaults to the single default page)
            registry: Widget registry for default sizes (defaults to global)
            instance_defaults: Overrides (font, theme) stamped onto new instances
        """
        self._workspace = workspace or Workspace.default()
        self.registry = registry if registry is not None else widget_registry
        self.instance_defaults: Dict[str, Any] = dict(instance_defaults or {})
        self._listeners: List[WorkspaceListener] = []

    # ------------------------------------------------------------------
    # State and subscriptions
    # ------------------------------------------------------------------

    @property
    def workspace(self) -> Workspace:
        return self._workspace

    @property
    def pages(self) -> tuple:
        return self._workspace.pages

    @property
    def active_page(self) -> Page:
        return self._workspace.active_page

    @property
    def active_page_id(self) -> str:
        return self._workspace.active_page_id

    def get_page(self, page_id: str) -> Optional[Page]:
        return self._workspace.get_page(page_id)

    def subscribe(self, listener: WorkspaceListener) -> Callable[[], None]:
        """Register a listener called with the new Workspace after each commit.

        Returns:
            A function that removes the listener
        """
        if listener not in self._listeners:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def replace_workspace(self, workspace: Workspace) -> bool:
        """Swap in a whole workspace (e.g. one restored from storage)."""
        return self._commit(workspace, "replace workspace")

    def _commit(self, workspace: Workspace, reason: str) -> bool:
        if workspace == self._workspace:
            return False
        self._workspace = workspace
        logger.debug(f"Committed layout change: {reason}")
        for listener in list(self._listeners):
            try:
                listener(workspace)
            except Exception as e:
                logger.error(f"Error in layout listener: {e}")
        return True

    def _commit_page(self, page: Page, reason: str) -> bool:
        return self._commit(self._workspace.replace_page(page), reason)

    # ------------------------------------------------------------------
    # Widget instances
    # ------------------------------------------------------------------

    def add_widget_instance(
        self,
        page_id: str,
        widget_type: str,
        insert_index: Optional[int] = None,
    ) -> Optional[WidgetInstance]:
        """Place a new instance of a widget type on a page.

        Width and height come from the registry default for the type (2x2
        when the registry has none). The instance is appended unless an
        insert index is given; out-of-range indices are clamped to the
        ends of the page.

        Returns:
            The new instance, or None if the page does not exist
        """
        page = self._workspace.get_page(page_id)
        if page is None:
            logger.debug(f"add_widget_instance: no page {page_id!r}")
            return None

        width, height = self.registry.default_size(widget_type)
        instance = WidgetInstance(
            id=new_instance_id(widget_type),
            widget_type=widget_type,
            width=width,
            height=height,
            font=self.instance_defaults.get("font"),
            theme=self.instance_defaults.get("theme"),
        )

        items = list(page.items)
        if insert_index is None:
            items.append(instance)
        else:
            items.insert(max(0, min(insert_index, len(items))), instance)

        self._commit_page(page.with_items(items), f"add {widget_type} to {page_id}")
        return instance

    def remove_widget_instance(self, page_id: str, instance_id: str) -> bool:
        """Remove an instance from its page. Returns False if not found."""
        page = self._workspace.get_page(page_id)
        if page is None or page.index_of(instance_id) < 0:
            return False
        items = [item for item in page.items if item.id != instance_id]
        return self._commit_page(page.with_items(items), f"remove {instance_id}")

    def reorder_widget_instances(self, page_id: str, from_index: int, to_index: int) -> bool:
        """Move one instance within its page's flow order.

        Returns:
            True if the order changed
        """
        page = self._workspace.get_page(page_id)
        if page is None:
            return False
        count = len(page.items)
        if not (_valid_index(from_index, count) and _valid_index(to_index, count)):
            return False
        if from_index == to_index:
            return False
        items = move_item(list(page.items), from_index, to_index)
        return self._commit_page(
            page.with_items(items), f"reorder {page_id} {from_index}->{to_index}"
        )

    def _update_instance(
        self,
        page_id: str,
        instance_id: str,
        change: Callable[[WidgetInstance], WidgetInstance],
        reason: str,
    ) -> Optional[WidgetInstance]:
        page = self._workspace.get_page(page_id)
        if page is None:
            return None
        index = page.index_of(instance_id)
        if index < 0:
            return None
        updated = change(page.items[index])
        items = list(page.items)
        items[index] = updated
        self._commit_page(page.with_items(items), reason)
        return updated

    def resize_widget_instance(
        self, page_id: str, instance_id: str, width: int, height: int
    ) -> Optional[WidgetInstance]:
        """Overwrite an instance's geometry; values below 1 are clamped to 1."""
        return self._update_instance(
            page_id,
            instance_id,
            lambda item: item.resized(width, height),
            f"resize {instance_id} to {width}x{height}",
        )

    def rename_widget_instance(
        self, page_id: str, instance_id: str, name: Optional[str]
    ) -> Optional[WidgetInstance]:
        """Set (or clear, with an empty name) an instance's display name."""
        return self._update_instance(
            page_id, instance_id, lambda item: item.renamed(name), f"rename {instance_id}"
        )

    def update_widget_instance_props(
        self, page_id: str, instance_id: str, props: Mapping[str, Any]
    ) -> Optional[WidgetInstance]:
        """Shallow-merge properties into an instance."""
        return self._update_instance(
            page_id,
            instance_id,
            lambda item: item.with_props(props),
            f"update props of {instance_id}",
        )

    # ------------------------------------------------------------------
    # Pages
    # ------------------------------------------------------------------

    def add_page(self, name: Optional[str] = None, icon: str = NEW_PAGE_ICON) -> Page:
        """Append an empty page and make it active."""
        workspace = self._workspace
        page = Page(
            id=new_page_id(),
            name=name or f"Page {len(workspace.pages) + 1}",
            icon=icon or NEW_PAGE_ICON,
        )
        pages = workspace.pages + (page,)
        self._commit(Workspace(pages=pages, active_index=len(pages) - 1), f"add page {page.name}")
        return page

    def use_template(self, template: Template) -> Page:
        """Append a page built from a template and make it active.

        Every template item becomes a fresh instance with its own id.
        """
        items = tuple(
            WidgetInstance(
                id=new_instance_id(item.widget_type),
                widget_type=item.widget_type,
                width=item.width,
                height=item.height,
            )
            for item in template.items
        )
        page = Page(id=new_page_id(), name=template.name, icon=TEMPLATE_PAGE_ICON, items=items)
        pages = self._workspace.pages + (page,)
        self._commit(
            Workspace(pages=pages, active_index=len(pages) - 1),
            f"use template {template.template_id}",
        )
        return page

    def delete_page(self, page_id: str) -> bool:
        """Delete a page.

        Deleting the active page activates the first page; deleting a page
        before the active one keeps the same page active. Deleting the
        last page resets the workspace to the single default page.
        """
        workspace = self._workspace
        index = workspace.page_index(page_id)
        if index < 0:
            return False

        pages = workspace.pages[:index] + workspace.pages[index + 1:]
        if not pages:
            return self._commit(Workspace.default(), f"delete last page {page_id}")

        active = workspace.active_index
        if active == index:
            active = 0
        elif active > index:
            active -= 1
        return self._commit(Workspace(pages=pages, active_index=active), f"delete page {page_id}")

    def reorder_pages(self, from_index: int, to_index: int) -> bool:
        """Move a page in tab order; the active page follows its id."""
        workspace = self._workspace
        count = len(workspace.pages)
        if not (_valid_index(from_index, count) and _valid_index(to_index, count)):
            return False
        if from_index == to_index:
            return False

        active_id = workspace.active_page_id
        pages = tuple(move_item(list(workspace.pages), from_index, to_index))
        active = next(i for i, page in enumerate(pages) if page.id == active_id)
        return self._commit(
            Workspace(pages=pages, active_index=active),
            f"reorder pages {from_index}->{to_index}",
        )

    def update_page(self, page_id: str, **fields: Any) -> Optional[Page]:
        """Shallow-merge name/icon changes into a page.

        Unknown fields are ignored; the page id and items cannot be changed.
        """
        page = self._workspace.get_page(page_id)
        if page is None:
            return None
        changes = {key: fields[key] for key in ("name", "icon") if fields.get(key) is not None}
        updated = replace(page, **changes)
        self._commit_page(updated, f"update page {page_id}")
        return updated

    def select_page(self, page_id: str) -> bool:
        """Make an existing page the active one."""
        index = self._workspace.page_index(page_id)
        if index < 0:
            return False
        return self._commit(replace(self._workspace, active_index=index), f"select page {page_id}")
