"""
Drag session controller.

A DragSession is a small state machine that lives for one pointer
gesture. It classifies what is being dragged, tracks the drop target the
pointer is currently over, and resolves the gesture into at most one
LayoutStore operation. It knows nothing about pointer events or widgets:
any UI that can report "drag started", "now over X" and "released" can
drive it.

States:
    IDLE
    DRAGGING_PALETTE_ITEM  - subject is a PaletteItem
    DRAGGING_CANVAS_ITEM   - subject is a CanvasItem
    DRAGGING_PAGE          - subject is a PageTab

Only one session is live at a time: start() while a drag is in progress
is ignored until the session returns to IDLE.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Union

from .store import LayoutStore

logger = logging.getLogger(__name__)


class DragState(Enum):
    """States of the drag session."""

    IDLE = "idle"
    DRAGGING_PALETTE_ITEM = "dragging_palette_item"
    DRAGGING_CANVAS_ITEM = "dragging_canvas_item"
    DRAGGING_PAGE = "dragging_page"


@dataclass(frozen=True)
class PaletteItem:
    """A widget type dragged out of the palette."""

    widget_type: str


@dataclass(frozen=True)
class CanvasItem:
    """A widget instance dragged within the canvas."""

    instance_id: str


@dataclass(frozen=True)
class PageTab:
    """A page tab dragged within the tab strip."""

    page_id: str


DragSubject = Union[PaletteItem, CanvasItem, PageTab]


class TargetKind(Enum):
    """Kinds of place a drag can be over."""

    EMPTY_CANVAS = "empty_canvas"
    CANVAS_ITEM = "canvas_item"
    PAGE_TAB = "page_tab"


@dataclass(frozen=True)
class DropTarget:
    """Where the pointer currently is, as far as dropping is concerned."""

    kind: TargetKind
    target_id: Optional[str] = None

    @classmethod
    def empty_canvas(cls) -> DropTarget:
        return cls(TargetKind.EMPTY_CANVAS)

    @classmethod
    def canvas_item(cls, instance_id: str) -> DropTarget:
        return cls(TargetKind.CANVAS_ITEM, instance_id)

    @classmethod
    def page_tab(cls, page_id: str) -> DropTarget:
        return cls(TargetKind.PAGE_TAB, page_id)


_SUBJECT_STATES = {
    PaletteItem: DragState.DRAGGING_PALETTE_ITEM,
    CanvasItem: DragState.DRAGGING_CANVAS_ITEM,
    PageTab: DragState.DRAGGING_PAGE,
}

SessionListener = Callable[["DragSession"], None]


class DragSession:
    """Resolves drag gestures into layout store operations.

    Usage:
        session = DragSession(store)
        session.start(PaletteItem("ToDoList"))
        session.move(DropTarget.empty_canvas())
        session.drop()  # -> True, one instance added to the active page

    Args:
        store: The layout store drops are applied to
        insert_on_hover: Insert palette items as soon as they enter a valid
            canvas zone instead of waiting for the drop
    """

    def __init__(self, store: LayoutStore, *, insert_on_hover: bool = False) -> None:
        self.store = store
        self.insert_on_hover = insert_on_hover
        self._state = DragState.IDLE
        self._subject: Optional[DragSubject] = None
        self._hover: Optional[DropTarget] = None
        self._placement_token: Optional[str] = None
        self._placed_token: Optional[str] = None
        self._listeners: List[SessionListener] = []

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def subject(self) -> Optional[DragSubject]:
        return self._subject

    @property
    def hover_target(self) -> Optional[DropTarget]:
        return self._hover

    @property
    def is_active(self) -> bool:
        return self._state is not DragState.IDLE

    @property
    def has_placed(self) -> bool:
        """Whether this gesture already inserted its palette item."""
        return self._placement_token is not None and self._placed_token == self._placement_token

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener called whenever the state or hover target changes."""
        if listener not in self._listeners:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"Error in drag session listener: {e}")

    # ------------------------------------------------------------------
    # Gesture input
    # ------------------------------------------------------------------

    def start(self, subject: DragSubject) -> bool:
        """Begin a drag of the given subject.

        Returns:
            False if a drag is already in progress or the subject is unknown
        """
        if self.is_active:
            logger.debug(f"Ignoring drag start of {subject}: session already active")
            return False

        state = _SUBJECT_STATES.get(type(subject))
        if state is None:
            logger.warning(f"Cannot drag unknown subject: {subject!r}")
            return False

        self._state = state
        self._subject = subject
        self._hover = None
        self._placement_token = str(uuid.uuid4())
        self._placed_token = None
        logger.debug(f"Drag started: {state.value} {subject}")
        self._notify()
        return True

    def move(self, target: Optional[DropTarget]) -> None:
        """Update the target the pointer is over (None when over nothing).

        Only repaints the hover indicator, unless insert_on_hover is set
        and a palette item enters a valid canvas zone.
        """
        if not self.is_active:
            return
        if target != self._hover:
            self._hover = target
            self._notify()
        if self.insert_on_hover and self._state is DragState.DRAGGING_PALETTE_ITEM:
            self._place_palette_item(target)

    def drop(self, target: Optional[DropTarget] = None) -> bool:
        """Release the drag over a target (defaults to the hover target).

        Returns:
            True if a layout operation was committed
        """
        if not self.is_active:
            return False

        if target is None:
            target = self._hover

        committed = False
        if target is not None:
            if self._state is DragState.DRAGGING_PALETTE_ITEM:
                committed = self._place_palette_item(target)
            elif self._state is DragState.DRAGGING_CANVAS_ITEM:
                committed = self._reorder_canvas_item(target)
            elif self._state is DragState.DRAGGING_PAGE:
                committed = self._reorder_page(target)

        logger.debug(f"Drag dropped on {target}: committed={committed}")
        self._reset()
        return committed

    def cancel(self) -> None:
        """Abandon the drag without touching the layout."""
        if not self.is_active:
            return
        logger.debug(f"Drag cancelled: {self._subject}")
        self._reset()

    def _reset(self) -> None:
        self._state = DragState.IDLE
        self._subject = None
        self._hover = None
        self._placement_token = None
        self._placed_token = None
        self._notify()

    # ------------------------------------------------------------------
    # Drop resolution
    # ------------------------------------------------------------------

    def _is_canvas_zone(self, target: Optional[DropTarget]) -> bool:
        """Empty canvas, or any item on the active page."""
        if target is None:
            return False
        if target.kind is TargetKind.EMPTY_CANVAS:
            return True
        if target.kind is TargetKind.CANVAS_ITEM and target.target_id:
            return self.store.active_page.index_of(target.target_id) >= 0
        return False

    def _place_palette_item(self, target: Optional[DropTarget]) -> bool:
        if self.has_placed or not self._is_canvas_zone(target):
            return False
        assert isinstance(self._subject, PaletteItem)

        page_id = self.store.active_page_id
        instance = self.store.add_widget_instance(page_id, self._subject.widget_type)
        if instance is None:
            return False
        self._placed_token = self._placement_token
        return True

    def _reorder_canvas_item(self, target: DropTarget) -> bool:
        if target.kind is not TargetKind.CANVAS_ITEM or not target.target_id:
            return False
        assert isinstance(self._subject, CanvasItem)

        page = self.store.active_page
        from_index = page.index_of(self._subject.instance_id)
        to_index = page.index_of(target.target_id)
        if from_index < 0 or to_index < 0 or from_index == to_index:
            return False
        return self.store.reorder_widget_instances(page.id, from_index, to_index)

    def _reorder_page(self, target: DropTarget) -> bool:
        if target.kind is not TargetKind.PAGE_TAB or not target.target_id:
            return False
        assert isinstance(self._subject, PageTab)

        workspace = self.store.workspace
        from_index = workspace.page_index(self._subject.page_id)
        to_index = workspace.page_index(target.target_id)
        if from_index < 0 or to_index < 0 or from_index == to_index:
            return False
        return self.store.reorder_pages(from_index, to_index)
