"""
Pointer handling shared by everything that can be dragged.

A DragSource captures the mouse on press. The first move with the
button held starts a drag on the app's DragSession; later moves report
the drop target under the pointer; release drops. A press released
without moving is treated as a click.
"""

from typing import Optional

from textual import events
from textual.errors import NoWidget
from textual.geometry import Offset
from textual.screen import Screen

from widgetboard.layout import DragSubject, DropTarget


def drop_target_at(screen: Screen, x: int, y: int) -> Optional[DropTarget]:
    """Find the drop target under a screen coordinate.

    Walks up from the widget under the pointer to the first one that
    answers drop_target().
    """
    try:
        widget, _ = screen.get_widget_at(x, y)
    except NoWidget:
        return None

    for node in widget.ancestors_with_self:
        resolve = getattr(node, "drop_target", None)
        if callable(resolve):
            return resolve()
    return None


class DragSource:
    """
    Mixin for widgets that start drags. Combine with a Widget subclass.

    Classes using this mixin must implement drag_subject() and may
    override activate().
    """

    _press_offset: Optional[Offset] = None
    _dragging: bool = False

    def drag_subject(self) -> DragSubject:
        """
        Return what a drag started on this widget carries.

        Subclasses must implement this method.

        Raises:
            NotImplementedError: If subclass doesn't implement this method
        """
        raise NotImplementedError("Subclasses must implement drag_subject()")

    def activate(self) -> None:
        """Called when the widget is clicked rather than dragged."""

    def on_mouse_down(self, event: events.MouseDown) -> None:
        if event.button != 1:
            return
        self._press_offset = event.screen_offset
        self._dragging = False
        self.capture_mouse()
        event.stop()

    def on_mouse_move(self, event: events.MouseMove) -> None:
        if self._press_offset is None:
            return
        session = self.app.session
        if not self._dragging:
            if event.screen_offset == self._press_offset:
                return
            self._dragging = session.start(self.drag_subject())
            if not self._dragging:
                return
        session.move(drop_target_at(self.screen, event.screen_x, event.screen_y))
        event.stop()

    def on_mouse_up(self, event: events.MouseUp) -> None:
        if self._press_offset is None:
            return
        self.release_mouse()
        self._press_offset = None
        event.stop()

        if not self._dragging:
            self.activate()
            return

        self._dragging = False
        session = self.app.session
        if session.is_active:
            target = drop_target_at(self.screen, event.screen_x, event.screen_y)
            session.move(target)
            session.drop(target)
