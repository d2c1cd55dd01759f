"""
Layout data model.

A Workspace is an ordered tuple of Pages plus the index of the active
page. Each Page owns an ordered tuple of WidgetInstances laid out in
grid flow order. All three types are frozen: every layout operation
builds a new value instead of mutating an existing one.

The snapshot format is the JSON-compatible document written to local
storage:

    {
        "pages": [
            {"id": ..., "name": ..., "icon": ...,
             "items": [{"id": ..., "widgetId": ..., "width": ..., "height": ...,
                        "name": ..., "color": ..., "font": ..., "theme": ...,
                        ...extra properties}]}
        ],
        "activePageId": ...
    }
"""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple

from widgetboard.config.constants import (
    DEFAULT_PAGE_ICON,
    DEFAULT_PAGE_ID,
    DEFAULT_PAGE_NAME,
    MIN_WIDGET_SPAN,
)
from widgetboard.exceptions import SnapshotError

# Known instance fields as they appear in the snapshot
_KNOWN_ITEM_KEYS = ("id", "widgetId", "width", "height", "name", "color", "font", "theme")

# Property names accepted by update_props and where they land
_OVERRIDE_FIELDS = {"name": "name", "color": "color", "font": "font", "theme": "theme"}
_GEOMETRY_FIELDS = ("width", "height")
_IMMUTABLE_FIELDS = ("id", "widgetId", "widget_type")


def new_instance_id(widget_type: str) -> str:
    """Generate a never-reused instance id for a widget type."""
    return f"{widget_type}-{uuid.uuid4()}"


def new_page_id() -> str:
    """Generate a page id."""
    return str(uuid.uuid4())


def clamp_span(value: int) -> int:
    """Clamp a width/height to the minimum valid grid span."""
    return max(MIN_WIDGET_SPAN, int(value))


def _optional_str(data: Mapping[str, Any], key: str, **context: Any) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise SnapshotError(f"Field {key!r} must be a string", **context)
    return value


@dataclass(frozen=True)
class WidgetInstance:
    """One placed occurrence of a widget type on a page.

    Attributes:
        id: Unique instance id, distinct from widget_type
        widget_type: Registry key of the widget
        width: Column span in grid cells (>= 1)
        height: Row span in grid cells (>= 1)
        name: Optional display name override
        color: Optional color override
        font: Optional font override
        theme: Optional theme override ("light", "dark" or "custom")
        extra: Opaque properties interpreted only by the widget itself
    """

    id: str
    widget_type: str
    width: int
    height: int
    name: Optional[str] = None
    color: Optional[str] = None
    font: Optional[str] = None
    theme: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "width", clamp_span(self.width))
        object.__setattr__(self, "height", clamp_span(self.height))

    def resized(self, width: int, height: int) -> WidgetInstance:
        """Return a copy with new geometry, clamped to the minimum span."""
        return replace(self, width=clamp_span(width), height=clamp_span(height))

    def renamed(self, name: Optional[str]) -> WidgetInstance:
        """Return a copy with a new display name override."""
        return replace(self, name=name or None)

    def with_props(self, props: Mapping[str, Any]) -> WidgetInstance:
        """Shallow-merge properties into the instance.

        Known override fields (name, color, font, theme) and geometry are
        routed to their attributes; everything else lands in ``extra``.
        The id and widget type cannot be changed this way.
        """
        changes: Dict[str, Any] = {}
        extra = dict(self.extra)
        for key, value in props.items():
            if key in _IMMUTABLE_FIELDS:
                continue
            if key in _OVERRIDE_FIELDS:
                changes[_OVERRIDE_FIELDS[key]] = value
            elif key in _GEOMETRY_FIELDS:
                changes[key] = clamp_span(value)
            else:
                extra[key] = value
        return replace(self, extra=extra, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the snapshot representation."""
        result: Dict[str, Any] = dict(self.extra)
        result.update(
            {
                "id": self.id,
                "widgetId": self.widget_type,
                "width": self.width,
                "height": self.height,
            }
        )
        for key in ("name", "color", "font", "theme"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> WidgetInstance:
        """Create an instance from its snapshot representation.

        Raises:
            SnapshotError: If required fields are missing or mistyped
        """
        if not isinstance(data, Mapping):
            raise SnapshotError("Widget instance must be an object")

        instance_id = data.get("id")
        widget_type = data.get("widgetId")
        if not isinstance(instance_id, str) or not instance_id:
            raise SnapshotError("Widget instance is missing an id")
        if not isinstance(widget_type, str) or not widget_type:
            raise SnapshotError("Widget instance is missing a widgetId", instance_id=instance_id)

        width = data.get("width")
        height = data.get("height")
        for label, value in (("width", width), ("height", height)):
            if (
                isinstance(value, bool)
                or not isinstance(value, (int, float))
                or not math.isfinite(value)
            ):
                raise SnapshotError(
                    f"Widget instance has a non-numeric or non-finite {label}", instance_id=instance_id
                )

        return cls(
            id=instance_id,
            widget_type=widget_type,
            width=int(width),
            height=int(height),
            name=_optional_str(data, "name", instance_id=instance_id),
            color=_optional_str(data, "color", instance_id=instance_id),
            font=_optional_str(data, "font", instance_id=instance_id),
            theme=_optional_str(data, "theme", instance_id=instance_id),
            extra={k: v for k, v in data.items() if k not in _KNOWN_ITEM_KEYS},
        )


@dataclass(frozen=True)
class Page:
    """A named, ordered collection of widget instances."""

    id: str
    name: str
    icon: str
    items: Tuple[WidgetInstance, ...] = ()

    def index_of(self, instance_id: str) -> int:
        """Position of an instance in flow order, or -1 if absent."""
        for index, item in enumerate(self.items):
            if item.id == instance_id:
                return index
        return -1

    def get_item(self, instance_id: str) -> Optional[WidgetInstance]:
        """Look up an instance on this page."""
        index = self.index_of(instance_id)
        return self.items[index] if index >= 0 else None

    def with_items(self, items: List[WidgetInstance]) -> Page:
        return replace(self, items=tuple(items))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "icon": self.icon,
            "items": [item.to_dict() for item in self.items],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Page:
        """Create a page from its snapshot representation.

        Raises:
            SnapshotError: If required fields are missing or mistyped
        """
        if not isinstance(data, Mapping):
            raise SnapshotError("Page must be an object")

        page_id = data.get("id")
        if not isinstance(page_id, str) or not page_id:
            raise SnapshotError("Page is missing an id")

        items = data.get("items", [])
        if not isinstance(items, list):
            raise SnapshotError("Page items must be a list", page_id=page_id)

        return cls(
            id=page_id,
            name=_optional_str(data, "name", page_id=page_id) or "",
            icon=_optional_str(data, "icon", page_id=page_id) or DEFAULT_PAGE_ICON,
            items=tuple(WidgetInstance.from_dict(item) for item in items),
        )


def default_page() -> Page:
    """The page a fresh workspace starts with."""
    return Page(id=DEFAULT_PAGE_ID, name=DEFAULT_PAGE_NAME, icon=DEFAULT_PAGE_ICON)


@dataclass(frozen=True)
class Workspace:
    """All pages in tab order plus the active page pointer.

    A workspace always holds at least one page; constructing one with
    none yields the default single-page workspace. An out-of-range
    active index resolves to 0.
    """

    pages: Tuple[Page, ...] = ()
    active_index: int = 0

    def __post_init__(self) -> None:
        if not self.pages:
            object.__setattr__(self, "pages", (default_page(),))
        if not 0 <= self.active_index < len(self.pages):
            object.__setattr__(self, "active_index", 0)

    @classmethod
    def default(cls) -> Workspace:
        return cls(pages=(default_page(),), active_index=0)

    @property
    def active_page(self) -> Page:
        return self.pages[self.active_index]

    @property
    def active_page_id(self) -> str:
        return self.active_page.id

    def page_index(self, page_id: str) -> int:
        """Position of a page in tab order, or -1 if absent."""
        for index, page in enumerate(self.pages):
            if page.id == page_id:
                return index
        return -1

    def get_page(self, page_id: str) -> Optional[Page]:
        index = self.page_index(page_id)
        return self.pages[index] if index >= 0 else None

    def find_instance(self, instance_id: str) -> Optional[Tuple[Page, WidgetInstance]]:
        """Locate an instance and its owning page by linear scan."""
        for page in self.pages:
            item = page.get_item(instance_id)
            if item is not None:
                return page, item
        return None

    def replace_page(self, page: Page) -> Workspace:
        """Return a workspace with the page of the same id swapped in."""
        pages = tuple(page if p.id == page.id else p for p in self.pages)
        return replace(self, pages=pages)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pages": [page.to_dict() for page in self.pages],
            "activePageId": self.active_page_id,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Workspace:
        """Create a workspace from a snapshot document.

        An empty page list normalizes to the default workspace; an absent
        or unknown activePageId selects the first page.

        Raises:
            SnapshotError: If the document is structurally invalid
        """
        if not isinstance(data, Mapping):
            raise SnapshotError("Snapshot must be an object")

        pages_data = data.get("pages")
        if not isinstance(pages_data, list):
            raise SnapshotError("Snapshot is missing its page list")

        pages = tuple(Page.from_dict(page) for page in pages_data)
        if not pages:
            return cls.default()

        seen = set()
        for page in pages:
            if page.id in seen:
                raise SnapshotError("Duplicate page id", page_id=page.id)
            seen.add(page.id)

        workspace = cls(pages=pages)
        active_id = data.get("activePageId")
        if isinstance(active_id, str):
            index = workspace.page_index(active_id)
            if index >= 0:
                workspace = replace(workspace, active_index=index)
        return workspace
