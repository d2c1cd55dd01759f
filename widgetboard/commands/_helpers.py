"""Shared command helpers to reduce duplication across commands.

This module provides:
- layout_store(): Open the persisted layout for one command
- require_page() / require_instance(): Resolve references or exit with error
- @handle_command_error: Consistent error handling decorator
"""

from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Iterator, Optional, Tuple, TypeVar

import typer

from widgetboard.config.ui_config import get_instance_defaults
from widgetboard.exceptions import WidgetboardError
from widgetboard.layout import (
    LayoutStore,
    Page,
    WidgetInstance,
    open_store,
    register_builtin_widgets,
    widget_registry,
)
from widgetboard.utils.output import console

F = TypeVar("F", bound=Callable[..., Any])


@contextmanager
def layout_store() -> Iterator[LayoutStore]:
    """Open the stored layout with synchronous saving.

    Example:
        with layout_store() as store:
            store.add_page("Inbox")
    """
    register_builtin_widgets(widget_registry)
    store, persistence = open_store(
        background=False,
        registry=widget_registry,
        instance_defaults=dict(get_instance_defaults()),
    )
    try:
        yield store
    finally:
        persistence.close()


def find_page(store: LayoutStore, ref: str) -> Optional[Page]:
    """Resolve a page by id, then by name, then by 1-based position."""
    page = store.get_page(ref)
    if page is not None:
        return page

    for candidate in store.pages:
        if candidate.name == ref:
            return candidate

    if ref.isdigit():
        position = int(ref)
        if 1 <= position <= len(store.pages):
            return store.pages[position - 1]
    return None


def require_page(store: LayoutStore, ref: Optional[str]) -> Page:
    """Resolve a page reference (the active page when None) or exit with error.

    Raises:
        typer.Exit: If the page is not found (exits with code 1)
    """
    if ref is None:
        return store.active_page
    page = find_page(store, ref)
    if page is None:
        console.print(f"[red]Error: Page '{ref}' not found[/red]")
        raise typer.Exit(1)
    return page


def require_instance(
    store: LayoutStore, ref: str, page_ref: Optional[str] = None
) -> Tuple[Page, WidgetInstance]:
    """Resolve a widget instance by id or unique id prefix.

    Searches the given page, or every page when no page is given.

    Raises:
        typer.Exit: If no instance (or more than one) matches
    """
    pages = [require_page(store, page_ref)] if page_ref is not None else list(store.pages)

    matches = []
    for page in pages:
        for item in page.items:
            if item.id == ref:
                return page, item
            if item.id.startswith(ref):
                matches.append((page, item))

    if not matches:
        console.print(f"[red]Error: Widget '{ref}' not found[/red]")
        raise typer.Exit(1)
    if len(matches) > 1:
        console.print(f"[red]Error: '{ref}' matches {len(matches)} widgets, be more specific[/red]")
        raise typer.Exit(1)
    return matches[0]


def nothing_changed(message: str) -> None:
    """Report a no-op command and exit with code 1."""
    console.print(f"[yellow]{message}[/yellow]")
    raise typer.Exit(1)


def handle_command_error(operation: Optional[str] = None, *, exit_code: int = 1) -> Callable[[F], F]:
    """Decorator for consistent error handling in CLI commands.

    Args:
        operation: Description of the operation for error messages. If not
                   provided, derived from the function name.
        exit_code: Exit code to use on error (default: 1)

    Example:
        @app.command()
        @handle_command_error("adding widget")
        def add(widget_type: str):
            ...
    """

    def decorator(func: F) -> F:
        op = operation or func.__name__.replace("_", " ")

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except typer.Exit:
                raise
            except typer.Abort:
                console.print("[yellow]Cancelled[/yellow]")
                raise typer.Exit(0) from None
            except WidgetboardError as e:
                console.print(f"[red]Error {op}: {e}[/red]")
                raise typer.Exit(exit_code) from e

        return wrapper  # type: ignore[return-value]

    return decorator
