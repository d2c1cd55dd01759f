"""
GUI entry point for widgetboard - the drag-and-drop builder
"""

import logging
from typing import Optional

import typer

from widgetboard.config.ui_config import (
    FONTS,
    THEMES,
    get_insert_on_hover,
    get_instance_defaults,
    get_theme,
    set_font,
    set_theme,
)
from widgetboard.exceptions import ConfigurationError
from widgetboard.layout import DragSession, open_store, register_builtin_widgets, widget_registry
from widgetboard.utils.logging_utils import setup_file_logging
from widgetboard.utils.output import console

logger = logging.getLogger(__name__)


def gui(
    theme: Optional[str] = typer.Option(
        None,
        "--theme",
        "-t",
        help=f"Theme to use and remember ({', '.join(THEMES)})",
    ),
    font: Optional[str] = typer.Option(
        None,
        "--font",
        help=f"Font stamped onto new widgets, remembered ({', '.join(FONTS)})",
    ),
    insert_on_hover: Optional[bool] = typer.Option(
        None,
        "--insert-on-hover/--insert-on-drop",
        help="Place palette widgets as soon as they enter the canvas",
    ),
):
    """Open the drag-and-drop dashboard builder."""
    from widgetboard.ui.builder_app import BuilderApp

    try:
        if theme is not None:
            set_theme(theme)
        if font is not None:
            set_font(font)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    setup_file_logging()
    register_builtin_widgets(widget_registry)
    store, persistence = open_store(
        background=True,
        registry=widget_registry,
        instance_defaults=dict(get_instance_defaults()),
    )
    if insert_on_hover is None:
        insert_on_hover = get_insert_on_hover()
    session = DragSession(store, insert_on_hover=insert_on_hover)

    try:
        BuilderApp(store, session, theme_name=get_theme()).run()
    except KeyboardInterrupt:
        pass
    except Exception as e:
        logger.exception("Builder crashed")
        console.print(f"❌ Error: {e}", style="red")
        raise typer.Exit(1) from e
    finally:
        persistence.close()
