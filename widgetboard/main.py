#!/usr/bin/env python3
"""
Main CLI entry point for widgetboard
"""

import typer
from rich.table import Table

from widgetboard import __version__
from widgetboard.commands import pages, templates, widgets
from widgetboard.commands._helpers import layout_store
from widgetboard.config.settings import get_storage_path, validate_all_env_vars
from widgetboard.ui.gui import gui
from widgetboard.utils.logging_utils import setup_cli_logging
from widgetboard.utils.output import console, print_json


def version():
    """Show widgetboard version"""
    typer.echo(f"widgetboard version {__version__}")


def show(
    json_output: bool = typer.Option(False, "--json", help="Output the stored snapshot as JSON"),
):
    """Show every page and the widgets placed on it."""
    with layout_store() as store:
        workspace = store.workspace

    if json_output:
        print_json(workspace.to_dict())
        return

    for index, page in enumerate(workspace.pages):
        active = " [green](active)[/green]" if index == workspace.active_index else ""
        table = Table(
            title=f"{index + 1}. {page.name}{active}",
            title_justify="left",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("#", justify="right", style="dim")
        table.add_column("Widget")
        table.add_column("Name")
        table.add_column("Size", justify="right")
        table.add_column("ID", style="dim")
        for position, item in enumerate(page.items, start=1):
            display = store.registry.lookup(item.widget_type).display_name
            table.add_row(
                str(position),
                display,
                item.name or "",
                f"{item.width}×{item.height}",
                item.id,
            )
        if not page.items:
            table.add_row("", "[dim]no widgets yet[/dim]", "", "", "")
        console.print(table)

    console.print(f"[dim]Stored in {get_storage_path()}[/dim]")


def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
):
    """
    widgetboard - build a personal dashboard out of widgets

    [bold]Examples:[/bold]

    Open the builder:
        [cyan]widgetboard gui[/cyan]

    Place a widget on the active page:
        [cyan]widgetboard widget add ToDoList[/cyan]

    Start a page from a template:
        [cyan]widgetboard template use template-daily-planner[/cyan]
    """
    setup_cli_logging(verbose)
    for error in validate_all_env_vars():
        console.print(f"[yellow]Warning: {error}[/yellow]")


def create_app() -> typer.Typer:
    """Create and configure the main CLI application"""
    app = typer.Typer(
        name="widgetboard",
        help="Personal dashboard builder",
        rich_markup_mode="rich",
        no_args_is_help=True,
    )
    app.callback()(main)

    app.command()(version)
    app.command()(show)
    app.command()(gui)

    app.add_typer(pages.app, name="page")
    app.add_typer(widgets.app, name="widget")
    app.add_typer(templates.app, name="template")
    return app


# Create the app instance
app = create_app()


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()
