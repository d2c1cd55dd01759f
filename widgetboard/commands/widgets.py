"""Widget commands for widgetboard.

`widgetboard widget catalog` browses the palette; the other subcommands
place and edit widget instances. Instances are referenced by id or by a
unique id prefix (e.g. `ToDoList-3f2a`).
"""

import json
from typing import Any, Dict, List, Optional

import typer
from rich.table import Table

from widgetboard.layout import register_builtin_widgets, widget_registry
from widgetboard.utils.output import console, print_json

from ._helpers import (
    handle_command_error,
    layout_store,
    nothing_changed,
    require_instance,
    require_page,
)

app = typer.Typer(help="Place and edit widgets")


def _parse_assignments(assignments: List[str]) -> Dict[str, Any]:
    """Parse key=value pairs; values are read as JSON when possible."""
    props: Dict[str, Any] = {}
    for assignment in assignments:
        key, sep, raw = assignment.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{assignment}'")
        try:
            props[key] = json.loads(raw)
        except json.JSONDecodeError:
            props[key] = raw
    return props


@app.command()
def catalog(
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Only this category"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List widget types available in the palette."""
    register_builtin_widgets(widget_registry)
    grouped = widget_registry.by_category()
    if category:
        grouped = {name: regs for name, regs in grouped.items() if name.lower() == category.lower()}
        if not grouped:
            console.print(f"[yellow]No widgets in category '{category}'[/yellow]")
            raise typer.Exit(1)

    if json_output:
        print_json(
            {
                name: [
                    {
                        "id": reg.widget_type,
                        "name": reg.display_name,
                        "width": reg.default_width,
                        "height": reg.default_height,
                    }
                    for reg in regs
                ]
                for name, regs in grouped.items()
            }
        )
        return

    for name, regs in grouped.items():
        table = Table(title=name, show_header=True, header_style="bold cyan", title_justify="left")
        table.add_column("Type", style="cyan")
        table.add_column("Name")
        table.add_column("Size", justify="right", style="dim")
        for reg in regs:
            table.add_row(reg.widget_type, reg.display_name, f"{reg.default_width}×{reg.default_height}")
        console.print(table)


@app.command()
@handle_command_error("adding widget")
def add(
    widget_type: str = typer.Argument(..., help="Widget type, e.g. ToDoList"),
    page_ref: Optional[str] = typer.Option(None, "--page", "-p", help="Target page (default: active)"),
    position: Optional[int] = typer.Option(None, "--at", help="1-based position (default: end)"),
):
    """Place a new widget on a page."""
    with layout_store() as store:
        registration = store.registry.require(widget_type)
        page = require_page(store, page_ref)
        insert_index = position - 1 if position is not None else None
        instance = store.add_widget_instance(page.id, widget_type, insert_index)
        if instance is None:
            nothing_changed(f"Could not add {widget_type} to '{page.name}'")
    console.print(
        f"[green]Added {registration.display_name}[/green] to {page.name} "
        f"[dim]({instance.id}, {instance.width}×{instance.height})[/dim]"
    )


@app.command()
@handle_command_error("removing widget")
def remove(
    instance_ref: str = typer.Argument(..., help="Widget instance id or prefix"),
    page_ref: Optional[str] = typer.Option(None, "--page", "-p", help="Page to search"),
):
    """Remove a widget from its page."""
    with layout_store() as store:
        page, instance = require_instance(store, instance_ref, page_ref)
        if not store.remove_widget_instance(page.id, instance.id):
            nothing_changed(f"Widget {instance.id} was not removed")
    console.print(f"[green]Removed[/green] {instance.id} from {page.name}")


@app.command()
@handle_command_error("resizing widget")
def resize(
    instance_ref: str = typer.Argument(..., help="Widget instance id or prefix"),
    width: int = typer.Argument(..., help="Width in grid columns"),
    height: int = typer.Argument(..., help="Height in grid rows"),
    page_ref: Optional[str] = typer.Option(None, "--page", "-p", help="Page to search"),
):
    """Change a widget's size (values below 1 become 1)."""
    with layout_store() as store:
        page, instance = require_instance(store, instance_ref, page_ref)
        updated = store.resize_widget_instance(page.id, instance.id, width, height)
        if updated is None or (updated.width, updated.height) == (instance.width, instance.height):
            nothing_changed(f"Widget is already {instance.width}×{instance.height}")
    console.print(f"[green]Resized[/green] {instance.id} to {updated.width}×{updated.height}")


@app.command()
@handle_command_error("renaming widget")
def rename(
    instance_ref: str = typer.Argument(..., help="Widget instance id or prefix"),
    name: str = typer.Argument(..., help="Display name (empty string clears it)"),
    page_ref: Optional[str] = typer.Option(None, "--page", "-p", help="Page to search"),
):
    """Set a widget's display name."""
    with layout_store() as store:
        page, instance = require_instance(store, instance_ref, page_ref)
        updated = store.rename_widget_instance(page.id, instance.id, name)
        if updated is None or updated == instance:
            nothing_changed("Widget name unchanged")
    console.print(f"[green]Renamed[/green] {instance.id} → {name or '(default)'}")


@app.command("set")
@handle_command_error("updating widget")
def set_props(
    instance_ref: str = typer.Argument(..., help="Widget instance id or prefix"),
    assignments: List[str] = typer.Argument(..., help="key=value pairs"),
    page_ref: Optional[str] = typer.Option(None, "--page", "-p", help="Page to search"),
):
    """Merge properties into a widget (color, font, theme or custom keys)."""
    props = _parse_assignments(assignments)
    with layout_store() as store:
        page, instance = require_instance(store, instance_ref, page_ref)
        updated = store.update_widget_instance_props(page.id, instance.id, props)
        if updated is None or updated == instance:
            nothing_changed("Widget properties unchanged")
    console.print(f"[green]Updated[/green] {instance.id}: {', '.join(sorted(props))}")


@app.command()
@handle_command_error("moving widget")
def move(
    from_position: int = typer.Argument(..., help="Current 1-based position"),
    to_position: int = typer.Argument(..., help="New 1-based position"),
    page_ref: Optional[str] = typer.Option(None, "--page", "-p", help="Page (default: active)"),
):
    """Move a widget within its page's flow order."""
    with layout_store() as store:
        page = require_page(store, page_ref)
        if not store.reorder_widget_instances(page.id, from_position - 1, to_position - 1):
            nothing_changed(f"No widget moved on '{page.name}'")
    console.print(f"[green]Moved[/green] widget {from_position} → {to_position} on {page.name}")
