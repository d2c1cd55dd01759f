"""Page management commands for widgetboard.

All page commands live under `widgetboard page <subcommand>`. Pages are
referenced by id, by name, or by 1-based position in tab order.
"""

from typing import Optional

import typer
from rich.table import Table

from widgetboard.config.constants import NEW_PAGE_ICON
from widgetboard.utils.output import console, print_json

from ._helpers import handle_command_error, layout_store, nothing_changed, require_page

app = typer.Typer(help="Manage dashboard pages")


@app.command("list")
def list_pages(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """List pages in tab order."""
    with layout_store() as store:
        workspace = store.workspace

    if json_output:
        print_json(
            [
                {
                    "position": index + 1,
                    "id": page.id,
                    "name": page.name,
                    "icon": page.icon,
                    "widgets": len(page.items),
                    "active": index == workspace.active_index,
                }
                for index, page in enumerate(workspace.pages)
            ]
        )
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name")
    table.add_column("Icon", style="dim")
    table.add_column("Widgets", justify="right")
    table.add_column("ID", style="dim")

    for index, page in enumerate(workspace.pages):
        marker = "[green]●[/green] " if index == workspace.active_index else "  "
        table.add_row(str(index + 1), f"{marker}{page.name}", page.icon, str(len(page.items)), page.id)

    console.print(table)


@app.command()
@handle_command_error("adding page")
def add(
    name: Optional[str] = typer.Argument(None, help="Page name (defaults to 'Page N')"),
    icon: str = typer.Option(NEW_PAGE_ICON, "--icon", "-i", help="Icon name"),
):
    """Add an empty page and make it active."""
    with layout_store() as store:
        page = store.add_page(name, icon)
    console.print(f"[green]Page added:[/green] {page.name} [dim]({page.id})[/dim]")


@app.command()
@handle_command_error("deleting page")
def delete(
    page_ref: str = typer.Argument(..., help="Page id, name or position"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """Delete a page and every widget on it."""
    with layout_store() as store:
        page = require_page(store, page_ref)
        if page.items and not force:
            typer.confirm(
                f"Delete '{page.name}' and its {len(page.items)} widget(s)?", abort=True
            )
        if not store.delete_page(page.id):
            nothing_changed(f"Page '{page.name}' was not deleted")
        remaining = len(store.pages)
    console.print(f"[green]Deleted page:[/green] {page.name} [dim]({remaining} left)[/dim]")


@app.command()
@handle_command_error("renaming page")
def rename(
    page_ref: str = typer.Argument(..., help="Page id, name or position"),
    name: str = typer.Argument(..., help="New name"),
):
    """Rename a page."""
    with layout_store() as store:
        page = require_page(store, page_ref)
        if page.name == name:
            nothing_changed(f"Page is already named '{name}'")
        store.update_page(page.id, name=name)
    console.print(f"[green]Renamed:[/green] {page.name} → {name}")


@app.command()
@handle_command_error("changing page icon")
def icon(
    page_ref: str = typer.Argument(..., help="Page id, name or position"),
    icon_name: str = typer.Argument(..., help="New icon name"),
):
    """Change a page's icon."""
    with layout_store() as store:
        page = require_page(store, page_ref)
        if page.icon == icon_name:
            nothing_changed(f"Page already uses icon '{icon_name}'")
        store.update_page(page.id, icon=icon_name)
    console.print(f"[green]Icon set:[/green] {page.name} → {icon_name}")


@app.command()
@handle_command_error("moving page")
def move(
    page_ref: str = typer.Argument(..., help="Page id, name or position"),
    position: int = typer.Argument(..., help="New 1-based position"),
):
    """Move a page to another position in tab order."""
    with layout_store() as store:
        page = require_page(store, page_ref)
        from_index = store.workspace.page_index(page.id)
        if not store.reorder_pages(from_index, position - 1):
            nothing_changed(f"Page '{page.name}' was not moved")
    console.print(f"[green]Moved:[/green] {page.name} → position {position}")


@app.command()
@handle_command_error("selecting page")
def select(
    page_ref: str = typer.Argument(..., help="Page id, name or position"),
):
    """Make a page the active one."""
    with layout_store() as store:
        page = require_page(store, page_ref)
        if page.id == store.active_page_id:
            nothing_changed(f"'{page.name}' is already the active page")
        store.select_page(page.id)
    console.print(f"[green]Active page:[/green] {page.name}")
