"""Template commands for widgetboard."""

import typer
from rich.table import Table

from widgetboard.layout import get_template, load_templates
from widgetboard.utils.output import console

from ._helpers import handle_command_error, layout_store

app = typer.Typer(help="Start pages from templates")


@app.command("list")
@handle_command_error("listing templates")
def list_templates():
    """List available page templates."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("ID", style="cyan")
    table.add_column("Name")
    table.add_column("Widgets", justify="right")
    table.add_column("Description", style="dim")

    for template in load_templates():
        table.add_row(template.template_id, template.name, str(len(template.items)), template.description)

    console.print(table)


@app.command()
@handle_command_error("using template")
def use(
    template_id: str = typer.Argument(..., help="Template id, e.g. template-daily-planner"),
):
    """Create a new page from a template and make it active."""
    template = get_template(template_id)
    with layout_store() as store:
        page = store.use_template(template)
    console.print(
        f"[green]Template loaded:[/green] new page \"{page.name}\" with {len(page.items)} widget(s)"
    )
