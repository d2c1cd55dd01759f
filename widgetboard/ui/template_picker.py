"""
Template picker modal for the widgetboard builder.

Lists the page templates and dismisses with the chosen template id,
or None when cancelled.
"""

from typing import List, Optional

from rich.text import Text
from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import ModalScreen
from textual.widgets import Label, OptionList, Static
from textual.widgets.option_list import Option

from widgetboard.layout import Template


class TemplatePickerScreen(ModalScreen[Optional[str]]):
    """Modal screen for starting a new page from a template."""

    CSS = """
    TemplatePickerScreen {
        align: center middle;
    }

    #template-picker-container {
        width: 70;
        height: auto;
        max-height: 80%;
        background: $surface;
        border: thick $primary;
        padding: 1 2;
    }

    #template-picker-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        padding-bottom: 1;
    }

    #template-list {
        height: auto;
        max-height: 16;
        margin-bottom: 1;
        border: solid $primary;
    }

    #template-description {
        height: 4;
        padding: 0 1;
        background: $boost;
        color: $text-muted;
    }

    #template-instructions {
        margin-top: 1;
        text-align: center;
        color: $text-muted;
    }
    """

    def __init__(self, templates: List[Template]):
        super().__init__()
        self.templates = templates

    def compose(self) -> ComposeResult:
        with Vertical(id="template-picker-container"):
            yield Label("New page from template", id="template-picker-title")
            yield OptionList(
                *[Option(template.name, id=template.template_id) for template in self.templates],
                id="template-list",
            )
            yield Static("", id="template-description")
            yield Static("j/k Navigate • Enter Use template • Esc Cancel", id="template-instructions")

    def on_mount(self) -> None:
        option_list = self.query_one("#template-list", OptionList)
        if self.templates:
            option_list.highlighted = 0
            self._update_description(0)
        option_list.focus()

    def on_option_list_option_highlighted(self, event: OptionList.OptionHighlighted) -> None:
        if event.option_index is not None:
            self._update_description(event.option_index)

    def _update_description(self, idx: int) -> None:
        if 0 <= idx < len(self.templates):
            template = self.templates[idx]
            widgets = ", ".join(item.widget_type for item in template.items)
            self.query_one("#template-description", Static).update(
                Text(f"{template.description}\n{widgets}")
            )

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        if event.option and event.option.id:
            self.dismiss(event.option.id)

    def on_key(self, event: events.Key) -> None:
        option_list = self.query_one("#template-list", OptionList)
        if event.key == "escape":
            self.dismiss(None)
            event.stop()
        elif event.key == "j":
            option_list.action_cursor_down()
            event.stop()
        elif event.key == "k":
            option_list.action_cursor_up()
            event.stop()
