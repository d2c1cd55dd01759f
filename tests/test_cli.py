"""CLI tests using the typer runner against an isolated storage file."""

import json

import pytest
from typer.testing import CliRunner

from widgetboard import __version__
from widgetboard.config.constants import APP_STATE_KEY
from widgetboard.main import app

runner = CliRunner()


def snapshot(tmp_path):
    """Read the stored layout snapshot."""
    return json.loads((tmp_path / "local_storage.json").read_text())[APP_STATE_KEY]


def invoke(*args, **kwargs):
    return runner.invoke(app, list(args), **kwargs)


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_help(self):
        result = invoke("--help")
        assert result.exit_code == 0
        assert "Usage:" in result.output

    def test_version(self):
        result = invoke("version")
        assert result.exit_code == 0
        assert __version__ in result.output

    @pytest.mark.parametrize("group", ["page", "widget", "template"])
    def test_subcommand_help(self, group):
        result = invoke(group, "--help")
        assert result.exit_code == 0

    def test_show_fresh_workspace(self):
        result = invoke("show", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["activePageId"] == "home"
        assert data["pages"][0]["items"] == []

    def test_show_table(self):
        result = invoke("show")
        assert result.exit_code == 0
        assert "Dashboard" in result.output
        assert "no widgets yet" in result.output


class TestWidgetCommands:
    """Test placing and editing widgets."""

    def test_catalog_json(self):
        result = invoke("widget", "catalog", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert "Smart Tools" in data
        todo = next(w for w in data["Productivity"] if w["id"] == "ToDoList")
        assert (todo["width"], todo["height"]) == (1, 5)

    def test_catalog_unknown_category(self):
        result = invoke("widget", "catalog", "--category", "Nope")
        assert result.exit_code == 1

    def test_add_widget(self, tmp_path):
        result = invoke("widget", "add", "ToDoList")
        assert result.exit_code == 0, result.output
        assert "Added To-Do List" in result.output

        items = snapshot(tmp_path)["pages"][0]["items"]
        assert len(items) == 1
        assert items[0]["widgetId"] == "ToDoList"
        assert (items[0]["width"], items[0]["height"]) == (1, 5)
        assert items[0]["id"].startswith("ToDoList-")
        assert items[0]["font"] == "font-inter"

    def test_add_unknown_widget(self, tmp_path):
        result = invoke("widget", "add", "NotAWidget")
        assert result.exit_code == 1
        assert "Unknown widget type" in result.output
        assert not (tmp_path / "local_storage.json").exists()

    def test_add_at_position(self, tmp_path):
        invoke("widget", "add", "ToDoList")
        invoke("widget", "add", "ToDoList")
        result = invoke("widget", "add", "CalendarCard", "--at", "1")
        assert result.exit_code == 0
        widget_ids = [i["widgetId"] for i in snapshot(tmp_path)["pages"][0]["items"]]
        assert widget_ids == ["CalendarCard", "ToDoList", "ToDoList"]

    def test_resize_rename_and_set(self, tmp_path):
        invoke("widget", "add", "ToDoList")
        instance_id = snapshot(tmp_path)["pages"][0]["items"][0]["id"]

        assert invoke("widget", "resize", instance_id, "3", "0").exit_code == 0
        assert invoke("widget", "rename", instance_id[:12], "Groceries").exit_code == 0
        result = invoke("widget", "set", instance_id, "color=teal", "pinned=true", "limit=5")
        assert result.exit_code == 0, result.output

        item = snapshot(tmp_path)["pages"][0]["items"][0]
        assert (item["width"], item["height"]) == (3, 1)
        assert item["name"] == "Groceries"
        assert item["color"] == "teal"
        assert item["pinned"] is True
        assert item["limit"] == 5

    def test_resize_to_same_size_reports_no_change(self, tmp_path):
        invoke("widget", "add", "ToDoList")
        instance_id = snapshot(tmp_path)["pages"][0]["items"][0]["id"]
        result = invoke("widget", "resize", instance_id, "1", "5")
        assert result.exit_code == 1

    def test_set_rejects_bad_assignment(self, tmp_path):
        invoke("widget", "add", "ToDoList")
        instance_id = snapshot(tmp_path)["pages"][0]["items"][0]["id"]
        result = invoke("widget", "set", instance_id, "nokey")
        assert result.exit_code != 0

    def test_remove(self, tmp_path):
        invoke("widget", "add", "ToDoList")
        instance_id = snapshot(tmp_path)["pages"][0]["items"][0]["id"]
        result = invoke("widget", "remove", instance_id)
        assert result.exit_code == 0
        assert snapshot(tmp_path)["pages"][0]["items"] == []

    def test_remove_unknown(self):
        result = invoke("widget", "remove", "missing-id")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_move(self, tmp_path):
        invoke("widget", "add", "ToDoList")
        invoke("widget", "add", "CalendarCard")
        result = invoke("widget", "move", "1", "2")
        assert result.exit_code == 0
        widget_ids = [i["widgetId"] for i in snapshot(tmp_path)["pages"][0]["items"]]
        assert widget_ids == ["CalendarCard", "ToDoList"]

    def test_move_out_of_range(self):
        invoke("widget", "add", "ToDoList")
        assert invoke("widget", "move", "1", "5").exit_code == 1


class TestPageCommands:
    """Test page management."""

    def test_add_and_list(self):
        result = invoke("page", "add", "Inbox")
        assert result.exit_code == 0

        result = invoke("page", "list", "--json")
        pages = json.loads(result.output)
        assert [p["name"] for p in pages] == ["Dashboard", "Inbox"]
        assert pages[1]["active"] is True
        assert pages[1]["icon"] == "File"

    def test_default_page_name(self, tmp_path):
        invoke("page", "add")
        assert snapshot(tmp_path)["pages"][1]["name"] == "Page 2"

    def test_select_by_position(self, tmp_path):
        invoke("page", "add", "Inbox")
        result = invoke("page", "select", "1")
        assert result.exit_code == 0
        assert snapshot(tmp_path)["activePageId"] == "home"

    def test_select_active_page_is_noop(self):
        assert invoke("page", "select", "Dashboard").exit_code == 1

    def test_rename_and_icon(self, tmp_path):
        assert invoke("page", "rename", "Dashboard", "Home").exit_code == 0
        assert invoke("page", "icon", "Home", "House").exit_code == 0
        page = snapshot(tmp_path)["pages"][0]
        assert (page["id"], page["name"], page["icon"]) == ("home", "Home", "House")

    def test_move(self, tmp_path):
        invoke("page", "add", "Two")
        invoke("page", "add", "Three")
        assert invoke("page", "move", "Three", "1").exit_code == 0
        assert [p["name"] for p in snapshot(tmp_path)["pages"]] == ["Three", "Dashboard", "Two"]

    def test_delete_with_widgets_needs_confirmation(self, tmp_path):
        invoke("widget", "add", "ToDoList")
        invoke("page", "add", "Two")
        result = invoke("page", "delete", "Dashboard", input="n\n")
        assert result.exit_code == 0
        assert "Cancelled" in result.output
        assert len(snapshot(tmp_path)["pages"]) == 2

    def test_delete_force(self, tmp_path):
        invoke("widget", "add", "ToDoList")
        invoke("page", "add", "Two")
        result = invoke("page", "delete", "Dashboard", "--force")
        assert result.exit_code == 0
        assert [p["name"] for p in snapshot(tmp_path)["pages"]] == ["Two"]

    def test_delete_last_page_resets(self, tmp_path):
        invoke("page", "rename", "Dashboard", "Mine")
        assert invoke("page", "delete", "Mine").exit_code == 0
        data = snapshot(tmp_path)
        assert [(p["id"], p["name"]) for p in data["pages"]] == [("home", "Dashboard")]

    def test_unknown_page(self):
        result = invoke("page", "rename", "Nope", "X")
        assert result.exit_code == 1
        assert "not found" in result.output


class TestTemplateCommands:
    """Test template commands."""

    def test_list(self):
        result = invoke("template", "list")
        assert result.exit_code == 0
        assert "template-daily-planner" in result.output

    def test_use(self, tmp_path):
        result = invoke("template", "use", "template-daily-planner")
        assert result.exit_code == 0, result.output
        data = snapshot(tmp_path)
        page = data["pages"][1]
        assert page["name"] == "Daily Planner"
        assert page["icon"] == "LayoutTemplate"
        assert data["activePageId"] == page["id"]
        assert [i["widgetId"] for i in page["items"]][0] == "CalendarCard"

    def test_use_unknown(self):
        result = invoke("template", "use", "template-nope")
        assert result.exit_code == 1
        assert "Template not found" in result.output


class TestGuiCommand:
    """Test option handling of the builder command without running the TUI."""

    @pytest.fixture
    def launched(self, monkeypatch):
        from widgetboard.ui.builder_app import BuilderApp

        apps = []
        monkeypatch.setattr(BuilderApp, "run", lambda self: apps.append(self))
        return apps

    def test_theme_and_font_are_remembered(self, launched):
        from widgetboard.config import ui_config

        result = invoke("gui", "--theme", "dark", "--font", "font-lato")
        assert result.exit_code == 0, result.output
        assert ui_config.get_theme() == "dark"
        assert ui_config.get_font() == "font-lato"
        assert launched[0].theme_name == "dark"
        assert launched[0].store.instance_defaults == {"font": "font-lato", "theme": "dark"}

    def test_unknown_theme_is_rejected(self, launched):
        result = invoke("gui", "--theme", "neon")
        assert result.exit_code == 1
        assert "Unknown theme" in result.output
        assert launched == []

    def test_insert_on_hover_flag(self, launched):
        assert invoke("gui", "--insert-on-hover").exit_code == 0
        assert launched[0].session.insert_on_hover is True
