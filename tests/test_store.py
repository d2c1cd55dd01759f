"""Tests for LayoutStore operations and subscriptions."""

import logging

import pytest

from widgetboard.config.constants import (
    DEFAULT_PAGE_ID,
    NEW_PAGE_ICON,
    TEMPLATE_PAGE_ICON,
)
from widgetboard.layout import LayoutStore, Page, Template, TemplateItem, WidgetInstance, Workspace
from widgetboard.layout.store import move_item


def ids(page):
    return [item.id for item in page.items]


def item(instance_id, widget_type="Clock", width=1, height=1):
    return WidgetInstance(id=instance_id, widget_type=widget_type, width=width, height=height)


@pytest.fixture
def abc_store(registry):
    """Store whose default page holds instances a, b and c."""
    page = Page(id="home", name="Dashboard", icon="LayoutDashboard", items=(item("a"), item("b"), item("c")))
    return LayoutStore(Workspace(pages=(page,)), registry=registry)


@pytest.fixture
def three_pages(registry):
    """Store with pages p1, p2, p3."""
    pages = tuple(Page(id=f"p{i}", name=f"Page {i}", icon="File") for i in (1, 2, 3))
    return LayoutStore(Workspace(pages=pages), registry=registry)


class TestMoveItem:
    """Test the array move helper."""

    def test_move_forward(self):
        assert move_item(["a", "b", "c"], 0, 2) == ["b", "c", "a"]

    def test_move_backward(self):
        assert move_item(["a", "b", "c"], 2, 0) == ["c", "a", "b"]


class TestAddWidgetInstance:
    """Test placing widgets on pages."""

    def test_uses_registry_default_size(self, store):
        instance = store.add_widget_instance(DEFAULT_PAGE_ID, "ToDoList")
        assert (instance.width, instance.height) == (1, 5)
        assert store.active_page.items == (instance,)

    def test_unknown_type_gets_fallback_size(self, store):
        instance = store.add_widget_instance(DEFAULT_PAGE_ID, "NotAWidget")
        assert (instance.width, instance.height) == (2, 2)
        assert instance.widget_type == "NotAWidget"

    def test_appends_in_order_with_unique_ids(self, store):
        first = store.add_widget_instance(DEFAULT_PAGE_ID, "Clock")
        second = store.add_widget_instance(DEFAULT_PAGE_ID, "Clock")
        assert ids(store.active_page) == [first.id, second.id]
        assert first.id != second.id
        assert first.id != "Clock"

    def test_insert_index_is_clamped(self, abc_store):
        start = abc_store.add_widget_instance("home", "Clock", insert_index=-5)
        end = abc_store.add_widget_instance("home", "Clock", insert_index=99)
        middle = abc_store.add_widget_instance("home", "Clock", insert_index=2)
        assert ids(abc_store.active_page) == [start.id, "a", middle.id, "b", "c", end.id]

    def test_unknown_page_is_noop(self, store):
        calls = []
        store.subscribe(calls.append)
        assert store.add_widget_instance("missing", "Clock") is None
        assert calls == []

    def test_instance_defaults_are_stamped(self, registry):
        store = LayoutStore(registry=registry, instance_defaults={"font": "font-lato", "theme": "dark"})
        instance = store.add_widget_instance(DEFAULT_PAGE_ID, "Clock")
        assert instance.font == "font-lato"
        assert instance.theme == "dark"

    def test_does_not_touch_other_pages(self, three_pages):
        three_pages.add_widget_instance("p2", "Clock")
        assert len(three_pages.get_page("p2").items) == 1
        assert three_pages.get_page("p1").items == ()
        assert three_pages.get_page("p3").items == ()


class TestRemoveAndReorder:
    """Test removing and reordering instances."""

    def test_remove(self, abc_store):
        assert abc_store.remove_widget_instance("home", "b") is True
        assert ids(abc_store.active_page) == ["a", "c"]

    def test_remove_unknown_is_noop(self, abc_store):
        assert abc_store.remove_widget_instance("home", "zzz") is False
        assert abc_store.remove_widget_instance("nope", "a") is False
        assert ids(abc_store.active_page) == ["a", "b", "c"]

    def test_reorder_moves_item(self, abc_store):
        assert abc_store.reorder_widget_instances("home", 0, 2) is True
        assert ids(abc_store.active_page) == ["b", "c", "a"]

    def test_reorder_same_index_is_noop(self, abc_store):
        calls = []
        abc_store.subscribe(calls.append)
        assert abc_store.reorder_widget_instances("home", 1, 1) is False
        assert calls == []

    @pytest.mark.parametrize("from_index,to_index", [(-1, 0), (0, 3), (5, 1)])
    def test_reorder_out_of_range_is_noop(self, abc_store, from_index, to_index):
        assert abc_store.reorder_widget_instances("home", from_index, to_index) is False
        assert ids(abc_store.active_page) == ["a", "b", "c"]

    def test_reorder_preserves_multiset(self, abc_store):
        before = sorted(ids(abc_store.active_page))
        abc_store.reorder_widget_instances("home", 2, 0)
        assert sorted(ids(abc_store.active_page)) == before

    @pytest.mark.parametrize("i,j", [(0, 2), (2, 0), (1, 2), (0, 1)])
    def test_reorder_then_reverse_restores_order(self, abc_store, i, j):
        before = ids(abc_store.active_page)
        assert abc_store.reorder_widget_instances("home", i, j)
        assert abc_store.reorder_widget_instances("home", j, i)
        assert ids(abc_store.active_page) == before

    def test_ids_are_not_reused_after_remove(self, store):
        first = store.add_widget_instance("home", "Clock")
        store.remove_widget_instance("home", first.id)
        second = store.add_widget_instance("home", "Clock")
        assert second.id != first.id
        assert ids(store.active_page) == [second.id]


class TestUpdateInstance:
    """Test resize, rename and property updates."""

    def test_resize(self, abc_store):
        updated = abc_store.resize_widget_instance("home", "a", 3, 4)
        assert (updated.width, updated.height) == (3, 4)
        assert abc_store.active_page.get_item("a") == updated

    def test_resize_clamps_to_one(self, abc_store):
        updated = abc_store.resize_widget_instance("home", "a", 0, -2)
        assert (updated.width, updated.height) == (1, 1)

    def test_resize_unknown_instance(self, abc_store):
        assert abc_store.resize_widget_instance("home", "zzz", 2, 2) is None

    def test_rename(self, abc_store):
        assert abc_store.rename_widget_instance("home", "b", "Kitchen clock").name == "Kitchen clock"
        assert abc_store.rename_widget_instance("home", "b", "").name is None

    def test_update_props_merges(self, abc_store):
        abc_store.update_widget_instance_props("home", "c", {"color": "blue", "mood": "calm"})
        updated = abc_store.update_widget_instance_props("home", "c", {"mood": "busy"})
        assert updated.color == "blue"
        assert updated.extra == {"mood": "busy"}
        assert updated.widget_type == "Clock"
        assert ids(abc_store.active_page) == ["a", "b", "c"]


class TestPages:
    """Test page operations."""

    def test_add_page_defaults(self, store):
        page = store.add_page()
        assert page.name == "Page 2"
        assert page.icon == NEW_PAGE_ICON
        assert page.items == ()
        assert store.active_page_id == page.id

    def test_add_page_with_name(self, store):
        page = store.add_page("Inbox", "Inbox")
        assert (page.name, page.icon) == ("Inbox", "Inbox")
        assert [p.id for p in store.pages] == [DEFAULT_PAGE_ID, page.id]

    def test_delete_active_page_activates_first(self, three_pages):
        three_pages.select_page("p3")
        assert three_pages.delete_page("p3") is True
        assert [p.id for p in three_pages.pages] == ["p1", "p2"]
        assert three_pages.active_page_id == "p1"

    def test_delete_page_before_active_keeps_active_page(self, three_pages):
        three_pages.select_page("p3")
        three_pages.delete_page("p1")
        assert three_pages.active_page_id == "p3"
        assert three_pages.workspace.active_index == 1

    def test_delete_page_after_active(self, three_pages):
        three_pages.select_page("p2")
        three_pages.delete_page("p3")
        assert three_pages.active_page_id == "p2"

    def test_delete_last_page_restores_default(self, store):
        store.add_widget_instance(DEFAULT_PAGE_ID, "Clock")
        assert store.delete_page(DEFAULT_PAGE_ID) is True
        assert store.workspace == Workspace.default()

    def test_delete_unknown_page(self, three_pages):
        assert three_pages.delete_page("zzz") is False
        assert len(three_pages.pages) == 3

    def test_reorder_pages_active_follows_id(self, three_pages):
        three_pages.select_page("p1")
        assert three_pages.reorder_pages(0, 2) is True
        assert [p.id for p in three_pages.pages] == ["p2", "p3", "p1"]
        assert three_pages.active_page_id == "p1"
        assert three_pages.workspace.active_index == 2

    def test_reorder_pages_invalid(self, three_pages):
        assert three_pages.reorder_pages(0, 0) is False
        assert three_pages.reorder_pages(0, 3) is False

    def test_update_page(self, three_pages):
        updated = three_pages.update_page("p2", name="Work", icon="Briefcase", id="hijack", items=[1])
        assert (updated.id, updated.name, updated.icon) == ("p2", "Work", "Briefcase")
        assert updated.items == ()

    def test_update_unknown_page(self, three_pages):
        assert three_pages.update_page("zzz", name="X") is None

    def test_select_page(self, three_pages):
        assert three_pages.select_page("p2") is True
        assert three_pages.active_page_id == "p2"
        assert three_pages.select_page("p2") is False
        assert three_pages.select_page("zzz") is False


class TestUseTemplate:
    """Test creating pages from templates."""

    @pytest.fixture
    def template(self):
        return Template(
            template_id="template-test",
            name="Morning",
            description="",
            items=(TemplateItem("Clock", 3, 2), TemplateItem("ToDoList", 1, 4)),
        )

    def test_creates_active_page(self, store, template):
        page = store.use_template(template)
        assert page.name == "Morning"
        assert page.icon == TEMPLATE_PAGE_ICON
        assert store.active_page_id == page.id
        assert [(i.widget_type, i.width, i.height) for i in page.items] == [
            ("Clock", 3, 2),
            ("ToDoList", 1, 4),
        ]

    def test_each_use_gets_fresh_ids(self, store, template):
        first = store.use_template(template)
        second = store.use_template(template)
        assert first.id != second.id
        assert not set(ids(first)) & set(ids(second))
        assert len(store.pages) == 3


class TestSubscriptions:
    """Test change notification."""

    def test_listener_gets_new_workspace(self, store):
        seen = []
        store.subscribe(seen.append)
        store.add_page("Two")
        assert seen == [store.workspace]

    def test_noop_does_not_notify(self, abc_store):
        seen = []
        abc_store.subscribe(seen.append)
        abc_store.resize_widget_instance("home", "a", 1, 1)
        abc_store.select_page("home")
        abc_store.update_page("home", name="Dashboard")
        assert seen == []

    def test_unsubscribe(self, store):
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        store.add_page()
        assert seen == []

    def test_failing_listener_is_logged(self, store, caplog):
        seen = []

        def broken(workspace):
            raise RuntimeError("boom")

        store.subscribe(broken)
        store.subscribe(seen.append)
        with caplog.at_level(logging.ERROR, logger="widgetboard.layout.store"):
            store.add_page()
        assert len(seen) == 1
        assert "boom" in caplog.text

    def test_replace_workspace(self, store):
        workspace = Workspace(pages=(Page(id="x", name="X", icon="File"),))
        assert store.replace_workspace(workspace) is True
        assert store.active_page_id == "x"
        assert store.replace_workspace(workspace) is False
