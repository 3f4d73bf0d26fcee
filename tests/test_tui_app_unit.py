import asyncio
from contextlib import contextmanager

from prompt_toolkit.application import create_app_session
from prompt_toolkit.input import create_pipe_input
from prompt_toolkit.output import DummyOutput

from application import ReconciliationEngine
from core import Todo, ViewFilter
from interface.tui_app import TodoTUI
from interface.tui_themes import THEMES, build_style, get_theme_palette


class StubStore:
    def __init__(self, todos=()):
        self.server = {t.id: t for t in todos}
        self.calls = []

    async def list(self):
        return list(self.server.values())

    async def create(self, title):
        todo = Todo(10, title, False, 1)
        self.server[todo.id] = todo
        return todo

    async def remove(self, todo_id):
        self.calls.append(("remove", todo_id))
        self.server.pop(todo_id, None)

    async def update(self, todo_id, fields):
        self.calls.append(("update", todo_id))
        todo = self.server[todo_id].with_changes(**fields)
        self.server[todo_id] = todo
        return todo


@contextmanager
def tui_session(todos=(), user_id=1):
    with create_pipe_input() as pipe_input:
        with create_app_session(input=pipe_input, output=DummyOutput()):
            store = StubStore(todos)
            engine = ReconciliationEngine(store, user_id=user_id)
            engine.state.todos = list(todos)
            engine.state.is_loading = False
            tui = TodoTUI(engine)
            yield tui, engine, store


def test_theme_palette_fallback_and_style():
    assert get_theme_palette("missing") == THEMES["dark-olive"]
    assert build_style("dark-contrast") is not None


def test_selection_skips_out_of_range_and_clamps():
    with tui_session([Todo(1, "a"), Todo(2, "b")]) as (tui, engine, _):
        tui.move_selection(5)
        assert tui.selected_index == 1
        assert tui.selected_todo().id == 2
        engine.set_filter(ViewFilter.COMPLETED)
        assert tui.selected_todo() is None


def test_toggle_and_delete_selected_run_engine_operations():
    with tui_session([Todo(1, "a"), Todo(2, "b")]) as (tui, engine, store):

        async def scenario():
            tui.toggle_selected()
            await asyncio.gather(*tui.pending_tasks)
            tui.move_selection(1)
            tui.delete_selected()
            await asyncio.gather(*tui.pending_tasks)
            engine.close()

        asyncio.run(scenario())
        assert store.calls == [("update", 1), ("remove", 2)]
        assert engine.state.todos == [Todo(1, "a", True)]


def test_busy_item_ignores_triggers():
    with tui_session([Todo(1, "a")]) as (tui, engine, store):
        engine.state.busy.mark_busy(1)

        async def scenario():
            tui.toggle_selected()
            tui.delete_selected()
            return list(tui.pending_tasks)

        assert asyncio.run(scenario()) == []
        assert store.calls == []


def test_edit_field_follows_session():
    with tui_session([Todo(1, "title")]) as (tui, engine, store):
        tui.start_editing(1)
        assert tui.edit_area.text == "title"
        assert engine.state.edit.is_editing(1)

        tui.edit_area.text = "changed"
        assert engine.state.edit.draft == "changed"

        tui.cancel_edit()
        assert not engine.state.edit.active
        assert tui.edit_area.text == ""
        assert store.calls == []


def test_save_edit_commits_and_leaves_field():
    with tui_session([Todo(1, "old")]) as (tui, engine, store):

        async def scenario():
            tui.start_editing(1)
            tui.edit_area.text = "new"
            tui.save_edit()
            await asyncio.gather(*tui.pending_tasks)
            engine.close()

        asyncio.run(scenario())
        assert engine.state.todos == [Todo(1, "new")]
        assert not engine.state.edit.active
        assert tui.edit_area.text == ""


def test_add_clears_input_after_success():
    with tui_session() as (tui, engine, store):
        unsubscribe = engine.subscribe(tui._on_change)

        async def scenario():
            tui.input.text = "write tests"
            assert engine.state.new_title == "write tests"
            tui._accept_new_todo(tui.input.buffer)
            await asyncio.gather(*tui.pending_tasks)
            engine.close()

        asyncio.run(scenario())
        unsubscribe()
        assert [t.title for t in engine.state.todos] == ["write tests"]
        assert tui.input.text == ""


def test_leaving_edit_field_commits_draft():
    with tui_session([Todo(1, "old")]) as (tui, engine, store):

        async def scenario():
            tui.start_editing(1)
            tui.edit_area.text = "new"
            tui.watch_edit_focus()
            tui.app.layout.focus(tui.list_window)
            tui.watch_edit_focus()
            await asyncio.gather(*tui.pending_tasks)
            engine.close()

        asyncio.run(scenario())
        assert store.calls == [("update", 1)]
        assert engine.state.todos == [Todo(1, "new")]
        assert not engine.state.edit.active


def test_cancelled_edit_is_not_committed_on_focus_change():
    with tui_session([Todo(1, "old")]) as (tui, engine, store):

        async def scenario():
            tui.start_editing(1)
            tui.edit_area.text = "new"
            tui.watch_edit_focus()
            tui.cancel_edit()
            tui.watch_edit_focus()
            return list(tui.pending_tasks)

        assert asyncio.run(scenario()) == []
        assert store.calls == []
        assert engine.state.todos == [Todo(1, "old")]
