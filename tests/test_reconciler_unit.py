import asyncio

import pytest

from application import AppState, ReconciliationEngine, RenameOutcome
from core import ErrorMessage, RemoteError, Todo, ViewFilter


class FakeStore:
    """In-memory todos service; ``gate`` holds every call until it is set."""

    def __init__(self, todos=(), fail=()):
        self.server = {t.id: t for t in todos}
        self.fail = set(fail)
        self.calls = []
        self.gate = None
        self.next_id = 100
        self.echo = {}
        self.create_echo = None

    async def _enter(self, name, todo_id=None):
        self.calls.append((name, todo_id))
        if self.gate is not None:
            await self.gate.wait()
        if name in self.fail or (name, todo_id) in self.fail:
            raise RemoteError(f"{name} failed")

    async def list(self):
        await self._enter("list")
        return list(self.server.values())

    async def create(self, title):
        await self._enter("create")
        if self.create_echo is not None:
            return self.create_echo
        todo = Todo(self.next_id, title, False, 7)
        self.next_id += 1
        self.server[todo.id] = todo
        return todo

    async def remove(self, todo_id):
        await self._enter("remove", todo_id)
        self.server.pop(todo_id, None)

    async def update(self, todo_id, fields):
        await self._enter("update", todo_id)
        if todo_id in self.echo:
            return self.echo[todo_id]
        current = self.server[todo_id]
        updated = current.with_changes(**fields)
        self.server[todo_id] = updated
        return updated


def _engine(todos=(), fail=(), **kwargs):
    store = FakeStore(todos, fail)
    focus = []
    engine = ReconciliationEngine(store, user_id=7, focus_input=lambda: focus.append(1), **kwargs)
    engine.state.todos = list(todos)
    engine.state.is_loading = False
    return engine, store, focus


def _run(engine, coro):
    async def runner():
        try:
            return await coro
        finally:
            engine.close()

    return asyncio.run(runner())


async def _spin(times=5):
    for _ in range(times):
        await asyncio.sleep(0)


def _messages(engine):
    return list(engine.state.notifications.recent)


# ---------------------------------------------------------------- load


def test_load_replaces_collection_and_drops_placeholders_and_duplicates():
    engine, store, focus = _engine()
    store.server = {1: Todo(1, "a"), 0: Todo(0, "ghost"), 2: Todo(2, "b")}

    ok = _run(engine, engine.load())

    assert ok is True
    assert [t.id for t in engine.state.todos] == [1, 2]
    assert engine.state.is_loading is False
    assert focus


def test_load_failure_leaves_empty_collection_and_reports():
    engine, store, focus = _engine(fail={"list"})
    engine.state.todos = [Todo(5, "stale")]

    ok = _run(engine, engine.load())

    assert ok is False
    assert engine.state.todos == []
    assert engine.state.is_loading is False
    assert _messages(engine) == [ErrorMessage.LOAD.value]


# ---------------------------------------------------------------- add


@pytest.mark.parametrize("title", ["", "   ", "\t\n"])
def test_add_empty_title_never_calls_store(title):
    engine, store, _ = _engine()

    result = _run(engine, engine.add(title))

    assert result is None
    assert store.calls == []
    assert engine.state.notifications.kind is ErrorMessage.EMPTY
    assert engine.state.placeholder is None


def test_add_appends_server_record_and_clears_input():
    engine, store, focus = _engine([Todo(1, "a")])
    engine.set_new_title("  buy milk  ")

    created = _run(engine, engine.add())

    assert created == Todo(100, "buy milk", False, 7)
    assert [t.id for t in engine.state.todos] == [1, 100]
    assert engine.state.placeholder is None
    assert engine.state.is_adding is False
    assert engine.state.new_title == ""
    assert focus


def test_placeholder_is_visible_and_busy_while_add_is_in_flight():
    engine, store, _ = _engine([Todo(1, "done", True)])

    async def scenario():
        store.gate = asyncio.Event()
        engine.set_filter(ViewFilter.COMPLETED)
        task = asyncio.ensure_future(engine.add("new"))
        await _spin()
        rows = engine.visible()
        snapshot = (rows[-1].id, rows[-1].title, engine.is_busy(rows[-1]), engine.state.is_adding)
        ignored = await engine.add("second")
        store.gate.set()
        await task
        return snapshot, ignored

    snapshot, ignored = _run(engine, scenario())

    assert snapshot == (0, "new", True, True)
    assert ignored is None
    assert store.calls == [("create", None)]
    assert all(not t.is_placeholder for t in engine.state.todos)
    assert engine.state.busy.placeholder_busy is False


def test_add_failure_discards_placeholder_and_keeps_input():
    engine, store, focus = _engine(fail={"create"})
    engine.set_new_title("keep me")

    result = _run(engine, engine.add())

    assert result is None
    assert engine.state.todos == []
    assert engine.state.placeholder is None
    assert engine.state.is_adding is False
    assert engine.state.new_title == "keep me"
    assert _messages(engine) == [ErrorMessage.ADD.value]
    assert focus


def test_add_rejects_server_record_with_reserved_id():
    engine, store, _ = _engine([Todo(1, "a")])
    store.create_echo = Todo(0, "x", False, 7)
    engine.set_new_title("x")

    result = _run(engine, engine.add())

    assert result is None
    assert all(t.id != 0 for t in engine.state.todos)
    assert [t.id for t in engine.state.todos] == [1]
    assert engine.state.placeholder is None
    assert engine.state.new_title == "x"
    assert _messages(engine) == [ErrorMessage.ADD.value]


def test_second_add_while_first_in_flight_is_ignored():
    engine, store, _ = _engine()

    async def scenario():
        store.gate = asyncio.Event()
        first = asyncio.ensure_future(engine.add("a"))
        await _spin()
        second = await engine.add("b")
        store.gate.set()
        await first
        return second

    second = _run(engine, scenario())

    assert second is None
    assert [t.title for t in engine.state.todos] == ["a"]
    assert store.calls == [("create", None)]
    assert _messages(engine) == []


# ---------------------------------------------------------------- toggle


def test_toggle_replaces_record_with_server_response():
    engine, store, _ = _engine([Todo(1, "a", False)])

    ok = _run(engine, engine.toggle(1))

    assert ok is True
    assert engine.state.todos == [Todo(1, "a", True)]
    assert len(engine.state.busy) == 0


def test_toggle_trusts_server_record_over_local_guess():
    engine, store, _ = _engine([Todo(1, "a", False)])
    store.echo[1] = Todo(1, "renamed elsewhere", False)

    _run(engine, engine.toggle(1))

    assert engine.state.todos == [Todo(1, "renamed elsewhere", False)]


def test_toggle_failure_leaves_record_and_clears_busy():
    engine, store, _ = _engine([Todo(1, "a", False)], fail={("update", 1)})

    ok = _run(engine, engine.toggle(1))

    assert ok is False
    assert engine.state.todos == [Todo(1, "a", False)]
    assert 1 not in engine.state.busy
    assert _messages(engine) == [ErrorMessage.UPDATE.value]


def test_update_answered_with_another_id_is_a_failure():
    engine, store, _ = _engine([Todo(1, "a", False), Todo(2, "b", False)])
    store.echo[1] = Todo(2, "b", True)

    ok = _run(engine, engine.toggle(1))

    assert ok is False
    assert engine.state.todos == [Todo(1, "a", False), Todo(2, "b", False)]
    assert not engine.state.busy.is_busy(1)
    assert _messages(engine) == [ErrorMessage.UPDATE.value]


def test_item_is_busy_only_while_request_is_in_flight():
    engine, store, _ = _engine([Todo(1, "a")])

    async def scenario():
        store.gate = asyncio.Event()
        task = asyncio.ensure_future(engine.toggle(1))
        await _spin()
        during = engine.state.busy.is_busy(1)
        store.gate.set()
        await task
        return during, engine.state.busy.is_busy(1)

    during, after = _run(engine, scenario())
    assert during is True
    assert after is False


def test_toggle_unknown_id_short_circuits():
    engine, store, _ = _engine([Todo(1, "a")])

    assert _run(engine, engine.toggle(42)) is False
    assert store.calls == []
    assert len(engine.state.busy) == 0


def test_overlapping_operations_on_same_id_keep_it_busy_until_both_settle():
    engine, store, _ = _engine([Todo(1, "a")])

    async def scenario():
        store.gate = asyncio.Event()
        first = asyncio.ensure_future(engine.toggle(1))
        second = asyncio.ensure_future(engine.rename(1, "b"))
        await _spin()
        both = engine.state.busy.is_busy(1)
        store.gate.set()
        await asyncio.gather(first, second)
        return both

    assert _run(engine, scenario()) is True
    assert not engine.state.busy.is_busy(1)
    assert len(store.calls) == 2


# ---------------------------------------------------------------- toggle all


def test_toggle_all_completes_only_incomplete_items():
    engine, store, _ = _engine([Todo(1, "a", False), Todo(2, "b", True), Todo(3, "c", False)])

    count = _run(engine, engine.toggle_all())

    assert count == 2
    assert sorted(todo_id for _, todo_id in store.calls) == [1, 3]
    assert all(t.completed for t in engine.state.todos)
    assert len(engine.state.busy) == 0


def test_toggle_all_reopens_everything_when_all_completed():
    engine, store, _ = _engine([Todo(1, "a", True), Todo(2, "b", True)])

    _run(engine, engine.toggle_all())

    assert [t.completed for t in engine.state.todos] == [False, False]


def test_toggle_all_partial_failure_has_no_global_rollback():
    engine, store, _ = _engine([Todo(1, "a"), Todo(2, "b"), Todo(3, "c")], fail={("update", 2)})

    count = _run(engine, engine.toggle_all())

    assert count == 2
    assert [t.completed for t in engine.state.todos] == [True, False, True]
    assert _messages(engine) == [ErrorMessage.UPDATE.value]
    assert len(engine.state.busy) == 0


def test_toggle_all_on_empty_collection_does_nothing():
    engine, store, _ = _engine()

    assert _run(engine, engine.toggle_all()) == 0
    assert store.calls == []


# ---------------------------------------------------------------- delete


def test_delete_removes_record_and_refocuses():
    engine, store, focus = _engine([Todo(1, "a"), Todo(2, "b")])

    assert _run(engine, engine.delete(1)) is True
    assert [t.id for t in engine.state.todos] == [2]
    assert focus == [1]


def test_delete_failure_keeps_record():
    engine, store, focus = _engine([Todo(1, "a")], fail={("remove", 1)})

    ok = _run(engine, engine.delete(1))

    assert ok is False
    assert engine.state.todos == [Todo(1, "a")]
    assert engine.state.notifications.kind is ErrorMessage.DELETE
    assert len(engine.state.busy) == 0
    assert focus == [1]


def test_clear_completed_partial_failure():
    todos = [Todo(1, "a", True), Todo(2, "b", True), Todo(3, "c", False), Todo(4, "d", True)]
    engine, store, focus = _engine(todos, fail={("remove", 2)})

    removed = _run(engine, engine.clear_completed())

    assert removed == 2
    assert [t.id for t in engine.state.todos] == [2, 3]
    assert _messages(engine) == [ErrorMessage.DELETE.value]
    assert len(engine.state.busy) == 0
    assert focus == [1]


def test_clear_completed_issues_deletes_concurrently():
    engine, store, _ = _engine([Todo(1, "a", True), Todo(2, "b", True)])

    async def scenario():
        store.gate = asyncio.Event()
        task = asyncio.ensure_future(engine.clear_completed())
        await _spin()
        in_flight = list(store.calls)
        busy = engine.state.busy.busy_ids
        store.gate.set()
        await task
        return in_flight, busy

    in_flight, busy = _run(engine, scenario())
    assert sorted(in_flight) == [("remove", 1), ("remove", 2)]
    assert busy == frozenset({1, 2})


# ---------------------------------------------------------------- rename


def test_rename_to_empty_deletes_like_delete():
    renamed, _, _ = _engine([Todo(1, "a"), Todo(2, "b")])
    deleted, _, _ = _engine([Todo(1, "a"), Todo(2, "b")])
    renamed.start_editing(1)
    renamed.update_draft("   ")

    outcome = _run(renamed, renamed.commit_edit())
    _run(deleted, deleted.delete(1))

    assert outcome is RenameOutcome.DELETED
    assert renamed.state.todos == deleted.state.todos
    assert not renamed.state.edit.active


def test_rename_to_empty_failure_reports_on_delete_channel():
    engine, store, _ = _engine([Todo(1, "a")], fail={("remove", 1)})
    engine.start_editing(1)

    outcome = _run(engine, engine.rename(1, ""))

    assert outcome is RenameOutcome.FAILED
    assert engine.state.notifications.kind is ErrorMessage.DELETE
    assert engine.state.edit.is_editing(1)


def test_rename_unchanged_title_makes_no_call():
    engine, store, _ = _engine([Todo(1, "same")])
    engine.start_editing(1)
    engine.update_draft("  same ")

    outcome = _run(engine, engine.commit_edit())

    assert outcome is RenameOutcome.UNCHANGED
    assert store.calls == []
    assert not engine.state.edit.active


def test_rename_success_replaces_record_and_exits_edit_mode():
    engine, store, _ = _engine([Todo(1, "old")])
    engine.start_editing(1)
    engine.update_draft(" new ")

    outcome = _run(engine, engine.commit_edit())

    assert outcome is RenameOutcome.RENAMED
    assert store.calls == [("update", 1)]
    assert engine.state.todos == [Todo(1, "new")]
    assert not engine.state.edit.active


def test_rename_failure_stays_in_edit_mode_with_busy_cleared():
    engine, store, _ = _engine([Todo(1, "old")], fail={("update", 1)})
    engine.start_editing(1)
    engine.update_draft("new")

    outcome = _run(engine, engine.commit_edit())

    assert outcome is RenameOutcome.FAILED
    assert engine.state.edit.is_editing(1)
    assert engine.state.edit.draft == "new"
    assert engine.state.todos == [Todo(1, "old")]
    assert not engine.state.busy.is_busy(1)
    assert _messages(engine) == [ErrorMessage.UPDATE.value]


def test_cancel_editing_discards_draft_without_calls():
    engine, store, _ = _engine([Todo(1, "old")])
    engine.start_editing(1)
    engine.update_draft("changed")

    engine.cancel_editing()

    assert not engine.state.edit.active
    assert engine.state.todos == [Todo(1, "old")]
    assert store.calls == []


def test_commit_without_session_is_skipped():
    engine, store, _ = _engine([Todo(1, "a")])

    assert _run(engine, engine.commit_edit()) is RenameOutcome.SKIPPED
    assert engine.start_editing(99) is False


# ---------------------------------------------------------------- wiring


def test_listeners_run_on_changes_and_can_unsubscribe():
    engine, store, _ = _engine([Todo(1, "a")])
    seen = []
    unsubscribe = engine.subscribe(lambda: seen.append(engine.state.filter))

    engine.set_filter(ViewFilter.ACTIVE)
    unsubscribe()
    engine.set_filter(ViewFilter.ALL)

    assert seen == [ViewFilter.ACTIVE]


def test_translate_hook_localizes_messages():
    engine, store, _ = _engine(translate=lambda kind: f"!{kind.name}")

    _run(engine, engine.add(""))

    assert engine.state.notifications.message == "!EMPTY"


def test_error_ttl_and_close_cancel_pending_timer():
    state = AppState()
    engine = ReconciliationEngine(FakeStore(), state=state, error_ttl=5.0)

    async def scenario():
        await engine.add("")
        pending = state.notifications.pending
        engine.close()
        return pending

    assert state.notifications.duration == 5.0
    assert asyncio.run(scenario()) is True
    assert not state.notifications.pending


def test_dismiss_error_clears_message():
    engine, store, _ = _engine()

    async def scenario():
        await engine.add(" ")
        engine.dismiss_error()

    _run(engine, scenario())
    assert engine.state.notifications.message == ""
