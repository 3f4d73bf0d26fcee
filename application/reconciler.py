"""Optimistic mutations against the remote store and reconciliation of their results.

All state writes happen between awaits, so each read-compute-write step is atomic
with respect to other operations running on the same event loop. Remote failures
are caught at the operation boundary and turned into notifications.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Iterable, List, Optional

from core import ErrorMessage, RemoteError, Todo, ViewFilter, make_placeholder

from .ports import TodoStore
from .projection import ListSummary, summarize, visible_todos
from .state import AppState

logger = logging.getLogger("todo_sync.reconcile")


class RenameOutcome(Enum):
    RENAMED = "renamed"
    UNCHANGED = "unchanged"
    DELETED = "deleted"
    FAILED = "failed"
    SKIPPED = "skipped"


def _default_translate(kind: ErrorMessage) -> str:
    return kind.value


class ReconciliationEngine:
    def __init__(
        self,
        store: TodoStore,
        state: Optional[AppState] = None,
        user_id: int = 0,
        translate: Callable[[ErrorMessage], str] = _default_translate,
        focus_input: Optional[Callable[[], None]] = None,
        error_ttl: Optional[float] = None,
    ) -> None:
        self.store = store
        self.state = state or AppState()
        self.user_id = user_id
        self.translate = translate
        self.focus_input = focus_input
        self._listeners: List[Callable[[], None]] = []
        if error_ttl is not None:
            self.state.notifications.duration = error_ttl
        self.state.notifications.on_change = self._emit

    # ------------------------------------------------------------------ wiring

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        self.state.notifications.close()

    def _emit(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _request_focus(self) -> None:
        if self.focus_input:
            self.focus_input()

    def _fail(self, kind: ErrorMessage, exc: Optional[BaseException] = None) -> None:
        if exc is not None:
            logger.warning("%s: %s", kind.value, exc)
        self.state.notifications.notify(self.translate(kind), kind)

    def _replace(self, todo_id: int, updated: Todo) -> None:
        self.state.todos = [updated if todo.id == todo_id else todo for todo in self.state.todos]

    def _discard(self, todo_id: int) -> None:
        self.state.todos = [todo for todo in self.state.todos if todo.id != todo_id]

    # ------------------------------------------------------------------ queries

    def visible(self) -> List[Todo]:
        return visible_todos(self.state.todos, self.state.filter, self.state.placeholder)

    def summary(self) -> ListSummary:
        return summarize(self.state.todos)

    def is_busy(self, todo: Todo) -> bool:
        if todo.is_placeholder:
            return self.state.busy.placeholder_busy
        return self.state.busy.is_busy(todo.id)

    # ------------------------------------------------------------------ local ui state

    def set_filter(self, view_filter: ViewFilter) -> None:
        self.state.filter = view_filter
        self._emit()

    def set_new_title(self, text: str) -> None:
        self.state.new_title = text
        self._emit()

    def dismiss_error(self) -> None:
        self.state.notifications.dismiss()

    # ------------------------------------------------------------------ remote operations

    async def load(self) -> bool:
        self.state.is_loading = True
        self._emit()
        try:
            todos = await self.store.list()
        except RemoteError as exc:
            self.state.todos = []
            self._fail(ErrorMessage.LOAD, exc)
            return False
        else:
            self.state.todos = _unique_persisted(todos)
            return True
        finally:
            self.state.is_loading = False
            self._emit()
            self._request_focus()

    async def add(self, title: Optional[str] = None) -> Optional[Todo]:
        """Create a todo; the placeholder is shown until the server answers."""
        if self.state.is_adding:
            return None
        trimmed = (self.state.new_title if title is None else title).strip()
        if not trimmed:
            self._fail(ErrorMessage.EMPTY)
            return None

        self.state.placeholder = make_placeholder(trimmed, self.user_id)
        self.state.is_adding = True
        self.state.busy.placeholder_busy = True
        self._emit()
        try:
            created = await self.store.create(trimmed)
            if created.is_placeholder:
                raise RemoteError(f"server returned reserved id {created.id} for a new todo")
        except RemoteError as exc:
            self._fail(ErrorMessage.ADD, exc)
            return None
        else:
            if self.state.find(created.id) is None:
                self.state.todos = self.state.todos + [created]
            else:
                self._replace(created.id, created)
            self.state.new_title = ""
            return created
        finally:
            self.state.placeholder = None
            self.state.is_adding = False
            self.state.busy.placeholder_busy = False
            self._emit()
            self._request_focus()

    async def delete(self, todo_id: int) -> bool:
        try:
            return await self._delete(todo_id)
        finally:
            self._request_focus()

    async def clear_completed(self) -> int:
        """Delete every completed todo concurrently; returns how many were removed."""
        completed = [todo.id for todo in self.state.todos if todo.completed]
        try:
            results = await asyncio.gather(*(self._delete(todo_id) for todo_id in completed))
        finally:
            self._request_focus()
        return sum(1 for ok in results if ok)

    async def _delete(self, todo_id: int) -> bool:
        if self.state.find(todo_id) is None:
            return False
        self.state.busy.mark_busy(todo_id)
        self._emit()
        try:
            await self.store.remove(todo_id)
        except RemoteError as exc:
            self._fail(ErrorMessage.DELETE, exc)
            return False
        else:
            self._discard(todo_id)
            return True
        finally:
            self.state.busy.clear_busy(todo_id)
            self._emit()

    async def toggle(self, todo_id: int) -> bool:
        todo = self.state.find(todo_id)
        if todo is None:
            return False
        return await self._set_completed(todo_id, not todo.completed)

    async def toggle_all(self) -> int:
        """Complete everything unless everything is already complete.

        Only todos that differ from the target are sent; each one succeeds or fails
        on its own. Returns how many updates succeeded.
        """
        target = not self.summary().all_completed
        touched = [todo.id for todo in self.state.todos if todo.completed != target]
        results = await asyncio.gather(*(self._set_completed(todo_id, target) for todo_id in touched))
        return sum(1 for ok in results if ok)

    async def _set_completed(self, todo_id: int, completed: bool) -> bool:
        return await self._update(todo_id, {"completed": completed})

    async def _update(self, todo_id: int, fields: dict) -> bool:
        self.state.busy.mark_busy(todo_id)
        self._emit()
        try:
            # Let the loader render before the request goes out.
            await asyncio.sleep(0)
            updated = await self.store.update(todo_id, fields)
            if updated.id != todo_id:
                raise RemoteError(f"update of todo {todo_id} answered with todo {updated.id}")
        except RemoteError as exc:
            self._fail(ErrorMessage.UPDATE, exc)
            return False
        else:
            self._replace(todo_id, updated)
            return True
        finally:
            self.state.busy.clear_busy(todo_id)
            self._emit()

    async def rename(self, todo_id: int, draft: str) -> RenameOutcome:
        edit = self.state.edit
        trimmed = (draft or "").strip()
        if not trimmed:
            # An empty title means "delete", reported on the delete channel.
            deleted = await self.delete(todo_id)
            if not deleted and self.state.find(todo_id) is not None:
                return RenameOutcome.FAILED
            if edit.is_editing(todo_id):
                edit.finish()
                self._emit()
            return RenameOutcome.DELETED if deleted else RenameOutcome.SKIPPED

        todo = self.state.find(todo_id)
        if todo is None:
            if edit.is_editing(todo_id):
                edit.finish()
                self._emit()
            return RenameOutcome.SKIPPED
        if trimmed == todo.title:
            if edit.is_editing(todo_id):
                edit.finish()
                self._emit()
            return RenameOutcome.UNCHANGED

        if not await self._update(todo_id, {"title": trimmed}):
            return RenameOutcome.FAILED
        if edit.is_editing(todo_id):
            edit.finish()
            self._emit()
        return RenameOutcome.RENAMED

    # ------------------------------------------------------------------ edit session

    def start_editing(self, todo_id: int) -> bool:
        todo = self.state.find(todo_id)
        if todo is None:
            return False
        self.state.edit.start(todo)
        self._emit()
        return True

    def update_draft(self, text: str) -> None:
        self.state.edit.update_draft(text)
        self._emit()

    def cancel_editing(self) -> None:
        if self.state.edit.active:
            self.state.edit.cancel()
            self._emit()

    async def commit_edit(self) -> RenameOutcome:
        edit = self.state.edit
        if edit.editing_id is None:
            return RenameOutcome.SKIPPED
        return await self.rename(edit.editing_id, edit.draft)


def _unique_persisted(todos: Iterable[Todo]) -> List[Todo]:
    seen = set()
    result: List[Todo] = []
    for todo in todos:
        if todo.is_placeholder or todo.id in seen:
            continue
        seen.add(todo.id)
        result.append(todo)
    return result


__all__ = ["ReconciliationEngine", "RenameOutcome"]
