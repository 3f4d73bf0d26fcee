"""Editing mode mixin for TUI."""

from typing import TYPE_CHECKING, Any, Coroutine, Optional

if TYPE_CHECKING:
    from prompt_toolkit.application import Application
    from prompt_toolkit.layout import Container
    from prompt_toolkit.widgets import TextArea

    from application import ReconciliationEngine, RenameOutcome


class EditingMixin:
    """Mixin providing inline rename operations for TUI."""

    engine: "ReconciliationEngine"
    edit_area: "TextArea"
    list_window: "Container"
    app: Optional["Application"]
    _edit_had_focus: bool = False

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> Any:  # pragma: no cover - provided by TodoTUI
        raise NotImplementedError

    def start_editing(self, todo_id: int) -> None:
        """Enter rename mode for one todo, seeding the field with its title."""
        if not self.engine.start_editing(todo_id):
            return
        draft = self.engine.state.edit.draft
        self.edit_area.text = draft
        self.edit_area.buffer.cursor_position = len(draft)
        if self.app:
            self.app.layout.focus(self.edit_area)

    def save_edit(self) -> None:
        """Commit the draft; Enter and leaving the field both land here."""
        edit = self.engine.state.edit
        if edit.editing_id is None or self.engine.state.busy.is_busy(edit.editing_id):
            return
        self._spawn(self._commit_edit())

    async def _commit_edit(self) -> "RenameOutcome":
        outcome = await self.engine.commit_edit()
        if not self.engine.state.edit.active:
            self._leave_edit_field()
        return outcome

    def cancel_edit(self) -> None:
        """Discard the draft without calling the remote store."""
        self.engine.cancel_editing()
        self._leave_edit_field()

    def watch_edit_focus(self, *_: Any) -> None:
        """Commit the draft when focus moves off the rename field while a session is open."""
        focused = bool(self.app) and self.app.layout.has_focus(self.edit_area)
        was_focused = self._edit_had_focus
        self._edit_had_focus = focused
        if was_focused and not focused and self.engine.state.edit.active:
            self.save_edit()

    def _leave_edit_field(self) -> None:
        self.edit_area.text = ""
        if self.app:
            self.app.layout.focus(self.list_window)


__all__ = ["EditingMixin"]
