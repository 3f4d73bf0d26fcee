"""Inline rename lifecycle: Viewing -> Editing -> Viewing."""

from dataclasses import dataclass
from typing import Optional

from core import Todo


@dataclass
class EditSession:
    editing_id: Optional[int] = None
    draft: str = ""
    original_title: str = ""

    @property
    def active(self) -> bool:
        return self.editing_id is not None

    def is_editing(self, todo_id: int) -> bool:
        return self.editing_id is not None and self.editing_id == todo_id

    def start(self, todo: Todo) -> None:
        # Single session: starting on another item replaces the current draft.
        self.editing_id = todo.id
        self.draft = todo.title
        self.original_title = todo.title

    def update_draft(self, text: str) -> None:
        if self.active:
            self.draft = text

    def finish(self) -> None:
        self.editing_id = None
        self.draft = ""
        self.original_title = ""

    cancel = finish
