"""Pure derived views over the canonical collection."""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from core import Todo, ViewFilter


@dataclass(frozen=True)
class ListSummary:
    active_count: int
    completed_count: int
    total: int

    @property
    def all_completed(self) -> bool:
        return self.total > 0 and self.completed_count == self.total

    @property
    def can_clear_completed(self) -> bool:
        return self.completed_count > 0


def visible_todos(todos: Sequence[Todo], view_filter: ViewFilter, placeholder: Optional[Todo] = None) -> List[Todo]:
    visible = [todo for todo in todos if view_filter.matches(todo)]
    if placeholder is not None:
        visible.append(placeholder)
    return visible


def summarize(todos: Sequence[Todo]) -> ListSummary:
    active = sum(1 for todo in todos if not todo.completed)
    return ListSummary(active_count=active, completed_count=len(todos) - active, total=len(todos))


__all__ = ["ListSummary", "visible_todos", "summarize"]
