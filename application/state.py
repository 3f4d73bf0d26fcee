from dataclasses import dataclass, field
from typing import List, Optional

from core import Todo, ViewFilter

from .edit_session import EditSession
from .item_state import ItemStateTracker
from .notifications import NotificationChannel


@dataclass
class AppState:
    """Everything the list UI renders from.

    ``todos``, ``placeholder``, ``is_adding`` and ``is_loading`` are written only by
    ReconciliationEngine.
    """

    todos: List[Todo] = field(default_factory=list)
    filter: ViewFilter = ViewFilter.ALL
    placeholder: Optional[Todo] = None
    is_adding: bool = False
    is_loading: bool = True
    new_title: str = ""
    busy: ItemStateTracker = field(default_factory=ItemStateTracker)
    notifications: NotificationChannel = field(default_factory=NotificationChannel)
    edit: EditSession = field(default_factory=EditSession)

    def find(self, todo_id: int) -> Optional[Todo]:
        for todo in self.todos:
            if todo.id == todo_id:
                return todo
        return None
