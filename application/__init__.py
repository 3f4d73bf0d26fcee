from .edit_session import EditSession
from .item_state import ItemStateTracker
from .notifications import NotificationChannel
from .ports import TodoStore
from .projection import ListSummary, summarize, visible_todos
from .reconciler import ReconciliationEngine, RenameOutcome
from .state import AppState

__all__ = [
    "AppState",
    "EditSession",
    "ItemStateTracker",
    "ListSummary",
    "NotificationChannel",
    "ReconciliationEngine",
    "RenameOutcome",
    "TodoStore",
    "summarize",
    "visible_todos",
]
