from .errors import ErrorMessage, RemoteError
from .todo import PLACEHOLDER_ID, Todo, TodoDecodeError, make_placeholder
from .view_filter import ViewFilter

__all__ = [
    "ErrorMessage",
    "PLACEHOLDER_ID",
    "RemoteError",
    "Todo",
    "TodoDecodeError",
    "make_placeholder",
    "ViewFilter",
]
