from enum import Enum
from typing import Optional


class ErrorMessage(Enum):
    """User-facing error taxonomy; values are the default English texts."""

    LOAD = "Unable to load todos"
    EMPTY = "Title should not be empty"
    ADD = "Unable to add a todo"
    DELETE = "Unable to delete a todo"
    UPDATE = "Unable to update a todo"

    @property
    def key(self) -> str:
        return f"ERR_{self.name}"


# Taxonomy aliases: every failure is surfaced as a notification, never raised.
LoadError = ErrorMessage.LOAD
ValidationError = ErrorMessage.EMPTY
AddError = ErrorMessage.ADD
DeleteError = ErrorMessage.DELETE
UpdateError = ErrorMessage.UPDATE


class RemoteError(RuntimeError):
    """A remote store call failed: transport error, non-2xx status or bad body."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
