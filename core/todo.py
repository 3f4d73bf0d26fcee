from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping

PLACEHOLDER_ID = 0


class TodoDecodeError(ValueError):
    pass


@dataclass(frozen=True)
class Todo:
    id: int
    title: str
    completed: bool = False
    user_id: int = 0

    @property
    def is_placeholder(self) -> bool:
        return self.id == PLACEHOLDER_ID

    def with_changes(self, **changes: Any) -> "Todo":
        return replace(self, **changes)

    @classmethod
    def from_dict(cls, payload: Any) -> "Todo":
        """Decode a wire record (``{id, title, completed, userId}``).

        Raises TodoDecodeError when a key is missing or carries the wrong type.
        """
        if not isinstance(payload, Mapping):
            raise TodoDecodeError(f"todo payload must be an object, got {type(payload).__name__}")
        try:
            todo_id = payload["id"]
            title = payload["title"]
            completed = payload["completed"]
            user_id = payload["userId"]
        except KeyError as exc:
            raise TodoDecodeError(f"todo payload missing {exc.args[0]!r}") from exc
        if not _is_int(todo_id) or not _is_int(user_id):
            raise TodoDecodeError("todo id and userId must be integers")
        if not isinstance(title, str):
            raise TodoDecodeError("todo title must be a string")
        if not isinstance(completed, bool):
            raise TodoDecodeError("todo completed must be a boolean")
        return cls(id=todo_id, title=title, completed=completed, user_id=user_id)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title, "completed": self.completed, "userId": self.user_id}


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def make_placeholder(title: str, user_id: int) -> Todo:
    return Todo(id=PLACEHOLDER_ID, title=title, completed=False, user_id=user_id)


__all__ = ["PLACEHOLDER_ID", "Todo", "TodoDecodeError", "make_placeholder"]
