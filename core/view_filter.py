from enum import Enum

from .todo import Todo


class ViewFilter(Enum):
    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def from_string(cls, value: str) -> "ViewFilter":
        token = (value or "").strip().lower()
        for flt in cls:
            if flt.value == token:
                return flt
        return cls.ALL

    def matches(self, todo: Todo) -> bool:
        if self is ViewFilter.ACTIVE:
            return not todo.completed
        if self is ViewFilter.COMPLETED:
            return todo.completed
        return True

    def next(self) -> "ViewFilter":
        members = list(ViewFilter)
        return members[(members.index(self) + 1) % len(members)]
