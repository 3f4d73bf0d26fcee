from collections import Counter
from typing import FrozenSet


class ItemStateTracker:
    """Tracks which todo ids are waiting on a remote response.

    Marks are counted, so two overlapping requests on one id keep it busy until
    both have settled.
    """

    def __init__(self) -> None:
        self._busy: Counter = Counter()
        self.placeholder_busy: bool = False

    def mark_busy(self, todo_id: int) -> None:
        self._busy[todo_id] += 1

    def clear_busy(self, todo_id: int) -> None:
        count = self._busy.get(todo_id, 0)
        if count <= 1:
            self._busy.pop(todo_id, None)
        else:
            self._busy[todo_id] = count - 1

    def is_busy(self, todo_id: int) -> bool:
        return self._busy.get(todo_id, 0) > 0

    @property
    def busy_ids(self) -> FrozenSet[int]:
        return frozenset(self._busy)

    def __contains__(self, todo_id: object) -> bool:
        return todo_id in self._busy

    def __len__(self) -> int:
        return len(self._busy)
