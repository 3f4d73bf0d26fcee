from typing import Any, Dict, List, Protocol

from core import Todo


class TodoStore(Protocol):
    async def list(self) -> List[Todo]:
        ...

    async def create(self, title: str) -> Todo:
        ...

    async def remove(self, todo_id: int) -> None:
        ...

    async def update(self, todo_id: int, fields: Dict[str, Any]) -> Todo:
        ...
