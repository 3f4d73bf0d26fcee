import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional

import requests

from core import RemoteError, Todo, TodoDecodeError

logger = logging.getLogger("todo_sync.remote")


class TodosClient:
    """REST client for the todos service.

    Every call opens its own session, so concurrent calls share no state. Calls run
    in a worker thread and are awaited from the event loop. No retries are made here.
    """

    def __init__(
        self,
        base_url: str,
        user_id: int,
        session_factory: Callable[[], requests.Session] = requests.Session,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.user_id = user_id
        self.session_factory = session_factory
        self.timeout = timeout

    async def list(self) -> List[Todo]:
        payload = await self._call("get", f"/todos?userId={self.user_id}")
        if not isinstance(payload, list):
            raise RemoteError("todo list response is not an array")
        return [self._decode(item) for item in payload]

    async def create(self, title: str) -> Todo:
        body = {"title": title, "userId": self.user_id, "completed": False}
        return self._decode(await self._call("post", "/todos", body))

    async def remove(self, todo_id: int) -> None:
        await self._call("delete", f"/todos/{todo_id}", expect_body=False)

    async def update(self, todo_id: int, fields: Dict[str, Any]) -> Todo:
        return self._decode(await self._call("patch", f"/todos/{todo_id}", fields))

    async def _call(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None, expect_body: bool = True) -> Any:
        return await asyncio.to_thread(self._request, method, path, payload, expect_body)

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]], expect_body: bool) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method.upper(), url)
        session = self.session_factory()
        try:
            kwargs: Dict[str, Any] = {"timeout": self.timeout}
            if payload is not None:
                kwargs["json"] = payload
            resp = getattr(session, method)(url, **kwargs)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method.upper(), url, exc)
            raise RemoteError(f"network error: {exc}") from exc
        finally:
            session.close()
        if not 200 <= resp.status_code < 300:
            logger.warning("%s %s returned HTTP %s", method.upper(), url, resp.status_code)
            raise RemoteError(f"HTTP {resp.status_code}", status_code=resp.status_code)
        if not expect_body:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            raise RemoteError("response body is not valid JSON", status_code=resp.status_code) from exc

    @staticmethod
    def _decode(payload: Any) -> Todo:
        try:
            return Todo.from_dict(payload)
        except TodoDecodeError as exc:
            raise RemoteError(f"malformed todo: {exc}") from exc


__all__ = ["RemoteError", "TodosClient"]
