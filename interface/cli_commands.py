"""Non-interactive commands: load, run one engine operation, print JSON."""

import asyncio
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from application import ReconciliationEngine
from config import (
    get_base_url,
    get_error_ttl,
    get_timeout,
    get_user_id,
    get_user_lang,
    set_base_url,
    set_user_id,
    set_user_lang,
)
from core import Todo, ViewFilter
from infrastructure.todos_client import TodosClient
from interface.cli_io import structured_error, structured_response
from interface.i18n import translate, translate_error

Operation = Callable[[ReconciliationEngine], Awaitable[Any]]


def build_engine(args) -> ReconciliationEngine:
    user_id = getattr(args, "user_id", None)
    if user_id is None:
        user_id = get_user_id()
    base_url = getattr(args, "base_url", None) or get_base_url()
    store = TodosClient(base_url, user_id, timeout=get_timeout())
    return ReconciliationEngine(store, user_id=user_id, translate=translate_error, error_ttl=get_error_ttl())


def _jsonable(value: Any) -> Any:
    if isinstance(value, Todo):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    return value


def _run_command(command: str, args, operation: Optional[Operation] = None) -> int:
    engine = build_engine(args)
    if not engine.user_id:
        return structured_error(command, translate("USER_WARNING"))

    async def runner() -> Any:
        try:
            if not await engine.load():
                return None
            if operation is None:
                return None
            return await operation(engine)
        finally:
            engine.close()

    result = asyncio.run(runner())
    errors = list(engine.state.notifications.recent)
    summary = engine.summary()
    payload = {
        "result": _jsonable(result),
        "todos": [todo.to_dict() for todo in engine.visible()],
        "items_left": summary.active_count,
        "errors": errors,
    }
    if errors:
        return structured_error(command, errors[-1], payload=payload)
    return structured_response(command, message=translate("ITEMS_LEFT", count=summary.active_count), payload=payload)


def cmd_list(args) -> int:
    view_filter = ViewFilter.from_string(getattr(args, "filter", "all"))

    async def op(engine: ReconciliationEngine) -> None:
        engine.set_filter(view_filter)

    return _run_command("list", args, op)


def cmd_add(args) -> int:
    return _run_command("add", args, lambda engine: engine.add(args.title))


def cmd_toggle(args) -> int:
    return _run_command("toggle", args, lambda engine: engine.toggle(args.todo_id))


def cmd_toggle_all(args) -> int:
    return _run_command("toggle-all", args, lambda engine: engine.toggle_all())


def cmd_delete(args) -> int:
    return _run_command("rm", args, lambda engine: engine.delete(args.todo_id))


def cmd_rename(args) -> int:
    return _run_command("rename", args, lambda engine: engine.rename(args.todo_id, args.title))


def cmd_clear_completed(args) -> int:
    return _run_command("clear-completed", args, lambda engine: engine.clear_completed())


def cmd_config(args) -> int:
    changed = False
    if getattr(args, "set_base_url", None) is not None:
        set_base_url(args.set_base_url)
        changed = True
    if getattr(args, "set_user_id", None) is not None:
        set_user_id(args.set_user_id)
        changed = True
    if getattr(args, "set_lang", None) is not None:
        set_user_lang(args.set_lang)
        changed = True
    payload = {
        "base_url": get_base_url(),
        "user_id": get_user_id(),
        "lang": get_user_lang(),
        "error_ttl": get_error_ttl(),
        "timeout": get_timeout(),
    }
    return structured_response("config", message=translate("CONFIG_SAVED") if changed else "", payload=payload)


__all__ = [
    "build_engine",
    "cmd_list",
    "cmd_add",
    "cmd_toggle",
    "cmd_toggle_all",
    "cmd_delete",
    "cmd_rename",
    "cmd_clear_completed",
    "cmd_config",
]
