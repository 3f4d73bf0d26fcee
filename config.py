from __future__ import annotations

import os
import yaml
from pathlib import Path
from typing import Dict, Any

USER_CONFIG_PATH = Path.home() / ".todo_sync_config.yaml"

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_USER_ID = 3476
DEFAULT_ERROR_TTL = 3.0
DEFAULT_TIMEOUT = 10.0


def _load_config() -> Dict[str, Any]:
    if not USER_CONFIG_PATH.exists():
        return {}
    try:
        data = yaml.safe_load(USER_CONFIG_PATH.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def _save_config(data: Dict[str, Any]) -> None:
    if not data:
        if USER_CONFIG_PATH.exists():
            USER_CONFIG_PATH.unlink()
        return
    USER_CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    USER_CONFIG_PATH.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")


def _set_key(key: str, value: Any) -> None:
    data = _load_config()
    if value in (None, ""):
        data.pop(key, None)
    else:
        data[key] = value
    _save_config(data)


def _as_float(value: Any, default: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def get_base_url() -> str:
    env = os.getenv("TODO_SYNC_BASE_URL", "").strip()
    if env:
        return env.rstrip("/")
    return str(_load_config().get("base_url") or DEFAULT_BASE_URL).strip().rstrip("/")


def set_base_url(value: str) -> None:
    _set_key("base_url", (value or "").strip().rstrip("/"))


def get_user_id() -> int:
    """Owner id for remote records; 0 means no user is configured."""
    raw = os.getenv("TODO_SYNC_USER_ID", "").strip() or _load_config().get("user_id", DEFAULT_USER_ID)
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


def set_user_id(value: int) -> None:
    _set_key("user_id", int(value))


def get_user_lang() -> str:
    return str(_load_config().get("lang", "") or "").strip()


def set_user_lang(value: str) -> None:
    _set_key("lang", (value or "").strip())


def get_error_ttl() -> float:
    return _as_float(_load_config().get("error_ttl"), DEFAULT_ERROR_TTL)


def get_timeout() -> float:
    return _as_float(_load_config().get("timeout"), DEFAULT_TIMEOUT)
