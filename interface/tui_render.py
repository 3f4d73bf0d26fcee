"""Formatted-text builders for TodoTUI (header, list, footer, error banner)."""

from typing import List, Tuple

from wcwidth import wcswidth, wcwidth

from application import ReconciliationEngine
from core import ViewFilter
from interface.i18n import translate

Fragments = List[Tuple[str, str]]

FILTER_LABELS = {
    ViewFilter.ALL: "FILTER_ALL",
    ViewFilter.ACTIVE: "FILTER_ACTIVE",
    ViewFilter.COMPLETED: "FILTER_COMPLETED",
}
BUSY_ICON = "⟳"
CHECK_ICON = "✓"
OPEN_ICON = "○"


def clip(text: str, width: int) -> str:
    """Truncate text to a display width, accounting for wide characters."""
    if width <= 0:
        return ""
    total = wcswidth(text)
    if (total if total >= 0 else len(text)) <= width:
        return text
    out = []
    used = 0
    for ch in text:
        w = max(wcwidth(ch), 0)
        if used + w > width - 1:
            break
        out.append(ch)
        used += w
    return "".join(out) + "…"


def render_header(engine: ReconciliationEngine) -> Fragments:
    state = engine.state
    parts: Fragments = [("class:header", translate("APP_TITLE"))]
    if not state.is_loading and state.todos:
        style = "class:icon.check" if engine.summary().all_completed else "class:icon.open"
        parts.append(("", "  "))
        parts.append((style, "[❯ all]"))
    return parts


def render_list(engine: ReconciliationEngine, selected: int, width: int = 80) -> Fragments:
    state = engine.state
    if state.is_loading:
        return [("class:text.dim", translate("LOADING"))]
    rows = engine.visible()
    if not rows:
        return [("class:text.dim", translate("EMPTY_LIST"))]
    parts: Fragments = []
    for idx, todo in enumerate(rows):
        is_selected = idx == selected
        busy = engine.is_busy(todo)
        editing = state.edit.is_editing(todo.id)
        pointer = "›" if is_selected else " "
        icon = CHECK_ICON if todo.completed else OPEN_ICON
        icon_style = "class:icon.check" if todo.completed else "class:icon.open"
        if editing:
            title = f"✎ {state.edit.draft}"
            title_style = "class:input"
        else:
            title = todo.title
            title_style = "class:text.done" if todo.completed else "class:text"
        if is_selected:
            title_style = f"{title_style} class:selected"
        suffix = f" {BUSY_ICON}" if busy else ""
        room = width - 4 - len(suffix)
        parts.append(("class:text", f"{pointer} "))
        parts.append((icon_style, f"{icon} "))
        parts.append((title_style, clip(title, room)))
        if busy:
            parts.append(("class:icon.busy", suffix))
        parts.append(("", "\n"))
    if parts:
        parts.pop()
    return parts


def render_footer(engine: ReconciliationEngine) -> Fragments:
    state = engine.state
    if not state.todos:
        return [("class:text.dim", translate("HINTS"))]
    summary = engine.summary()
    parts: Fragments = [("class:text", translate("ITEMS_LEFT", count=summary.active_count)), ("", "   ")]
    for flt in ViewFilter:
        style = "class:filter.selected" if flt is state.filter else "class:filter"
        parts.append((style, translate(FILTER_LABELS[flt])))
        parts.append(("", " "))
    parts.append(("", "  "))
    clear_style = "class:text" if summary.can_clear_completed else "class:text.dim"
    parts.append((clear_style, translate("CLEAR_COMPLETED")))
    parts.append(("", "\n"))
    hints = translate("HINTS_EDIT") if state.edit.active else translate("HINTS")
    parts.append(("class:text.dim", hints))
    return parts


def render_error(engine: ReconciliationEngine) -> Fragments:
    message = engine.state.notifications.message
    if not message:
        return []
    return [("class:error.close", " ✕ "), ("class:error", f" {message} ")]


__all__ = ["clip", "render_header", "render_list", "render_footer", "render_error"]
