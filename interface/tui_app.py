#!/usr/bin/env python3
"""TUI application - TodoTUI class and cmd_tui command."""

import asyncio
import logging
from typing import Any, Coroutine, List, Optional, Set

from prompt_toolkit.application import Application
from prompt_toolkit.data_structures import Point
from prompt_toolkit.filters import Condition, has_focus
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.layout import ConditionalContainer, HSplit, Layout, Window
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.widgets import TextArea

from application import ReconciliationEngine
from core import Todo, ViewFilter
from interface.i18n import translate
from interface.tui_editing import EditingMixin
from interface.tui_render import render_error, render_footer, render_header, render_list
from interface.tui_themes import DEFAULT_THEME, build_style

logger = logging.getLogger("todo_sync.tui")

FILTER_KEYS = {"1": ViewFilter.ALL, "2": ViewFilter.ACTIVE, "3": ViewFilter.COMPLETED}


class TodoTUI(EditingMixin):
    def __init__(self, engine: ReconciliationEngine, theme: str = DEFAULT_THEME) -> None:
        self.engine = engine
        self.theme = theme
        self.selected_index = 0
        self.app: Optional[Application] = None
        self._tasks: Set[asyncio.Task] = set()
        engine.focus_input = self.focus_input

        self.input = TextArea(
            multiline=False,
            prompt="› ",
            read_only=Condition(lambda: self.engine.state.is_adding),
            accept_handler=self._accept_new_todo,
            style="class:input",
        )
        self.input.buffer.on_text_changed += lambda _: self.engine.set_new_title(self.input.text)
        self.edit_area = TextArea(multiline=False, prompt="✎ ", accept_handler=self._accept_edit, style="class:input")
        self.edit_area.buffer.on_text_changed += lambda _: self.engine.update_draft(self.edit_area.text)

        self.list_control = FormattedTextControl(
            self._list_text,
            focusable=True,
            show_cursor=False,
            get_cursor_position=lambda: Point(0, self.selected_index),
        )
        self.list_window = Window(self.list_control, wrap_lines=False)
        self.app = Application(
            layout=Layout(self._build_root(), focused_element=self.input if engine.user_id else None),
            key_bindings=self._build_key_bindings(),
            style=build_style(theme),
            full_screen=True,
            after_render=self.watch_edit_focus,
        )

    # ------------------------------------------------------------------ layout

    def _build_root(self):
        if not self.engine.user_id:
            return HSplit([
                Window(FormattedTextControl(lambda: FormattedText(render_header(self.engine))), height=1),
                Window(FormattedTextControl(lambda: FormattedText([("class:warning", translate("USER_WARNING"))]))),
            ])
        editing = Condition(lambda: self.engine.state.edit.active)
        has_error = Condition(lambda: self.engine.state.notifications.active)
        return HSplit([
            Window(FormattedTextControl(lambda: FormattedText(render_header(self.engine))), height=1),
            self.input,
            Window(height=1, char="─", style="class:border"),
            self.list_window,
            ConditionalContainer(self.edit_area, filter=editing),
            Window(height=1, char="─", style="class:border"),
            Window(FormattedTextControl(lambda: FormattedText(render_footer(self.engine))), height=2),
            ConditionalContainer(
                Window(FormattedTextControl(lambda: FormattedText(render_error(self.engine))), height=1),
                filter=has_error,
            ),
        ])

    def _list_text(self) -> FormattedText:
        self._clamp_selection()
        width = 80
        if self.app and self.app.output:
            width = self.app.output.get_size().columns
        return FormattedText(render_list(self.engine, self.selected_index, width))

    def _build_key_bindings(self) -> KeyBindings:
        kb = KeyBindings()
        in_list = has_focus(self.list_window)
        in_input = has_focus(self.input)
        in_edit = has_focus(self.edit_area)
        no_user = Condition(lambda: not self.engine.user_id)

        @kb.add("c-c")
        @kb.add("q", filter=in_list | no_user)
        def _(event):
            event.app.exit()

        @kb.add("tab", filter=in_input)
        @kb.add("down", filter=in_input)
        def _(event):
            event.app.layout.focus(self.list_window)

        @kb.add("tab", filter=in_list)
        @kb.add("a", filter=in_list)
        def _(event):
            event.app.layout.focus(self.input)

        @kb.add("down", filter=in_list)
        @kb.add("j", filter=in_list)
        def _(event):
            self.move_selection(1)

        @kb.add("up", filter=in_list)
        @kb.add("k", filter=in_list)
        def _(event):
            if self.selected_index == 0:
                event.app.layout.focus(self.input)
            else:
                self.move_selection(-1)

        @kb.add("space", filter=in_list)
        def _(event):
            self.toggle_selected()

        @kb.add("d", filter=in_list)
        @kb.add("delete", filter=in_list)
        def _(event):
            self.delete_selected()

        @kb.add("e", filter=in_list)
        @kb.add("f2", filter=in_list)
        @kb.add("enter", filter=in_list)
        def _(event):
            todo = self.selected_todo()
            if todo is not None and not self.engine.is_busy(todo):
                self.start_editing(todo.id)

        @kb.add("escape", eager=True, filter=in_edit)
        def _(event):
            self.cancel_edit()

        @kb.add("tab", filter=in_edit)
        def _(event):
            self.save_edit()

        @kb.add("t", filter=in_list)
        def _(event):
            if self.engine.state.todos:
                self._spawn(self.engine.toggle_all())

        @kb.add("f", filter=in_list)
        def _(event):
            self.engine.set_filter(self.engine.state.filter.next())

        for key, flt in FILTER_KEYS.items():
            kb.add(key, filter=in_list)(self._filter_handler(flt))

        @kb.add("c", filter=in_list)
        def _(event):
            if self.engine.summary().can_clear_completed:
                self._spawn(self.engine.clear_completed())

        @kb.add("x", filter=in_list)
        @kb.add("escape", filter=in_list)
        def _(event):
            self.engine.dismiss_error()

        return kb

    def _filter_handler(self, flt: ViewFilter):
        def handler(event):
            self.engine.set_filter(flt)

        return handler

    # ------------------------------------------------------------------ actions

    def selected_todo(self) -> Optional[Todo]:
        rows = self.engine.visible()
        if 0 <= self.selected_index < len(rows):
            todo = rows[self.selected_index]
            return None if todo.is_placeholder else todo
        return None

    def move_selection(self, delta: int) -> None:
        self.selected_index += delta
        self._clamp_selection()
        self.invalidate()

    def _clamp_selection(self) -> None:
        count = len(self.engine.visible())
        self.selected_index = max(0, min(self.selected_index, count - 1))

    def toggle_selected(self) -> None:
        todo = self.selected_todo()
        if todo is None or self.engine.is_busy(todo):
            return
        self._spawn(self.engine.toggle(todo.id))

    def delete_selected(self) -> None:
        todo = self.selected_todo()
        if todo is None or self.engine.is_busy(todo):
            return
        self._spawn(self.engine.delete(todo.id))

    def _accept_new_todo(self, buff) -> bool:
        self._spawn(self.engine.add(self.input.text))
        return True

    def _accept_edit(self, buff) -> bool:
        self.save_edit()
        return True

    def focus_input(self) -> None:
        """Engine focus requests; ignored while the user is in the list or renaming."""
        if not self.app or self.engine.state.edit.active:
            return
        if self.app.layout.has_focus(self.list_window):
            return
        self.app.layout.focus(self.input)

    # ------------------------------------------------------------------ runtime

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)
        return task

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("TUI action failed: %s", exc, exc_info=exc)

    def _on_change(self) -> None:
        new_title = self.engine.state.new_title
        if self.input.text != new_title:
            self.input.text = new_title
        self.invalidate()

    def invalidate(self) -> None:
        if self.app:
            self.app.invalidate()

    async def run_async(self) -> None:
        unsubscribe = self.engine.subscribe(self._on_change)
        try:
            if self.engine.user_id:
                self._spawn(self.engine.load())
            await self.app.run_async()
        finally:
            unsubscribe()
            self.engine.close()

    def run(self) -> None:
        asyncio.run(self.run_async())

    @property
    def pending_tasks(self) -> List[asyncio.Task]:
        return list(self._tasks)


def cmd_tui(args) -> int:
    from interface.cli_commands import build_engine

    engine = build_engine(args)
    TodoTUI(engine, theme=getattr(args, "theme", DEFAULT_THEME)).run()
    return 0


__all__ = ["TodoTUI", "cmd_tui"]
