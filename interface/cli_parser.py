"""CLI parser construction for the todos CLI/TUI."""

import argparse
from typing import Any, Mapping

from core import ViewFilter


def build_parser(commands: Any, themes: Mapping[str, Any], default_theme: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="todos: todo list kept in sync with a remote todos service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--base-url", help="remote service root (overrides config)")
    parser.add_argument("--user-id", type=int, help="owner id for todos (overrides config)")
    parser.add_argument("--log-file", help="write logs to this file")
    parser.add_argument("--verbose", "-v", action="store_true", help="debug logging")

    sub = parser.add_subparsers(dest="command", help="Commands")

    tui_p = sub.add_parser("tui", help="Start the interactive TUI")
    tui_p.add_argument("--theme", choices=list(themes.keys()), default=default_theme, help="color palette")
    tui_p.set_defaults(func=commands.cmd_tui)

    lp = sub.add_parser("list", help="List todos")
    lp.add_argument("--filter", choices=[f.value for f in ViewFilter], default=ViewFilter.ALL.value)
    lp.set_defaults(func=commands.cmd_list)

    ap = sub.add_parser("add", help="Add a todo")
    ap.add_argument("title")
    ap.set_defaults(func=commands.cmd_add)

    tp = sub.add_parser("toggle", help="Flip a todo between active and completed")
    tp.add_argument("todo_id", type=int)
    tp.set_defaults(func=commands.cmd_toggle)

    tap = sub.add_parser("toggle-all", help="Complete all todos, or reopen all if every todo is completed")
    tap.set_defaults(func=commands.cmd_toggle_all)

    rp = sub.add_parser("rm", help="Delete a todo")
    rp.add_argument("todo_id", type=int)
    rp.set_defaults(func=commands.cmd_delete)

    rnp = sub.add_parser("rename", help="Rename a todo (an empty title deletes it)")
    rnp.add_argument("todo_id", type=int)
    rnp.add_argument("title")
    rnp.set_defaults(func=commands.cmd_rename)

    cp = sub.add_parser("clear-completed", help="Delete all completed todos")
    cp.set_defaults(func=commands.cmd_clear_completed)

    cfg = sub.add_parser("config", help="Show or update user configuration")
    cfg.add_argument("--set-base-url", dest="set_base_url")
    cfg.add_argument("--set-user-id", dest="set_user_id", type=int)
    cfg.add_argument("--set-lang", dest="set_lang")
    cfg.set_defaults(func=commands.cmd_config)

    return parser
