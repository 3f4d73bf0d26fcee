#!/usr/bin/env python3
"""
todos.py: todo list synced with a remote todos service (CLI/TUI).

Thin facade wiring the argument parser to command functions.
"""

import logging
import sys
from types import SimpleNamespace
from typing import List, Optional

from interface.cli_parser import build_parser as build_cli_parser
from interface.tui_app import TodoTUI, cmd_tui
from interface.tui_themes import THEMES, DEFAULT_THEME
from .cli_commands import (
    build_engine,
    cmd_add,
    cmd_clear_completed,
    cmd_config,
    cmd_delete,
    cmd_list,
    cmd_rename,
    cmd_toggle,
    cmd_toggle_all,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

COMMANDS = SimpleNamespace(
    cmd_tui=cmd_tui,
    cmd_list=cmd_list,
    cmd_add=cmd_add,
    cmd_toggle=cmd_toggle,
    cmd_toggle_all=cmd_toggle_all,
    cmd_delete=cmd_delete,
    cmd_rename=cmd_rename,
    cmd_clear_completed=cmd_clear_completed,
    cmd_config=cmd_config,
)


def configure_logging(log_file: Optional[str], verbose: bool, interactive: bool) -> None:
    """Attach one handler to the ``todo_sync`` logger tree.

    The TUI owns the terminal, so without a log file its records are dropped.
    """
    root = logging.getLogger("todo_sync")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    elif interactive:
        handler = logging.NullHandler()
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.propagate = False


def build_parser():
    return build_cli_parser(COMMANDS, THEMES, DEFAULT_THEME)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "command", None):
        args.command = "tui"
        args.func = cmd_tui
        args.theme = DEFAULT_THEME
    configure_logging(args.log_file, args.verbose, interactive=args.command == "tui")
    return args.func(args)


__all__ = ["main", "build_parser", "configure_logging", "build_engine", "TodoTUI", "COMMANDS"]
