#!/usr/bin/env python3
"""TUI themes and styling."""

from typing import Dict

from prompt_toolkit.styles import Style


THEMES: Dict[str, Dict[str, str]] = {
    "dark-olive": {
        "": "#d7dfe6",
        "header": "#ffb347 bold",
        "text": "#d7dfe6",
        "text.dim": "#97a0a9",
        "text.done": "#6d717a strike",
        "input": "#d7dfe6",
        "input.disabled": "#6d717a",
        "selected": "bg:#3b3b3b #d7dfe6 bold",
        "icon.check": "#9ad974 bold",
        "icon.open": "#97a0a9",
        "icon.busy": "#e5c07b bold",
        "filter.selected": "#ffb347 bold underline",
        "filter": "#97a0a9",
        "error": "bg:#5c2b2e #ffd7d7",
        "error.close": "bg:#5c2b2e #ff5156 bold",
        "warning": "#f9ac60 bold",
        "border": "#4b525a",
    },
    "dark-contrast": {
        "": "#e8eaec",
        "header": "#ffb347 bold",
        "text": "#e8eaec",
        "text.dim": "#a7b0ba",
        "text.done": "#6f757d strike",
        "input": "#e8eaec",
        "input.disabled": "#6f757d",
        "selected": "bg:#3d4047 #e8eaec bold",
        "icon.check": "#b8f171 bold",
        "icon.open": "#a7b0ba",
        "icon.busy": "#f0c674 bold",
        "filter.selected": "#ffb347 bold underline",
        "filter": "#a7b0ba",
        "error": "bg:#6b1f24 #ffffff",
        "error.close": "bg:#6b1f24 #ff6b6b bold",
        "warning": "#f9ac60 bold",
        "border": "#5a6169",
    },
}

DEFAULT_THEME = "dark-olive"


def get_theme_palette(theme: str) -> Dict[str, str]:
    """Get theme palette, falling back to default if theme not found."""
    return dict(THEMES.get(theme) or THEMES[DEFAULT_THEME])


def build_style(theme: str) -> Style:
    return Style.from_dict(get_theme_palette(theme))


__all__ = ["THEMES", "DEFAULT_THEME", "get_theme_palette", "build_style"]
