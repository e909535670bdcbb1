# statechart/machines/theme.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Theme selection. ``TOGGLE`` moves system → dark → light → dark …;
``SET`` with ``value`` jumps to that theme from anywhere.
"""

from statechart.core.actions import assign
from statechart.core.definition import build
from statechart.core.implementations import Implementations

THEMES = ("system", "dark", "light")


def is_theme(context, event, theme):
    return event.get("value") == theme


def _set_branch(theme: str) -> dict:
    return {
        "target": theme,
        "guard": {"type": "isTheme", "params": {"theme": theme}},
        "actions": {"type": "setTheme", "params": {"theme": theme}},
    }


IMPLEMENTATIONS = Implementations(
    guards={"isTheme": is_theme},
    actions={"setTheme": assign(lambda ctx, ev, theme: {"theme": theme})},
)

SCHEMA = {
    "id": "theme",
    "initial": "system",
    "context": {"theme": "system"},
    "states": {
        "system": {"on": {"TOGGLE": {"target": "dark", "actions": {"type": "setTheme", "params": {"theme": "dark"}}}}},
        "dark": {"on": {"TOGGLE": {"target": "light", "actions": {"type": "setTheme", "params": {"theme": "light"}}}}},
        "light": {"on": {"TOGGLE": {"target": "dark", "actions": {"type": "setTheme", "params": {"theme": "dark"}}}}},
    },
    "on": {"SET": [_set_branch(theme) for theme in THEMES]},
}

theme_machine = build(SCHEMA, IMPLEMENTATIONS)
