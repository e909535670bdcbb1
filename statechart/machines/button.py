# statechart/machines/button.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Button interaction states: idle, hovered, focused, pressed, loading and
disabled.
"""

from typing import Any, Dict, Optional

from statechart.core.actions import assign
from statechart.core.definition import build
from statechart.core.implementations import Implementations

STATE_CLASSES = {
    "idle": "",
    "hovered": "is-hovered",
    "focused": "is-focused",
    "pressed": "is-pressed",
    "loading": "is-loading",
    "disabled": "is-disabled",
}


def create_context(input=None) -> Dict[str, Any]:
    return {"isLoading": False, "isDisabled": False, "hasFocus": False, "focusFromKeyboard": False}


def is_enabled(context, event) -> bool:
    return not context["isDisabled"] and not context["isLoading"]


def set_focus(context, event, fromKeyboard: Optional[bool] = None):
    return dict(context, hasFocus=True, focusFromKeyboard=bool(fromKeyboard))


IMPLEMENTATIONS = Implementations(
    guards={
        "isEnabled": is_enabled,
        "isNotLoading": lambda ctx, ev: not ctx["isLoading"],
        "isLoading": lambda ctx, ev: ctx["isLoading"],
        "isDisabled": lambda ctx, ev: ctx["isDisabled"],
    },
    actions={
        "setLoading": assign(isLoading=True),
        "clearLoading": assign(isLoading=False),
        "setDisabled": assign(isDisabled=True),
        "clearDisabled": assign(isDisabled=False),
        "setFocus": set_focus,
        "clearFocus": assign(hasFocus=False, focusFromKeyboard=False),
    },
)

_FOCUS = {"type": "setFocus", "params": lambda ctx, ev: {"fromKeyboard": ev.get("fromKeyboard")}}
_START_LOADING = {"target": "loading", "actions": "setLoading"}
_DISABLE = {"target": "disabled", "actions": "setDisabled"}

SCHEMA = {
    "id": "button",
    "initial": "idle",
    "context": create_context,
    "states": {
        "idle": {
            "on": {
                "HOVER": {"target": "hovered", "guard": "isEnabled"},
                "FOCUS": {"target": "focused", "guard": "isEnabled", "actions": [_FOCUS]},
                "PRESS": {"target": "pressed", "guard": "isEnabled"},
                "START_LOADING": _START_LOADING,
                "DISABLE": _DISABLE,
            }
        },
        "hovered": {
            "on": {
                "UNHOVER": "idle",
                "FOCUS": {"target": "focused", "actions": [_FOCUS]},
                "PRESS": "pressed",
                "START_LOADING": _START_LOADING,
                "DISABLE": _DISABLE,
            }
        },
        "focused": {
            "on": {
                "BLUR": {"target": "idle", "actions": "clearFocus"},
                # Hover changes styling only.
                "HOVER": "focused",
                "UNHOVER": "focused",
                "PRESS": "pressed",
                "START_LOADING": _START_LOADING,
                "DISABLE": {"target": "disabled", "actions": ["setDisabled", "clearFocus"]},
            }
        },
        "pressed": {
            "on": {
                "RELEASE": [{"target": "hovered", "guard": "isEnabled"}, {"target": "idle"}],
                "CLICK": [{"target": "focused", "guard": "isEnabled"}],
                "UNHOVER": "idle",
                "START_LOADING": _START_LOADING,
                "DISABLE": _DISABLE,
            }
        },
        "loading": {
            "on": {
                "STOP_LOADING": {"target": "idle", "actions": "clearLoading"},
                "DISABLE": {"target": "disabled", "actions": ["clearLoading", "setDisabled"]},
            }
        },
        "disabled": {"on": {"ENABLE": {"target": "idle", "actions": "clearDisabled"}}},
    },
}

button_machine = build(SCHEMA, IMPLEMENTATIONS)


def data_attributes(state: str, context: Dict[str, Any]) -> Dict[str, Any]:
    """Data attributes for the button element; None means the attribute is omitted."""
    return {
        "data-state": state,
        "data-loading": context["isLoading"] or None,
        "data-disabled": context["isDisabled"] or None,
        "data-focus-visible": "" if context["focusFromKeyboard"] and context["hasFocus"] else None,
    }


def state_class(state: str) -> str:
    return STATE_CLASSES.get(state, "")
