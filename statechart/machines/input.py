# statechart/machines/input.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Text input field states: focus, validation and disabled handling. ``RESET``
is accepted in every state and returns to ``idle`` with a cleared value.
"""

from typing import Any, Dict, Optional

from statechart.core.actions import assign
from statechart.core.definition import build
from statechart.core.implementations import Implementations


def create_context(input=None) -> Dict[str, Any]:
    input = input or {}
    return {
        "value": input.get("value", ""),
        "errorMessage": None,
        "touched": False,
        "dirty": False,
        "isDisabled": False,
        "isRequired": input.get("isRequired", False),
    }


IMPLEMENTATIONS = Implementations(
    guards={
        "isEnabled": lambda ctx, ev: not ctx["isDisabled"],
        "hasValue": lambda ctx, ev: len(ctx["value"]) > 0,
        "isEmpty": lambda ctx, ev: len(ctx["value"]) == 0,
    },
    actions={
        "setValue": assign(lambda ctx, ev, value="": {"value": value, "dirty": True}),
        "setTouched": assign(touched=True),
        "setError": assign(lambda ctx, ev, message=None: {"errorMessage": message}),
        "clearError": assign(errorMessage=None),
        "setDisabled": assign(isDisabled=True),
        "clearDisabled": assign(isDisabled=False),
        "reset": assign(value="", errorMessage=None, touched=False, dirty=False),
    },
)

_SET_VALUE = {"type": "setValue", "params": lambda ctx, ev: {"value": ev.get("value", "")}}
_DISABLE = {"target": "disabled", "actions": "setDisabled"}

SCHEMA = {
    "id": "input",
    "initial": "idle",
    "context": create_context,
    "on": {"RESET": {"target": ".idle", "actions": "reset"}},
    "states": {
        "idle": {
            "on": {
                "FOCUS": {"target": "focused", "guard": "isEnabled"},
                "CHANGE": {"actions": [_SET_VALUE]},
                "DISABLE": _DISABLE,
                "VALIDATE": "validating",
            }
        },
        "focused": {
            "on": {
                "BLUR": {"target": "idle", "actions": "setTouched"},
                "CHANGE": {"actions": [_SET_VALUE, "clearError"]},
                "VALIDATE": "validating",
                "DISABLE": _DISABLE,
            }
        },
        "validating": {
            "on": {
                "VALIDATION_SUCCESS": "valid",
                "VALIDATION_ERROR": {
                    "target": "invalid",
                    "actions": [{"type": "setError", "params": lambda ctx, ev: {"message": ev.get("message")}}],
                },
                "FOCUS": "focused",
                "DISABLE": _DISABLE,
            }
        },
        "valid": {
            "on": {
                "FOCUS": "focused",
                "CHANGE": {"target": "idle", "actions": [_SET_VALUE]},
                "VALIDATE": "validating",
                "CLEAR_ERROR": "idle",
                "DISABLE": _DISABLE,
            }
        },
        "invalid": {
            "on": {
                "FOCUS": "focused",
                "CHANGE": {"target": "idle", "actions": [_SET_VALUE, "clearError"]},
                "VALIDATE": "validating",
                "CLEAR_ERROR": "idle",
                "DISABLE": {"target": "disabled", "actions": ["clearError", "setDisabled"]},
            }
        },
        "disabled": {"on": {"ENABLE": {"target": "idle", "actions": "clearDisabled"}}},
    },
}

input_machine = build(SCHEMA, IMPLEMENTATIONS)


def data_attributes(state: str, context: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "data-state": state,
        "data-touched": context["touched"] or None,
        "data-dirty": context["dirty"] or None,
        "data-invalid": "" if context["errorMessage"] else None,
        "data-disabled": context["isDisabled"] or None,
        "data-required": context["isRequired"] or None,
    }


def aria_attributes(state: str, context: Dict[str, Any], error_id: Optional[str] = None) -> Dict[str, Any]:
    return {
        "aria-invalid": state == "invalid" or bool(context["errorMessage"]),
        "aria-errormessage": error_id if context["errorMessage"] and error_id else None,
        "aria-required": context["isRequired"] or None,
        "aria-disabled": context["isDisabled"] or None,
    }
