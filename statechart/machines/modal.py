# statechart/machines/modal.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Modal dialog lifecycle: closed, opening, open and closing. Opening and
closing finish on ``ANIMATION_END`` or, without an animation, after 300 ms
and 200 ms respectively.

Focus is handled through the ``focus`` callables given as input:
``{"activeElement": fn() -> element, "restoreFocus": fn(element)}``. Both
are optional.
"""

import logging
from typing import Any, Dict

from statechart.core.actions import assign
from statechart.core.definition import build
from statechart.core.implementations import Implementations

logger = logging.getLogger(__name__)

OPENING_DELAY_MS = 300
CLOSING_DELAY_MS = 200


def create_context(input=None) -> Dict[str, Any]:
    input = input or {}
    return {
        "previousActiveElement": None,
        "closeOnEscape": input.get("closeOnEscape", True),
        "closeOnBackdrop": input.get("closeOnBackdrop", True),
        "isTransitioning": False,
        "focus": input.get("focus") or {},
    }


def save_previous_element(context, event):
    active_element = context["focus"].get("activeElement")
    return dict(context, previousActiveElement=active_element() if active_element else None)


def restore_focus(context, event):
    element = context["previousActiveElement"]
    restore = context["focus"].get("restoreFocus")
    if element is not None and restore is not None:
        logger.debug("Restoring focus to %r", element)
        restore(element)


IMPLEMENTATIONS = Implementations(
    guards={
        "canCloseOnEscape": lambda ctx, ev: ctx["closeOnEscape"],
        "canCloseOnBackdrop": lambda ctx, ev: ctx["closeOnBackdrop"],
    },
    actions={
        "savePreviousElement": save_previous_element,
        "restoreFocus": restore_focus,
        "setTransitioning": assign(isTransitioning=True),
        "clearTransitioning": assign(isTransitioning=False),
        "clearPreviousElement": assign(previousActiveElement=None),
    },
)

_OPENED = {"target": "open", "actions": "clearTransitioning"}
_CLOSED = {"target": "closed", "actions": ["clearTransitioning", "restoreFocus", "clearPreviousElement"]}
_CLOSE = {"target": "closing", "actions": "setTransitioning"}

SCHEMA = {
    "id": "modal",
    "initial": "closed",
    "context": create_context,
    "states": {
        "closed": {"on": {"OPEN": {"target": "opening", "actions": ["savePreviousElement", "setTransitioning"]}}},
        "opening": {
            "on": {"ANIMATION_END": _OPENED, "CLOSE": _CLOSE},
            "after": {OPENING_DELAY_MS: _OPENED},
        },
        "open": {
            "on": {
                "CLOSE": _CLOSE,
                "ESCAPE_KEY": dict(_CLOSE, guard="canCloseOnEscape"),
                "BACKDROP_CLICK": dict(_CLOSE, guard="canCloseOnBackdrop"),
            }
        },
        "closing": {
            "on": {"ANIMATION_END": _CLOSED, "OPEN": {"target": "opening", "actions": "setTransitioning"}},
            "after": {CLOSING_DELAY_MS: _CLOSED},
        },
    },
}

modal_machine = build(SCHEMA, IMPLEMENTATIONS)


def data_attributes(state: str, context: Dict[str, Any]) -> Dict[str, Any]:
    return {"data-state": state, "data-transitioning": context["isTransitioning"] or None}
