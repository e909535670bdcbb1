# statechart/machines/tabs.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Tab panel selection with keyboard navigation. Disabled tabs can never be
selected or focused.

Input: ``{"tabs": [{"id": "a", "label": "A", "disabled": False}, ...],
"defaultActiveId": "a", "activateOnFocus": True, "orientation": "horizontal"}``
"""

from typing import Any, Dict, List, Optional

from statechart.core.actions import assign
from statechart.core.definition import build
from statechart.core.implementations import Implementations

HORIZONTAL = "horizontal"
VERTICAL = "vertical"


def enabled_tabs(tabs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [tab for tab in tabs if not tab.get("disabled")]


def _index_of(tabs: List[Dict[str, Any]], tab_id: str) -> int:
    for index, tab in enumerate(tabs):
        if tab["id"] == tab_id:
            return index
    return -1


def _step(context: Dict[str, Any], offset: int) -> str:
    enabled = enabled_tabs(context["tabs"])
    if not enabled:
        return context["activeId"]
    current = _index_of(enabled, context["activeId"])
    if current == -1:
        return enabled[0 if offset > 0 else -1]["id"]
    return enabled[(current + offset) % len(enabled)]["id"]


def create_context(input: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    input = input or {}
    tabs = list(input.get("tabs") or [])
    enabled = enabled_tabs(tabs)
    return {
        "tabs": tabs,
        "activeId": input.get("defaultActiveId") or (enabled[0]["id"] if enabled else ""),
        "activateOnFocus": input.get("activateOnFocus", True),
        "orientation": input.get("orientation", HORIZONTAL),
    }


def is_valid_tab(context, event) -> bool:
    tab_id = event.get("id")
    return any(tab["id"] == tab_id and not tab.get("disabled") for tab in context["tabs"])


def _first(context, event):
    enabled = enabled_tabs(context["tabs"])
    return enabled[0]["id"] if enabled else context["activeId"]


def _last(context, event):
    enabled = enabled_tabs(context["tabs"])
    return enabled[-1]["id"] if enabled else context["activeId"]


IMPLEMENTATIONS = Implementations(
    guards={"isValidTab": is_valid_tab},
    actions={
        "selectTab": assign(activeId=lambda ctx, ev: ev.get("id", "")),
        "focusNext": assign(activeId=lambda ctx, ev: _step(ctx, 1)),
        "focusPrev": assign(activeId=lambda ctx, ev: _step(ctx, -1)),
        "focusFirst": assign(activeId=_first),
        "focusLast": assign(activeId=_last),
        "setTabs": assign(tabs=lambda ctx, ev: list(ev.get("tabs") or [])),
    },
)

SCHEMA = {
    "id": "tabs",
    "context": create_context,
    "on": {
        "SELECT": {"guard": "isValidTab", "actions": "selectTab"},
        "FOCUS_NEXT": {"actions": "focusNext"},
        "FOCUS_PREV": {"actions": "focusPrev"},
        "FOCUS_FIRST": {"actions": "focusFirst"},
        "FOCUS_LAST": {"actions": "focusLast"},
        "SET_TABS": {"actions": "setTabs"},
    },
}

tabs_machine = build(SCHEMA, IMPLEMENTATIONS)

_KEYS = {
    ("ArrowRight", HORIZONTAL): "FOCUS_NEXT",
    ("ArrowLeft", HORIZONTAL): "FOCUS_PREV",
    ("ArrowDown", VERTICAL): "FOCUS_NEXT",
    ("ArrowUp", VERTICAL): "FOCUS_PREV",
}


def key_event(key: str, orientation: str = HORIZONTAL) -> Optional[str]:
    """Map a keyboard key to the navigation event it sends, if any."""
    if key == "Home":
        return "FOCUS_FIRST"
    if key == "End":
        return "FOCUS_LAST"
    return _KEYS.get((key, orientation))


def tab_attributes(tab: Dict[str, Any], active_id: str, panel_id: str) -> Dict[str, Any]:
    """ARIA and data attributes for one tab."""
    active = tab["id"] == active_id
    return {
        "role": "tab",
        "aria-selected": active,
        "aria-disabled": bool(tab.get("disabled")) or None,
        "aria-controls": panel_id,
        "tabindex": 0 if active else -1,
        "data-state": "active" if active else "inactive",
    }
