# tests/unit/machines/test_tabs.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from statechart.machines.tabs import VERTICAL, key_event, tab_attributes, tabs_machine
from statechart.runtime.interpreter import Interpreter

TABS = [
    {"id": "a", "label": "A"},
    {"id": "b", "label": "B", "disabled": True},
    {"id": "c", "label": "C"},
]


@pytest.fixture
def tabs(scheduler):
    interpreter = Interpreter(tabs_machine, scheduler=scheduler)
    interpreter.start({"tabs": TABS})
    yield interpreter
    interpreter.stop()


def _active(interpreter):
    return interpreter.snapshot.context["activeId"]


def test_defaults_to_first_enabled_tab(scheduler):
    interpreter = Interpreter(tabs_machine, scheduler=scheduler)
    interpreter.start({"tabs": [{"id": "x", "disabled": True}, {"id": "y"}]})
    assert _active(interpreter) == "y"
    assert interpreter.snapshot.context["activateOnFocus"] is True


def test_default_active_id(scheduler):
    interpreter = Interpreter(tabs_machine, scheduler=scheduler)
    interpreter.start({"tabs": TABS, "defaultActiveId": "c"})
    assert _active(interpreter) == "c"


def test_select_valid_tab(tabs):
    tabs.send({"type": "SELECT", "id": "c"})
    assert _active(tabs) == "c"


def test_disabled_tab_cannot_be_selected(tabs):
    tabs.send({"type": "SELECT", "id": "b"})
    assert _active(tabs) == "a"
    tabs.send({"type": "SELECT", "id": "missing"})
    assert _active(tabs) == "a"


def test_keyboard_navigation_skips_disabled_tabs(tabs):
    tabs.send(key_event("ArrowRight"))
    assert _active(tabs) == "c"
    tabs.send(key_event("ArrowRight"))
    assert _active(tabs) == "a"
    tabs.send(key_event("ArrowLeft"))
    assert _active(tabs) == "c"
    tabs.send(key_event("Home"))
    assert _active(tabs) == "a"
    tabs.send(key_event("End"))
    assert _active(tabs) == "c"


def test_key_mapping_follows_orientation():
    assert key_event("ArrowDown") is None
    assert key_event("ArrowDown", VERTICAL) == "FOCUS_NEXT"
    assert key_event("ArrowUp", VERTICAL) == "FOCUS_PREV"
    assert key_event("ArrowRight", VERTICAL) is None
    assert key_event("Enter") is None


def test_set_tabs(tabs):
    tabs.send({"type": "SET_TABS", "tabs": [{"id": "z"}]})
    assert tabs.snapshot.context["tabs"] == [{"id": "z"}]
    tabs.send("FOCUS_NEXT")
    assert _active(tabs) == "z"


def test_no_enabled_tabs(scheduler):
    interpreter = Interpreter(tabs_machine, scheduler=scheduler)
    interpreter.start({"tabs": [{"id": "x", "disabled": True}]})
    assert _active(interpreter) == ""
    interpreter.send("FOCUS_NEXT")
    interpreter.send("FOCUS_LAST")
    assert _active(interpreter) == ""


def test_tab_attributes():
    assert tab_attributes(TABS[0], "a", "panel-a") == {
        "role": "tab",
        "aria-selected": True,
        "aria-disabled": None,
        "aria-controls": "panel-a",
        "tabindex": 0,
        "data-state": "active",
    }
    attributes = tab_attributes(TABS[1], "a", "panel-b")
    assert attributes["aria-disabled"] is True
    assert attributes["tabindex"] == -1
    assert attributes["data-state"] == "inactive"
