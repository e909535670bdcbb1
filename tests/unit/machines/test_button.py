# tests/unit/machines/test_button.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from statechart.machines.button import button_machine, data_attributes, state_class
from statechart.runtime.interpreter import Interpreter


@pytest.fixture
def button(scheduler):
    interpreter = Interpreter(button_machine, scheduler=scheduler)
    interpreter.start()
    yield interpreter
    interpreter.stop()


def _walk(interpreter, *events):
    for event in events:
        interpreter.send(event)
    return interpreter.snapshot.value


def test_hover_press_release(button):
    assert _walk(button, "HOVER") == "hovered"
    assert _walk(button, "PRESS") == "pressed"
    assert _walk(button, "RELEASE") == "hovered"
    assert _walk(button, "UNHOVER") == "idle"


def test_press_then_click_focuses(button):
    assert _walk(button, "PRESS", "CLICK") == "focused"


def test_keyboard_focus_is_visible(button):
    button.send({"type": "FOCUS", "fromKeyboard": True})
    snapshot = button.snapshot
    assert snapshot.value == "focused"
    assert data_attributes(snapshot.value, snapshot.context)["data-focus-visible"] == ""


def test_pointer_focus_is_not_visible(button):
    button.send("FOCUS")
    snapshot = button.snapshot
    assert snapshot.context["hasFocus"] is True
    assert snapshot.context["focusFromKeyboard"] is False
    assert data_attributes(snapshot.value, snapshot.context)["data-focus-visible"] is None


def test_hover_keeps_focus(button):
    assert _walk(button, "FOCUS", "HOVER", "UNHOVER") == "focused"
    assert _walk(button, "BLUR") == "idle"
    assert button.snapshot.context["hasFocus"] is False


def test_loading(button):
    assert _walk(button, "START_LOADING") == "loading"
    assert button.snapshot.context["isLoading"] is True
    assert _walk(button, "PRESS", "HOVER") == "loading"
    assert _walk(button, "STOP_LOADING") == "idle"
    assert button.snapshot.context["isLoading"] is False


def test_disabled(button):
    assert _walk(button, "FOCUS", "DISABLE") == "disabled"
    snapshot = button.snapshot
    assert snapshot.context["isDisabled"] is True
    assert snapshot.context["hasFocus"] is False
    assert data_attributes(snapshot.value, snapshot.context) == {
        "data-state": "disabled",
        "data-loading": None,
        "data-disabled": True,
        "data-focus-visible": None,
    }
    assert _walk(button, "PRESS", "FOCUS", "HOVER") == "disabled"
    assert _walk(button, "ENABLE") == "idle"


def test_disable_while_loading(button):
    assert _walk(button, "START_LOADING", "DISABLE") == "disabled"
    assert button.snapshot.context["isLoading"] is False


def test_state_class():
    assert state_class("pressed") == "is-pressed"
    assert state_class("idle") == ""
    assert state_class("unknown") == ""
