# tests/unit/machines/test_color_picker.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from statechart.machines.color_picker import color_picker_machine
from statechart.runtime.interpreter import Interpreter


@pytest.fixture
def picker(scheduler):
    interpreter = Interpreter(color_picker_machine, scheduler=scheduler)
    interpreter.start({"options": ["red", "green"]})
    yield interpreter
    interpreter.stop()


def test_starts_idle(picker):
    assert picker.snapshot.value == "idle"
    assert picker.snapshot.context == {"options": ["red", "green"], "selected": None}


def test_select_and_reselect(picker):
    picker.send({"type": "SELECT", "value": "red"})
    assert picker.snapshot.value == "selected"
    assert picker.snapshot.context["selected"] == "red"
    picker.send({"type": "SELECT", "value": "green"})
    assert picker.snapshot.value == "selected"
    assert picker.snapshot.context["selected"] == "green"


def test_reset(picker):
    picker.send({"type": "SELECT", "value": "red"})
    picker.send("RESET")
    assert picker.snapshot.value == "idle"
    assert picker.snapshot.context["selected"] is None


def test_reset_while_idle_changes_nothing(picker):
    before = dict(picker.snapshot.context)
    picker.send("RESET")
    assert picker.snapshot.value == "idle"
    assert picker.snapshot.context == before
