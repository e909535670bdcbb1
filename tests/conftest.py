# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

import pytest

from statechart.core.hooks import Hook


@pytest.fixture
def hook():
    """A hook object for testing hooks."""
    return Hook()


@pytest.fixture
def mock_hook():
    """A hook whose callbacks are all mocks."""
    return MagicMock(spec=Hook)


@pytest.fixture
def scheduler():
    """A virtual clock for delayed transitions."""
    from statechart.runtime.timers import ManualScheduler

    return ManualScheduler()


@pytest.fixture
def light_schema():
    """A two-level machine: off, and on with dim/bright children."""
    return {
        "id": "light",
        "initial": "off",
        "context": {"count": 0},
        "states": {
            "off": {"on": {"TOGGLE": {"target": "on", "actions": "increment"}}},
            "on": {
                "initial": "dim",
                "entry": "logEnter",
                "exit": "logExit",
                "on": {"TOGGLE": "off", "RESET": ".dim"},
                "states": {
                    "dim": {"on": {"BRIGHTER": "bright"}},
                    "bright": {"on": {"DIMMER": "dim"}},
                },
            },
        },
    }


@pytest.fixture
def light_implementations():
    """Implementations for ``light_schema``; entry and exit are recorded in ``log``."""
    from statechart.core.actions import assign
    from statechart.core.implementations import Implementations

    return Implementations(
        actions={
            "increment": assign(count=lambda ctx, ev: ctx["count"] + 1),
            "logEnter": assign(log=lambda ctx, ev: ctx.get("log", []) + ["enter"]),
            "logExit": assign(log=lambda ctx, ev: ctx.get("log", []) + ["exit"]),
        }
    )


@pytest.fixture
def light_model(light_schema, light_implementations):
    from statechart.core.definition import build

    return build(light_schema, light_implementations)


@pytest.fixture
def light(light_model, scheduler):
    """A started interpreter running ``light_model``."""
    from statechart.runtime.interpreter import Interpreter

    interpreter = Interpreter(light_model, scheduler=scheduler)
    interpreter.start()
    yield interpreter
    interpreter.stop()


@pytest.fixture
def player_adapter():
    """A PlayerAdapter double; ``create`` keeps the callbacks it was given on the mock."""
    adapter = MagicMock()

    def create(element_id, video_id, on_ready, on_state_change):
        adapter.callbacks = (on_ready, on_state_change)
        return None

    adapter.create.side_effect = create
    return adapter
