# tests/unit/machines/test_app.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from statechart.machines.app import UI_ACTOR, app_machine
from statechart.runtime.interpreter import Interpreter


@pytest.fixture
def app(scheduler):
    interpreter = Interpreter(app_machine, scheduler=scheduler)
    interpreter.start()
    yield interpreter
    interpreter.stop()


def test_runs_the_player_panel(app):
    actor = app.get_actor(UI_ACTOR)
    assert actor.kind == "machine"
    assert actor.child.snapshot.value == "closed"


def test_page_loaded(app):
    app.send({"type": "PAGE_LOADED", "pathname": "/products"})
    assert app.snapshot.value == "browsing"
    assert app.snapshot.context["pathname"] == "/products"


def test_media_states(app):
    app.send({"type": "PAGE_LOADED", "pathname": "/"})
    app.send("MEDIA_PLAYING")
    assert app.snapshot.value == "playing"
    app.send("MEDIA_PAUSE")
    assert app.snapshot.value == "paused"
    app.send("MEDIA_PLAYING")
    assert app.snapshot.value == "playing"
    app.send("MEDIA_STOP")
    assert app.snapshot.value == "idle"


def test_media_events_ignored_before_page_load(app):
    app.send("MEDIA_PLAYING")
    assert app.snapshot.value == "idle"


def test_stop_cascades_to_the_panel(scheduler):
    app = Interpreter(app_machine, scheduler=scheduler)
    app.start()
    panel = app.get_actor(UI_ACTOR).child
    app.stop()
    assert panel.status == "stopped"
