# tests/integration/test_generated_plans.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

import pytest

from statechart.explorer.model import ModelExplorer
from statechart.machines import (
    app_machine,
    button_machine,
    color_picker_machine,
    input_machine,
    media_player,
    menu_machine,
    modal_machine,
    player_machine,
    player_panel_machine,
    product_lineup_machine,
    product_machine,
    tabs_machine,
    theme_machine,
)
from statechart.runtime.interpreter import Interpreter
from statechart.runtime.timers import ManualScheduler

TABS_INPUT = {"tabs": [{"id": "a"}, {"id": "b", "disabled": True}, {"id": "c"}]}

MACHINES = {
    "tabs": (tabs_machine, {"SELECT": {"id": "c"}}, TABS_INPUT),
    "theme": (theme_machine, {"SET": [{"value": "system"}, {"value": "dark"}, {"value": "light"}]}, None),
    "colorPicker": (color_picker_machine, {"SELECT": {"value": "red"}}, {"options": ["red"]}),
    "player": (player_machine, None, {"mediaUrl": "a.mp4"}),
    "product": (product_machine, {"SELECT_PRODUCT": {"productId": "p1"}}, None),
    "productLineup": (product_lineup_machine, {"SELECT_PRODUCT": {"slug": "air"}}, {"products": [{"slug": "air"}]}),
    "button": (button_machine, None, None),
    "input": (input_machine, {"CHANGE": {"value": "x"}}, None),
    "modal": (modal_machine, None, None),
    "menu": (menu_machine, None, None),
    "playerPanel": (player_panel_machine, {"OPEN_PLAYER": {"mediaUrl": "a.mp4"}}, None),
    "app": (app_machine, {"PAGE_LOADED": {"pathname": "/"}}, None),
}


@pytest.fixture(params=sorted(MACHINES))
def explorer(request):
    model, events, input = MACHINES[request.param]
    return ModelExplorer(model, events=events, input=input)


def test_shortest_paths_replay(explorer):
    plans = explorer.shortest_path_plans()
    assert len(plans) == len(explorer.graph)
    for plan in plans:
        for snapshot in plan.replay_all():
            assert snapshot.configuration == plan.target


def test_simple_paths_replay(explorer):
    for plan in explorer.simple_path_plans():
        plan.replay_all()


def test_every_state_is_covered(explorer):
    explorer.assert_full_coverage(explorer.shortest_path_plans())


def test_media_player_plans_replay():
    implementations = media_player.IMPLEMENTATIONS.with_overrides(guards={"hasPlayer": lambda ctx, ev: True})
    adapter = MagicMock()

    def factory():
        return Interpreter(
            media_player.media_player_machine,
            implementations=implementations,
            scheduler=ManualScheduler(),
            adapters={"player": adapter},
        )

    explorer = ModelExplorer(
        media_player.media_player_machine,
        implementations=implementations,
        interpreter_factory=factory,
        input={"videoId": "abc"},
    )
    plans = explorer.shortest_path_plans()
    for plan in plans:
        plan.replay_all()
    explorer.assert_full_coverage(plans)
    assert adapter.create.call_count == len(plans)
