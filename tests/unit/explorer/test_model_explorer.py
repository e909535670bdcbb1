# tests/unit/explorer/test_model_explorer.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import concurrent.futures

import pytest

from statechart.core.definition import build
from statechart.core.errors import ScenarioMismatchError
from statechart.core.implementations import Implementations
from statechart.explorer.model import Coverage, ModelExplorer
from statechart.machines import media_player
from statechart.machines.modal import modal_machine
from statechart.machines.theme import theme_machine
from statechart.runtime.actors import promise
from statechart.runtime.interpreter import Interpreter
from statechart.runtime.timers import ManualScheduler

HAS_PLAYER = media_player.IMPLEMENTATIONS.with_overrides(guards={"hasPlayer": lambda ctx, ev: True})


def test_shortest_path_plans_replay(light_model):
    explorer = ModelExplorer(light_model)
    plans = explorer.shortest_path_plans()
    assert [plan.target[-1] for plan in plans] == ["light.off", "light.on.dim", "light.on.bright"]
    for plan in plans:
        (scenario,) = plan.paths
        snapshot = scenario.replay()
        assert snapshot.configuration == plan.target


def test_scenario_descriptions(light_model):
    plans = ModelExplorer(light_model).shortest_path_plans()
    assert plans[0].paths[0].description == "reaches light.off on start"
    assert plans[2].description == "reaches state light.on.bright"
    assert plans[2].paths[0].description == (
        "reaches light.on.bright via TOGGLE, BRIGHTER (light.off → light.on.dim → light.on.bright)"
    )


def test_simple_path_plans_group_by_target(light_model):
    explorer = ModelExplorer(light_model)
    plans = explorer.simple_path_plans()
    assert {plan.target[-1] for plan in plans} == {"light.off", "light.on.dim", "light.on.bright"}
    for plan in plans:
        for snapshot in plan.replay_all():
            assert snapshot.configuration == plan.target


def test_replay_mismatch_raises(player_adapter):
    explorer = ModelExplorer(
        media_player.media_player_machine,
        implementations=HAS_PLAYER,
        interpreter_factory=lambda: Interpreter(
            media_player.media_player_machine, scheduler=ManualScheduler(), adapters={"player": player_adapter}
        ),
    )
    plans = {plan.target[-1]: plan for plan in explorer.shortest_path_plans()}
    (scenario,) = plans["youtubeMachine.playing"].paths
    with pytest.raises(ScenarioMismatchError) as exc_info:
        scenario.replay()
    assert exc_info.value.expected == scenario.target
    assert exc_info.value.actual == ("youtubeMachine", "youtubeMachine.ready")


def test_media_player_plans_replay_with_adapter(player_adapter):
    explorer = ModelExplorer(
        media_player.media_player_machine,
        implementations=HAS_PLAYER,
        interpreter_factory=lambda: Interpreter(
            media_player.media_player_machine,
            implementations=HAS_PLAYER,
            scheduler=ManualScheduler(),
            adapters={"player": player_adapter},
        ),
    )
    for plan in explorer.simple_path_plans():
        plan.replay_all()
    assert player_adapter.destroy.call_count == player_adapter.create.call_count


def test_delayed_transitions_replay_on_virtual_clock():
    explorer = ModelExplorer(modal_machine)
    plans = explorer.simple_path_plans()
    delayed = [
        scenario
        for plan in plans
        for scenario in plan.paths
        if any(edge.delay is not None for edge in scenario.path.edges)
    ]
    assert delayed
    for scenario in delayed:
        assert scenario.replay().configuration == scenario.target


def test_branch_rejected_at_runtime_fails_replay():
    explorer = ModelExplorer(modal_machine, input={"closeOnEscape": False})
    escapes = [
        scenario
        for plan in explorer.simple_path_plans()
        for scenario in plan.paths
        if scenario.events and scenario.events[-1].type == "ESCAPE_KEY"
    ]
    assert escapes
    for scenario in escapes:
        with pytest.raises(ScenarioMismatchError):
            scenario.replay()


def test_shipped_media_guard_fails_replay():
    explorer = ModelExplorer(media_player.media_player_machine)
    plans = {plan.target[-1]: plan for plan in explorer.shortest_path_plans()}
    with pytest.raises(ScenarioMismatchError, match="youtubeMachine.playing"):
        plans["youtubeMachine.playing"].replay_all()


def test_theme_plans_with_samples():
    explorer = ModelExplorer(theme_machine, events={"SET": [{"value": "light"}]})
    plans = {plan.target[-1]: plan for plan in explorer.shortest_path_plans()}
    assert [edge.event.type for edge in plans["theme.light"].paths[0].path.edges] == ["SET"]
    plans["theme.light"].replay_all()


@pytest.fixture
def island_model():
    return build(
        {
            "id": "m",
            "initial": "a",
            "states": {"a": {"on": {"GO": "b"}}, "b": {}, "island": {"initial": "x", "states": {"x": {}}}},
        }
    )


def test_coverage_reports_missing_states(island_model):
    explorer = ModelExplorer(island_model)
    report = explorer.coverage(explorer.shortest_path_plans())
    assert isinstance(report, Coverage)
    assert report.covered == ("m", "m.a", "m.b")
    assert report.missing == ("m.island", "m.island.x")
    assert report.ratio == pytest.approx(3 / 5)
    assert not report.is_complete
    with pytest.raises(AssertionError, match="m.island, m.island.x"):
        explorer.assert_full_coverage(explorer.shortest_path_plans())


def test_coverage_filter(island_model):
    explorer = ModelExplorer(island_model)
    report = explorer.coverage(explorer.shortest_path_plans(), filter=lambda node: not node.id.startswith("m.island"))
    assert report.is_complete
    assert report.ratio == 1.0


def test_full_coverage(light_model):
    explorer = ModelExplorer(light_model)
    report = explorer.assert_full_coverage(explorer.simple_path_plans())
    assert report.is_complete
    assert report.covered == ("light", "light.off", "light.on", "light.on.dim", "light.on.bright")


def test_nested_final_paths_replay():
    model = build(
        {
            "id": "wizard",
            "initial": "form",
            "states": {
                "form": {
                    "initial": "editing",
                    "on": {"done.state.wizard.form": "finished"},
                    "states": {"editing": {"on": {"SUBMIT": "complete"}}, "complete": {"type": "final"}},
                },
                "finished": {"on": {"RESTART": "form"}},
            },
        }
    )
    explorer = ModelExplorer(model)
    for plan in explorer.shortest_path_plans() + explorer.simple_path_plans():
        for snapshot in plan.replay_all():
            assert snapshot.configuration == plan.target
    explorer.assert_full_coverage(explorer.shortest_path_plans(), filter=lambda node: not node.is_final)


def _loader(logic):
    return build(
        {
            "id": "loader",
            "initial": "loading",
            "states": {
                "loading": {"invoke": {"id": "fetch", "src": "fetch", "on_done": "ready"}},
                "ready": {"on": {"RELOAD": "loading"}},
            },
        },
        Implementations(actors={"fetch": logic}),
    )


def test_promise_resolving_on_spawn_replays():
    explorer = ModelExplorer(_loader(promise(lambda scope: 42)))
    plans = {plan.target[-1]: plan for plan in explorer.shortest_path_plans()}
    assert plans["loader.loading"].replay_all()[0].configuration == ("loader", "loader.ready")
    assert plans["loader.ready"].replay_all()[0].configuration == ("loader", "loader.ready")
    for plan in explorer.simple_path_plans():
        plan.replay_all()


def test_pending_promise_outcome_is_sent():
    explorer = ModelExplorer(_loader(promise(lambda scope: concurrent.futures.Future())))
    for plan in explorer.shortest_path_plans():
        for snapshot in plan.replay_all():
            assert snapshot.configuration == plan.target
