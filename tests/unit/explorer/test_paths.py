# tests/unit/explorer/test_paths.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from statechart.core.definition import build
from statechart.core.implementations import Implementations
from statechart.explorer.graph import ReachabilityGraph
from statechart.explorer.paths import Path, shortest_paths, simple_paths
from statechart.machines.media_player import media_player_machine


@pytest.fixture
def diamond():
    return build(
        {
            "id": "m",
            "initial": "a",
            "states": {
                "a": {"on": {"LEFT": "b", "RIGHT": "c"}},
                "b": {"on": {"NEXT": "d"}},
                "c": {"on": {"NEXT": "d", "BACK": "a"}},
                "d": {},
            },
        }
    )


@pytest.fixture
def media_graph():
    return ReachabilityGraph.from_model(
        media_player_machine, implementations=Implementations(guards={"hasPlayer": lambda ctx, ev: True})
    )


def _leaf(path):
    return path.end[-1]


def test_shortest_paths_reach_every_node(diamond):
    graph = ReachabilityGraph.from_model(diamond)
    paths = shortest_paths(graph)
    assert list(paths) == graph.nodes
    assert paths[graph.initial].length == 0
    assert [edge.event.type for edge in paths[("m", "m.d")].edges] == ["LEFT", "NEXT"]


def test_shortest_paths_break_ties_by_declaration(diamond):
    graph = ReachabilityGraph.from_model(diamond)
    path = shortest_paths(graph)[("m", "m.d")]
    assert path.describe() == "m.a → m.b → m.d"


def test_path_is_a_value(diamond):
    graph = ReachabilityGraph.from_model(diamond)
    left, right = graph.edges(graph.initial)
    empty = Path(graph.initial)
    extended = empty.append(left)
    assert empty.length == 0
    assert extended.length == 1
    assert extended.nodes == (graph.initial, ("m", "m.b"))
    assert extended.events[0].type == "LEFT"
    with pytest.raises(ValueError):
        extended.append(right)


def test_simple_paths_start_with_the_empty_path(diamond):
    paths = simple_paths(ReachabilityGraph.from_model(diamond))
    assert paths[0].length == 0
    assert [path.describe() for path in paths] == [
        "m.a",
        "m.a → m.b",
        "m.a → m.b → m.d",
        "m.a → m.c",
        "m.a → m.c → m.d",
        "m.a → m.c → m.a",
    ]
    assert [path.is_cycle for path in paths] == [False, False, False, False, False, True]


def test_simple_paths_bounded(diamond):
    assert len(simple_paths(ReachabilityGraph.from_model(diamond), max_paths=2)) == 2


def test_media_cycle_closed_once_per_direction(media_graph):
    paths = simple_paths(media_graph)
    between = {"youtubeMachine.playing", "youtubeMachine.paused"}

    closing = [
        path
        for path in paths
        if path.is_cycle and {path.edges[-1].source[-1], path.edges[-1].target[-1]} == between
    ]
    assert [path.describe() for path in closing] == [
        "youtubeMachine.ready → youtubeMachine.playing → youtubeMachine.paused → youtubeMachine.playing"
    ]
    for path in paths:
        types = [edge.event.type for edge in path.edges]
        assert types.count("PAUSE") <= 1
        assert types.count("PLAY") <= 1


def test_media_simple_paths_repeat_no_node_before_the_end(media_graph):
    for path in simple_paths(media_graph):
        inner = path.nodes[:-1]
        assert len(set(inner)) == len(inner)


def test_media_shortest_paths(media_graph):
    paths = shortest_paths(media_graph)
    assert {_leaf(path): [edge.event.type for edge in path.edges] for path in paths.values()} == {
        "youtubeMachine.ready": [],
        "youtubeMachine.playing": ["READY"],
        "youtubeMachine.paused": ["READY", "PAUSE"],
        "youtubeMachine.ended": ["READY", "END"],
    }
