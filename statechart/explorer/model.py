# statechart/explorer/model.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Model-based test generation. A ModelExplorer turns a DefinitionModel into
test plans: one plan per reachable configuration, each holding scenarios
(event sequences) that drive a fresh interpreter into that configuration.

Example::

    explorer = ModelExplorer(model, events={"SELECT": {"value": "b"}}, implementations=impls)
    plans = explorer.shortest_path_plans()
    for plan in plans:
        for scenario in plan.paths:
            scenario.replay()
    explorer.assert_full_coverage(plans)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from statechart.core.definition import DefinitionModel
from statechart.core.errors import ScenarioMismatchError
from statechart.core.events import Event, done_invoke_type, done_state_type, error_invoke_type
from statechart.core.hooks import Hook
from statechart.core.implementations import Implementations
from statechart.core.states import StateNode
from statechart.explorer.graph import Configuration, EventSamples, ReachabilityGraph
from statechart.explorer.paths import Path, shortest_paths, simple_paths
from statechart.runtime.interpreter import Interpreter
from statechart.runtime.snapshot import Snapshot
from statechart.runtime.timers import ManualScheduler

logger = logging.getLogger(__name__)

InterpreterFactory = Callable[[], Interpreter]

# Events an instance receives without the scenario sending them.
_ACTOR_OUTCOMES = (done_invoke_type(""), error_invoke_type(""))
_UNPROMPTED = _ACTOR_OUTCOMES + (done_state_type(""),)


class _Trail(Hook):
    """
    The steps a replayed instance commits: the event each one took and the
    configuration it left the instance in. Registered as both a hook and a
    listener.
    """

    def __init__(self) -> None:
        self.steps: List[Tuple[Optional[str], Configuration]] = []
        self._start = 0
        self._event: Optional[str] = None

    def on_transition(self, transition: Any, event: Event) -> None:
        self._event = event.type

    def __call__(self, snapshot: Snapshot) -> None:
        self.steps.append((self._event, snapshot.configuration))
        self._event = None

    def mark(self) -> None:
        self._start = len(self.steps)

    def _settled(self, index: int) -> int:
        while index + 1 < len(self.steps) and (self.steps[index + 1][0] or "").startswith(done_state_type("")):
            index += 1
        return index

    def took(self, event_type: str, configuration: Configuration) -> bool:
        """
        True if an actor already delivered ``event_type`` since the last mark
        and the instance came to rest in ``configuration``.
        """
        for index in range(self._start, len(self.steps)):
            if self.steps[index][0] != event_type:
                continue
            settled = self._settled(index)
            if self.steps[settled][1] == configuration:
                self._start = settled
                return True
        return False

    def passed_through(self, configuration: Configuration) -> bool:
        """
        True if the instance rested in ``configuration`` after the last mark
        and only left it through events nobody sent.
        """
        for index in range(self._start, len(self.steps)):
            event_type, reached = self.steps[index]
            if index > self._start and not (event_type or "").startswith(_UNPROMPTED):
                return False
            if reached == configuration:
                return True
        return False


@dataclass(frozen=True)
class PathScenario:
    """
    A replayable test scenario: the event sequence of one path, its
    description and the configuration it must end in.
    """

    path: Path
    factory: InterpreterFactory = field(repr=False, compare=False)
    input: Any = field(default=None, repr=False, compare=False)

    @property
    def events(self) -> Tuple[Event, ...]:
        return self.path.events

    @property
    def target(self) -> Configuration:
        return self.path.end

    @property
    def description(self) -> str:
        if not self.path.edges:
            return f"reaches {self.target[-1]} on start"
        steps = ", ".join(edge.event.type for edge in self.path.edges)
        return f"reaches {self.target[-1]} via {steps} ({self.path.describe()})"

    def replay(self) -> Snapshot:
        """
        Drive a fresh interpreter through the events. Delayed transitions are
        fired by advancing a ManualScheduler when the interpreter uses one.

        Actor outcomes (``done.invoke.*``, ``error.invoke.*``) on the path are
        not sent again when the actor already delivered them. The scenario
        also holds when the instance rested in ``target`` and then left it
        only through such outcomes, as a promise that resolves on spawn does.

        :return: The final snapshot.
        :raises ScenarioMismatchError: If the interpreter never rests in ``target``.
        """
        trail = _Trail()
        interpreter = self.factory()
        interpreter.hooks.register_hook(trail)
        interpreter.subscribe(trail)
        interpreter.start(self.input)
        try:
            for edge in self.path.edges:
                event = edge.event
                if event.type.startswith(_ACTOR_OUTCOMES) and trail.took(event.type, edge.target):
                    continue
                trail.mark()
                scheduler = interpreter.scheduler
                if edge.delay is not None and isinstance(scheduler, ManualScheduler):
                    scheduler.advance(edge.delay)
                else:
                    interpreter.send(event)
            snapshot = interpreter.snapshot
            reached = snapshot.configuration == self.target or trail.passed_through(self.target)
        finally:
            interpreter.stop()
        if not reached:
            raise ScenarioMismatchError(self.description, self.target, snapshot.configuration)
        logger.debug("Replayed: %s", self.description)
        return snapshot


@dataclass(frozen=True)
class PathPlan:
    """All scenarios generated for one target configuration."""

    target: Configuration
    paths: Tuple[PathScenario, ...]

    @property
    def description(self) -> str:
        return f"reaches state {self.target[-1]}"

    def replay_all(self) -> List[Snapshot]:
        return [scenario.replay() for scenario in self.paths]


@dataclass(frozen=True)
class Coverage:
    """Which state nodes the given plans pass through."""

    covered: Tuple[str, ...]
    missing: Tuple[str, ...]

    @property
    def ratio(self) -> float:
        total = len(self.covered) + len(self.missing)
        return len(self.covered) / total if total else 1.0

    @property
    def is_complete(self) -> bool:
        return not self.missing


class ModelExplorer:
    """
    Generates test plans from a DefinitionModel and replays them against
    fresh interpreters.

    :param model: The machine definition.
    :param events: Sample events per event type (see ReachabilityGraph.from_model).
    :param interpreter_factory: Builds the interpreter each scenario replays
        against. Defaults to one using ``implementations`` and a ManualScheduler.
    :param implementations: Registry for guards, actions and actors.
    :param input: Passed to ``start`` on every replay.
    :param max_paths: Upper bound on the number of simple paths enumerated.
    """

    def __init__(
        self,
        model: DefinitionModel,
        events: Optional[EventSamples] = None,
        interpreter_factory: Optional[InterpreterFactory] = None,
        implementations: Optional[Implementations] = None,
        input: Any = None,
        max_paths: Optional[int] = 10000,
    ) -> None:
        self._model = model
        self._implementations = implementations
        self._input = input
        self._max_paths = max_paths
        self._factory = interpreter_factory or self._default_factory
        self._graph = ReachabilityGraph.from_model(model, events, implementations, input)

    def _default_factory(self) -> Interpreter:
        return Interpreter(self._model, implementations=self._implementations, scheduler=ManualScheduler())

    @property
    def graph(self) -> ReachabilityGraph:
        return self._graph

    def _scenario(self, path: Path) -> PathScenario:
        return PathScenario(path, self._factory, self._input)

    def shortest_path_plans(self) -> List[PathPlan]:
        """One plan per reachable configuration, holding its shortest path."""
        return [
            PathPlan(target, (self._scenario(path),)) for target, path in shortest_paths(self._graph).items()
        ]

    def simple_path_plans(self) -> List[PathPlan]:
        """One plan per reachable configuration, holding every simple path ending there."""
        grouped: Dict[Configuration, List[PathScenario]] = {node: [] for node in self._graph.nodes}
        for path in simple_paths(self._graph, self._max_paths):
            grouped[path.end].append(self._scenario(path))
        return [PathPlan(target, tuple(scenarios)) for target, scenarios in grouped.items() if scenarios]

    def coverage(
        self, plans: Sequence[PathPlan], filter: Optional[Callable[[StateNode], bool]] = None
    ) -> Coverage:
        """
        Report the state nodes visited by ``plans``.

        :param filter: Selects the state nodes that must be covered; all by default.
        """
        visited = set()
        for plan in plans:
            for scenario in plan.paths:
                for node in scenario.path.nodes:
                    visited.update(node)
        required = [node.id for node in self._model if filter is None or filter(node)]
        covered = tuple(state_id for state_id in required if state_id in visited)
        missing = tuple(state_id for state_id in required if state_id not in visited)
        return Coverage(covered, missing)

    def assert_full_coverage(
        self, plans: Sequence[PathPlan], filter: Optional[Callable[[StateNode], bool]] = None
    ) -> Coverage:
        """
        :raises AssertionError: Naming every required state node no plan visits.
        """
        report = self.coverage(plans, filter)
        if report.missing:
            raise AssertionError(f"Missing coverage for state nodes: {', '.join(report.missing)}")
        return report
