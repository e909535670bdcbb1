# statechart/explorer/graph.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, Iterator, List, Mapping, Optional, Sequence, Union

from statechart.core.definition import DefinitionModel
from statechart.core.events import Event, EventLike, done_state_type, matches_pattern, to_event
from statechart.core.implementations import Implementations
from statechart.core.transitions import Transition
from statechart.interfaces.types import StatePath

logger = logging.getLogger(__name__)

Configuration = StatePath
EventSamples = Mapping[str, Union[EventLike, Sequence[EventLike]]]

# Raised by the interpreter itself, never sent from outside.
_DONE_STATE = done_state_type("")


@dataclass(frozen=True)
class Edge:
    """
    One possible transition between configurations: sending ``event`` in
    ``source`` may take ``transition`` and end in ``target``. Edges created
    from delayed transitions carry the ``delay`` (seconds) after which the
    event fires on its own.
    """

    source: Configuration
    target: Configuration
    event: Event
    transition: Transition
    delay: Optional[float] = None

    @property
    def label(self) -> str:
        return self.transition.describe()

    def __repr__(self) -> str:
        return f"{self.source[-1]} --{self.event.type}--> {self.target[-1]}"


class ReachabilityGraph:
    """
    The configurations reachable from a machine's initial configuration,
    connected by every transition candidate that could fire. Edges are
    possible transitions: a guard never removes its branch. Guards are only
    evaluated against the initial context, to pair guarded candidates with
    the sample events they accept; a branch that accepts none of them keeps
    one edge with the first sample still open.

    Nodes are configurations an instance rests in. Entering a final child
    whose parent reacts to its done event leads on to where that reaction
    ends, and ``done.state.*`` events are never sent as samples.

    A sample is no longer offered to later candidates (farther state, or later
    declaration) once a candidate takes it unconditionally: an unguarded one,
    or one whose guard accepted it.
    """

    def __init__(self, model: DefinitionModel, initial: Configuration) -> None:
        self._model = model
        self._initial = initial
        self._edges: Dict[Configuration, List[Edge]] = {}

    @classmethod
    def from_model(
        cls,
        model: DefinitionModel,
        events: Optional[EventSamples] = None,
        implementations: Optional[Implementations] = None,
        input: Any = None,
    ) -> "ReachabilityGraph":
        """
        Explore every configuration reachable from the initial one.

        :param model: The machine definition.
        :param events: Sample events per event type. A type may map to one
            event (or payload mapping) or to a list of them; each sample
            becomes its own edge. Types without samples are sent bare.
            Wildcard patterns only produce edges for types listed here.
        :param implementations: Overrides for the registry the model was built
            with. A guarded candidate is paired with the samples its guard
            accepts in the initial context; guards that cannot be evaluated
            there keep every sample.
        :param input: Input for the initial context guards are screened against.
        """
        builder = _EdgeBuilder(model, events or {}, implementations, input)
        graph = cls(model, builder.settle(model.initial_configuration()))
        queue: Deque[Configuration] = deque([graph._initial])
        graph._edges[graph._initial] = []
        while queue:
            node = queue.popleft()
            edges = builder.edges_from(node)
            graph._edges[node] = edges
            for edge in edges:
                if edge.target not in graph._edges:
                    graph._edges[edge.target] = []
                    queue.append(edge.target)
        logger.debug("Reachability graph of '%s': %d nodes", model.id, len(graph._edges))
        return graph

    @property
    def model(self) -> DefinitionModel:
        return self._model

    @property
    def initial(self) -> Configuration:
        return self._initial

    @property
    def nodes(self) -> List[Configuration]:
        """Reachable configurations in discovery (breadth-first) order."""
        return list(self._edges)

    def edges(self, node: Configuration) -> List[Edge]:
        """Outgoing edges of ``node``, closest state first, in declaration order."""
        return list(self._edges[node])

    def all_edges(self) -> Iterator[Edge]:
        for edges in self._edges.values():
            yield from edges

    def successors(self, node: Configuration) -> Iterator[Configuration]:
        for edge in self._edges[node]:
            yield edge.target

    def __contains__(self, node: object) -> bool:
        return node in self._edges

    def __len__(self) -> int:
        return len(self._edges)

    def __repr__(self) -> str:
        return f"ReachabilityGraph({self._model.id!r}, nodes={len(self._edges)})"


class _EdgeBuilder:
    def __init__(
        self,
        model: DefinitionModel,
        events: EventSamples,
        implementations: Optional[Implementations],
        input: Any,
    ) -> None:
        self._model = model
        self._samples: Dict[str, List[Event]] = {}
        for event_type, samples in events.items():
            if isinstance(samples, (list, tuple)):
                items = samples
            else:
                items = [samples]
            self._samples[event_type] = [self._sample(event_type, item) for item in items]
        self._implementations = model.implementations.merge(implementations)
        self._context = model.create_context(input)
        self._delays = {
            invoke.event_type: invoke.delay for invoke in model.invokes() if invoke.is_timer
        }

    @staticmethod
    def _sample(event_type: str, item: EventLike) -> Event:
        if isinstance(item, Mapping) and not isinstance(item, Event) and "type" not in item:
            return Event(event_type, **item)
        event = to_event(item)
        if event.type != event_type:
            raise ValueError(f"Sample {event!r} listed under '{event_type}'")
        return event

    def _event_types(self, state_id: str) -> List[str]:
        node = self._model.get_node(state_id)
        types: Dict[str, None] = {}
        wildcards = []
        for pattern in node.transitions:
            if pattern.startswith(_DONE_STATE):
                continue
            if pattern == "*" or pattern.endswith(".*"):
                wildcards.append(pattern)
            else:
                types.setdefault(pattern, None)
        for pattern in wildcards:
            for event_type in self._samples:
                if matches_pattern(pattern, event_type) and not event_type.startswith(_DONE_STATE):
                    types.setdefault(event_type, None)
        return list(types)

    def _accepts(self, transition: Transition, event: Event) -> Optional[bool]:
        """True if the guard passes, False if it rejects, None if it cannot be evaluated."""
        if transition.guard is None:
            return True
        try:
            fn = self._implementations.guard(transition.guard)
            return bool(fn(self._context, event, **transition.guard.resolve_params(self._context, event)))
        except Exception as e:
            logger.debug("Guard '%s' not evaluable for %r: %r", transition.guard_name, event, e)
            return None

    def edges_from(self, node: Configuration) -> List[Edge]:
        model = self._model
        leaf = model.get_node(node[-1])
        if leaf.is_final and model.get_node(leaf.parent).is_root:
            return []
        edges: List[Edge] = []
        # Samples per event type not yet taken unconditionally by a closer candidate.
        open_samples: Dict[str, List[Event]] = {}
        for state_id in reversed(node):
            for event_type in self._event_types(state_id):
                if event_type not in open_samples:
                    open_samples[event_type] = list(self._samples.get(event_type) or [Event(event_type)])
                delay = self._delays.get(event_type)
                for transition in model.transitions_for(state_id, event_type):
                    samples = open_samples[event_type]
                    if not samples:
                        break
                    target = self._target(node, transition)
                    paired, remaining = [], []
                    for event in samples:
                        verdict = self._accepts(transition, event)
                        if verdict is not False:
                            paired.append(event)
                        if verdict is not True:
                            remaining.append(event)
                    # A branch whose guard rejects every sample is still possible under other data.
                    for event in paired or samples[:1]:
                        edges.append(Edge(node, target, event, transition, delay))
                    open_samples[event_type] = remaining
        return edges

    def _target(self, node: Configuration, transition: Transition) -> Configuration:
        if transition.target is None:
            return node
        return self.settle(self._model.path_to(self._model.initial_leaf(transition.target)))

    def settle(self, configuration: Configuration) -> Configuration:
        """
        Follow the done events raised when a final child is entered, as the
        interpreter does before the send that entered it returns, to the
        configuration it rests in.
        """
        model = self._model
        seen = {configuration}
        while True:
            leaf = model.get_node(configuration[-1])
            if not leaf.is_final:
                return configuration
            parent = model.get_node(leaf.parent)
            if parent.is_root:
                return configuration
            transition = self._raised(configuration, Event(done_state_type(parent.id)))
            if transition is None or transition.target is None:
                return configuration
            following = model.path_to(model.initial_leaf(transition.target))
            if following in seen:
                return configuration
            seen.add(following)
            configuration = following

    def _raised(self, configuration: Configuration, event: Event) -> Optional[Transition]:
        # First candidate, closest state first, whose guard does not reject the event.
        for state_id in reversed(configuration):
            for transition in self._model.transitions_for(state_id, event.type):
                if self._accepts(transition, event) is not False:
                    return transition
        return None
