# statechart/explorer/paths.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Dict, FrozenSet, Iterator, List, Optional, Tuple

from statechart.core.events import Event
from statechart.explorer.graph import Configuration, Edge, ReachabilityGraph


@dataclass(frozen=True)
class Path:
    """
    A walk through a reachability graph starting at ``start``. Paths are
    values; ``append`` returns a new Path.
    """

    start: Configuration
    edges: Tuple[Edge, ...] = ()

    @property
    def end(self) -> Configuration:
        return self.edges[-1].target if self.edges else self.start

    @property
    def nodes(self) -> Tuple[Configuration, ...]:
        """All configurations visited, in order (one more than the edges)."""
        return (self.start,) + tuple(edge.target for edge in self.edges)

    @property
    def events(self) -> Tuple[Event, ...]:
        return tuple(edge.event for edge in self.edges)

    @property
    def length(self) -> int:
        return len(self.edges)

    @property
    def is_cycle(self) -> bool:
        return bool(self.edges) and self.end in self.nodes[:-1]

    def append(self, edge: Edge) -> "Path":
        if edge.source != self.end:
            raise ValueError(f"Discontinuous path: expected source {self.end}, got {edge.source}")
        return Path(self.start, self.edges + (edge,))

    def describe(self) -> str:
        """The leaf-id chain, e.g. ``player.ready → player.playing``."""
        return " → ".join(node[-1] for node in self.nodes)

    def __len__(self) -> int:
        return len(self.edges)

    def __repr__(self) -> str:
        return f"Path({self.describe()})"


def shortest_paths(graph: ReachabilityGraph) -> Dict[Configuration, Path]:
    """
    Breadth-first search from the initial configuration. Every reachable
    configuration gets one minimum-length path; among equally short paths
    the one using first-declared edges wins.

    :return: Paths keyed by their end configuration, in discovery order.
    """
    paths: Dict[Configuration, Path] = {graph.initial: Path(graph.initial)}
    queue: Deque[Configuration] = deque([graph.initial])
    while queue:
        node = queue.popleft()
        path = paths[node]
        for edge in graph.edges(node):
            if edge.target not in paths:
                paths[edge.target] = path.append(edge)
                queue.append(edge.target)
    return paths


def simple_paths(graph: ReachabilityGraph, max_paths: Optional[int] = None) -> List[Path]:
    """
    Depth-first enumeration of every path from the initial configuration
    that repeats no configuration, in declaration order. A branch that
    reaches a configuration already on the path is kept once, closing the
    cycle, and goes no further.

    :param max_paths: Stop after this many paths.
    """
    return list(_iter_simple_paths(graph, max_paths))


def _iter_simple_paths(graph: ReachabilityGraph, max_paths: Optional[int]) -> Iterator[Path]:
    # Stack frames: (path, configurations on it, closed a cycle). Pushed in reverse to pop in order.
    stack: List[Tuple[Path, FrozenSet[Configuration], bool]] = [
        (Path(graph.initial), frozenset([graph.initial]), False)
    ]
    count = 0
    while stack:
        path, visited, closed = stack.pop()
        yield path
        count += 1
        if max_paths is not None and count >= max_paths:
            return
        if closed:
            continue
        frames = []
        for edge in graph.edges(path.end):
            frames.append((path.append(edge), visited | {edge.target}, edge.target in visited))
        stack.extend(reversed(frames))
