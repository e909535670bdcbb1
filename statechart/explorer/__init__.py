# statechart/explorer/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from statechart.explorer.graph import Edge, ReachabilityGraph
from statechart.explorer.model import Coverage, ModelExplorer, PathPlan, PathScenario
from statechart.explorer.paths import Path, shortest_paths, simple_paths

__all__ = [
    "Coverage",
    "Edge",
    "ModelExplorer",
    "Path",
    "PathPlan",
    "PathScenario",
    "ReachabilityGraph",
    "shortest_paths",
    "simple_paths",
]
