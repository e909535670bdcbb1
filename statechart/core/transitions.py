# statechart/core/transitions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

from statechart.core.actions import ActionRef, Effect
from statechart.core.guards import GuardRef


@dataclass(frozen=True)
class Transition:
    """
    One candidate of a transition: defined on ``source`` for events selected
    by ``event``, optionally guarded, leading to ``target`` (a state id, or
    ``None`` for a targetless transition that only runs actions).

    Candidates of the same ``(source, event)`` are tried in ``order``; the
    first whose guard passes wins.
    """

    source: str
    event: str
    target: Optional[str]
    order: int = 0
    guard: Optional[GuardRef] = None
    actions: Tuple[Union[ActionRef, Effect], ...] = ()
    external: bool = False
    description: Optional[str] = None

    @property
    def targetless(self) -> bool:
        return self.target is None

    @property
    def guard_name(self) -> Optional[str]:
        return self.guard.name if self.guard is not None else None

    def describe(self) -> str:
        """Human readable label, e.g. ``SELECT [isValidTab] -> tabs.b``."""
        if self.description:
            return self.description
        label = self.event
        if self.guard is not None:
            label += f" [{self.guard.name}]"
        return f"{label} -> {self.target if self.target is not None else '(self)'}"
