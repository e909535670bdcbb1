# statechart/core/states.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

from statechart.core.actions import ActionRef, Effect
from statechart.core.transitions import Transition

ATOMIC = "atomic"
COMPOUND = "compound"
FINAL = "final"
STATE_TYPES = (ATOMIC, COMPOUND, FINAL)

TIMER_SRC = "statechart.timer"


@dataclass(frozen=True)
class InvokeDefinition:
    """
    An actor declared by a state. The actor is spawned when ``owner`` is
    entered and stopped when it is exited.

    ``src`` is the name of registered actor logic (or the logic itself).
    ``input`` is a mapping, or a ``fn(context, event)`` evaluated once at spawn.
    Timer invocations created from ``after`` carry ``delay`` (seconds) and the
    ``event_type`` they deliver.
    """

    id: str
    src: Any
    owner: str
    input: Union[None, Mapping[str, Any], Callable[[Any, Any], Any]] = None
    delay: Optional[float] = None
    event_type: Optional[str] = None

    @property
    def is_timer(self) -> bool:
        return self.src == TIMER_SRC

    @property
    def src_name(self) -> str:
        if isinstance(self.src, str):
            return self.src
        return getattr(self.src, "name", None) or getattr(self.src, "__name__", None) or repr(self.src)

    def resolve_input(self, context: Any, event: Any) -> Any:
        if callable(self.input):
            return self.input(context, event)
        if self.input is None:
            return None
        return dict(self.input)


@dataclass(eq=False)
class StateNode:
    """
    One node of a parsed definition. Hierarchy is expressed through ids so
    nodes can be shared, read-only, between interpreters and the explorer.
    """

    id: str
    key: str
    parent: Optional[str]
    path: Tuple[str, ...]
    type: str = ATOMIC
    children: Tuple[str, ...] = ()
    initial: Optional[str] = None
    entry: Tuple[Union[ActionRef, Effect], ...] = ()
    exit: Tuple[Union[ActionRef, Effect], ...] = ()
    invokes: Tuple[InvokeDefinition, ...] = ()
    transitions: Dict[str, Tuple[Transition, ...]] = field(default_factory=dict)
    description: Optional[str] = None

    @property
    def is_compound(self) -> bool:
        return self.type == COMPOUND

    @property
    def is_final(self) -> bool:
        return self.type == FINAL

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def depth(self) -> int:
        return len(self.path) - 1

    def __repr__(self) -> str:
        return f"StateNode({self.id!r}, type={self.type!r})"
