# statechart/core/implementations.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from statechart.interfaces.types import ActionExec, GuardCheck

ParamsSpec = Union[None, Mapping[str, Any], Callable[[Any, Any], Mapping[str, Any]]]


class Reference:
    """
    A guard or action as it appears in a definition: either a name resolved
    through an Implementations registry at run time, or an inline callable.
    Parameters may be a fixed mapping or computed from ``(context, event)``.
    """

    __slots__ = ("name", "fn", "params")

    def __init__(self, name: Optional[str] = None, fn: Optional[Callable[..., Any]] = None, params: ParamsSpec = None):
        if name is None and fn is None:
            raise ValueError("A reference needs a name or a callable")
        self.name = name if name is not None else getattr(fn, "__name__", repr(fn))
        self.fn = fn
        self.params = params

    @property
    def is_named(self) -> bool:
        """True when the reference must be looked up in a registry."""
        return self.fn is None

    def resolve_params(self, context: Any, event: Any) -> Dict[str, Any]:
        if self.params is None:
            return {}
        if callable(self.params):
            return dict(self.params(context, event) or {})
        return dict(self.params)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class Implementations:
    """
    String-keyed registries of guards, actions and actor logic. Definitions
    refer to behavior by name so they stay plain data; interpreters resolve
    the names here when a transition is evaluated.
    """

    def __init__(
        self,
        guards: Optional[Mapping[str, GuardCheck]] = None,
        actions: Optional[Mapping[str, ActionExec]] = None,
        actors: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self._guards: Dict[str, GuardCheck] = dict(guards or {})
        self._actions: Dict[str, ActionExec] = dict(actions or {})
        self._actors: Dict[str, Any] = dict(actors or {})

    def register_guard(self, name: str, fn: Callable[..., bool]) -> None:
        """Register a named guard. Overwrites if already registered."""
        self._guards[name] = fn

    def register_action(self, name: str, fn: Callable[..., Any]) -> None:
        """Register a named action. Overwrites if already registered."""
        self._actions[name] = fn

    def register_actor(self, name: str, logic: Any) -> None:
        """Register named actor logic (callback, promise or child machine)."""
        self._actors[name] = logic

    def has_guard(self, name: str) -> bool:
        return name in self._guards

    def has_action(self, name: str) -> bool:
        return name in self._actions

    def has_actor(self, name: str) -> bool:
        return name in self._actors

    def guard(self, ref: Reference) -> Callable[..., bool]:
        """Resolve a guard reference. Raises KeyError if not registered."""
        if ref.fn is not None:
            return ref.fn
        return self._guards[ref.name]

    def action(self, ref: Reference) -> Callable[..., Any]:
        """Resolve an action reference. Raises KeyError if not registered."""
        if ref.fn is not None:
            return ref.fn
        return self._actions[ref.name]

    def actor(self, name: str) -> Any:
        """Resolve actor logic by name. Raises KeyError if not registered."""
        return self._actors[name]

    def guard_names(self) -> List[str]:
        return list(self._guards)

    def action_names(self) -> List[str]:
        return list(self._actions)

    def actor_names(self) -> List[str]:
        return list(self._actors)

    def merge(self, other: Optional["Implementations"]) -> "Implementations":
        """Return a new registry where entries of ``other`` override this one's."""
        merged = Implementations(self._guards, self._actions, self._actors)
        if other is not None:
            merged._guards.update(other._guards)
            merged._actions.update(other._actions)
            merged._actors.update(other._actors)
        return merged

    def with_overrides(self, guards=None, actions=None, actors=None) -> "Implementations":
        return self.merge(Implementations(guards, actions, actors))
