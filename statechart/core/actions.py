# statechart/core/actions.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from statechart.core.errors import ActionEvaluationError
from statechart.core.events import Event, EventLike, to_event
from statechart.core.implementations import Implementations, Reference

PARENT = "parent"


class ActionRef(Reference):
    """
    A context transform attached to a transition or to state entry/exit.
    The resolved callable is invoked as ``fn(context, event, **params)`` and
    returns the next context, or ``None`` to leave it unchanged.
    """


class Effect:
    """
    An action whose only outcome is a message. Effects do not touch context;
    the interpreter resolves them while running the action chain and performs
    them after the chain has completed.
    """

    name = "effect"

    def resolve(self, context: Any, event: Event) -> "Message":
        raise NotImplementedError()

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class Message:
    """A resolved effect: deliver ``event`` to ``target`` (an actor id, ``PARENT`` or ``None`` for self)."""

    __slots__ = ("target", "event")

    def __init__(self, target: Optional[str], event: Event) -> None:
        self.target = target
        self.event = event

    def __repr__(self) -> str:
        return f"Message(target={self.target!r}, event={self.event!r})"


Expr = Union[Any, Callable[[Any, Event], Any]]


def _evaluate(expr: Expr, context: Any, event: Event) -> Any:
    return expr(context, event) if callable(expr) else expr


class SendTo(Effect):
    name = "send_to"

    def __init__(self, actor_id: Expr, event: Union[EventLike, Callable[[Any, Event], EventLike]]) -> None:
        self.actor_id = actor_id
        self.event = event

    def resolve(self, context: Any, event: Event) -> Message:
        return Message(_evaluate(self.actor_id, context, event), to_event(_evaluate(self.event, context, event)))

    def __repr__(self) -> str:
        return f"SendTo({self.actor_id!r}, {self.event!r})"


class SendParent(SendTo):
    name = "send_parent"

    def __init__(self, event: Union[EventLike, Callable[[Any, Event], EventLike]]) -> None:
        super().__init__(PARENT, event)


class RaiseEvent(SendTo):
    name = "raise_event"

    def __init__(self, event: Union[EventLike, Callable[[Any, Event], EventLike]]) -> None:
        super().__init__(None, event)


def send_to(actor_id: Expr, event: Union[EventLike, Callable[[Any, Event], EventLike]]) -> SendTo:
    """
    Address ``event`` to an actor. The id is resolved against the live actor
    table when the action executes, not when the definition is built.
    """
    return SendTo(actor_id, event)


def send_parent(event: Union[EventLike, Callable[[Any, Event], EventLike]]) -> SendParent:
    """Address ``event`` to the interpreter that invoked this machine."""
    return SendParent(event)


def raise_event(event: Union[EventLike, Callable[[Any, Event], EventLike]]) -> RaiseEvent:
    """Queue ``event`` on the machine's own mailbox, after the current event."""
    return RaiseEvent(event)


def assign(updater: Optional[Callable[..., Mapping[str, Any]]] = None, **fields: Any) -> Callable[..., dict]:
    """
    Build a pure context update. ``updater(context, event, **params)`` returns
    a partial mapping; each keyword is either a literal or a
    ``fn(context, event)``. The context is copied, never mutated in place.

    Example::

        assign(selected=lambda ctx, ev: ev.value)
        assign(lambda ctx, ev, value: {"value": value, "dirty": True})
    """

    def _assign(context: Any, event: Event, **params: Any) -> dict:
        updated = dict(context or {})
        if updater is not None:
            updated.update(updater(context, event, **params))
        for key, value in fields.items():
            updated[key] = value(context, event) if callable(value) else value
        return updated

    _assign.__name__ = "assign"
    return _assign


ActionSpec = Union[str, Mapping[str, Any], Callable[..., Any], Effect, ActionRef]


def to_action_refs(spec: Any) -> Tuple[Union[ActionRef, Effect], ...]:
    """
    Parse the ``actions``/``entry``/``exit`` value of a schema into an
    ordered tuple of action references and effects.
    """
    if spec is None:
        return ()
    items = spec if isinstance(spec, (list, tuple)) else [spec]
    refs: List[Union[ActionRef, Effect]] = []
    for item in items:
        if isinstance(item, (ActionRef, Effect)):
            refs.append(item)
        elif isinstance(item, str):
            refs.append(ActionRef(name=item))
        elif isinstance(item, Mapping):
            if "type" not in item:
                raise ValueError(f"Action mapping has no 'type': {item!r}")
            refs.append(ActionRef(name=item["type"], params=item.get("params")))
        elif callable(item):
            refs.append(ActionRef(fn=item))
        else:
            raise ValueError(f"Cannot interpret {item!r} as an action")
    return tuple(refs)


def run_actions(
    actions: Tuple[Union[ActionRef, Effect], ...],
    implementations: Implementations,
    context: Any,
    event: Event,
    state_id: Optional[str],
    messages: List[Message],
) -> Any:
    """
    Apply ``actions`` in declaration order, each receiving the context the
    previous one produced. Effects are resolved into ``messages``.

    :return: The resulting context.
    :raises ActionEvaluationError: If an action throws or is not registered.
    """
    for action in actions:
        try:
            if isinstance(action, Effect):
                messages.append(action.resolve(context, event))
                continue
            fn = implementations.action(action)
            result = fn(context, event, **action.resolve_params(context, event))
        except Exception as e:
            raise ActionEvaluationError(action.name, state_id, event, e) from e
        if result is not None:
            context = result
    return context
