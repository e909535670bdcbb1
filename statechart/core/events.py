# statechart/core/events.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Dict, Iterator, Mapping, Union

INIT_EVENT = "statechart.init"
WILDCARD = "*"


class Event(Mapping[str, Any]):
    """
    Represents a signal or trigger within the state machine. The ``type`` is
    the dispatch key; everything else is payload, readable by key or attribute.
    Events are immutable once created.
    """

    __slots__ = ("_type", "_payload")

    def __init__(self, type: str, **payload: Any) -> None:
        """
        Create an event identified by its type.

        :param type: A string identifying this event.
        :param payload: Additional event data.
        """
        if not isinstance(type, str) or not type:
            raise ValueError("Event type must be a non-empty string")
        object.__setattr__(self, "_type", type)
        object.__setattr__(self, "_payload", dict(payload))

    @property
    def type(self) -> str:
        """The dispatch key of the event."""
        return self._type

    @property
    def payload(self) -> Dict[str, Any]:
        """A copy of the event payload."""
        return dict(self._payload)

    def __getitem__(self, key: str) -> Any:
        if key == "type":
            return self._type
        return self._payload[key]

    def __iter__(self) -> Iterator[str]:
        yield "type"
        yield from self._payload

    def __len__(self) -> int:
        return len(self._payload) + 1

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._payload[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Event is immutable")

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Event):
            return self._type == other._type and self._payload == other._payload
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._type, tuple(sorted(self._payload))))

    def __repr__(self) -> str:
        fields = "".join(f", {k}={v!r}" for k, v in self._payload.items())
        return f"Event({self._type!r}{fields})"


EventLike = Union[Event, str, Mapping[str, Any]]


def to_event(event: EventLike) -> Event:
    """
    Normalize a string, a ``{"type": ...}`` mapping or an Event into an Event.
    """
    if isinstance(event, Event):
        return event
    if isinstance(event, str):
        return Event(event)
    if isinstance(event, Mapping):
        data = dict(event)
        try:
            event_type = data.pop("type")
        except KeyError:
            raise ValueError(f"Event mapping has no 'type': {event!r}") from None
        return Event(event_type, **data)
    raise TypeError(f"Cannot interpret {event!r} as an event")


def done_invoke_type(actor_id: str) -> str:
    return f"done.invoke.{actor_id}"


def error_invoke_type(actor_id: str) -> str:
    return f"error.invoke.{actor_id}"


def after_type(delay_ms: Union[int, float], state_id: str) -> str:
    return f"after.{delay_ms}.{state_id}"


def done_state_type(state_id: str) -> str:
    return f"done.state.{state_id}"


def matches_pattern(pattern: str, event_type: str) -> bool:
    """
    Return True if ``event_type`` is selected by ``pattern``: an exact type,
    ``"*"`` or a dotted prefix wildcard such as ``"done.invoke.*"``.
    """
    if pattern == WILDCARD or pattern == event_type:
        return True
    if pattern.endswith(".*"):
        return event_type.startswith(pattern[:-1])
    return False
