# statechart/core/definition.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Declarative machine definitions.

A schema is plain nested data (dicts, lists, strings) in the shape::

    {
        "id": "colorPicker",
        "initial": "idle",
        "context": {"selected": None},
        "states": {
            "idle": {"on": {"SELECT": {"target": "selected", "actions": "select"}}},
            "selected": {"on": {"RESET": {"target": "idle", "actions": "reset"}}},
        },
    }

``build`` parses it once into a read-only DefinitionModel, collecting every
problem into a single DefinitionError. Nothing is validated at run time.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from statechart.core.actions import to_action_refs
from statechart.core.errors import DefinitionError
from statechart.core.events import WILDCARD, after_type, done_invoke_type, error_invoke_type
from statechart.core.guards import to_guard_ref
from statechart.core.implementations import Implementations
from statechart.core.states import ATOMIC, COMPOUND, FINAL, STATE_TYPES, TIMER_SRC, InvokeDefinition, StateNode
from statechart.core.transitions import Transition
from statechart.interfaces.types import Schema

logger = logging.getLogger(__name__)

_NODE_KEYS = frozenset(
    {"id", "initial", "states", "type", "on", "after", "entry", "exit", "invoke", "context", "description"}
)
_TRANSITION_KEYS = frozenset({"target", "guard", "actions", "external", "description"})
_INVOKE_KEYS = frozenset({"id", "src", "input", "on_done", "on_error"})


class DefinitionModel:
    """
    The validated, immutable graph built from a schema. Shared by every
    Interpreter running the machine and by the path explorer.
    """

    def __init__(self, root_id: str, nodes: Dict[str, StateNode], context: Any, schema: Mapping[str, Any]) -> None:
        self._root_id = root_id
        self._nodes = nodes
        self._context = context
        self._schema = schema
        self._implementations = Implementations()
        # (state id, pattern) lookup; wildcard patterns kept per state, longest prefix first
        self._exact: Dict[Tuple[str, str], Tuple[Transition, ...]] = {}
        self._wildcards: Dict[str, List[Tuple[str, Tuple[Transition, ...]]]] = {}

    def _index(self) -> None:
        for node in self._nodes.values():
            wildcards = []
            for pattern, candidates in node.transitions.items():
                if pattern == WILDCARD or pattern.endswith(".*"):
                    wildcards.append((pattern, candidates))
                else:
                    self._exact[(node.id, pattern)] = candidates
            # "*" sorts last: its prefix is the empty string
            wildcards.sort(key=lambda item: -len(item[0].rstrip("*")))
            self._wildcards[node.id] = wildcards
            node.transitions = MappingProxyType(dict(node.transitions))

    @property
    def id(self) -> str:
        return self._root_id

    @property
    def root(self) -> StateNode:
        return self._nodes[self._root_id]

    @property
    def nodes(self) -> Mapping[str, StateNode]:
        return MappingProxyType(self._nodes)

    @property
    def schema(self) -> Mapping[str, Any]:
        return self._schema

    @property
    def implementations(self) -> Implementations:
        """The registry the machine was built with; interpreters fall back to it."""
        return self._implementations

    def get_node(self, state_id: str) -> StateNode:
        try:
            return self._nodes[state_id]
        except KeyError:
            raise KeyError(f"No state with id '{state_id}' in machine '{self._root_id}'") from None

    def __contains__(self, state_id: object) -> bool:
        return state_id in self._nodes

    def __iter__(self) -> Iterator[StateNode]:
        return iter(self._nodes.values())

    def create_context(self, input: Any = None) -> Any:
        """Build the initial context, calling a context factory with ``input``."""
        if callable(self._context):
            return self._context(input)
        if isinstance(self._context, Mapping):
            return dict(self._context)
        return self._context

    def ancestors(self, state_id: str) -> List[str]:
        """Ids of ``state_id`` and every ancestor, ordered leaf to root."""
        chain = []
        current: Optional[str] = state_id
        while current is not None:
            chain.append(current)
            current = self._nodes[current].parent
        return chain

    def path_to(self, state_id: str) -> Tuple[str, ...]:
        """Ids from the root down to ``state_id``: the configuration when it is the leaf."""
        return tuple(reversed(self.ancestors(state_id)))

    def is_descendant(self, state_id: str, ancestor_id: str) -> bool:
        return ancestor_id in self.ancestors(state_id)

    def initial_leaf(self, state_id: str) -> str:
        """Follow initial children from ``state_id`` down to an atomic or final state."""
        node = self._nodes[state_id]
        while node.initial is not None:
            node = self._nodes[node.initial]
        return node.id

    def initial_configuration(self) -> Tuple[str, ...]:
        return self.path_to(self.initial_leaf(self._root_id))

    def lowest_common_ancestor(self, a: str, b: str) -> Optional[str]:
        """The deepest state that is an ancestor-or-self of both ``a`` and ``b``."""
        b_chain = set(self.ancestors(b))
        for candidate in self.ancestors(a):
            if candidate in b_chain:
                return candidate
        return None

    def transitions_for(self, state_id: str, event_type: str) -> Tuple[Transition, ...]:
        """
        Candidates defined on ``state_id`` for ``event_type``: exact pattern
        first, then prefix wildcards (longest first), then ``"*"``.
        """
        exact = self._exact.get((state_id, event_type), ())
        wildcards = self._wildcards.get(state_id)
        if not wildcards:
            return exact
        matched = list(exact)
        for pattern, candidates in wildcards:
            if pattern == WILDCARD or event_type.startswith(pattern[:-1]):
                matched.extend(candidates)
        return tuple(matched)

    def all_transitions(self) -> Iterator[Transition]:
        for node in self._nodes.values():
            for candidates in node.transitions.values():
                yield from candidates

    def event_types(self) -> List[str]:
        """Every non-wildcard event type the machine reacts to, in declaration order."""
        seen: Dict[str, None] = {}
        for transition in self.all_transitions():
            if transition.event != WILDCARD and not transition.event.endswith(".*"):
                seen.setdefault(transition.event, None)
        return list(seen)

    def invokes(self) -> Iterator[InvokeDefinition]:
        for node in self._nodes.values():
            yield from node.invokes

    def resolve_target(self, source_id: str, target: str) -> str:
        """
        Resolve a target as written on ``source_id``:
        ``"#id"`` absolute, ``".a.b"`` a descendant of the source, otherwise a
        path relative to the source's parent (or to the source when it is the root).

        :raises KeyError: If the target does not name a state.
        """
        if target.startswith("#"):
            state_id = target[1:]
            if state_id not in self._nodes:
                raise KeyError(target)
            return state_id
        source = self._nodes[source_id]
        if target.startswith("."):
            base = source
            keys = target[1:].split(".")
        else:
            base = self._nodes[source.parent] if source.parent is not None else source
            keys = target.split(".")
        for key in keys:
            match = None
            for child_id in base.children:
                if self._nodes[child_id].key == key:
                    match = self._nodes[child_id]
                    break
            if match is None:
                raise KeyError(target)
            base = match
        return base.id

    def __repr__(self) -> str:
        return f"DefinitionModel({self._root_id!r}, states={len(self._nodes)})"


class _SchemaParser:
    """
    Internal two-pass parser: the first pass creates nodes and ids, the second
    resolves transition targets once every id is known.
    """

    def __init__(self, schema: Mapping[str, Any]) -> None:
        self._schema = schema
        self._errors: List[str] = []
        self._nodes: Dict[str, StateNode] = {}
        self._raw: List[Tuple[StateNode, Mapping[str, Any]]] = []

    def parse(self) -> Tuple[Optional[DefinitionModel], List[str]]:
        if not isinstance(self._schema, Mapping):
            return None, [f"Schema must be a mapping, got {type(self._schema).__name__}"]
        root_id = self._schema.get("id")
        if not isinstance(root_id, str) or not root_id:
            return None, ["Root state must declare a non-empty string 'id'"]

        self._parse_node(self._schema, key=root_id, parent=None, path=(root_id,), node_id=root_id)
        model = DefinitionModel(root_id, self._nodes, self._schema.get("context"), self._schema)
        for node, raw in self._raw:
            self._parse_transitions(model, node, raw)
        return model, self._errors

    def _error(self, message: str) -> None:
        self._errors.append(message)

    def _parse_node(
        self, raw: Mapping[str, Any], key: str, parent: Optional[str], path: Tuple[str, ...], node_id: str
    ) -> None:
        if not isinstance(raw, Mapping):
            self._error(f"State '{node_id}' must be a mapping, got {type(raw).__name__}")
            return
        unknown = set(raw) - _NODE_KEYS
        if unknown:
            self._error(f"State '{node_id}' has unknown keys: {sorted(unknown)}")
        if parent is not None and "context" in raw:
            self._error(f"State '{node_id}' declares 'context'; only the root may")
        if node_id in self._nodes:
            self._error(f"Duplicate state id '{node_id}'")
            return

        states = raw.get("states") or {}
        if not isinstance(states, Mapping):
            self._error(f"'states' of '{node_id}' must be a mapping")
            states = {}
        declared_type = raw.get("type")
        if declared_type is not None and declared_type not in STATE_TYPES:
            self._error(f"State '{node_id}' has unknown type '{declared_type}'")
        state_type = declared_type if declared_type in STATE_TYPES else (COMPOUND if states else ATOMIC)

        node = StateNode(id=node_id, key=key, parent=parent, path=path, type=state_type)
        node.description = raw.get("description")
        try:
            node.entry = to_action_refs(raw.get("entry"))
            node.exit = to_action_refs(raw.get("exit"))
        except ValueError as e:
            self._error(f"State '{node_id}': {e}")
        self._nodes[node_id] = node

        children = []
        for child_key, child_raw in states.items():
            if not isinstance(child_key, str) or not child_key or "." in child_key:
                self._error(f"Invalid state key {child_key!r} under '{node_id}': keys must be non-empty and dot-free")
                continue
            child_id = child_raw.get("id") if isinstance(child_raw, Mapping) and child_raw.get("id") else None
            child_id = child_id or f"{node_id}.{child_key}"
            if self._parse_child(child_raw, child_key, node_id, path + (child_key,), child_id):
                children.append(child_id)
        node.children = tuple(children)

        initial = raw.get("initial")
        if children and state_type != FINAL:
            if initial is None:
                self._error(f"Compound state '{node_id}' must declare exactly one initial child")
            else:
                match = [c for c in children if self._nodes[c].key == initial]
                if not match:
                    self._error(f"Initial state '{initial}' of '{node_id}' is not one of its children")
                else:
                    node.initial = match[0]
        elif initial is not None:
            self._error(f"State '{node_id}' declares initial '{initial}' but has no children")

        self._raw.append((node, raw))

    def _parse_child(self, raw: Any, key: str, parent: str, path: Tuple[str, ...], node_id: str) -> bool:
        before = node_id in self._nodes
        self._parse_node(raw, key=key, parent=parent, path=path, node_id=node_id)
        return not before and node_id in self._nodes

    def _parse_transitions(self, model: DefinitionModel, node: StateNode, raw: Mapping[str, Any]) -> None:
        table: Dict[str, List[Transition]] = {}

        on = raw.get("on") or {}
        if not isinstance(on, Mapping):
            self._error(f"'on' of '{node.id}' must be a mapping")
            on = {}
        for pattern, config in on.items():
            if not isinstance(pattern, str) or not pattern:
                self._error(f"Invalid event type {pattern!r} on '{node.id}'")
                continue
            self._add_candidates(model, node, pattern, config, table)

        invokes: List[InvokeDefinition] = []
        declared = raw.get("invoke")
        if declared is not None:
            items = declared if isinstance(declared, (list, tuple)) else [declared]
            for index, item in enumerate(items):
                invoke = self._parse_invoke(model, node, item, index, table)
                if invoke is not None:
                    invokes.append(invoke)

        after = raw.get("after") or {}
        if not isinstance(after, Mapping):
            self._error(f"'after' of '{node.id}' must be a mapping")
            after = {}
        for delay, config in after.items():
            try:
                delay_ms = float(delay)
            except (TypeError, ValueError):
                self._error(f"Delay {delay!r} on '{node.id}' is not a number")
                continue
            if delay_ms < 0:
                self._error(f"Delay {delay!r} on '{node.id}' is negative")
                continue
            label = int(delay_ms) if delay_ms.is_integer() else delay_ms
            event_type = after_type(label, node.id)
            invokes.append(
                InvokeDefinition(
                    id=event_type, src=TIMER_SRC, owner=node.id, delay=delay_ms / 1000.0, event_type=event_type
                )
            )
            self._add_candidates(model, node, event_type, config, table)

        node.invokes = tuple(invokes)
        node.transitions = {pattern: tuple(candidates) for pattern, candidates in table.items()}

    def _parse_invoke(
        self,
        model: DefinitionModel,
        node: StateNode,
        item: Any,
        index: int,
        table: Dict[str, List[Transition]],
    ) -> Optional[InvokeDefinition]:
        if not isinstance(item, Mapping):
            self._error(f"Invoke #{index} on '{node.id}' must be a mapping")
            return None
        unknown = set(item) - _INVOKE_KEYS
        if unknown:
            self._error(f"Invoke #{index} on '{node.id}' has unknown keys: {sorted(unknown)}")
        if item.get("src") is None:
            self._error(f"Invoke #{index} on '{node.id}' has no 'src'")
            return None
        actor_id = item.get("id") or f"{node.id}:invocation[{index}]"
        if "on_done" in item:
            self._add_candidates(model, node, done_invoke_type(actor_id), item["on_done"], table)
        if "on_error" in item:
            self._add_candidates(model, node, error_invoke_type(actor_id), item["on_error"], table)
        return InvokeDefinition(id=actor_id, src=item["src"], owner=node.id, input=item.get("input"))

    def _add_candidates(
        self,
        model: DefinitionModel,
        node: StateNode,
        pattern: str,
        config: Any,
        table: Dict[str, List[Transition]],
    ) -> None:
        configs: Sequence[Any] = config if isinstance(config, (list, tuple)) else [config]
        candidates = table.setdefault(pattern, [])
        for item in configs:
            if item is None or isinstance(item, str):
                item = {"target": item}
            if not isinstance(item, Mapping):
                self._error(f"Transition '{pattern}' on '{node.id}' must be a string, mapping or list")
                continue
            unknown = set(item) - _TRANSITION_KEYS
            if unknown:
                self._error(f"Transition '{pattern}' on '{node.id}' has unknown keys: {sorted(unknown)}")
            target_id = None
            target = item.get("target")
            if target is not None:
                try:
                    target_id = model.resolve_target(node.id, target)
                except (KeyError, AttributeError):
                    self._error(f"Transition '{pattern}' on '{node.id}' targets unknown state '{target}'")
                    continue
            try:
                transition = Transition(
                    source=node.id,
                    event=pattern,
                    target=target_id,
                    order=len(candidates),
                    guard=to_guard_ref(item.get("guard")),
                    actions=to_action_refs(item.get("actions")),
                    external=bool(item.get("external", False)),
                    description=item.get("description"),
                )
            except ValueError as e:
                self._error(f"Transition '{pattern}' on '{node.id}': {e}")
                continue
            candidates.append(transition)


def build(
    schema: Schema,
    implementations: Optional[Implementations] = None,
    validator: Optional[Callable[..., None]] = None,
) -> DefinitionModel:
    """
    Parse and validate ``schema`` into a DefinitionModel.

    :param schema: The declarative machine definition.
    :param implementations: When given, every guard, action and actor name
        referenced by the schema must be registered in it. The model keeps it
        as the default registry of interpreters running the machine.
    :param validator: Optional Validator replacing the default rules.
    :raises DefinitionError: Listing every problem found.
    """
    from statechart.core.validations import Validator

    model, errors = _SchemaParser(schema).parse()
    if model is not None:
        errors.extend((validator or Validator()).collect_errors(model, implementations))
    if errors:
        raise DefinitionError(errors)
    model._index()
    if implementations is not None:
        model._implementations = implementations
    logger.debug("Built machine '%s' with %d states", model.id, len(model.nodes))
    return model
