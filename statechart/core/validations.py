# statechart/core/validations.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable, List, Optional

from statechart.core.actions import ActionRef
from statechart.core.errors import DefinitionError
from statechart.core.events import done_invoke_type, error_invoke_type

if TYPE_CHECKING:
    from statechart.core.definition import DefinitionModel
    from statechart.core.implementations import Implementations

Rule = Callable[["DefinitionModel", Optional["Implementations"]], Iterable[str]]


class Validator:
    """
    Performs construction-time validation of a parsed definition, ensuring
    states, transitions, invocations and named references are consistent.
    """

    def __init__(self, extra_rules: Optional[List[Rule]] = None) -> None:
        """
        Initialize the validator with the default rules plus any extra ones.

        :param extra_rules: Callables ``rule(model, implementations)`` yielding error messages.
        """
        self._rules_engine = _ValidationRulesEngine(extra_rules)

    def collect_errors(
        self, model: "DefinitionModel", implementations: Optional["Implementations"] = None
    ) -> List[str]:
        """
        Apply every rule and return all problems found.

        :param model: The parsed definition.
        :param implementations: When given, named references must resolve in it.
        """
        return self._rules_engine.run(model, implementations)

    def validate(self, model: "DefinitionModel", implementations: Optional["Implementations"] = None) -> None:
        """
        Check the definition for consistency.

        :raises DefinitionError: If any rule fails.
        """
        errors = self.collect_errors(model, implementations)
        if errors:
            raise DefinitionError(errors)


class _ValidationRulesEngine:
    """
    Internal engine applying a set of validation rules to a definition.
    Centralizes validation logic for easier maintenance.
    """

    def __init__(self, extra_rules: Optional[List[Rule]] = None) -> None:
        self._rules: List[Rule] = [
            _DefaultValidationRules.validate_structure,
            _DefaultValidationRules.validate_invocations,
            _DefaultValidationRules.validate_invoke_events,
            _DefaultValidationRules.validate_references,
        ]
        self._rules.extend(extra_rules or [])

    def run(self, model: "DefinitionModel", implementations: Optional["Implementations"]) -> List[str]:
        errors: List[str] = []
        for rule in self._rules:
            errors.extend(rule(model, implementations))
        return errors


class _DefaultValidationRules:
    """
    Provides built-in validation rules ensuring basic correctness of a
    definition out of the box.
    """

    @staticmethod
    def validate_structure(model: "DefinitionModel", implementations: Optional["Implementations"]) -> Iterable[str]:
        """
        - The root is not a final state.
        - Final states have no children.
        """
        if model.root.is_final:
            yield f"Root state '{model.id}' cannot be final"
        for node in model:
            if node.is_final and node.children:
                yield f"Final state '{node.id}' cannot have child states"

    @staticmethod
    def validate_invocations(model: "DefinitionModel", implementations: Optional["Implementations"]) -> Iterable[str]:
        """
        Invoke ids are unique across the machine and not owned by final states.
        """
        seen = set()
        for invoke in model.invokes():
            if invoke.id in seen:
                yield f"Duplicate invoke id '{invoke.id}'"
            seen.add(invoke.id)
            if model.get_node(invoke.owner).is_final:
                yield f"Final state '{invoke.owner}' cannot invoke actors"

    @staticmethod
    def validate_invoke_events(model: "DefinitionModel", implementations: Optional["Implementations"]) -> Iterable[str]:
        """
        Transitions on ``done.invoke.<id>`` or ``error.invoke.<id>`` must name
        an actor invoked somewhere in the machine.
        """
        known = set()
        for invoke in model.invokes():
            if not invoke.is_timer:
                known.add(done_invoke_type(invoke.id))
                known.add(error_invoke_type(invoke.id))
        for transition in model.all_transitions():
            event = transition.event
            if event.endswith(".*"):
                continue
            if (event.startswith("done.invoke.") or event.startswith("error.invoke.")) and event not in known:
                yield f"Transition on '{event}' in '{transition.source}' refers to no invoked actor"

    @staticmethod
    def validate_references(model: "DefinitionModel", implementations: Optional["Implementations"]) -> Iterable[str]:
        """
        Every named guard, action and actor resolves in ``implementations``.
        Skipped when no registry is supplied.
        """
        if implementations is None:
            return
        for node in model:
            for ref in node.entry + node.exit:
                if isinstance(ref, ActionRef) and ref.is_named and not implementations.has_action(ref.name):
                    yield f"Action '{ref.name}' used by '{node.id}' is not implemented"
            for invoke in node.invokes:
                if invoke.is_timer or not isinstance(invoke.src, str):
                    continue
                if not implementations.has_actor(invoke.src):
                    yield f"Actor '{invoke.src}' invoked by '{node.id}' is not implemented"
        for transition in model.all_transitions():
            guard = transition.guard
            if guard is not None and guard.is_named and not implementations.has_guard(guard.name):
                yield f"Guard '{guard.name}' on '{transition.source}' is not implemented"
            for ref in transition.actions:
                if isinstance(ref, ActionRef) and ref.is_named and not implementations.has_action(ref.name):
                    yield f"Action '{ref.name}' on '{transition.source}' is not implemented"
