# statechart/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, List, Optional


class StatechartError(Exception):
    """
    Base exception class for errors within the statechart library.
    """


class DefinitionError(StatechartError):
    """
    Raised when a schema cannot be turned into a valid DefinitionModel.
    Every problem found during construction is collected in ``errors``.
    """

    def __init__(self, errors: List[str]) -> None:
        self.errors = list(errors)
        super().__init__("Invalid machine definition:\n" + "\n".join(f"  - {e}" for e in self.errors))


class _EvaluationError(StatechartError):
    """
    Shared shape for guard and action failures raised while processing an event.
    """

    kind = "evaluation"

    def __init__(self, name: str, state_id: Optional[str], event: Any, cause: BaseException) -> None:
        self.name = name
        self.state_id = state_id
        self.event = event
        self.cause = cause
        event_type = getattr(event, "type", event)
        super().__init__(f"{self.kind} '{name}' failed in state '{state_id}' on event '{event_type}': {cause!r}")


class GuardEvaluationError(_EvaluationError):
    """
    Raised when a registered guard throws. Fatal to the ``send`` call that
    triggered it; configuration and context keep their pre-event values.
    """

    kind = "Guard"


class ActionEvaluationError(_EvaluationError):
    """
    Raised when a registered action throws. Fatal to the ``send`` call that
    triggered it; configuration and context keep their pre-event values.
    """

    kind = "Action"


class ActorSetupError(StatechartError):
    """
    Raised (and caught by the supervisor) when an invoked actor fails during setup.
    """

    def __init__(self, actor_id: str, cause: BaseException) -> None:
        self.actor_id = actor_id
        self.cause = cause
        super().__init__(f"Actor '{actor_id}' failed to start: {cause!r}")


class UnresolvedActorError(StatechartError):
    """
    Raised by the messaging bus under the RAISE policy when a target id does
    not resolve to a live actor.
    """

    def __init__(self, actor_id: str, event: Any) -> None:
        self.actor_id = actor_id
        self.event = event
        super().__init__(f"No live actor with id '{actor_id}' to receive '{getattr(event, 'type', event)}'")


class InterpreterStatusError(StatechartError):
    """
    Raised when an interpreter operation is invalid for its current status.
    """

    def __init__(self, message: str, operation: str) -> None:
        self.operation = operation
        super().__init__(message)


class ScenarioMismatchError(StatechartError, AssertionError):
    """
    Raised when replaying a generated path does not end in the path's terminal configuration.
    """

    def __init__(self, description: str, expected: Any, actual: Any) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"{description}: expected configuration {expected}, got {actual}")


class StatechartWarning(UserWarning):
    """
    Base class for non-fatal diagnostics. Diagnostics are logged and handed to
    hooks; they are not raised.
    """


class UnhandledEventWarning(StatechartWarning):
    """
    An event matched no transition at any active state. State and context are unchanged.
    """


class MessagingDropWarning(StatechartWarning):
    """
    A ``send_to`` target did not resolve to a live actor and the message was dropped.
    """
