# statechart/core/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from statechart.core.actions import assign, raise_event, send_parent, send_to
from statechart.core.definition import DefinitionModel, build
from statechart.core.errors import (
    ActionEvaluationError,
    ActorSetupError,
    DefinitionError,
    GuardEvaluationError,
    InterpreterStatusError,
    MessagingDropWarning,
    ScenarioMismatchError,
    StatechartError,
    StatechartWarning,
    UnhandledEventWarning,
    UnresolvedActorError,
)
from statechart.core.events import Event
from statechart.core.hooks import Hook, HookManager
from statechart.core.implementations import Implementations
from statechart.core.validations import Validator

__all__ = [
    "ActionEvaluationError",
    "ActorSetupError",
    "DefinitionError",
    "DefinitionModel",
    "Event",
    "GuardEvaluationError",
    "Hook",
    "HookManager",
    "Implementations",
    "InterpreterStatusError",
    "MessagingDropWarning",
    "ScenarioMismatchError",
    "StatechartError",
    "StatechartWarning",
    "UnhandledEventWarning",
    "UnresolvedActorError",
    "Validator",
    "assign",
    "build",
    "raise_event",
    "send_parent",
    "send_to",
]
