# statechart/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""statechart: hierarchical statechart interpreter and model-based path explorer

Machines are written as plain nested data, built once into a read-only
DefinitionModel, and run by any number of Interpreter instances. The same
model feeds the ModelExplorer, which derives replayable test scenarios.

Responsibilities:
    - Definition parsing and validation
    - Run-to-completion event processing with atomic steps
    - Actors bound to state lifetime (callbacks, promises, timers, child machines)
    - Addressed messaging between actors
    - Reachability graphs, path generation and coverage

Cross-cutting Concerns:
    Thread Safety:
        - ``send`` may be called from any thread
        - Exactly one thread processes a machine's mailbox at a time

    Error Handling:
        - Structured error hierarchy rooted at StatechartError
        - Failed steps leave configuration and context untouched

    Logging:
        - Module loggers under the ``statechart`` namespace
        - No handlers installed by the library
"""

from statechart.core import (
    DefinitionError,
    DefinitionModel,
    Event,
    Hook,
    Implementations,
    StatechartError,
    assign,
    build,
    raise_event,
    send_parent,
    send_to,
)
from statechart.explorer import ModelExplorer, ReachabilityGraph
from statechart.runtime import Interpreter, ManualScheduler, MessagingPolicy, Snapshot, callback, promise

__version__ = "0.1.0"

__all__ = [
    "DefinitionError",
    "DefinitionModel",
    "Event",
    "Hook",
    "Implementations",
    "Interpreter",
    "ManualScheduler",
    "MessagingPolicy",
    "ModelExplorer",
    "ReachabilityGraph",
    "Snapshot",
    "StatechartError",
    "assign",
    "build",
    "callback",
    "promise",
    "raise_event",
    "send_parent",
    "send_to",
]
