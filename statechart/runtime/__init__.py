# statechart/runtime/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from statechart.runtime.actors import ActorScope, callback, promise
from statechart.runtime.interpreter import Interpreter
from statechart.runtime.messaging import MessageBus, MessagingPolicy
from statechart.runtime.snapshot import Snapshot
from statechart.runtime.supervisor import ActorSupervisor
from statechart.runtime.timers import ManualScheduler, ThreadingScheduler

__all__ = [
    "ActorScope",
    "ActorSupervisor",
    "Interpreter",
    "ManualScheduler",
    "MessageBus",
    "MessagingPolicy",
    "Snapshot",
    "ThreadingScheduler",
    "callback",
    "promise",
]
