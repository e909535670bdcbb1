# statechart/runtime/supervisor.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Mapping, Optional

from statechart.core.definition import DefinitionModel
from statechart.core.errors import ActorSetupError
from statechart.core.events import Event, error_invoke_type
from statechart.core.hooks import HookManager
from statechart.core.implementations import Implementations
from statechart.core.states import InvokeDefinition
from statechart.interfaces.protocols import Scheduler
from statechart.runtime.actors import (
    Actor,
    ActorScope,
    CallbackActor,
    CallbackLogic,
    MachineActor,
    PromiseActor,
    PromiseLogic,
    TimerActor,
)
from statechart.runtime.concurrency import with_lock

if TYPE_CHECKING:
    from statechart.runtime.interpreter import Interpreter

logger = logging.getLogger(__name__)


class ActorSupervisor:
    """
    Owns the live actors of one interpreter. Actors are spawned when their
    owning state is entered and stopped, exactly once, when it is exited.

    :param owner_id: Id of the interpreter, used in diagnostics.
    :param implementations: Registry resolving named actor logic.
    :param scheduler: Scheduler used by timer actors.
    :param adapters: External API adapters handed to actor logic.
    :param hooks: Hooks notified of actor setup failures.
    :param deliver: Puts an event into the owning interpreter's mailbox.
    :param send_to: Routes an addressed event through the messaging bus.
    :param child_factory: Builds the Interpreter for a child machine.
    """

    def __init__(
        self,
        owner_id: str,
        implementations: Implementations,
        scheduler: Scheduler,
        adapters: Optional[Mapping[str, Any]],
        hooks: HookManager,
        deliver: Callable[[Event], None],
        send_to: Callable[[str, Event], None],
        child_factory: Callable[[DefinitionModel, str, Any], "Interpreter"],
    ) -> None:
        self._owner_id = owner_id
        self._implementations = implementations
        self._scheduler = scheduler
        self._adapters = MappingProxyType(dict(adapters or {}))
        self._hooks = hooks
        self._deliver = deliver
        self._send_to = send_to
        self._child_factory = child_factory
        self._actors: Dict[str, Actor] = {}
        self._lock = threading.Lock()

    @property
    def adapters(self) -> Mapping[str, Any]:
        return self._adapters

    @property
    def actors(self) -> Mapping[str, Actor]:
        """A copy of the actor table, including failed actors still owned by an active state."""
        with with_lock(self._lock):
            return dict(self._actors)

    def get(self, actor_id: str) -> Optional[Actor]:
        """Return the live actor with ``actor_id``, or None."""
        with with_lock(self._lock):
            actor = self._actors.get(actor_id)
        if actor is not None and actor.is_live:
            return actor
        return None

    def spawn(self, invoke: InvokeDefinition, context: Any, event: Event) -> Optional[Actor]:
        """
        Create and start the actor declared by ``invoke``. A setup failure is
        not raised: the actor is marked failed, the failure is reported, and
        ``error.invoke.<id>`` is delivered so the machine may recover.
        """
        try:
            actor = self._create(invoke, context, event)
        except ActorSetupError as e:
            self._report(e)
            return None

        with with_lock(self._lock):
            previous = self._actors.get(invoke.id)
            self._actors[invoke.id] = actor
        if previous is not None:
            previous.stop()

        scope = ActorScope(actor, actor.input, self._adapters, self._send_to)
        try:
            actor.start(scope)
        except ActorSetupError as e:
            self._report(e)
            return actor
        logger.debug("[%s] Spawned %s actor '%s' for '%s'", self._owner_id, actor.kind, actor.id, invoke.owner)
        return actor

    def _create(self, invoke: InvokeDefinition, context: Any, event: Event) -> Actor:
        if invoke.is_timer:
            return TimerActor(invoke.id, invoke.owner, self._deliver, invoke.delay, invoke.event_type, self._scheduler)
        try:
            logic = self._implementations.actor(invoke.src) if isinstance(invoke.src, str) else invoke.src
            input = invoke.resolve_input(context, event)
        except Exception as e:
            raise ActorSetupError(invoke.id, e) from e

        if isinstance(logic, DefinitionModel):
            factory = lambda actor_id, parent: self._child_factory(logic, actor_id, parent)  # noqa: E731
            return MachineActor(invoke.id, invoke.owner, input, self._deliver, factory)
        if isinstance(logic, PromiseLogic):
            return PromiseActor(invoke.id, invoke.owner, input, self._deliver, logic)
        if isinstance(logic, CallbackLogic):
            return CallbackActor(invoke.id, invoke.owner, input, self._deliver, logic)
        if callable(logic):
            return CallbackActor(invoke.id, invoke.owner, input, self._deliver, CallbackLogic(logic))
        raise ActorSetupError(invoke.id, TypeError(f"Cannot run {logic!r} as an actor"))

    def _report(self, error: ActorSetupError) -> None:
        logger.error("[%s] %s", self._owner_id, error, exc_info=error.cause)
        self._hooks.execute_on_error(error)
        self._deliver(Event(error_invoke_type(error.actor_id), error=error.cause))

    def stop(self, actor_id: str) -> None:
        with with_lock(self._lock):
            actor = self._actors.pop(actor_id, None)
        if actor is not None:
            actor.stop()
            logger.debug("[%s] Stopped actor '%s'", self._owner_id, actor_id)

    def stop_owned_by(self, state_ids: Iterable[str]) -> None:
        """Stop every actor owned by ``state_ids``, in the order given."""
        for state_id in state_ids:
            with with_lock(self._lock):
                owned = [actor_id for actor_id, actor in self._actors.items() if actor.owner == state_id]
            for actor_id in owned:
                self.stop(actor_id)

    def stop_all(self) -> None:
        with with_lock(self._lock):
            remaining: List[str] = list(self._actors)
        for actor_id in reversed(remaining):
            self.stop(actor_id)
