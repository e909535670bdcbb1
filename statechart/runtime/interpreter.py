# statechart/runtime/interpreter.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import threading
from types import MappingProxyType
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from statechart.core.actions import Message, run_actions
from statechart.core.definition import DefinitionModel
from statechart.core.errors import (
    ActionEvaluationError,
    GuardEvaluationError,
    InterpreterStatusError,
    UnhandledEventWarning,
    UnresolvedActorError,
)
from statechart.core.events import INIT_EVENT, Event, EventLike, done_invoke_type, done_state_type, to_event
from statechart.core.guards import evaluate_guard
from statechart.core.hooks import HookManager
from statechart.core.implementations import Implementations
from statechart.core.transitions import Transition
from statechart.interfaces.types import Listener, Unsubscribe
from statechart.runtime.actors import Actor
from statechart.runtime.concurrency import with_lock
from statechart.runtime.event_queue import Mailbox
from statechart.runtime.messaging import MessageBus, MessagingPolicy
from statechart.runtime.snapshot import DONE, NOT_STARTED, RUNNING, STOPPED, Snapshot
from statechart.runtime.supervisor import ActorSupervisor
from statechart.runtime.timers import ThreadingScheduler

logger = logging.getLogger(__name__)

_STOP = object()


class _Step:
    """The outcome of resolving one event, computed before anything is committed."""

    __slots__ = ("event", "transition", "exits", "entries", "configuration", "context", "messages")

    def __init__(
        self,
        event: Event,
        transition: Optional[Transition],
        exits: Sequence[str],
        entries: Sequence[str],
        configuration: Tuple[str, ...],
        context: Any,
        messages: List[Message],
    ) -> None:
        self.event = event
        self.transition = transition
        self.exits = exits
        self.entries = entries
        self.configuration = configuration
        self.context = context
        self.messages = messages


class Interpreter:
    """
    Runs one instance of a DefinitionModel.

    Events are queued in a private mailbox and processed one at a time to
    completion. Sends made while an event is being processed (from guards,
    actions, listeners, hooks or actors) are queued behind it.

    Each step is atomic: guards and the whole action chain (exit, transition,
    entry) are evaluated first, and only a chain that completes is committed.
    A failing guard or action raises from the ``send`` (or ``start``) call
    that was draining the mailbox, leaving configuration and context as they
    were.

    :param model: The machine definition to run.
    :param implementations: Registry resolving named guards, actions and actors.
        Entries override those the model was built with.
    :param hooks: A HookManager or a list of hook objects.
    :param scheduler: Scheduler for delayed transitions; a ThreadingScheduler by default.
    :param adapters: External API adapters handed to invoked actors.
    :param messaging_policy: What to do when ``send_to`` names no live actor.
    :param id: Instance id; defaults to the model id.
    :param parent: Inbound channel of the invoking machine, for child machines.
    """

    def __init__(
        self,
        model: DefinitionModel,
        implementations: Optional[Implementations] = None,
        hooks: Union[HookManager, Sequence[Any], None] = None,
        scheduler: Any = None,
        adapters: Optional[Mapping[str, Any]] = None,
        messaging_policy: MessagingPolicy = MessagingPolicy.WARN,
        id: Optional[str] = None,
        parent: Optional[Any] = None,
    ) -> None:
        self._model = model
        self._implementations = model.implementations.merge(implementations)
        self._hooks = hooks if isinstance(hooks, HookManager) else HookManager(list(hooks or []))
        self._scheduler = scheduler or ThreadingScheduler()
        self._adapters = dict(adapters or {})
        self._id = id or model.id
        self._parent = parent

        self._mailbox = Mailbox()
        self._lock = threading.Lock()
        self._status = NOT_STARTED
        self._stopping = False
        self._configuration: Tuple[str, ...] = ()
        self._context: Any = None
        self._listeners: List[Listener] = []

        self._supervisor = ActorSupervisor(
            self._id,
            self._implementations,
            self._scheduler,
            self._adapters,
            self._hooks,
            deliver=self.send,
            send_to=self._route,
            child_factory=self._spawn_child,
        )
        self._bus = MessageBus(
            self._id,
            resolve=self._supervisor.get,
            enqueue=self._mailbox.put,
            parent=parent,
            policy=messaging_policy,
            hooks=self._hooks,
        )

    # ---------------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self._id

    @property
    def model(self) -> DefinitionModel:
        return self._model

    @property
    def status(self) -> str:
        return self._status

    @property
    def hooks(self) -> HookManager:
        return self._hooks

    @property
    def scheduler(self) -> Any:
        return self._scheduler

    @property
    def actors(self) -> Mapping[str, Actor]:
        """Actors currently owned by active states, by id."""
        return self._supervisor.actors

    @property
    def snapshot(self) -> Snapshot:
        with with_lock(self._lock):
            keys = tuple(self._model.get_node(state_id).key for state_id in self._configuration)
            context = self._context
            if isinstance(context, dict):
                context = MappingProxyType(context)
            return Snapshot(self._configuration, context, self._status, keys)

    def start(self, input: Any = None) -> Snapshot:
        """
        Enter the initial configuration, spawning declared actors, then
        process any events sent before start.

        :param input: Passed to a context factory and exposed on the init event.
        :return: The snapshot after start-up.
        :raises InterpreterStatusError: If the interpreter was stopped.
        """
        if self._status in (RUNNING, DONE):
            return self.snapshot
        if self._status == STOPPED:
            raise InterpreterStatusError(f"Interpreter '{self._id}' was stopped and cannot be restarted", "start")

        event = Event(INIT_EVENT, input=input)
        messages: List[Message] = []
        with self._mailbox.exclusive():
            if self._status != NOT_STARTED:
                return self.snapshot
            context = self._model.create_context(input)
            configuration = self._model.initial_configuration()
            try:
                for state_id in configuration:
                    context = self._run(self._model.get_node(state_id).entry, context, event, state_id, messages)
            except ActionEvaluationError as e:
                self._hooks.execute_on_error(e)
                raise
            step = _Step(event, None, (), configuration, configuration, context, messages)
            self._commit(step, RUNNING)
            logger.debug("[%s] Started in %s", self._id, configuration[-1])
        self._drain()
        return self.snapshot

    def send(self, event: EventLike) -> None:
        """
        Queue an event. It is processed immediately unless another event is
        being processed, or the interpreter has not started yet.

        :param event: An Event, an event type, or a ``{"type": ...}`` mapping.
        """
        event = to_event(event)
        if self._stopping or self._status in (STOPPED, DONE):
            status = STOPPED if self._stopping else self._status
            logger.warning("[%s] Dropped '%s': interpreter is %s", self._id, event.type, status)
            return
        self._mailbox.put(event)
        if self._status == RUNNING:
            self._drain()

    def stop(self) -> None:
        """
        Exit every active state (innermost first), stop every live actor and
        stop accepting events. Queued events are discarded.
        """
        if self._stopping or self._status == STOPPED:
            return
        self._stopping = True
        discarded = self._mailbox.clear()
        if discarded:
            logger.debug("[%s] Discarded %d queued events on stop", self._id, len(discarded))
        self._mailbox.put(_STOP)
        self._drain()

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """
        Call ``listener(snapshot)`` after every committed step.

        :return: A function removing the listener.
        """
        with with_lock(self._lock):
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with with_lock(self._lock):
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def get_actor(self, actor_id: str) -> Optional[Actor]:
        return self._supervisor.get(actor_id)

    def __enter__(self) -> "Interpreter":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def __repr__(self) -> str:
        return f"Interpreter({self._id!r}, status={self._status!r})"

    # ---------------------------------------------------------------------------
    # Processing
    # ---------------------------------------------------------------------------

    def _drain(self) -> None:
        self._mailbox.drain(self._process)

    def _process(self, item: Any) -> None:
        if item is _STOP:
            self._shutdown()
            return
        if self._status != RUNNING:
            logger.debug("[%s] Ignored '%s': interpreter is %s", self._id, item.type, self._status)
            return
        try:
            step = self._resolve(item)
        except (GuardEvaluationError, ActionEvaluationError) as e:
            self._hooks.execute_on_error(e)
            raise
        if step is None:
            warning = UnhandledEventWarning(f"[{self._id}] '{item.type}' not handled in {self._configuration[-1]}")
            logger.debug("%s", warning)
            self._hooks.execute_on_diagnostic(warning)
            return
        self._commit(step, RUNNING)

    def _select(self, event: Event) -> Optional[Transition]:
        """Closest state wins; within a state, the first candidate whose guard passes."""
        for state_id in reversed(self._configuration):
            for transition in self._model.transitions_for(state_id, event.type):
                if evaluate_guard(transition.guard, self._implementations, self._context, event, state_id):
                    return transition
        return None

    def _resolve(self, event: Event) -> Optional[_Step]:
        transition = self._select(event)
        if transition is None:
            return None
        exits, entries, configuration = self._plan(transition)

        messages: List[Message] = []
        context = self._context
        for state_id in exits:
            context = self._run(self._model.get_node(state_id).exit, context, event, state_id, messages)
        context = self._run(transition.actions, context, event, transition.source, messages)
        for state_id in entries:
            context = self._run(self._model.get_node(state_id).entry, context, event, state_id, messages)
        return _Step(event, transition, exits, entries, configuration, context, messages)

    def _plan(self, transition: Transition) -> Tuple[List[str], List[str], Tuple[str, ...]]:
        """
        Exit set (leaf to ancestor), entry set (ancestor to leaf) and the
        resulting configuration for ``transition``.
        """
        if transition.target is None:
            return [], [], self._configuration

        model = self._model
        leaf = self._configuration[-1]
        target = transition.target
        if target in self._configuration and not transition.external:
            domain: Optional[str] = target
        else:
            domain = model.lowest_common_ancestor(leaf, target)
            if transition.external and domain in (target, transition.source):
                domain = model.get_node(domain).parent

        new_configuration = model.path_to(model.initial_leaf(target))
        exits = []
        for state_id in reversed(self._configuration):
            if state_id == domain:
                break
            exits.append(state_id)
        entries = []
        below_domain = domain is None
        for state_id in new_configuration:
            if below_domain:
                entries.append(state_id)
            elif state_id == domain:
                below_domain = True
        return exits, entries, new_configuration

    def _run(self, actions, context: Any, event: Event, state_id: Optional[str], messages: List[Message]) -> Any:
        if not actions:
            return context
        return run_actions(actions, self._implementations, context, event, state_id, messages)

    def _commit(self, step: _Step, status: str) -> None:
        self._supervisor.stop_owned_by(step.exits)
        with with_lock(self._lock):
            self._configuration = step.configuration
            self._context = step.context
            self._status = status
        for state_id in step.entries:
            for invoke in self._model.get_node(state_id).invokes:
                self._supervisor.spawn(invoke, step.context, step.event)

        undelivered: Optional[UnresolvedActorError] = None
        for message in step.messages:
            try:
                self._bus.deliver(message)
            except UnresolvedActorError as e:
                undelivered = undelivered or e

        if step.transition is not None:
            logger.debug(
                "[%s] %s: %s -> %s", self._id, step.event.type, step.transition.source, step.configuration[-1]
            )
        for state_id in step.exits:
            self._hooks.execute_on_exit(state_id)
        if step.transition is not None:
            self._hooks.execute_on_transition(step.transition, step.event)
        for state_id in step.entries:
            self._hooks.execute_on_enter(state_id)

        self._check_final(step)
        self._notify()
        if undelivered is not None:
            raise undelivered

    def _check_final(self, step: _Step) -> None:
        leaf = self._model.get_node(step.configuration[-1])
        if not leaf.is_final or leaf.id not in step.entries:
            return
        parent = self._model.get_node(leaf.parent)
        if not parent.is_root:
            self._mailbox.put(Event(done_state_type(parent.id)))
            return
        with with_lock(self._lock):
            self._status = DONE
        self._supervisor.stop_all()
        logger.debug("[%s] Reached final state '%s'", self._id, leaf.id)
        if self._parent is not None:
            self._parent.send(Event(done_invoke_type(self._id), output=self._context))

    def _shutdown(self) -> None:
        if self._status == RUNNING:
            event = Event("statechart.stop")
            messages: List[Message] = []
            context = self._context
            for state_id in reversed(self._configuration):
                try:
                    context = self._run(self._model.get_node(state_id).exit, context, event, state_id, messages)
                except ActionEvaluationError as e:
                    logger.error("[%s] %s", self._id, e)
                    self._hooks.execute_on_error(e)
                self._supervisor.stop_owned_by([state_id])
                self._hooks.execute_on_exit(state_id)
            with with_lock(self._lock):
                self._context = context
            for message in messages:
                self._bus.deliver(message, policy=MessagingPolicy.WARN)
        self._supervisor.stop_all()
        with with_lock(self._lock):
            self._status = STOPPED
        self._mailbox.clear()
        logger.debug("[%s] Stopped", self._id)
        self._notify()

    def _notify(self) -> None:
        snapshot = self.snapshot
        with with_lock(self._lock):
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("[%s] Listener %r failed", self._id, listener)

    # ---------------------------------------------------------------------------
    # Actor wiring
    # ---------------------------------------------------------------------------

    def _route(self, actor_id: str, event: Event) -> None:
        self._bus.deliver(Message(actor_id, event))

    def _spawn_child(self, model: DefinitionModel, actor_id: str, parent: Any) -> "Interpreter":
        return Interpreter(
            model,
            scheduler=self._scheduler,
            adapters=self._adapters,
            messaging_policy=self._bus.policy,
            id=actor_id,
            parent=parent,
        )
