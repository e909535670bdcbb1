# statechart/runtime/actors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Actors invoked by states. An actor is started when its owning state is
entered and stopped when that state is exited; it can only influence the
machine that owns it by sending events back into that machine's mailbox.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
import logging
import threading
from collections import deque
from typing import TYPE_CHECKING, Any, Callable, Deque, Mapping, Optional

from statechart.core.errors import ActorSetupError
from statechart.core.events import Event, EventLike, done_invoke_type, error_invoke_type, to_event
from statechart.interfaces.types import Cleanup
from statechart.runtime.concurrency import with_lock

if TYPE_CHECKING:
    from statechart.runtime.interpreter import Interpreter
    from statechart.runtime.timers import TimerHandle

logger = logging.getLogger(__name__)

ACTIVE = "active"
DONE = "done"
FAILED = "failed"
STOPPED = "stopped"


class CallbackLogic:
    """Long-lived actor logic: ``fn(scope)`` may return a cleanup callable."""

    kind = "invoked-callback"

    def __init__(self, fn: Callable[["ActorScope"], Optional[Cleanup]], name: Optional[str] = None) -> None:
        self.fn = fn
        self.name = name or getattr(fn, "__name__", "callback")

    def __repr__(self) -> str:
        return f"callback({self.name!r})"


class PromiseLogic:
    """
    One-shot actor logic: ``fn(scope)`` returns a value, a
    ``concurrent.futures.Future`` or an awaitable.
    """

    kind = "spawned"

    def __init__(self, fn: Callable[["ActorScope"], Any], name: Optional[str] = None) -> None:
        self.fn = fn
        self.name = name or getattr(fn, "__name__", "promise")

    def __repr__(self) -> str:
        return f"promise({self.name!r})"


def callback(fn: Optional[Callable[..., Any]] = None, *, name: Optional[str] = None):
    """
    Wrap a function as callback actor logic. Usable as ``@callback`` or
    ``callback(fn, name=...)``.

    Example::

        @callback
        def ticker(scope):
            scope.receive(lambda event: scope.send_back({"type": "ACK"}))
            return lambda: None
    """
    if fn is None:
        return lambda f: CallbackLogic(f, name)
    return CallbackLogic(fn, name)


def promise(fn: Optional[Callable[..., Any]] = None, *, name: Optional[str] = None):
    """
    Wrap a function as promise actor logic. Completion delivers
    ``done.invoke.<id>`` with ``output``; failure delivers
    ``error.invoke.<id>`` with ``error``.
    """
    if fn is None:
        return lambda f: PromiseLogic(f, name)
    return PromiseLogic(fn, name)


class ActorScope:
    """
    The capabilities handed to actor logic.

    :param actor_id: Id of the running actor.
    :param input: Input computed once from context and event at spawn time.
    :param adapters: External API adapters owned by the supervisor.
    """

    def __init__(self, actor: "Actor", input: Any, adapters: Mapping[str, Any], send_to: Callable[[str, Event], None]):
        self._actor = actor
        self.input = input
        self.adapters = adapters
        self._send_to = send_to

    @property
    def actor_id(self) -> str:
        return self._actor.id

    def send_back(self, event: EventLike) -> None:
        """Deliver ``event`` to the owning machine's mailbox."""
        self._actor.send_back(event)

    def receive(self, handler: Callable[[Event], None]) -> None:
        """Register the handler for events addressed to this actor."""
        self._actor.receive(handler)

    def send_to(self, actor_id: str, event: EventLike) -> None:
        """Address a sibling actor of the owning machine, resolved now."""
        if self._actor.status == ACTIVE:
            self._send_to(actor_id, to_event(event))


class Actor:
    """
    Base class for running actors. Subclasses implement ``_start`` and may
    override ``_stop`` and ``send``.
    """

    kind = "actor"

    def __init__(self, actor_id: str, owner: str, input: Any, deliver: Callable[[Event], None]) -> None:
        self.id = actor_id
        self.owner = owner
        self.input = input
        self._deliver = deliver
        self._status = ACTIVE
        self._lock = threading.Lock()

    @property
    def status(self) -> str:
        return self._status

    @property
    def is_live(self) -> bool:
        return self._status == ACTIVE

    def send_back(self, event: EventLike) -> None:
        """
        Forward ``event`` to the owning machine. Once the actor has been
        stopped nothing more is delivered.
        """
        if self._status == STOPPED:
            logger.debug("Actor '%s' is stopped; dropping %r", self.id, event)
            return
        self._deliver(to_event(event))

    def receive(self, handler: Callable[[Event], None]) -> None:
        raise TypeError(f"{self.kind} actor '{self.id}' cannot receive events")

    def send(self, event: Event) -> None:
        """Deliver an event addressed to this actor."""
        logger.debug("%s actor '%s' ignores %s", self.kind, self.id, event.type)

    def start(self, scope: ActorScope) -> None:
        """
        :raises ActorSetupError: If the logic fails while starting.
        """
        try:
            self._start(scope)
        except Exception as e:
            self._status = FAILED
            raise ActorSetupError(self.id, e) from e

    def _start(self, scope: ActorScope) -> None:
        raise NotImplementedError()

    def stop(self) -> None:
        """Stop the actor. Cleanup runs at most once."""
        with with_lock(self._lock):
            if self._status == STOPPED:
                return
            self._status = STOPPED
        try:
            self._stop()
        except Exception:
            logger.exception("Cleanup of actor '%s' failed", self.id)

    def _stop(self) -> None:
        pass

    def _finish(self, status: str) -> bool:
        with with_lock(self._lock):
            if self._status != ACTIVE:
                return False
            self._status = status
            return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r}, status={self._status!r})"


class CallbackActor(Actor):
    """
    A long-lived actor with an explicit inbound mailbox. Events addressed to
    it are buffered until the logic registers a ``receive`` handler.
    """

    kind = CallbackLogic.kind

    def __init__(self, actor_id: str, owner: str, input: Any, deliver: Callable[[Event], None], logic: CallbackLogic):
        super().__init__(actor_id, owner, input, deliver)
        self._logic = logic
        self._inbox: Deque[Event] = deque()
        self._handler: Optional[Callable[[Event], None]] = None
        self._cleanup: Optional[Cleanup] = None

    def _start(self, scope: ActorScope) -> None:
        cleanup = self._logic.fn(scope)
        if cleanup is not None and not callable(cleanup):
            raise TypeError(f"Callback logic returned non-callable cleanup {cleanup!r}")
        self._cleanup = cleanup

    def receive(self, handler: Callable[[Event], None]) -> None:
        self._handler = handler
        self._flush()

    def send(self, event: Event) -> None:
        if self._status != ACTIVE:
            return
        with with_lock(self._lock):
            self._inbox.append(event)
        self._flush()

    def _flush(self) -> None:
        if self._handler is None:
            return
        while True:
            with with_lock(self._lock):
                if not self._inbox or self._status != ACTIVE:
                    return
                event = self._inbox.popleft()
            self._handler(event)

    def _stop(self) -> None:
        self._inbox.clear()
        if self._cleanup is not None:
            cleanup, self._cleanup = self._cleanup, None
            cleanup()


class PromiseActor(Actor):
    """Runs one-shot logic and reports its outcome once."""

    kind = PromiseLogic.kind

    def __init__(self, actor_id: str, owner: str, input: Any, deliver: Callable[[Event], None], logic: PromiseLogic):
        super().__init__(actor_id, owner, input, deliver)
        self._logic = logic
        self._pending: Any = None

    def _start(self, scope: ActorScope) -> None:
        result = self._logic.fn(scope)
        if isinstance(result, concurrent.futures.Future):
            self._pending = result
            result.add_done_callback(self._settle_future)
        elif inspect.isawaitable(result):
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                if inspect.iscoroutine(result):
                    result.close()
                raise RuntimeError("An awaitable promise actor needs a running event loop") from None
            task = asyncio.ensure_future(result, loop=loop)
            self._pending = task
            task.add_done_callback(self._settle_future)
        else:
            self._resolve(result)

    def _settle_future(self, future: Any) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            self._reject(error)
        else:
            self._resolve(future.result())

    def _resolve(self, output: Any) -> None:
        if self._finish(DONE):
            self.send_back(Event(done_invoke_type(self.id), output=output))

    def _reject(self, error: BaseException) -> None:
        if self._finish(FAILED):
            logger.warning("Promise actor '%s' rejected: %r", self.id, error)
            self.send_back(Event(error_invoke_type(self.id), error=error))

    def _stop(self) -> None:
        pending, self._pending = self._pending, None
        if pending is not None and not pending.done():
            pending.cancel()


class TimerActor(Actor):
    """Delivers ``event_type`` once after ``delay`` seconds unless stopped first."""

    kind = "timer"

    def __init__(
        self, actor_id: str, owner: str, deliver: Callable[[Event], None], delay: float, event_type: str, scheduler
    ):
        super().__init__(actor_id, owner, None, deliver)
        self.delay = delay
        self.event_type = event_type
        self._scheduler = scheduler
        self._handle: Optional["TimerHandle"] = None

    def _start(self, scope: ActorScope) -> None:
        self._handle = self._scheduler.call_later(self.delay, self._fire)

    def _fire(self) -> None:
        if self._finish(DONE):
            self.send_back(Event(self.event_type))

    def _stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()


class _Outbound:
    """The ``parent`` of a child machine: routes through the actor's gate."""

    def __init__(self, actor: Actor) -> None:
        self._actor = actor

    def send(self, event: EventLike) -> None:
        self._actor.send_back(event)


class MachineActor(Actor):
    """Runs a child DefinitionModel in its own Interpreter."""

    kind = "machine"

    def __init__(self, actor_id: str, owner: str, input: Any, deliver: Callable[[Event], None], factory):
        super().__init__(actor_id, owner, input, deliver)
        self._factory = factory
        self.child: Optional["Interpreter"] = None

    def _start(self, scope: ActorScope) -> None:
        self.child = self._factory(self.id, _Outbound(self))
        self.child.start(self.input)

    def send(self, event: Event) -> None:
        if self._status == ACTIVE and self.child is not None:
            self.child.send(event)

    def send_back(self, event: EventLike) -> None:
        event = to_event(event)
        if event.type == done_invoke_type(self.id):
            self._finish(DONE)
        super().send_back(event)

    def _stop(self) -> None:
        if self.child is not None:
            self.child.stop()
