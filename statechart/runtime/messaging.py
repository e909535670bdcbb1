# statechart/runtime/messaging.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Optional

from statechart.core.actions import PARENT, Message
from statechart.core.errors import MessagingDropWarning, UnresolvedActorError
from statechart.core.events import Event
from statechart.core.hooks import HookManager

logger = logging.getLogger(__name__)


class MessagingPolicy(enum.Enum):
    """What to do with a message whose target is not a live actor."""

    WARN = "warn"
    RAISE = "raise"


class MessageBus:
    """
    Delivers addressed messages for one interpreter. Targets are resolved
    against the live actor table when the message is delivered, so actors
    spawned or stopped earlier in the same step are addressed correctly.

    :param owner_id: Id of the owning interpreter.
    :param resolve: Returns the live actor for an id, or None.
    :param enqueue: Puts an event on the owning interpreter's own mailbox.
    :param parent: The invoking interpreter's inbound channel, if any.
    :param policy: Drop-and-warn or raise for unresolved targets.
    """

    def __init__(
        self,
        owner_id: str,
        resolve: Callable[[str], Any],
        enqueue: Callable[[Event], None],
        parent: Optional[Any] = None,
        policy: MessagingPolicy = MessagingPolicy.WARN,
        hooks: Optional[HookManager] = None,
    ) -> None:
        self._owner_id = owner_id
        self._resolve = resolve
        self._enqueue = enqueue
        self._parent = parent
        self._policy = MessagingPolicy(policy)
        self._hooks = hooks or HookManager()

    @property
    def policy(self) -> MessagingPolicy:
        return self._policy

    def deliver(self, message: Message, policy: Optional[MessagingPolicy] = None) -> bool:
        """
        Deliver one message.

        :param policy: Overrides the bus policy for this delivery.
        :return: True if the message reached a recipient.
        :raises UnresolvedActorError: Under the raise policy, if nothing received it.
        """
        target = message.target
        if target is None:
            self._enqueue(message.event)
            return True
        if target == PARENT:
            if self._parent is not None:
                self._parent.send(message.event)
                return True
        else:
            actor = self._resolve(target)
            if actor is not None:
                actor.send(message.event)
                return True
        self._unresolved(target, message.event, policy or self._policy)
        return False

    def send_to(self, actor_id: str, event: Event) -> bool:
        return self.deliver(Message(actor_id, event))

    def _unresolved(self, target: str, event: Event, policy: MessagingPolicy) -> None:
        if policy is MessagingPolicy.RAISE:
            raise UnresolvedActorError(target, event)
        warning = MessagingDropWarning(
            f"[{self._owner_id}] No live actor '{target}'; dropped '{event.type}'"
        )
        logger.warning("%s", warning)
        self._hooks.execute_on_diagnostic(warning)
