# statechart/core/hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:
    from statechart.core.events import Event
    from statechart.core.transitions import Transition
    from statechart.interfaces.protocols import HookProtocol

logger = logging.getLogger(__name__)


class Hook:
    """
    A no-op hook. Subclass and override only the callbacks you need.
    """

    def on_enter(self, state_id: str) -> None:
        pass

    def on_exit(self, state_id: str) -> None:
        pass

    def on_transition(self, transition: "Transition", event: "Event") -> None:
        pass

    def on_error(self, error: Exception) -> None:
        pass

    def on_diagnostic(self, diagnostic: Warning) -> None:
        pass


class HookManager:
    """
    Manages the registration and execution of hooks that listen to interpreter
    lifecycle events (on_enter, on_exit, on_transition, on_error,
    on_diagnostic). Users can attach logging, monitoring, or custom side
    effects without altering core logic.

    Hooks run after a step has been committed, so they observe the new
    configuration. A hook that raises is logged and does not affect the step.
    """

    def __init__(self, hooks: Optional[List["HookProtocol"]] = None) -> None:
        """
        Initialize with an optional list of hook objects.
        """
        self._hooks: List[Any] = list(hooks or [])
        self._invoker = _HookInvoker(self._hooks)

    def register_hook(self, hook: "HookProtocol") -> None:
        """
        Add a new hook to the manager's list of hooks.

        :param hook: An object implementing some of the HookProtocol methods.
        """
        self._hooks.append(hook)

    def unregister_hook(self, hook: "HookProtocol") -> None:
        if hook in self._hooks:
            self._hooks.remove(hook)

    def __len__(self) -> int:
        return len(self._hooks)

    def execute_on_enter(self, state_id: str) -> None:
        """
        Run all hooks' on_enter logic when entering a state.
        """
        self._invoker.invoke("on_enter", state_id)

    def execute_on_exit(self, state_id: str) -> None:
        """
        Run all hooks' on_exit logic when exiting a state.
        """
        self._invoker.invoke("on_exit", state_id)

    def execute_on_transition(self, transition: "Transition", event: "Event") -> None:
        self._invoker.invoke("on_transition", transition, event)

    def execute_on_error(self, error: Exception) -> None:
        """
        Run all hooks' on_error logic when an exception occurs.
        """
        self._invoker.invoke("on_error", error)

    def execute_on_diagnostic(self, diagnostic: Warning) -> None:
        self._invoker.invoke("on_diagnostic", diagnostic)


class _HookInvoker:
    """
    Internal helper that iterates through a list of hooks and invokes their
    lifecycle methods in a controlled manner.
    """

    def __init__(self, hooks: List[Any]) -> None:
        self._hooks = hooks

    def invoke(self, method: str, *args: Any) -> None:
        for hook in list(self._hooks):
            callback = getattr(hook, method, None)
            if callback is None:
                continue
            try:
                callback(*args)
            except Exception:
                logger.exception("Hook %r failed in %s", hook, method)
