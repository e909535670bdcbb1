# statechart/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from statechart.interfaces.types import StateID


@runtime_checkable
class HookProtocol(Protocol):
    """
    Lifecycle listener for an interpreter.

    Methods:
        on_enter(state_id): A state was entered.
        on_exit(state_id): A state was exited.
        on_transition(transition, event): A transition was taken.
        on_error(error): A guard, action or actor failed.
        on_diagnostic(diagnostic): A non-fatal warning was emitted.

    Hooks may implement any subset; missing methods are skipped.
    """

    def on_enter(self, state_id: StateID) -> None: ...

    def on_exit(self, state_id: StateID) -> None: ...

    def on_error(self, error: Exception) -> None: ...


@runtime_checkable
class Handle(Protocol):
    """A scheduled call that can be cancelled before it runs."""

    def cancel(self) -> None: ...


@runtime_checkable
class Scheduler(Protocol):
    """
    Source of delayed calls for timer actors.

    Runtime Invariants:
    - ``fn`` runs at most once, and never after its handle was cancelled.
    """

    def call_later(self, delay: float, fn: Callable[[], None]) -> Handle: ...


@runtime_checkable
class PlayerAdapter(Protocol):
    """
    Narrow interface to an external media player, injected into the
    interpreter's ``adapters`` mapping under ``"player"``.

    ``create`` builds a player bound to ``element_id`` and reports its
    lifecycle through ``on_ready(player)`` and ``on_state_change(code)``.
    """

    def create(
        self,
        element_id: str,
        video_id: str,
        on_ready: Callable[[Any], None],
        on_state_change: Callable[[int], None],
    ) -> Any: ...

    def play(self, player: Any) -> None: ...

    def pause(self, player: Any) -> None: ...

    def destroy(self, player: Optional[Any]) -> None: ...
