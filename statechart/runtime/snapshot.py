# statechart/runtime/snapshot.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

NOT_STARTED = "not_started"
RUNNING = "running"
DONE = "done"
STOPPED = "stopped"


@dataclass(frozen=True)
class Snapshot:
    """
    What an interpreter exposes to its consumers: the active configuration
    (state ids, root to leaf), the context and the lifecycle status.

    A dict context is exposed as a read-only view of the committed context;
    replace it through actions instead of mutating it.
    """

    configuration: Tuple[str, ...]
    context: Any
    status: str = RUNNING
    keys: Tuple[str, ...] = ()

    @property
    def leaf(self) -> Optional[str]:
        return self.configuration[-1] if self.configuration else None

    @property
    def value(self) -> str:
        """
        The state keys below the root, dot-joined, e.g. ``"playing"`` or
        ``"video.buffering"``.
        """
        keys = self.keys or tuple(state_id.rsplit(".", 1)[-1] for state_id in self.configuration)
        return ".".join(keys[1:])

    @property
    def done(self) -> bool:
        return self.status == DONE

    def matches(self, state: str) -> bool:
        """
        True if ``state`` is an active state id, or a prefix of ``value``.

        Example::

            snapshot.matches("player.playing")
            snapshot.matches("playing")
        """
        if state in self.configuration:
            return True
        value = self.value
        return value == state or value.startswith(state + ".")
