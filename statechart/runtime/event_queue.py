# statechart/runtime/event_queue.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Callable, Deque, List, Optional

from statechart.runtime.concurrency import try_lock, with_lock


class Mailbox:
    """
    A thread-safe FIFO of pending events with a single-drainer guarantee:
    at most one caller processes events at a time, and events put while
    another caller is draining are processed by that caller.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._processing = threading.Lock()
        self._queue: Deque[Any] = deque()

    def put(self, item: Any) -> None:
        """
        Add an item to the back of the mailbox.

        :param item: The event (or internal marker) to enqueue.
        """
        with with_lock(self._lock):
            self._queue.append(item)

    def get(self) -> Optional[Any]:
        """
        Remove and return the next item, or None if the mailbox is empty.
        """
        with with_lock(self._lock):
            if self._queue:
                return self._queue.popleft()
            return None

    def clear(self) -> List[Any]:
        """
        Remove all pending items and return them.
        """
        with with_lock(self._lock):
            items = list(self._queue)
            self._queue.clear()
            return items

    def __len__(self) -> int:
        with with_lock(self._lock):
            return len(self._queue)

    @property
    def draining(self) -> bool:
        return self._processing.locked()

    def drain(self, handler: Callable[[Any], None]) -> None:
        """
        Hand every pending item to ``handler``, one at a time, unless another
        caller (possibly further up this thread's stack) is already draining.

        An exception from ``handler`` propagates; items still queued stay
        queued for the next drain.
        """
        while True:
            with try_lock(self._processing) as acquired:
                if not acquired:
                    return
                item = self.get()
                while item is not None:
                    handler(item)
                    item = self.get()
            # An item put between the last get and the release was left for us.
            if not len(self):
                return

    def exclusive(self):
        """
        Block until no one is draining, then hold the drain lock for the
        duration of the ``with`` block. Items put meanwhile stay queued.
        """
        return with_lock(self._processing)
