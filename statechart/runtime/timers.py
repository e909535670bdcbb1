# statechart/runtime/timers.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import heapq
import itertools
import logging
import threading
from typing import Callable, List, Tuple

from statechart.runtime.concurrency import with_lock

logger = logging.getLogger(__name__)


class TimerHandle:
    """
    A scheduled call. Cancelling is idempotent and guarantees the call will
    not run afterwards.
    """

    def __init__(self, delay: float, fn: Callable[[], None]) -> None:
        self._delay = delay
        self._fn = fn
        self._cancelled = False
        self._fired = False
        self._lock = threading.Lock()

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    def cancel(self) -> None:
        with with_lock(self._lock):
            self._cancelled = True

    def fire(self) -> None:
        """Run the call unless it was cancelled or already ran."""
        with with_lock(self._lock):
            if self._cancelled or self._fired:
                return
            self._fired = True
        self._fn()


class _ThreadingHandle(TimerHandle):
    def __init__(self, delay: float, fn: Callable[[], None]) -> None:
        super().__init__(delay, fn)
        self._timer = threading.Timer(delay, self._run)
        self._timer.daemon = True

    def _run(self) -> None:
        try:
            self.fire()
        except Exception:
            logger.exception("Timer callback failed after %.3fs", self.delay)

    def cancel(self) -> None:
        super().cancel()
        self._timer.cancel()


class ThreadingScheduler:
    """
    Default scheduler: each delayed call runs on its own daemon
    ``threading.Timer`` thread.
    """

    def call_later(self, delay: float, fn: Callable[[], None]) -> TimerHandle:
        handle = _ThreadingHandle(delay, fn)
        handle._timer.start()
        return handle


class ManualScheduler:
    """
    A virtual clock. Calls run only when ``advance`` moves time past their
    deadline, in deadline order (ties in scheduling order), on the caller's
    thread.
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._counter = itertools.count()
        self._heap: List[Tuple[float, int, TimerHandle]] = []
        self._lock = threading.Lock()

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """Number of scheduled calls that have neither run nor been cancelled."""
        with with_lock(self._lock):
            return sum(1 for _, _, handle in self._heap if not handle.cancelled)

    def call_later(self, delay: float, fn: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(delay, fn)
        with with_lock(self._lock):
            heapq.heappush(self._heap, (self._now + delay, next(self._counter), handle))
        return handle

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, running every call that becomes due. Calls
        scheduled by those calls also run if they fall inside the window.

        :return: The number of calls that ran.
        """
        if seconds < 0:
            raise ValueError("Cannot move a clock backwards")
        deadline = self._now + seconds
        ran = 0
        while True:
            with with_lock(self._lock):
                if not self._heap or self._heap[0][0] > deadline:
                    break
                when, _, handle = heapq.heappop(self._heap)
                self._now = max(self._now, when)
            if not handle.cancelled:
                handle.fire()
                ran += 1
        self._now = deadline
        return ran

    def run_all(self) -> int:
        """Advance to the last pending deadline."""
        with with_lock(self._lock):
            if not self._heap:
                return 0
            latest = max(when for when, _, _ in self._heap)
        return self.advance(max(0.0, latest - self._now))
