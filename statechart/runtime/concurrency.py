# statechart/runtime/concurrency.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


def get_lock() -> threading.Lock:
    """
    Provide a new lock instance to be used for synchronization.
    """
    return threading.Lock()


@contextmanager
def with_lock(lock: threading.Lock) -> Iterator[None]:
    """
    A convenience context manager that acquires the given lock upon entry and
    releases it upon exit, ensuring safe access to shared resources.
    """
    lock.acquire()
    try:
        yield
    finally:
        lock.release()


@contextmanager
def try_lock(lock: threading.Lock) -> Iterator[bool]:
    """
    Attempt to acquire ``lock`` without blocking. Yields whether it was
    acquired; it is released on exit only in that case.
    """
    acquired = lock.acquire(blocking=False)
    try:
        yield acquired
    finally:
        if acquired:
            lock.release()
