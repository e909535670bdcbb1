# tests/unit/runtime/test_event_queue.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import threading

import pytest

from statechart.core.events import Event


def test_mailbox_fifo():
    from statechart.runtime.event_queue import Mailbox

    mb = Mailbox()
    mb.put(Event("A"))
    mb.put(Event("B"))
    assert len(mb) == 2
    assert mb.get().type == "A"
    assert mb.get().type == "B"
    assert mb.get() is None, "Mailbox should be empty now."


def test_mailbox_clear_returns_items():
    from statechart.runtime.event_queue import Mailbox

    mb = Mailbox()
    mb.put(Event("A"))
    assert mb.clear() == [Event("A")]
    assert len(mb) == 0


def test_drain_processes_items_put_while_draining():
    from statechart.runtime.event_queue import Mailbox

    mb = Mailbox()
    seen = []

    def handler(item):
        seen.append(item.type)
        if item.type == "A":
            mb.put(Event("C"))
            # Reentrant drain is a no-op; the outer drainer picks C up.
            mb.drain(handler)
            assert seen == ["A"]

    mb.put(Event("A"))
    mb.put(Event("B"))
    mb.drain(handler)
    assert seen == ["A", "B", "C"]
    assert not mb.draining


def test_drain_leaves_remaining_items_on_error():
    from statechart.runtime.event_queue import Mailbox

    mb = Mailbox()

    def handler(item):
        if item.type == "BAD":
            raise RuntimeError("bad")

    mb.put(Event("BAD"))
    mb.put(Event("LATER"))
    with pytest.raises(RuntimeError):
        mb.drain(handler)
    assert len(mb) == 1
    assert not mb.draining


def test_exclusive_blocks_other_drainers():
    from statechart.runtime.event_queue import Mailbox

    mb = Mailbox()
    seen = []
    with mb.exclusive():
        assert mb.draining
        mb.put(Event("A"))
        mb.drain(seen.append)
        assert seen == []
    mb.drain(seen.append)
    assert [e.type for e in seen] == ["A"]


def test_single_drainer_across_threads():
    from statechart.runtime.event_queue import Mailbox

    mb = Mailbox()
    active = []
    overlap = []
    lock = threading.Lock()

    def handler(item):
        with lock:
            active.append(item)
            if len(active) > 1:
                overlap.append(item)
        with lock:
            active.remove(item)

    def producer(n):
        for i in range(50):
            mb.put(Event("E", producer=n, i=i))
            mb.drain(handler)

    threads = [threading.Thread(target=producer, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    mb.drain(handler)
    assert overlap == []
    assert len(mb) == 0
