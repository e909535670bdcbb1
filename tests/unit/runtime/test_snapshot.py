# tests/unit/runtime/test_snapshot.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from statechart.runtime.snapshot import DONE, RUNNING, Snapshot


def test_snapshot_value_and_leaf():
    snap = Snapshot(("player", "player.video", "player.video.buffering"), {}, RUNNING, ("player", "video", "buffering"))
    assert snap.leaf == "player.video.buffering"
    assert snap.value == "video.buffering"
    assert not snap.done


def test_snapshot_matches():
    snap = Snapshot(("player", "player.video", "player.video.buffering"), {}, RUNNING, ("player", "video", "buffering"))
    assert snap.matches("player.video")
    assert snap.matches("video")
    assert snap.matches("video.buffering")
    assert not snap.matches("vid")
    assert not snap.matches("player.paused")


def test_snapshot_without_keys_uses_id_suffixes():
    snap = Snapshot(("m", "m.a"), None, DONE)
    assert snap.value == "a"
    assert snap.done


def test_context_only_machine_value_is_empty():
    snap = Snapshot(("tabs",), {"activeId": "a"}, RUNNING, ("tabs",))
    assert snap.value == ""
    assert snap.leaf == "tabs"
