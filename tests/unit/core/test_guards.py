# tests/unit/core/test_guards.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging

import pytest

from statechart.core.errors import GuardEvaluationError
from statechart.core.events import Event
from statechart.core.guards import GuardRef, evaluate_guard, to_guard_ref
from statechart.core.implementations import Implementations


def test_to_guard_ref_forms():
    assert to_guard_ref(None) is None
    assert to_guard_ref("ready").name == "ready"
    ref = to_guard_ref({"type": "isTheme", "params": {"theme": "dark"}})
    assert ref.name == "isTheme"
    assert ref.resolve_params({}, None) == {"theme": "dark"}
    fn = lambda c, e: True  # noqa: E731
    assert to_guard_ref(fn).fn is fn
    with pytest.raises(ValueError):
        to_guard_ref(3)


def test_missing_guard_passes():
    assert evaluate_guard(None, Implementations(), {}, Event("GO")) is True


def test_guard_receives_params():
    impls = Implementations(guards={"isTheme": lambda ctx, evt, theme: evt.theme == theme})
    ref = GuardRef(name="isTheme", params={"theme": "dark"})
    assert evaluate_guard(ref, impls, {}, Event("SET", theme="dark")) is True
    assert evaluate_guard(ref, impls, {}, Event("SET", theme="light")) is False


def test_params_computed_from_context_and_event():
    impls = Implementations(guards={"above": lambda ctx, evt, limit: evt.value > limit})
    ref = GuardRef(name="above", params=lambda ctx, evt: {"limit": ctx["limit"]})
    assert evaluate_guard(ref, impls, {"limit": 3}, Event("N", value=4)) is True


def test_non_boolean_result_judged_by_truthiness(caplog):
    impls = Implementations(guards={"sloppy": lambda ctx, evt: None})
    with caplog.at_level(logging.WARNING, logger="statechart.core.guards"):
        assert evaluate_guard(GuardRef(name="sloppy"), impls, {}, Event("GO"), "m") is False
    assert "non-boolean" in caplog.text


def test_guard_failure_wrapped():
    def broken(ctx, evt):
        raise KeyError("x")

    impls = Implementations(guards={"broken": broken})
    with pytest.raises(GuardEvaluationError) as exc_info:
        evaluate_guard(GuardRef(name="broken"), impls, {}, Event("GO"), "m.a")
    assert exc_info.value.state_id == "m.a"
    assert isinstance(exc_info.value.cause, KeyError)


def test_unregistered_guard_fails():
    with pytest.raises(GuardEvaluationError):
        evaluate_guard(GuardRef(name="nope"), Implementations(), {}, Event("GO"))
