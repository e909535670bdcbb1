# tests/unit/core/test_hooks.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

from statechart.core.hooks import Hook


def test_hook_manager(mock_hook):
    from statechart.core.hooks import HookManager

    hm = HookManager(hooks=[mock_hook])
    hm.execute_on_enter("m.a")
    mock_hook.on_enter.assert_called_once_with("m.a")
    hm.execute_on_exit("m.a")
    mock_hook.on_exit.assert_called_once_with("m.a")
    err = Exception("TestError")
    hm.execute_on_error(err)
    mock_hook.on_error.assert_called_once_with(err)
    warning = UserWarning("dropped")
    hm.execute_on_diagnostic(warning)
    mock_hook.on_diagnostic.assert_called_once_with(warning)


def test_hook_manager_register_unregister(hook):
    from statechart.core.hooks import HookManager

    hm = HookManager()
    hm.register_hook(hook)
    assert len(hm) == 1
    hm.unregister_hook(hook)
    assert len(hm) == 0
    hm.unregister_hook(hook)


def test_partial_hooks_are_skipped():
    from statechart.core.hooks import HookManager

    class EnterOnly:
        def __init__(self):
            self.entered = []

        def on_enter(self, state_id):
            self.entered.append(state_id)

    partial = EnterOnly()
    hm = HookManager([partial])
    hm.execute_on_exit("m.a")
    hm.execute_on_transition(MagicMock(), MagicMock())
    hm.execute_on_enter("m.b")
    assert partial.entered == ["m.b"]


def test_failing_hook_does_not_stop_others(caplog):
    from statechart.core.hooks import HookManager

    failing = MagicMock(spec=Hook)
    failing.on_enter.side_effect = RuntimeError("hook failed")
    healthy = MagicMock(spec=Hook)
    hm = HookManager([failing, healthy])
    hm.execute_on_enter("m.a")
    healthy.on_enter.assert_called_once_with("m.a")
    assert "on_enter" in caplog.text


def test_default_hook_is_noop(hook):
    hook.on_enter("m.a")
    hook.on_exit("m.a")
    hook.on_error(Exception())
    hook.on_diagnostic(UserWarning())


def test_hook_satisfies_protocol(hook):
    from statechart.interfaces.protocols import HookProtocol

    assert isinstance(hook, HookProtocol)
