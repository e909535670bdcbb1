# statechart/core/guards.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging
from typing import Any, Mapping, Optional

from statechart.core.errors import GuardEvaluationError
from statechart.core.implementations import Implementations, Reference

logger = logging.getLogger(__name__)


class GuardRef(Reference):
    """
    A guard condition attached to a transition candidate.
    """


def to_guard_ref(spec: Any) -> Optional[GuardRef]:
    """
    Parse a guard as written in a schema: a registered name, a
    ``{"type": name, "params": ...}`` mapping, or a callable.
    """
    if spec is None:
        return None
    if isinstance(spec, GuardRef):
        return spec
    if isinstance(spec, str):
        return GuardRef(name=spec)
    if isinstance(spec, Mapping):
        if "type" not in spec:
            raise ValueError(f"Guard mapping has no 'type': {spec!r}")
        return GuardRef(name=spec["type"], params=spec.get("params"))
    if callable(spec):
        return GuardRef(fn=spec)
    raise ValueError(f"Cannot interpret {spec!r} as a guard")


def evaluate_guard(
    ref: Optional[GuardRef],
    implementations: Implementations,
    context: Any,
    event: Any,
    state_id: Optional[str] = None,
) -> bool:
    """
    Evaluate a guard against ``(context, event)``. A missing guard always
    passes. Guards are expected to return a bool; any other value is judged
    by truthiness and logged, so a guard returning ``None`` never passes.

    :raises GuardEvaluationError: If the guard throws or is not registered.
    """
    if ref is None:
        return True
    try:
        fn = implementations.guard(ref)
        result = fn(context, event, **ref.resolve_params(context, event))
    except Exception as e:
        raise GuardEvaluationError(ref.name, state_id, event, e) from e
    if not isinstance(result, bool):
        logger.warning("Guard '%s' in state '%s' returned non-boolean %r", ref.name, state_id, result)
    return bool(result)
