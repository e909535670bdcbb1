# statechart/interfaces/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import Any, Callable, Mapping, Tuple

StateID = str
StatePath = Tuple[StateID, ...]
Schema = Mapping[str, Any]

# Callback Types
GuardCheck = Callable[..., bool]
ActionExec = Callable[..., Any]
Listener = Callable[[Any], None]
Unsubscribe = Callable[[], None]
Cleanup = Callable[[], None]
