# statechart/machines/color_picker.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from statechart.core.actions import assign
from statechart.core.definition import build
from statechart.core.implementations import Implementations

IMPLEMENTATIONS = Implementations(
    actions={
        "select": assign(selected=lambda ctx, ev: ev.get("value")),
        "reset": assign(selected=None),
    },
)

SCHEMA = {
    "id": "colorPicker",
    "initial": "idle",
    "context": lambda input: {"options": list((input or {}).get("options", [])), "selected": None},
    "states": {
        "idle": {
            "on": {
                "SELECT": {"target": "selected", "actions": "select"},
                "RESET": {"actions": "reset"},
            }
        },
        "selected": {
            "on": {
                "SELECT": {"actions": "select"},
                "RESET": {"target": "idle", "actions": "reset"},
            }
        },
    },
}

color_picker_machine = build(SCHEMA, IMPLEMENTATIONS)
