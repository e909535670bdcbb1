# statechart/machines/app.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Top-level page state. Media events are mirrored to the player panel, which
the app runs as the child actor ``uiMachine``.
"""

from statechart.core.actions import assign, send_to
from statechart.core.definition import build
from statechart.core.implementations import Implementations
from statechart.machines.ui import player_panel_machine

UI_ACTOR = "uiMachine"

IMPLEMENTATIONS = Implementations(
    actions={"setPathname": assign(pathname=lambda ctx, ev: ev.get("pathname") or "")},
    actors={"playerPanel": player_panel_machine},
)


def _forward(event_type: str, target: str):
    return {"target": target, "actions": send_to(UI_ACTOR, event_type)}


SCHEMA = {
    "id": "appMachine",
    "initial": "idle",
    "context": {"pathname": ""},
    "invoke": {"id": UI_ACTOR, "src": "playerPanel"},
    "states": {
        "idle": {"on": {"PAGE_LOADED": {"target": "browsing", "actions": "setPathname"}}},
        "browsing": {"on": {"MEDIA_PLAYING": _forward("MEDIA_PLAYING", "playing")}},
        "playing": {
            "on": {
                "MEDIA_PAUSE": _forward("MEDIA_PAUSE", "paused"),
                "MEDIA_STOP": _forward("MEDIA_STOP", "idle"),
            }
        },
        "paused": {
            "on": {
                "MEDIA_PLAYING": _forward("MEDIA_PLAYING", "playing"),
                "MEDIA_STOP": _forward("MEDIA_STOP", "idle"),
            }
        },
    },
}

app_machine = build(SCHEMA, IMPLEMENTATIONS)
