# statechart/machines/ui.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Page chrome: the navigation menu and the media player panel. The two are
independent machines; a page runs one interpreter for each.

While open, the player panel runs the player machine as the child actor
``playerActor`` and forwards the app's media events to it.
"""

from statechart.core.actions import assign, send_to
from statechart.core.definition import build
from statechart.core.implementations import Implementations
from statechart.machines.player import player_machine

PLAYER_ACTOR = "playerActor"

MENU_SCHEMA = {
    "id": "menu",
    "initial": "closed",
    "states": {
        "closed": {"on": {"TOGGLE_MENU": "open"}},
        "open": {"on": {"TOGGLE_MENU": "closed"}},
    },
}

menu_machine = build(MENU_SCHEMA)

PLAYER_PANEL_IMPLEMENTATIONS = Implementations(
    actions={"setMediaUrl": assign(mediaUrl=lambda ctx, ev: ev.get("mediaUrl", ""))},
    actors={"playerMachine": player_machine},
)

PLAYER_PANEL_SCHEMA = {
    "id": "uiMachine",
    "initial": "closed",
    "context": {"mediaUrl": ""},
    "states": {
        "closed": {"on": {"OPEN_PLAYER": {"target": "open", "actions": "setMediaUrl"}}},
        "open": {
            "invoke": {
                "id": PLAYER_ACTOR,
                "src": "playerMachine",
                "input": lambda ctx, ev: {"mediaUrl": ctx["mediaUrl"]},
                "on_done": "closed",
                "on_error": "closed",
            },
            "on": {
                "CLOSE_PLAYER": "closed",
                "MEDIA_PLAYING": {"actions": send_to(PLAYER_ACTOR, "PLAY")},
                "MEDIA_PAUSE": {"actions": send_to(PLAYER_ACTOR, "PAUSE")},
                "MEDIA_STOP": "closed",
            },
        },
    },
}

player_panel_machine = build(PLAYER_PANEL_SCHEMA, PLAYER_PANEL_IMPLEMENTATIONS)
