# statechart/machines/player.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import logging

from statechart.core.actions import assign
from statechart.core.definition import build
from statechart.core.implementations import Implementations

logger = logging.getLogger(__name__)


def create_context(input):
    input = input or {}
    return {
        "mediaId": input.get("mediaId", ""),
        "mediaUrl": input.get("mediaUrl", ""),
        "mediaTitle": input.get("mediaTitle", ""),
        "mediaDuration": input.get("mediaDuration", 0),
        "mediaCurrentTime": 0,
        "plays": 0,
    }


def log_ready(context, event):
    logger.debug("Player ready for %r", context.get("mediaUrl"))


IMPLEMENTATIONS = Implementations(
    actions={
        "logReady": log_ready,
        "playMedia": assign(plays=lambda ctx, ev: ctx["plays"] + 1),
        "rewind": assign(mediaCurrentTime=0),
    },
)

SCHEMA = {
    "id": "playerMachine",
    "initial": "ready",
    "context": create_context,
    "states": {
        "ready": {
            "entry": "logReady",
            "on": {"PLAY": {"target": "playing", "actions": ["playMedia"]}},
        },
        "playing": {"on": {"PAUSE": "paused", "END": "ended"}},
        "paused": {"on": {"PLAY": "playing", "END": "ended"}},
        "ended": {"on": {"RESET": {"target": "ready", "actions": "rewind"}}},
    },
}

player_machine = build(SCHEMA, IMPLEMENTATIONS)
