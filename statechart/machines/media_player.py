# statechart/machines/media_player.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
An embedded video player. The external player API is reached only through
the ``"player"`` adapter (see PlayerAdapter); one ``youtube`` callback actor
per machine instance owns the player for as long as the machine runs.

``hasPlayer`` is kept exactly as the component ships it: it returns None,
so ``READY`` is never taken. Supply a corrected guard through
``IMPLEMENTATIONS.with_overrides(guards={"hasPlayer": ...})``.
"""

import logging
from typing import Any, Callable, Optional

from statechart.core.actions import assign, send_to
from statechart.core.definition import build
from statechart.core.events import Event
from statechart.core.implementations import Implementations
from statechart.interfaces.protocols import PlayerAdapter
from statechart.runtime.actors import ActorScope, callback

logger = logging.getLogger(__name__)

PLAYER_ELEMENT_ID = "player"

# Player state codes reported by the embedded API.
ENDED = 0
PLAYING = 1
PAUSED = 2

_STATE_EVENTS = {ENDED: "END", PLAYING: "PLAY", PAUSED: "PAUSE"}


class PlayerBridge:
    """
    Connects one player instance to the machine: player callbacks become
    events sent back, and commands received from the machine become
    adapter calls.
    """

    def __init__(self, scope: ActorScope) -> None:
        self._scope = scope
        self._adapter: PlayerAdapter = scope.adapters["player"]
        self.player: Any = None

    def start(self) -> Callable[[], None]:
        self._scope.receive(self.handle)
        self._adapter.create(
            PLAYER_ELEMENT_ID,
            self._scope.input["videoId"],
            on_ready=self.on_ready,
            on_state_change=self.on_state_change,
        )
        return self.close

    def on_ready(self, player: Any) -> None:
        self.player = player
        self._scope.send_back(Event("PLAYER_CREATED", player=player))
        self._scope.send_back("READY")

    def on_state_change(self, code: int) -> None:
        event_type = _STATE_EVENTS.get(code)
        if event_type is not None:
            self._scope.send_back(event_type)

    def handle(self, event: Event) -> None:
        if self.player is None:
            logger.debug("No player yet; ignoring %s", event.type)
            return
        if event.type == "PLAY_VIDEO":
            self._adapter.play(self.player)
        elif event.type == "PAUSE_VIDEO":
            self._adapter.pause(self.player)

    def close(self) -> None:
        self._adapter.destroy(self.player)
        self.player = None


youtube_player = callback(lambda scope: PlayerBridge(scope).start(), name="youtubePlayer")


def has_player(context, event) -> Optional[bool]:
    # Missing return: the check is evaluated and discarded.
    context["player"] is not None  # noqa: B015


def create_context(input):
    return {"player": None, "videoId": (input or {}).get("videoId", "")}


IMPLEMENTATIONS = Implementations(
    guards={"hasPlayer": has_player},
    actions={"storePlayer": assign(player=lambda ctx, ev: ev.get("player"))},
    actors={"youtubePlayer": youtube_player},
)

SCHEMA = {
    "id": "youtubeMachine",
    "initial": "ready",
    "context": create_context,
    "invoke": {
        "id": "youtube",
        "src": "youtubePlayer",
        "input": lambda ctx, ev: {"videoId": ctx["videoId"]},
    },
    "on": {"PLAYER_CREATED": {"actions": "storePlayer"}},
    "states": {
        "ready": {
            "on": {
                "READY": {
                    "guard": "hasPlayer",
                    "target": "playing",
                    "actions": send_to("youtube", "PLAY_VIDEO"),
                }
            }
        },
        "playing": {"on": {"PAUSE": "paused", "END": "ended"}},
        "paused": {"on": {"PLAY": "playing", "END": "ended"}},
        "ended": {"on": {"RESET": "ready"}},
    },
}

media_player_machine = build(SCHEMA, IMPLEMENTATIONS)
