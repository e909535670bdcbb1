# statechart/machines/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from statechart.machines.app import app_machine
from statechart.machines.button import button_machine
from statechart.machines.color_picker import color_picker_machine
from statechart.machines.input import input_machine
from statechart.machines.media_player import media_player_machine
from statechart.machines.modal import modal_machine
from statechart.machines.player import player_machine
from statechart.machines.product import product_machine
from statechart.machines.product_lineup import product_lineup_machine
from statechart.machines.tabs import tabs_machine
from statechart.machines.theme import theme_machine
from statechart.machines.ui import menu_machine, player_panel_machine

__all__ = [
    "app_machine",
    "button_machine",
    "color_picker_machine",
    "input_machine",
    "media_player_machine",
    "menu_machine",
    "modal_machine",
    "player_machine",
    "player_panel_machine",
    "product_lineup_machine",
    "product_machine",
    "tabs_machine",
    "theme_machine",
]
