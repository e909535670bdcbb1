# tests/unit/machines/test_product_lineup.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from statechart.machines.product_lineup import product_lineup_machine
from statechart.runtime.interpreter import Interpreter

PRODUCTS = [
    {"slug": "air", "colors": [{"name": "silver"}, {"name": "gold"}]},
    {"slug": "pro", "colors": [{"name": "black"}]},
    {"slug": "mini"},
]


@pytest.fixture
def lineup(scheduler):
    interpreter = Interpreter(product_lineup_machine, scheduler=scheduler)
    interpreter.start({"products": PRODUCTS})
    yield interpreter
    interpreter.stop()


def _focus(interpreter):
    context = interpreter.snapshot.context
    return context["activeSlug"], context["selectedColor"]


def test_starts_on_first_product(lineup):
    assert _focus(lineup) == ("air", "silver")


def test_select_product_and_color(lineup):
    lineup.send({"type": "SELECT_PRODUCT", "slug": "pro"})
    assert _focus(lineup) == ("pro", "black")
    lineup.send({"type": "SELECT_COLOR", "color": "space gray"})
    assert _focus(lineup) == ("pro", "space gray")


def test_unknown_product_is_ignored(lineup):
    lineup.send({"type": "SELECT_PRODUCT", "slug": "max"})
    assert _focus(lineup) == ("air", "silver")


def test_next_and_previous_wrap(lineup):
    lineup.send("NEXT")
    assert _focus(lineup) == ("pro", "black")
    lineup.send("NEXT")
    assert _focus(lineup) == ("mini", None)
    lineup.send("NEXT")
    assert _focus(lineup) == ("air", "silver")
    lineup.send("PREVIOUS")
    assert _focus(lineup) == ("mini", None)


def test_navigation_needs_products(scheduler):
    interpreter = Interpreter(product_lineup_machine, scheduler=scheduler)
    interpreter.start()
    assert _focus(interpreter) == ("", None)
    interpreter.send("NEXT")
    interpreter.send("PREVIOUS")
    assert _focus(interpreter) == ("", None)
