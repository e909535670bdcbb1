# statechart/machines/product_lineup.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
A carousel over a product lineup. Each product is a mapping with a ``slug``
and an optional ``colors`` list of ``{"name": ...}``; moving to a product
selects its first color.
"""

from typing import Any, Dict, List, Optional

from statechart.core.definition import build
from statechart.core.implementations import Implementations


def _index_of(products: List[Dict[str, Any]], slug: str) -> int:
    for index, product in enumerate(products):
        if product.get("slug") == slug:
            return index
    return -1


def _first_color(product: Optional[Dict[str, Any]]) -> Optional[str]:
    colors = (product or {}).get("colors") or []
    return colors[0].get("name") if colors else None


def _focus(context, product) -> Dict[str, Any]:
    return dict(context, activeSlug=product.get("slug") or "", selectedColor=_first_color(product))


def create_context(input):
    products = list((input or {}).get("products") or [])
    first = products[0] if products else None
    return {
        "products": products,
        "activeSlug": first.get("slug", "") if first else "",
        "selectedColor": _first_color(first),
    }


def product_exists(context, event) -> bool:
    return _index_of(context["products"], event.get("slug")) >= 0


def has_products(context, event) -> bool:
    return len(context["products"]) > 0


def select_product(context, event):
    products = context["products"]
    index = _index_of(products, event.get("slug"))
    product = products[index] if index >= 0 else None
    return dict(context, activeSlug=event.get("slug"), selectedColor=_first_color(product))


def select_color(context, event):
    return dict(context, selectedColor=event.get("color"))


def next_product(context, event):
    products = context["products"]
    current = _index_of(products, context["activeSlug"])
    return _focus(context, products[(current + 1) % len(products) if current >= 0 else 0])


def previous_product(context, event):
    products = context["products"]
    current = _index_of(products, context["activeSlug"])
    return _focus(context, products[current - 1 if current > 0 else len(products) - 1])


IMPLEMENTATIONS = Implementations(
    guards={"productExists": product_exists, "hasProducts": has_products},
    actions={
        "selectProduct": select_product,
        "selectColor": select_color,
        "nextProduct": next_product,
        "previousProduct": previous_product,
    },
)

SCHEMA = {
    "id": "productLineup",
    "context": create_context,
    "on": {
        "SELECT_PRODUCT": {"guard": "productExists", "actions": ["selectProduct"]},
        "SELECT_COLOR": {"actions": ["selectColor"]},
        "NEXT": {"guard": "hasProducts", "actions": ["nextProduct"]},
        "PREVIOUS": {"guard": "hasProducts", "actions": ["previousProduct"]},
    },
}

product_lineup_machine = build(SCHEMA, IMPLEMENTATIONS)
