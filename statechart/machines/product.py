# statechart/machines/product.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Product browsing: selecting, viewing details, comparing, filtering and a
cart of product ids.
"""

from statechart.core.actions import assign
from statechart.core.definition import build
from statechart.core.implementations import Implementations


def create_context(input=None):
    return {
        "selectedProductId": None,
        "filteredCategory": None,
        "searchQuery": "",
        "comparedProductIds": [],
        "cartItems": [],
    }


IMPLEMENTATIONS = Implementations(
    actions={
        "setSelectedProduct": assign(selectedProductId=lambda ctx, ev: ev.get("productId")),
        "setFilter": assign(filteredCategory=lambda ctx, ev: ev.get("category")),
        "setSearchQuery": assign(searchQuery=lambda ctx, ev: ev.get("query", "")),
        "setComparedProducts": assign(comparedProductIds=lambda ctx, ev: list(ev.get("productIds") or [])),
        "addToCart": assign(cartItems=lambda ctx, ev: ctx["cartItems"] + [ev.get("productId")]),
        "clearFilters": assign(filteredCategory=None, searchQuery=""),
        "clearComparison": assign(comparedProductIds=[]),
    },
)

SCHEMA = {
    "id": "productMachine",
    "initial": "browsing",
    "context": create_context,
    "states": {
        "browsing": {
            "on": {
                "SELECT_PRODUCT": {"target": "productSelected", "actions": ["setSelectedProduct"]},
                "FILTER_PRODUCTS": {"actions": ["setFilter"]},
                "SEARCH_PRODUCTS": {"actions": ["setSearchQuery"]},
                "COMPARE_PRODUCTS": {"target": "comparing", "actions": ["setComparedProducts"]},
                "CLEAR_FILTERS": {"actions": ["clearFilters"]},
            }
        },
        "productSelected": {
            "on": {
                "VIEW_PRODUCT_DETAILS": {"target": "viewingDetails", "actions": ["setSelectedProduct"]},
                "ADD_TO_CART": {"actions": ["addToCart"]},
                "SELECT_PRODUCT": {"actions": ["setSelectedProduct"]},
            }
        },
        "viewingDetails": {
            "on": {
                "ADD_TO_CART": {"actions": ["addToCart"]},
                "SELECT_PRODUCT": {"target": "productSelected", "actions": ["setSelectedProduct"]},
            }
        },
        "comparing": {
            "on": {
                "SELECT_PRODUCT": {"target": "productSelected", "actions": ["setSelectedProduct"]},
                "COMPARE_PRODUCTS": {"actions": ["setComparedProducts"]},
                "CLEAR_FILTERS": {"target": "browsing", "actions": ["clearComparison"]},
            }
        },
    },
}

product_machine = build(SCHEMA, IMPLEMENTATIONS)
