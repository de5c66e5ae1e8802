"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from ordering.cart.items import add_item_to_cart
from pytest_bdd import given, parsers, then


# ---------------------------------------------------------------------------
# Scalar fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def items():
    """Catalogue items by scenario name."""
    return {}


@pytest.fixture()
def outcome():
    """Container for the workflow result or the error it raised."""
    return {"result": None, "exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('the catalogue has item "{name}" priced at {price:d}'))
def catalogue_item(store, items, name, price):
    items[name] = store.add_item(name=f"Item {name}", price=price)


@given(parsers.cfparse('the shopper has {quantity:d} of item "{name}" in their cart'))
def cart_with_item(store, items, user_id, quantity, name):
    for _ in range(quantity):
        add_item_to_cart(store, user_id, items[name].id)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the cart has {count:d} row"))
def cart_has_rows(store, user_id, count):
    assert len(store.cart_rows(user_id)) == count


@then("the cart is empty")
def cart_is_empty(store, user_id):
    assert store.cart_rows(user_id) == []
