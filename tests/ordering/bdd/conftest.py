"""Shared BDD fixtures and step definitions for the Ordering context."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then, when
from storefront.order.order import Order


@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse("an order for {quantity:d} units at {price:f} was placed"),
    target_fixture="order",
)
def _(quantity, price, address):
    return Order.place(
        user_id="user-1",
        items_data=[{"product_id": "prod-1", "quantity": quantity, "price": price}],
        shipping_address=address,
        billing_address=address,
        payment_method="mpesa",
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the order moves to "{status}"'))
def _(order, status, error):
    try:
        order.update_status(status)
    except ValidationError as exc:
        error["exc"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(order, status):
    assert order.order_status == status


@then(parsers.re(r"the timeline has (?P<count>\d+) entr(y|ies)"))
def _(order, count):
    assert len(order.timeline) == int(count)


@then(parsers.cfparse("the order total is {total:f}"))
def _(order, total):
    assert order.pricing.total == pytest.approx(total)


@then("the update is rejected")
def _(error):
    assert isinstance(error["exc"], ValidationError)
