"""BDD tests for product stock adjustments."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when
from storefront.product.events import StockAdjusted
from storefront.product.product import Product

scenarios("features/product_stock.feature")


@pytest.fixture()
def error():
    return {"exc": None}


@given(parsers.cfparse("a product with {stock:d} units in stock"), target_fixture="product")
def _(stock):
    return Product.create(
        name="Desk Lamp",
        description="Warm light",
        price=1800.0,
        category_id="cat-1",
        brand="Lumo",
        sku="LMP-01",
        stock=stock,
    )


@when(parsers.cfparse("{quantity:d} units are added"))
def _(product, quantity):
    product.add_stock(quantity)


@when(parsers.cfparse("{quantity:d} units are removed"))
def _(product, quantity, error):
    try:
        product.reduce_stock(quantity)
    except ValidationError as exc:
        error["exc"] = exc


@then(parsers.cfparse("the product has {stock:d} units in stock"))
def _(product, stock):
    assert product.stock == stock


@then("the product is in stock")
def _(product):
    assert product.is_in_stock()
    assert isinstance(product._events[-1], StockAdjusted)


@then("the product is out of stock")
def _(product):
    assert not product.is_in_stock()


@then(parsers.cfparse('the stock change is rejected with "{message}"'))
def _(error, message):
    assert error["exc"] is not None
    assert error["exc"].messages["stock"] == [message]
