import json

import pytest
from protean.utils.globals import current_domain
from storefront.category.management import CreateCategory
from storefront.product.creation import CreateProduct
from storefront.order.placement import PlaceOrder

DEFAULT_ITEMS = [{"product_id": "prod-1", "quantity": 2, "price": 1000.0}]


@pytest.fixture()
def address():
    return {
        "street": "12 Moi Avenue",
        "city": "Nairobi",
        "state": "Nairobi County",
        "zip_code": "00100",
    }


@pytest.fixture()
def product_id():
    category_id = current_domain.process(CreateCategory(name="Electronics"), asynchronous=False)
    return current_domain.process(
        CreateProduct(
            name="Smartphone X",
            description="A phone",
            price=1500.0,
            category_id=category_id,
            brand="Acme",
            sku="PH-001",
            stock=10,
        ),
        asynchronous=False,
    )


@pytest.fixture()
def place_order(address):
    """Place an order through the command handler and return its id."""

    def _place(user_id="user-1", items=None, **overrides):
        command = {
            "user_id": user_id,
            "items": json.dumps(DEFAULT_ITEMS if items is None else items),
            "shipping_address": json.dumps(address),
            "payment_method": "mpesa",
        }
        command.update(overrides)
        return current_domain.process(PlaceOrder(**command), asynchronous=False)

    return _place
