"""Order placement: command and handler."""

import json

from protean import handle
from protean.fields import DateTime, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.product.product import Product
from storefront.domain import storefront
from storefront.order.order import Order
from storefront.shared.types import PaymentMethod


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    items = Text(required=True, sanitize=False)  # JSON: list of {product_id, quantity, price?, selected_attributes?}
    shipping_address = Text(required=True, sanitize=False)  # JSON: address dict
    billing_address = Text(sanitize=False)  # JSON: address dict, defaults to the shipping address
    payment_method = String(required=True, choices=PaymentMethod)
    discount = Float(default=0.0, min_value=0.0)
    notes = String(max_length=500)
    coupon_code = String(max_length=50)
    delivery_instructions = String(max_length=500)
    estimated_delivery = DateTime()


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        shipping_address = (
            json.loads(command.shipping_address)
            if isinstance(command.shipping_address, str)
            else command.shipping_address
        )
        billing_address = command.billing_address or shipping_address
        if isinstance(billing_address, str):
            billing_address = json.loads(billing_address)

        # Lock in the current effective price for lines that do not carry one
        product_repo = current_domain.repository_for(Product)
        for item in items_data:
            if item.get("price") is None:
                product = product_repo.get(item["product_id"])
                item["price"] = product.discounted_price()

        order = Order.place(
            user_id=command.user_id,
            items_data=items_data,
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment_method=command.payment_method,
            discount=command.discount or 0.0,
            notes=command.notes,
            coupon_code=command.coupon_code,
            delivery_instructions=command.delivery_instructions,
            estimated_delivery=command.estimated_delivery,
        )
        current_domain.repository_for(Order).add(order)
        return str(order.id)
