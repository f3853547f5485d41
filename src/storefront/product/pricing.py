"""Product discounts: commands and handler."""

from protean import handle
from protean.fields import DateTime, Float, Identifier, String
from protean.utils.globals import current_domain

from storefront.product.product import Product
from storefront.domain import storefront
from storefront.shared.types import DiscountType


@storefront.command(part_of="Product")
class SetDiscount:
    product_id: Identifier(required=True)
    type: String(required=True, choices=DiscountType)
    value: Float(required=True, min_value=0.0)
    start_date: DateTime()
    end_date: DateTime()


@storefront.command(part_of="Product")
class ClearDiscount:
    product_id: Identifier(required=True)


@storefront.command_handler(part_of=Product)
class ManageDiscountHandler:
    @handle(SetDiscount)
    def set_discount(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.set_discount(
            type=command.type,
            value=command.value,
            start_date=command.start_date,
            end_date=command.end_date,
        )
        repo.add(product)

    @handle(ClearDiscount)
    def clear_discount(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.clear_discount()
        repo.add(product)
