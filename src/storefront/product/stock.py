"""Stock adjustment: commands and handler."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.product.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class AddStock:
    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)


@storefront.command(part_of="Product")
class ReduceStock:
    product_id: Identifier(required=True)
    quantity: Integer(required=True, min_value=1)


@storefront.command_handler(part_of=Product)
class ManageStockHandler:
    @handle(AddStock)
    def add_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.add_stock(command.quantity)
        repo.add(product)
        return product.stock

    @handle(ReduceStock)
    def reduce_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.reduce_stock(command.quantity)
        repo.add(product)
        return product.stock
