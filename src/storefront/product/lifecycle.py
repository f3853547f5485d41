"""Product visibility and counters: commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer
from protean.utils.globals import current_domain

from storefront.product.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class ActivateProduct:
    product_id: Identifier(required=True)


@storefront.command(part_of="Product")
class DeactivateProduct:
    product_id: Identifier(required=True)


@storefront.command(part_of="Product")
class FeatureProduct:
    product_id: Identifier(required=True)
    featured: Boolean(default=True)


@storefront.command(part_of="Product")
class RecordProductView:
    product_id: Identifier(required=True)


@storefront.command(part_of="Product")
class RecordProductSale:
    product_id: Identifier(required=True)
    quantity: Integer(default=1, min_value=1)


@storefront.command_handler(part_of=Product)
class ManageLifecycleHandler:
    @handle(ActivateProduct)
    def activate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.activate()
        repo.add(product)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)

    @handle(FeatureProduct)
    def feature_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        if command.featured:
            product.feature()
        else:
            product.unfeature()
        repo.add(product)

    @handle(RecordProductView)
    def record_view(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.record_view()
        repo.add(product)

    @handle(RecordProductSale)
    def record_sale(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.record_sale(command.quantity or 1)
        repo.add(product)
