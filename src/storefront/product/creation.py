"""Product creation and details: commands and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.category.category import Category
from storefront.product.product import SEO, Product
from storefront.domain import storefront


@storefront.command(part_of="Product")
class CreateProduct:
    name: String(required=True, max_length=200, sanitize=False)
    description: String(required=True, max_length=2000)
    price: Float(required=True, min_value=0.0)
    original_price: Float(min_value=0.0)
    category_id: Identifier(required=True)
    brand: String(required=True, max_length=100, sanitize=False)
    sku: String(required=True, max_length=50, sanitize=False)
    stock: Integer(default=0, min_value=0)
    images: Text(sanitize=False)  # JSON array
    attributes: Text(sanitize=False)  # JSON array of {name, value, type}
    specifications: Text(sanitize=False)  # JSON object
    tags: Text(sanitize=False)  # JSON array
    is_featured: Boolean(default=False)
    slug: String(max_length=220, sanitize=False)
    meta_title: String(max_length=60)
    meta_description: String(max_length=160)


@storefront.command(part_of="Product")
class UpdateProductDetails:
    product_id: Identifier(required=True)
    name: String(max_length=200, sanitize=False)
    description: String(max_length=2000)
    brand: String(max_length=100, sanitize=False)
    images: Text(sanitize=False)
    specifications: Text(sanitize=False)
    tags: Text(sanitize=False)
    meta_title: String(max_length=60)
    meta_description: String(max_length=160)


@storefront.command(part_of="Product")
class ChangeProductPrice:
    product_id: Identifier(required=True)
    price: Float(required=True, min_value=0.0)
    original_price: Float(min_value=0.0)


def _loads(value):
    return json.loads(value) if value else None


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)
        category_repo = current_domain.repository_for(Category)
        category = category_repo.get(command.category_id)

        seo = None
        if command.meta_title or command.meta_description:
            seo = SEO(meta_title=command.meta_title, meta_description=command.meta_description)

        product = Product.create(
            name=command.name,
            description=command.description,
            price=command.price,
            original_price=command.original_price,
            category_id=command.category_id,
            brand=command.brand,
            sku=command.sku,
            stock=command.stock or 0,
            images=_loads(command.images),
            attributes=_loads(command.attributes),
            specifications=_loads(command.specifications),
            tags=_loads(command.tags),
            is_featured=command.is_featured,
            slug=command.slug,
            seo=seo,
        )

        if repo.sku_taken(product.sku):
            raise ValidationError({"sku": [f"SKU '{product.sku}' is already in use"]})
        if repo.slug_taken(product.slug):
            raise ValidationError({"slug": [f"Slug '{product.slug}' is already in use"]})

        repo.add(product)

        category.link_product(product.id)
        category_repo.add(category)

        return str(product.id)

    @handle(UpdateProductDetails)
    def update_details(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        seo = None
        if command.meta_title is not None or command.meta_description is not None:
            seo = SEO(meta_title=command.meta_title, meta_description=command.meta_description)

        product.update_details(
            name=command.name,
            description=command.description,
            brand=command.brand,
            images=_loads(command.images),
            specifications=_loads(command.specifications),
            tags=_loads(command.tags),
            seo=seo,
        )
        repo.add(product)

    @handle(ChangeProductPrice)
    def change_price(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.change_price(command.price, original_price=command.original_price)
        repo.add(product)
