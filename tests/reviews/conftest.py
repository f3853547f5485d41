import pytest
from protean.utils.globals import current_domain
from storefront.category.management import CreateCategory
from storefront.product.creation import CreateProduct
from storefront.product.product import Product
from storefront.review.service import ReviewService


@pytest.fixture()
def product_id():
    category_id = current_domain.process(CreateCategory(name="Kitchen"), asynchronous=False)
    return current_domain.process(
        CreateProduct(
            name="Chef Knife",
            description="Sharp",
            price=3200.0,
            category_id=category_id,
            brand="Blade",
            sku="KN-001",
            stock=4,
        ),
        asynchronous=False,
    )


@pytest.fixture()
def reviews():
    return ReviewService(current_domain)


@pytest.fixture()
def product_rating():
    def _rating(product_id):
        ratings = current_domain.repository_for(Product).get(product_id).ratings
        return ratings.average, ratings.count

    return _rating
