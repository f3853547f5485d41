"""Deleting an account removes everything the user owns and refreshes ratings."""

import pytest
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from storefront.category.management import CreateCategory
from storefront.product.creation import CreateProduct
from storefront.product.product import Product
from storefront.interaction.interaction import UserInteraction
from storefront.interaction.tracking import RecordInteraction
from storefront.user.removal import AccountService
from storefront.user.user import User
from storefront.order.order import Order
from storefront.review.review import Review
from storefront.review.service import ReviewService


@pytest.fixture()
def product_id():
    category_id = current_domain.process(CreateCategory(name="Garden"), asynchronous=False)
    return current_domain.process(
        CreateProduct(
            name="Hose",
            description="Twenty metres",
            price=800.0,
            category_id=category_id,
            brand="Aqua",
            sku="GD-001",
            stock=12,
        ),
        asynchronous=False,
    )


@pytest.fixture()
def populated(register_user, product_id):
    jane = register_user(email="jane@example.com")
    tom = register_user(email="tom@example.com", first_name="Tom")

    address = {"street": "1 Ngong Road", "city": "Nairobi", "state": "Nairobi County", "zip_code": "00200"}
    for user in (jane, tom):
        order = Order.place(
            user_id=user,
            items_data=[{"product_id": product_id, "quantity": 1, "price": 800.0}],
            shipping_address=address,
            billing_address=address,
            payment_method="mpesa",
        )
        current_domain.repository_for(Order).add(order)

    reviews = ReviewService(current_domain)
    reviews.submit(jane, product_id, 1, "Leaks", "Split on day two")
    reviews.submit(tom, product_id, 5, "Great", "Works well")

    current_domain.process(RecordInteraction(user_id=jane, product_id=product_id, type="view"), asynchronous=False)
    current_domain.process(RecordInteraction(user_id=tom, product_id=product_id, type="like"), asynchronous=False)

    return {"jane": jane, "tom": tom, "product": product_id}


class TestAccountDeletion:
    def test_cascade(self, populated):
        AccountService(current_domain).delete_account(populated["jane"])

        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(User).get(populated["jane"])

        assert current_domain.repository_for(Order).find_by_user(populated["jane"]) == []
        assert current_domain.repository_for(Review).find_by_user(populated["jane"]) == []
        assert current_domain.repository_for(UserInteraction).find_by_user(populated["jane"]) == []

    def test_other_users_untouched(self, populated):
        AccountService(current_domain).delete_account(populated["jane"])

        tom = populated["tom"]
        assert current_domain.repository_for(User).get(tom).first_name == "Tom"
        assert len(current_domain.repository_for(Order).find_by_user(tom)) == 1
        assert len(current_domain.repository_for(Review).find_by_user(tom)) == 1
        assert len(current_domain.repository_for(UserInteraction).find_by_user(tom)) == 1

    def test_ratings_recomputed(self, populated):
        product = current_domain.repository_for(Product).get(populated["product"])
        assert (product.ratings.average, product.ratings.count) == (3.0, 2)

        touched = AccountService(current_domain).delete_account(populated["jane"])

        assert touched == [populated["product"]]
        product = current_domain.repository_for(Product).get(populated["product"])
        assert (product.ratings.average, product.ratings.count) == (5.0, 1)

    def test_user_without_reviews(self, register_user):
        user_id = register_user(email="quiet@example.com")
        assert AccountService(current_domain).delete_account(user_id) == []

    def test_unknown_user(self):
        with pytest.raises(ObjectNotFoundError):
            AccountService(current_domain).delete_account("missing")
