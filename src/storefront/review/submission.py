"""SubmitReview: submit a new product review.

Enforces one review per user per product at handler level (a cross-instance
check needs a repository query). The verified flag is computed here, once,
from the user's delivered orders.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.product.product import Product
from storefront.domain import storefront
from storefront.order.order import Order
from storefront.review.review import Review


@storefront.command(part_of="Review")
class SubmitReview:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    rating = Integer(required=True, min_value=1, max_value=5)
    title = String(required=True, max_length=100)
    comment = String(required=True, max_length=1000)
    images = Text(sanitize=False)  # JSON array of URLs


@storefront.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        repo = current_domain.repository_for(Review)

        if repo.find_for(command.user_id, command.product_id) is not None:
            raise ValidationError({"review": ["You have already reviewed this product"]})

        # Raises ObjectNotFoundError for unknown products
        current_domain.repository_for(Product).get(command.product_id)

        verified = current_domain.repository_for(Order).has_delivered_product(command.user_id, command.product_id)

        review = Review.submit(
            user_id=command.user_id,
            product_id=command.product_id,
            rating=command.rating,
            title=command.title,
            comment=command.comment,
            images=json.loads(command.images) if command.images else None,
            verified=verified,
        )
        repo.add(review)
        return str(review.id)
