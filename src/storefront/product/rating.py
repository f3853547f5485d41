"""Product rating recompute: command and handler.

The rating shown on a product is always derived from its approved reviews.
Review writes are followed by this command (see ``ReviewService``), which
reads the committed review set and overwrites the product's aggregate.
"""

import math

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.product.events import ProductRatingRecalculated
from storefront.product.product import Product
from storefront.domain import storefront
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def round_rating(value: float) -> float:
    """Round half up to one decimal place (3.25 -> 3.3, 3.24 -> 3.2)."""
    return math.floor(value * 10 + 0.5) / 10


def summarize(ratings: list[int]) -> tuple[float, int]:
    """Average and count for a list of ratings; ``(0.0, 0)`` when empty."""
    if not ratings:
        return 0.0, 0
    return round_rating(sum(ratings) / len(ratings)), len(ratings)


@storefront.command(part_of="Product")
class RecalculateProductRating:
    product_id: Identifier(required=True)


@storefront.command_handler(part_of=Product)
class RecalculateRatingHandler:
    @handle(RecalculateProductRating)
    def recalculate(self, command):
        from storefront.review.review import Review

        review_repo = current_domain.repository_for(Review)
        reviews = review_repo.find_by_product(command.product_id, approved_only=True)
        average, count = summarize([review.rating for review in reviews])

        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.apply_rating(average, count)
        product.raise_(ProductRatingRecalculated(product_id=product.id, average=average, count=count))
        repo.add(product)

        logger.info(
            "product_rating_recalculated",
            product_id=str(command.product_id),
            average=average,
            count=count,
        )
        return average, count
