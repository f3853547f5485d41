"""Query methods for the Review aggregate."""

import math

from storefront.domain import storefront
from storefront.review.review import Review
from storefront.shared.queries import fetch_all

RATING_SCALE = (5, 4, 3, 2, 1)


@storefront.repository(part_of=Review)
class ReviewRepository:
    def find_by_product(self, product_id, approved_only: bool = True) -> list[Review]:
        """Reviews of a product, newest first."""
        criteria = {"product_id": str(product_id)}
        if approved_only:
            criteria["is_approved"] = True
        return fetch_all(self._dao.query.filter(**criteria).order_by("-created_at"))

    def find_by_user(self, user_id) -> list[Review]:
        return fetch_all(self._dao.query.filter(user_id=str(user_id)).order_by("-created_at"))

    def find_for(self, user_id, product_id) -> Review | None:
        """The review a user wrote for a product, if any."""
        results = self._dao.query.filter(user_id=str(user_id), product_id=str(product_id)).all().items
        return results[0] if results else None

    def product_stats(self, product_id) -> dict:
        """Histogram of approved ratings for a product.

        Returns ``total_reviews``, ``rating_distribution`` (count per star,
        5 down to 1) and ``percentage_distribution`` (whole percentages).
        """
        distribution = dict.fromkeys(RATING_SCALE, 0)
        for review in self.find_by_product(product_id, approved_only=True):
            distribution[review.rating] += 1

        total = sum(distribution.values())
        percentages = {
            rating: math.floor(count / total * 100 + 0.5) if total else 0 for rating, count in distribution.items()
        }

        return {
            "total_reviews": total,
            "rating_distribution": distribution,
            "percentage_distribution": percentages,
        }
