"""Review operations that keep the product rating in step.

Each method processes the review command first, so its unit of work commits,
and then processes ``RecalculateProductRating`` for the affected product.
The recompute therefore reads the review set as it is after the change.
"""

import json

from storefront.product.rating import RecalculateProductRating
from storefront.review.editing import EditReview
from storefront.review.moderation import ModerateReview
from storefront.review.removal import DeleteReview
from storefront.review.submission import SubmitReview
from storefront.review.voting import MarkReviewHelpful


class ReviewService:
    def __init__(self, domain):
        self.domain = domain

    def _recalculate(self, product_id):
        return self.domain.process(RecalculateProductRating(product_id=product_id), asynchronous=False)

    def submit(self, user_id, product_id, rating, title, comment, images=None) -> str:
        review_id = self.domain.process(
            SubmitReview(
                user_id=user_id,
                product_id=product_id,
                rating=rating,
                title=title,
                comment=comment,
                images=json.dumps(images) if images is not None else None,
            ),
            asynchronous=False,
        )
        self._recalculate(product_id)
        return review_id

    def edit(self, review_id, user_id, **changes):
        if changes.get("images") is not None:
            changes["images"] = json.dumps(changes["images"])
        product_id = self.domain.process(
            EditReview(review_id=review_id, user_id=user_id, **changes),
            asynchronous=False,
        )
        self._recalculate(product_id)

    def moderate(self, review_id, is_approved, notes=None):
        product_id = self.domain.process(
            ModerateReview(review_id=review_id, is_approved=is_approved, notes=notes),
            asynchronous=False,
        )
        self._recalculate(product_id)

    def delete(self, review_id):
        product_id = self.domain.process(DeleteReview(review_id=review_id), asynchronous=False)
        self._recalculate(product_id)

    def mark_helpful(self, review_id, user_id) -> int:
        """Helpfulness does not affect the rating, so nothing is recomputed."""
        return self.domain.process(MarkReviewHelpful(review_id=review_id, user_id=user_id), asynchronous=False)
