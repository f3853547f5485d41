"""MarkReviewHelpful: count a user's helpful vote on a review.

A second vote by the same user is accepted and ignored.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.review.review import Review


@storefront.command(part_of="Review")
class MarkReviewHelpful:
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)


@storefront.command_handler(part_of=Review)
class MarkReviewHelpfulHandler:
    @handle(MarkReviewHelpful)
    def mark_helpful(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        if review.mark_helpful(command.user_id):
            repo.add(review)
        return review.helpful_count
