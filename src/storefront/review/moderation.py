"""ModerateReview: approve or withdraw a review."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.review.review import Review


@storefront.command(part_of="Review")
class ModerateReview:
    review_id = Identifier(required=True)
    is_approved = Boolean(required=True)
    notes = String(max_length=500)


@storefront.command_handler(part_of=Review)
class ModerateReviewHandler:
    @handle(ModerateReview)
    def moderate_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        review.moderate(command.is_approved, notes=command.notes)
        repo.add(review)
        return str(review.product_id)
