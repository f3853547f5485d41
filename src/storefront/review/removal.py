"""DeleteReview: permanently remove a review."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.review.review import Review
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Review")
class DeleteReview:
    review_id = Identifier(required=True)


@storefront.command_handler(part_of=Review)
class DeleteReviewHandler:
    @handle(DeleteReview)
    def delete_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        product_id = str(review.product_id)

        repo._dao.delete(review)

        logger.info("review_deleted", review_id=str(command.review_id), product_id=product_id)
        return product_id
