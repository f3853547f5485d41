"""Account deletion: command, handler and the service that finishes the job.

``DeleteUser`` removes the user together with their orders, reviews and
interaction records inside a single unit of work, so on one provider either
everything goes or nothing does. The products the user had reviewed lose
those reviews, and ``AccountService.delete_account`` recomputes their ratings
afterwards, each recompute in its own unit of work. A failure there leaves
the account deleted and the remaining ratings stale until the next review
change on those products.
"""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.product.rating import RecalculateProductRating
from storefront.domain import storefront
from storefront.interaction.interaction import UserInteraction
from storefront.user.user import User
from storefront.order.order import Order
from storefront.review.review import Review
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="User")
class DeleteUser:
    user_id: Identifier(required=True)


@storefront.command_handler(part_of=User)
class DeleteUserHandler:
    @handle(DeleteUser)
    def delete_user(self, command):
        user_repo = current_domain.repository_for(User)
        user = user_repo.get(command.user_id)
        user_id = str(user.id)

        order_repo = current_domain.repository_for(Order)
        orders = order_repo.find_by_user(user_id)
        for order in orders:
            order_repo._dao.delete(order)

        review_repo = current_domain.repository_for(Review)
        reviews = review_repo.find_by_user(user_id)
        for review in reviews:
            review_repo._dao.delete(review)

        interaction_repo = current_domain.repository_for(UserInteraction)
        interactions = interaction_repo.find_by_user(user_id)
        for interaction in interactions:
            interaction_repo._dao.delete(interaction)

        user_repo._dao.delete(user)

        logger.info(
            "user_deleted",
            user_id=user_id,
            orders=len(orders),
            reviews=len(reviews),
            interactions=len(interactions),
        )
        return sorted({str(review.product_id) for review in reviews})


class AccountService:
    def __init__(self, domain):
        self.domain = domain

    def delete_account(self, user_id) -> list[str]:
        """Delete the user and everything they own, then refresh affected ratings.

        Returns the ids of the products whose ratings were recomputed.
        """
        product_ids = self.domain.process(DeleteUser(user_id=user_id), asynchronous=False)
        for product_id in product_ids:
            self.domain.process(RecalculateProductRating(product_id=product_id), asynchronous=False)
        return product_ids
