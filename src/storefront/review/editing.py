"""EditReview: change the content or rating of an existing review.

Only the original author can edit.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.review.review import Review


@storefront.command(part_of="Review")
class EditReview:
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)  # Must match original author
    title = String(max_length=100)
    comment = String(max_length=1000)
    rating = Integer(min_value=1, max_value=5)
    images = Text(sanitize=False)  # JSON array of URLs


@storefront.command_handler(part_of=Review)
class EditReviewHandler:
    @handle(EditReview)
    def edit_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)

        if str(review.user_id) != str(command.user_id):
            raise ValidationError({"user_id": ["Only the review author can edit this review"]})

        kwargs = {}
        if command.title is not None:
            kwargs["title"] = command.title
        if command.comment is not None:
            kwargs["comment"] = command.comment
        if command.rating is not None:
            kwargs["rating"] = command.rating
        if command.images is not None:
            kwargs["images"] = json.loads(command.images)

        review.edit(**kwargs)
        repo.add(review)
        return str(review.product_id)
