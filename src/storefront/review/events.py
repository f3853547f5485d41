"""Domain events for the Review aggregate."""

from protean.fields import Boolean, DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Review")
class ReviewSubmitted:
    """A customer reviewed a product."""

    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True)
    verified = Boolean(default=False)
    submitted_at = DateTime(required=True)


@storefront.event(part_of="Review")
class ReviewEdited:
    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    rating = Integer(required=True)
    edited_at = DateTime(required=True)


@storefront.event(part_of="Review")
class ReviewModerated:
    """A moderator approved or withdrew a review."""

    __version__ = 1

    review_id = Identifier(required=True)
    product_id = Identifier(required=True)
    is_approved = Boolean(required=True)
    notes = String()
    moderated_at = DateTime(required=True)


@storefront.event(part_of="Review")
class HelpfulVoteRecorded:
    __version__ = 1

    review_id = Identifier(required=True)
    voter_id = Identifier(required=True)
    helpful_count = Integer(required=True)
    voted_at = DateTime(required=True)
