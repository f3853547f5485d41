"""Review aggregate: a customer's rating of a product.

One review per (user, product). Reviews are approved on submission and a
moderator can withdraw or restore them. The product's rating aggregate is
derived from the approved reviews and recomputed after every review change
(see ``ReviewService``); this module never touches the product.
"""

import json
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
)

from storefront.domain import storefront
from storefront.review.events import (
    HelpfulVoteRecorded,
    ReviewEdited,
    ReviewModerated,
    ReviewSubmitted,
)

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Review")
class HelpfulVote:
    """A user who found the review helpful. At most one per user."""

    user_id = Identifier(required=True)
    voted_at = DateTime(required=True)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Review:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)

    # Content
    rating = Integer(required=True, min_value=1, max_value=5)
    title = String(required=True, max_length=100)
    comment = String(required=True, max_length=1000)
    images = Text(sanitize=False)  # JSON array of URLs

    # Voting
    helpful_votes = HasMany(HelpfulVote)
    helpful_count = Integer(default=0, min_value=0)

    # Verification and moderation
    verified = Boolean(default=False)
    is_approved = Boolean(default=True)
    moderator_notes = String(max_length=500)

    # Timestamps
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def title_must_not_be_empty(self):
        if self.title is not None and len(self.title.strip()) == 0:
            raise ValidationError({"title": ["Review title cannot be empty"]})

    @invariant.post
    def comment_must_not_be_empty(self):
        if self.comment is not None and len(self.comment.strip()) == 0:
            raise ValidationError({"comment": ["Review comment cannot be empty"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def submit(cls, user_id, product_id, rating, title, comment, images=None, verified=False):
        """Submit a new review. ``verified`` is decided once, by the caller."""
        now = datetime.now(UTC)

        review = cls(
            user_id=user_id,
            product_id=product_id,
            rating=rating,
            title=title.strip(),
            comment=comment.strip(),
            images=json.dumps(list(images or [])),
            helpful_count=0,
            verified=verified,
            is_approved=True,
            created_at=now,
            updated_at=now,
        )

        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                product_id=str(product_id),
                user_id=str(user_id),
                rating=rating,
                verified=verified,
                submitted_at=now,
            )
        )
        return review

    @property
    def image_urls(self):
        return json.loads(self.images) if self.images else []

    # -------------------------------------------------------------------
    # Edit
    # -------------------------------------------------------------------
    def edit(self, title=_UNSET, comment=_UNSET, rating=_UNSET, images=_UNSET):
        now = datetime.now(UTC)

        with atomic_change(self):
            if title is not _UNSET:
                self.title = title.strip()
            if comment is not _UNSET:
                self.comment = comment.strip()
            if rating is not _UNSET:
                self.rating = rating
            if images is not _UNSET:
                self.images = json.dumps(list(images or []))
            self.updated_at = now

        self.raise_(
            ReviewEdited(
                review_id=str(self.id),
                product_id=str(self.product_id),
                rating=self.rating,
                edited_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Moderation
    # -------------------------------------------------------------------
    def moderate(self, is_approved, notes=None):
        now = datetime.now(UTC)
        self.is_approved = is_approved
        if notes is not None:
            self.moderator_notes = notes
        self.updated_at = now

        self.raise_(
            ReviewModerated(
                review_id=str(self.id),
                product_id=str(self.product_id),
                is_approved=is_approved,
                notes=notes,
                moderated_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Voting
    # -------------------------------------------------------------------
    def has_voted(self, user_id) -> bool:
        return any(str(vote.user_id) == str(user_id) for vote in self.helpful_votes)

    def mark_helpful(self, user_id) -> bool:
        """Count ``user_id`` as finding the review helpful.

        Returns False, changing nothing, when the user has already voted.
        """
        if self.has_voted(user_id):
            return False

        now = datetime.now(UTC)
        self.add_helpful_votes(HelpfulVote(user_id=user_id, voted_at=now))
        self.helpful_count = self.helpful_count + 1
        self.updated_at = now

        self.raise_(
            HelpfulVoteRecorded(
                review_id=str(self.id),
                voter_id=str(user_id),
                helpful_count=self.helpful_count,
                voted_at=now,
            )
        )
        return True
