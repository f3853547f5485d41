"""UserInteraction aggregate: a recorded user action on a product."""

import json
from datetime import datetime

from protean.fields import DateTime, Identifier, String, Text

from storefront.domain import storefront
from storefront.shared.types import InteractionType


@storefront.aggregate
class UserInteraction:
    """Raw signal for recommendations. Owned by the user and deleted with them."""

    user_id: Identifier(required=True)
    product_id: Identifier(required=True)
    type: String(required=True, choices=InteractionType)
    details: Text(sanitize=False)  # JSON object
    timestamp: DateTime(default=datetime.now)

    @classmethod
    def record(cls, user_id, product_id, type, details=None):
        return cls(
            user_id=user_id,
            product_id=product_id,
            type=type,
            details=json.dumps(dict(details or {})),
            timestamp=datetime.now(),
        )

    @property
    def detail_map(self):
        return json.loads(self.details) if self.details else {}
