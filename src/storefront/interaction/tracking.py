"""Interaction tracking: command, handler and queries."""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.interaction.interaction import UserInteraction
from storefront.shared.queries import fetch_all
from storefront.shared.types import InteractionType


@storefront.command(part_of="UserInteraction")
class RecordInteraction:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)
    type: String(required=True, choices=InteractionType)
    details: Text(sanitize=False)  # JSON object


@storefront.command_handler(part_of=UserInteraction)
class RecordInteractionHandler:
    @handle(RecordInteraction)
    def record_interaction(self, command):
        interaction = UserInteraction.record(
            user_id=command.user_id,
            product_id=command.product_id,
            type=command.type,
            details=json.loads(command.details) if command.details else None,
        )
        current_domain.repository_for(UserInteraction).add(interaction)
        return str(interaction.id)


@storefront.repository(part_of=UserInteraction)
class UserInteractionRepository:
    def find_by_user(self, user_id) -> list[UserInteraction]:
        """A user's interactions, most recent first."""
        return fetch_all(self._dao.query.filter(user_id=str(user_id)).order_by("-timestamp"))

    def find_by_product(self, product_id) -> list[UserInteraction]:
        return fetch_all(self._dao.query.filter(product_id=str(product_id)).order_by("-timestamp"))
