"""Profile, preferences and wishlist: commands and handler."""

import json

from protean import handle
from protean.fields import Boolean, Float, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.user.user import User


@storefront.command(part_of="User")
class UpdateProfile:
    user_id: Identifier(required=True)
    first_name: String(max_length=50)
    last_name: String(max_length=50)
    phone: String(max_length=20)
    avatar: String(max_length=500)


@storefront.command(part_of="User")
class UpdatePreferences:
    user_id: Identifier(required=True)
    categories: Text(sanitize=False)  # JSON array
    brands: Text(sanitize=False)  # JSON array
    price_min: Float(min_value=0.0)
    price_max: Float(min_value=0.0)
    email_notifications: Boolean()
    sms_notifications: Boolean()
    push_notifications: Boolean()


@storefront.command(part_of="User")
class AddToWishlist:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)


@storefront.command(part_of="User")
class RemoveFromWishlist:
    user_id: Identifier(required=True)
    product_id: Identifier(required=True)


@storefront.command_handler(part_of=User)
class ManagePreferencesHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        kwargs = {}
        for field in ("first_name", "last_name", "phone", "avatar"):
            value = getattr(command, field)
            if value is not None:
                kwargs[field] = value

        user.update_profile(**kwargs)
        repo.add(user)

    @handle(UpdatePreferences)
    def update_preferences(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        kwargs = {}
        if command.categories is not None:
            kwargs["categories"] = json.loads(command.categories)
        if command.brands is not None:
            kwargs["brands"] = json.loads(command.brands)
        for field in (
            "price_min",
            "price_max",
            "email_notifications",
            "sms_notifications",
            "push_notifications",
        ):
            value = getattr(command, field)
            if value is not None:
                kwargs[field] = value

        user.update_preferences(**kwargs)
        repo.add(user)

    @handle(AddToWishlist)
    def add_to_wishlist(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.add_to_wishlist(command.product_id)
        repo.add(user)

    @handle(RemoveFromWishlist)
    def remove_from_wishlist(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.remove_from_wishlist(command.product_id)
        repo.add(user)
