"""User address book: commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.user.user import User
from storefront.shared.types import AddressLabel


@storefront.command(part_of="User")
class AddAddress:
    """Add a new address to a user's address book."""

    user_id: Identifier(required=True)
    label: String(choices=AddressLabel)
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    zip_code: String(required=True, max_length=20)
    country: String(max_length=100)
    is_default: Boolean(default=False)


@storefront.command(part_of="User")
class RemoveAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@storefront.command(part_of="User")
class SetDefaultAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@storefront.command_handler(part_of=User)
class ManageAddressesHandler:
    @handle(AddAddress)
    def add_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)

        kwargs = {
            "street": command.street,
            "city": command.city,
            "state": command.state,
            "zip_code": command.zip_code,
            "is_default": bool(command.is_default),
        }
        if command.label:
            kwargs["label"] = command.label
        if command.country:
            kwargs["country"] = command.country

        address = user.add_address(**kwargs)
        repo.add(user)
        return str(address.id)

    @handle(RemoveAddress)
    def remove_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.remove_address(command.address_id)
        repo.add(user)

    @handle(SetDefaultAddress)
    def set_default_address(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.set_default_address(command.address_id)
        repo.add(user)
