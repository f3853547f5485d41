"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from storefront.domain import storefront


@storefront.event(part_of="User")
class UserRegistered:
    """A new account was created."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True, sanitize=False)
    first_name: String(required=True)
    last_name: String(required=True)
    role: String(required=True)
    registered_at: DateTime(required=True)


@storefront.event(part_of="User")
class UserLoggedIn:
    __version__ = 1

    user_id: Identifier(required=True)
    logged_in_at: DateTime(required=True)


@storefront.event(part_of="User")
class PasswordChanged:
    __version__ = 1

    user_id: Identifier(required=True)
    changed_at: DateTime(required=True)


@storefront.event(part_of="User")
class PasswordResetRequested:
    """A reset token was issued. Delivering it is someone else's job."""

    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True, sanitize=False)
    expires_at: DateTime(required=True)


@storefront.event(part_of="User")
class EmailVerified:
    __version__ = 1

    user_id: Identifier(required=True)
    email: String(required=True, sanitize=False)
    verified_at: DateTime(required=True)


@storefront.event(part_of="User")
class UserDeactivated:
    __version__ = 1

    user_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)

