"""PostalAddress value object, the address snapshot carried by orders."""

from protean.fields import Boolean, String

from storefront.domain import storefront
from storefront.shared.types import DEFAULT_COUNTRY


@storefront.value_object
class PostalAddress:
    """A shipping or billing address captured when an order is placed.

    Once recorded on an Order it never changes, whatever happens later to the
    addresses stored on the User.
    """

    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    zip_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100, default=DEFAULT_COUNTRY)
    is_default: Boolean(default=False)
    label: String(max_length=50)

    @classmethod
    def from_dict(cls, data):
        return cls(
            street=data.get("street"),
            city=data.get("city"),
            state=data.get("state"),
            zip_code=data.get("zip_code"),
            country=data.get("country") or DEFAULT_COUNTRY,
            is_default=bool(data.get("is_default", False)),
            label=data.get("label"),
        )
