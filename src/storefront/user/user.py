"""User aggregate root with Address entity and Preferences value object."""

import json
import re
from datetime import datetime, timedelta

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, String, Text, ValueObject

from storefront.domain import storefront
from storefront.user.passwords import (
    MIN_PASSWORD_LENGTH,
    generate_token,
    hash_password,
    verify_password,
)
from storefront.shared.types import DEFAULT_COUNTRY, AddressLabel, UserRole

EMAIL_PATTERN = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")
PHONE_PATTERN = re.compile(r"^(\+254|254|0)[17]\d{8}$")

PASSWORD_RESET_TTL = timedelta(hours=1)

# Sentinel for distinguishing "not provided" from None in partial updates
_UNSET = object()


def _check_password_length(password):
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError({"password": [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]})


@storefront.value_object(part_of="User")
class Preferences:
    """Shopping preferences used for recommendations and notifications.

    Replaced wholesale on update (value object semantics).
    """

    categories: Text(sanitize=False)  # JSON array of category ids
    brands: Text(sanitize=False)  # JSON array of brand names
    price_min: Float(default=0.0, min_value=0.0)
    price_max: Float(default=1000000.0, min_value=0.0)
    email_notifications: Boolean(default=True)
    sms_notifications: Boolean(default=False)
    push_notifications: Boolean(default=True)

    @invariant.post
    def price_range_must_be_ordered(self):
        if self.price_min is not None and self.price_max is not None and self.price_min > self.price_max:
            raise ValidationError({"price_range": ["Minimum price cannot exceed maximum price"]})

    @property
    def category_list(self):
        return json.loads(self.categories) if self.categories else []

    @property
    def brand_list(self):
        return json.loads(self.brands) if self.brands else []

    def to_dict(self):
        return {
            "categories": self.category_list,
            "brands": self.brand_list,
            "price_range": {"min": self.price_min, "max": self.price_max},
            "notifications": {
                "email": self.email_notifications,
                "sms": self.sms_notifications,
                "push": self.push_notifications,
            },
        }


@storefront.entity(part_of="User")
class Address:
    """A saved address. When a user has addresses, exactly one is the default."""

    label: String(choices=AddressLabel, default=AddressLabel.HOME.value)
    street: String(required=True, max_length=255)
    city: String(required=True, max_length=100)
    state: String(required=True, max_length=100)
    zip_code: String(required=True, max_length=20)
    country: String(required=True, max_length=100, default=DEFAULT_COUNTRY)
    is_default: Boolean(default=False)


@storefront.aggregate
class User:
    """A registered shopper or administrator, identified by email.

    Only the bcrypt hash of the password is kept.
    """

    email: String(required=True, max_length=254, unique=True, sanitize=False)
    password_hash: String(required=True, max_length=255, sanitize=False)
    first_name: String(required=True, max_length=50)
    last_name: String(required=True, max_length=50)
    phone: String(max_length=20)
    avatar: String(max_length=500, default="")
    addresses: HasMany(Address)
    preferences: ValueObject(Preferences)
    wishlist: Text(sanitize=False)  # JSON array of product ids
    role: String(choices=UserRole, default=UserRole.USER.value)
    is_email_verified: Boolean(default=False)
    email_verification_token: String(max_length=100, sanitize=False)
    password_reset_token: String(max_length=100, sanitize=False)
    password_reset_expires: DateTime()
    last_login: DateTime()
    is_active: Boolean(default=True)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def email_must_be_valid(self):
        if self.email and not EMAIL_PATTERN.match(self.email):
            raise ValidationError({"email": ["Please enter a valid email"]})

    @invariant.post
    def phone_must_be_kenyan(self):
        if self.phone and not PHONE_PATTERN.match(self.phone):
            raise ValidationError({"phone": ["Please enter a valid Kenyan phone number"]})

    @invariant.post
    def exactly_one_default_address_when_addresses_exist(self):
        if not self.addresses:
            return
        defaults = [a for a in self.addresses if a.is_default]
        if len(defaults) != 1:
            raise ValidationError({"addresses": ["Exactly one address must be marked as default"]})

    @classmethod
    def register(
        cls,
        email,
        password,
        first_name,
        last_name,
        phone=None,
        role=UserRole.USER.value,
        is_email_verified=False,
    ):
        from storefront.user.events import UserRegistered

        _check_password_length(password)

        email = email.strip().lower()
        now = datetime.now()

        user = cls(
            email=email,
            password_hash=hash_password(password),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            phone=phone,
            preferences=Preferences(categories=json.dumps([]), brands=json.dumps([])),
            wishlist=json.dumps([]),
            role=role,
            is_email_verified=is_email_verified,
            created_at=now,
            updated_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                email=email,
                first_name=user.first_name,
                last_name=user.last_name,
                role=role,
                registered_at=now,
            )
        )
        return user

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN.value

    @property
    def wishlist_items(self):
        return json.loads(self.wishlist) if self.wishlist else []

    @property
    def default_address(self):
        return next((a for a in self.addresses if a.is_default), None)

    # -------------------------------------------------------------------
    # Credentials
    # -------------------------------------------------------------------
    def check_password(self, password) -> bool:
        return verify_password(password, self.password_hash)

    def record_login(self):
        from storefront.user.events import UserLoggedIn

        now = datetime.now()
        self.last_login = now
        self.raise_(UserLoggedIn(user_id=self.id, logged_in_at=now))

    def change_password(self, current_password, new_password):
        if not self.check_password(current_password):
            raise ValidationError({"credentials": ["Current password is incorrect"]})
        self._set_password(new_password)

    def _set_password(self, new_password):
        from storefront.user.events import PasswordChanged

        _check_password_length(new_password)
        now = datetime.now()
        self.password_hash = hash_password(new_password)
        self.updated_at = now
        self.raise_(PasswordChanged(user_id=self.id, changed_at=now))

    def issue_password_reset(self):
        """Issue a reset token valid for ``PASSWORD_RESET_TTL`` and return it."""
        from storefront.user.events import PasswordResetRequested

        token = generate_token()
        expires_at = datetime.now() + PASSWORD_RESET_TTL

        self.password_reset_token = token
        self.password_reset_expires = expires_at
        self.raise_(PasswordResetRequested(user_id=self.id, email=self.email, expires_at=expires_at))
        return token

    def reset_password(self, token, new_password, at=None):
        now = at or datetime.now()
        if (
            not self.password_reset_token
            or token != self.password_reset_token
            or self.password_reset_expires is None
            or now > self.password_reset_expires
        ):
            raise ValidationError({"token": ["Password reset token is invalid or has expired"]})

        with atomic_change(self):
            self._set_password(new_password)
            self.password_reset_token = None
            self.password_reset_expires = None

    def issue_email_verification(self):
        if self.is_email_verified:
            raise ValidationError({"email": ["Email is already verified"]})

        token = generate_token()
        self.email_verification_token = token
        return token

    def verify_email(self, token):
        from storefront.user.events import EmailVerified

        if not self.email_verification_token or token != self.email_verification_token:
            raise ValidationError({"token": ["Email verification token is invalid"]})

        now = datetime.now()
        self.is_email_verified = True
        self.email_verification_token = None
        self.updated_at = now
        self.raise_(EmailVerified(user_id=self.id, email=self.email, verified_at=now))

    # -------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------
    def update_profile(self, first_name=_UNSET, last_name=_UNSET, phone=_UNSET, avatar=_UNSET):
        if first_name is not _UNSET:
            self.first_name = first_name.strip()
        if last_name is not _UNSET:
            self.last_name = last_name.strip()
        if phone is not _UNSET:
            self.phone = phone
        if avatar is not _UNSET:
            self.avatar = avatar or ""
        self.updated_at = datetime.now()

    def update_preferences(
        self,
        categories=_UNSET,
        brands=_UNSET,
        price_min=_UNSET,
        price_max=_UNSET,
        email_notifications=_UNSET,
        sms_notifications=_UNSET,
        push_notifications=_UNSET,
    ):
        current = self.preferences or Preferences()

        def pick(value, existing):
            return existing if value is _UNSET else value

        self.preferences = Preferences(
            categories=json.dumps(list(categories)) if categories is not _UNSET else current.categories,
            brands=json.dumps(list(brands)) if brands is not _UNSET else current.brands,
            price_min=pick(price_min, current.price_min),
            price_max=pick(price_max, current.price_max),
            email_notifications=pick(email_notifications, current.email_notifications),
            sms_notifications=pick(sms_notifications, current.sms_notifications),
            push_notifications=pick(push_notifications, current.push_notifications),
        )
        self.updated_at = datetime.now()

    # -------------------------------------------------------------------
    # Addresses
    # -------------------------------------------------------------------
    def add_address(
        self,
        street,
        city,
        state,
        zip_code,
        country=DEFAULT_COUNTRY,
        label=AddressLabel.HOME.value,
        is_default=False,
    ):
        # First address is always default
        if not self.addresses:
            is_default = True

        with atomic_change(self):
            if is_default:
                for addr in self.addresses:
                    if addr.is_default:
                        addr.is_default = False

            address = Address(
                label=label,
                street=street,
                city=city,
                state=state,
                zip_code=zip_code,
                country=country or DEFAULT_COUNTRY,
                is_default=is_default,
            )
            self.add_addresses(address)

        self.updated_at = datetime.now()
        return address

    def _find_address(self, address_id):
        address = next((a for a in self.addresses if str(a.id) == str(address_id)), None)
        if address is None:
            raise ValidationError({"addresses": [f"Address {address_id} not found"]})
        return address

    def set_default_address(self, address_id):
        address = self._find_address(address_id)

        with atomic_change(self):
            for addr in self.addresses:
                if addr.is_default:
                    addr.is_default = False
            address.is_default = True

        self.updated_at = datetime.now()

    def remove_address(self, address_id):
        address = self._find_address(address_id)
        was_default = address.is_default

        with atomic_change(self):
            self.remove_addresses(address)

            # If removed address was default, assign default to first remaining
            if was_default and self.addresses:
                self.addresses[0].is_default = True

        self.updated_at = datetime.now()

    # -------------------------------------------------------------------
    # Wishlist
    # -------------------------------------------------------------------
    def add_to_wishlist(self, product_id):
        items = self.wishlist_items
        if str(product_id) not in items:
            items.append(str(product_id))
            self.wishlist = json.dumps(items)
            self.updated_at = datetime.now()

    def remove_from_wishlist(self, product_id):
        items = self.wishlist_items
        if str(product_id) in items:
            items.remove(str(product_id))
            self.wishlist = json.dumps(items)
            self.updated_at = datetime.now()

    # -------------------------------------------------------------------
    # Account status
    # -------------------------------------------------------------------
    def deactivate(self):
        from storefront.user.events import UserDeactivated

        if not self.is_active:
            raise ValidationError({"is_active": ["Account is already inactive"]})

        now = datetime.now()
        self.is_active = False
        self.updated_at = now
        self.raise_(UserDeactivated(user_id=self.id, deactivated_at=now))

    def reactivate(self):
        if self.is_active:
            raise ValidationError({"is_active": ["Account is already active"]})

        self.is_active = True
        self.updated_at = datetime.now()

    def recommendation_data(self, order_ids=None):
        """Inputs for the recommendation engine.

        Order history lives with the orders, so callers pass the ids in.
        """
        preferences = self.preferences or Preferences()
        return {
            "preferences": preferences.to_dict(),
            "order_history": list(order_ids or []),
            "wishlist": self.wishlist_items,
        }
