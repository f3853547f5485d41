"""Tests for the User aggregate."""

from datetime import datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from storefront.user.events import EmailVerified, PasswordChanged, UserRegistered
from storefront.user.passwords import hash_password, hashing_rounds, verify_password
from storefront.user.user import User


def _user(**overrides):
    defaults = {
        "email": "Jane@Example.com",
        "password": "s3cret-pass",
        "first_name": " Jane ",
        "last_name": "Wanjiku",
    }
    defaults.update(overrides)
    return User.register(**defaults)


class TestPasswords:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert hashed.startswith("$2")
        assert verify_password("s3cret-pass", hashed)
        assert not verify_password("wrong-pass", hashed)

    def test_rounds_from_environment(self, monkeypatch):
        monkeypatch.setenv("BCRYPT_SALT_ROUNDS", "5")
        assert hashing_rounds() == 5

    def test_missing_hash_never_verifies(self):
        assert verify_password("anything", None) is False


class TestRegistration:
    def test_register(self):
        user = _user()
        assert user.email == "jane@example.com"
        assert user.full_name == "Jane Wanjiku"
        assert user.role == "user"
        assert user.is_active is True
        assert user.is_email_verified is False
        assert user.wishlist_items == []
        assert user.check_password("s3cret-pass")
        assert isinstance(user._events[0], UserRegistered)

    def test_short_password_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _user(password="12345")
        assert "password" in exc.value.messages

    @pytest.mark.parametrize("email", ["not-an-email", "jane@", "jane@example.c"])
    def test_invalid_email(self, email):
        with pytest.raises(ValidationError):
            _user(email=email)

    @pytest.mark.parametrize("phone", ["+254712345678", "254112345678", "0712345678"])
    def test_kenyan_phone_accepted(self, phone):
        assert _user(phone=phone).phone == phone

    @pytest.mark.parametrize("phone", ["0812345678", "+255712345678", "071234567"])
    def test_other_phone_rejected(self, phone):
        with pytest.raises(ValidationError):
            _user(phone=phone)

    def test_admin(self):
        assert _user(role="admin").is_admin is True


class TestCredentials:
    def test_change_password(self):
        user = _user()
        user.change_password("s3cret-pass", "n3w-secret")
        assert user.check_password("n3w-secret")
        assert isinstance(user._events[-1], PasswordChanged)

    def test_change_password_needs_current(self):
        user = _user()
        with pytest.raises(ValidationError) as exc:
            user.change_password("wrong-pass", "n3w-secret")
        assert "credentials" in exc.value.messages

    def test_reset_password_with_token(self):
        user = _user()
        token = user.issue_password_reset()
        user.reset_password(token, "n3w-secret")

        assert user.check_password("n3w-secret")
        assert user.password_reset_token is None

    def test_reset_token_single_use(self):
        user = _user()
        token = user.issue_password_reset()
        user.reset_password(token, "n3w-secret")
        with pytest.raises(ValidationError):
            user.reset_password(token, "another-one")

    def test_reset_token_expires_after_an_hour(self):
        user = _user()
        token = user.issue_password_reset()
        with pytest.raises(ValidationError):
            user.reset_password(token, "n3w-secret", at=datetime.now() + timedelta(hours=1, seconds=1))
        assert user.check_password("s3cret-pass")

    def test_wrong_reset_token(self):
        user = _user()
        user.issue_password_reset()
        with pytest.raises(ValidationError):
            user.reset_password("guess", "n3w-secret")

    def test_email_verification(self):
        user = _user()
        token = user.issue_email_verification()
        user.verify_email(token)
        assert user.is_email_verified is True
        assert isinstance(user._events[-1], EmailVerified)

        with pytest.raises(ValidationError):
            user.issue_email_verification()


class TestAddresses:
    def _add(self, user, street, **kwargs):
        return user.add_address(street=street, city="Nairobi", state="Nairobi County", zip_code="00100", **kwargs)

    def test_first_address_becomes_default(self):
        user = _user()
        address = self._add(user, "1 Ngong Road")
        assert address.is_default is True
        assert address.country == "Kenya"

    def test_new_default_replaces_old(self):
        user = _user()
        first = self._add(user, "1 Ngong Road")
        second = self._add(user, "2 Waiyaki Way", is_default=True)

        assert user.default_address.id == second.id
        assert [a.is_default for a in user.addresses].count(True) == 1
        assert first.is_default is False

    def test_set_default(self):
        user = _user()
        first = self._add(user, "1 Ngong Road")
        self._add(user, "2 Waiyaki Way")
        assert user.default_address.id == first.id

        second = user.addresses[1]
        user.set_default_address(second.id)
        assert user.default_address.id == second.id

    def test_removing_default_promotes_another(self):
        user = _user()
        first = self._add(user, "1 Ngong Road")
        self._add(user, "2 Waiyaki Way")
        user.remove_address(first.id)

        assert len(user.addresses) == 1
        assert user.addresses[0].is_default is True

    def test_unknown_address(self):
        user = _user()
        with pytest.raises(ValidationError):
            user.set_default_address("missing")


class TestPreferencesAndWishlist:
    def test_defaults(self):
        prefs = _user().preferences.to_dict()
        assert prefs["price_range"] == {"min": 0.0, "max": 1000000.0}
        assert prefs["notifications"] == {"email": True, "sms": False, "push": True}

    def test_partial_update(self):
        user = _user()
        user.update_preferences(brands=["Acme"], sms_notifications=True)
        prefs = user.preferences.to_dict()
        assert prefs["brands"] == ["Acme"]
        assert prefs["notifications"]["sms"] is True
        assert prefs["notifications"]["email"] is True

    def test_inverted_price_range_rejected(self):
        user = _user()
        with pytest.raises(ValidationError):
            user.update_preferences(price_min=500.0, price_max=100.0)

    def test_wishlist_has_no_duplicates(self):
        user = _user()
        user.add_to_wishlist("prod-1")
        user.add_to_wishlist("prod-1")
        user.add_to_wishlist("prod-2")
        assert user.wishlist_items == ["prod-1", "prod-2"]

        user.remove_from_wishlist("prod-1")
        assert user.wishlist_items == ["prod-2"]

    def test_recommendation_data(self):
        user = _user()
        user.add_to_wishlist("prod-9")
        data = user.recommendation_data(order_ids=["ord-1"])
        assert data["wishlist"] == ["prod-9"]
        assert data["order_history"] == ["ord-1"]
        assert data["preferences"]["categories"] == []


class TestAccountStatus:
    def test_deactivate_and_reactivate(self):
        user = _user()
        user.deactivate()
        assert user.is_active is False
        with pytest.raises(ValidationError):
            user.deactivate()

        user.reactivate()
        assert user.is_active is True
