import pytest
from protean.utils.globals import current_domain
from storefront.user.registration import RegisterUser

PASSWORD = "s3cret-pass"


@pytest.fixture()
def register_user():
    """Register a user through the command handler and return their id."""

    def _register(email="jane@example.com", password=PASSWORD, **overrides):
        command = {
            "email": email,
            "password": password,
            "first_name": "Jane",
            "last_name": "Wanjiku",
        }
        command.update(overrides)
        return current_domain.process(RegisterUser(**command), asynchronous=False)

    return _register


@pytest.fixture()
def user_id(register_user):
    return register_user()
