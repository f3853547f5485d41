"""User registration: command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.user.user import User
from storefront.shared.types import UserRole


@storefront.command(part_of="User")
class RegisterUser:
    """Create a new account."""

    email: String(required=True, max_length=254, sanitize=False)
    password: String(required=True, max_length=128, sanitize=False)
    first_name: String(required=True, max_length=50)
    last_name: String(required=True, max_length=50)
    phone: String(max_length=20)
    role: String(choices=UserRole, default=UserRole.USER.value)


@storefront.command_handler(part_of=User)
class RegisterUserHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)

        if repo.email_taken(command.email):
            raise ValidationError({"email": ["An account with this email already exists"]})

        user = User.register(
            email=command.email,
            password=command.password,
            first_name=command.first_name,
            last_name=command.last_name,
            phone=command.phone,
            role=command.role or UserRole.USER.value,
        )
        repo.add(user)
        return str(user.id)
