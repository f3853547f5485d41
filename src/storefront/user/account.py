"""Credentials and account status: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.user.user import User
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS = {"credentials": ["Invalid email or password"]}


@storefront.command(part_of="User")
class AuthenticateUser:
    email: String(required=True, max_length=254, sanitize=False)
    password: String(required=True, max_length=128, sanitize=False)


@storefront.command(part_of="User")
class ChangePassword:
    user_id: Identifier(required=True)
    current_password: String(required=True, max_length=128, sanitize=False)
    new_password: String(required=True, max_length=128, sanitize=False)


@storefront.command(part_of="User")
class RequestPasswordReset:
    email: String(required=True, max_length=254, sanitize=False)


@storefront.command(part_of="User")
class ResetPassword:
    email: String(required=True, max_length=254, sanitize=False)
    token: String(required=True, max_length=100, sanitize=False)
    new_password: String(required=True, max_length=128, sanitize=False)


@storefront.command(part_of="User")
class IssueEmailVerification:
    user_id: Identifier(required=True)


@storefront.command(part_of="User")
class VerifyEmail:
    user_id: Identifier(required=True)
    token: String(required=True, max_length=100, sanitize=False)


@storefront.command(part_of="User")
class DeactivateUser:
    user_id: Identifier(required=True)


@storefront.command(part_of="User")
class ReactivateUser:
    user_id: Identifier(required=True)


def _user_by_email(email):
    user = current_domain.repository_for(User).find_by_email(email)
    if user is None:
        raise ObjectNotFoundError(f"User with email {email} does not exist")
    return user


@storefront.command_handler(part_of=User)
class ManageAccountHandler:
    @handle(AuthenticateUser)
    def authenticate(self, command):
        repo = current_domain.repository_for(User)
        user = repo.find_by_email(command.email)

        # Same error for unknown email, wrong password and disabled accounts
        if user is None or not user.is_active or not user.check_password(command.password):
            logger.warning("authentication_failed", email=command.email.strip().lower())
            raise ValidationError(INVALID_CREDENTIALS)

        user.record_login()
        repo.add(user)
        return str(user.id)

    @handle(ChangePassword)
    def change_password(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.change_password(command.current_password, command.new_password)
        repo.add(user)

    @handle(RequestPasswordReset)
    def request_password_reset(self, command):
        user = _user_by_email(command.email)
        token = user.issue_password_reset()
        current_domain.repository_for(User).add(user)
        return token

    @handle(ResetPassword)
    def reset_password(self, command):
        user = _user_by_email(command.email)
        user.reset_password(command.token, command.new_password)
        current_domain.repository_for(User).add(user)

    @handle(IssueEmailVerification)
    def issue_email_verification(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        token = user.issue_email_verification()
        repo.add(user)
        return token

    @handle(VerifyEmail)
    def verify_email(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.verify_email(command.token)
        repo.add(user)

    @handle(DeactivateUser)
    def deactivate_user(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.deactivate()
        repo.add(user)

    @handle(ReactivateUser)
    def reactivate_user(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.reactivate()
        repo.add(user)
