"""Query methods for the User aggregate."""

from storefront.domain import storefront
from storefront.user.user import User
from storefront.shared.queries import fetch_all


@storefront.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email: str) -> User | None:
        """Case-insensitive lookup; emails are stored lowercased."""
        results = self._dao.query.filter(email=email.strip().lower()).all().items
        return results[0] if results else None

    def find_active(self) -> list[User]:
        return fetch_all(self._dao.query.filter(is_active=True).order_by("-created_at"))

    def email_taken(self, email: str) -> bool:
        return self.find_by_email(email) is not None
