"""Query methods for the Order aggregate."""

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.shared.queries import fetch_all
from storefront.shared.types import OrderStatus


@storefront.repository(part_of=Order)
class OrderRepository:
    def find_by_user(self, user_id) -> list[Order]:
        """All orders of a user, newest first."""
        return fetch_all(self._dao.query.filter(user_id=str(user_id)).order_by("-created_at"))

    def find_recent(self, limit: int = 10) -> list[Order]:
        return self._dao.query.order_by("-created_at").limit(limit).all().items

    def find_by_order_number(self, order_number: str) -> Order | None:
        results = self._dao.query.filter(order_number=order_number).all().items
        return results[0] if results else None

    def find_by_status(self, status) -> list[Order]:
        status = status.value if isinstance(status, OrderStatus) else status
        return fetch_all(self._dao.query.filter(order_status=status).order_by("-created_at"))

    def statistics(self) -> dict[str, dict]:
        """Order count and summed total per status. Statuses with no orders are omitted."""
        stats: dict[str, dict] = {}
        for order in fetch_all(self._dao.query):
            entry = stats.setdefault(order.order_status, {"count": 0, "total_value": 0.0})
            entry["count"] += 1
            entry["total_value"] += order.pricing.total if order.pricing else 0.0
        return stats

    def has_delivered_product(self, user_id, product_id) -> bool:
        """Whether any delivered order of the user contains the product."""
        delivered = fetch_all(
            self._dao.query.filter(user_id=str(user_id), order_status=OrderStatus.DELIVERED.value)
        )
        return any(order.contains_product(product_id) for order in delivered)
