"""Order aggregate: the purchase record and its status timeline.

Lifecycle:
    pending -> confirmed -> processing -> shipped -> delivered
    cancelled and refunded are reachable as side branches.

Status changes only go through ``update_status``, which appends an entry to
the timeline. No transition matrix is enforced: any status the field accepts
can follow any other. The timeline is append-only and always begins with the
``pending`` entry recorded by ``place``.
"""

import json
import secrets
import string
import time
from datetime import UTC, datetime, timedelta

from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.order.events import OrderPlaced, OrderStatusChanged, PaymentStatusChanged
from storefront.order.pricing import compute_totals
from storefront.shared.address import PostalAddress
from storefront.shared.types import OrderStatus, PaymentMethod, PaymentStatus

RETURN_WINDOW = timedelta(days=7)

_CANCELLABLE_STATES = {
    OrderStatus.PENDING.value,
    OrderStatus.CONFIRMED.value,
    OrderStatus.PROCESSING.value,
}

_STATUS_MESSAGES = {
    OrderStatus.PENDING.value: "Order is pending confirmation",
    OrderStatus.CONFIRMED.value: "Order has been confirmed",
    OrderStatus.PROCESSING.value: "Order is being processed",
    OrderStatus.SHIPPED.value: "Order has been shipped",
    OrderStatus.DELIVERED.value: "Order has been delivered",
    OrderStatus.CANCELLED.value: "Order has been cancelled",
    OrderStatus.REFUNDED.value: "Order has been refunded",
}

PLACED_MESSAGE = "Order has been placed"

_ORDER_NUMBER_ALPHABET = string.digits + string.ascii_uppercase


def status_message(status) -> str:
    """Canned timeline message for a status, "Status updated" when unknown."""
    value = status.value if isinstance(status, OrderStatus) else status
    return _STATUS_MESSAGES.get(value, "Status updated")


def generate_order_number() -> str:
    """``ORD-<last 8 digits of epoch ms>-<6 random base36 chars>``."""
    millis = str(int(time.time() * 1000))[-8:]
    suffix = "".join(secrets.choice(_ORDER_NUMBER_ALPHABET) for _ in range(6))
    return f"ORD-{millis}-{suffix}"


def _as_utc(value: datetime) -> datetime:
    # Some providers hand back naive timestamps; everything here is stored in UTC
    return value if value.tzinfo else value.replace(tzinfo=UTC)


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class OrderPricing:
    """Pricing snapshot of an order. Every amount must be non-negative."""

    subtotal = Float(default=0.0, min_value=0.0)
    tax = Float(default=0.0, min_value=0.0)
    shipping = Float(default=0.0, min_value=0.0)
    discount = Float(default=0.0, min_value=0.0)
    total = Float(default=0.0, min_value=0.0)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """A line item: product, quantity and the unit price locked at checkout."""

    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)
    selected_attributes = Text(sanitize=False)  # JSON object, e.g. {"size": "M"}

    @property
    def attributes(self):
        return json.loads(self.selected_attributes) if self.selected_attributes else {}

    @property
    def line_total(self):
        return self.price * self.quantity


@storefront.entity(part_of="Order")
class TimelineEntry:
    """An audit record of one status change. Never edited or removed."""

    status = String(required=True, choices=OrderStatus)
    message = String(required=True, max_length=500)
    timestamp = DateTime(required=True)
    location = String(max_length=255)
    sequence = Integer(required=True, min_value=0)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=30, unique=True)
    user_id = Identifier(required=True)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(PostalAddress, required=True)
    billing_address = ValueObject(PostalAddress, required=True)
    payment_method = String(required=True, choices=PaymentMethod)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    order_status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    timeline_entries = HasMany(TimelineEntry)
    pricing = ValueObject(OrderPricing)
    notes = String(max_length=500)
    tracking_number = String(max_length=100)
    estimated_delivery = DateTime()
    actual_delivery = DateTime()
    coupon_code = String(max_length=50)
    delivery_instructions = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        user_id,
        items_data,
        shipping_address,
        billing_address,
        payment_method,
        discount=0.0,
        notes=None,
        coupon_code=None,
        delivery_instructions=None,
        estimated_delivery=None,
    ):
        """Create a pending order from checkout data.

        Args:
            user_id: The buyer.
            items_data: List of dicts with product_id, quantity, price and an
                optional selected_attributes mapping.
            shipping_address: Dict with street, city, state, zip_code, country.
            billing_address: Same shape as ``shipping_address``.
            payment_method: One of ``PaymentMethod``.
            discount: Amount taken off the bill, carried on the pricing snapshot.
        """
        if not items_data:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)
        totals = compute_totals(items_data, discount)

        order = cls(
            order_number=generate_order_number(),
            user_id=user_id,
            shipping_address=PostalAddress.from_dict(shipping_address),
            billing_address=PostalAddress.from_dict(billing_address),
            payment_method=payment_method,
            pricing=OrderPricing(**totals),
            notes=notes,
            coupon_code=coupon_code,
            delivery_instructions=delivery_instructions,
            estimated_delivery=estimated_delivery,
            created_at=now,
            updated_at=now,
        )

        for item in items_data:
            order.add_items(
                OrderItem(
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                    price=item["price"],
                    selected_attributes=json.dumps(item["selected_attributes"])
                    if item.get("selected_attributes")
                    else None,
                )
            )

        order._append_timeline(OrderStatus.PENDING.value, PLACED_MESSAGE, now)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order.order_number,
                user_id=str(user_id),
                item_count=len(items_data),
                total=order.pricing.total,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Timeline
    # -------------------------------------------------------------------
    @property
    def timeline(self):
        """Timeline entries in the order they were recorded."""
        return sorted(self.timeline_entries, key=lambda entry: entry.sequence)

    def _append_timeline(self, status, message, timestamp, location=None):
        self.add_timeline_entries(
            TimelineEntry(
                status=status,
                message=message,
                timestamp=timestamp,
                location=location,
                sequence=len(self.timeline_entries),
            )
        )

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def update_status(self, status, message=None, location=None):
        """Move the order to ``status`` and record it on the timeline.

        Delivery is stamped on the first transition to ``delivered`` and kept
        from then on.
        """
        status = status.value if isinstance(status, OrderStatus) else status
        previous = self.order_status
        now = datetime.now(UTC)

        self.order_status = status
        message = message or status_message(status)
        self._append_timeline(status, message, now, location)

        if status == OrderStatus.DELIVERED.value and self.actual_delivery is None:
            self.actual_delivery = now

        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                new_status=status,
                message=message,
                location=location,
                changed_at=now,
            )
        )

    def can_be_cancelled(self) -> bool:
        return self.order_status in _CANCELLABLE_STATES

    def can_be_returned(self, at=None) -> bool:
        """True within seven days of delivery, measured against the current time."""
        if self.order_status != OrderStatus.DELIVERED.value or self.actual_delivery is None:
            return False

        now = at or datetime.now(UTC)
        return _as_utc(now) - _as_utc(self.actual_delivery) <= RETURN_WINDOW

    # -------------------------------------------------------------------
    # Pricing, payment and shipping details
    # -------------------------------------------------------------------
    def recalculate_pricing(self):
        """Rebuild the pricing snapshot from the items, keeping the current discount."""
        discount = self.pricing.discount if self.pricing else 0.0
        self.pricing = OrderPricing(**compute_totals(self.items, discount))
        self.updated_at = datetime.now(UTC)

    def update_payment_status(self, payment_status):
        payment_status = payment_status.value if isinstance(payment_status, PaymentStatus) else payment_status
        previous = self.payment_status
        now = datetime.now(UTC)

        self.payment_status = payment_status
        self.updated_at = now

        self.raise_(
            PaymentStatusChanged(
                order_id=str(self.id),
                previous_status=previous,
                new_status=payment_status,
                changed_at=now,
            )
        )

    def set_tracking(self, tracking_number, estimated_delivery=None):
        self.tracking_number = tracking_number
        if estimated_delivery is not None:
            self.estimated_delivery = estimated_delivery
        self.updated_at = datetime.now(UTC)

    def contains_product(self, product_id) -> bool:
        return any(str(item.product_id) == str(product_id) for item in self.items)
