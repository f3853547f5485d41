"""Order totals.

Rates and thresholds are fixed business rules for the Kenyan storefront
(amounts in KES) and are not configurable.
"""

TAX_RATE = 0.16
FREE_SHIPPING_THRESHOLD = 5000.0
SHIPPING_FEE = 200.0


def compute_totals(items, discount: float = 0.0) -> dict:
    """Compute an order's pricing snapshot from its line items.

    ``items`` is any iterable of objects or dicts exposing ``price`` and
    ``quantity``. Shipping is free only when the subtotal strictly exceeds
    the threshold. Nothing is clamped: a discount larger than the rest of the
    bill produces a negative total, which the pricing snapshot rejects.
    """
    subtotal = 0.0
    for item in items:
        if isinstance(item, dict):
            subtotal += item["price"] * item["quantity"]
        else:
            subtotal += item.price * item.quantity

    tax = subtotal * TAX_RATE
    shipping = 0.0 if subtotal > FREE_SHIPPING_THRESHOLD else SHIPPING_FEE
    discount = discount or 0.0

    return {
        "subtotal": subtotal,
        "tax": tax,
        "shipping": shipping,
        "discount": discount,
        "total": subtotal + tax + shipping - discount,
    }
