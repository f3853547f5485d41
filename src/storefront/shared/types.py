"""Enumerations shared across the storefront contexts.

These are the data-shape contracts used by more than one aggregate (and by
callers building commands). Values are the lowercase strings that are stored.
"""

from enum import Enum


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


class PaymentMethod(Enum):
    MPESA = "mpesa"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"
    CASH_ON_DELIVERY = "cash_on_delivery"


class UserRole(Enum):
    USER = "user"
    ADMIN = "admin"


class AddressLabel(Enum):
    HOME = "Home"
    WORK = "Work"
    OTHER = "Other"


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class AttributeType(Enum):
    COLOR = "color"
    SIZE = "size"
    MATERIAL = "material"
    OTHER = "other"


class InteractionType(Enum):
    VIEW = "view"
    CART = "cart"
    PURCHASE = "purchase"
    LIKE = "like"
    SHARE = "share"


DEFAULT_COUNTRY = "Kenya"
