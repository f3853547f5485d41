"""Product aggregate root with attribute entities and pricing/rating value objects."""

import json
import re
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
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
from storefront.shared.slug import slugify
from storefront.shared.types import AttributeType, DiscountType


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps are taken to be UTC so they compare with aware ones
    return value if value.tzinfo else value.replace(tzinfo=UTC)


@storefront.value_object(part_of="Product")
class Ratings:
    """Summary of a product's approved reviews."""

    average: Float(default=0.0, min_value=0.0, max_value=5.0)
    count: Integer(default=0, min_value=0)


@storefront.value_object(part_of="Product")
class Discount:
    """A time-boxed price reduction.

    Missing bounds are open: no ``start_date`` means active since forever, no
    ``end_date`` means active until removed.
    """

    type: String(choices=DiscountType)
    value: Float(min_value=0.0, default=0.0)
    start_date: DateTime()
    end_date: DateTime()

    def is_active(self, at=None):
        now = _as_utc(at or datetime.now(UTC))
        if self.start_date and now < _as_utc(self.start_date):
            return False
        if self.end_date and now > _as_utc(self.end_date):
            return False
        return True


@storefront.value_object(part_of="Product")
class SEO:
    """Value object for SEO metadata."""

    meta_title: String(max_length=60)
    meta_description: String(max_length=160)


@storefront.entity(part_of="Product")
class ProductAttribute:
    """A named, typed characteristic such as colour or size."""

    name: String(required=True, max_length=100)
    value: String(required=True, max_length=255)
    type: String(choices=AttributeType, default=AttributeType.OTHER.value)


@storefront.aggregate
class Product:
    """Product aggregate root."""

    name: String(required=True, max_length=200, sanitize=False)
    description: String(required=True, max_length=2000)
    price: Float(required=True, min_value=0.0)
    original_price: Float(min_value=0.0)
    images: Text(sanitize=False)  # JSON array of URLs
    category_id: Identifier(required=True)
    brand: String(required=True, max_length=100, sanitize=False)
    stock: Integer(required=True, default=0, min_value=0)
    sku: String(required=True, max_length=50, unique=True, sanitize=False)
    attributes: HasMany(ProductAttribute)
    specifications: Text(sanitize=False)  # JSON object of name -> value
    tags: Text(sanitize=False)  # JSON array of lowercase tags
    ratings: ValueObject(Ratings)
    is_active: Boolean(default=True)
    is_featured: Boolean(default=False)
    discount: ValueObject(Discount)
    seo: ValueObject(SEO)
    slug: String(max_length=220, unique=True, sanitize=False)
    view_count: Integer(default=0, min_value=0)
    sales_count: Integer(default=0, min_value=0)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @invariant.post
    def sku_must_be_valid_format(self):
        code = self.sku
        if not code:
            return

        if not re.match(r"^[A-Z0-9-]+$", code):
            raise ValidationError({"sku": ["SKU must contain only letters, digits and hyphens"]})

        if code.startswith("-") or code.endswith("-"):
            raise ValidationError({"sku": ["SKU must not start or end with a hyphen"]})

    @classmethod
    def create(
        cls,
        name,
        description,
        price,
        category_id,
        brand,
        sku,
        stock=0,
        original_price=None,
        images=None,
        specifications=None,
        tags=None,
        attributes=None,
        is_featured=False,
        slug=None,
        seo=None,
    ):
        from storefront.product.events import ProductCreated

        name = name.strip()
        now = datetime.now()

        product = cls(
            name=name,
            description=description,
            price=price,
            original_price=original_price,
            images=json.dumps(list(images or [])),
            category_id=category_id,
            brand=brand.strip(),
            stock=stock,
            sku=sku.strip().upper(),
            specifications=json.dumps(dict(specifications or {})),
            tags=json.dumps(_normalize_tags(tags)),
            ratings=Ratings(average=0.0, count=0),
            is_featured=is_featured,
            seo=seo,
            slug=slug or slugify(name),
            created_at=now,
            updated_at=now,
        )

        for attribute in attributes or []:
            product.add_attributes(
                ProductAttribute(
                    name=attribute["name"].strip(),
                    value=attribute["value"].strip(),
                    type=attribute.get("type", AttributeType.OTHER.value),
                )
            )

        product.raise_(
            ProductCreated(
                product_id=product.id,
                sku=product.sku,
                name=product.name,
                slug=product.slug,
                category_id=category_id,
                price=product.price,
                created_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # JSON-backed collections
    # -------------------------------------------------------------------
    @property
    def image_urls(self):
        return json.loads(self.images) if self.images else []

    @property
    def tag_list(self):
        return json.loads(self.tags) if self.tags else []

    @property
    def specification_map(self):
        return json.loads(self.specifications) if self.specifications else {}

    # -------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------
    def update_details(
        self,
        name=None,
        description=None,
        brand=None,
        images=None,
        specifications=None,
        tags=None,
        seo=None,
    ):
        if name is not None:
            self.name = name.strip()
            if not self.slug:
                self.slug = slugify(self.name)
        if description is not None:
            self.description = description
        if brand is not None:
            self.brand = brand.strip()
        if images is not None:
            self.images = json.dumps(list(images))
        if specifications is not None:
            self.specifications = json.dumps(dict(specifications))
        if tags is not None:
            self.tags = json.dumps(_normalize_tags(tags))
        if seo is not None:
            self.seo = seo

        self.updated_at = datetime.now()

    def change_price(self, price, original_price=None):
        if original_price is not None:
            self.original_price = original_price
        self.price = price
        self.updated_at = datetime.now()

    def feature(self):
        self.is_featured = True
        self.updated_at = datetime.now()

    def unfeature(self):
        self.is_featured = False
        self.updated_at = datetime.now()

    def activate(self):
        self.is_active = True
        self.updated_at = datetime.now()

    def deactivate(self):
        self.is_active = False
        self.updated_at = datetime.now()

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    def set_discount(self, type, value, start_date=None, end_date=None):
        if start_date and end_date and _as_utc(end_date) < _as_utc(start_date):
            raise ValidationError({"discount": ["Discount end date must not precede its start date"]})

        self.discount = Discount(type=type, value=value, start_date=start_date, end_date=end_date)
        self.updated_at = datetime.now()

    def clear_discount(self):
        self.discount = None
        self.updated_at = datetime.now()

    def discounted_price(self, at=None):
        """Price after the discount, when one is active at ``at`` (defaults to now)."""
        discount = self.discount
        if discount is None or not discount.type or not discount.is_active(at):
            return self.price

        if discount.type == DiscountType.PERCENTAGE.value:
            return self.price * (1 - discount.value / 100)
        if discount.type == DiscountType.FIXED.value:
            return max(0.0, self.price - discount.value)

        return self.price

    @property
    def discount_percentage(self):
        """Whole-number percentage off ``original_price``, 0 when not marked down."""
        if not self.original_price or self.original_price <= self.price:
            return 0
        return round((self.original_price - self.price) / self.original_price * 100)

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def is_in_stock(self):
        return self.stock > 0

    def add_stock(self, quantity):
        from storefront.product.events import StockAdjusted

        self.stock = self.stock + quantity
        self.updated_at = datetime.now()

        self.raise_(StockAdjusted(product_id=self.id, change=quantity, stock=self.stock))

    def reduce_stock(self, quantity):
        from storefront.product.events import StockAdjusted

        if self.stock < quantity:
            raise ValidationError(
                {"stock": [f"Insufficient stock: requested {quantity}, available {self.stock}"]}
            )

        self.stock = self.stock - quantity
        self.updated_at = datetime.now()

        self.raise_(StockAdjusted(product_id=self.id, change=-quantity, stock=self.stock))

    # -------------------------------------------------------------------
    # Ratings
    # -------------------------------------------------------------------
    def apply_rating(self, average, count):
        """Overwrite the rating aggregate with a freshly computed one."""
        self.ratings = Ratings(average=average, count=count)
        self.updated_at = datetime.now()

    def record_rating(self, new_rating):
        """Fold a single rating into the running mean.

        Manual adjustment only: review changes go through the full recompute,
        which replaces whatever this produced.
        """
        ratings = self.ratings or Ratings()
        total = ratings.average * ratings.count + new_rating
        count = ratings.count + 1
        self.ratings = Ratings(average=total / count, count=count)
        self.updated_at = datetime.now()

    # -------------------------------------------------------------------
    # Counters
    # -------------------------------------------------------------------
    def record_view(self):
        self.view_count = (self.view_count or 0) + 1

    def record_sale(self, quantity=1):
        self.sales_count = (self.sales_count or 0) + quantity


def _normalize_tags(tags):
    normalized = []
    for tag in tags or []:
        tag = tag.strip().lower()
        if tag and tag not in normalized:
            normalized.append(tag)
    return normalized
