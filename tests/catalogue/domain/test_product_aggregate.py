"""Tests for the Product aggregate root."""

import json
from datetime import UTC, datetime, timedelta, timezone

import pytest
from protean.exceptions import ValidationError
from storefront.product.events import ProductCreated, StockAdjusted
from storefront.product.product import Product


def _product(**overrides):
    defaults = {
        "name": "Men's Running Shoes!!",
        "description": "Lightweight trainers",
        "price": 100.0,
        "category_id": "cat-1",
        "brand": "Stride",
        "sku": "shoe-001",
        "stock": 5,
    }
    defaults.update(overrides)
    return Product.create(**defaults)


class TestProductCreation:
    def test_sku_is_uppercased(self):
        assert _product().sku == "SHOE-001"

    def test_slug_derived_from_name(self):
        assert _product().slug == "men-s-running-shoes"

    def test_tags_trimmed_lowercased_and_deduplicated(self):
        product = _product(tags=[" Running ", "SHOES", "running"])
        assert product.tag_list == ["running", "shoes"]

    def test_attributes_added(self):
        product = _product(attributes=[{"name": "Color", "value": "Red", "type": "color"}])
        assert len(product.attributes) == 1
        assert product.attributes[0].type == "color"

    def test_rating_starts_empty(self):
        product = _product()
        assert product.ratings.average == 0.0
        assert product.ratings.count == 0

    def test_invalid_sku_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _product(sku="shoe_001")
        assert "sku" in exc.value.messages

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            _product(price=-1.0)

    def test_create_raises_event(self):
        product = _product()
        assert isinstance(product._events[0], ProductCreated)
        assert product._events[0].sku == "SHOE-001"

    def test_specifications_stored_as_json(self):
        product = _product(specifications={"weight": "250g"})
        assert json.loads(product.specifications) == {"weight": "250g"}
        assert product.specification_map == {"weight": "250g"}


class TestDiscountedPrice:
    def test_no_discount_returns_price(self):
        assert _product().discounted_price() == 100.0

    def test_percentage_inside_bounds(self):
        product = _product()
        now = datetime.now()
        product.set_discount("percentage", 20, start_date=now - timedelta(days=1), end_date=now + timedelta(days=1))
        assert product.discounted_price() == pytest.approx(80.0)

    def test_percentage_outside_bounds(self):
        product = _product()
        now = datetime.now()
        product.set_discount("percentage", 20, start_date=now + timedelta(days=1), end_date=now + timedelta(days=2))
        assert product.discounted_price() == 100.0

    def test_expired_discount_is_inactive(self):
        product = _product()
        now = datetime.now()
        product.set_discount("percentage", 20, start_date=now - timedelta(days=3), end_date=now - timedelta(days=1))
        assert product.discounted_price() == 100.0

    def test_missing_bounds_are_unbounded(self):
        product = _product()
        product.set_discount("percentage", 25)
        assert product.discounted_price() == pytest.approx(75.0)

    def test_fixed_discount_never_negative(self):
        product = _product()
        product.set_discount("fixed", 150)
        assert product.discounted_price() == 0.0

    def test_fixed_discount(self):
        product = _product()
        product.set_discount("fixed", 30)
        assert product.discounted_price() == pytest.approx(70.0)

    def test_evaluated_at_given_time(self):
        product = _product()
        start = datetime(2025, 1, 1)
        product.set_discount("percentage", 20, start_date=start, end_date=datetime(2025, 1, 31))
        assert product.discounted_price(at=datetime(2025, 1, 15)) == pytest.approx(80.0)
        assert product.discounted_price(at=datetime(2025, 2, 1)) == 100.0

    def test_timezone_aware_bounds(self):
        product = _product()
        now = datetime.now(UTC)
        product.set_discount("percentage", 20, start_date=now - timedelta(days=1), end_date=now + timedelta(days=1))
        assert product.discounted_price() == pytest.approx(80.0)
        assert product.discounted_price(at=now + timedelta(days=2)) == 100.0

    def test_aware_time_against_naive_bounds(self):
        product = _product()
        product.set_discount("percentage", 20, start_date=datetime(2025, 1, 1), end_date=datetime(2025, 2, 1))

        nairobi = timezone(timedelta(hours=3))
        assert product.discounted_price(at=datetime(2025, 1, 15, tzinfo=nairobi)) == pytest.approx(80.0)
        # 02:00 on Feb 1st in Nairobi is still before midnight UTC
        assert product.discounted_price(at=datetime(2025, 2, 1, 2, tzinfo=nairobi)) == pytest.approx(80.0)
        assert product.discounted_price(at=datetime(2025, 2, 1, 4, tzinfo=nairobi)) == 100.0

    def test_mixed_bounds_validated(self):
        product = _product()
        with pytest.raises(ValidationError):
            product.set_discount("fixed", 10, start_date=datetime(2025, 2, 1, tzinfo=UTC), end_date=datetime(2025, 1, 1))

    def test_end_before_start_rejected(self):
        product = _product()
        with pytest.raises(ValidationError):
            product.set_discount("fixed", 10, start_date=datetime(2025, 2, 1), end_date=datetime(2025, 1, 1))

    def test_clear_discount(self):
        product = _product()
        product.set_discount("fixed", 30)
        product.clear_discount()
        assert product.discounted_price() == 100.0

    def test_discount_percentage_from_original_price(self):
        assert _product(price=75.0, original_price=100.0).discount_percentage == 25
        assert _product(price=100.0).discount_percentage == 0


class TestStock:
    def test_reduce_more_than_available_fails_and_keeps_stock(self):
        product = _product(stock=5)
        with pytest.raises(ValidationError) as exc:
            product.reduce_stock(6)
        assert "Insufficient stock" in str(exc.value)
        assert product.stock == 5

    def test_reduce_all_stock(self):
        product = _product(stock=5)
        product.reduce_stock(5)
        assert product.stock == 0
        assert product.is_in_stock() is False

    def test_add_stock(self):
        product = _product(stock=0)
        product.add_stock(7)
        assert product.stock == 7
        assert product.is_in_stock() is True

    def test_stock_changes_raise_events(self):
        product = _product(stock=5)
        product._events.clear()
        product.reduce_stock(2)
        event = product._events[0]
        assert isinstance(event, StockAdjusted)
        assert event.change == -2
        assert event.stock == 3


class TestRatings:
    def test_record_rating_incremental_mean(self):
        product = _product()
        product.record_rating(4)
        product.record_rating(2)
        assert product.ratings.average == pytest.approx(3.0)
        assert product.ratings.count == 2

    def test_apply_rating_overwrites(self):
        product = _product()
        product.record_rating(5)
        product.apply_rating(3.5, 4)
        assert product.ratings.average == 3.5
        assert product.ratings.count == 4


class TestCountersAndFlags:
    def test_view_and_sale_counters(self):
        product = _product()
        product.record_view()
        product.record_view()
        product.record_sale(3)
        assert product.view_count == 2
        assert product.sales_count == 3

    def test_feature_and_deactivate(self):
        product = _product()
        product.feature()
        assert product.is_featured is True
        product.deactivate()
        assert product.is_active is False
