"""Tests for slug derivation."""

import pytest
from storefront.shared.slug import slugify


class TestSlugify:
    def test_punctuation_runs_collapse_to_single_hyphen(self):
        assert slugify("Men's Running Shoes!!") == "men-s-running-shoes"

    def test_lowercases(self):
        assert slugify("Electronics") == "electronics"

    def test_strips_leading_and_trailing_separators(self):
        assert slugify("  --Home & Garden--  ") == "home-garden"

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Sports & Outdoors", "sports-outdoors"),
            ("4K TV  (55 inch)", "4k-tv-55-inch"),
            ("Café Crème", "caf-cr-me"),
        ],
    )
    def test_examples(self, name, expected):
        assert slugify(name) == expected

    def test_nothing_alphanumeric_gives_empty_slug(self):
        assert slugify("!!!") == ""
