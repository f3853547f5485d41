"""Query methods for the Product aggregate."""

import re
from dataclasses import dataclass, field

from storefront.domain import storefront
from storefront.product.product import Product
from storefront.shared.queries import fetch_all

NAME_WEIGHT = 10
DESCRIPTION_WEIGHT = 5
TAG_WEIGHT = 1

_WORD = re.compile(r"\w+")

SORT_KEYS = {
    "newest": (lambda p: p.created_at, True),
    "oldest": (lambda p: p.created_at, False),
    "price_asc": (lambda p: p.price, False),
    "price_desc": (lambda p: p.price, True),
    "rating": (lambda p: (p.ratings.average if p.ratings else 0.0), True),
    "popular": (lambda p: p.sales_count or 0, True),
    "name": (lambda p: p.name.lower(), False),
}


@dataclass
class ProductFilters:
    category_id: str | None = None
    brand: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    min_rating: float | None = None
    tags: list[str] = field(default_factory=list)
    in_stock: bool = False
    featured: bool | None = None
    search: str | None = None
    sort: str = "newest"
    page: int = 1
    page_size: int = 20


@dataclass
class Page:
    items: list
    total: int
    page: int
    page_size: int

    @property
    def pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return (self.total + self.page_size - 1) // self.page_size

    @property
    def has_next(self) -> bool:
        return self.page < self.pages


def _words(text: str) -> set[str]:
    return set(_WORD.findall(text.lower()))


def relevance(product: Product, term: str) -> int:
    """Weighted match score of ``term`` against name, description and tags.

    Matching is by whole word: a field scores when it shares at least one word
    with ``term``, so "pen" matches "Blue pen" but not "pencil" or "open".
    """
    wanted = _words(term or "")
    if not wanted:
        return 0

    score = 0
    if wanted & _words(product.name or ""):
        score += NAME_WEIGHT
    if wanted & _words(product.description or ""):
        score += DESCRIPTION_WEIGHT
    if any(wanted & _words(tag) for tag in product.tag_list):
        score += TAG_WEIGHT
    return score


@storefront.repository(part_of=Product)
class ProductRepository:
    def find_active(self) -> list[Product]:
        return fetch_all(self._dao.query.filter(is_active=True).order_by("-created_at"))

    def find_featured(self, limit: int = 10) -> list[Product]:
        return (
            self._dao.query.filter(is_active=True, is_featured=True)
            .order_by("-created_at")
            .limit(limit)
            .all()
            .items
        )

    def find_by_category(self, category_id) -> list[Product]:
        return fetch_all(
            self._dao.query.filter(category_id=str(category_id), is_active=True).order_by("-created_at")
        )

    def find_by_slug(self, slug: str) -> Product | None:
        results = self._dao.query.filter(slug=slug, is_active=True).all().items
        return results[0] if results else None

    def find_by_sku(self, sku: str) -> Product | None:
        results = self._dao.query.filter(sku=sku.strip().upper()).all().items
        return results[0] if results else None

    def sku_taken(self, sku: str, exclude_id=None) -> bool:
        results = self._dao.query.filter(sku=sku).all().items
        return any(str(p.id) != str(exclude_id) for p in results)

    def slug_taken(self, slug: str, exclude_id=None) -> bool:
        results = self._dao.query.filter(slug=slug).all().items
        return any(str(p.id) != str(exclude_id) for p in results)

    def search(self, term: str) -> list[Product]:
        """Active products matching ``term``, best match first."""
        scored = [(relevance(product, term), product) for product in self.find_active()]
        scored = [entry for entry in scored if entry[0] > 0]
        scored.sort(key=lambda entry: entry[0], reverse=True)
        return [product for _, product in scored]

    def browse(self, filters: ProductFilters) -> Page:
        products = self.search(filters.search) if filters.search else self.find_active()

        def keep(product):
            if filters.category_id and str(product.category_id) != str(filters.category_id):
                return False
            if filters.brand and product.brand.lower() != filters.brand.lower():
                return False
            if filters.min_price is not None and product.price < filters.min_price:
                return False
            if filters.max_price is not None and product.price > filters.max_price:
                return False
            if filters.min_rating is not None:
                average = product.ratings.average if product.ratings else 0.0
                if average < filters.min_rating:
                    return False
            if filters.tags:
                wanted = {tag.strip().lower() for tag in filters.tags}
                if not wanted & set(product.tag_list):
                    return False
            if filters.in_stock and not product.is_in_stock():
                return False
            if filters.featured is not None and product.is_featured != filters.featured:
                return False
            return True

        matches = [product for product in products if keep(product)]

        # Search results keep relevance order unless a sort is asked for explicitly
        if not filters.search or filters.sort != "newest":
            key, reverse = SORT_KEYS.get(filters.sort, SORT_KEYS["newest"])
            matches.sort(key=key, reverse=reverse)

        page = max(filters.page, 1)
        start = (page - 1) * filters.page_size
        return Page(
            items=matches[start : start + filters.page_size],
            total=len(matches),
            page=page,
            page_size=filters.page_size,
        )
