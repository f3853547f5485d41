"""Query methods for the Category aggregate."""

from protean.utils.globals import current_domain

from storefront.category.category import Category
from storefront.domain import storefront
from storefront.shared.queries import fetch_all


@storefront.repository(part_of=Category)
class CategoryRepository:
    def find_roots(self) -> list[Category]:
        """Active categories without a parent, in display order."""
        return fetch_all(self._dao.query.filter(parent_id__isnull=True, is_active=True).order_by("sort_order"))

    def find_by_slug(self, slug: str) -> Category | None:
        results = self._dao.query.filter(slug=slug, is_active=True).all().items
        return results[0] if results else None

    def find_by_name(self, name: str) -> Category | None:
        results = self._dao.query.filter(name=name).all().items
        return results[0] if results else None

    def slug_taken(self, slug: str, exclude_id=None) -> bool:
        results = self._dao.query.filter(slug=slug).all().items
        return any(str(c.id) != str(exclude_id) for c in results)

    def find_children(self, category_id) -> list[Category]:
        """Active direct subcategories, in display order."""
        return fetch_all(self._dao.query.filter(parent_id=str(category_id), is_active=True).order_by("sort_order"))

    def ancestors_of(self, category_id) -> list[str]:
        """Ids on the path from ``category_id`` up to its root, nearest first."""
        path = []
        current = self.get(category_id)
        while current.parent_id and str(current.parent_id) not in path:
            path.append(str(current.parent_id))
            current = self.get(current.parent_id)
        return path

    def product_count(self, category_id) -> int:
        """Number of active products filed under the category."""
        from storefront.product.product import Product

        product_repo = current_domain.repository_for(Product)
        return product_repo._dao.query.filter(category_id=str(category_id), is_active=True).all().total
