"""Category aggregate root for product categorization."""

import json
from datetime import datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.shared.slug import slugify


@storefront.aggregate
class Category:
    """A node in the product taxonomy.

    Categories form a tree through ``parent_id`` (None for roots). There is no
    depth limit; the management handler refuses parent changes that would
    create a cycle. The slug is derived from the name the first time a name is
    set and is never regenerated afterwards.
    """

    name: String(required=True, max_length=100, unique=True, sanitize=False)
    description: String(max_length=500)
    image: String(max_length=500, default="")
    parent_id: Identifier()
    slug: String(max_length=120, unique=True, sanitize=False)
    is_active: Boolean(default=True)
    product_ids: Text(sanitize=False)  # JSON array of product ids
    sort_order: Integer(default=0)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @classmethod
    def create(cls, name, description=None, image=None, parent_id=None, slug=None, sort_order=0):
        from storefront.category.events import CategoryCreated

        name = name.strip()
        now = datetime.now()

        category = cls(
            name=name,
            description=description,
            image=image or "",
            parent_id=parent_id,
            slug=slug or slugify(name),
            product_ids=json.dumps([]),
            sort_order=sort_order,
            created_at=now,
            updated_at=now,
        )
        category.raise_(
            CategoryCreated(
                category_id=category.id,
                name=category.name,
                slug=category.slug,
                parent_id=parent_id,
            )
        )
        return category

    @property
    def products(self):
        return json.loads(self.product_ids) if self.product_ids else []

    @property
    def is_root(self):
        return not self.parent_id

    def update_details(self, name=None, description=None, image=None):
        if name is not None:
            self.name = name.strip()
            if not self.slug:
                self.slug = slugify(self.name)
        if description is not None:
            self.description = description
        if image is not None:
            self.image = image

        self.updated_at = datetime.now()

    def move_under(self, parent_id):
        if parent_id is not None and str(parent_id) == str(self.id):
            raise ValidationError({"parent_id": ["A category cannot be its own parent"]})

        self.parent_id = parent_id or None
        self.updated_at = datetime.now()

    def reorder(self, sort_order):
        self.sort_order = sort_order
        self.updated_at = datetime.now()

    def link_product(self, product_id):
        products = self.products
        if str(product_id) not in products:
            products.append(str(product_id))
            self.product_ids = json.dumps(products)
            self.updated_at = datetime.now()

    def unlink_product(self, product_id):
        products = self.products
        if str(product_id) in products:
            products.remove(str(product_id))
            self.product_ids = json.dumps(products)
            self.updated_at = datetime.now()

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"is_active": ["Category is already inactive"]})

        self.is_active = False
        self.updated_at = datetime.now()

    def activate(self):
        if self.is_active:
            raise ValidationError({"is_active": ["Category is already active"]})

        self.is_active = True
        self.updated_at = datetime.now()
