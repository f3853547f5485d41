"""Category management: commands and their handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.category.category import Category
from storefront.domain import storefront


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100, sanitize=False)
    description: String(max_length=500)
    image: String(max_length=500)
    parent_id: Identifier()
    slug: String(max_length=120, sanitize=False)
    sort_order: Integer(default=0)


@storefront.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=100, sanitize=False)
    description: String(max_length=500)
    image: String(max_length=500)


@storefront.command(part_of="Category")
class MoveCategory:
    category_id: Identifier(required=True)
    parent_id: Identifier()


@storefront.command(part_of="Category")
class ReorderCategory:
    category_id: Identifier(required=True)
    sort_order: Integer(required=True)


@storefront.command(part_of="Category")
class DeactivateCategory:
    category_id: Identifier(required=True)


@storefront.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)

        if repo.find_by_name(command.name.strip()) is not None:
            raise ValidationError({"name": [f"Category '{command.name}' already exists"]})

        if command.parent_id:
            # Raises ObjectNotFoundError for unknown parents
            repo.get(command.parent_id)

        category = Category.create(
            name=command.name,
            description=command.description,
            image=command.image,
            parent_id=command.parent_id,
            slug=command.slug,
            sort_order=command.sort_order or 0,
        )
        if category.slug and repo.slug_taken(category.slug):
            raise ValidationError({"slug": [f"Slug '{category.slug}' is already in use"]})

        repo.add(category)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if command.name is not None:
            existing = repo.find_by_name(command.name.strip())
            if existing is not None and str(existing.id) != str(category.id):
                raise ValidationError({"name": [f"Category '{command.name}' already exists"]})

        category.update_details(
            name=command.name,
            description=command.description,
            image=command.image,
        )
        repo.add(category)

    @handle(MoveCategory)
    def move_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if command.parent_id:
            repo.get(command.parent_id)
            lineage = [str(command.parent_id), *repo.ancestors_of(command.parent_id)]
            if str(category.id) in lineage:
                raise ValidationError({"parent_id": ["A category cannot be moved under one of its descendants"]})

        category.move_under(command.parent_id)
        repo.add(category)

    @handle(ReorderCategory)
    def reorder_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)
        category.reorder(command.sort_order)
        repo.add(category)

    @handle(DeactivateCategory)
    def deactivate_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)
        category.deactivate()
        repo.add(category)
