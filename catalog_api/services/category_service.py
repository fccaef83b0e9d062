"""
Category management service: reads, creation and renames.
Deactivation, reactivation and removal live in the lifecycle service.
"""
import sqlite3
import logging

from catalog_api.core.exceptions import DuplicateKeyError, NotFoundError
from catalog_api.models.category import Category
from catalog_api.repositories.category_repository import CategoryRepository
from catalog_api.schemas.category import CategoryCreate, CategoryUpdate

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing CategoryService")
        self._repo = CategoryRepository(conn)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_category(self, category_id: int) -> Category:
        logger.info("Fetching category id=%s", category_id)
        category = self._repo.get_by_id(category_id)
        if not category:
            logger.warning("Category id=%s not found", category_id)
            raise NotFoundError("Category not found")
        return category

    def list_categories(self, include_inactive: bool = False) -> list[Category]:
        logger.info("Listing categories include_inactive=%s", include_inactive)
        return self._repo.list_all(include_inactive=include_inactive)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_category(self, data: CategoryCreate) -> Category:
        logger.info("Creating category %s", data.name)
        if self._repo.get_by_name(data.name):
            logger.warning("Duplicate category name: %s", data.name)
            raise DuplicateKeyError(f"Category with name '{data.name}' already exists")

        try:
            category = self._repo.create(name=data.name, description=data.description)
        except sqlite3.IntegrityError:
            raise DuplicateKeyError(f"Category with name '{data.name}' already exists")
        logger.info("Category created id=%s", category.id)
        return category

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_category(self, category_id: int, data: CategoryUpdate) -> Category:
        logger.info("Updating category id=%s", category_id)
        category = self.get_category(category_id)

        updates = data.model_dump(exclude_none=True)
        if "name" in updates and updates["name"] != category.name:
            if self._repo.get_by_name(updates["name"]):
                logger.warning("Duplicate category rename attempt: %s", updates["name"])
                raise DuplicateKeyError(
                    f"Category with name '{updates['name']}' already exists"
                )

        try:
            updated = self._repo.update(category_id, **updates)
        except sqlite3.IntegrityError:
            raise DuplicateKeyError("Category with that name already exists")
        if updated is None:
            raise NotFoundError("Category not found")
        logger.info("Category updated id=%s", category_id)
        return updated
