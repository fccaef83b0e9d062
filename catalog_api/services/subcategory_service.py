"""
Subcategory management service.

A subcategory must always reference an existing category; that is checked on
create and whenever the parent changes, before anything is written. Moving a
subcategory to another category moves its products along with it, so every
product keeps a subcategory that belongs to its own category.
"""
import sqlite3
from typing import Optional
import logging

from catalog_api.core.exceptions import DuplicateKeyError, NotFoundError
from catalog_api.models.subcategory import Subcategory
from catalog_api.repositories.category_repository import CategoryRepository
from catalog_api.repositories.product_repository import ProductRepository
from catalog_api.repositories.subcategory_repository import SubcategoryRepository
from catalog_api.schemas.subcategory import SubcategoryCreate, SubcategoryUpdate

logger = logging.getLogger(__name__)


class SubcategoryService:
    """Business logic for subcategory operations."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing SubcategoryService")
        self._repo = SubcategoryRepository(conn)
        self._category_repo = CategoryRepository(conn)
        self._product_repo = ProductRepository(conn)

    def _require_category(self, category_id: int) -> None:
        if not self._category_repo.get_by_id(category_id):
            logger.warning("Parent category id=%s not found", category_id)
            raise NotFoundError("Category not found")

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_subcategory(self, subcategory_id: int) -> Subcategory:
        logger.info("Fetching subcategory id=%s", subcategory_id)
        subcategory = self._repo.get_by_id(subcategory_id)
        if not subcategory:
            logger.warning("Subcategory id=%s not found", subcategory_id)
            raise NotFoundError("Subcategory not found")
        return subcategory

    def list_subcategories(
        self,
        include_inactive: bool = False,
        category_id: Optional[int] = None,
    ) -> list[Subcategory]:
        logger.info(
            "Listing subcategories include_inactive=%s category_id=%s",
            include_inactive,
            category_id,
        )
        return self._repo.list_all(include_inactive=include_inactive, category_id=category_id)

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_subcategory(self, data: SubcategoryCreate) -> Subcategory:
        logger.info("Creating subcategory %s", data.name)
        self._require_category(data.category_id)

        if self._repo.get_by_name(data.name):
            logger.warning("Duplicate subcategory name: %s", data.name)
            raise DuplicateKeyError(f"Subcategory with name '{data.name}' already exists")

        try:
            subcategory = self._repo.create(
                name=data.name,
                description=data.description,
                category_id=data.category_id,
            )
        except sqlite3.IntegrityError:
            raise DuplicateKeyError(f"Subcategory with name '{data.name}' already exists")
        logger.info("Subcategory created id=%s", subcategory.id)
        return subcategory

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_subcategory(self, subcategory_id: int, data: SubcategoryUpdate) -> Subcategory:
        logger.info("Updating subcategory id=%s", subcategory_id)
        subcategory = self.get_subcategory(subcategory_id)
        updates = data.model_dump(exclude_none=True)

        moved_to = updates.get("category_id")
        if moved_to == subcategory.category_id:
            moved_to = None
        if moved_to is not None:
            self._require_category(moved_to)

        if "name" in updates and updates["name"] != subcategory.name:
            if self._repo.get_by_name(updates["name"]):
                raise DuplicateKeyError(
                    f"Subcategory with name '{updates['name']}' already exists"
                )

        try:
            updated = self._repo.update(subcategory_id, **updates)
        except sqlite3.IntegrityError:
            raise DuplicateKeyError("Subcategory with that name already exists")
        if updated is None:
            raise NotFoundError("Subcategory not found")
        if moved_to is not None:
            self._product_repo.set_category_by_subcategory(subcategory_id, moved_to)
        logger.info("Subcategory updated id=%s", subcategory_id)
        return updated
