"""
Product management service.

Every write that sets or changes a product's parents verifies, before
anything is persisted, that:
- the category exists,
- the subcategory exists,
- the subcategory belongs to that category (ReferentialMismatchError otherwise).
"""
import dataclasses
import sqlite3
from typing import Optional
import logging

from catalog_api.core.exceptions import (
    DuplicateKeyError,
    NotFoundError,
    ReferentialMismatchError,
)
from catalog_api.models.identity import Identity
from catalog_api.models.product import Product
from catalog_api.models.user import UserRole
from catalog_api.repositories.category_repository import CategoryRepository
from catalog_api.repositories.product_repository import ProductRepository
from catalog_api.repositories.subcategory_repository import SubcategoryRepository
from catalog_api.schemas.product import ProductCreate, ProductUpdate

logger = logging.getLogger(__name__)


class ProductService:
    """Business logic for product operations."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize repositories used by the product service."""
        logger.trace("Initializing ProductService")
        self._repo = ProductRepository(conn)
        self._category_repo = CategoryRepository(conn)
        self._subcategory_repo = SubcategoryRepository(conn)

    def _check_parents(self, category_id: int, subcategory_id: int) -> None:
        if not self._category_repo.get_by_id(category_id):
            logger.warning("Category id=%s not found for product", category_id)
            raise NotFoundError("Category not found")
        subcategory = self._subcategory_repo.get_by_id(subcategory_id)
        if not subcategory:
            logger.warning("Subcategory id=%s not found for product", subcategory_id)
            raise NotFoundError("Subcategory not found")
        if subcategory.category_id != category_id:
            logger.warning(
                "Subcategory id=%s belongs to category id=%s, not id=%s",
                subcategory_id,
                subcategory.category_id,
                category_id,
            )
            raise ReferentialMismatchError(
                "Subcategory does not belong to the specified category"
            )

    @staticmethod
    def _shape_for(product: Product, viewer: Optional[Identity]) -> Product:
        # Auxiliares do not get to see who created a product.
        if viewer is not None and viewer.role == UserRole.AUXILIAR:
            return dataclasses.replace(product, created_by=None)
        return product

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_product(self, product_id: int, viewer: Optional[Identity] = None) -> Product:
        """Fetch a product by id or raise NotFoundError."""
        logger.info("Fetching product id=%s", product_id)
        product = self._repo.get_by_id(product_id)
        if not product:
            logger.warning("Product id=%s not found", product_id)
            raise NotFoundError("Product not found")
        return self._shape_for(product, viewer)

    def list_products(
        self,
        include_inactive: bool = False,
        category_id: Optional[int] = None,
        subcategory_id: Optional[int] = None,
        viewer: Optional[Identity] = None,
    ) -> list[Product]:
        logger.info(
            "Listing products include_inactive=%s category_id=%s subcategory_id=%s",
            include_inactive,
            category_id,
            subcategory_id,
        )
        products = self._repo.list_all(
            include_inactive=include_inactive,
            category_id=category_id,
            subcategory_id=subcategory_id,
        )
        return [self._shape_for(p, viewer) for p in products]

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create_product(self, data: ProductCreate, created_by: Identity) -> Product:
        """Create a product after the referential and uniqueness checks."""
        logger.info("Creating product %s", data.name)
        self._check_parents(data.category_id, data.subcategory_id)

        if self._repo.get_by_name(data.name):
            logger.warning("Duplicate product name: %s", data.name)
            raise DuplicateKeyError(f"Product with name '{data.name}' already exists")

        try:
            product = self._repo.create(
                name=data.name,
                description=data.description,
                price=data.price,
                stock=data.stock,
                category_id=data.category_id,
                subcategory_id=data.subcategory_id,
                created_by=created_by.subject_id,
                images=data.images,
            )
        except sqlite3.IntegrityError:
            raise DuplicateKeyError(f"Product with name '{data.name}' already exists")
        logger.info("Product created id=%s", product.id)
        return product

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_product(self, product_id: int, data: ProductUpdate) -> Product:
        """
        Apply the fields that were sent. When either parent is sent, even with
        its current value, the resulting (category, subcategory) pair is
        checked as a whole.
        """
        logger.info("Updating product id=%s", product_id)
        product = self.get_product(product_id)
        updates = data.model_dump(exclude_none=True)

        if "category_id" in updates or "subcategory_id" in updates:
            self._check_parents(
                updates.get("category_id", product.category_id),
                updates.get("subcategory_id", product.subcategory_id),
            )

        if "name" in updates and updates["name"] != product.name:
            if self._repo.get_by_name(updates["name"]):
                logger.warning("Duplicate product rename: %s", updates["name"])
                raise DuplicateKeyError(
                    f"Product with name '{updates['name']}' already exists"
                )

        try:
            updated = self._repo.update(product_id, **updates)
        except sqlite3.IntegrityError:
            raise DuplicateKeyError("Product with that name already exists")
        if updated is None:
            raise NotFoundError("Product not found")
        logger.info("Product updated id=%s", product_id)
        return updated
