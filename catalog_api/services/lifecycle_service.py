"""
Hierarchy lifecycle service: deactivate, reactivate and hard-delete for the
Category → Subcategory → Product tree.

Rules:
- Deactivating a category flips its subcategories and every product whose
  own ``category_id`` matches (products are not re-derived through the
  subcategories). Deactivating a subcategory flips its products.
- Hard deletes run child-before-parent so no row ever points at a parent that
  is already gone.
- Reactivation only flips the targeted row. Descendants switched off by a
  cascade stay off until they are reactivated one by one.

Each cascade is a sequence of independent store calls. The request
connection wraps them in one SQLite transaction, but the service does not rely
on it: every completed step is recorded in the returned ``CascadeSummary``,
and a failing step raises ``CascadeInterruptedError`` carrying the summary so
far.
"""
import dataclasses
import sqlite3
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar
import logging

from catalog_api.core.exceptions import (
    CascadeInterruptedError,
    CatalogError,
    DependentRecordsError,
    NotFoundError,
)
from catalog_api.models.category import Category
from catalog_api.models.product import Product
from catalog_api.models.subcategory import Subcategory
from catalog_api.repositories.category_repository import CategoryRepository
from catalog_api.repositories.product_repository import ProductRepository
from catalog_api.repositories.subcategory_repository import SubcategoryRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEACTIVATED = "deactivated"
DELETED = "deleted"


@dataclass
class CascadeSummary:
    kind: str
    id: int
    action: str
    cascade: bool
    record: Optional[Any] = None
    subcategories_affected: int = 0
    products_affected: int = 0
    completed_steps: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        data = dataclasses.asdict(self)
        if self.record is None:
            data["record"] = {}
        return data


class HierarchyLifecycleService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing HierarchyLifecycleService")
        self._categories = CategoryRepository(conn)
        self._subcategories = SubcategoryRepository(conn)
        self._products = ProductRepository(conn)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _step(summary: CascadeSummary, name: str, action: Callable[[], T]) -> T:
        """Run one cascade step and record it; wrap store faults with progress."""
        try:
            result = action()
        except CatalogError:
            raise
        except Exception as exc:
            logger.error(
                "Cascade %s %s id=%s failed at step %s after %s",
                summary.action,
                summary.kind,
                summary.id,
                name,
                summary.completed_steps,
                exc_info=True,
            )
            raise CascadeInterruptedError(summary, name) from exc
        summary.completed_steps.append(name)
        return result

    @staticmethod
    def _updated(record: Optional[T], kind: str) -> T:
        # The row disappeared between lookup and write.
        if record is None:
            raise NotFoundError(f"{kind} not found")
        return record

    @staticmethod
    def _removed(deleted: bool, kind: str) -> bool:
        # Children are already gone when the parent row is removed.
        if not deleted:
            raise LookupError(f"{kind} row vanished before it could be deleted")
        return deleted

    def _require_category(self, category_id: int) -> Category:
        category = self._categories.get_by_id(category_id)
        if not category:
            logger.warning("Category id=%s not found", category_id)
            raise NotFoundError("Category not found")
        return category

    def _require_subcategory(self, subcategory_id: int) -> Subcategory:
        subcategory = self._subcategories.get_by_id(subcategory_id)
        if not subcategory:
            logger.warning("Subcategory id=%s not found", subcategory_id)
            raise NotFoundError("Subcategory not found")
        return subcategory

    def _require_product(self, product_id: int) -> Product:
        product = self._products.get_by_id(product_id)
        if not product:
            logger.warning("Product id=%s not found", product_id)
            raise NotFoundError("Product not found")
        return product

    # ------------------------------------------------------------------
    # Deactivate
    # ------------------------------------------------------------------

    def deactivate_category(self, category_id: int, cascade: bool = True) -> CascadeSummary:
        logger.info("Deactivating category id=%s cascade=%s", category_id, cascade)
        self._require_category(category_id)
        summary = CascadeSummary("category", category_id, DEACTIVATED, cascade)

        summary.record = self._updated(
            self._step(
                summary,
                "deactivate_category",
                lambda: self._categories.update(category_id, is_active=0),
            ),
            "Category",
        )
        if cascade:
            summary.subcategories_affected = self._step(
                summary,
                "deactivate_subcategories",
                lambda: self._subcategories.set_active_by_category(category_id, False),
            )
            summary.products_affected = self._step(
                summary,
                "deactivate_products",
                lambda: self._products.set_active_by_category(category_id, False),
            )

        logger.info(
            "Category id=%s deactivated; subcategories=%s products=%s",
            category_id,
            summary.subcategories_affected,
            summary.products_affected,
        )
        return summary

    def deactivate_subcategory(
        self, subcategory_id: int, cascade: bool = True
    ) -> CascadeSummary:
        logger.info("Deactivating subcategory id=%s cascade=%s", subcategory_id, cascade)
        self._require_subcategory(subcategory_id)
        summary = CascadeSummary("subcategory", subcategory_id, DEACTIVATED, cascade)

        summary.record = self._updated(
            self._step(
                summary,
                "deactivate_subcategory",
                lambda: self._subcategories.update(subcategory_id, is_active=0),
            ),
            "Subcategory",
        )
        if cascade:
            summary.products_affected = self._step(
                summary,
                "deactivate_products",
                lambda: self._products.set_active_by_subcategory(subcategory_id, False),
            )

        logger.info(
            "Subcategory id=%s deactivated; products=%s",
            subcategory_id,
            summary.products_affected,
        )
        return summary

    def deactivate_product(self, product_id: int, cascade: bool = True) -> CascadeSummary:
        """Products have no descendants; *cascade* is accepted for symmetry."""
        logger.info("Deactivating product id=%s", product_id)
        self._require_product(product_id)
        summary = CascadeSummary("product", product_id, DEACTIVATED, cascade)
        summary.record = self._updated(
            self._step(
                summary,
                "deactivate_product",
                lambda: self._products.update(product_id, is_active=0),
            ),
            "Product",
        )
        return summary

    # ------------------------------------------------------------------
    # Reactivate (never cascades)
    # ------------------------------------------------------------------

    def reactivate_category(self, category_id: int) -> Category:
        logger.info("Reactivating category id=%s", category_id)
        self._require_category(category_id)
        return self._updated(self._categories.update(category_id, is_active=1), "Category")

    def reactivate_subcategory(self, subcategory_id: int) -> Subcategory:
        logger.info("Reactivating subcategory id=%s", subcategory_id)
        self._require_subcategory(subcategory_id)
        return self._updated(
            self._subcategories.update(subcategory_id, is_active=1), "Subcategory"
        )

    def reactivate_product(self, product_id: int) -> Product:
        logger.info("Reactivating product id=%s", product_id)
        self._require_product(product_id)
        return self._updated(self._products.update(product_id, is_active=1), "Product")

    # ------------------------------------------------------------------
    # Hard delete
    # ------------------------------------------------------------------

    def hard_delete_category(self, category_id: int, cascade: bool = True) -> CascadeSummary:
        logger.info("Hard deleting category id=%s cascade=%s", category_id, cascade)
        category = self._require_category(category_id)
        summary = CascadeSummary("category", category_id, DELETED, cascade, record=category)

        if cascade:
            summary.products_affected = self._step(
                summary,
                "delete_products",
                lambda: self._products.delete_by_category(category_id),
            )
            summary.subcategories_affected = self._step(
                summary,
                "delete_subcategories",
                lambda: self._subcategories.delete_by_category(category_id),
            )
        elif (
            self._subcategories.count_by_category(category_id)
            or self._products.count_by_category(category_id)
        ):
            logger.warning("Category id=%s still has dependents", category_id)
            raise DependentRecordsError(
                "Cannot delete category: it still has subcategories or products"
            )

        self._step(
            summary,
            "delete_category",
            lambda: self._removed(self._categories.delete(category_id), "Category"),
        )

        logger.info(
            "Category id=%s deleted; subcategories=%s products=%s",
            category_id,
            summary.subcategories_affected,
            summary.products_affected,
        )
        return summary

    def hard_delete_subcategory(
        self, subcategory_id: int, cascade: bool = True
    ) -> CascadeSummary:
        logger.info("Hard deleting subcategory id=%s cascade=%s", subcategory_id, cascade)
        subcategory = self._require_subcategory(subcategory_id)
        summary = CascadeSummary(
            "subcategory", subcategory_id, DELETED, cascade, record=subcategory
        )

        if cascade:
            summary.products_affected = self._step(
                summary,
                "delete_products",
                lambda: self._products.delete_by_subcategory(subcategory_id),
            )
        elif self._products.count_by_subcategory(subcategory_id):
            logger.warning("Subcategory id=%s still has products", subcategory_id)
            raise DependentRecordsError("Cannot delete subcategory: it still has products")

        self._step(
            summary,
            "delete_subcategory",
            lambda: self._removed(self._subcategories.delete(subcategory_id), "Subcategory"),
        )
        return summary

    def hard_delete_product(self, product_id: int, cascade: bool = True) -> CascadeSummary:
        logger.info("Hard deleting product id=%s", product_id)
        product = self._require_product(product_id)
        summary = CascadeSummary("product", product_id, DELETED, cascade, record=product)
        if not self._step(
            summary, "delete_product", lambda: self._products.delete(product_id)
        ):
            raise NotFoundError("Product not found")
        return summary
