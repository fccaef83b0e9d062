"""
Catalog totals for the dashboard.
"""
import sqlite3
import logging

from catalog_api.repositories.category_repository import CategoryRepository
from catalog_api.repositories.product_repository import ProductRepository
from catalog_api.repositories.subcategory_repository import SubcategoryRepository
from catalog_api.repositories.user_repository import UserRepository
from catalog_api.schemas.statistics import StatisticsResponse

logger = logging.getLogger(__name__)


class StatisticsService:
    def __init__(self, conn: sqlite3.Connection) -> None:
        self._users = UserRepository(conn)
        self._products = ProductRepository(conn)
        self._categories = CategoryRepository(conn)
        self._subcategories = SubcategoryRepository(conn)

    def get_statistics(self) -> StatisticsResponse:
        """Count every stored record per kind, active or not."""
        logger.info("Computing catalog statistics")
        return StatisticsResponse(
            total_users=self._users.count(),
            total_products=self._products.count(),
            total_categories=self._categories.count(),
            total_subcategories=self._subcategories.count(),
        )
