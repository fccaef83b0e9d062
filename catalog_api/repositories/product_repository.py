"""
Repository layer for Product persistence.
All SQL for the `products` table lives here.
"""
import json
import sqlite3
from decimal import Decimal
from typing import Optional
from datetime import datetime, timezone
import logging

from catalog_api.core.logging_config import log_db_timing
from catalog_api.models.product import Product

logger = logging.getLogger(__name__)


class ProductRepository:
    """Data access layer for product records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing ProductRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, product_id: int) -> Optional[Product]:
        row = self._conn.execute(
            "SELECT * FROM products WHERE id = ?", (product_id,)
        ).fetchone()
        return Product.from_row(row) if row else None

    @log_db_timing
    def get_by_name(self, name: str) -> Optional[Product]:
        row = self._conn.execute(
            "SELECT * FROM products WHERE name = ?", (name,)
        ).fetchone()
        return Product.from_row(row) if row else None

    @log_db_timing
    def list_all(
        self,
        include_inactive: bool = False,
        category_id: Optional[int] = None,
        subcategory_id: Optional[int] = None,
    ) -> list[Product]:
        """Return products, newest first, with optional parent filters."""
        clauses: list[str] = []
        params: list = []
        if not include_inactive:
            clauses.append("is_active = 1")
        if category_id is not None:
            clauses.append("category_id = ?")
            params.append(category_id)
        if subcategory_id is not None:
            clauses.append("subcategory_id = ?")
            params.append(subcategory_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._conn.execute(
            f"SELECT * FROM products {where} ORDER BY created_at DESC, id DESC",
            params,
        ).fetchall()
        return [Product.from_row(r) for r in rows]

    @log_db_timing
    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM products").fetchone()[0]

    @log_db_timing
    def count_by_category(self, category_id: int) -> int:
        return self._conn.execute(
            "SELECT COUNT(*) FROM products WHERE category_id = ?", (category_id,)
        ).fetchone()[0]

    @log_db_timing
    def count_by_subcategory(self, subcategory_id: int) -> int:
        return self._conn.execute(
            "SELECT COUNT(*) FROM products WHERE subcategory_id = ?", (subcategory_id,)
        ).fetchone()[0]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self,
        name: str,
        description: str,
        price: Decimal,
        stock: int,
        category_id: int,
        subcategory_id: int,
        created_by: Optional[int] = None,
        images: Optional[list[str]] = None,
    ) -> Product:
        logger.info("Creating product record name=%s", name)
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            """
            INSERT INTO products (
                name, description, price, stock, category_id, subcategory_id,
                created_by, images, created_at, updated_at
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                name, description, float(price), stock, category_id, subcategory_id,
                created_by, json.dumps(images or []), now, now,
            ),
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(self, product_id: int, **fields) -> Optional[Product]:
        """Update arbitrary fields on a product."""
        if not fields:
            logger.trace("No product fields to update id=%s", product_id)
            return self.get_by_id(product_id)

        if "price" in fields:
            fields["price"] = float(fields["price"])
        if "images" in fields:
            fields["images"] = json.dumps(fields["images"])

        logger.info("Updating product record id=%s", product_id)
        fields["updated_at"] = datetime.now(tz=timezone.utc).isoformat()
        set_clause = ", ".join(f"{col} = ?" for col in fields)
        values = list(fields.values()) + [product_id]
        cursor = self._conn.execute(
            f"UPDATE products SET {set_clause} WHERE id = ?", values
        )
        if cursor.rowcount == 0:
            return None
        return self.get_by_id(product_id)

    @log_db_timing
    def set_active_by_category(self, category_id: int, is_active: bool) -> int:
        """Flip the active flag of every product whose category is *category_id*."""
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            "UPDATE products SET is_active = ?, updated_at = ? WHERE category_id = ?",
            (int(is_active), now, category_id),
        )
        logger.info(
            "Product bulk update category_id=%s affected %s rows",
            category_id,
            cursor.rowcount,
        )
        return cursor.rowcount

    @log_db_timing
    def set_active_by_subcategory(self, subcategory_id: int, is_active: bool) -> int:
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            "UPDATE products SET is_active = ?, updated_at = ? WHERE subcategory_id = ?",
            (int(is_active), now, subcategory_id),
        )
        logger.info(
            "Product bulk update subcategory_id=%s affected %s rows",
            subcategory_id,
            cursor.rowcount,
        )
        return cursor.rowcount

    @log_db_timing
    def set_category_by_subcategory(self, subcategory_id: int, category_id: int) -> int:
        """Re-parent every product of *subcategory_id* under *category_id*."""
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            "UPDATE products SET category_id = ?, updated_at = ? WHERE subcategory_id = ?",
            (category_id, now, subcategory_id),
        )
        logger.info(
            "Moved %s products of subcategory_id=%s to category_id=%s",
            cursor.rowcount,
            subcategory_id,
            category_id,
        )
        return cursor.rowcount

    @log_db_timing
    def delete(self, product_id: int) -> bool:
        logger.info("Deleting product record id=%s", product_id)
        cursor = self._conn.execute(
            "DELETE FROM products WHERE id = ?", (product_id,)
        )
        logger.info("Product delete affected %s rows", cursor.rowcount)
        return cursor.rowcount > 0

    @log_db_timing
    def delete_by_category(self, category_id: int) -> int:
        cursor = self._conn.execute(
            "DELETE FROM products WHERE category_id = ?", (category_id,)
        )
        logger.info(
            "Product bulk delete category_id=%s affected %s rows",
            category_id,
            cursor.rowcount,
        )
        return cursor.rowcount

    @log_db_timing
    def delete_by_subcategory(self, subcategory_id: int) -> int:
        cursor = self._conn.execute(
            "DELETE FROM products WHERE subcategory_id = ?", (subcategory_id,)
        )
        logger.info(
            "Product bulk delete subcategory_id=%s affected %s rows",
            subcategory_id,
            cursor.rowcount,
        )
        return cursor.rowcount
