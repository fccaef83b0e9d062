"""
Repository layer for Category persistence.
All SQL for the `categories` table lives here.
"""
import sqlite3
from typing import Optional
from datetime import datetime, timezone
import logging

from catalog_api.core.logging_config import log_db_timing
from catalog_api.models.category import Category

logger = logging.getLogger(__name__)


class CategoryRepository:
    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing CategoryRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, category_id: int) -> Optional[Category]:
        row = self._conn.execute(
            "SELECT * FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        return Category.from_row(row) if row else None

    @log_db_timing
    def get_by_name(self, name: str) -> Optional[Category]:
        row = self._conn.execute(
            "SELECT * FROM categories WHERE name = ?", (name,)
        ).fetchone()
        return Category.from_row(row) if row else None

    @log_db_timing
    def list_all(self, include_inactive: bool = False) -> list[Category]:
        """Newest first; inactive rows only when asked for."""
        query = "SELECT * FROM categories"
        if not include_inactive:
            query += " WHERE is_active = 1"
        rows = self._conn.execute(
            query + " ORDER BY created_at DESC, id DESC"
        ).fetchall()
        return [Category.from_row(r) for r in rows]

    @log_db_timing
    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM categories").fetchone()[0]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(self, name: str, description: str) -> Category:
        logger.info("Creating category record name=%s", name)
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            """
            INSERT INTO categories (name, description, created_at, updated_at)
            VALUES (?, ?, ?, ?)
            """,
            (name, description, now, now),
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(self, category_id: int, **fields) -> Optional[Category]:
        if not fields:
            logger.trace("No category fields to update id=%s", category_id)
            return self.get_by_id(category_id)

        logger.info("Updating category record id=%s", category_id)
        fields["updated_at"] = datetime.now(tz=timezone.utc).isoformat()
        set_clause = ", ".join(f"{col} = ?" for col in fields)
        values = list(fields.values()) + [category_id]
        cursor = self._conn.execute(
            f"UPDATE categories SET {set_clause} WHERE id = ?", values
        )
        if cursor.rowcount == 0:
            return None
        return self.get_by_id(category_id)

    @log_db_timing
    def delete(self, category_id: int) -> bool:
        logger.info("Deleting category record id=%s", category_id)
        cursor = self._conn.execute(
            "DELETE FROM categories WHERE id = ?", (category_id,)
        )
        logger.info("Category delete affected %s rows", cursor.rowcount)
        return cursor.rowcount > 0
