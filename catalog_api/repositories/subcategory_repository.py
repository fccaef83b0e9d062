"""
Repository layer for Subcategory persistence.
All SQL for the `subcategories` table lives here.
"""
import sqlite3
from typing import Optional
from datetime import datetime, timezone
import logging

from catalog_api.core.logging_config import log_db_timing
from catalog_api.models.subcategory import Subcategory

logger = logging.getLogger(__name__)


class SubcategoryRepository:
    """Data access layer for subcategory records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        logger.trace("Initializing SubcategoryRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, subcategory_id: int) -> Optional[Subcategory]:
        row = self._conn.execute(
            "SELECT * FROM subcategories WHERE id = ?", (subcategory_id,)
        ).fetchone()
        return Subcategory.from_row(row) if row else None

    @log_db_timing
    def get_by_name(self, name: str) -> Optional[Subcategory]:
        row = self._conn.execute(
            "SELECT * FROM subcategories WHERE name = ?", (name,)
        ).fetchone()
        return Subcategory.from_row(row) if row else None

    @log_db_timing
    def list_all(
        self,
        include_inactive: bool = False,
        category_id: Optional[int] = None,
    ) -> list[Subcategory]:
        """Return subcategories, newest first, optionally for one category."""
        clauses: list[str] = []
        params: list = []
        if not include_inactive:
            clauses.append("is_active = 1")
        if category_id is not None:
            clauses.append("category_id = ?")
            params.append(category_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._conn.execute(
            f"SELECT * FROM subcategories {where} ORDER BY created_at DESC, id DESC",
            params,
        ).fetchall()
        return [Subcategory.from_row(r) for r in rows]

    @log_db_timing
    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM subcategories").fetchone()[0]

    @log_db_timing
    def count_by_category(self, category_id: int) -> int:
        return self._conn.execute(
            "SELECT COUNT(*) FROM subcategories WHERE category_id = ?", (category_id,)
        ).fetchone()[0]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(self, name: str, description: str, category_id: int) -> Subcategory:
        logger.info("Creating subcategory record name=%s", name)
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            """
            INSERT INTO subcategories (name, description, category_id, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (name, description, category_id, now, now),
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(self, subcategory_id: int, **fields) -> Optional[Subcategory]:
        if not fields:
            logger.trace("No subcategory fields to update id=%s", subcategory_id)
            return self.get_by_id(subcategory_id)

        logger.info("Updating subcategory record id=%s", subcategory_id)
        fields["updated_at"] = datetime.now(tz=timezone.utc).isoformat()
        set_clause = ", ".join(f"{col} = ?" for col in fields)
        values = list(fields.values()) + [subcategory_id]
        cursor = self._conn.execute(
            f"UPDATE subcategories SET {set_clause} WHERE id = ?", values
        )
        if cursor.rowcount == 0:
            return None
        return self.get_by_id(subcategory_id)

    @log_db_timing
    def set_active_by_category(self, category_id: int, is_active: bool) -> int:
        """Flip the active flag of every subcategory under a category."""
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            "UPDATE subcategories SET is_active = ?, updated_at = ? WHERE category_id = ?",
            (int(is_active), now, category_id),
        )
        logger.info(
            "Subcategory bulk update category_id=%s affected %s rows",
            category_id,
            cursor.rowcount,
        )
        return cursor.rowcount

    @log_db_timing
    def delete(self, subcategory_id: int) -> bool:
        logger.info("Deleting subcategory record id=%s", subcategory_id)
        cursor = self._conn.execute(
            "DELETE FROM subcategories WHERE id = ?", (subcategory_id,)
        )
        return cursor.rowcount > 0

    @log_db_timing
    def delete_by_category(self, category_id: int) -> int:
        cursor = self._conn.execute(
            "DELETE FROM subcategories WHERE category_id = ?", (category_id,)
        )
        logger.info(
            "Subcategory bulk delete category_id=%s affected %s rows",
            category_id,
            cursor.rowcount,
        )
        return cursor.rowcount
