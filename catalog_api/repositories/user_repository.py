"""
Repository layer for User persistence.
All SQL for the `users` table lives here.
"""
import sqlite3
from typing import Optional
from datetime import datetime, timezone
import logging

from catalog_api.models.user import User, UserRole
from catalog_api.core.logging_config import log_db_timing

logger = logging.getLogger(__name__)


class UserRepository:
    """Data access layer for user records."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Store the database connection for query execution."""
        logger.trace("Initializing UserRepository")
        self._conn = conn

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    @log_db_timing
    def get_by_id(self, user_id: int) -> Optional[User]:
        """Return a user by id or None if missing."""
        row = self._conn.execute(
            "SELECT * FROM users WHERE id = ?", (user_id,)
        ).fetchone()
        return User.from_row(row) if row else None

    @log_db_timing
    def get_by_email(self, email: str) -> Optional[User]:
        """Return a user by email (case-insensitive)."""
        row = self._conn.execute(
            "SELECT * FROM users WHERE email = ? COLLATE NOCASE", (email,)
        ).fetchone()
        return User.from_row(row) if row else None

    @log_db_timing
    def get_by_username(self, username: str) -> Optional[User]:
        row = self._conn.execute(
            "SELECT * FROM users WHERE username = ?", (username,)
        ).fetchone()
        return User.from_row(row) if row else None

    @log_db_timing
    def get_by_login(self, login: str) -> Optional[User]:
        """Return the user whose username or email equals *login*."""
        return self.get_by_username(login) or self.get_by_email(login)

    @log_db_timing
    def list_all(
        self,
        include_inactive: bool = False,
        exclude_role: Optional[UserRole] = None,
        only_id: Optional[int] = None,
    ) -> list[User]:
        """Return users, optionally restricted by role or to a single id."""
        clauses: list[str] = []
        params: list = []
        if not include_inactive:
            clauses.append("is_active = 1")
        if exclude_role is not None:
            clauses.append("role != ?")
            params.append(exclude_role.value)
        if only_id is not None:
            clauses.append("id = ?")
            params.append(only_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._conn.execute(
            f"SELECT * FROM users {where} ORDER BY created_at DESC, id DESC", params
        ).fetchall()
        return [User.from_row(r) for r in rows]

    @log_db_timing
    def count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @log_db_timing
    def create(
        self,
        *,
        username: str,
        email: str,
        hashed_password: str,
        role: UserRole,
    ) -> User:
        """Insert a new user row and return the created user."""
        logger.info("Creating user record username=%s", username)
        now = datetime.now(tz=timezone.utc).isoformat()
        cursor = self._conn.execute(
            """
            INSERT INTO users (username, email, hashed_password, role, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (username, email, hashed_password, role.value, now, now),
        )
        return self.get_by_id(cursor.lastrowid)  # type: ignore[return-value]

    @log_db_timing
    def update(self, user_id: int, **fields) -> Optional[User]:
        """Update user fields and return the updated row."""
        if not fields:
            logger.trace("No user fields to update id=%s", user_id)
            return self.get_by_id(user_id)

        logger.info("Updating user record id=%s", user_id)
        fields["updated_at"] = datetime.now(tz=timezone.utc).isoformat()
        set_clause = ", ".join(f"{col} = ?" for col in fields)
        values = list(fields.values()) + [user_id]
        cursor = self._conn.execute(
            f"UPDATE users SET {set_clause} WHERE id = ?", values
        )
        if cursor.rowcount == 0:
            return None
        return self.get_by_id(user_id)

    @log_db_timing
    def delete(self, user_id: int) -> bool:
        """Permanently remove the user row."""
        logger.info("Deleting user record id=%s", user_id)
        cursor = self._conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
        logger.info("User delete affected %s rows", cursor.rowcount)
        return cursor.rowcount > 0
