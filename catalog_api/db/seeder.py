"""
Database seeder – creates a default admin account on first startup.

⚠️  FOR DEVELOPMENT ONLY.
    Set SEED_ADMIN=false (or change the ADMIN_* settings) before deploying.
"""
import logging

from catalog_api.core.config import settings, token_config
from catalog_api.core.security import PasswordHasher
from catalog_api.db.database import get_connection
from catalog_api.models.user import UserRole

logger = logging.getLogger(__name__)


def seed_admin() -> None:
    """
    Insert the default admin user if it does not already exist.
    Safe to call on every startup – it is a no-op when the user is present.
    """
    conn = get_connection()
    try:
        existing = conn.execute(
            "SELECT id FROM users WHERE username = ?", (settings.ADMIN_USERNAME,)
        ).fetchone()

        if existing:
            logger.info(
                "Seeder: admin user '%s' already exists – skipping.",
                settings.ADMIN_USERNAME,
            )
            return

        hasher = PasswordHasher(token_config)
        conn.execute(
            """
            INSERT INTO users (username, email, hashed_password, role, is_active)
            VALUES (?, ?, ?, ?, 1)
            """,
            (
                settings.ADMIN_USERNAME,
                settings.ADMIN_EMAIL.strip().lower(),
                hasher.hash(settings.ADMIN_PASSWORD),
                UserRole.ADMIN.value,
            ),
        )
        conn.commit()
        logger.info(
            "Seeder: created default admin user '%s' (email: %s).",
            settings.ADMIN_USERNAME,
            settings.ADMIN_EMAIL,
        )
    finally:
        conn.close()
