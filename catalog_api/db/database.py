"""
SQLite connection helpers.

Every request works on its own connection. ``get_db`` commits when the
request finishes and rolls the whole request back on any error, so the
multi-step cascades of the lifecycle service are atomic on this store.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager

from catalog_api.core.config import settings
from catalog_api.core.exceptions import CatalogError

logger = logging.getLogger(__name__)

SQLITE_PREFIX = "sqlite:///"
BUSY_TIMEOUT_SECONDS = 5.0


def sqlite_path(database_url: str) -> str:
    """Return the file path of a ``sqlite:///<path>`` URL."""
    if not database_url.startswith(SQLITE_PREFIX):
        raise ValueError(f"Unsupported DATABASE_URL scheme: {database_url!r}")
    return database_url[len(SQLITE_PREFIX):]


DB_PATH = sqlite_path(settings.DATABASE_URL)

db_dir = os.path.dirname(DB_PATH) or "."
os.makedirs(db_dir, exist_ok=True)
logger.info("Database directory ensured at %s", db_dir)


def get_connection() -> sqlite3.Connection:
    """Open a connection that returns ``sqlite3.Row`` records."""
    logger.trace("Opening database connection to %s", DB_PATH)
    conn = sqlite3.connect(DB_PATH, timeout=BUSY_TIMEOUT_SECONDS, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_db():
    """Yield a connection for one unit of work; commit on success, roll back on error."""
    conn = get_connection()
    try:
        yield conn
        conn.commit()
        logger.trace("Database transaction committed")
    except CatalogError as exc:
        # Domain outcome such as 404 or 409.
        logger.info("Database transaction rolled back after %s", type(exc).__name__)
        conn.rollback()
        raise
    except Exception:
        logger.error("Database transaction rolled back", exc_info=True)
        conn.rollback()
        raise
    finally:
        conn.close()
        logger.trace("Database connection closed")


def init_db() -> None:
    """Create the schema; safe to call on every startup."""
    logger.info("Initializing database schema")
    from catalog_api.db import schema
    schema.create_tables()
