"""
SQL DDL statements for all application tables.

Catalog levels reference each other by id only: there are no foreign-key
constraints between categories, subcategories and products. Parent/child
consistency is maintained by the service layer (referential checks on write,
cascades on deactivate/delete).
"""
from catalog_api.db.database import get_connection

# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

CREATE_USERS_TABLE = """
CREATE TABLE IF NOT EXISTS users (
    id                INTEGER PRIMARY KEY AUTOINCREMENT,
    username          TEXT    NOT NULL UNIQUE,
    email             TEXT    NOT NULL UNIQUE COLLATE NOCASE,
    hashed_password   TEXT    NOT NULL,
    role              TEXT    NOT NULL DEFAULT 'auxiliar'
                              CHECK(role IN ('admin', 'coordinador', 'auxiliar')),
    is_active         INTEGER NOT NULL DEFAULT 1,
    created_at        TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at        TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_CATEGORIES_TABLE = """
CREATE TABLE IF NOT EXISTS categories (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT    NOT NULL UNIQUE,
    description TEXT    NOT NULL,
    is_active   INTEGER NOT NULL DEFAULT 1,
    created_at  TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at  TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_SUBCATEGORIES_TABLE = """
CREATE TABLE IF NOT EXISTS subcategories (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    name        TEXT    NOT NULL UNIQUE,
    description TEXT    NOT NULL,
    category_id INTEGER NOT NULL,
    is_active   INTEGER NOT NULL DEFAULT 1,
    created_at  TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at  TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

CREATE_PRODUCTS_TABLE = """
CREATE TABLE IF NOT EXISTS products (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    name            TEXT    NOT NULL UNIQUE,
    description     TEXT    NOT NULL,
    price           REAL    NOT NULL CHECK(price >= 0),
    stock           INTEGER NOT NULL CHECK(stock >= 0),
    category_id     INTEGER NOT NULL,
    subcategory_id  INTEGER NOT NULL,
    created_by      INTEGER,
    images          TEXT,
    is_active       INTEGER NOT NULL DEFAULT 1,
    created_at      TEXT    NOT NULL DEFAULT (datetime('now')),
    updated_at      TEXT    NOT NULL DEFAULT (datetime('now'))
);
"""

INDEXES = [
    "CREATE INDEX IF NOT EXISTS ix_subcategories_category ON subcategories(category_id)",
    "CREATE INDEX IF NOT EXISTS ix_products_category ON products(category_id)",
    "CREATE INDEX IF NOT EXISTS ix_products_subcategory ON products(subcategory_id)",
]

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

ALL_TABLES = [
    CREATE_USERS_TABLE,
    CREATE_CATEGORIES_TABLE,
    CREATE_SUBCATEGORIES_TABLE,
    CREATE_PRODUCTS_TABLE,
]


def create_tables() -> None:
    """Create all tables and indexes (IF NOT EXISTS – safe on every restart)."""
    conn = get_connection()
    try:
        cursor = conn.cursor()
        for ddl in ALL_TABLES:
            cursor.execute(ddl)
        for ddl in INDEXES:
            cursor.execute(ddl)
        conn.commit()
    finally:
        conn.close()
