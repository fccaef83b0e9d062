"""
Shared fixtures: a throw-away SQLite database, a TestClient, users of every
role with their tokens, and a small seeded catalog.

The environment is set before the application is imported because settings
and the database path are resolved at import time.
"""
import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="catalog_api_tests_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_FILE_PATH"] = ""
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["SEED_ADMIN"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from catalog_api.main import app  # noqa: E402
from catalog_api.core.config import token_config  # noqa: E402
from catalog_api.core.security import PasswordHasher, create_access_token  # noqa: E402
from catalog_api.db.database import get_connection  # noqa: E402
from catalog_api.models.user import UserRole  # noqa: E402
from catalog_api.repositories.user_repository import UserRepository  # noqa: E402

API = "/api/v1"
DEFAULT_PASSWORD = "secret123"


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture(autouse=True)
def _clean_db(client):
    conn = get_connection()
    try:
        for table in ("products", "subcategories", "categories", "users"):
            conn.execute(f"DELETE FROM {table}")
        conn.commit()
    finally:
        conn.close()
    yield


@pytest.fixture
def db_conn():
    conn = get_connection()
    try:
        yield conn
    finally:
        conn.rollback()
        conn.close()


# ---------------------------------------------------------------------------
# Users and tokens
# ---------------------------------------------------------------------------

@pytest.fixture
def make_user():
    hasher = PasswordHasher(token_config)

    def _make(username: str, role: UserRole = UserRole.AUXILIAR, password: str = DEFAULT_PASSWORD):
        conn = get_connection()
        try:
            user = UserRepository(conn).create(
                username=username,
                email=f"{username}@example.com",
                hashed_password=hasher.hash(password),
                role=role,
            )
            conn.commit()
            return user
        finally:
            conn.close()
    return _make


def token_for(user) -> str:
    return create_access_token(token_config, user.id, user.role.value, user.email)


def auth(user) -> dict:
    return {"Authorization": f"Bearer {token_for(user)}"}


@pytest.fixture
def admin(make_user):
    return make_user("root", UserRole.ADMIN)


@pytest.fixture
def coordinador(make_user):
    return make_user("coord", UserRole.COORDINADOR)


@pytest.fixture
def auxiliar(make_user):
    return make_user("helper", UserRole.AUXILIAR)


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

@pytest.fixture
def catalog(client, admin):
    """
    Two categories:
      Tools    -> Hand Tools (Hammer, Wrench), Power Tools (Drill)
      Garden   -> Seeds (Tomato Seeds)
    Returns a dict of ids keyed by name.
    """
    headers = auth(admin)
    ids = {}

    def post(path, payload):
        r = client.post(f"{API}{path}", json=payload, headers=headers)
        assert r.status_code == 201, r.text
        ids[payload["name"]] = r.json()["id"]
        return r.json()["id"]

    tools = post("/categories", {"name": "Tools", "description": "Things that fix things"})
    garden = post("/categories", {"name": "Garden", "description": "Outdoor supplies"})
    hand = post("/subcategories", {"name": "Hand Tools", "description": "Manual", "category_id": tools})
    power = post("/subcategories", {"name": "Power Tools", "description": "Electric", "category_id": tools})
    seeds = post("/subcategories", {"name": "Seeds", "description": "Seeds", "category_id": garden})
    for name, category_id, subcategory_id in (
        ("Hammer", tools, hand),
        ("Wrench", tools, hand),
        ("Drill", tools, power),
        ("Tomato Seeds", garden, seeds),
    ):
        post(
            "/products",
            {
                "name": name,
                "description": f"{name} for testing",
                "price": 10,
                "stock": 5,
                "category_id": category_id,
                "subcategory_id": subcategory_id,
            },
        )
    return ids
