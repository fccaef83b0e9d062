from decimal import Decimal

from catalog_api.db.database import get_connection
from catalog_api.models.identity import Identity
from catalog_api.models.user import UserRole
from catalog_api.repositories.product_repository import ProductRepository
from catalog_api.schemas.product import ProductCreate
from catalog_api.services.product_service import ProductService

from conftest import API, auth


def _payload(**overrides):
    payload = {
        "name": "Saw",
        "description": "Cuts wood",
        "price": "12.50",
        "stock": 3,
    }
    payload.update(overrides)
    return payload


def _product_count():
    conn = get_connection()
    try:
        return conn.execute("SELECT COUNT(*) FROM products").fetchone()[0]
    finally:
        conn.close()


def test_any_role_creates_products(client, auxiliar, catalog):
    r = client.post(
        f"{API}/products",
        json=_payload(category_id=catalog["Tools"], subcategory_id=catalog["Hand Tools"]),
        headers=auth(auxiliar),
    )
    assert r.status_code == 201, r.text
    assert Decimal(r.json()["price"]) == Decimal("12.50")


def test_created_by_comes_from_token_and_is_hidden_from_auxiliares(
    client, admin, coordinador, auxiliar, catalog
):
    r = client.post(
        f"{API}/products",
        json=_payload(category_id=catalog["Tools"], subcategory_id=catalog["Hand Tools"]),
        headers=auth(coordinador),
    )
    product_id = r.json()["id"]
    assert r.json()["created_by"] == coordinador.id

    assert client.get(f"{API}/products/{product_id}", headers=auth(admin)).json()["created_by"] == coordinador.id
    assert client.get(f"{API}/products/{product_id}", headers=auth(auxiliar)).json()["created_by"] is None
    listed = client.get(f"{API}/products", headers=auth(auxiliar)).json()
    assert all(p["created_by"] is None for p in listed)


def test_mismatched_subcategory_writes_nothing(client, admin, catalog):
    before = _product_count()
    r = client.post(
        f"{API}/products",
        json=_payload(category_id=catalog["Garden"], subcategory_id=catalog["Hand Tools"]),
        headers=auth(admin),
    )
    assert r.status_code == 422, r.text
    assert r.json()["detail"] == "Subcategory does not belong to the specified category"
    assert _product_count() == before


def test_missing_parents_are_not_found(client, admin, catalog):
    r = client.post(
        f"{API}/products",
        json=_payload(category_id=55555, subcategory_id=catalog["Hand Tools"]),
        headers=auth(admin),
    )
    assert r.status_code == 404, r.text
    r = client.post(
        f"{API}/products",
        json=_payload(category_id=catalog["Tools"], subcategory_id=55555),
        headers=auth(admin),
    )
    assert r.status_code == 404, r.text


def test_update_to_mismatched_subcategory_leaves_record_unchanged(client, admin, catalog):
    r = client.put(
        f"{API}/products/{catalog['Hammer']}",
        json={"subcategory_id": catalog["Seeds"], "price": 99},
        headers=auth(admin),
    )
    assert r.status_code == 422, r.text
    product = client.get(f"{API}/products/{catalog['Hammer']}").json()
    assert product["subcategory_id"] == catalog["Hand Tools"]
    assert Decimal(product["price"]) == Decimal("10")


def test_update_moves_product_across_categories(client, coordinador, catalog):
    r = client.put(
        f"{API}/products/{catalog['Hammer']}",
        json={"category_id": catalog["Garden"], "subcategory_id": catalog["Seeds"]},
        headers=auth(coordinador),
    )
    assert r.status_code == 200, r.text
    assert r.json()["category_id"] == catalog["Garden"]


def test_auxiliar_cannot_update_products(client, auxiliar, catalog):
    r = client.put(
        f"{API}/products/{catalog['Hammer']}", json={"stock": 1}, headers=auth(auxiliar)
    )
    assert r.status_code == 403, r.text


def test_duplicate_product_name(client, admin, catalog):
    r = client.post(
        f"{API}/products",
        json=_payload(name="Hammer", category_id=catalog["Tools"], subcategory_id=catalog["Hand Tools"]),
        headers=auth(admin),
    )
    assert r.status_code == 409, r.text


def test_negative_price_is_rejected(client, admin, catalog):
    r = client.post(
        f"{API}/products",
        json=_payload(price=-1, category_id=catalog["Tools"], subcategory_id=catalog["Hand Tools"]),
        headers=auth(admin),
    )
    assert r.status_code == 422, r.text


def test_filter_products_by_subcategory(client, catalog):
    r = client.get(f"{API}/products?subcategory_id={catalog['Hand Tools']}")
    assert {p["name"] for p in r.json()} == {"Hammer", "Wrench"}


def test_end_to_end_deactivated_category_hides_products(client, admin):
    headers = auth(admin)
    tools = client.post(
        f"{API}/categories", json={"name": "Tools", "description": "Tools"}, headers=headers
    ).json()["id"]
    hand = client.post(
        f"{API}/subcategories",
        json={"name": "Hand Tools", "description": "Hand", "category_id": tools},
        headers=headers,
    ).json()["id"]
    r = client.post(
        f"{API}/products",
        json={
            "name": "Hammer",
            "description": "Hits nails",
            "price": 10,
            "stock": 5,
            "category_id": tools,
            "subcategory_id": hand,
        },
        headers=headers,
    )
    assert r.status_code == 201, r.text

    assert client.delete(f"{API}/categories/{tools}", headers=headers).status_code == 200

    assert "Hammer" not in {p["name"] for p in client.get(f"{API}/products").json()}
    listed = client.get(f"{API}/products?includeInactive=true").json()
    hammer = next(p for p in listed if p["name"] == "Hammer")
    assert hammer["is_active"] is False


def test_create_racing_subcategory_delete_leaves_orphan(catalog, admin, monkeypatch):
    """
    Catalog levels carry no foreign keys: a subcategory removed after the
    referential check but before the insert still lets the insert through.
    """
    subcategory_id = catalog["Hand Tools"]
    original_check = ProductService._check_parents

    def check_then_lose_race(self, category_id, sub_id):
        original_check(self, category_id, sub_id)
        self._subcategory_repo.delete(sub_id)

    monkeypatch.setattr(ProductService, "_check_parents", check_then_lose_race)

    conn = get_connection()
    try:
        product = ProductService(conn).create_product(
            ProductCreate(
                name="Orphan",
                description="Lost its parent",
                price=1,
                stock=1,
                category_id=catalog["Tools"],
                subcategory_id=subcategory_id,
            ),
            created_by=Identity(subject_id=admin.id, role=UserRole.ADMIN, email=admin.email),
        )
        conn.commit()
    finally:
        conn.close()

    conn = get_connection()
    try:
        assert conn.execute(
            "SELECT id FROM subcategories WHERE id = ?", (subcategory_id,)
        ).fetchone() is None
        row = conn.execute(
            "SELECT subcategory_id FROM products WHERE id = ?", (product.id,)
        ).fetchone()
        assert row["subcategory_id"] == subcategory_id
    finally:
        conn.close()


def test_update_rechecks_parents_even_when_unchanged(client, admin, catalog):
    conn = get_connection()
    try:
        stray = ProductRepository(conn).create(
            name="Stray",
            description="Filed under the wrong category",
            price=Decimal("3"),
            stock=2,
            category_id=catalog["Garden"],
            subcategory_id=catalog["Hand Tools"],
        )
        conn.commit()
    finally:
        conn.close()

    r = client.put(
        f"{API}/products/{stray.id}",
        json={"subcategory_id": catalog["Hand Tools"], "stock": 9},
        headers=auth(admin),
    )
    assert r.status_code == 422, r.text
    assert client.get(f"{API}/products/{stray.id}").json()["stock"] == 2

    r = client.put(f"{API}/products/{stray.id}", json={"stock": 9}, headers=auth(admin))
    assert r.status_code == 200, r.text
