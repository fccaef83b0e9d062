from conftest import API, auth


def test_categories_are_public_to_read(client, catalog):
    r = client.get(f"{API}/categories")
    assert r.status_code == 200, r.text
    assert {c["name"] for c in r.json()} == {"Tools", "Garden"}
    assert client.get(f"{API}/categories/{catalog['Tools']}").status_code == 200


def test_editors_manage_categories(client, coordinador, auxiliar):
    payload = {"name": "Kitchen", "description": "Pots and pans"}
    assert client.post(f"{API}/categories", json=payload, headers=auth(auxiliar)).status_code == 403
    r = client.post(f"{API}/categories", json=payload, headers=auth(coordinador))
    assert r.status_code == 201, r.text

    r = client.put(
        f"{API}/categories/{r.json()['id']}",
        json={"description": "Cookware"},
        headers=auth(coordinador),
    )
    assert r.status_code == 200, r.text
    assert r.json()["description"] == "Cookware"


def test_duplicate_category_name(client, admin, catalog):
    r = client.post(
        f"{API}/categories", json={"name": "Tools", "description": "Again"}, headers=auth(admin)
    )
    assert r.status_code == 409, r.text
    r = client.put(
        f"{API}/categories/{catalog['Garden']}", json={"name": "Tools"}, headers=auth(admin)
    )
    assert r.status_code == 409, r.text


def test_subcategory_requires_existing_category(client, admin):
    r = client.post(
        f"{API}/subcategories",
        json={"name": "Orphans", "description": "None", "category_id": 31337},
        headers=auth(admin),
    )
    assert r.status_code == 404, r.text


def test_subcategory_filter_and_move(client, admin, catalog):
    r = client.get(f"{API}/subcategories?category_id={catalog['Tools']}")
    assert {s["name"] for s in r.json()} == {"Hand Tools", "Power Tools"}

    r = client.put(
        f"{API}/subcategories/{catalog['Power Tools']}",
        json={"category_id": 31337},
        headers=auth(admin),
    )
    assert r.status_code == 404, r.text
    r = client.put(
        f"{API}/subcategories/{catalog['Power Tools']}",
        json={"category_id": catalog["Garden"]},
        headers=auth(admin),
    )
    assert r.status_code == 200, r.text
    assert r.json()["category_id"] == catalog["Garden"]

    # Products follow their subcategory to the new category.
    drill = client.get(f"{API}/products/{catalog['Drill']}").json()
    assert drill["category_id"] == catalog["Garden"]
    assert drill["subcategory_id"] == catalog["Power Tools"]
    hammer = client.get(f"{API}/products/{catalog['Hammer']}").json()
    assert hammer["category_id"] == catalog["Tools"]

    r = client.delete(f"{API}/categories/{catalog['Garden']}", headers=auth(admin))
    assert r.status_code == 200, r.text
    assert r.json()["products_affected"] == 2
    assert client.get(f"{API}/subcategories/{catalog['Power Tools']}").json()["is_active"] is False
    assert client.get(f"{API}/products/{catalog['Drill']}").json()["is_active"] is False
    assert client.get(f"{API}/products/{catalog['Hammer']}").json()["is_active"] is True


def test_failed_subcategory_move_leaves_products_alone(client, admin, catalog):
    r = client.put(
        f"{API}/subcategories/{catalog['Power Tools']}",
        json={"category_id": catalog["Garden"], "name": "Hand Tools"},
        headers=auth(admin),
    )
    assert r.status_code == 409, r.text
    assert client.get(f"{API}/products/{catalog['Drill']}").json()["category_id"] == catalog["Tools"]


def test_statistics(client, auxiliar, catalog):
    r = client.get(f"{API}/statistics", headers=auth(auxiliar))
    assert r.status_code == 200, r.text
    # auxiliar + the admin who built the catalog
    assert r.json() == {
        "total_users": 2,
        "total_products": 4,
        "total_categories": 2,
        "total_subcategories": 3,
    }
