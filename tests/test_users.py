from catalog_api.models.user import UserRole

from conftest import API, auth


def test_auxiliar_sees_only_itself(client, admin, coordinador, auxiliar):
    r = client.get(f"{API}/users", headers=auth(auxiliar))
    assert r.status_code == 200, r.text
    assert [u["id"] for u in r.json()] == [auxiliar.id]

    assert client.get(f"{API}/users/{auxiliar.id}", headers=auth(auxiliar)).status_code == 200
    r = client.get(f"{API}/users/{coordinador.id}", headers=auth(auxiliar))
    assert r.status_code == 403, r.text


def test_auxiliar_cannot_probe_missing_ids(client, auxiliar):
    r = client.get(f"{API}/users/999999", headers=auth(auxiliar))
    assert r.status_code == 403, r.text


def test_coordinador_never_sees_admins(client, admin, coordinador, auxiliar):
    r = client.get(f"{API}/users", headers=auth(coordinador))
    assert r.status_code == 200, r.text
    ids = {u["id"] for u in r.json()}
    assert admin.id not in ids
    assert {coordinador.id, auxiliar.id} <= ids

    assert client.get(f"{API}/users/{admin.id}", headers=auth(coordinador)).status_code == 403
    assert client.get(f"{API}/users/{auxiliar.id}", headers=auth(coordinador)).status_code == 200
    r = client.put(
        f"{API}/users/{admin.id}", json={"username": "hijack"}, headers=auth(coordinador)
    )
    assert r.status_code == 403, r.text


def test_admin_lists_everyone(client, admin, coordinador, auxiliar):
    r = client.get(f"{API}/users", headers=auth(admin))
    assert {u["id"] for u in r.json()} == {admin.id, coordinador.id, auxiliar.id}


def test_auxiliar_updates_own_profile_but_not_role(client, auxiliar):
    r = client.put(
        f"{API}/users/{auxiliar.id}", json={"username": "helper2"}, headers=auth(auxiliar)
    )
    assert r.status_code == 200, r.text
    assert r.json()["username"] == "helper2"

    r = client.put(f"{API}/users/{auxiliar.id}", json={"role": "admin"}, headers=auth(auxiliar))
    assert r.status_code == 403, r.text


def test_password_change_is_rehashed(client, auxiliar):
    r = client.put(
        f"{API}/users/{auxiliar.id}", json={"password": "brandnew"}, headers=auth(auxiliar)
    )
    assert r.status_code == 200, r.text
    r = client.post(f"{API}/auth/signin", json={"username": "helper", "password": "brandnew"})
    assert r.status_code == 200, r.text


def test_admin_creates_user_with_any_role(client, admin):
    r = client.post(
        f"{API}/users",
        json={"username": "second", "email": "second@example.com", "password": "password", "role": "admin"},
        headers=auth(admin),
    )
    assert r.status_code == 201, r.text
    assert r.json()["role"] == "admin"


def test_only_admin_removes_users(client, coordinador, auxiliar):
    r = client.delete(f"{API}/users/{auxiliar.id}", headers=auth(coordinador))
    assert r.status_code == 403, r.text
    assert r.json()["required_roles"] == ["admin"]


def test_admin_self_protection(client, admin, coordinador, make_user):
    other_admin = make_user("other_admin", UserRole.ADMIN)

    r = client.delete(f"{API}/users/{other_admin.id}?hardDelete=true", headers=auth(admin))
    assert r.status_code == 403, r.text
    r = client.delete(f"{API}/users/{other_admin.id}", headers=auth(admin))
    assert r.status_code == 403, r.text

    r = client.delete(f"{API}/users/{coordinador.id}?hardDelete=true", headers=auth(admin))
    assert r.status_code == 200, r.text
    assert client.get(f"{API}/users/{coordinador.id}", headers=auth(admin)).status_code == 404

    r = client.delete(f"{API}/users/{admin.id}?hardDelete=true", headers=auth(admin))
    assert r.status_code == 200, r.text


def test_deactivate_and_reactivate_user(client, admin, auxiliar):
    r = client.delete(f"{API}/users/{auxiliar.id}", headers=auth(admin))
    assert r.status_code == 200, r.text
    assert r.json()["is_active"] is False

    active = client.get(f"{API}/users", headers=auth(admin)).json()
    assert auxiliar.id not in {u["id"] for u in active}
    everyone = client.get(f"{API}/users?includeInactive=true", headers=auth(admin)).json()
    assert auxiliar.id in {u["id"] for u in everyone}

    r = client.patch(f"{API}/users/{auxiliar.id}/reactivate", headers=auth(admin))
    assert r.status_code == 200, r.text
    assert r.json()["is_active"] is True


def test_missing_user_is_404_for_admin(client, admin):
    assert client.get(f"{API}/users/424242", headers=auth(admin)).status_code == 404
    assert client.delete(f"{API}/users/424242", headers=auth(admin)).status_code == 404


def test_admin_cannot_demote_another_admin(client, admin, make_user):
    other_admin = make_user("other_admin", UserRole.ADMIN)

    r = client.put(
        f"{API}/users/{other_admin.id}", json={"role": "auxiliar"}, headers=auth(admin)
    )
    assert r.status_code == 403, r.text
    r = client.delete(f"{API}/users/{other_admin.id}?hardDelete=true", headers=auth(admin))
    assert r.status_code == 403, r.text
    assert client.get(f"{API}/users/{other_admin.id}", headers=auth(admin)).json()["role"] == "admin"


def test_admin_changes_roles_of_non_admins_and_itself(client, admin, coordinador):
    r = client.put(
        f"{API}/users/{coordinador.id}", json={"role": "auxiliar"}, headers=auth(admin)
    )
    assert r.status_code == 200, r.text
    assert r.json()["role"] == "auxiliar"

    r = client.put(f"{API}/users/{admin.id}", json={"role": "coordinador"}, headers=auth(admin))
    assert r.status_code == 200, r.text
