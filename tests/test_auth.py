from jose import jwt

from catalog_api.core.config import token_config

from conftest import API, auth


def _signup(client, headers=None, **overrides):
    payload = {"username": "alice", "email": "alice@example.com", "password": "wonderland"}
    payload.update(overrides)
    return client.post(f"{API}/auth/signup", json=payload, headers=headers or {})


def test_signup_defaults_to_auxiliar(client):
    r = _signup(client)
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["token_type"] == "bearer"
    assert body["expires_in"] == 86400
    assert body["user"]["role"] == "auxiliar"
    assert "password" not in body["user"]
    assert "hashed_password" not in body["user"]


def test_signup_accepts_role_as_single_value_or_list(client, admin):
    r = _signup(client, headers=auth(admin), role="coordinador")
    assert r.status_code == 201, r.text
    assert r.json()["user"]["role"] == "coordinador"

    r = _signup(
        client,
        headers=auth(admin),
        username="bob",
        email="bob@example.com",
        role=["coordinador"],
    )
    assert r.status_code == 201, r.text
    assert r.json()["user"]["role"] == "coordinador"


def test_signup_rejects_more_than_one_role(client, admin):
    r = _signup(client, headers=auth(admin), role=["admin", "auxiliar"])
    assert r.status_code == 422, r.text


def test_elevated_signup_requires_admin(client, coordinador):
    assert _signup(client, role="admin").status_code == 403
    r = _signup(client, headers=auth(coordinador), role="coordinador")
    assert r.status_code == 403, r.text
    assert r.json()["required_roles"] == ["admin"]


def test_signup_duplicates(client):
    assert _signup(client).status_code == 201
    r = _signup(client, email="other@example.com")
    assert r.status_code == 409, r.text
    r = _signup(client, username="alice2", email="ALICE@example.com")
    assert r.status_code == 409, r.text


def test_signin_by_username_and_email(client):
    _signup(client)
    for key in ({"username": "alice"}, {"email": "alice@example.com"}):
        r = client.post(f"{API}/auth/signin", json={**key, "password": "wonderland"})
        assert r.status_code == 200, r.text
        claims = jwt.decode(
            r.json()["access_token"], token_config.secret, algorithms=[token_config.algorithm]
        )
        assert claims["role"] == "auxiliar"
        assert claims["email"] == "alice@example.com"


def test_signin_failures_are_indistinguishable(client):
    _signup(client)
    wrong_password = client.post(
        f"{API}/auth/signin", json={"username": "alice", "password": "nope"}
    )
    unknown_user = client.post(
        f"{API}/auth/signin", json={"username": "nobody", "password": "nope"}
    )
    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()


def test_signin_requires_a_login_key(client):
    r = client.post(f"{API}/auth/signin", json={"password": "whatever"})
    assert r.status_code == 400, r.text


def test_inactive_account_cannot_sign_in(client, admin, auxiliar):
    r = client.delete(f"{API}/users/{auxiliar.id}", headers=auth(admin))
    assert r.status_code == 200, r.text
    r = client.post(f"{API}/auth/signin", json={"username": "helper", "password": "secret123"})
    assert r.status_code == 401, r.text


def test_me_returns_live_profile(client, admin, auxiliar):
    r = client.get(f"{API}/auth/me", headers=auth(auxiliar))
    assert r.status_code == 200, r.text
    assert r.json()["username"] == "helper"

    client.delete(f"{API}/users/{auxiliar.id}?hardDelete=true", headers=auth(admin))
    r = client.get(f"{API}/auth/me", headers=auth(auxiliar))
    assert r.status_code == 404, r.text


def test_end_to_end_auxiliar_cannot_deactivate_category(client, catalog):
    r = _signup(client)
    assert r.status_code == 201, r.text

    r = client.post(f"{API}/auth/signin", json={"username": "alice", "password": "wonderland"})
    assert r.status_code == 200, r.text
    token = r.json()["access_token"]
    claims = jwt.decode(token, token_config.secret, algorithms=[token_config.algorithm])
    assert claims["role"] == "auxiliar"

    r = client.delete(
        f"{API}/categories/{catalog['Tools']}",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert r.status_code == 403, r.text
    r = client.get(f"{API}/categories/{catalog['Tools']}")
    assert r.json()["is_active"] is True


def test_signup_ignores_stale_token(client):
    stale = {"Authorization": "Bearer not.a.valid.token"}
    r = _signup(client, headers=stale)
    assert r.status_code == 201, r.text
    assert r.json()["user"]["role"] == "auxiliar"

    r = _signup(
        client, headers=stale, username="bob", email="bob@example.com", role="admin"
    )
    assert r.status_code == 403, r.text
