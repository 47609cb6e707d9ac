from apps.storefront.core.auth import (
    MSG_BAD_CREDENTIALS,
    MSG_EMAIL_TAKEN,
    MSG_INVALID_UPDATE,
    MSG_REQUIRED_FIELDS,
    MSG_UNAUTHORIZED,
    MSG_UPDATES_REQUIRED,
    MSG_USER_NOT_FOUND,
)
from apps.storefront.core.rate_limit import MSG_TOO_MANY_REQUESTS
from apps.storefront.main import app
from apps.storefront.routers.auth import get_auth_service

NEW_USER = {
    "firstName": "Lejla",
    "lastName": "Begić",
    "email": "Lejla@Example.ba",
    "password": "medeni123",
}


def _register(client, **overrides):
    return client.post("/auth/register", json={**NEW_USER, **overrides})


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


def test_register(client):
    r = _register(client)
    assert r.status_code == 201
    body = r.json()
    assert body["success"] is True
    assert body["token"]
    assert body["user"]["email"] == "lejla@example.ba"
    assert body["user"]["firstName"] == "Lejla"
    assert "password" not in body["user"]
    assert "phone" not in body["user"]


def test_register_missing_fields(client):
    r = client.post("/auth/register", json={"email": "a@example.ba"})
    assert r.status_code == 400
    assert r.json() == {"success": False, "error": MSG_REQUIRED_FIELDS}


def test_register_duplicate_email_any_case(client):
    _register(client)
    r = _register(client, email="LEJLA@example.BA")
    assert r.status_code == 400
    assert r.json()["error"] == MSG_EMAIL_TAKEN


def test_login(client):
    registered = _register(client).json()
    r = client.post("/auth/login", json={"email": "lejla@example.ba", "password": "medeni123"})
    assert r.status_code == 200
    assert r.json()["user"]["id"] == registered["user"]["id"]


def test_login_failures_look_the_same(client):
    _register(client)
    unknown = client.post("/auth/login", json={"email": "niko@example.ba", "password": "medeni123"})
    wrong = client.post("/auth/login", json={"email": "lejla@example.ba", "password": "pogresna"})
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json() == {"success": False, "error": MSG_BAD_CREDENTIALS}


def test_login_missing_fields(client):
    r = client.post("/auth/login", json={"email": "lejla@example.ba"})
    assert r.status_code == 400


def test_rate_limit_per_client_ip(client):
    for _ in range(5):
        client.post("/auth/login", json={"email": "niko@example.ba", "password": "x"})
    r = client.post("/auth/login", json={"email": "niko@example.ba", "password": "x"})
    assert r.status_code == 429
    assert r.json() == {"success": False, "error": MSG_TOO_MANY_REQUESTS}
    assert 0 < int(r.headers["Retry-After"]) <= 900

    # Register shares the same bucket.
    assert _register(client).status_code == 429

    other = client.post(
        "/auth/login",
        json={"email": "niko@example.ba", "password": "x"},
        headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"},
    )
    assert other.status_code == 401


def test_current_user(client):
    token = _register(client).json()["token"]
    r = client.get("/auth/user", headers=_auth(token))
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "lejla@example.ba"


def test_current_user_requires_valid_token(client):
    for headers in ({}, _auth("not-a-token")):
        r = client.get("/auth/user", headers=headers)
        assert r.status_code == 401
        assert r.json() == {"success": False, "error": MSG_UNAUTHORIZED}


def test_current_user_deleted(client, user_store):
    token = _register(client).json()["token"]
    user_store.write({"users": [], "passwords": {}})
    r = client.get("/auth/user", headers=_auth(token))
    assert r.status_code == 404
    assert r.json()["error"] == MSG_USER_NOT_FOUND


def test_update_user_ignores_email(client):
    token = _register(client).json()["token"]
    r = client.put(
        "/auth/user",
        json={"firstName": "Lejla-Ana", "phone": "061 555 000", "email": "novi@example.ba"},
        headers=_auth(token),
    )
    assert r.status_code == 200
    user = r.json()["user"]
    assert user["firstName"] == "Lejla-Ana"
    assert user["phone"] == "061 555 000"
    assert user["email"] == "lejla@example.ba"

    login = client.post("/auth/login", json={"email": "lejla@example.ba", "password": "medeni123"})
    assert login.json()["user"]["firstName"] == "Lejla-Ana"


def test_update_user_errors(client):
    assert client.put("/auth/user", json={"firstName": "X"}).status_code == 401
    token = _register(client).json()["token"]
    r = client.put("/auth/user", json={}, headers=_auth(token))
    assert r.status_code == 400
    assert r.json()["error"] == MSG_UPDATES_REQUIRED


def test_unexpected_failure_returns_generic_message(client):
    class BrokenService:
        def register(self, *args, **kwargs):
            raise RuntimeError("disk on fire")

        def login(self, *args, **kwargs):
            raise RuntimeError("disk on fire")

    app.dependency_overrides[get_auth_service] = BrokenService
    try:
        r = _register(client)
        assert r.status_code == 500
        assert r.json() == {"success": False, "error": "Greška pri registraciji"}
        r = client.post("/auth/login", json={"email": "a@example.ba", "password": "x"})
        assert r.json() == {"success": False, "error": "Greška pri prijavljivanju"}
    finally:
        app.dependency_overrides.pop(get_auth_service, None)


def test_rejected_update_leaves_account_usable(client, user_store):
    token = _register(client).json()["token"]
    for updates in ({"firstName": None}, {"lastName": ["Begić"]}, {"phone": {"mobile": "061"}}):
        r = client.put("/auth/user", json=updates, headers=_auth(token))
        assert r.status_code == 400
        assert r.json() == {"success": False, "error": MSG_INVALID_UPDATE}

    assert user_store.read()["users"][0]["firstName"] == "Lejla"
    assert client.get("/auth/user", headers=_auth(token)).status_code == 200
    login = client.post("/auth/login", json={"email": "lejla@example.ba", "password": "medeni123"})
    assert login.status_code == 200


def test_update_never_stores_credentials(client, user_store):
    token = _register(client).json()["token"]
    r = client.put(
        "/auth/user",
        json={"password": "plain-secret", "passwords": {"x": "y"}, "city": "Tuzla"},
        headers=_auth(token),
    )
    assert r.status_code == 200
    user = r.json()["user"]
    assert "password" not in user
    assert "passwords" not in user
    assert user["city"] == "Tuzla"

    data = user_store.read()
    assert "password" not in data["users"][0]
    assert "passwords" not in data["users"][0]
    assert data["passwords"]["lejla@example.ba"] != "plain-secret"

    old = client.post("/auth/login", json={"email": "lejla@example.ba", "password": "medeni123"})
    assert old.status_code == 200
    new = client.post("/auth/login", json={"email": "lejla@example.ba", "password": "plain-secret"})
    assert new.status_code == 401
