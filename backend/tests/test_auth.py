# backend/tests/test_auth.py
from conftest import PASSWORD


def test_register_login_and_me(anon_client):
    resp = anon_client.post("/api/users/register", json={
        "email": "Shop@Example.com", "password": PASSWORD, "firstName": "Asha",
    })
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["email"] == "shop@example.com"
    assert "password" not in body["data"] and "passwordHash" not in body["data"]

    resp = anon_client.post("/api/users/login", json={"email": "shop@example.com", "password": PASSWORD})
    assert resp.status_code == 200
    token = resp.json()["data"]["accessToken"]
    assert resp.json()["data"]["tokenType"] == "bearer"

    resp = anon_client.get("/api/users/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.json()["data"]["firstName"] == "Asha"


def test_register_duplicate_email(anon_client):
    payload = {"email": "dup@example.com", "password": PASSWORD}
    assert anon_client.post("/api/users/register", json=payload).status_code == 201
    resp = anon_client.post("/api/users/register", json=payload)
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Email already registered"}


def test_login_wrong_password(anon_client):
    anon_client.post("/api/users/register", json={"email": "a@example.com", "password": PASSWORD})
    resp = anon_client.post("/api/users/login", json={"email": "a@example.com", "password": "nope"})
    assert resp.status_code == 401
    assert resp.json()["success"] is False


def test_ledger_routes_require_token(anon_client):
    for path in ("/api/categories", "/api/products", "/api/parties", "/api/purchases", "/api/sales"):
        resp = anon_client.get(path)
        assert resp.status_code == 401, path
        assert resp.json()["message"] == "Could not validate credentials"


def test_garbage_token_rejected(anon_client):
    resp = anon_client.get("/api/categories", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
