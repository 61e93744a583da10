# backend/tests/test_errors.py
from fastapi.testclient import TestClient

from main import app


def test_root(anon_client):
    assert anon_client.get("/").json() == {"success": True, "message": "API is running"}


def test_unknown_record_is_404_envelope(client):
    for path in ("/api/categories/42", "/api/products/42", "/api/parties/42", "/api/purchases/42", "/api/sales/42"):
        resp = client.get(path)
        assert resp.status_code == 404, path
        assert resp.json()["success"] is False
        assert resp.json()["message"].endswith("not found")


def test_validation_error_is_400_envelope(client):
    resp = client.post("/api/products", json={"name": "No prices"})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert ":" in body["message"]


def test_malformed_json_is_400(client):
    resp = client.post("/api/categories", content="{not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_unexpected_error_is_500_envelope(client, monkeypatch):
    import routes.categories

    def explode(*args, **kwargs):
        raise RuntimeError("database on fire")

    monkeypatch.setattr(routes.categories, "get_owned", explode)
    with TestClient(app, raise_server_exceptions=False) as raw:
        resp = raw.get("/api/categories/1", headers={"Authorization": client.headers["Authorization"]})
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "Internal server error"}
