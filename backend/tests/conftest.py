# backend/tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - the app runs against a fresh in-memory SQLite database per test
# - get_db is overridden, so routes and fixtures share that database
# - `client` is authenticated as owner@example.com
# - factories create records through the API, like a real caller would
# ---------------------------------------------------------------------
import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db, enable_sqlite_foreign_keys
from main import app

OWNER_EMAIL = "owner@example.com"
OTHER_EMAIL = "other@example.com"
PASSWORD = "s3cret-pass"


# ---------- Database ----------
@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    yield db
    db.close()


# ---------- HTTP ----------
@pytest.fixture()
def anon_client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def auth_headers(client: TestClient, email: str) -> dict:
    client.post("/api/users/register", json={"email": email, "password": PASSWORD, "firstName": "Test"})
    resp = client.post("/api/users/login", json={"email": email, "password": PASSWORD})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['data']['accessToken']}"}


@pytest.fixture()
def client(anon_client):
    anon_client.headers.update(auth_headers(anon_client, OWNER_EMAIL))
    return anon_client


@pytest.fixture()
def other_headers(client):
    return auth_headers(client, OTHER_EMAIL)


# ---------- Factories ----------
@pytest.fixture()
def make_category(client):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        payload = {"name": f"Category {counter['n']}", **overrides}
        resp = client.post("/api/categories", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    return _make


@pytest.fixture()
def make_product(client, make_category):
    def _make(**overrides):
        if "category" not in overrides and "categoryId" not in overrides:
            overrides["categoryId"] = make_category()["id"]
        payload = {"name": "Widget", "purchasePrice": 60, "salePrice": 100, **overrides}
        resp = client.post("/api/products", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    return _make


@pytest.fixture()
def make_party(client):
    def _make(**overrides):
        payload = {"name": "Acme Traders", "type": "both", **overrides}
        resp = client.post("/api/parties", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    return _make


@pytest.fixture()
def stock_of(client):
    def _stock(product_id):
        return client.get(f"/api/products/{product_id}").json()["data"]["currentStock"]

    return _stock


@pytest.fixture()
def make_purchase(client, make_party):
    def _make(items, party_id=None, **overrides):
        if party_id is None:
            party_id = make_party(type="supplier")["id"]
        payload = {"partyId": party_id, "items": items, **overrides}
        resp = client.post("/api/purchases", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    return _make
