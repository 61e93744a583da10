# backend/tests/test_products.py


def test_create_defaults(client, make_category):
    cat = make_category(name="Tools")
    resp = client.post("/api/products", json={
        "name": "Hammer", "category": cat["id"], "purchasePrice": 60, "salePrice": 100, "sku": " ham-01 ",
    })
    assert resp.status_code == 201
    p = resp.json()["data"]
    assert p["currentStock"] == 0
    assert p["minStockLevel"] == 10
    assert p["unit"] == "pcs"
    assert p["taxRate"] == 0
    assert p["sku"] == "HAM-01"
    assert p["categoryName"] == "Tools"
    assert p["isLowStock"] is True


def test_stock_ignored_on_create(client, make_category):
    cat = make_category()
    resp = client.post("/api/products", json={
        "name": "Nails", "categoryId": cat["id"], "purchasePrice": 1, "salePrice": 2, "currentStock": 500,
    })
    assert resp.status_code == 201
    assert resp.json()["data"]["currentStock"] == 0


def test_validation_errors(client, make_category):
    cat = make_category()
    base = {"name": "Saw", "categoryId": cat["id"], "purchasePrice": 10, "salePrice": 20}

    for broken in (
        {k: v for k, v in base.items() if k != "name"},
        {k: v for k, v in base.items() if k != "categoryId"},
        {**base, "purchasePrice": -1},
        {**base, "taxRate": 101},
        {**base, "unit": "barrel"},
    ):
        resp = client.post("/api/products", json=broken)
        assert resp.status_code == 400, broken
        assert resp.json()["success"] is False


def test_unknown_category(client):
    resp = client.post("/api/products", json={"name": "X", "categoryId": 999, "purchasePrice": 1, "salePrice": 1})
    assert resp.status_code == 404
    assert resp.json()["message"] == "Category not found"


def test_duplicate_sku(client, make_product):
    make_product(sku="SKU-1")
    cat_id = make_product(sku="SKU-2")["categoryId"]
    resp = client.post("/api/products", json={
        "name": "Dup", "categoryId": cat_id, "purchasePrice": 1, "salePrice": 1, "sku": "sku-1",
    })
    assert resp.status_code == 400


def test_list_filters(client, make_category, make_product):
    cat = make_category()
    stocked = make_product(name="Stocked Bolt", categoryId=cat["id"], minStockLevel=5)
    make_product(name="Retired Nut", isActive=False)
    client.patch(f"/api/products/{stocked['id']}/stock", json={"quantity": 20, "type": "add"})

    resp = client.get("/api/products", params={"category": cat["id"]})
    assert [p["name"] for p in resp.json()["data"]] == ["Stocked Bolt"]

    resp = client.get("/api/products", params={"isActive": "false"})
    assert [p["name"] for p in resp.json()["data"]] == ["Retired Nut"]

    resp = client.get("/api/products", params={"search": "BOLT"})
    assert resp.json()["count"] == 1

    resp = client.get("/api/products", params={"lowStock": "true"})
    assert [p["name"] for p in resp.json()["data"]] == ["Retired Nut"]


def test_update_cannot_touch_stock(client, make_product):
    product = make_product()
    client.patch(f"/api/products/{product['id']}/stock", json={"quantity": 7, "type": "add"})

    resp = client.put(f"/api/products/{product['id']}", json={"salePrice": 120, "currentStock": 999})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["salePrice"] == 120
    assert data["currentStock"] == 7


def test_stock_adjustment(client, make_product, stock_of):
    product = make_product()
    pid = product["id"]

    resp = client.patch(f"/api/products/{pid}/stock", json={"quantity": 10, "type": "add", "reason": "Count"})
    assert resp.status_code == 200
    assert resp.json()["data"]["currentStock"] == 10

    resp = client.patch(f"/api/products/{pid}/stock", json={"quantity": 4, "type": "subtract"})
    assert resp.status_code == 200
    assert stock_of(pid) == 6

    resp = client.patch(f"/api/products/{pid}/stock", json={"quantity": 7, "type": "subtract"})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Insufficient stock for 'Widget'. Available: 6"
    assert stock_of(pid) == 6

    assert client.patch(f"/api/products/{pid}/stock", json={"quantity": 0, "type": "add"}).status_code == 400
    assert client.patch(f"/api/products/{pid}/stock", json={"quantity": 1, "type": "double"}).status_code == 400

    movements = client.get("/api/stock-movements", params={"product": pid}).json()["data"]
    assert [m["qty"] for m in movements] == [-4, 10]
    assert all(m["type"] == "ADJUSTMENT" for m in movements)
    assert movements[0]["balanceAfter"] == 6


def test_delete(client, make_product):
    product = make_product()
    resp = client.delete(f"/api/products/{product['id']}")
    assert resp.status_code == 200
    assert client.get(f"/api/products/{product['id']}").status_code == 404


def test_delete_used_product_rejected(client, make_product, make_purchase):
    product = make_product()
    make_purchase([{"productId": product["id"], "quantity": 1}])
    resp = client.delete(f"/api/products/{product['id']}")
    assert resp.status_code == 400
