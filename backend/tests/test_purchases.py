# backend/tests/test_purchases.py
import pytest


@pytest.fixture()
def product(make_product):
    return make_product(name="Rice 5kg", purchasePrice=60, salePrice=100)


def test_purchase_adds_stock(client, product, make_purchase, stock_of):
    purchase = make_purchase([{"productId": product["id"], "quantity": 10}])

    assert purchase["invoiceNumber"] == "PUR-00001"
    assert purchase["subtotal"] == 600
    assert purchase["totalAmount"] == 600
    assert purchase["paymentStatus"] == "unpaid"
    assert purchase["balanceAmount"] == 600
    assert purchase["status"] == "confirmed"
    item = purchase["items"][0]
    assert item["productName"] == "Rice 5kg"
    assert item["unitPrice"] == 60
    assert stock_of(product["id"]) == 10

    movements = client.get("/api/stock-movements", params={"product": product["id"]}).json()["data"]
    assert len(movements) == 1
    assert movements[0]["type"] == "PURCHASE"
    assert movements[0]["referenceType"] == "purchase"
    assert movements[0]["referenceId"] == purchase["id"]


def test_totals_with_discount_tax_and_charges(product, make_purchase):
    purchase = make_purchase(
        [{"productId": product["id"], "quantity": 2, "unitPrice": 100, "discount": 20, "taxRate": 10}],
        shippingCharges=15,
    )
    assert purchase["subtotal"] == 200
    assert purchase["discountAmount"] == 20
    assert purchase["taxAmount"] == 18
    assert purchase["totalAmount"] == 213
    assert purchase["items"][0]["taxAmount"] == 18
    assert purchase["items"][0]["total"] == 198


def test_discount_above_line_amount_rejected(client, product, make_party, stock_of):
    party = make_party(type="supplier")
    resp = client.post("/api/purchases", json={
        "partyId": party["id"],
        "items": [{"productId": product["id"], "quantity": 1, "unitPrice": 10, "discount": 50}],
    })
    assert resp.status_code == 400
    assert stock_of(product["id"]) == 0


def test_invoice_numbers(client, product, make_purchase):
    item = [{"productId": product["id"], "quantity": 1}]
    assert make_purchase(item)["invoiceNumber"] == "PUR-00001"
    assert make_purchase(item)["invoiceNumber"] == "PUR-00002"
    assert make_purchase(item, invoiceNumber="PUR-00007")["invoiceNumber"] == "PUR-00007"
    assert make_purchase(item)["invoiceNumber"] == "PUR-00008"
    assert make_purchase(item, invoiceNumber="BILL-42")["invoiceNumber"] == "BILL-42"

    resp = client.post("/api/purchases", json={
        "partyId": make_purchase(item)["partyId"], "items": item, "invoiceNumber": "BILL-42",
    })
    assert resp.status_code == 400


def test_validation(client, product, make_party):
    supplier = make_party(type="supplier")
    customer = make_party(type="customer")
    item = {"productId": product["id"], "quantity": 1}

    assert client.post("/api/purchases", json={"items": [item]}).status_code == 400
    assert client.post("/api/purchases", json={"partyId": supplier["id"], "items": []}).status_code == 400
    assert client.post("/api/purchases", json={"partyId": supplier["id"]}).status_code == 400
    resp = client.post("/api/purchases", json={"partyId": supplier["id"], "items": [{**item, "quantity": 0}]})
    assert resp.status_code == 400

    resp = client.post("/api/purchases", json={"partyId": customer["id"], "items": [item]})
    assert resp.status_code == 400
    assert "not a supplier" in resp.json()["message"]

    resp = client.post("/api/purchases", json={"partyId": 999, "items": [item]})
    assert resp.status_code == 404

    resp = client.post("/api/purchases", json={"partyId": supplier["id"], "items": [{"productId": 999, "quantity": 1}]})
    assert resp.status_code == 404
    assert client.get("/api/purchases").json()["count"] == 0


def test_payment_status_follows_paid_amount(client, product, make_purchase):
    purchase = make_purchase([{"productId": product["id"], "quantity": 2, "unitPrice": 50}], paidAmount=30)
    assert purchase["paymentStatus"] == "partial"
    pid = purchase["id"]

    resp = client.patch(f"/api/purchases/{pid}/payment", json={"paidAmount": 100})
    assert resp.status_code == 200
    assert resp.json()["data"]["paymentStatus"] == "paid"
    assert resp.json()["data"]["balanceAmount"] == 0

    resp = client.patch(f"/api/purchases/{pid}/payment", json={"paidAmount": 0})
    assert resp.json()["data"]["paymentStatus"] == "unpaid"

    assert client.patch(f"/api/purchases/{pid}/payment", json={"paidAmount": -5}).status_code == 400
    assert client.patch(f"/api/purchases/{pid}/payment", json={}).status_code == 400


def test_overpaid_on_create_is_paid(product, make_purchase):
    purchase = make_purchase([{"productId": product["id"], "quantity": 1, "unitPrice": 10}], paidAmount=25)
    assert purchase["paymentStatus"] == "paid"
    assert purchase["balanceAmount"] == -15


def test_generic_update_leaves_items_and_status(client, product, make_purchase, stock_of):
    purchase = make_purchase([{"productId": product["id"], "quantity": 5}])
    resp = client.put(f"/api/purchases/{purchase['id']}", json={
        "paidAmount": 300, "notes": "settled by cheque", "totalAmount": 1,
        "items": [{"productId": product["id"], "quantity": 50}],
    })
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["paidAmount"] == 300
    assert data["notes"] == "settled by cheque"
    assert data["paymentStatus"] == "unpaid"
    assert data["totalAmount"] == 300
    assert data["items"][0]["quantity"] == 5
    assert stock_of(product["id"]) == 5


def test_delete_reverses_stock(client, product, make_purchase, stock_of):
    purchase = make_purchase([{"productId": product["id"], "quantity": 10}])
    assert stock_of(product["id"]) == 10

    resp = client.delete(f"/api/purchases/{purchase['id']}")
    assert resp.status_code == 200
    assert resp.json()["message"] == "Purchase deleted successfully"
    assert stock_of(product["id"]) == 0
    assert client.get(f"/api/purchases/{purchase['id']}").status_code == 404

    types = [m["type"] for m in client.get("/api/stock-movements").json()["data"]]
    assert types == ["PURCHASE_REVERSAL", "PURCHASE"]


def test_delete_after_goods_sold_rejected(client, product, make_purchase, stock_of):
    purchase = make_purchase([{"productId": product["id"], "quantity": 10}])
    resp = client.post("/api/sales", json={"items": [{"productId": product["id"], "quantity": 8}]})
    assert resp.status_code == 201

    resp = client.delete(f"/api/purchases/{purchase['id']}")
    assert resp.status_code == 400
    assert "Insufficient stock" in resp.json()["message"]
    assert stock_of(product["id"]) == 2
    assert client.get(f"/api/purchases/{purchase['id']}").status_code == 200

    logs = client.get("/api/logs", params={"action": "PURCHASE_DELETE", "status": "FAIL"}).json()
    assert logs["count"] == 1


def test_list_filters(client, product, make_party, make_purchase):
    first = make_party(name="First Supplier", type="supplier")
    second = make_party(name="Second Supplier", type="supplier")
    item = [{"productId": product["id"], "quantity": 1, "unitPrice": 100}]
    make_purchase(item, party_id=first["id"], paidAmount=100)
    make_purchase(item, party_id=second["id"], invoiceNumber="INV-ABC")

    assert client.get("/api/purchases").json()["count"] == 2
    resp = client.get("/api/purchases", params={"party": first["id"]})
    assert [p["partyName"] for p in resp.json()["data"]] == ["First Supplier"]
    resp = client.get("/api/purchases", params={"paymentStatus": "unpaid"})
    assert [p["invoiceNumber"] for p in resp.json()["data"]] == ["INV-ABC"]
    resp = client.get("/api/purchases", params={"search": "abc"})
    assert resp.json()["count"] == 1
    resp = client.get("/api/purchases", params={"status": "draft"})
    assert resp.json()["count"] == 0


def test_other_owner_cannot_delete(client, product, make_purchase, other_headers, stock_of):
    purchase = make_purchase([{"productId": product["id"], "quantity": 3}])
    assert client.delete(f"/api/purchases/{purchase['id']}", headers=other_headers).status_code == 404
    assert stock_of(product["id"]) == 3


def test_other_owner_product_not_usable(client, product, other_headers):
    resp = client.post("/api/parties", json={"name": "Their Supplier", "type": "supplier"}, headers=other_headers)
    party_id = resp.json()["data"]["id"]
    resp = client.post(
        "/api/purchases",
        json={"partyId": party_id, "items": [{"productId": product["id"], "quantity": 1}]},
        headers=other_headers,
    )
    assert resp.status_code == 404


def test_products_locked_in_id_order(client, make_product, make_purchase, monkeypatch):
    import utils.inventory

    first = make_product(name="First")
    second = make_product(name="Second")
    locked = []
    original = utils.inventory.lock_product

    def recording_lock(db, user_id, product_id):
        locked.append(product_id)
        return original(db, user_id, product_id)

    monkeypatch.setattr(utils.inventory, "lock_product", recording_lock)

    purchase = make_purchase([
        {"productId": second["id"], "quantity": 2},
        {"productId": first["id"], "quantity": 2},
    ])
    assert locked == [first["id"], second["id"]]

    locked.clear()
    assert client.delete(f"/api/purchases/{purchase['id']}").status_code == 200
    assert locked == [first["id"], second["id"]]


def test_repeated_get_is_stable(client, product, make_purchase):
    purchase = make_purchase([{"productId": product["id"], "quantity": 3}], notes="twice")

    first = client.get(f"/api/purchases/{purchase['id']}")
    second = client.get(f"/api/purchases/{purchase['id']}")
    assert first.status_code == 200
    assert first.json() == second.json()
    assert first.json()["data"] == purchase
