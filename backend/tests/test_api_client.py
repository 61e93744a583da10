# backend/tests/test_api_client.py
import httpx
import pytest

from main import app
from utils.api_client import ApiError, LedgerClient


@pytest.fixture()
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def ledger(anon_client):
    # anon_client installs the database override; requests go straight to the app
    return LedgerClient("http://testserver", transport=httpx.ASGITransport(app=app))


@pytest.mark.anyio
async def test_full_flow(ledger):
    async with ledger:
        await ledger.register("client@example.com", "s3cret-pass", firstName="Client")
        token = await ledger.login("client@example.com", "s3cret-pass")
        assert token

        category = await ledger.create("categories", {"name": "Stationery"})
        product = await ledger.create("products", {
            "name": "Notebook", "categoryId": category["id"], "purchasePrice": 20, "salePrice": 35,
        })
        supplier = await ledger.create("parties", {"name": "Paper Mill", "type": "supplier"})

        purchase = await ledger.create("purchases", {
            "partyId": supplier["id"], "items": [{"productId": product["id"], "quantity": 12}],
        })
        assert purchase["totalAmount"] == 240

        sale = await ledger.create("sales", {"items": [{"productId": product["id"], "quantity": 2}]})
        assert (await ledger.get("products", product["id"]))["currentStock"] == 10

        paid = await ledger.update_payment("sales", sale["id"], 70)
        assert paid["paymentStatus"] == "paid"

        adjusted = await ledger.adjust_stock(product["id"], 1, "subtract", reason="Damaged")
        assert adjusted["currentStock"] == 9

        supplier = await ledger.update_balance(supplier["id"], 240, "add")
        assert supplier["currentBalance"] == 240

        movements = await ledger.stock_movements(product=product["id"])
        assert [m["type"] for m in movements] == ["ADJUSTMENT", "SALE", "PURCHASE"]

        assert len(await ledger.list("products", search="note")) == 1
        assert await ledger.delete("sales", sale["id"]) == "Sale deleted successfully"


@pytest.mark.anyio
async def test_errors_raise_api_error(ledger):
    async with ledger:
        with pytest.raises(ApiError) as exc:
            await ledger.list("categories")
        assert exc.value.status_code == 401

        await ledger.register("err@example.com", "s3cret-pass")
        await ledger.login("err@example.com", "s3cret-pass")
        with pytest.raises(ApiError) as exc:
            await ledger.get("parties", 123)
        assert exc.value.status_code == 404
        assert exc.value.message == "Party not found"


@pytest.mark.anyio
async def test_rejects_unknown_resources(ledger):
    async with ledger:
        with pytest.raises(ValueError):
            await ledger.list("invoices")
        with pytest.raises(ValueError):
            await ledger.update_payment("products", 1, 10)
