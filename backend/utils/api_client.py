# backend/utils/api_client.py
import httpx
import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

RESOURCES = ("categories", "products", "parties", "purchases", "sales")


class ApiError(Exception):
    """Raised when the API answers with success: false."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class LedgerClient:
    """Async client for the ledger API, one method per endpoint.

    Unwraps the {success, message, data, count} envelope and returns `data`.
    Pass `transport` to talk to an in-process app (tests).
    """

    def __init__(self, base_url: str, token: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._client = httpx.AsyncClient(base_url=self.base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "LedgerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def _request(self, method: str, path: str, json: Any = None, params: Optional[dict] = None) -> dict:
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            response = await self._client.request(method, path, json=json, params=params, headers=self._headers())
        except httpx.RequestError as e:
            logger.error(f"Ledger API request error: {method} {path}: {e}")
            raise

        try:
            body = response.json()
        except ValueError:
            body = {"success": False, "message": response.text or response.reason_phrase}

        if response.status_code >= 400 or not body.get("success", False):
            message = body.get("message") or response.reason_phrase
            logger.warning("Ledger API %s %s failed with %s: %s", method, path, response.status_code, message)
            raise ApiError(response.status_code, message)
        return body

    @staticmethod
    def _path(resource: str, record_id: Optional[int] = None, action: Optional[str] = None) -> str:
        if resource not in RESOURCES:
            raise ValueError(f"Unknown resource '{resource}'")
        path = f"/api/{resource}"
        if record_id is not None:
            path += f"/{record_id}"
        if action:
            path += f"/{action}"
        return path

    # ---- auth ----
    async def register(self, email: str, password: str, **names) -> dict:
        body = await self._request("POST", "/api/users/register", json={"email": email, "password": password, **names})
        return body["data"]

    async def login(self, email: str, password: str) -> str:
        body = await self._request("POST", "/api/users/login", json={"email": email, "password": password})
        self.token = body["data"]["accessToken"]
        return self.token

    # ---- generic CRUD ----
    async def list(self, resource: str, **filters) -> List[dict]:
        body = await self._request("GET", self._path(resource), params=filters)
        return body["data"]

    async def get(self, resource: str, record_id: int) -> dict:
        body = await self._request("GET", self._path(resource, record_id))
        return body["data"]

    async def create(self, resource: str, payload: dict) -> dict:
        body = await self._request("POST", self._path(resource), json=payload)
        return body["data"]

    async def update(self, resource: str, record_id: int, payload: dict) -> dict:
        body = await self._request("PUT", self._path(resource, record_id), json=payload)
        return body["data"]

    async def delete(self, resource: str, record_id: int) -> str:
        body = await self._request("DELETE", self._path(resource, record_id))
        return body.get("message")

    # ---- narrow adjustments ----
    async def adjust_stock(self, product_id: int, quantity: float, type: str, reason: Optional[str] = None) -> dict:
        payload = {"quantity": quantity, "type": type}
        if reason:
            payload["reason"] = reason
        body = await self._request("PATCH", self._path("products", product_id, "stock"), json=payload)
        return body["data"]

    async def update_balance(self, party_id: int, amount: float, type: str) -> dict:
        body = await self._request("PATCH", self._path("parties", party_id, "balance"), json={"amount": amount, "type": type})
        return body["data"]

    async def update_payment(self, resource: str, record_id: int, paid_amount: float) -> dict:
        if resource not in ("purchases", "sales"):
            raise ValueError("Payments apply to purchases and sales only")
        body = await self._request("PATCH", self._path(resource, record_id, "payment"), json={"paidAmount": paid_amount})
        return body["data"]

    async def stock_movements(self, **filters) -> List[dict]:
        body = await self._request("GET", "/api/stock-movements", params=filters)
        return body["data"]
