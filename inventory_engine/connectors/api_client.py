"""
Inventory API client — synchronous wrapper over the REST backend.

Every method returns decoded JSON (or a normalized list for collection
endpoints) and raises ApiClientError on transport errors, non-2xx answers
and unparseable collections. Nothing here retries: the next poll does.
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from inventory_engine.config import settings
from .normalize import Ok, keys_for, normalize_collection

logger = logging.getLogger(__name__)


class ApiClientError(Exception):
    """Custom exception for backend API errors"""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status:
            return f"[{self.status}] {self.message}"
        return self.message


class InventoryApiClient:
    """Client for the inventory backend REST endpoints"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the API client

        Args:
            base_url: API root, e.g. http://localhost:5000/api (defaults to settings)
            token:    Bearer token sent with every request
            timeout:  Seconds per request
            session:  Pre-built requests session (tests inject a mock)
        """
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.token = token if token is not None else settings.API_TOKEN
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.session = session or requests.Session()

    @property
    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, *, params=None, json=None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method, url, params=params, json=json,
                headers=self.headers, timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("%s %s failed: %s", method, path, e)
            raise ApiClientError(f"Request failed: {e}") from e

        if not response.ok:
            message = self._error_message(response)
            logger.warning("%s %s -> %s: %s", method, path, response.status_code, message)
            raise ApiClientError(message, status=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.error("%s %s returned invalid JSON: %s", method, path, e)
            raise ApiClientError("Invalid JSON in response", status=response.status_code) from e

    @staticmethod
    def _error_message(response) -> str:
        """The backend's `error` (or `message`) field, else the HTTP reason."""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            for key in ("error", "message"):
                if body.get(key):
                    return str(body[key])
        return response.reason or f"HTTP {response.status_code}"

    def _collection(self, collection: str, path: str, params=None) -> List[dict]:
        payload = self._request("GET", path, params=params)
        result = normalize_collection(payload, keys_for(collection))
        if isinstance(result, Ok):
            return result.items
        logger.error("Unparseable %s response from %s: %s", collection, path, result.reason)
        raise ApiClientError(f"Unexpected {collection} response: {result.reason}")

    @staticmethod
    def _unwrap(payload: Any) -> Any:
        """Report endpoints sometimes wrap their body under `data`."""
        if isinstance(payload, dict) and set(payload) <= {"success", "data", "message"} and "data" in payload:
            return payload["data"]
        return payload

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def list_products(self) -> List[dict]:
        return self._collection("products", "/products")

    def get_product(self, product_id: str) -> dict:
        payload = self._request("GET", f"/products/{product_id}")
        if isinstance(payload, dict) and isinstance(payload.get("product"), dict):
            return payload["product"]
        return payload or {}

    def create_product(self, data: Dict[str, Any]) -> dict:
        return self._request("POST", "/products", json=data) or {}

    def update_product(self, product_id: str, data: Dict[str, Any]) -> dict:
        return self._request("PUT", f"/products/{product_id}", json=data) or {}

    def delete_product(self, product_id: str) -> None:
        self._request("DELETE", f"/products/{product_id}")

    def generate_sku(self, product_name: str) -> str:
        payload = self._request("POST", "/products/generate-sku", json={"productName": product_name.strip()})
        sku = (payload or {}).get("sku") if isinstance(payload, dict) else None
        if not sku:
            raise ApiClientError("SKU generation returned no SKU")
        return sku

    # ------------------------------------------------------------------
    # Warehouses and stock
    # ------------------------------------------------------------------

    def list_warehouses(self) -> List[dict]:
        return self._collection("warehouses", "/warehouses")

    def get_warehouse(self, warehouse_id: str) -> dict:
        payload = self._request("GET", f"/warehouses/{warehouse_id}")
        if isinstance(payload, dict) and isinstance(payload.get("warehouse"), dict):
            return payload["warehouse"]
        return payload or {}

    def add_stock(self, warehouse_id: str, product_id: str, quantity: int,
                  tags: Optional[List[str]] = None) -> dict:
        body = {"productId": product_id, "quantity": int(quantity), "tags": list(tags or [])}
        return self._request("POST", f"/warehouses/{warehouse_id}/add-stock", json=body) or {}

    def delete_warehouse(self, warehouse_id: str) -> None:
        self._request("DELETE", f"/warehouses/{warehouse_id}")

    def stock_levels(self, product_id: Optional[str] = None) -> List[dict]:
        params = {"productId": product_id} if product_id else None
        return self._collection("stock_levels", "/stock/levels", params=params)

    # ------------------------------------------------------------------
    # Sales, purchases, suppliers
    # ------------------------------------------------------------------

    def list_sales(self, limit: int = 1000) -> List[dict]:
        return self._collection("sales", "/sales", params={"limit": limit})

    def create_sale(self, data: Dict[str, Any]) -> dict:
        return self._request("POST", "/sales", json=data) or {}

    def update_sale_status(self, sale_id: str, payload: Dict[str, Any]) -> dict:
        """PATCH a sales order status. Build *payload* with status_update_payload()."""
        return self._request("PATCH", f"/sales/{sale_id}/status", json=payload) or {}

    def list_purchases(self) -> List[dict]:
        return self._collection("purchases", "/purchases")

    def create_purchase(self, data: Dict[str, Any]) -> dict:
        return self._request("POST", "/purchases", json=data) or {}

    def list_suppliers(self) -> List[dict]:
        return self._collection("suppliers", "/suppliers")

    # ------------------------------------------------------------------
    # Expected returns
    # ------------------------------------------------------------------

    def list_expected_returns(self, status: Optional[str] = None) -> Dict[str, Any]:
        """
        Expected returns plus the backend's counters.

        Returns:
            {"items": [...], "stats": {"total": 4, "pending": 1, ...}}
        """
        params = {"status": status} if status and status != "all" else None
        payload = self._request("GET", "/expected-returns", params=params)
        result = normalize_collection(payload, keys_for("expected_returns"))
        if not isinstance(result, Ok):
            logger.error("Unparseable expected returns response: %s", result.reason)
            raise ApiClientError(f"Unexpected expected returns response: {result.reason}")
        stats = payload.get("stats") if isinstance(payload, dict) else None
        return {"items": result.items, "stats": stats or {}}

    def update_return_status(self, return_id: str, payload: Dict[str, Any]) -> dict:
        return self._request("PATCH", f"/expected-returns/{return_id}/status", json=payload) or {}

    # ------------------------------------------------------------------
    # Backend reports
    # ------------------------------------------------------------------

    def dashboard_summary(self) -> Any:
        return self._unwrap(self._request("GET", "/reports/dashboard/summary"))

    def dashboard_main(self) -> Any:
        return self._unwrap(self._request("GET", "/reports/dashboard/main"))

    def weekly_sales(self) -> Any:
        return self._unwrap(self._request("GET", "/reports/weekly-sales"))

    def monthly_inventory(self) -> Any:
        return self._unwrap(self._request("GET", "/reports/monthly-inventory"))

    def supplier_performance(self, start_date: Optional[str] = None,
                             end_date: Optional[str] = None) -> Any:
        return self._unwrap(self._request(
            "GET", "/reports/supplier-performance", params=_date_range(start_date, end_date),
        ))

    def return_analysis(self, start_date: Optional[str] = None,
                        end_date: Optional[str] = None) -> Any:
        return self._unwrap(self._request(
            "GET", "/reports/return-analysis", params=_date_range(start_date, end_date),
        ))


def _date_range(start_date: Optional[str], end_date: Optional[str]) -> Optional[Dict[str, str]]:
    params = {"startDate": start_date, "endDate": end_date}
    params = {k: v for k, v in params.items() if v}
    return params or None
