"""
HTTP client for the retail backend API.

The backend wraps every answer in ``{"success": bool, "data": ..., "message": ...}``.
This client unwraps that envelope, turns failures into ``BackendAPIError``
and normalizes the payloads into catalog types so callers never deal with
raw response shapes.

Only connection errors and timeouts are retried. Client and server errors
are raised immediately: retrying a rejected request would not change the
answer.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from django.conf import settings

import requests

from .builder import TransactionRequest
from .catalog import Customer, Product, normalize_customer, normalize_product
from .exceptions import AuthenticationRequired, BackendAPIError, BackendUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransactionResult:
    """What the backend tells us about a transaction it created."""

    id: str
    transaction_number: str = ""
    status: str = ""
    created_at: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "TransactionResult":
        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            transaction_number=data.get("transactionId") or "",
            status=data.get("status") or "",
            created_at=data.get("createdAt") or "",
        )


class BackendAPIClient:
    """
    Thin wrapper around ``requests.Session`` for the backend endpoints the
    checkout needs.
    """

    def __init__(
        self,
        base_url: str,
        token: str = "",
        tenant_id: Optional[str] = None,
        timeout: float = 15.0,
        max_attempts: int = 2,
        backoff: float = 1.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.tenant_id = tenant_id
        self.timeout = timeout
        self.max_attempts = max(1, int(max_attempts))
        self.backoff = backoff
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        if tenant_id:
            self.session.headers["X-Tenant-ID"] = str(tenant_id)

    @classmethod
    def from_settings(cls, tenant_id: Optional[str] = None) -> "BackendAPIClient":
        return cls(
            base_url=settings.POS_API_BASE_URL,
            token=settings.POS_API_TOKEN,
            tenant_id=tenant_id,
            timeout=settings.POS_API_TIMEOUT,
            max_attempts=settings.POS_API_MAX_ATTEMPTS,
            backoff=settings.POS_API_BACKOFF,
        )

    # Transport

    def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        url = f"{self.base_url}{endpoint}"
        delay = self.backoff

        for attempt in range(1, self.max_attempts + 1):
            try:
                response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            except (requests.ConnectionError, requests.Timeout) as e:
                if attempt >= self.max_attempts:
                    logger.error(f"Backend unreachable: {method} {endpoint} ({e})")
                    raise BackendUnavailable(f"Backend unavailable: {e}") from e
                logger.warning(
                    f"Backend request failed, retrying in {delay}s "
                    f"({self.max_attempts - attempt} attempts left): {method} {endpoint}"
                )
                time.sleep(delay)
                delay *= 2
                continue
            except requests.RequestException as e:
                logger.error(f"Backend request failed: {method} {endpoint} ({e})")
                raise BackendAPIError(f"Backend request failed: {e}") from e

            return self._unwrap(response)

    def _unwrap(self, response: requests.Response) -> Any:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"success": response.ok, "data": body}

        if response.status_code == 401:
            raise AuthenticationRequired("Authentication required", status_code=401)
        if not response.ok:
            raise BackendAPIError(
                body.get("message") or f"API request failed ({response.status_code})",
                status_code=response.status_code,
            )
        if body.get("success") is False:
            raise BackendAPIError(
                body.get("message") or "API request failed", status_code=response.status_code
            )
        return body.get("data")

    # Catalog

    def list_products(
        self, search: Optional[str] = None, category: Optional[str] = None
    ) -> List[Product]:
        params = {}
        if search:
            params["search"] = search
        if category and category != "all":
            params["category"] = category
        data = self._request("GET", "/products", params=params) or []
        return [normalize_product(item) for item in data]

    def get_product_by_barcode(self, code: str) -> Product:
        data = self._request("GET", f"/products/barcode/{quote(str(code), safe='')}")
        if not data:
            raise BackendAPIError(f"Product not found: {code}", status_code=404)
        return normalize_product(data)

    def list_customers(self, search: Optional[str] = None) -> List[Customer]:
        params = {"search": search} if search else {}
        data = self._request("GET", "/customers", params=params) or []
        return [normalize_customer(item) for item in data]

    def create_customer(self, name: str, email: str = "", phone: str = "") -> Customer:
        payload = {"name": name, "email": email, "phone": phone}
        data = self._request("POST", "/customers", json=payload)
        return normalize_customer(data or {})

    def get_settings(self) -> Dict[str, Any]:
        return self._request("GET", "/settings") or {}

    # Transactions

    def create_transaction(
        self, request: TransactionRequest, idempotency_key: Optional[str] = None
    ) -> TransactionResult:
        headers = {}
        if idempotency_key:
            headers["Idempotency-Key"] = str(idempotency_key)
        data = self._request("POST", "/transactions", json=request.to_payload(), headers=headers)
        result = TransactionResult.from_api(data or {})
        if not result.id:
            raise BackendAPIError("Backend did not return a transaction id")
        return result
