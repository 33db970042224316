"""Store Gateway: HTTP client over the data service.

The gateway is the ONLY place the business tier talks to the data
service.  Every operation returns parsed records or raises one of three
outcomes, never a transport exception:

- ``StoreNotFound``: the data service answered 404.
- ``StoreRejected``: the data service refused the payload (400 or 409).
- ``StoreUnavailable``: the data service could not be reached, timed
  out, answered with any other error status, or sent a body that could
  not be parsed.

No retries are attempted here; retry policy belongs to the caller.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional, Type, TypeVar
from urllib.parse import quote, urljoin
from uuid import UUID

import requests
import structlog
from django.conf import settings
from pydantic import BaseModel, ValidationError

from modules.catalog.entities import Category, Inventory, Product
from modules.core.middleware import correlation_id_var

logger = structlog.get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

REJECTED_STATUSES = frozenset({400, 409})


class StoreGatewayError(Exception):
    """Base class for the gateway outcomes other than success."""

    def __init__(
        self, message: str, *, path: str = "", status_code: Optional[int] = None
    ) -> None:
        super().__init__(message)
        self.path = path
        self.status_code = status_code


class StoreNotFound(StoreGatewayError):
    """The requested record does not exist in the data service."""


class StoreRejected(StoreGatewayError):
    """The data service refused the payload or the state change."""


class StoreUnavailable(StoreGatewayError):
    """The data service was unreachable or failed to answer properly."""


def _error_reason(response: requests.Response) -> str:
    """Pull the human-readable reason out of a data-tier error body."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        reason = body.get("message") or body.get("detail")
        if reason:
            return str(reason)
    return f"Data service answered {response.status_code}"


class StoreGateway:
    """Typed fetch / query / mutate operations per entity kind."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = base_url if base_url.endswith("/") else f"{base_url}/"
        self._timeout = timeout
        self._session = session or requests.Session()

    @classmethod
    def from_settings(cls) -> StoreGateway:
        return cls(
            base_url=settings.DATA_SERVICE_URL,
            timeout=settings.DATA_SERVICE_TIMEOUT,
        )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = urljoin(self._base_url, path)
        headers = {"Accept": "application/json"}
        correlation_id = correlation_id_var.get()
        if correlation_id:
            headers["X-Request-ID"] = correlation_id

        log = logger.bind(method=method, path=path)
        try:
            response = self._session.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            log.error("store.unreachable", error=str(exc))
            raise StoreUnavailable(
                f"Data service unreachable: {type(exc).__name__}", path=path
            ) from exc

        if response.status_code == 404:
            log.info("store.not_found")
            raise StoreNotFound(f"{path} not found", path=path, status_code=404)
        if response.status_code in REJECTED_STATUSES:
            reason = _error_reason(response)
            log.warning("store.rejected", status_code=response.status_code, reason=reason)
            raise StoreRejected(reason, path=path, status_code=response.status_code)
        if not response.ok:
            log.error("store.error_status", status_code=response.status_code)
            raise StoreUnavailable(
                f"Data service answered {response.status_code}",
                path=path,
                status_code=response.status_code,
            )

        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            log.error("store.invalid_body", status_code=response.status_code)
            raise StoreUnavailable(
                "Data service sent an unreadable body", path=path
            ) from exc

    def _one(self, model: Type[M], data: Any, path: str) -> M:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            logger.error("store.invalid_record", path=path, model=model.__name__)
            raise StoreUnavailable(
                f"Data service sent an invalid {model.__name__}", path=path
            ) from exc

    def _many(self, model: Type[M], data: Any, path: str) -> List[M]:
        if not isinstance(data, list):
            logger.error("store.invalid_collection", path=path, model=model.__name__)
            raise StoreUnavailable(
                f"Data service sent an invalid {model.__name__} list", path=path
            )
        return [self._one(model, item, path) for item in data]

    def _get_one(self, model: Type[M], path: str, **kwargs: Any) -> M:
        return self._one(model, self._request("GET", path, **kwargs), path)

    def _get_many(self, model: Type[M], path: str, **kwargs: Any) -> List[M]:
        return self._many(model, self._request("GET", path, **kwargs), path)

    def ping(self) -> None:
        self._request("GET", "data/health/")

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def list_products(self) -> List[Product]:
        return self._get_many(Product, "data/products/")

    def get_product(self, id: UUID | str) -> Product:
        return self._get_one(Product, f"data/products/{id}/")

    def products_by_category(self, name: str) -> List[Product]:
        return self._get_many(Product, f"data/products/category/{quote(name, safe='')}/")

    def products_by_name(self, fragment: str) -> List[Product]:
        return self._get_many(Product, "data/products/search/", params={"name": fragment})

    def products_by_price_range(self, minimum: Decimal, maximum: Decimal) -> List[Product]:
        return self._get_many(
            Product,
            "data/products/price/",
            params={"min": str(minimum), "max": str(maximum)},
        )

    def create_product(self, data: Dict[str, Any]) -> Product:
        path = "data/products/"
        return self._one(Product, self._request("POST", path, json=data), path)

    def update_product(self, id: UUID | str, product: Product) -> Product:
        path = f"data/products/{id}/"
        return self._one(Product, self._request("PUT", path, json=product.to_payload()), path)

    def delete_product(self, id: UUID | str) -> None:
        self._request("DELETE", f"data/products/{id}/")

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    def list_categories(self) -> List[Category]:
        return self._get_many(Category, "data/categories/")

    def get_category(self, id: UUID | str) -> Category:
        return self._get_one(Category, f"data/categories/{id}/")

    def get_category_by_name(self, name: str) -> Category:
        return self._get_one(Category, f"data/categories/name/{quote(name, safe='')}/")

    def create_category(self, data: Dict[str, Any]) -> Category:
        path = "data/categories/"
        return self._one(Category, self._request("POST", path, json=data), path)

    def update_category(self, id: UUID | str, category: Category) -> Category:
        path = f"data/categories/{id}/"
        return self._one(
            Category, self._request("PUT", path, json=category.to_payload()), path
        )

    def delete_category(self, id: UUID | str) -> None:
        self._request("DELETE", f"data/categories/{id}/")

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------

    def list_inventory(self) -> List[Inventory]:
        return self._get_many(Inventory, "data/inventory/")

    def get_inventory(self, id: UUID | str) -> Inventory:
        return self._get_one(Inventory, f"data/inventory/{id}/")

    def get_inventory_by_product(self, product_id: UUID | str) -> Inventory:
        return self._get_one(Inventory, f"data/inventory/product/{product_id}/")

    def low_stock_inventory(self) -> List[Inventory]:
        return self._get_many(Inventory, "data/inventory/low-stock/")

    def out_of_stock_inventory(self) -> List[Inventory]:
        return self._get_many(Inventory, "data/inventory/out-of-stock/")

    def create_inventory(self, data: Dict[str, Any]) -> Inventory:
        path = "data/inventory/"
        return self._one(Inventory, self._request("POST", path, json=data), path)

    def update_inventory(self, id: UUID | str, inventory: Inventory) -> Inventory:
        path = f"data/inventory/{id}/"
        return self._one(
            Inventory, self._request("PUT", path, json=inventory.to_payload()), path
        )

    def update_inventory_quantity(self, id: UUID | str, quantity: int) -> Inventory:
        path = f"data/inventory/{id}/quantity/"
        return self._one(
            Inventory, self._request("PUT", path, json={"quantity": quantity}), path
        )

    def delete_inventory(self, id: UUID | str) -> None:
        self._request("DELETE", f"data/inventory/{id}/")
