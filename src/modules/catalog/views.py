"""Catalog API views.

Exposes the orchestration services via HTTP using DRF ViewSets.
Views only parse input and serialize views; every failure is a domain
exception turned into the uniform error body by
``modules.core.exceptions.api_exception_handler``.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.catalog.dtos import (
    CategoryRequest,
    InventoryRequest,
    ProductRequest,
    StockUpdateRequest,
)
from modules.catalog.exceptions import BusinessValidationError
from modules.catalog.gateway import StoreGateway
from modules.catalog.services import (
    CategoryService,
    InventoryReportService,
    InventoryService,
    ProductService,
)

D = TypeVar("D", bound=BaseModel)


def _parse(dto_cls: Type[D], data: Any) -> D:
    """Coerce a request body into ``dto_cls``; type errors become 400s."""
    if hasattr(data, "dict"):
        data = data.dict()
    try:
        return dto_cls.model_validate(data)
    except PydanticValidationError as exc:
        reasons = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'body'}: {error['msg']}"
            for error in exc.errors()
        )
        raise BusinessValidationError(f"Invalid request: {reasons}") from exc


def _decimal_param(request: Request, name: str) -> Decimal:
    raw = request.query_params.get(name)
    if raw is None or raw == "":
        raise BusinessValidationError(f"Query parameter '{name}' is required.")
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise BusinessValidationError(f"Query parameter '{name}' must be a decimal.") from exc
    if not value.is_finite():
        raise BusinessValidationError(f"Query parameter '{name}' must be a finite decimal.")
    return value


def _dump(view: BaseModel) -> dict:
    return view.model_dump(mode="json")


def _dump_many(views) -> list:
    return [_dump(view) for view in views]


class ProductViewSet(GenericViewSet):
    """Products composed with their category name and stock counters.

    All data goes through ``ProductService``; the view never touches a
    model or the data service directly.
    """

    lookup_value_regex = r"[^/]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(StoreGateway.from_settings())

    def list(self, request: Request) -> Response:
        """GET /api/v1/products/"""
        return Response(_dump_many(self._service.list_products()))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        return Response(_dump(self._service.get_product(pk)))

    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request: Request) -> Response:
        """GET /api/v1/products/search/?name=..."""
        fragment = request.query_params.get("name", "").strip()
        if not fragment:
            raise BusinessValidationError("Query parameter 'name' is required.")
        return Response(_dump_many(self._service.search_by_name(fragment)))

    @action(detail=False, methods=["get"], url_path=r"category/(?P<name>[^/]+)")
    def by_category(self, request: Request, name: str | None = None) -> Response:
        """GET /api/v1/products/category/{name}/"""
        return Response(_dump_many(self._service.list_by_category(name or "")))

    @action(detail=False, methods=["get"], url_path="price")
    def by_price(self, request: Request) -> Response:
        """GET /api/v1/products/price/?min=..&max=.."""
        minimum = _decimal_param(request, "min")
        maximum = _decimal_param(request, "max")
        return Response(_dump_many(self._service.search_by_price_range(minimum, maximum)))

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        product = self._service.create_product(_parse(ProductRequest, request.data))
        return Response(_dump(product), status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/products/{pk}/"""
        product = self._service.update_product(pk, _parse(ProductRequest, request.data))
        return Response(_dump(product))

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        self._service.delete_product(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class CategoryViewSet(GenericViewSet):
    """Categories with their embedded product views."""

    lookup_value_regex = r"[^/]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CategoryService(StoreGateway.from_settings())

    def list(self, request: Request) -> Response:
        """GET /api/v1/categories/"""
        return Response(_dump_many(self._service.list_categories()))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/categories/{pk}/"""
        return Response(_dump(self._service.get_category(pk)))

    @action(detail=False, methods=["get"], url_path=r"name/(?P<name>[^/]+)")
    def by_name(self, request: Request, name: str | None = None) -> Response:
        """GET /api/v1/categories/name/{name}/"""
        return Response(_dump(self._service.get_category_by_name(name or "")))

    @action(detail=True, methods=["get"], url_path="products")
    def products(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/categories/{pk}/products/"""
        return Response(_dump_many(self._service.products_in_category(pk)))

    def create(self, request: Request) -> Response:
        """POST /api/v1/categories/"""
        category = self._service.create_category(_parse(CategoryRequest, request.data))
        return Response(_dump(category), status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/categories/{pk}/"""
        category = self._service.update_category(pk, _parse(CategoryRequest, request.data))
        return Response(_dump(category))

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/categories/{pk}/"""
        self._service.delete_category(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class InventoryViewSet(GenericViewSet):
    """Inventory records and the by-product stock update."""

    lookup_value_regex = r"[^/]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = InventoryService(StoreGateway.from_settings())

    def list(self, request: Request) -> Response:
        """GET /api/v1/inventory/"""
        return Response(_dump_many(self._service.list_inventory()))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/inventory/{pk}/"""
        return Response(_dump(self._service.get_inventory(pk)))

    @action(detail=False, methods=["get"], url_path=r"product/(?P<product_id>[^/]+)")
    def by_product(self, request: Request, product_id: str | None = None) -> Response:
        """GET /api/v1/inventory/product/{product_id}/"""
        return Response(_dump(self._service.get_by_product(product_id or "")))

    @action(detail=False, methods=["put"], url_path=r"product/(?P<product_id>[^/]+)/stock")
    def stock(self, request: Request, product_id: str | None = None) -> Response:
        """PUT /api/v1/inventory/product/{product_id}/stock/

        Accepts ``{"quantity": N}``.
        """
        dto = _parse(StockUpdateRequest, request.data)
        return Response(_dump(self._service.update_stock(product_id or "", dto.quantity)))

    def create(self, request: Request) -> Response:
        """POST /api/v1/inventory/"""
        record = self._service.create_inventory(_parse(InventoryRequest, request.data))
        return Response(_dump(record), status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/inventory/{pk}/"""
        record = self._service.update_inventory(pk, _parse(InventoryRequest, request.data))
        return Response(_dump(record))

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/inventory/{pk}/"""
        self._service.delete_inventory(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ReportViewSet(GenericViewSet):
    """Read-only stock reports."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        gateway = StoreGateway.from_settings()
        self._inventory = InventoryService(gateway)
        self._reports = InventoryReportService(gateway)

    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request: Request) -> Response:
        """GET /api/v1/reports/low-stock/"""
        return Response(_dump_many(self._inventory.low_stock_products()))

    @action(detail=False, methods=["get"], url_path="out-of-stock")
    def out_of_stock(self, request: Request) -> Response:
        """GET /api/v1/reports/out-of-stock/"""
        return Response(_dump_many(self._inventory.out_of_stock_products()))

    @action(detail=False, methods=["get"], url_path="inventory-value")
    def inventory_value(self, request: Request) -> Response:
        """GET /api/v1/reports/inventory-value/"""
        return Response({"total_value": str(self._reports.calculate_total_valuation())})

    @action(detail=False, methods=["get"], url_path="inventory")
    def inventory(self, request: Request) -> Response:
        """GET /api/v1/reports/inventory/"""
        return Response(_dump(self._reports.generate_inventory_report()))
