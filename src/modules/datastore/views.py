"""Data-tier API views.

CRUD and secondary look-ups over categories, products and inventory.
Every ORM access goes through the repositories; missing rows become
404 responses, invalid payloads 400.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action, api_view
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.datastore.filters import InventoryFilter, ProductFilter
from modules.datastore.repositories.django_repository import (
    CategoryDjangoRepository,
    InventoryDjangoRepository,
    ProductDjangoRepository,
)
from modules.datastore.serializers import (
    CategorySerializer,
    InventorySerializer,
    ProductSerializer,
    QuantitySerializer,
)


def _not_found(label: str) -> Response:
    return Response({"detail": f"{label} not found."}, status=status.HTTP_404_NOT_FOUND)


@api_view(["GET"])
def data_health(request: Request) -> Response:
    """GET /data/health/"""
    return Response({"status": "up"})


class CategoryDataViewSet(GenericViewSet):
    """Category rows, including the ids of the products that reference them."""

    serializer_class = CategorySerializer
    lookup_value_regex = r"[^/]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._repo = CategoryDjangoRepository()

    def list(self, request: Request) -> Response:
        """GET /data/categories/"""
        return Response(CategorySerializer(self._repo.list(), many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /data/categories/{pk}/"""
        category = self._repo.get_by_id(pk)
        if not category:
            return _not_found("Category")
        return Response(CategorySerializer(category).data)

    @action(detail=False, methods=["get"], url_path=r"name/(?P<name>[^/]+)")
    def by_name(self, request: Request, name: str | None = None) -> Response:
        """GET /data/categories/name/{name}/"""
        category = self._repo.get_by_name(name or "")
        if not category:
            return _not_found("Category")
        return Response(CategorySerializer(category).data)

    def create(self, request: Request) -> Response:
        """POST /data/categories/"""
        serializer = CategorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        category = self._repo.save(serializer.save())
        return Response(CategorySerializer(category).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /data/categories/{pk}/"""
        category = self._repo.get_by_id(pk)
        if not category:
            return _not_found("Category")
        serializer = CategorySerializer(category, data=request.data)
        serializer.is_valid(raise_exception=True)
        category = self._repo.save(serializer.save())
        return Response(CategorySerializer(category).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /data/categories/{pk}/"""
        category = self._repo.get_by_id(pk)
        if not category:
            return _not_found("Category")
        if category.products.exists():
            return Response(
                {"detail": "Category is still referenced by products."},
                status=status.HTTP_409_CONFLICT,
            )
        self._repo.delete(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ProductDataViewSet(GenericViewSet):
    """Product rows and their secondary look-ups."""

    serializer_class = ProductSerializer
    filterset_class = ProductFilter
    filter_backends = [DjangoFilterBackend]
    lookup_value_regex = r"[^/]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._repo = ProductDjangoRepository()

    def get_queryset(self):
        return self._repo.queryset()

    def _many(self, products) -> Response:
        return Response(ProductSerializer(products, many=True).data)

    def list(self, request: Request) -> Response:
        """GET /data/products/?name=..&category=..&min_price=..&max_price=.."""
        return self._many(self.filter_queryset(self.get_queryset()))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /data/products/{pk}/"""
        product = self._repo.get_by_id(pk)
        if not product:
            return _not_found("Product")
        return Response(ProductSerializer(product).data)

    @action(detail=False, methods=["get"], url_path=r"category/(?P<name>[^/]+)")
    def by_category(self, request: Request, name: str | None = None) -> Response:
        """GET /data/products/category/{name}/"""
        return self._many(self._repo.list_by_category_name(name or ""))

    @action(detail=False, methods=["get"], url_path="search")
    def search(self, request: Request) -> Response:
        """GET /data/products/search/?name=..."""
        return self._many(self._repo.search_by_name(request.query_params.get("name", "")))

    @action(detail=False, methods=["get"], url_path="price")
    def price_range(self, request: Request) -> Response:
        """GET /data/products/price/?min=..&max=.."""
        try:
            minimum = Decimal(request.query_params["min"])
            maximum = Decimal(request.query_params["max"])
        except (KeyError, InvalidOperation):
            minimum = maximum = None
        if minimum is None or not (minimum.is_finite() and maximum.is_finite()):
            return Response(
                {"detail": "Query parameters 'min' and 'max' must be finite decimals."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return self._many(self._repo.list_by_price_range(minimum, maximum))

    def create(self, request: Request) -> Response:
        """POST /data/products/"""
        serializer = ProductSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        product = self._repo.save(serializer.save())
        return Response(ProductSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /data/products/{pk}/"""
        product = self._repo.get_by_id(pk)
        if not product:
            return _not_found("Product")
        serializer = ProductSerializer(product, data=request.data)
        serializer.is_valid(raise_exception=True)
        product = self._repo.save(serializer.save())
        return Response(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /data/products/{pk}/"""
        if not self._repo.delete(pk):
            return _not_found("Product")
        return Response(status=status.HTTP_204_NO_CONTENT)


class InventoryDataViewSet(GenericViewSet):
    """Inventory rows, the stock-level subsets and the quantity-only update."""

    serializer_class = InventorySerializer
    filterset_class = InventoryFilter
    filter_backends = [DjangoFilterBackend]
    lookup_value_regex = r"[^/]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._repo = InventoryDjangoRepository()

    def get_queryset(self):
        return self._repo.queryset()

    def _many(self, rows) -> Response:
        return Response(InventorySerializer(rows, many=True).data)

    def list(self, request: Request) -> Response:
        """GET /data/inventory/?min_quantity=..&max_quantity=.."""
        return self._many(self.filter_queryset(self.get_queryset()))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /data/inventory/{pk}/"""
        inventory = self._repo.get_by_id(pk)
        if not inventory:
            return _not_found("Inventory")
        return Response(InventorySerializer(inventory).data)

    @action(detail=False, methods=["get"], url_path=r"product/(?P<product_id>[^/]+)")
    def by_product(self, request: Request, product_id: str | None = None) -> Response:
        """GET /data/inventory/product/{product_id}/"""
        inventory = self._repo.get_by_product_id(product_id or "")
        if not inventory:
            return _not_found("Inventory")
        return Response(InventorySerializer(inventory).data)

    @action(detail=False, methods=["get"], url_path="low-stock")
    def low_stock(self, request: Request) -> Response:
        """GET /data/inventory/low-stock/"""
        return self._many(self._repo.list_low_stock())

    @action(detail=False, methods=["get"], url_path="out-of-stock")
    def out_of_stock(self, request: Request) -> Response:
        """GET /data/inventory/out-of-stock/"""
        return self._many(self._repo.list_out_of_stock())

    def create(self, request: Request) -> Response:
        """POST /data/inventory/"""
        serializer = InventorySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        inventory = self._repo.save(serializer.save())
        return Response(InventorySerializer(inventory).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /data/inventory/{pk}/"""
        inventory = self._repo.get_by_id(pk)
        if not inventory:
            return _not_found("Inventory")
        serializer = InventorySerializer(inventory, data=request.data)
        serializer.is_valid(raise_exception=True)
        inventory = self._repo.save(serializer.save())
        return Response(InventorySerializer(inventory).data)

    @action(detail=True, methods=["put"], url_path="quantity")
    def quantity(self, request: Request, pk: str | None = None) -> Response:
        """PUT /data/inventory/{pk}/quantity/"""
        serializer = QuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        inventory = self._repo.update_quantity(pk, serializer.validated_data["quantity"])
        if not inventory:
            return _not_found("Inventory")
        return Response(InventorySerializer(inventory).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /data/inventory/{pk}/"""
        if not self._repo.delete(pk):
            return _not_found("Inventory")
        return Response(status=status.HTTP_204_NO_CONTENT)
