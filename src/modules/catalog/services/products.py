"""Product orchestration service (Use Cases).

Composes products with their category name and stock counters.

Business rules enforced here:
- Price must be greater than zero; stock and minimum stock non-negative.
- The referenced category must exist at write time (fetched first).
- Every product created here gets a companion inventory record
  (requested stock, default threshold when none is given).
- Updating a product with a stock value upserts its inventory record.

The product write and the inventory write are two independent calls.
If the second one fails the caller sees ``CommunicationFailure`` and the
product stays without inventory; nothing is rolled back.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List
from uuid import UUID

import structlog

from modules.catalog.composer import compose_product, compose_products, index_by_id, index_by_product
from modules.catalog.dtos import ProductRequest, ProductView
from modules.catalog.entities import Inventory, Product
from modules.catalog.exceptions import CategoryNotFound, ProductNotFound
from modules.catalog.gateway import StoreGatewayError, StoreNotFound
from modules.catalog.services.base import CatalogService, default_minimum_stock
from modules.catalog.validators import validate_price_range, validate_product_request

logger = structlog.get_logger(__name__)


class ProductService(CatalogService):
    """Application service for Product use-cases."""

    entity_label = "Product"
    not_found_error = ProductNotFound

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _compose_many(self, products: List[Product]) -> List[ProductView]:
        """Join products with categories and inventory fetched once each."""
        if not products:
            return []
        with self.remote("compose_products"):
            categories = index_by_id(self._gateway.list_categories())
            inventories = index_by_product(self._gateway.list_inventory())
        return compose_products(products, categories, inventories)

    def list_products(self) -> List[ProductView]:
        logger.info("product.list")
        with self.remote("list_products"):
            products = self._gateway.list_products()
        return self._compose_many(products)

    def get_product(self, id: UUID | str) -> ProductView:
        """Retrieve a single product.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        with self.remote("get_product", not_found=ProductNotFound(f"Product not found with id: {id}")):
            product = self._gateway.get_product(id)
        with self.remote("get_product"):
            category = self._find(self._gateway.get_category, product.category_id)
            inventory = self._find(self._gateway.get_inventory_by_product, product.id)
        logger.info("product.retrieved", product_id=str(id))
        return compose_product(product, category, inventory)

    def search_by_name(self, fragment: str) -> List[ProductView]:
        logger.info("product.search_by_name", fragment=fragment)
        with self.remote("search_by_name"):
            products = self._gateway.products_by_name(fragment)
        return self._compose_many(products)

    def list_by_category(self, category_name: str) -> List[ProductView]:
        logger.info("product.list_by_category", category=category_name)
        with self.remote("list_by_category"):
            products = self._gateway.products_by_category(category_name)
        return self._compose_many(products)

    def search_by_price_range(self, minimum: Decimal, maximum: Decimal) -> List[ProductView]:
        """Products priced within ``[minimum, maximum]``.

        Raises:
            BusinessValidationError: negative bounds or ``minimum > maximum``.
        """
        validate_price_range(minimum, maximum)
        logger.info("product.search_by_price", minimum=str(minimum), maximum=str(maximum))
        with self.remote("search_by_price_range"):
            products = self._gateway.products_by_price_range(minimum, maximum)
        return self._compose_many(products)

    def low_stock_products(self) -> List[ProductView]:
        with self.remote("low_stock_products"):
            return self._stocked_product_views(self._gateway.low_stock_inventory())

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_product(self, request: ProductRequest) -> ProductView:
        """Create a product and its companion inventory record.

        Raises:
            BusinessValidationError: the request breaks a product rule.
            CategoryNotFound: the referenced category does not exist.
            CommunicationFailure: the data service failed at any step.
        """
        validate_product_request(request)
        log = logger.bind(name=request.name, category_id=str(request.category_id))

        with self.remote(
            "create_product",
            not_found=CategoryNotFound(f"Category not found with id: {request.category_id}"),
        ):
            category = self._gateway.get_category(request.category_id)

        with self.remote("create_product"):
            product = self._gateway.create_product(
                {
                    "name": request.name.strip(),
                    "description": request.description,
                    "price": str(request.price),
                    "category_id": str(category.id),
                }
            )
            log = log.bind(product_id=str(product.id))
            try:
                inventory = self._gateway.create_inventory(
                    {
                        "product_id": str(product.id),
                        "quantity": request.stock if request.stock is not None else 0,
                        "minimum_quantity": self._minimum_for(request),
                    }
                )
            except StoreGatewayError:
                log.error("product.created_without_inventory")
                raise

        log.info("product.created", stock=inventory.quantity)
        return compose_product(product, category, inventory)

    def update_product(self, id: UUID | str, request: ProductRequest) -> ProductView:
        """Replace the mutable fields of a product.

        When ``request.stock`` is given, the inventory record is updated,
        or created if the product has none.

        Raises:
            ProductNotFound: if the product does not exist.
            CategoryNotFound: the new category does not exist.
        """
        validate_product_request(request)
        log = logger.bind(product_id=str(id))
        product_missing = ProductNotFound(f"Product not found with id: {id}")

        with self.remote("update_product", not_found=product_missing):
            existing = self._gateway.get_product(id)

        with self.remote(
            "update_product",
            not_found=CategoryNotFound(f"Category not found with id: {request.category_id}"),
        ):
            category = self._gateway.get_category(request.category_id)

        merged = existing.model_copy(
            update={
                "name": request.name.strip(),
                "description": request.description,
                "price": request.price,
                "category_id": category.id,
            }
        )
        with self.remote("update_product", not_found=product_missing):
            product = self._gateway.update_product(existing.id, merged)

        with self.remote("update_product"):
            if request.stock is not None:
                inventory = self._upsert_inventory(product, request)
            else:
                inventory = self._find(self._gateway.get_inventory_by_product, product.id)

        log.info("product.updated")
        return compose_product(product, category, inventory)

    def delete_product(self, id: UUID | str) -> None:
        """Delete a product; its inventory record goes with it in the store.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        with self.remote("delete_product", not_found=ProductNotFound(f"Product not found with id: {id}")):
            product = self._gateway.get_product(id)
            self._gateway.delete_product(product.id)
        logger.info("product.deleted", product_id=str(id))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _minimum_for(request: ProductRequest) -> int:
        if request.minimum_stock is not None:
            return request.minimum_stock
        return default_minimum_stock()

    def _upsert_inventory(self, product: Product, request: ProductRequest) -> Inventory:
        """Update the product's inventory record, creating it when absent."""
        try:
            current = self._gateway.get_inventory_by_product(product.id)
        except StoreNotFound:
            logger.info("product.inventory_created_on_update", product_id=str(product.id))
            return self._gateway.create_inventory(
                {
                    "product_id": str(product.id),
                    "quantity": request.stock,
                    "minimum_quantity": self._minimum_for(request),
                }
            )
        minimum = (
            request.minimum_stock
            if request.minimum_stock is not None
            else current.minimum_quantity
        )
        return self._gateway.update_inventory(
            current.id,
            current.model_copy(update={"quantity": request.stock, "minimum_quantity": minimum}),
        )
