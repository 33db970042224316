"""Inventory orchestration service (Use Cases).

Business rules enforced here:
- Quantities and thresholds are non-negative (checked before any call).
- An inventory record always references an existing product, and a
  product has at most one inventory record.
- Stock updates address the record through its product id.
"""

from __future__ import annotations

from typing import List
from uuid import UUID

import structlog

from modules.catalog.composer import compose_inventory, index_by_id
from modules.catalog.dtos import InventoryRequest, InventoryView, ProductView
from modules.catalog.entities import Inventory
from modules.catalog.exceptions import BusinessValidationError, InventoryNotFound, ProductNotFound
from modules.catalog.services.base import CatalogService, default_minimum_stock
from modules.catalog.validators import validate_inventory_request, validate_stock_quantity

logger = structlog.get_logger(__name__)


class InventoryService(CatalogService):
    """Application service for Inventory use-cases."""

    entity_label = "Inventory"
    not_found_error = InventoryNotFound

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_inventory(self) -> List[InventoryView]:
        logger.info("inventory.list")
        with self.remote("list_inventory"):
            records = self._gateway.list_inventory()
            products = index_by_id(self._gateway.list_products()) if records else {}
        return [
            compose_inventory(record, products.get(record.product_id))
            for record in records
        ]

    def get_inventory(self, id: UUID | str) -> InventoryView:
        """Retrieve an inventory record.

        Raises:
            InventoryNotFound: if the record does not exist.
        """
        with self.remote("get_inventory", not_found=InventoryNotFound(f"Inventory not found with id: {id}")):
            record = self._gateway.get_inventory(id)
        return self._with_product(record)

    def get_by_product(self, product_id: UUID | str) -> InventoryView:
        """Retrieve the inventory record of a product.

        Raises:
            InventoryNotFound: if the product has no inventory record.
        """
        with self.remote(
            "get_by_product",
            not_found=InventoryNotFound(f"Inventory not found for product: {product_id}"),
        ):
            record = self._gateway.get_inventory_by_product(product_id)
        return self._with_product(record)

    def low_stock_products(self) -> List[ProductView]:
        """Products whose quantity is at or below their threshold."""
        with self.remote("low_stock_products"):
            return self._stocked_product_views(self._gateway.low_stock_inventory())

    def out_of_stock_products(self) -> List[ProductView]:
        with self.remote("out_of_stock_products"):
            return self._stocked_product_views(self._gateway.out_of_stock_inventory())

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_inventory(self, request: InventoryRequest) -> InventoryView:
        """Create the inventory record of a product.

        Raises:
            BusinessValidationError: invalid counters or the product already
                has an inventory record.
            ProductNotFound: the referenced product does not exist.
        """
        validate_inventory_request(request)
        log = logger.bind(product_id=str(request.product_id))

        with self.remote(
            "create_inventory",
            not_found=ProductNotFound(f"Product not found with id: {request.product_id}"),
        ):
            product = self._gateway.get_product(request.product_id)

        with self.remote("create_inventory"):
            if self._find(self._gateway.get_inventory_by_product, product.id) is not None:
                log.warning("inventory.duplicate_product")
                raise BusinessValidationError(
                    f"Product '{product.name}' already has an inventory record."
                )
            minimum = (
                request.minimum_quantity
                if request.minimum_quantity is not None
                else default_minimum_stock()
            )
            record = self._gateway.create_inventory(
                {
                    "product_id": str(product.id),
                    "quantity": request.quantity,
                    "minimum_quantity": minimum,
                }
            )

        log.info("inventory.created", inventory_id=str(record.id), quantity=record.quantity)
        return compose_inventory(record, product)

    def update_inventory(self, id: UUID | str, request: InventoryRequest) -> InventoryView:
        """Replace the counters (and optionally the product) of a record.

        Raises:
            InventoryNotFound: if the record does not exist.
            ProductNotFound: a new product reference does not exist.
        """
        validate_inventory_request(request)
        log = logger.bind(inventory_id=str(id))
        inventory_missing = InventoryNotFound(f"Inventory not found with id: {id}")

        with self.remote("update_inventory", not_found=inventory_missing):
            existing = self._gateway.get_inventory(id)

        with self.remote(
            "update_inventory",
            not_found=ProductNotFound(f"Product not found with id: {request.product_id}"),
        ):
            product = self._gateway.get_product(request.product_id)

        merged = existing.model_copy(
            update={
                "product_id": product.id,
                "quantity": request.quantity,
                "minimum_quantity": (
                    request.minimum_quantity
                    if request.minimum_quantity is not None
                    else existing.minimum_quantity
                ),
            }
        )
        with self.remote("update_inventory", not_found=inventory_missing):
            record = self._gateway.update_inventory(existing.id, merged)

        log.info("inventory.updated", quantity=record.quantity)
        return compose_inventory(record, product)

    def update_stock(self, product_id: UUID | str, quantity: int) -> InventoryView:
        """Set the quantity of a product's inventory record.

        Raises:
            BusinessValidationError: ``quantity`` is negative.
            InventoryNotFound: the product has no inventory record.
        """
        validate_stock_quantity(quantity)
        log = logger.bind(product_id=str(product_id), quantity=quantity)

        with self.remote(
            "update_stock",
            not_found=InventoryNotFound(f"Inventory not found for product: {product_id}"),
        ):
            current = self._gateway.get_inventory_by_product(product_id)
            record = self._gateway.update_inventory_quantity(current.id, quantity)

        log.info("inventory.stock_updated", previous=current.quantity)
        return compose_inventory(record)

    def delete_inventory(self, id: UUID | str) -> None:
        """Delete an inventory record.

        Raises:
            InventoryNotFound: if the record does not exist.
        """
        with self.remote("delete_inventory", not_found=InventoryNotFound(f"Inventory not found with id: {id}")):
            record = self._gateway.get_inventory(id)
            self._gateway.delete_inventory(record.id)
        logger.info("inventory.deleted", inventory_id=str(id))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _with_product(self, record: Inventory) -> InventoryView:
        with self.remote("inventory_product"):
            product = self._find(self._gateway.get_product, record.product_id)
        return compose_inventory(record, product)
