"""Django ORM implementations of the data-tier repositories.

Error handling follows the Null Object pattern: methods return ``None``
(or ``False``) instead of raising HTTP-level exceptions; the views
decide how to translate a missing row into a response.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

import structlog

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F, QuerySet

from modules.datastore.models import Category, Inventory, Product
from modules.datastore.repositories.interfaces import (
    ICategoryRepository,
    IInventoryRepository,
    IProductRepository,
)

logger = structlog.get_logger(__name__)


class CategoryDjangoRepository(ICategoryRepository):
    """Concrete Category repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Category]:
        """Retrieve a category (with its product ids) by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Category.objects.prefetch_related("products").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_name(self, name: str) -> Optional[Category]:
        return (
            Category.objects.prefetch_related("products")
            .filter(name__iexact=name.strip())
            .first()
        )

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Category]:
        queryset = Category.objects.prefetch_related("products")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Category) -> Category:
        """Persist (create or update) a category."""
        entity.save()
        logger.info("category.saved", category_id=str(entity.id), name=entity.name)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete a category.

        Returns ``False`` if no category exists with the given ID.
        """
        category = self.get_by_id(id)
        if not category:
            return False
        category.delete()
        logger.info("category.deleted", category_id=str(id))
        return True


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def queryset(self) -> QuerySet[Product]:
        """Base queryset for callers that narrow it further (filter sets)."""
        return Product.objects.select_related("category")

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"category__name__iexact": "tools"}
            {"name__icontains": "hammer"}
        """
        queryset = self.queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_by_category_name(self, name: str) -> List[Product]:
        return self.list({"category__name__iexact": name.strip()})

    def search_by_name(self, fragment: str) -> List[Product]:
        return self.list({"name__icontains": fragment})

    def list_by_price_range(self, minimum: Decimal, maximum: Decimal) -> List[Product]:
        return self.list({"price__gte": minimum, "price__lte": maximum})

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info("product.saved", product_id=str(entity.id), name=entity.name)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete a product (its inventory row goes with it)."""
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.deleted", product_id=str(id))
        return True


class InventoryDjangoRepository(IInventoryRepository):
    """Concrete Inventory repository backed by Django ORM."""

    def queryset(self) -> QuerySet[Inventory]:
        """Base queryset for callers that narrow it further (filter sets)."""
        return Inventory.objects.select_related("product")

    def get_by_id(self, id: str) -> Optional[Inventory]:
        try:
            return self.queryset().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_product_id(self, product_id: str) -> Optional[Inventory]:
        try:
            return self.queryset().filter(product_id=product_id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Inventory]:
        queryset = self.queryset()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_low_stock(self) -> List[Inventory]:
        return self.list({"quantity__lte": F("minimum_quantity")})

    def list_out_of_stock(self) -> List[Inventory]:
        return self.list({"quantity": 0})

    @transaction.atomic
    def save(self, entity: Inventory) -> Inventory:
        """Persist (create or update) an inventory row."""
        entity.save()
        logger.info(
            "inventory.saved",
            inventory_id=str(entity.id),
            product_id=str(entity.product_id),
            quantity=entity.quantity,
        )
        return entity

    @transaction.atomic
    def update_quantity(self, id: str, quantity: int) -> Optional[Inventory]:
        inventory = self.get_by_id(id)
        if not inventory:
            return None
        inventory.quantity = quantity
        inventory.save(update_fields=["quantity"])
        logger.info(
            "inventory.quantity_updated",
            inventory_id=str(id),
            quantity=quantity,
        )
        return inventory

    @transaction.atomic
    def delete(self, id: str) -> bool:
        inventory = self.get_by_id(id)
        if not inventory:
            return False
        inventory.delete()
        logger.info("inventory.deleted", inventory_id=str(id))
        return True
