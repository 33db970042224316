"""Category orchestration service (Use Cases).

Business rules enforced here:
- Category name is required, non-blank, at most 100 characters.
- Category names are unique (checked against the store before writes).
- A category still referenced by products cannot be deleted; the check
  happens before the delete call is issued.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Dict, List
from uuid import UUID

import structlog

from modules.catalog.composer import compose_category, compose_products, index_by_product
from modules.catalog.dtos import CategoryRequest, CategoryView, ProductView
from modules.catalog.entities import Category, Product
from modules.catalog.exceptions import BusinessValidationError, CategoryNotFound
from modules.catalog.services.base import CatalogService
from modules.catalog.validators import validate_category_request

logger = structlog.get_logger(__name__)


class CategoryService(CatalogService):
    """Application service for Category use-cases."""

    entity_label = "Category"
    not_found_error = CategoryNotFound

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_categories(self) -> List[CategoryView]:
        logger.info("category.list")
        with self.remote("list_categories"):
            categories = self._gateway.list_categories()
            products = self._gateway.list_products() if categories else []
            inventories = index_by_product(self._gateway.list_inventory()) if products else {}

        by_category: Dict[UUID, List[Product]] = defaultdict(list)
        for product in products:
            by_category[product.category_id].append(product)
        return [
            compose_category(category, by_category.get(category.id, []), inventories)
            for category in categories
        ]

    def get_category(self, id: UUID | str) -> CategoryView:
        """Retrieve a category with its products.

        Raises:
            CategoryNotFound: if the category does not exist.
        """
        with self.remote("get_category", not_found=CategoryNotFound(f"Category not found with id: {id}")):
            category = self._gateway.get_category(id)
        return self._with_products(category)

    def get_category_by_name(self, name: str) -> CategoryView:
        """Retrieve a category by its unique name.

        Raises:
            CategoryNotFound: if no category has that name.
        """
        if not name or not name.strip():
            raise BusinessValidationError("Category name is required.")
        with self.remote(
            "get_category_by_name",
            not_found=CategoryNotFound(f"Category not found with name: {name}"),
        ):
            category = self._gateway.get_category_by_name(name.strip())
        return self._with_products(category)

    def products_in_category(self, id: UUID | str) -> List[ProductView]:
        """Products of a category, resolved through the category's name.

        Raises:
            CategoryNotFound: if the category does not exist.
        """
        with self.remote(
            "products_in_category",
            not_found=CategoryNotFound(f"Category not found with id: {id}"),
        ):
            category = self._gateway.get_category(id)
        with self.remote("products_in_category"):
            products = self._gateway.products_by_category(category.name)
            inventories = index_by_product(self._gateway.list_inventory()) if products else {}
        return compose_products(products, {category.id: category}, inventories)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_category(self, request: CategoryRequest) -> CategoryView:
        """Create a category.

        Raises:
            BusinessValidationError: invalid name or name already taken.
        """
        validate_category_request(request)
        name = request.name.strip()
        log = logger.bind(name=name)

        with self.remote("create_category"):
            if self._find(self._gateway.get_category_by_name, name) is not None:
                log.warning("category.duplicate_name")
                raise BusinessValidationError(f"Category '{name}' already exists.")
            category = self._gateway.create_category(
                {"name": name, "description": request.description}
            )

        log.info("category.created", category_id=str(category.id))
        return compose_category(category)

    def update_category(self, id: UUID | str, request: CategoryRequest) -> CategoryView:
        """Replace the name and description of a category.

        Raises:
            CategoryNotFound: if the category does not exist.
            BusinessValidationError: invalid name or name taken by another category.
        """
        validate_category_request(request)
        name = request.name.strip()
        log = logger.bind(category_id=str(id))
        category_missing = CategoryNotFound(f"Category not found with id: {id}")

        with self.remote("update_category", not_found=category_missing):
            existing = self._gateway.get_category(id)
            same_name = self._find(self._gateway.get_category_by_name, name)
            if same_name is not None and same_name.id != existing.id:
                log.warning("category.duplicate_name", name=name)
                raise BusinessValidationError(f"Category '{name}' already exists.")
            category = self._gateway.update_category(
                existing.id,
                existing.model_copy(update={"name": name, "description": request.description}),
            )

        log.info("category.updated")
        return self._with_products(category)

    def delete_category(self, id: UUID | str) -> None:
        """Delete a category that no product references.

        Raises:
            CategoryNotFound: if the category does not exist.
            BusinessValidationError: the category still has products.
        """
        log = logger.bind(category_id=str(id))
        category_missing = CategoryNotFound(f"Category not found with id: {id}")

        with self.remote("delete_category", not_found=category_missing):
            category = self._gateway.get_category(id)

        if category.product_ids:
            log.warning("category.delete_blocked", products=len(category.product_ids))
            raise BusinessValidationError(
                f"Category '{category.name}' cannot be deleted because it has "
                f"{len(category.product_ids)} associated product(s)."
            )

        with self.remote("delete_category", not_found=category_missing):
            self._gateway.delete_category(category.id)
        log.info("category.deleted")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _with_products(self, category: Category) -> CategoryView:
        with self.remote("category_products"):
            products = self._gateway.products_by_category(category.name)
            inventories = index_by_product(self._gateway.list_inventory()) if products else {}
        return compose_category(category, products, inventories)
