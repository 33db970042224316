"""Data-tier repository interfaces.

Extend ``IRepository[T]`` with the secondary look-ups the data
service exposes: by name, by category, by price range, by product and
the stock-level subsets.
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.datastore.models import Category, Inventory, Product


class ICategoryRepository(IRepository["Category"]):
    """Repository contract for categories."""

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Category]:
        """Retrieve a category by its exact (case-insensitive) name."""


class IProductRepository(IRepository["Product"]):
    """Repository contract for products."""

    @abstractmethod
    def list_by_category_name(self, name: str) -> List[Product]:
        """Products whose category has the given name."""

    @abstractmethod
    def search_by_name(self, fragment: str) -> List[Product]:
        """Products whose name contains ``fragment`` (case-insensitive)."""

    @abstractmethod
    def list_by_price_range(self, minimum: Decimal, maximum: Decimal) -> List[Product]:
        """Products priced within ``[minimum, maximum]``."""


class IInventoryRepository(IRepository["Inventory"]):
    """Repository contract for inventory rows."""

    @abstractmethod
    def get_by_product_id(self, product_id: str) -> Optional[Inventory]:
        """Retrieve the inventory row of a product."""

    @abstractmethod
    def list_low_stock(self) -> List[Inventory]:
        """Rows whose quantity is at or below their minimum."""

    @abstractmethod
    def list_out_of_stock(self) -> List[Inventory]:
        """Rows whose quantity is zero."""

    @abstractmethod
    def update_quantity(self, id: str, quantity: int) -> Optional[Inventory]:
        """Set the quantity of a row; ``None`` if the row does not exist."""
