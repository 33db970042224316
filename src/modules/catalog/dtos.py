"""Catalog DTOs for the orchestration layer.

Framework-agnostic data transfer objects using Pydantic v2.
Request DTOs only coerce types (a null description becomes blank);
business rules are checked by ``modules.catalog.validators`` so that
every violation surfaces as a ``BusinessValidationError``.  View DTOs
are the composed, read-only shapes returned to callers.  All DTOs are
immutable (``frozen=True``).
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class ProductRequest(BaseModel):
    """Create/update payload for a product.

    ``stock`` and ``minimum_stock`` feed the companion inventory record.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    description: str = ""
    price: Optional[Decimal] = None
    category_id: Optional[UUID] = None
    stock: Optional[int] = None
    minimum_stock: Optional[int] = None

    @field_validator("description", mode="before")
    @classmethod
    def null_description_is_blank(cls, v: Optional[str]) -> str:
        return "" if v is None else v


class CategoryRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    description: str = ""

    @field_validator("description", mode="before")
    @classmethod
    def null_description_is_blank(cls, v: Optional[str]) -> str:
        return "" if v is None else v


class InventoryRequest(BaseModel):
    """Create/update payload for an inventory record."""

    model_config = ConfigDict(frozen=True)

    product_id: Optional[UUID] = None
    quantity: int = 0
    minimum_quantity: Optional[int] = None


class StockUpdateRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    quantity: int


# ---------------------------------------------------------------------------
# Output DTOs (views)
# ---------------------------------------------------------------------------


class ProductView(BaseModel):
    """Product with its category name and stock counters.

    ``stock`` and ``low_stock`` are ``None`` when the product has no
    inventory record.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    description: str
    price: Decimal
    category_id: UUID
    category_name: Optional[str] = None
    stock: Optional[int] = None
    low_stock: Optional[bool] = None


class CategoryView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    description: str
    product_count: int
    products: List[ProductView] = Field(default_factory=list)


class InventoryView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    product_id: UUID
    product_name: Optional[str] = None
    quantity: int
    minimum_quantity: int
    low_stock: bool
    out_of_stock: bool
    updated_at: Optional[datetime] = None


class InventoryReport(BaseModel):
    """Aggregate stock figures; ``total_value`` is an exact decimal sum."""

    model_config = ConfigDict(frozen=True)

    total_products: int
    low_stock_products: int
    out_of_stock_products: int
    total_value: Decimal
