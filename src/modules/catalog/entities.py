"""Transient copies of data-service records.

Parsed from the data service's JSON by the Store Gateway and held only
for the duration of one request.  Cross-entity references are plain ids
(``category_id``, ``product_id``, ``product_ids``); the orchestration
services resolve them with explicit look-ups.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Category(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    description: str = ""
    product_ids: List[UUID] = Field(default_factory=list)

    def to_payload(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description}


class Product(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID
    name: str
    description: str = ""
    price: Decimal
    category_id: UUID

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "price": str(self.price),
            "category_id": str(self.category_id),
        }


class Inventory(BaseModel):
    """Stock counters of one product.

    ``product_name`` and ``product_price`` are read-only copies the data
    service reports alongside the row; they are never written back.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID
    product_id: UUID
    quantity: int
    minimum_quantity: int
    product_name: Optional[str] = None
    product_price: Optional[Decimal] = None
    updated_at: Optional[datetime] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "product_id": str(self.product_id),
            "quantity": self.quantity,
            "minimum_quantity": self.minimum_quantity,
        }
