"""Entity Composer: raw records in, view DTOs out.

Pure functions.  Every record a view needs must already be in hand;
nothing here talks to the data service.  Missing optional references
degrade to ``None`` fields instead of failing.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional, Protocol, TypeVar
from uuid import UUID

from modules.catalog.dtos import CategoryView, InventoryView, ProductView
from modules.catalog.entities import Category, Inventory, Product


def is_low_stock(quantity: int, minimum_quantity: int) -> bool:
    """Low stock includes the equal case, so an empty shelf is always low."""
    return quantity <= minimum_quantity


def is_out_of_stock(quantity: int) -> bool:
    return quantity == 0


def compose_product(
    product: Product,
    category: Optional[Category] = None,
    inventory: Optional[Inventory] = None,
) -> ProductView:
    return ProductView(
        id=product.id,
        name=product.name,
        description=product.description,
        price=product.price,
        category_id=product.category_id,
        category_name=category.name if category is not None else None,
        stock=inventory.quantity if inventory is not None else None,
        low_stock=(
            is_low_stock(inventory.quantity, inventory.minimum_quantity)
            if inventory is not None
            else None
        ),
    )


def compose_products(
    products: Iterable[Product],
    categories: Mapping[UUID, Category],
    inventories: Mapping[UUID, Inventory],
) -> list[ProductView]:
    """Compose many products against look-up tables keyed by id."""
    return [
        compose_product(
            product,
            categories.get(product.category_id),
            inventories.get(product.id),
        )
        for product in products
    ]


def compose_category(
    category: Category,
    products: Iterable[Product] = (),
    inventories: Optional[Mapping[UUID, Inventory]] = None,
) -> CategoryView:
    inventories = inventories or {}
    views = [
        compose_product(product, category, inventories.get(product.id))
        for product in products
    ]
    return CategoryView(
        id=category.id,
        name=category.name,
        description=category.description,
        product_count=len(views),
        products=views,
    )


def compose_inventory(
    inventory: Inventory, product: Optional[Product] = None
) -> InventoryView:
    return InventoryView(
        id=inventory.id,
        product_id=inventory.product_id,
        product_name=product.name if product is not None else inventory.product_name,
        quantity=inventory.quantity,
        minimum_quantity=inventory.minimum_quantity,
        low_stock=is_low_stock(inventory.quantity, inventory.minimum_quantity),
        out_of_stock=is_out_of_stock(inventory.quantity),
        updated_at=inventory.updated_at,
    )


class _Identified(Protocol):
    @property
    def id(self) -> UUID: ...


R = TypeVar("R", bound=_Identified)


def index_by_id(records: Iterable[R]) -> dict[UUID, R]:
    return {record.id: record for record in records}


def index_by_product(records: Iterable[Inventory]) -> dict[UUID, Inventory]:
    return {record.product_id: record for record in records}
