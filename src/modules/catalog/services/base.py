"""Shared orchestration template.

Every catalog use case follows the same shape: validate the request,
call the Store Gateway one or more times, compose the records into a
view.  ``CatalogService.remote`` applies the uniform error mapping at
each remote call site:

- ``StoreNotFound``     -> the entity-specific ``*NotFound``
- ``StoreRejected``     -> ``BusinessValidationError``
- ``StoreUnavailable``  -> ``CommunicationFailure``
- ``BusinessValidationError`` raised inside the block propagates unchanged.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, ClassVar, Iterable, Iterator, List, Optional, Type, TypeVar

import structlog
from django.conf import settings

from modules.catalog.composer import compose_product, index_by_id
from modules.catalog.dtos import ProductView
from modules.catalog.entities import Inventory
from modules.catalog.exceptions import (
    BusinessValidationError,
    CommunicationFailure,
    EntityNotFound,
)
from modules.catalog.gateway import (
    StoreGateway,
    StoreNotFound,
    StoreRejected,
    StoreUnavailable,
)

logger = structlog.get_logger(__name__)

T = TypeVar("T")

COMMUNICATION_FAILURE_MESSAGE = "Error communicating with the data service."
REJECTED_MESSAGE = "The data service rejected the request"


def default_minimum_stock() -> int:
    return settings.DEFAULT_MINIMUM_STOCK


class CatalogService:
    """Base for the product, category, inventory and report services.

    Receives the ``StoreGateway`` via constructor injection.
    """

    entity_label: ClassVar[str] = "Entity"
    not_found_error: ClassVar[Type[EntityNotFound]] = EntityNotFound

    def __init__(self, gateway: StoreGateway) -> None:
        self._gateway = gateway

    @contextmanager
    def remote(
        self, operation: str, *, not_found: Optional[EntityNotFound] = None
    ) -> Iterator[None]:
        """Translate gateway outcomes raised inside the block into domain errors."""
        try:
            yield
        except StoreNotFound as exc:
            error = not_found or self.not_found_error(f"{self.entity_label} not found.")
            logger.warning(
                "store.not_found_mapped",
                operation=operation,
                path=exc.path,
                error=type(error).__name__,
            )
            raise error from exc
        except StoreRejected as exc:
            logger.warning(
                "store.rejected_mapped",
                operation=operation,
                path=exc.path,
                status_code=exc.status_code,
            )
            raise BusinessValidationError(f"{REJECTED_MESSAGE}: {exc}") from exc
        except StoreUnavailable as exc:
            logger.error(
                "store.unavailable",
                operation=operation,
                path=exc.path,
                status_code=exc.status_code,
            )
            raise CommunicationFailure(COMMUNICATION_FAILURE_MESSAGE) from exc

    @staticmethod
    def _find(fetch: Callable[..., T], *args) -> Optional[T]:
        """Call ``fetch`` and treat a missing record as ``None``."""
        try:
            return fetch(*args)
        except StoreNotFound:
            return None

    def _stocked_product_views(self, inventories: Iterable[Inventory]) -> List[ProductView]:
        """Product views for a set of inventory rows (low / out of stock lists).

        Products and categories are fetched once and joined in memory.
        Call inside a ``remote`` block.
        """
        inventories = list(inventories)
        if not inventories:
            return []
        products = index_by_id(self._gateway.list_products())
        categories = index_by_id(self._gateway.list_categories())
        views = []
        for inventory in inventories:
            product = products.get(inventory.product_id)
            if product is None:
                logger.warning(
                    "inventory.orphaned",
                    inventory_id=str(inventory.id),
                    product_id=str(inventory.product_id),
                )
                continue
            views.append(
                compose_product(product, categories.get(product.category_id), inventory)
            )
        return views
