"""Report Aggregator: whole-catalog stock figures.

Reads inventory rows straight from the Store Gateway.  Valuation uses
the product price the data service reports next to each row; when a row
comes back without one, the product list is fetched once to fill the
gap.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Callable, Iterable, Mapping, Optional
from uuid import UUID

import structlog

from modules.catalog.composer import index_by_id
from modules.catalog.dtos import InventoryReport
from modules.catalog.entities import Inventory, Product
from modules.catalog.services.base import CatalogService

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")


def total_valuation(
    records: Iterable[Inventory],
    load_products: Optional[Callable[[], Iterable[Product]]] = None,
) -> Decimal:
    """Sum of ``price * quantity`` over ``records``, exact in ``Decimal``.

    ``load_products`` is called at most once, and only if some row lacks
    its product price.  Rows whose price stays unknown are skipped.
    """
    records = list(records)
    prices: Optional[Mapping[UUID, Product]] = None
    total = ZERO
    for record in records:
        price = record.product_price
        if price is None and load_products is not None:
            if prices is None:
                prices = index_by_id(load_products())
            product = prices.get(record.product_id)
            price = product.price if product is not None else None
        if price is None:
            logger.warning("report.price_unknown", product_id=str(record.product_id))
            continue
        total += price * record.quantity
    return total


class InventoryReportService(CatalogService):
    """Aggregate figures over the full inventory."""

    entity_label = "Inventory"

    def generate_inventory_report(self) -> InventoryReport:
        with self.remote("generate_inventory_report"):
            records = self._gateway.list_inventory()
            low_stock = self._gateway.low_stock_inventory()
            out_of_stock = self._gateway.out_of_stock_inventory()
            total_value = total_valuation(records, self._gateway.list_products)

        report = InventoryReport(
            total_products=len(records),
            low_stock_products=len(low_stock),
            out_of_stock_products=len(out_of_stock),
            total_value=total_value,
        )
        logger.info(
            "report.generated",
            total_products=report.total_products,
            low_stock=report.low_stock_products,
            out_of_stock=report.out_of_stock_products,
            total_value=str(report.total_value),
        )
        return report

    def calculate_total_valuation(self) -> Decimal:
        with self.remote("calculate_total_valuation"):
            records = self._gateway.list_inventory()
            total = total_valuation(records, self._gateway.list_products)
        logger.info("report.valuation", records=len(records), total_value=str(total))
        return total
