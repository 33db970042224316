"""Invariant checks run before any remote call.

Each function raises ``BusinessValidationError`` with a human-readable
reason on the first violated rule and returns ``None`` otherwise.  The
limits mirror the data-tier columns so that a request accepted here is
never refused by the store.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from modules.catalog.dtos import CategoryRequest, InventoryRequest, ProductRequest
from modules.catalog.exceptions import BusinessValidationError

PRODUCT_NAME_MAX_LENGTH = 255
CATEGORY_NAME_MAX_LENGTH = 100
PRICE_DECIMAL_PLACES = 2
PRICE_MAX = Decimal("9999999999.99")
QUANTITY_MAX = 2147483647


def _require_quantity(value: Optional[int], label: str) -> None:
    if value is None:
        return
    if value < 0:
        raise BusinessValidationError(f"{label} cannot be negative.")
    if value > QUANTITY_MAX:
        raise BusinessValidationError(f"{label} cannot exceed {QUANTITY_MAX}.")


def _validate_price(price: Decimal) -> None:
    if not price.is_finite():
        raise BusinessValidationError("Price must be a finite number.")
    if price <= 0:
        raise BusinessValidationError("Price must be greater than zero.")
    if price > PRICE_MAX:
        raise BusinessValidationError(f"Price cannot exceed {PRICE_MAX}.")
    if price.as_tuple().exponent < -PRICE_DECIMAL_PLACES:
        raise BusinessValidationError(
            f"Price cannot have more than {PRICE_DECIMAL_PLACES} decimal places."
        )


def validate_product_request(request: ProductRequest) -> None:
    if not request.name or not request.name.strip():
        raise BusinessValidationError("Product name is required.")
    if len(request.name.strip()) > PRODUCT_NAME_MAX_LENGTH:
        raise BusinessValidationError(
            f"Product name cannot exceed {PRODUCT_NAME_MAX_LENGTH} characters."
        )
    if request.price is None:
        raise BusinessValidationError("Product price is required.")
    _validate_price(request.price)
    _require_quantity(request.stock, "Stock")
    _require_quantity(request.minimum_stock, "Minimum stock")
    if request.category_id is None:
        raise BusinessValidationError("Category is required.")


def validate_category_request(request: CategoryRequest) -> None:
    if request.name is None or not request.name.strip():
        raise BusinessValidationError("Category name is required.")
    if len(request.name.strip()) > CATEGORY_NAME_MAX_LENGTH:
        raise BusinessValidationError(
            f"Category name cannot exceed {CATEGORY_NAME_MAX_LENGTH} characters."
        )


def validate_stock_quantity(quantity: int) -> None:
    _require_quantity(quantity, "Stock quantity")


def validate_inventory_request(request: InventoryRequest) -> None:
    if request.product_id is None:
        raise BusinessValidationError("Product is required.")
    validate_stock_quantity(request.quantity)
    _require_quantity(request.minimum_quantity, "Minimum stock")


def validate_price_range(minimum: Decimal, maximum: Decimal) -> None:
    if not minimum.is_finite() or not maximum.is_finite():
        raise BusinessValidationError("Prices must be finite numbers.")
    if minimum < 0 or maximum < 0:
        raise BusinessValidationError("Prices cannot be negative.")
    if minimum > maximum:
        raise BusinessValidationError(
            "Minimum price cannot be greater than maximum price."
        )
