"""Catalog persistence models owned by the data tier.

Business rules enforced at the storage level:
- Category names are unique and at most 100 characters.
- Product price must be greater than zero.
- A product references exactly one category; a category that is still
  referenced cannot be removed (``on_delete=PROTECT``).
- Each product has at most one inventory row; inventory quantities and
  thresholds are non-negative.
"""

from __future__ import annotations

from decimal import Decimal

import structlog

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)

DEFAULT_MINIMUM_QUANTITY = 10


class Category(BaseModel):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True, default="")

    class Meta:
        db_table = "categories"
        ordering = ["name"]

    def clean(self) -> None:
        super().clean()
        if not self.name or not self.name.strip():
            raise ValidationError({"name": "Category name must not be blank."})

    def __str__(self) -> str:
        return self.name


class Product(BaseModel):
    """Product row.  ``category`` is required and protected from deletion."""

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name="products",
    )

    class Meta:
        db_table = "products"
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="products_price_positive",
            ),
        ]

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                category_id=str(self.category_id),
                name=self.name,
            )

    def __str__(self) -> str:
        return self.name


class Inventory(BaseModel):
    """Stock counters for one product.

    ``updated_at`` (inherited) is the last-updated timestamp.
    """

    product = models.OneToOneField(
        Product,
        on_delete=models.CASCADE,
        related_name="inventory",
    )
    quantity = models.PositiveIntegerField(default=0)
    minimum_quantity = models.PositiveIntegerField(default=DEFAULT_MINIMUM_QUANTITY)

    class Meta:
        db_table = "inventory"
        ordering = ["product__name"]
        indexes = [
            models.Index(fields=["quantity"], name="inventory_quantity_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.product_id}: {self.quantity}"
