"""Data-tier DRF serializers.

These define the wire format the Store Gateway consumes.  References
between rows travel as plain ids (``category_id``, ``product_id``,
``product_ids``); inventory rows also carry the referenced product's
name and price as read-only fields.
"""

from __future__ import annotations

from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from modules.datastore.models import Category, Inventory, Product


class CategorySerializer(serializers.ModelSerializer):
    product_ids = serializers.PrimaryKeyRelatedField(
        source="products", many=True, read_only=True
    )

    class Meta:
        model = Category
        fields = ["id", "name", "description", "product_ids", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_name(self, value: str) -> str:
        if not value.strip():
            raise serializers.ValidationError("Category name must not be blank.")
        return value.strip()


class ProductSerializer(serializers.ModelSerializer):
    category_id = serializers.PrimaryKeyRelatedField(
        source="category", queryset=Category.objects.all()
    )

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "category_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


class InventorySerializer(serializers.ModelSerializer):
    product_id = serializers.PrimaryKeyRelatedField(
        source="product",
        queryset=Product.objects.all(),
        validators=[
            UniqueValidator(
                queryset=Inventory.objects.all(),
                message="This product already has an inventory record.",
            )
        ],
    )
    product_name = serializers.CharField(source="product.name", read_only=True)
    product_price = serializers.DecimalField(
        source="product.price", max_digits=12, decimal_places=2, read_only=True
    )

    class Meta:
        model = Inventory
        fields = [
            "id",
            "product_id",
            "product_name",
            "product_price",
            "quantity",
            "minimum_quantity",
            "updated_at",
        ]
        read_only_fields = ["id", "updated_at"]


class QuantitySerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=0)
