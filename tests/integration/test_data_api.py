"""Integration tests for the data-tier HTTP surface under ``/data/``."""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.datastore.models import Category, Inventory, Product

pytestmark = pytest.mark.integration


@pytest.fixture()
def tools():
    return Category.objects.create(name="Tools", description="Hand tools")


@pytest.fixture()
def hammer(tools):
    return Product.objects.create(name="Hammer", price=Decimal("9.99"), category=tools)


@pytest.fixture()
def hammer_stock(hammer):
    return Inventory.objects.create(product=hammer, quantity=5, minimum_quantity=10)


class TestCategoryEndpoints:
    def test_list_includes_product_ids(self, api_client, hammer, tools):
        response = api_client.get("/data/categories/")

        assert response.status_code == 200
        body = response.json()
        assert body[0]["name"] == "Tools"
        assert body[0]["product_ids"] == [str(hammer.id)]

    def test_get_by_name_is_case_insensitive(self, api_client, tools):
        response = api_client.get("/data/categories/name/tools/")

        assert response.status_code == 200
        assert response.json()["id"] == str(tools.id)

    def test_missing_category_is_404(self, api_client):
        response = api_client.get(f"/data/categories/{uuid4()}/")

        assert response.status_code == 404

    def test_invalid_id_is_404(self, api_client):
        response = api_client.get("/data/categories/not-a-uuid/")

        assert response.status_code == 404

    def test_create_and_update(self, api_client):
        created = api_client.post(
            "/data/categories/", {"name": "Garden", "description": ""}, format="json"
        )
        assert created.status_code == 201
        category_id = created.json()["id"]

        updated = api_client.put(
            f"/data/categories/{category_id}/",
            {"name": "Garden & Outdoor", "description": "Outside"},
            format="json",
        )

        assert updated.status_code == 200
        assert updated.json()["name"] == "Garden & Outdoor"

    def test_duplicate_name_is_400(self, api_client, tools):
        response = api_client.post("/data/categories/", {"name": "Tools"}, format="json")

        assert response.status_code == 400

    def test_delete_referenced_category_is_409(self, api_client, hammer, tools):
        response = api_client.delete(f"/data/categories/{tools.id}/")

        assert response.status_code == 409
        assert Category.objects.filter(id=tools.id).exists()

    def test_delete_empty_category(self, api_client, tools):
        response = api_client.delete(f"/data/categories/{tools.id}/")

        assert response.status_code == 204
        assert not Category.objects.exists()


class TestProductEndpoints:
    def test_wire_shape(self, api_client, hammer, tools):
        response = api_client.get(f"/data/products/{hammer.id}/")

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Hammer"
        assert body["price"] == "9.99"
        assert body["category_id"] == str(tools.id)

    def test_search_by_name(self, api_client, hammer, tools):
        Product.objects.create(name="Saw", price=Decimal("15.00"), category=tools)

        response = api_client.get("/data/products/search/", {"name": "ham"})

        assert [p["name"] for p in response.json()] == ["Hammer"]

    def test_by_category_name(self, api_client, hammer):
        response = api_client.get("/data/products/category/TOOLS/")

        assert [p["id"] for p in response.json()] == [str(hammer.id)]

    def test_price_range_is_inclusive(self, api_client, hammer, tools):
        Product.objects.create(name="Drill", price=Decimal("89.90"), category=tools)

        response = api_client.get("/data/products/price/", {"min": "9.99", "max": "50"})

        assert [p["name"] for p in response.json()] == ["Hammer"]

    def test_price_range_requires_decimals(self, api_client):
        response = api_client.get("/data/products/price/", {"min": "cheap", "max": "10"})

        assert response.status_code == 400

    @pytest.mark.parametrize("minimum", ["NaN", "Infinity", "-inf"])
    def test_price_range_rejects_non_finite(self, api_client, minimum):
        response = api_client.get("/data/products/price/", {"min": minimum, "max": "10"})

        assert response.status_code == 400

    def test_list_filters(self, api_client, hammer, tools):
        garden = Category.objects.create(name="Garden")
        Product.objects.create(name="Hose", price=Decimal("32.40"), category=garden)

        response = api_client.get("/data/products/", {"category": "garden", "max_price": "40"})

        assert [p["name"] for p in response.json()] == ["Hose"]

    def test_unknown_category_is_400(self, api_client):
        response = api_client.post(
            "/data/products/",
            {"name": "Ghost", "price": "1.00", "category_id": str(uuid4())},
            format="json",
        )

        assert response.status_code == 400

    def test_non_positive_price_is_400(self, api_client, tools):
        response = api_client.post(
            "/data/products/",
            {"name": "Free", "price": "0.00", "category_id": str(tools.id)},
            format="json",
        )

        assert response.status_code == 400

    def test_delete_cascades_inventory(self, api_client, hammer, hammer_stock):
        response = api_client.delete(f"/data/products/{hammer.id}/")

        assert response.status_code == 204
        assert not Inventory.objects.exists()


class TestInventoryEndpoints:
    def test_wire_shape(self, api_client, hammer_stock):
        response = api_client.get(f"/data/inventory/{hammer_stock.id}/")

        body = response.json()
        assert body["product_name"] == "Hammer"
        assert body["product_price"] == "9.99"
        assert body["quantity"] == 5
        assert body["minimum_quantity"] == 10
        assert "updated_at" in body

    def test_by_product(self, api_client, hammer, hammer_stock):
        response = api_client.get(f"/data/inventory/product/{hammer.id}/")

        assert response.json()["id"] == str(hammer_stock.id)

    def test_by_product_without_record_is_404(self, api_client, hammer):
        response = api_client.get(f"/data/inventory/product/{hammer.id}/")

        assert response.status_code == 404

    def test_low_and_out_of_stock(self, api_client, hammer_stock, tools):
        drill = Product.objects.create(name="Drill", price=Decimal("89.90"), category=tools)
        saw = Product.objects.create(name="Saw", price=Decimal("15.00"), category=tools)
        Inventory.objects.create(product=drill, quantity=0, minimum_quantity=2)
        Inventory.objects.create(product=saw, quantity=30, minimum_quantity=10)

        low = api_client.get("/data/inventory/low-stock/").json()
        out = api_client.get("/data/inventory/out-of-stock/").json()

        assert sorted(row["product_name"] for row in low) == ["Drill", "Hammer"]
        assert [row["product_name"] for row in out] == ["Drill"]

    def test_threshold_boundary_counts_as_low(self, api_client, hammer):
        Inventory.objects.create(product=hammer, quantity=10, minimum_quantity=10)

        low = api_client.get("/data/inventory/low-stock/").json()

        assert len(low) == 1

    def test_second_record_for_product_is_400(self, api_client, hammer, hammer_stock):
        response = api_client.post(
            "/data/inventory/",
            {"product_id": str(hammer.id), "quantity": 1, "minimum_quantity": 1},
            format="json",
        )

        assert response.status_code == 400

    def test_quantity_update(self, api_client, hammer_stock):
        response = api_client.put(
            f"/data/inventory/{hammer_stock.id}/quantity/", {"quantity": 42}, format="json"
        )

        assert response.status_code == 200
        hammer_stock.refresh_from_db()
        assert hammer_stock.quantity == 42
        assert hammer_stock.minimum_quantity == 10

    def test_negative_quantity_is_400(self, api_client, hammer_stock):
        response = api_client.put(
            f"/data/inventory/{hammer_stock.id}/quantity/", {"quantity": -1}, format="json"
        )

        assert response.status_code == 400

    def test_quantity_update_missing_row_is_404(self, api_client):
        response = api_client.put(
            f"/data/inventory/{uuid4()}/quantity/", {"quantity": 1}, format="json"
        )

        assert response.status_code == 404


class TestDataHealth:
    def test_health(self, api_client):
        response = api_client.get("/data/health/")

        assert response.status_code == 200
        assert response.json() == {"status": "up"}
