"""Unit tests for ProductService.

Covers:
- get_product: composition, not found, missing references.
- list / search queries: one category and one inventory fetch per list.
- create_product: category fetched first, companion inventory record,
  default threshold, remote failures.
- update_product: merge, inventory upsert.
- delete_product: happy path, not found.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.catalog.dtos import ProductRequest
from modules.catalog.exceptions import (
    BusinessValidationError,
    CategoryNotFound,
    CommunicationFailure,
    ProductNotFound,
)
from modules.catalog.gateway import StoreNotFound, StoreRejected, StoreUnavailable
from modules.catalog.services import ProductService

pytestmark = pytest.mark.unit


@pytest.fixture()
def service(gateway):
    return ProductService(gateway)


@pytest.fixture()
def tools(make_category):
    return make_category(name="Tools")


def _request(category_id, **overrides) -> ProductRequest:
    defaults = {
        "name": "Hammer",
        "description": "Claw hammer",
        "price": Decimal("9.99"),
        "category_id": category_id,
        "stock": 5,
        "minimum_stock": 10,
    }
    defaults.update(overrides)
    return ProductRequest(**defaults)


# ===========================================================================
# get_product
# ===========================================================================


class TestGetProduct:
    def test_composes_category_and_stock(self, service, gateway, tools, make_product, make_inventory):
        hammer = make_product(category_id=tools.id)
        gateway.get_product.return_value = hammer
        gateway.get_category.return_value = tools
        gateway.get_inventory_by_product.return_value = make_inventory(
            product_id=hammer.id, quantity=5, minimum_quantity=10
        )

        view = service.get_product(hammer.id)

        assert view.name == "Hammer"
        assert view.category_name == "Tools"
        assert view.stock == 5
        assert view.low_stock is True

    def test_not_found(self, service, gateway):
        gateway.get_product.side_effect = StoreNotFound("missing")
        product_id = uuid4()

        with pytest.raises(ProductNotFound, match=str(product_id)):
            service.get_product(product_id)

    def test_missing_inventory_yields_none(self, service, gateway, tools, make_product):
        gateway.get_product.return_value = make_product(category_id=tools.id)
        gateway.get_category.return_value = tools
        gateway.get_inventory_by_product.side_effect = StoreNotFound("missing")

        view = service.get_product(uuid4())

        assert view.stock is None
        assert view.low_stock is None

    def test_unavailable_maps_to_communication_failure(self, service, gateway):
        gateway.get_product.side_effect = StoreUnavailable("down")

        with pytest.raises(CommunicationFailure):
            service.get_product(uuid4())


# ===========================================================================
# Queries
# ===========================================================================


class TestQueries:
    def test_list_fetches_lookups_once(self, service, gateway, tools, make_product, make_inventory):
        products = [make_product(category_id=tools.id), make_product(name="Saw", category_id=tools.id)]
        gateway.list_products.return_value = products
        gateway.list_categories.return_value = [tools]
        gateway.list_inventory.return_value = [make_inventory(product_id=products[0].id)]

        views = service.list_products()

        assert len(views) == 2
        assert all(v.category_name == "Tools" for v in views)
        assert views[1].stock is None
        gateway.list_categories.assert_called_once()
        gateway.list_inventory.assert_called_once()

    def test_empty_list_skips_lookups(self, service, gateway):
        gateway.list_products.return_value = []

        assert service.list_products() == []
        gateway.list_categories.assert_not_called()

    def test_search_by_name_delegates(self, service, gateway):
        gateway.products_by_name.return_value = []

        service.search_by_name("ham")

        gateway.products_by_name.assert_called_once_with("ham")

    def test_list_by_category_delegates(self, service, gateway):
        gateway.products_by_category.return_value = []

        service.list_by_category("Tools")

        gateway.products_by_category.assert_called_once_with("Tools")

    def test_price_range_rejected_before_any_call(self, service, gateway):
        with pytest.raises(BusinessValidationError):
            service.search_by_price_range(Decimal("50"), Decimal("10"))

        gateway.products_by_price_range.assert_not_called()

    def test_price_range_delegates(self, service, gateway):
        gateway.products_by_price_range.return_value = []

        service.search_by_price_range(Decimal("1"), Decimal("10"))

        gateway.products_by_price_range.assert_called_once_with(Decimal("1"), Decimal("10"))

    def test_low_stock_products(self, service, gateway, tools, make_product, make_inventory):
        hammer = make_product(category_id=tools.id)
        gateway.low_stock_inventory.return_value = [
            make_inventory(product_id=hammer.id, quantity=2),
            make_inventory(quantity=1),
        ]
        gateway.list_products.return_value = [hammer]
        gateway.list_categories.return_value = [tools]

        views = service.low_stock_products()

        assert [v.name for v in views] == ["Hammer"]
        assert views[0].low_stock is True


# ===========================================================================
# create_product
# ===========================================================================


class TestCreateProduct:
    def test_success(self, service, gateway, tools, make_product, make_inventory):
        hammer = make_product(category_id=tools.id)
        gateway.get_category.return_value = tools
        gateway.create_product.return_value = hammer
        gateway.create_inventory.return_value = make_inventory(
            product_id=hammer.id, quantity=5, minimum_quantity=10
        )

        view = service.create_product(_request(tools.id))

        assert view.name == "Hammer"
        assert view.category_name == "Tools"
        assert view.stock == 5
        assert view.low_stock is True
        gateway.create_product.assert_called_once_with(
            {
                "name": "Hammer",
                "description": "Claw hammer",
                "price": "9.99",
                "category_id": str(tools.id),
            }
        )
        gateway.create_inventory.assert_called_once_with(
            {"product_id": str(hammer.id), "quantity": 5, "minimum_quantity": 10}
        )

    def test_defaults_stock_and_threshold(self, service, gateway, tools, make_product, make_inventory, settings):
        settings.DEFAULT_MINIMUM_STOCK = 7
        hammer = make_product(category_id=tools.id)
        gateway.get_category.return_value = tools
        gateway.create_product.return_value = hammer
        gateway.create_inventory.return_value = make_inventory(product_id=hammer.id, quantity=0)

        service.create_product(_request(tools.id, stock=None, minimum_stock=None))

        payload = gateway.create_inventory.call_args.args[0]
        assert payload["quantity"] == 0
        assert payload["minimum_quantity"] == 7

    def test_invalid_request_makes_no_calls(self, service, gateway, tools):
        with pytest.raises(BusinessValidationError):
            service.create_product(_request(tools.id, price=Decimal("0")))

        gateway.get_category.assert_not_called()
        gateway.create_product.assert_not_called()

    def test_unknown_category(self, service, gateway):
        gateway.get_category.side_effect = StoreNotFound("missing")

        with pytest.raises(CategoryNotFound):
            service.create_product(_request(uuid4()))

        gateway.create_product.assert_not_called()

    def test_category_lookup_unavailable(self, service, gateway):
        gateway.get_category.side_effect = StoreUnavailable("down")

        with pytest.raises(CommunicationFailure):
            service.create_product(_request(uuid4()))

        gateway.create_product.assert_not_called()

    def test_inventory_failure_keeps_product(self, service, gateway, tools, make_product):
        gateway.get_category.return_value = tools
        gateway.create_product.return_value = make_product(category_id=tools.id)
        gateway.create_inventory.side_effect = StoreUnavailable("down")

        with pytest.raises(CommunicationFailure):
            service.create_product(_request(tools.id))

        gateway.create_product.assert_called_once()
        gateway.delete_product.assert_not_called()

    @pytest.mark.parametrize(
        "overrides",
        [
            {"price": Decimal("9.999")},
            {"price": Decimal("0.001")},
            {"name": "x" * 300},
        ],
    )
    def test_values_beyond_store_limits_make_no_calls(self, service, gateway, tools, overrides):
        with pytest.raises(BusinessValidationError):
            service.create_product(_request(tools.id, **overrides))

        gateway.get_category.assert_not_called()
        gateway.create_product.assert_not_called()

    def test_store_rejection_is_validation_error(self, service, gateway, tools):
        gateway.get_category.return_value = tools
        gateway.create_product.side_effect = StoreRejected(
            "price: Ensure that there are no more than 2 decimal places.",
            path="data/products/",
            status_code=400,
        )

        with pytest.raises(BusinessValidationError, match="2 decimal places"):
            service.create_product(_request(tools.id))

        gateway.create_inventory.assert_not_called()


# ===========================================================================
# update_product
# ===========================================================================


class TestUpdateProduct:
    def test_updates_existing_inventory(self, service, gateway, tools, make_product, make_inventory):
        existing = make_product(category_id=tools.id)
        current = make_inventory(product_id=existing.id, quantity=3, minimum_quantity=4)
        gateway.get_product.return_value = existing
        gateway.get_category.return_value = tools
        gateway.update_product.side_effect = lambda _id, product: product
        gateway.get_inventory_by_product.return_value = current
        gateway.update_inventory.side_effect = lambda _id, inventory: inventory

        view = service.update_product(
            existing.id, _request(tools.id, name="Sledgehammer", stock=40, minimum_stock=None)
        )

        assert view.id == existing.id
        assert view.name == "Sledgehammer"
        assert view.stock == 40
        updated = gateway.update_inventory.call_args.args[1]
        assert updated.id == current.id
        assert updated.minimum_quantity == 4

    def test_creates_inventory_when_absent(self, service, gateway, tools, make_product, make_inventory):
        existing = make_product(category_id=tools.id)
        gateway.get_product.return_value = existing
        gateway.get_category.return_value = tools
        gateway.update_product.return_value = existing
        gateway.get_inventory_by_product.side_effect = StoreNotFound("missing")
        gateway.create_inventory.return_value = make_inventory(product_id=existing.id, quantity=8)

        view = service.update_product(existing.id, _request(tools.id, stock=8))

        assert view.stock == 8
        gateway.create_inventory.assert_called_once()
        gateway.update_inventory.assert_not_called()

    def test_without_stock_leaves_inventory_alone(self, service, gateway, tools, make_product, make_inventory):
        existing = make_product(category_id=tools.id)
        gateway.get_product.return_value = existing
        gateway.get_category.return_value = tools
        gateway.update_product.return_value = existing
        gateway.get_inventory_by_product.return_value = make_inventory(product_id=existing.id, quantity=12)

        view = service.update_product(existing.id, _request(tools.id, stock=None))

        assert view.stock == 12
        gateway.update_inventory.assert_not_called()
        gateway.create_inventory.assert_not_called()

    def test_not_found(self, service, gateway, tools):
        gateway.get_product.side_effect = StoreNotFound("missing")

        with pytest.raises(ProductNotFound):
            service.update_product(uuid4(), _request(tools.id))

        gateway.update_product.assert_not_called()

    def test_unknown_category(self, service, gateway, make_product):
        gateway.get_product.return_value = make_product()
        gateway.get_category.side_effect = StoreNotFound("missing")

        with pytest.raises(CategoryNotFound):
            service.update_product(uuid4(), _request(uuid4()))

        gateway.update_product.assert_not_called()


# ===========================================================================
# delete_product
# ===========================================================================


class TestDeleteProduct:
    def test_success(self, service, gateway, make_product):
        hammer = make_product()
        gateway.get_product.return_value = hammer

        service.delete_product(hammer.id)

        gateway.delete_product.assert_called_once_with(hammer.id)

    def test_not_found(self, service, gateway):
        gateway.get_product.side_effect = StoreNotFound("missing")

        with pytest.raises(ProductNotFound):
            service.delete_product(uuid4())

        gateway.delete_product.assert_not_called()
