from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from rest_framework.test import APIClient

from modules.catalog.entities import Category, Inventory, Product
from modules.catalog.gateway import StoreGateway


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


# ---------------------------------------------------------------------------
# Business-tier doubles
# ---------------------------------------------------------------------------


@pytest.fixture()
def gateway():
    """Store Gateway double; every remote call is recorded."""
    return MagicMock(spec=StoreGateway)


@pytest.fixture()
def make_category():
    def _make(**overrides) -> Category:
        defaults = {"id": uuid4(), "name": "Tools", "description": "Hand tools"}
        defaults.update(overrides)
        return Category(**defaults)

    return _make


@pytest.fixture()
def make_product():
    def _make(**overrides) -> Product:
        defaults = {
            "id": uuid4(),
            "name": "Hammer",
            "description": "Claw hammer",
            "price": Decimal("9.99"),
            "category_id": uuid4(),
        }
        defaults.update(overrides)
        return Product(**defaults)

    return _make


@pytest.fixture()
def make_inventory():
    def _make(**overrides) -> Inventory:
        defaults = {
            "id": uuid4(),
            "product_id": uuid4(),
            "quantity": 20,
            "minimum_quantity": 10,
        }
        defaults.update(overrides)
        return Inventory(**defaults)

    return _make
