"""Data-tier URL configuration (mounted under ``data/``)."""

from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from modules.datastore.views import (
    CategoryDataViewSet,
    InventoryDataViewSet,
    ProductDataViewSet,
    data_health,
)

router = DefaultRouter(trailing_slash=True)
router.include_root_view = False
router.register("categories", CategoryDataViewSet, basename="data-category")
router.register("products", ProductDataViewSet, basename="data-product")
router.register("inventory", InventoryDataViewSet, basename="data-inventory")

urlpatterns = [
    path("health/", data_health, name="data_health"),
    *router.urls,
]
