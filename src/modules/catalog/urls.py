"""Catalog URL configuration (mounted under ``api/v1/``)."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.catalog.views import (
    CategoryViewSet,
    InventoryViewSet,
    ProductViewSet,
    ReportViewSet,
)

router = DefaultRouter(trailing_slash=True)
router.include_root_view = False
router.register("products", ProductViewSet, basename="product")
router.register("categories", CategoryViewSet, basename="category")
router.register("inventory", InventoryViewSet, basename="inventory")
router.register("reports", ReportViewSet, basename="report")

urlpatterns = router.urls
