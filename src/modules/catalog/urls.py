"""Catalog URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.catalog.views import CatalogViewSet, InventoryViewSet

router = DefaultRouter(trailing_slash=True)
router.register("catalog", CatalogViewSet, basename="catalog")
router.register("inventory", InventoryViewSet, basename="inventory")

urlpatterns = router.urls
