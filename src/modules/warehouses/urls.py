"""Warehouse URL configuration."""

from __future__ import annotations

from rest_framework.routers import DefaultRouter

from modules.warehouses.views import WarehouseViewSet

router = DefaultRouter(trailing_slash=True)
router.register("warehouses", WarehouseViewSet, basename="warehouse")

urlpatterns = router.urls
