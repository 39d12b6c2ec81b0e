"""Warehouse repositories package."""

from modules.warehouses.repositories.django_repository import (
    WarehouseDjangoRepository,
)
from modules.warehouses.repositories.interfaces import IWarehouseRepository

__all__ = ["IWarehouseRepository", "WarehouseDjangoRepository"]
