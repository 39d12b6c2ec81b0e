"""Warehouse service layer (Use Cases).

Read access plus the one write the order engine tolerates from outside:
a stock overwrite.  The overwrite takes the same row lock as an order
commit, so a restock never interleaves with an in-flight allocation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog

from modules.warehouses.exceptions import WarehouseNotFound

if TYPE_CHECKING:
    from modules.warehouses.dtos import UpdateWarehouseStockDTO
    from modules.warehouses.models import Warehouse
    from modules.warehouses.repositories.interfaces import IWarehouseRepository

logger = structlog.get_logger(__name__)


class WarehouseService:
    """Application service for Warehouse use-cases."""

    def __init__(self, repository: IWarehouseRepository) -> None:
        self._repo = repository

    def list_warehouses(self, filters: Optional[Dict[str, Any]] = None) -> List[Warehouse]:
        return self._repo.list(filters)

    def get_warehouse(self, id: str) -> Warehouse:
        """Retrieve a single warehouse by ID.

        Raises:
            WarehouseNotFound: if the warehouse does not exist.
        """
        warehouse = self._repo.get_by_id(id)
        if not warehouse:
            raise WarehouseNotFound(f"Warehouse {id} not found.")
        return warehouse

    def update_stock(self, id: str, dto: UpdateWarehouseStockDTO) -> Warehouse:
        """Overwrite a warehouse's stock level.

        Raises:
            WarehouseNotFound: if the warehouse does not exist.
        """
        warehouse = self._repo.set_stock(id, dto.stock)
        if not warehouse:
            raise WarehouseNotFound(f"Warehouse {id} not found.")
        logger.info("warehouse.stock_updated", warehouse_id=str(id), stock=dto.stock)
        return warehouse
