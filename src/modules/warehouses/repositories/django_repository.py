"""Django ORM implementation of the Warehouse repository.

Satisfies ``IWarehouseRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: look-ups return ``None``
for missing or malformed ids and the Service Layer decides how to
translate that into a domain error.

Stock writes never go through ``Model.save()``: the decrement is a single
conditional ``UPDATE ... SET stock = stock - n WHERE stock >= n`` so the
database, not the Python process, arbitrates the last units.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from modules.warehouses.domain import WarehouseSnapshot
from modules.warehouses.models import Warehouse
from modules.warehouses.repositories.interfaces import IWarehouseRepository

logger = structlog.get_logger(__name__)


class WarehouseDjangoRepository(IWarehouseRepository):
    """Concrete Warehouse repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Warehouse]:
        """Retrieve a warehouse by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Warehouse.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Warehouse]:
        """List warehouses (ordered by name) with optional ORM look-ups."""
        queryset = Warehouse.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Warehouse) -> Warehouse:
        """Persist (create or update) a warehouse."""
        entity.save()
        logger.info("warehouse.saved", warehouse_id=str(entity.id), name=entity.name)
        return entity

    # ------------------------------------------------------------------
    # Stock access for the order engine
    # ------------------------------------------------------------------

    def list_in_stock(self) -> List[WarehouseSnapshot]:
        queryset = Warehouse.objects.filter(stock__gt=0).order_by("id")
        return [WarehouseSnapshot.from_entity(w) for w in queryset]

    def lock_for_update(self, ids: Iterable[UUID]) -> List[WarehouseSnapshot]:
        # ORDER BY id fixes the lock acquisition order across transactions,
        # which rules out lock-order deadlocks between concurrent orders.
        queryset = (
            Warehouse.objects.select_for_update()
            .filter(id__in=list(ids))
            .order_by("id")
        )
        return [WarehouseSnapshot.from_entity(w) for w in queryset]

    def decrement_stock(self, id: UUID, quantity: int) -> bool:
        updated = Warehouse.objects.filter(id=id, stock__gte=quantity).update(
            stock=F("stock") - quantity,
            updated_at=timezone.now(),
        )
        return updated == 1

    @transaction.atomic
    def set_stock(self, id: str, stock: int) -> Optional[Warehouse]:
        try:
            warehouse = Warehouse.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None
        if not warehouse:
            return None

        previous = warehouse.stock
        warehouse.stock = stock
        warehouse.save(update_fields=["stock"])
        logger.info(
            "warehouse.stock_set",
            warehouse_id=str(id),
            old_stock=previous,
            new_stock=stock,
        )
        return warehouse
